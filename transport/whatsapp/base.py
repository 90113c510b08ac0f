"""
WhatsApp session handle abstract interface.

Role: the single owned connection to the WhatsApp network.

Rules:
- Dispatcher and endpoint depend ONLY on this interface
- Session internals (browser, QR pairing, credential store) stay opaque
- Lifecycle signals are delivered through registered callbacks
- All transport failures are explicit and typed (WhatsAppTransportError)
"""

import inspect
import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Dict, List, Literal, Optional, Union

logger = logging.getLogger(__name__)


SessionStatus = Literal["STOPPED", "STARTING", "SCAN_QR_CODE", "WORKING", "FAILED"]
DISCONNECTED_STATUSES = ("STOPPED", "FAILED")

# Callbacks may be plain functions or coroutine functions
DisconnectedCallback = Callable[[str], Union[None, Awaitable[None]]]
AuthChallengeCallback = Callable[[str], Union[None, Awaitable[None]]]
ReadyCallback = Callable[["SessionIdentity"], Union[None, Awaitable[None]]]


class WhatsAppTransportError(Exception):
    """The session failed to perform a transport operation."""
    pass


@dataclass(frozen=True)
class SessionIdentity:
    """The paired WhatsApp account ("who am I")."""

    id: str  # e.g. 628123456789@c.us
    push_name: Optional[str] = None

    @property
    def user(self) -> str:
        """Phone number part of the identity."""
        return self.id.split("@", 1)[0]


@dataclass(frozen=True)
class SendReceipt:
    """Acknowledgement of a message accepted by the transport."""

    recipient: str
    message_id: Optional[str] = None


class SessionHandle(ABC):
    """
    Abstract WhatsApp session boundary.

    Concrete handles implement the transport calls; signal bookkeeping
    (callback registration and emission) lives here.
    """

    def __init__(self):
        self._disconnected_callbacks: List[DisconnectedCallback] = []
        self._auth_challenge_callbacks: List[AuthChallengeCallback] = []
        self._ready_callbacks: List[ReadyCallback] = []
        self.status: SessionStatus = "STOPPED"
        self.identity: Optional[SessionIdentity] = None
        self._last_qr: Optional[str] = None

    # ------------------------------------------------------------------
    # Readiness
    # ------------------------------------------------------------------

    def is_ready(self) -> bool:
        """True once the handshake completed and the identity is known."""
        return self.status == "WORKING" and self.identity is not None

    # ------------------------------------------------------------------
    # Transport operations
    # ------------------------------------------------------------------

    @abstractmethod
    async def initialize(self) -> None:
        """
        Start (or restart) the underlying session.

        Raises:
            WhatsAppTransportError: If the session could not be started
        """
        raise NotImplementedError

    @abstractmethod
    async def refresh(self) -> SessionStatus:
        """Re-read the session state and emit any resulting signals."""
        raise NotImplementedError

    @abstractmethod
    async def check_deliverable(self, recipient: str) -> bool:
        """
        Check whether a recipient identifier is registered on WhatsApp.

        Returns:
            False only when the transport explicitly reports "not registered"

        Raises:
            WhatsAppTransportError: If the check itself failed
        """
        raise NotImplementedError

    @abstractmethod
    async def send(self, recipient: str, text: str) -> SendReceipt:
        """
        Send a text message to a recipient identifier.

        Raises:
            WhatsAppTransportError: If the message was not accepted
        """
        raise NotImplementedError

    async def fetch_pairing_token(self) -> Optional[str]:
        """Return the current QR pairing token, if the backend exposes one."""
        return None

    async def close(self) -> None:
        """Release client resources (no-op by default)."""
        return None

    async def apply_status(
        self,
        status: str,
        me: Optional[Dict[str, Any]] = None,
    ) -> None:
        """
        Translate an observed session status into lifecycle signals.

        - WORKING (with identity): ready, emitted once per connection
        - SCAN_QR_CODE: auth challenge, emitted once per distinct token
        - STOPPED / FAILED: disconnected, emitted on every observation
        """
        was_ready = self.is_ready()
        self.status = status  # type: ignore[assignment]

        if status == "WORKING":
            if me and me.get("id"):
                self.identity = SessionIdentity(id=me["id"], push_name=me.get("pushName"))
            self._last_qr = None
            if self.is_ready() and not was_ready:
                await self._emit_ready(self.identity)

        elif status == "SCAN_QR_CODE":
            self.identity = None
            token = await self.fetch_pairing_token()
            if token and token != self._last_qr:
                self._last_qr = token
                await self._emit_auth_challenge(token)

        elif status in DISCONNECTED_STATUSES:
            await self._emit_disconnected(status)

        else:
            self.identity = None

    # ------------------------------------------------------------------
    # Signals
    # ------------------------------------------------------------------

    def on_disconnected(self, callback: DisconnectedCallback) -> None:
        self._disconnected_callbacks.append(callback)

    def on_auth_challenge(self, callback: AuthChallengeCallback) -> None:
        self._auth_challenge_callbacks.append(callback)

    def on_ready(self, callback: ReadyCallback) -> None:
        self._ready_callbacks.append(callback)

    async def _emit_disconnected(self, reason: str) -> None:
        self.identity = None
        for callback in list(self._disconnected_callbacks):
            await _invoke(callback, reason)

    async def _emit_auth_challenge(self, token: str) -> None:
        for callback in list(self._auth_challenge_callbacks):
            await _invoke(callback, token)

    async def _emit_ready(self, identity: SessionIdentity) -> None:
        for callback in list(self._ready_callbacks):
            await _invoke(callback, identity)


async def _invoke(callback: Callable, *args) -> None:
    """Call a sync or async callback; a failing callback never breaks the emitter."""
    try:
        result = callback(*args)
        if inspect.isawaitable(result):
            await result
    except Exception as e:
        logger.error(f"Session callback {callback!r} failed: {e}", exc_info=True)
