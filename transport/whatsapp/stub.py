"""
Stub WhatsApp session for testing and offline development.

Deterministic, in-memory, and never touches the network.
"""

from typing import Iterable, List, Optional, Tuple

from .base import (
    SendReceipt,
    SessionHandle,
    SessionIdentity,
    SessionStatus,
    WhatsAppTransportError,
)


class StubSessionHandle(SessionHandle):
    """
    Deterministic fake session for testing and CI.

    Every recipient is registered and every send succeeds unless listed in
    one of the failure sets. Sends are recorded in `sent`.
    """

    def __init__(
        self,
        identity: str = "6281100000000@c.us",
        ready: bool = True,
        unregistered: Iterable[str] = (),
        failing_sends: Iterable[str] = (),
        failing_checks: Iterable[str] = (),
    ):
        super().__init__()
        self._identity = SessionIdentity(id=identity, push_name="stub")
        self.auto_ready = ready
        self.unregistered = set(unregistered)
        self.failing_sends = set(failing_sends)
        self.failing_checks = set(failing_checks)

        self.sent: List[Tuple[str, str]] = []
        self.checked: List[str] = []
        self.initialize_calls = 0
        self.pairing_token: Optional[str] = None

        if ready:
            self.status = "WORKING"
            self.identity = self._identity

    async def initialize(self) -> None:
        """Start the fake session; becomes ready immediately when auto_ready."""
        self.initialize_calls += 1
        self.status = "STARTING"
        if self.auto_ready:
            await self.simulate_ready()

    async def refresh(self) -> SessionStatus:
        return self.status

    async def fetch_pairing_token(self) -> Optional[str]:
        return self.pairing_token

    async def check_deliverable(self, recipient: str) -> bool:
        self.checked.append(recipient)
        if recipient in self.failing_checks:
            raise WhatsAppTransportError(f"check failed for {recipient}")
        return recipient not in self.unregistered

    async def send(self, recipient: str, text: str) -> SendReceipt:
        if recipient in self.failing_sends:
            raise WhatsAppTransportError(f"send failed for {recipient}")
        self.sent.append((recipient, text))
        return SendReceipt(recipient=recipient, message_id=f"stub_{len(self.sent)}")

    # ------------------------------------------------------------------
    # Test helpers
    # ------------------------------------------------------------------

    async def simulate_ready(self, identity: Optional[str] = None) -> None:
        if identity:
            self._identity = SessionIdentity(id=identity, push_name="stub")
        self.status = "WORKING"
        self.identity = self._identity
        await self._emit_ready(self._identity)

    async def simulate_disconnect(self, reason: str = "STOPPED") -> None:
        self.status = "STOPPED"
        await self._emit_disconnected(reason)

    async def simulate_auth_challenge(self, token: str = "2@stub-qr-token") -> None:
        self.pairing_token = token
        await self.apply_status("SCAN_QR_CODE")
