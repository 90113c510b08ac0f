"""
WhatsApp Session Lifecycle

Wraps the session handle's lifecycle signals:
- disconnected   -> re-initialize the session (no backoff, no limit)
- auth challenge -> expose a one-time pairing token for out-of-band display
- ready          -> clear the token, report the paired identity

Readiness is polled per request; nothing subscribes to changes.
"""

import asyncio
import logging
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from .base import SessionHandle, SessionIdentity, WhatsAppTransportError

logger = logging.getLogger(__name__)


class SessionLifecycle:
    """Owns the reconnect policy and pairing state for one session handle."""

    def __init__(
        self,
        session: SessionHandle,
        sender_number: Optional[str] = None,
        poll_interval: float = 0.0,
    ):
        self.session = session
        self.sender_number = sender_number
        self.poll_interval = poll_interval

        self.reconnect_attempts = 0
        self.last_disconnect_reason: Optional[str] = None
        self.last_disconnect_at: Optional[datetime] = None
        self.pairing_token: Optional[str] = None

        self._reconnecting = False
        self._watch_task: Optional[asyncio.Task] = None

        session.on_disconnected(self._handle_disconnected)
        session.on_auth_challenge(self._handle_auth_challenge)
        session.on_ready(self._handle_ready)

    # ------------------------------------------------------------------
    # Readiness
    # ------------------------------------------------------------------

    def is_ready(self) -> bool:
        return self.session.is_ready()

    def snapshot(self) -> Dict[str, Any]:
        """Non-sensitive view of the session state (token excluded)."""
        identity = self.session.identity
        return {
            "ready": self.is_ready(),
            "status": self.session.status,
            "identity": identity.user if identity else None,
            "reconnect_attempts": self.reconnect_attempts,
            "last_disconnect_reason": self.last_disconnect_reason,
            "pairing_pending": self.pairing_token is not None,
        }

    # ------------------------------------------------------------------
    # Startup / shutdown
    # ------------------------------------------------------------------

    async def start(self) -> None:
        """Initialize the session and start the status poller if enabled."""
        try:
            await self.session.initialize()
        except WhatsAppTransportError as e:
            # Poller (or a gateway event) retries via the disconnected signal
            logger.error(f"WhatsApp session initialization failed: {e}")

        if self.poll_interval > 0 and self._watch_task is None:
            self._watch_task = asyncio.create_task(self.watch())

    async def stop(self) -> None:
        if self._watch_task is not None:
            self._watch_task.cancel()
            try:
                await self._watch_task
            except asyncio.CancelledError:
                pass
            self._watch_task = None
        await self.session.close()

    async def watch(self) -> None:
        """Poll the session status forever."""
        while True:
            await asyncio.sleep(self.poll_interval)
            try:
                await self.session.refresh()
            except WhatsAppTransportError as e:
                logger.warning(f"WhatsApp session status poll failed: {e}")
            except Exception as e:
                logger.error(f"Unexpected error polling WhatsApp session: {e}", exc_info=True)

    # ------------------------------------------------------------------
    # Signal handlers
    # ------------------------------------------------------------------

    async def _handle_disconnected(self, reason: str) -> None:
        self.last_disconnect_reason = reason
        self.last_disconnect_at = datetime.now(timezone.utc)
        logger.warning(f"WhatsApp client disconnected: {reason}")

        if self._reconnecting:
            logger.debug("Reconnect already in progress, ignoring disconnect signal")
            return

        self._reconnecting = True
        self.reconnect_attempts += 1
        logger.info(
            f"Attempting to reconnect WhatsApp client (attempt {self.reconnect_attempts})...",
            extra={"reconnect_attempts": self.reconnect_attempts, "reason": reason},
        )
        try:
            await self.session.initialize()
        except WhatsAppTransportError as e:
            logger.error(f"WhatsApp reconnect attempt {self.reconnect_attempts} failed: {e}")
        finally:
            self._reconnecting = False

    def _handle_auth_challenge(self, token: str) -> None:
        self.pairing_token = token
        logger.warning(f"QR RECEIVED {token}")
        logger.warning(
            "SCAN THIS QR CODE WITH WHATSAPP ON YOUR PHONE (superadmin number): "
            "Settings -> Linked Devices -> Link a Device"
        )

    def _handle_ready(self, identity: SessionIdentity) -> None:
        self.pairing_token = None
        logger.info("WhatsApp client is ready and connected!")
        logger.info(f"Sender number (superadmin): {identity.user}")

        if self.sender_number and _digits(self.sender_number) != _digits(identity.user):
            logger.warning(
                f"Paired account {identity.user} does not match "
                f"SENDER_WHATSAPP_NUMBER {self.sender_number}"
            )


def _digits(number: str) -> str:
    return "".join(ch for ch in number.split("@", 1)[0] if ch.isdigit())
