"""
Infrastructure configuration system.

Environment-based session backend selection with sensible defaults.
"""

from dataclasses import dataclass
from typing import Literal, Optional, Tuple

from config import Config, ConfigurationError
from notifications.recipients import parse_recipients
from transport.whatsapp import SessionHandle, StubSessionHandle, WahaSessionHandle


WhatsAppBackendType = Literal["stub", "waha"]


@dataclass
class RelayConfig:
    """Relay configuration from environment."""

    # Recipients
    recipients: Tuple[str, ...]
    sender_number: str

    # Session backend
    whatsapp_backend: WhatsAppBackendType
    waha_base_url: str
    waha_session: str
    waha_api_key: Optional[str]
    waha_timeout: float
    waha_webhook_hmac_key: Optional[str]
    session_poll_interval: float

    @classmethod
    def from_env(cls) -> "RelayConfig":
        """
        Load configuration from environment variables (via Config).

        Defaults target a WAHA gateway on localhost:3000.
        """
        return cls(
            recipients=parse_recipients(Config.ADMIN_WHATSAPP_NUMBERS),
            sender_number=Config.SENDER_WHATSAPP_NUMBER,
            whatsapp_backend=Config.WHATSAPP_BACKEND.strip().lower(),  # type: ignore
            waha_base_url=Config.WAHA_BASE_URL,
            waha_session=Config.WAHA_SESSION,
            waha_api_key=Config.WAHA_API_KEY or None,
            waha_timeout=Config.WAHA_TIMEOUT,
            waha_webhook_hmac_key=Config.WAHA_WEBHOOK_HMAC_KEY or None,
            session_poll_interval=Config.SESSION_POLL_INTERVAL,
        )

    def create_session_handle(self) -> SessionHandle:
        """Create the session handle instance based on configuration."""
        if self.whatsapp_backend == "stub":
            return StubSessionHandle(identity=f"{self.sender_number}@c.us")
        if self.whatsapp_backend == "waha":
            return WahaSessionHandle(
                base_url=self.waha_base_url,
                session=self.waha_session,
                api_key=self.waha_api_key,
                timeout=self.waha_timeout,
            )
        raise ConfigurationError(
            f"Unknown WHATSAPP_BACKEND '{self.whatsapp_backend}' (expected one of: stub, waha)"
        )


def get_config() -> RelayConfig:
    """Get global relay configuration."""
    return RelayConfig.from_env()
