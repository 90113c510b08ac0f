"""
Infrastructure initialization and bootstrap.

Singleton pattern for creating the session handle, its lifecycle adapter
and the recipient registry from configuration.
"""

from typing import Optional, Tuple

from transport.whatsapp import SessionHandle, SessionLifecycle

from .config import RelayConfig, get_config


class RelayBootstrap:
    """
    Bootstrap relay infrastructure based on configuration.

    Singleton pattern - single instance per process.
    """

    _instance: Optional["RelayBootstrap"] = None

    def __init__(
        self,
        config: Optional[RelayConfig] = None,
        session: Optional[SessionHandle] = None,
    ):
        """Initialize bootstrap with configuration."""
        self.config = config or get_config()
        self.session = session or self.config.create_session_handle()
        self.lifecycle = SessionLifecycle(
            self.session,
            sender_number=self.config.sender_number,
            poll_interval=self.config.session_poll_interval,
        )
        self.recipients: Tuple[str, ...] = self.config.recipients

    @classmethod
    def get_instance(cls, config: Optional[RelayConfig] = None) -> "RelayBootstrap":
        """
        Get singleton instance.

        Args:
            config: Optional custom configuration (only used first time)

        Returns:
            Singleton RelayBootstrap instance
        """
        if cls._instance is None:
            cls._instance = cls(config)
        return cls._instance

    @classmethod
    def reset(cls):
        """Reset singleton (for testing)."""
        cls._instance = None

    def get_session(self) -> SessionHandle:
        return self.session

    def get_lifecycle(self) -> SessionLifecycle:
        return self.lifecycle

    def get_recipients(self) -> Tuple[str, ...]:
        return self.recipients

    def __repr__(self) -> str:
        """String representation showing configured backend."""
        return (
            f"RelayBootstrap(backend={self.config.whatsapp_backend}, "
            f"recipients={len(self.recipients)})"
        )


def bootstrap_relay(config: Optional[RelayConfig] = None) -> RelayBootstrap:
    """
    Bootstrap the session, lifecycle and recipient registry.

    Args:
        config: Optional custom configuration

    Returns:
        RelayBootstrap instance with all components initialized
    """
    return RelayBootstrap.get_instance(config)
