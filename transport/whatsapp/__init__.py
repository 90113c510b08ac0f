"""WhatsApp Transport Layer - Module Exports"""

from .base import (
    SendReceipt,
    SessionHandle,
    SessionIdentity,
    SessionStatus,
    WhatsAppTransportError,
)
from .lifecycle import SessionLifecycle
from .schemas import WahaEvent, WahaMe
from .security import verify_signature
from .stub import StubSessionHandle
from .waha import GatewayUnavailableError, WahaSessionHandle

__all__ = [
    # Session interface
    "SessionHandle",
    "SessionIdentity",
    "SessionStatus",
    "SendReceipt",
    "WhatsAppTransportError",
    # Backends
    "StubSessionHandle",
    "WahaSessionHandle",
    "GatewayUnavailableError",
    # Lifecycle
    "SessionLifecycle",
    # Gateway events
    "WahaEvent",
    "WahaMe",
    "verify_signature",
]
