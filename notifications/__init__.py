"""Ticket Notification Layer - Module Exports"""

from .dispatcher import dispatch
from .formatter import format_ticket_message
from .recipients import normalize_recipient, parse_recipients
from .schemas import (
    REQUIRED_FIELDS,
    Attachment,
    DispatchOutcome,
    DispatchReport,
    DispatchResult,
    IncompletePayloadError,
    NotificationResponse,
    TicketNotification,
)

__all__ = [
    # Schemas
    "TicketNotification",
    "Attachment",
    "REQUIRED_FIELDS",
    "IncompletePayloadError",
    "DispatchOutcome",
    "DispatchResult",
    "DispatchReport",
    "NotificationResponse",
    # Registry
    "parse_recipients",
    "normalize_recipient",
    # Formatting
    "format_ticket_message",
    # Dispatch
    "dispatch",
]
