"""
Ticket Notification Schemas

PURE DATA MODELS - NO TRANSPORT CALLS
Defines the inbound ticket contract and the per-recipient dispatch outcome.
"""

from dataclasses import dataclass, field
from typing import Any, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator


# ============================================================================
# INBOUND PAYLOAD (THE CONTRACT WITH THE TICKET BACKEND)
# ============================================================================

# Wire keys that must be present and non-empty
REQUIRED_FIELDS = (
    "ticketId",
    "subject",
    "name",
    "email",
    "description",
    "adminDashboardLink",
)


class IncompletePayloadError(ValueError):
    """Ticket payload is missing required fields."""

    def __init__(self, missing: List[str]):
        self.missing = missing
        super().__init__(f"Missing required ticket fields: {', '.join(missing)}")


class Attachment(BaseModel):
    """An uploaded file linked from the ticket."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    name: Optional[str] = None
    url: Optional[str] = None


class TicketNotification(BaseModel):
    """
    A newly created support ticket, as posted by the ticket backend.

    Wire names (camelCase, `name`/`email`/`uploadedFiles`) are accepted as
    aliases; attributes use the relay's own names. Required fields take any
    non-empty value, numbers included, and are rendered as-is.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")

    ticket_id: Any = Field(..., alias="ticketId")
    subject: Any = Field(...)
    sender_name: Any = Field(..., alias="name")
    sender_email: Any = Field(..., alias="email")
    type: Optional[Any] = None
    priority: Optional[Any] = None
    description: Any = Field(...)
    created_at: Optional[Any] = Field(None, alias="createdAt")
    attachments: List[Attachment] = Field(default_factory=list, alias="uploadedFiles")
    dashboard_link: Any = Field(..., alias="adminDashboardLink")

    @model_validator(mode="before")
    @classmethod
    def _null_attachments(cls, data: Any) -> Any:
        if isinstance(data, dict) and "uploadedFiles" in data and data["uploadedFiles"] is None:
            data = {**data, "uploadedFiles": []}
        return data

    @classmethod
    def from_payload(cls, data: Any) -> "TicketNotification":
        """
        Build a notification from a decoded request body.

        Raises:
            IncompletePayloadError: A required field is absent or empty
            pydantic.ValidationError: A field has an unusable type
        """
        if not isinstance(data, dict):
            raise IncompletePayloadError(list(REQUIRED_FIELDS))
        missing = [key for key in REQUIRED_FIELDS if not data.get(key)]
        if missing:
            raise IncompletePayloadError(missing)
        return cls.model_validate(data)


# ============================================================================
# DISPATCH OUTCOME
# ============================================================================

DispatchOutcome = Literal["sent", "not_registered", "send_failed"]


@dataclass(frozen=True)
class DispatchResult:
    """Outcome of one delivery attempt to one recipient."""

    recipient: str
    outcome: DispatchOutcome
    message_id: Optional[str] = None
    error: Optional[str] = None  # observability only, never returned to callers

    @property
    def succeeded(self) -> bool:
        return self.outcome == "sent"


@dataclass
class DispatchReport:
    """Aggregate of all results for one notification, in registry order."""

    results: List[DispatchResult] = field(default_factory=list)

    @property
    def all_succeeded(self) -> bool:
        return all(result.succeeded for result in self.results)

    @property
    def failed_recipients(self) -> List[str]:
        return [result.recipient for result in self.results if not result.succeeded]

    def add(self, result: DispatchResult) -> None:
        self.results.append(result)


# ============================================================================
# HTTP RESPONSE (OUTPUT)
# ============================================================================

class NotificationResponse(BaseModel):
    """Body returned by the notification endpoint."""

    model_config = ConfigDict(populate_by_name=True)

    success: bool
    message: str
    failed_recipients: Optional[List[str]] = Field(None, alias="failedRecipients")
