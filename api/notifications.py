"""
Ticket Notification Endpoint

Receives ticket-created events from the ticket backend and relays them to
the admin WhatsApp numbers.

Flow:
1. Readiness gate (503 if the session is not ready) - checked before anything else
2. Payload gate (400 if a required field is missing)
3. Format message
4. Dispatch to every admin, sequentially
5. Map the report to 200 (all sent) or 500 (some failed)
"""

import json
import logging
from typing import Any, Optional, Tuple

from fastapi import APIRouter, Depends, Request, status
from fastapi.responses import JSONResponse
from pydantic import ValidationError

from api.deps import get_lifecycle, get_recipients
from notifications.dispatcher import dispatch
from notifications.formatter import format_ticket_message
from notifications.schemas import (
    IncompletePayloadError,
    NotificationResponse,
    TicketNotification,
)
from transport.whatsapp import SessionLifecycle

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Notifications"])

NOT_READY_MESSAGE = "WhatsApp client is not ready. Please try again later."
INCOMPLETE_MESSAGE = "Incomplete ticket data for WhatsApp notification."
SUCCESS_MESSAGE = "WhatsApp notification successfully sent to all admins."
FAILURE_MESSAGE = "Failed to send WhatsApp notification to some admins. Failed numbers: {numbers}"


def _respond(status_code: int, body: NotificationResponse) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=body.model_dump(by_alias=True, exclude_none=True),
    )


async def _read_ticket(request: Request) -> Optional[TicketNotification]:
    """Decode and validate the body; None when it is unusable."""
    try:
        raw: Any = json.loads(await request.body())
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        logger.error(f"Invalid JSON in WhatsApp notification request: {e}")
        return None

    try:
        return TicketNotification.from_payload(raw)
    except IncompletePayloadError as e:
        logger.error(
            f"Incomplete ticket data for WhatsApp notification: {raw}",
            extra={"missing_fields": e.missing},
        )
    except ValidationError as e:
        logger.error(
            f"Invalid ticket data for WhatsApp notification: {raw}",
            extra={"errors": e.errors()},
        )
    return None


@router.post("/send-whatsapp-notification")
async def send_whatsapp_notification(
    request: Request,
    lifecycle: SessionLifecycle = Depends(get_lifecycle),
    recipients: Tuple[str, ...] = Depends(get_recipients),
) -> JSONResponse:
    """
    Relay a new support ticket to every admin WhatsApp number.

    Expected payload:
    {
        "ticketId": "T-1001",
        "subject": "Login issue",
        "name": "Jane Doe",
        "email": "jane@example.com",
        "type": "Bug",
        "priority": "High",
        "description": "Cannot log in",
        "createdAt": "2024-01-01T10:00:00Z",
        "uploadedFiles": [{"name": "screenshot.png", "url": "https://..."}],
        "adminDashboardLink": "https://admin.example.com/tickets/T-1001"
    }

    Returns:
        200 {"success": true, "message": ...} when every admin got the message
        400 when the payload is incomplete
        503 when the WhatsApp session is not ready
        500 {"success": false, "message": ..., "failedRecipients": [...]} otherwise
    """
    # Step 1: Readiness gate
    if not lifecycle.is_ready():
        logger.warning("WhatsApp sending attempt failed: Client not ready.")
        return _respond(
            status.HTTP_503_SERVICE_UNAVAILABLE,
            NotificationResponse(success=False, message=NOT_READY_MESSAGE),
        )

    # Step 2: Payload gate
    ticket = await _read_ticket(request)
    if ticket is None:
        return _respond(
            status.HTTP_400_BAD_REQUEST,
            NotificationResponse(success=False, message=INCOMPLETE_MESSAGE),
        )

    # Step 3-4: Format and dispatch
    message = format_ticket_message(ticket)
    report = await dispatch(
        lifecycle.session,
        recipients,
        message,
        ticket_id=ticket.ticket_id,
    )

    # Step 5: Map outcome
    if report.all_succeeded:
        return _respond(
            status.HTTP_200_OK,
            NotificationResponse(success=True, message=SUCCESS_MESSAGE),
        )

    failed = report.failed_recipients
    return _respond(
        status.HTTP_500_INTERNAL_SERVER_ERROR,
        NotificationResponse(
            success=False,
            message=FAILURE_MESSAGE.format(numbers=", ".join(failed)),
            failed_recipients=failed,
        ),
    )
