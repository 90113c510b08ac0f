"""
Notification Dispatcher

Sends one formatted message to every admin recipient, one at a time.

Rules:
- Registry order, sequential (each check and send is awaited before the next)
- No retries
- A failed recipient is recorded and the loop continues
- Deliverability check fails closed: a check error counts as send_failed
"""

import logging
from typing import Iterable, Optional, Union

from transport.whatsapp.base import SessionHandle, WhatsAppTransportError

from .schemas import DispatchReport, DispatchResult

logger = logging.getLogger(__name__)


async def dispatch(
    session: SessionHandle,
    recipients: Iterable[str],
    message: str,
    *,
    ticket_id: Optional[Union[str, int]] = None,
) -> DispatchReport:
    """
    Deliver `message` to each recipient and collect the outcomes.

    Args:
        session: Session handle used for the check and the send
        recipients: Recipient identifiers in registry order
        message: Rendered message text
        ticket_id: Only used to tag log lines

    Returns:
        DispatchReport with exactly one result per recipient
    """
    report = DispatchReport()

    for recipient in recipients:
        report.add(await _deliver(session, recipient, message, ticket_id))

    logger.info(
        f"Dispatch finished for ticket {ticket_id}: "
        f"{len(report.results) - len(report.failed_recipients)}/{len(report.results)} sent",
        extra={"ticket_id": ticket_id, "failed_recipients": report.failed_recipients},
    )
    return report


async def _deliver(
    session: SessionHandle,
    recipient: str,
    message: str,
    ticket_id: Optional[Union[str, int]],
) -> DispatchResult:
    try:
        deliverable = await session.check_deliverable(recipient)
    except Exception as e:
        logger.error(
            f"Deliverability check failed for {recipient} (ticket {ticket_id}): {e}",
            extra={"recipient": recipient, "ticket_id": ticket_id},
        )
        return DispatchResult(recipient=recipient, outcome="send_failed", error=str(e))

    if not deliverable:
        logger.warning(
            f"WhatsApp number {recipient} is not registered or invalid. Skipping sending.",
            extra={"recipient": recipient, "ticket_id": ticket_id},
        )
        return DispatchResult(recipient=recipient, outcome="not_registered")

    try:
        receipt = await session.send(recipient, message)
    except WhatsAppTransportError as e:
        logger.error(
            f"Failed to send WhatsApp notification to {recipient} for ticket {ticket_id}: {e}",
            extra={"recipient": recipient, "ticket_id": ticket_id},
        )
        return DispatchResult(recipient=recipient, outcome="send_failed", error=str(e))
    except Exception as e:
        logger.error(
            f"Unexpected error sending to {recipient} for ticket {ticket_id}: {e}",
            exc_info=True,
            extra={"recipient": recipient, "ticket_id": ticket_id},
        )
        return DispatchResult(recipient=recipient, outcome="send_failed", error=str(e))

    logger.info(
        f"WhatsApp notification successfully sent to {recipient} for ticket {ticket_id}",
        extra={"recipient": recipient, "ticket_id": ticket_id, "message_id": receipt.message_id},
    )
    return DispatchResult(recipient=recipient, outcome="sent", message_id=receipt.message_id)
