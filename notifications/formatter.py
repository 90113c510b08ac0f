"""
Ticket Message Formatter

PURE FUNCTION - NO I/O
Renders a TicketNotification into the WhatsApp text sent to admins.
User-supplied fields are inserted as-is (no escaping of *_~ markup).
"""

from typing import List

from .schemas import TicketNotification

HEADER = "*NEW SUPPORT TICKET RECEIVED*"
CLOSING_LINE = "Please follow up on this ticket immediately."


def format_ticket_message(ticket: TicketNotification) -> str:
    """
    Build the admin notification text.

    Optional fields (type, priority, created_at) are rendered as-is, so an
    absent value shows up as "None" rather than raising.
    """
    lines: List[str] = [
        HEADER,
        "",
        f"*Ticket ID:* {ticket.ticket_id}",
        f"*Subject:* {ticket.subject}",
        f"*Sender:* {ticket.sender_name} ({ticket.sender_email})",
        f"*Ticket Type:* {ticket.type}",
        f"*Priority:* {ticket.priority}",
        f"*Created At:* {ticket.created_at}",
        "",
        "*Description:*",
        str(ticket.description),
        "",
    ]

    if ticket.attachments:
        lines.append("*Attached Files:*")
        for attachment in ticket.attachments:
            lines.append(f"- {attachment.name}: {attachment.url}")
        lines.append("")

    lines.extend([
        f"View ticket details in Admin Dashboard: {ticket.dashboard_link}",
        "",
        CLOSING_LINE,
    ])
    return "\n".join(lines)
