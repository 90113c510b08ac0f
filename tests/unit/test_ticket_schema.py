"""
Ticket Payload Schema Tests

Required: ticketId, subject, name, email, description, adminDashboardLink.
Optional: type, priority, createdAt, uploadedFiles.
"""

import pytest
from pydantic import ValidationError

from notifications.schemas import (
    REQUIRED_FIELDS,
    DispatchReport,
    DispatchResult,
    IncompletePayloadError,
    TicketNotification,
)


class TestTicketNotification:

    def test_wire_names_map_to_attributes(self, ticket_payload):
        ticket = TicketNotification.from_payload(ticket_payload)

        assert ticket.ticket_id == "T-1001"
        assert ticket.sender_name == "Jane Doe"
        assert ticket.sender_email == "jane@example.com"
        assert ticket.created_at == "2024-01-01T10:00:00Z"
        assert ticket.dashboard_link == "https://admin.example.com/tickets/T-1001"
        assert ticket.attachments[0].name == "screenshot.png"
        assert ticket.attachments[0].url == "https://files.example.com/a.png"

    @pytest.mark.parametrize("field", REQUIRED_FIELDS)
    def test_missing_required_field(self, ticket_payload, field):
        ticket_payload.pop(field)
        with pytest.raises(IncompletePayloadError) as exc_info:
            TicketNotification.from_payload(ticket_payload)
        assert exc_info.value.missing == [field]

    @pytest.mark.parametrize("field", REQUIRED_FIELDS)
    def test_empty_required_field(self, ticket_payload, field):
        ticket_payload[field] = ""
        with pytest.raises(IncompletePayloadError):
            TicketNotification.from_payload(ticket_payload)

    def test_optional_fields_may_be_absent(self, ticket_payload):
        for key in ("type", "priority", "createdAt", "uploadedFiles"):
            ticket_payload.pop(key)
        ticket = TicketNotification.from_payload(ticket_payload)

        assert ticket.type is None
        assert ticket.priority is None
        assert ticket.created_at is None
        assert ticket.attachments == []

    def test_non_object_payload(self):
        with pytest.raises(IncompletePayloadError):
            TicketNotification.from_payload(["not", "a", "ticket"])

    def test_numeric_required_fields_are_accepted(self, ticket_payload):
        ticket_payload.update(subject=404, name=12345)

        ticket = TicketNotification.from_payload(ticket_payload)

        assert ticket.subject == 404
        assert ticket.sender_name == 12345

    def test_unusable_attachment_shape_is_rejected(self, ticket_payload):
        ticket_payload["uploadedFiles"] = "screenshot.png"
        with pytest.raises(ValidationError):
            TicketNotification.from_payload(ticket_payload)

    def test_immutable(self, ticket_payload):
        ticket = TicketNotification.from_payload(ticket_payload)
        with pytest.raises(ValidationError):
            ticket.subject = "Modified"  # type: ignore


class TestDispatchReport:

    def test_empty_report_succeeds(self):
        report = DispatchReport()
        assert report.all_succeeded is True
        assert report.failed_recipients == []

    def test_failed_recipients_in_order(self):
        report = DispatchReport()
        report.add(DispatchResult(recipient="c@c.us", outcome="send_failed"))
        report.add(DispatchResult(recipient="a@c.us", outcome="sent"))
        report.add(DispatchResult(recipient="b@c.us", outcome="not_registered"))

        assert report.all_succeeded is False
        assert report.failed_recipients == ["c@c.us", "b@c.us"]
