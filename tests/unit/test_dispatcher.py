"""
Notification Dispatcher Tests

Validates:
- one result per recipient, in registry order
- not registered -> no send attempted
- check errors fail closed as send_failed
- send errors never stop the loop
- sequential: each recipient is checked and sent before the next
"""

from unittest.mock import AsyncMock

import pytest

from notifications.dispatcher import dispatch
from transport.whatsapp import SendReceipt, StubSessionHandle

A, B, C = "111@c.us", "222@c.us", "333@c.us"


class TestDispatch:

    @pytest.mark.asyncio
    async def test_all_sent(self):
        session = StubSessionHandle()
        report = await dispatch(session, (A, B), "hello", ticket_id="T-1")

        assert [r.recipient for r in report.results] == [A, B]
        assert all(r.outcome == "sent" for r in report.results)
        assert report.all_succeeded
        assert session.sent == [(A, "hello"), (B, "hello")]

    @pytest.mark.asyncio
    async def test_empty_registry_is_trivial_success(self):
        session = StubSessionHandle()
        report = await dispatch(session, (), "anything")

        assert report.results == []
        assert report.all_succeeded is True
        assert report.failed_recipients == []
        assert session.checked == []

    @pytest.mark.asyncio
    async def test_not_registered_skips_send(self):
        session = StubSessionHandle(unregistered={B})
        report = await dispatch(session, (A, B, C), "hello")

        assert [r.outcome for r in report.results] == ["sent", "not_registered", "sent"]
        assert report.failed_recipients == [B]
        assert [recipient for recipient, _ in session.sent] == [A, C]

    @pytest.mark.asyncio
    async def test_check_error_fails_closed(self):
        session = StubSessionHandle(failing_checks={A})
        report = await dispatch(session, (A, B), "hello")

        assert report.results[0].outcome == "send_failed"
        assert report.results[0].error
        assert report.results[1].outcome == "sent"
        assert [recipient for recipient, _ in session.sent] == [B]

    @pytest.mark.asyncio
    async def test_send_error_continues(self):
        session = StubSessionHandle(failing_sends={A})
        report = await dispatch(session, (A, B), "hello")

        assert [r.outcome for r in report.results] == ["send_failed", "sent"]
        assert report.failed_recipients == [A]

    @pytest.mark.asyncio
    async def test_unexpected_send_exception_is_recorded(self):
        session = StubSessionHandle()
        session.send = AsyncMock(side_effect=RuntimeError("boom"))  # type: ignore

        report = await dispatch(session, (A,), "hello")

        assert report.results[0].outcome == "send_failed"
        assert "boom" in report.results[0].error

    @pytest.mark.asyncio
    async def test_duplicate_recipients_are_sent_twice(self):
        session = StubSessionHandle()
        report = await dispatch(session, (A, A), "hello")

        assert len(report.results) == 2
        assert session.sent == [(A, "hello"), (A, "hello")]

    @pytest.mark.asyncio
    async def test_one_result_per_recipient(self):
        recipients = tuple(f"62{i}@c.us" for i in range(7))
        session = StubSessionHandle(unregistered={recipients[2]}, failing_sends={recipients[5]})

        report = await dispatch(session, recipients, "hello")

        assert [r.recipient for r in report.results] == list(recipients)
        assert report.failed_recipients == [recipients[2], recipients[5]]

    @pytest.mark.asyncio
    async def test_sequential_check_then_send(self):
        """Each recipient is fully handled before the next one is checked."""
        calls = []
        session = StubSessionHandle()

        async def check(recipient):
            calls.append(("check", recipient))
            return True

        async def send(recipient, text):
            calls.append(("send", recipient))
            return SendReceipt(recipient=recipient)

        session.check_deliverable = check  # type: ignore
        session.send = send  # type: ignore

        await dispatch(session, (A, B), "hello")

        assert calls == [("check", A), ("send", A), ("check", B), ("send", B)]

    @pytest.mark.asyncio
    async def test_message_id_is_recorded(self):
        session = StubSessionHandle()
        report = await dispatch(session, (A,), "hello")

        assert report.results[0].message_id == "stub_1"
