"""Email Service: tests for the recipient guard at the send boundary.

Tests cover:
    - CRLF injection -> success=False, transport never called
    - Display-name list -> transport gets both recipients, in order
    - EmailDeliveryError from transport -> success=False with message
    - Rejected raw recipient string never logged above DEBUG
    - send_bulk_emails keeps job order and survives individual failures
    - Unrenderable subject or non-ASCII recipient -> success=False, never raises
"""

import logging
from unittest.mock import AsyncMock

import aiosmtplib
import pytest

from app.core.errors import EmailDeliveryError
from app.core.validate_recipients import REASON_LINE_BREAK, REASON_NO_VALID_ADDRESS, Recipient
from app.infrastructure.smtp_transport import SMTPTransport
from app.schemas.email import EmailAttachment, EmailJob
from app.services.email_service import EmailService


def _job(email, job_id="job-1", **kwargs):
    return EmailJob(
        id=job_id, email=email, subject="Hello", html_body="<p>Hi</p>", **kwargs,
    )


@pytest.mark.asyncio
async def test_crlf_injection_is_rejected_without_transport(email_service, fake_transport):
    result = await email_service.send_email(
        _job("user@x.com\r\nBCC: evil@example.com"),
    )
    assert result.success is False
    assert result.error == REASON_LINE_BREAK
    assert result.message_id is None
    fake_transport.send.assert_not_called()


@pytest.mark.asyncio
async def test_display_name_list_reaches_transport_in_order(email_service, fake_transport):
    result = await email_service.send_email(_job('"User One" <a@x.com>, b@x.com'))

    assert result.success is True
    assert result.message_id == "<msg-1@x.com>"
    [message] = fake_transport.send.call_args.args
    assert message.recipients == (
        Recipient("User One", "a@x.com"), Recipient("", "b@x.com"),
    )
    assert message.from_email == "noreply@x.com"
    assert message.subject == "Hello"


@pytest.mark.asyncio
async def test_attachments_and_text_body_are_forwarded(email_service, fake_transport):
    attachment = EmailAttachment(filename="a.txt", content=b"abc", content_type="text/plain")
    await email_service.send_email(
        _job("a@x.com", text_body="Hi", attachments=[attachment]),
    )
    [message] = fake_transport.send.call_args.args
    assert message.text_body == "Hi"
    assert message.attachments == (attachment,)


@pytest.mark.asyncio
async def test_transport_failure_becomes_unsuccessful_result(email_service, fake_transport):
    fake_transport.send.side_effect = EmailDeliveryError("550 rejected", "smtp_error")

    result = await email_service.send_email(_job("a@x.com"))

    assert result.success is False
    assert result.error == "smtp_error"
    fake_transport.send.assert_awaited_once()


@pytest.mark.asyncio
async def test_rejected_recipient_not_logged_above_debug(email_service, caplog):
    raw = "user@x.com\r\nBCC: evil@example.com"
    with caplog.at_level(logging.DEBUG, logger="app.services.email_service"):
        await email_service.send_email(_job(raw))

    above_debug = [r for r in caplog.records if r.levelno > logging.DEBUG]
    assert above_debug
    for record in above_debug:
        assert "evil@example.com" not in record.getMessage()
        assert raw not in record.__dict__.values()
    assert above_debug[0].reason == REASON_LINE_BREAK
    assert above_debug[0].email_id == "job-1"


@pytest.mark.asyncio
async def test_bulk_send_keeps_order_and_continues(email_service, fake_transport):
    jobs = [
        _job("a@x.com", job_id="1"),
        _job("bad\nBcc: evil@example.com", job_id="2"),
        _job("c@x.com", job_id="3"),
    ]
    results = await email_service.send_bulk_emails(jobs)

    assert [r.id for r in results] == ["1", "2", "3"]
    assert [r.success for r in results] == [True, False, True]
    assert fake_transport.send.await_count == 2


@pytest.mark.asyncio
async def test_subject_with_line_break_becomes_unsuccessful_result(monkeypatch):
    send = AsyncMock(return_value=({}, "OK"))
    monkeypatch.setattr(aiosmtplib, "send", send)
    service = EmailService(SMTPTransport("smtp.x.com"), "noreply@x.com", "Notifications")

    result = await service.send_email(
        EmailJob(id="job-1", email="a@x.com", subject="Hi\nBcc: evil@example.com",
                 html_body="<p>Hi</p>"),
    )

    assert result.success is False
    assert result.error == "invalid_message"
    assert result.message_id is None
    send.assert_not_awaited()


@pytest.mark.asyncio
async def test_non_ascii_recipient_is_rejected_without_transport(email_service, fake_transport):
    result = await email_service.send_email(_job("用户@例子.广告"))

    assert result.success is False
    assert result.error == REASON_NO_VALID_ADDRESS
    fake_transport.send.assert_not_called()
