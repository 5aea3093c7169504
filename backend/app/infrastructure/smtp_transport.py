"""SMTP Transport: delivers OutboundEmail messages through aiosmtplib.

Invariants:
    - Recipients are passed to the SMTP envelope exactly as validated, in order
    - Every message gets a Message-ID before sending; send() returns it
    - aiosmtplib errors, socket errors and timeouts map to EmailDeliveryError
    - Messages that cannot be rendered (header line breaks, non-ASCII
      addresses) map to EmailDeliveryError("invalid_message") before any IO
    - No retries: the caller decides what a failed send means

Design Decisions:
    - Wrapper over the raw client isolates error mapping from EmailService
    - One connection per send via aiosmtplib.send()
"""

import asyncio
import logging
from email.message import EmailMessage
from email.utils import formataddr, make_msgid
from typing import Protocol

import aiosmtplib

from app.core.errors import EmailDeliveryError
from app.schemas.email import OutboundEmail

logger = logging.getLogger(__name__)


class EmailTransport(Protocol):
    async def send(self, message: OutboundEmail) -> str: ...


def build_mime_message(message: OutboundEmail, message_id: str) -> EmailMessage:
    """Render an OutboundEmail as a multipart MIME message."""
    mime = EmailMessage()
    mime["Message-ID"] = message_id
    mime["From"] = formataddr((message.from_name, message.from_email))
    mime["To"] = ", ".join(r.formatted() for r in message.recipients)
    mime["Subject"] = message.subject
    mime.set_content(message.text_body or "")
    mime.add_alternative(message.html_body, subtype="html")
    for attachment in message.attachments:
        maintype, _, subtype = attachment.content_type.partition("/")
        mime.add_attachment(
            attachment.content,
            maintype=maintype or "application",
            subtype=subtype or "octet-stream",
            filename=attachment.filename,
        )
    return mime


class SMTPTransport:
    """Sends mail over SMTP with timeout and error mapping."""

    def __init__(
        self,
        host: str,
        port: int = 587,
        user: str | None = None,
        password: str | None = None,
        secure: bool = False,
        timeout_seconds: int = 30,
    ):
        self.host = host
        self.port = port
        self.user = user
        self.password = password
        self.secure = secure
        self.timeout_seconds = timeout_seconds

    async def send(self, message: OutboundEmail) -> str:
        domain = message.from_email.rpartition("@")[2] or None
        message_id = make_msgid(domain=domain)
        try:
            mime = build_mime_message(message, message_id)
        except ValueError as e:
            # Header policy rejects CR/LF and unencodable addresses.
            logger.warning(
                "Email could not be rendered", extra={"error_code": "invalid_message"},
            )
            raise EmailDeliveryError(str(e), "invalid_message")
        try:
            await aiosmtplib.send(
                mime,
                sender=message.from_email,
                recipients=[r.address for r in message.recipients],
                hostname=self.host,
                port=self.port,
                username=self.user,
                password=self.password,
                use_tls=self.secure,
                timeout=self.timeout_seconds,
            )
        except aiosmtplib.SMTPTimeoutError as e:
            raise EmailDeliveryError(str(e), "timeout")
        except aiosmtplib.SMTPRecipientsRefused as e:
            raise EmailDeliveryError(str(e), "recipients_refused")
        except aiosmtplib.SMTPException as e:
            raise EmailDeliveryError(str(e), "smtp_error")
        except (OSError, asyncio.TimeoutError) as e:
            logger.warning(
                "SMTP connection failed", extra={"error_code": "smtp_connection"},
            )
            raise EmailDeliveryError(str(e), "connection_error")
        logger.info("Email sent", extra={"message_id": message_id})
        return message_id
