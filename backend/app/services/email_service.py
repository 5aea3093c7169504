"""Email Service: validates recipients and hands accepted messages to the transport.

Invariants:
    - A rejected recipient field never reaches the transport
    - Rejections are terminal: success=False, no retry
    - The raw recipient field is only logged at DEBUG
    - Transport failures (EmailDeliveryError) become success=False, never raise
    - send_bulk_emails returns one result per job, in job order

Design Decisions:
    - Transport injected (EmailTransport protocol): SMTP in production, fakes in tests
"""

import logging

from app.core.errors import EmailDeliveryError
from app.core.validate_recipients import validate_recipients
from app.infrastructure.observability import with_fields
from app.infrastructure.smtp_transport import EmailTransport
from app.schemas.email import EmailJob, EmailResult, OutboundEmail

logger = logging.getLogger(__name__)


class EmailService:
    def __init__(self, transport: EmailTransport, from_email: str, from_name: str):
        self._transport = transport
        self.from_email = from_email
        self.from_name = from_name

    async def send_email(self, job: EmailJob) -> EmailResult:
        """Validate the recipient field, then send through the transport."""
        log = with_fields(logger, email_id=job.id, user_id=job.user_id)

        verdict = validate_recipients(job.email)
        if not verdict.accepted:
            log.warning("Email recipient rejected", extra={"reason": verdict.reason})
            log.debug("Rejected recipient field", extra={"recipient": job.email})
            return EmailResult(id=job.id, success=False, error=verdict.reason)

        message = OutboundEmail(
            from_email=self.from_email,
            from_name=self.from_name,
            recipients=verdict.recipients,
            subject=job.subject,
            html_body=job.html_body,
            text_body=job.text_body,
            attachments=tuple(job.attachments),
        )
        try:
            message_id = await self._transport.send(message)
        except EmailDeliveryError as e:
            log.error(
                "Email delivery failed", extra={"error_code": e.code.value, "reason": e.reason},
            )
            return EmailResult(id=job.id, success=False, error=e.reason)

        return EmailResult(id=job.id, success=True, message_id=message_id)

    async def send_bulk_emails(self, jobs: list[EmailJob]) -> list[EmailResult]:
        results = []
        for job in jobs:
            results.append(await self.send_email(job))
        failed = sum(1 for r in results if not r.success)
        if failed:
            logger.warning(
                "Bulk email finished with failures",
                extra={"total": len(results), "failed": failed},
            )
        return results
