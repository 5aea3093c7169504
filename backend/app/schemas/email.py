"""Email Schemas: Pydantic models for send requests, results and outbound messages.

Invariants:
    - EmailJob.email is the raw recipient field; it is validated by the
      recipient guard, not by the schema
    - OutboundEmail.recipients is non-empty and already validated
    - EmailResult.message_id is only set on successful sends

Design Decisions:
    - Recipient stays a core dataclass; OutboundEmail embeds it as an arbitrary type
"""

from pydantic import BaseModel, ConfigDict, Field, model_validator

from app.core.validate_recipients import Recipient


class EmailAttachment(BaseModel):
    filename: str = Field(min_length=1, max_length=255)
    content: bytes
    content_type: str = "application/octet-stream"


class EmailJob(BaseModel):
    """A single send request."""
    id: str
    email: str
    subject: str = Field(max_length=998)
    html_body: str
    text_body: str | None = None
    user_id: str | None = None
    attachments: list[EmailAttachment] = Field(default_factory=list)


class EmailResult(BaseModel):
    id: str
    success: bool
    message_id: str | None = None
    error: str | None = None

    @model_validator(mode="after")
    def check_message_id(self):
        if self.message_id is not None and not self.success:
            raise ValueError("failed results cannot carry a message_id")
        return self


class OutboundEmail(BaseModel):
    """Message handed to the mail transport."""
    model_config = ConfigDict(arbitrary_types_allowed=True, frozen=True)

    from_email: str
    from_name: str
    recipients: tuple[Recipient, ...] = Field(min_length=1)
    subject: str
    html_body: str
    text_body: str | None = None
    attachments: tuple[EmailAttachment, ...] = ()
