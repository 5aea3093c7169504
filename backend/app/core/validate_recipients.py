"""Recipient Validation: screens free-text recipient fields before mail transport.

Invariants:
    - Any CR or LF in the raw field rejects it before parsing (header injection)
    - Accepted verdicts carry at least one syntactically valid address
    - Recipients keep input order and are not rewritten
    - Pure function: no IO, no DNS lookups

Design Decisions:
    - email.utils.getaddresses parses RFC 5322 address lists
      ("Display Name" <addr>, addr)
    - email-validator checks each address with deliverability checks off
    - Addresses must be plain ASCII: headers are rendered without SMTPUTF8,
      so internationalized addresses are rejected here
"""

from dataclasses import dataclass
from email.utils import formataddr, getaddresses

from email_validator import EmailNotValidError, validate_email

REASON_LINE_BREAK = "recipient_contains_line_break"
REASON_NOT_A_STRING = "recipient_not_a_string"
REASON_NO_VALID_ADDRESS = "no_valid_recipient"

_LINE_BREAKS = ("\r", "\n")


@dataclass(frozen=True)
class Recipient:
    name: str
    address: str

    def formatted(self) -> str:
        """Header form, e.g. 'User One <a@x.com>' or 'a@x.com'."""
        return formataddr((self.name, self.address))


@dataclass(frozen=True)
class RecipientVerdict:
    accepted: bool
    reason: str | None = None
    recipients: tuple[Recipient, ...] = ()


def contains_line_break(value: str) -> bool:
    return any(ch in value for ch in _LINE_BREAKS)


def is_valid_address(address: str) -> bool:
    if not address.isascii():
        return False
    try:
        validate_email(address, check_deliverability=False, allow_smtputf8=False)
    except EmailNotValidError:
        return False
    return True


def validate_recipients(value: object) -> RecipientVerdict:
    """Validate a comma-separated recipient field.

    Returns a rejected verdict when the field contains a line break, or when
    no entry parses to a valid address. Invalid entries next to valid ones
    are dropped.
    """
    if not isinstance(value, str):
        return RecipientVerdict(accepted=False, reason=REASON_NOT_A_STRING)
    if contains_line_break(value):
        return RecipientVerdict(accepted=False, reason=REASON_LINE_BREAK)

    recipients = tuple(
        Recipient(name=name, address=address)
        for name, address in getaddresses([value])
        if address and is_valid_address(address)
    )
    if not recipients:
        return RecipientVerdict(accepted=False, reason=REASON_NO_VALID_ADDRESS)
    return RecipientVerdict(accepted=True, recipients=recipients)
