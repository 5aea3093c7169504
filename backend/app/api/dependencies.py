"""Route Dependencies: settings-driven singletons injected with Depends().

Invariants:
    - One GraphQLErrorFormatter per process, built from Settings
    - The email service lives on app.state (set in lifespan); None when SMTP is not configured
"""

from functools import lru_cache

from fastapi import Request

from app.config import get_settings
from app.core.format_graphql_errors import GraphQLErrorFormatter
from app.core.sanitize_extensions import SanitizationPolicy
from app.infrastructure.smtp_transport import SMTPTransport
from app.services.email_service import EmailService


@lru_cache
def get_error_formatter() -> GraphQLErrorFormatter:
    settings = get_settings()
    return GraphQLErrorFormatter(SanitizationPolicy(
        sensitive_keys=frozenset(settings.sensitive_extension_keys),
        preserve_custom_codes=settings.preserve_custom_error_codes,
    ))


def build_email_service() -> EmailService | None:
    """Create the SMTP-backed email service, or None without an SMTP host."""
    settings = get_settings()
    if not settings.smtp_host:
        return None
    transport = SMTPTransport(
        host=settings.smtp_host,
        port=settings.smtp_port,
        user=settings.smtp_user,
        password=settings.smtp_password,
        secure=settings.smtp_secure,
        timeout_seconds=settings.smtp_timeout_seconds,
    )
    return EmailService(
        transport, settings.email_from_address, settings.email_from_name,
    )


def get_email_service(request: Request) -> EmailService | None:
    return getattr(request.app.state, "email_service", None)
