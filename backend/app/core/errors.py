"""Error Hierarchy: typed, categorized exceptions raised by resolvers and services.

Invariants:
    - Every error has a canonical ErrorCode, a category and a severity
    - http_status defaults to the code's entry in HTTP_STATUS_BY_CODE
    - extensions carries the canonical code; graphql-core copies it onto the GraphQLError
    - to_response() produces the REST envelope and never includes debug data

Design Decisions:
    - Single hierarchy with AppError base: FastAPI handler and GraphQL formatter
      both read the same code
    - ErrorContext as dataclass: observability fields without coupling to logging
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any

from app.core.error_codes import ErrorCode, http_status_for


class ErrorSeverity(str, Enum):
    """Error severity for observability and client handling."""
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class ErrorCategory(str, Enum):
    """High-level error categories for routing and handling."""
    VALIDATION = "validation"
    AUTHENTICATION = "authentication"
    AUTHORIZATION = "authorization"
    RESOURCE_NOT_FOUND = "resource_not_found"
    RATE_LIMIT = "rate_limit"
    EXTERNAL_SERVICE = "external_service"
    INTERNAL = "internal"


@dataclass
class ErrorContext:
    """Observability context attached to an error."""
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    correlation_id: str | None = None
    retry_after_ms: int | None = None


class AppError(Exception):
    """Base exception for all application errors."""

    def __init__(
        self,
        message: str,
        code: ErrorCode,
        category: ErrorCategory,
        severity: ErrorSeverity = ErrorSeverity.ERROR,
        context: ErrorContext | None = None,
        http_status: int | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.category = category
        self.severity = severity
        self.context = context or ErrorContext()
        self.http_status = (
            http_status if http_status is not None else http_status_for(code)
        )

    @property
    def extensions(self) -> dict[str, Any]:
        """GraphQL extensions for this error."""
        ext: dict[str, Any] = {"code": self.code.value}
        if self.http_status != http_status_for(self.code):
            ext["httpStatus"] = self.http_status
        if self.context.retry_after_ms is not None:
            ext["retryAfterMs"] = self.context.retry_after_ms
        return ext

    def to_response(self) -> dict:
        """Convert to standardized REST error response."""
        return {
            "error": {
                "code": self.code.value,
                "message": self.message,
                "category": self.category.value,
                "severity": self.severity.value,
                "timestamp": self.context.timestamp.isoformat(),
                "correlation_id": self.context.correlation_id,
            }
        }


# ─── Client Errors (400-level) ──────────────────────────────────

class InvalidArgumentsError(AppError):
    """Resolver or request arguments failed validation."""
    def __init__(self, message: str, field: str, context: ErrorContext | None = None):
        super().__init__(
            message, ErrorCode.INVALID_ARGUMENTS, ErrorCategory.VALIDATION,
            ErrorSeverity.ERROR, context,
        )
        self.field = field


class UnauthenticatedError(AppError):
    def __init__(self, context: ErrorContext | None = None):
        super().__init__(
            "You must be authenticated to perform this action.",
            ErrorCode.UNAUTHENTICATED, ErrorCategory.AUTHENTICATION,
            ErrorSeverity.WARNING, context,
        )


class InsufficientPermissionsError(AppError):
    def __init__(self, action: str, context: ErrorContext | None = None):
        super().__init__(
            f"Insufficient permissions for action '{action}'",
            ErrorCode.INSUFFICIENT_PERMISSIONS, ErrorCategory.AUTHORIZATION,
            ErrorSeverity.WARNING, context,
        )
        self.action = action


class NotFoundError(AppError):
    """Requested resource does not exist."""
    def __init__(
        self, resource_type: str, resource_id: str, context: ErrorContext | None = None,
    ):
        super().__init__(
            f"{resource_type} '{resource_id}' not found",
            ErrorCode.NOT_FOUND, ErrorCategory.RESOURCE_NOT_FOUND,
            ErrorSeverity.ERROR, context,
        )


class RateLimitExceededError(AppError):
    def __init__(self, retry_after_ms: int | None = None, context: ErrorContext | None = None):
        ctx = context or ErrorContext()
        ctx.retry_after_ms = retry_after_ms
        super().__init__(
            "Too many requests. Please try again later.",
            ErrorCode.RATE_LIMIT_EXCEEDED, ErrorCategory.RATE_LIMIT,
            ErrorSeverity.WARNING, ctx,
        )


# ─── Infrastructure Errors (500-level) ──────────────────────────

class ServiceUnavailableError(AppError):
    """A required downstream service is not configured or not reachable."""
    def __init__(self, service: str, context: ErrorContext | None = None):
        super().__init__(
            f"{service} is not available",
            ErrorCode.EXTERNAL_SERVICE_ERROR, ErrorCategory.EXTERNAL_SERVICE,
            ErrorSeverity.CRITICAL, context,
        )
        self.service = service


class EmailDeliveryError(AppError):
    """Mail transport failed to deliver a message."""
    def __init__(self, message: str, reason: str, context: ErrorContext | None = None):
        super().__init__(
            f"Email delivery failed ({reason}): {message}",
            ErrorCode.EXTERNAL_SERVICE_ERROR, ErrorCategory.EXTERNAL_SERVICE,
            ErrorSeverity.ERROR, context,
        )
        self.reason = reason
