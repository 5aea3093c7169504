"""Error Codes: canonical GraphQL error identifiers, legacy aliases, HTTP mapping.

Invariants:
    - Every formatted error carries exactly one canonical ErrorCode internally
    - normalize_error_code is total: unknown, missing or non-string input -> INTERNAL_SERVER_ERROR
    - Legacy aliases are matched case-sensitively on the exact string
    - Lookup tables are read-only after import

Design Decisions:
    - Two named values per error (ResolvedCode.internal / ResolvedCode.display):
      internal drives status and logging, display is what the client sees
    - str Enum: values serialize to JSON without custom encoders
"""

from enum import Enum
from types import MappingProxyType
from typing import Mapping, NamedTuple


class ErrorCode(str, Enum):
    """Canonical machine-readable error identifiers."""
    UNAUTHENTICATED = "UNAUTHENTICATED"
    TOKEN_EXPIRED = "TOKEN_EXPIRED"
    TOKEN_INVALID = "TOKEN_INVALID"
    UNAUTHORIZED = "UNAUTHORIZED"
    INSUFFICIENT_PERMISSIONS = "INSUFFICIENT_PERMISSIONS"
    INVALID_ARGUMENTS = "INVALID_ARGUMENTS"
    INVALID_INPUT = "INVALID_INPUT"
    NOT_FOUND = "NOT_FOUND"
    ALREADY_EXISTS = "ALREADY_EXISTS"
    CONFLICT = "CONFLICT"
    RATE_LIMIT_EXCEEDED = "RATE_LIMIT_EXCEEDED"
    INTERNAL_SERVER_ERROR = "INTERNAL_SERVER_ERROR"
    DATABASE_ERROR = "DATABASE_ERROR"
    EXTERNAL_SERVICE_ERROR = "EXTERNAL_SERVICE_ERROR"


# ─── Legacy aliases ──────────────────────────────────────────────

LEGACY_CODE_MAP: Mapping[str, ErrorCode] = MappingProxyType({
    "too_many_requests": ErrorCode.RATE_LIMIT_EXCEEDED,
    "forbidden_action_on_arguments_associated_resources": ErrorCode.UNAUTHORIZED,
    "invalid_credentials": ErrorCode.UNAUTHENTICATED,
    "account_locked": ErrorCode.UNAUTHORIZED,
    "unauthorized_action": ErrorCode.INSUFFICIENT_PERMISSIONS,
    "unauthorized_arguments": ErrorCode.INSUFFICIENT_PERMISSIONS,
})


# ─── HTTP status table ───────────────────────────────────────────

DEFAULT_HTTP_STATUS = 500

HTTP_STATUS_BY_CODE: Mapping[ErrorCode, int] = MappingProxyType({
    ErrorCode.UNAUTHENTICATED: 401,
    ErrorCode.TOKEN_EXPIRED: 401,
    ErrorCode.TOKEN_INVALID: 401,
    ErrorCode.UNAUTHORIZED: 403,
    ErrorCode.INSUFFICIENT_PERMISSIONS: 403,
    ErrorCode.INVALID_ARGUMENTS: 400,
    ErrorCode.INVALID_INPUT: 400,
    ErrorCode.NOT_FOUND: 404,
    ErrorCode.ALREADY_EXISTS: 409,
    ErrorCode.CONFLICT: 409,
    ErrorCode.RATE_LIMIT_EXCEEDED: 429,
    ErrorCode.INTERNAL_SERVER_ERROR: 500,
    ErrorCode.DATABASE_ERROR: 500,
    ErrorCode.EXTERNAL_SERVICE_ERROR: 502,
})

_CANONICAL_VALUES = frozenset(code.value for code in ErrorCode)


class ResolvedCode(NamedTuple):
    """Canonical code for status/logging plus the code shown to clients."""
    internal: ErrorCode
    display: str


def normalize_error_code(raw: object = None) -> ErrorCode:
    """Map a raw extensions code onto the canonical enumeration."""
    if not isinstance(raw, str) or not raw:
        return ErrorCode.INTERNAL_SERVER_ERROR
    if raw in _CANONICAL_VALUES:
        return ErrorCode(raw)
    return LEGACY_CODE_MAP.get(raw, ErrorCode.INTERNAL_SERVER_ERROR)


def is_known_code(raw: object) -> bool:
    """True for canonical values and legacy aliases."""
    return isinstance(raw, str) and (
        raw in _CANONICAL_VALUES or raw in LEGACY_CODE_MAP
    )


def resolve_error_code(raw: object = None, preserve_custom: bool = True) -> ResolvedCode:
    """Resolve both the canonical and the display code for a raw code.

    Canonical and legacy inputs display their canonical value. A custom
    string outside both vocabularies is displayed verbatim when
    *preserve_custom* is set, while still resolving to INTERNAL_SERVER_ERROR
    internally.
    """
    internal = normalize_error_code(raw)
    if preserve_custom and isinstance(raw, str) and raw and not is_known_code(raw):
        return ResolvedCode(internal, raw)
    return ResolvedCode(internal, internal.value)


def http_status_for(code: ErrorCode) -> int:
    return HTTP_STATUS_BY_CODE.get(code, DEFAULT_HTTP_STATUS)
