"""Extension Sanitization: strips sensitive keys from GraphQL error extensions.

Invariants:
    - Deny-set keys never appear at the top level or inside the nested `error` object
    - A nested `error` with no safe keys left is omitted, never emitted as {}
    - `code` and `correlationId` are always present and cannot be shadowed by input
    - `httpStatus` survives only when numeric
    - The raw input mapping is never mutated

Design Decisions:
    - SanitizationPolicy is an immutable value passed in, so formatters with
      different deny sets can coexist in one process
    - SanitizedExtensions keeps recognized fields apart from the residual
      mapping and only merges them when rendered for the wire
"""

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Mapping

DEFAULT_SENSITIVE_KEYS = frozenset({
    "stack", "internal", "debug", "raw", "secrets", "exception",
})

_RECOGNIZED_KEYS = frozenset({"code", "correlationId", "httpStatus", "error"})


@dataclass(frozen=True)
class SanitizationPolicy:
    """Deny set and display-code rules applied by a formatter."""
    sensitive_keys: frozenset[str] = DEFAULT_SENSITIVE_KEYS
    preserve_custom_codes: bool = True


DEFAULT_POLICY = SanitizationPolicy()


@dataclass(frozen=True)
class SanitizedExtensions:
    """Client-safe extensions: recognized fields plus safe residual keys."""
    code: str
    correlation_id: str
    http_status: int | None = None
    error: Mapping[str, Any] | None = None
    residual: Mapping[str, Any] = field(default_factory=lambda: MappingProxyType({}))

    def as_dict(self) -> dict[str, Any]:
        out = dict(self.residual)
        if self.http_status is not None:
            out["httpStatus"] = self.http_status
        if self.error is not None:
            out["error"] = self.error
        out["code"] = self.code
        out["correlationId"] = self.correlation_id
        return out


def coerce_http_status(value: object) -> int | None:
    """Return value as an int status when it is numeric, else None."""
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    return None


def strip_sensitive_keys(
    data: Mapping[str, Any], sensitive_keys: frozenset[str],
) -> dict[str, Any]:
    """Copy *data* without deny-set keys, descending into nested mappings."""
    cleaned: dict[str, Any] = {}
    for key, value in data.items():
        if key in sensitive_keys:
            continue
        if isinstance(value, Mapping):
            value = strip_sensitive_keys(value, sensitive_keys)
        cleaned[key] = value
    return cleaned


def sanitize_extensions(
    raw: object,
    *,
    display_code: str,
    correlation_id: str,
    policy: SanitizationPolicy = DEFAULT_POLICY,
) -> SanitizedExtensions:
    """Build client-safe extensions from an untrusted extensions value."""
    source: Mapping[str, Any] = raw if isinstance(raw, Mapping) else {}
    deny = policy.sensitive_keys

    residual = {
        key: value for key, value in source.items()
        if key not in deny and key not in _RECOGNIZED_KEYS
    }

    nested_error: Mapping[str, Any] | None = None
    if "error" in source and "error" not in deny:
        value = source["error"]
        if isinstance(value, Mapping):
            safe = strip_sensitive_keys(value, deny)
            nested_error = safe or None
        else:
            residual["error"] = value

    http_status = None
    if "httpStatus" not in deny:
        http_status = coerce_http_status(source.get("httpStatus"))

    return SanitizedExtensions(
        code=display_code,
        correlation_id=correlation_id,
        http_status=http_status,
        error=nested_error,
        residual=MappingProxyType(residual),
    )
