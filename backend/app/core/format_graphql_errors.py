"""GraphQL Error Formatting: raw execution errors -> client-safe payload + HTTP status.

Invariants:
    - One FormattedError per raw error, order preserved
    - Status precedence: status_override > first error's numeric httpStatus
      > canonical code table > 500
    - Empty batch -> formatted=[] and status 500 (or the override)
    - At most one log record per format() call; sink failures never propagate
    - Never raises for any input shape (mappings, GraphQLError, bare objects)
    - Errors wrapping an unexpected exception (not AppError, not GraphQLError)
      show GENERIC_ERROR_MESSAGE; the raw text only reaches the log summary

Design Decisions:
    - Pure except for the optional log sink call: safe to share across requests
    - Raw errors read through _field(): GraphQLError attributes and plain
      mappings use the same code path
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Iterable, Mapping, Protocol

from graphql import GraphQLError

from app.core.error_codes import DEFAULT_HTTP_STATUS, http_status_for, resolve_error_code
from app.core.errors import AppError
from app.core.sanitize_extensions import (
    DEFAULT_POLICY,
    SanitizationPolicy,
    coerce_http_status,
    sanitize_extensions,
)

logger = logging.getLogger(__name__)

LOG_MESSAGE = "GraphQL error"
GENERIC_ERROR_MESSAGE = "Internal server error"


class LoggerSink(Protocol):
    """Anything with a logging.Logger-compatible error() method."""

    def error(self, msg: str, *args: Any, **kwargs: Any) -> Any: ...


@dataclass(frozen=True)
class FormattedErrors:
    formatted: list[dict[str, Any]] = field(default_factory=list)
    status_code: int = DEFAULT_HTTP_STATUS


def _field(error: object, name: str) -> Any:
    if isinstance(error, Mapping):
        return error.get(name)
    return getattr(error, name, None)


def _format_locations(locations: object) -> list[dict[str, int]] | None:
    if not isinstance(locations, Iterable) or isinstance(locations, (str, bytes)):
        return None
    formatted = []
    for loc in locations:
        line, column = _field(loc, "line"), _field(loc, "column")
        if isinstance(line, int) and isinstance(column, int):
            formatted.append({"line": line, "column": column})
    return formatted or None


def _format_path(path: object) -> list[str | int] | None:
    if not isinstance(path, Iterable) or isinstance(path, (str, bytes)):
        return None
    return [p if isinstance(p, (str, int)) else str(p) for p in path] or None


def _is_unexpected(error: object) -> bool:
    original = _field(error, "original_error")
    return original is not None and not isinstance(original, (AppError, GraphQLError))


class GraphQLErrorFormatter:
    """Formats GraphQL error batches under one SanitizationPolicy."""

    def __init__(self, policy: SanitizationPolicy = DEFAULT_POLICY):
        self.policy = policy

    def format(
        self,
        errors: Iterable[object] | None,
        correlation_id: str,
        sink: LoggerSink | None = None,
        status_override: int | None = None,
    ) -> FormattedErrors:
        formatted: list[dict[str, Any]] = []
        summaries: list[dict[str, str]] = []
        status_code: int | None = None

        for error in errors or ():
            raw_ext = _field(error, "extensions")
            raw_ext = raw_ext if isinstance(raw_ext, Mapping) else {}
            resolved = resolve_error_code(
                raw_ext.get("code"), self.policy.preserve_custom_codes,
            )
            message = _field(error, "message")
            message = message if isinstance(message, str) else str(message or "")
            client_message = GENERIC_ERROR_MESSAGE if _is_unexpected(error) else message

            entry: dict[str, Any] = {"message": client_message}
            locations = _format_locations(_field(error, "locations"))
            if locations:
                entry["locations"] = locations
            path = _format_path(_field(error, "path"))
            if path:
                entry["path"] = path
            entry["extensions"] = sanitize_extensions(
                raw_ext,
                display_code=resolved.display,
                correlation_id=correlation_id,
                policy=self.policy,
            ).as_dict()
            formatted.append(entry)
            summaries.append({"message": message, "code": resolved.internal.value})

            if status_code is None:
                status_code = coerce_http_status(raw_ext.get("httpStatus"))
                if status_code is None:
                    status_code = http_status_for(resolved.internal)

        if status_override is not None:
            status_code = status_override
        elif status_code is None:
            status_code = DEFAULT_HTTP_STATUS

        if sink is not None:
            _emit(sink, correlation_id, status_code, summaries)

        return FormattedErrors(formatted=formatted, status_code=status_code)


def _emit(
    sink: LoggerSink, correlation_id: str, status_code: int, summaries: list[dict[str, str]],
) -> None:
    try:
        sink.error(
            LOG_MESSAGE,
            extra={
                "correlation_id": correlation_id,
                "status_code": status_code,
                "errors": summaries,
            },
        )
    except Exception:
        logger.debug("Log sink raised while recording GraphQL errors", exc_info=True)


_default_formatter = GraphQLErrorFormatter()


def format_graphql_errors(
    errors: Iterable[object] | None,
    correlation_id: str,
    sink: LoggerSink | None = None,
    status_override: int | None = None,
) -> FormattedErrors:
    """Format *errors* with the default policy."""
    return _default_formatter.format(errors, correlation_id, sink, status_override)
