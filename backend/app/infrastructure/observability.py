"""Structured Logging: JSON formatter, setup and field binding.

Invariants:
    - All logs include timestamp, level, logger name, and message
    - Extra fields (correlation_id, status_code, errors, email_id, ...) surfaced when present
    - Connection and credential fields (REDACTED_FIELDS) are removed, never printed
    - JSON format in production, human-readable in development
    - setup_logging replaces its own handler instead of stacking a new one

Design Decisions:
    - JSONFormatter over third-party libs: stdlib logging end to end
    - setup_logging called once on startup via lifespan
"""

import json
import logging
from datetime import datetime, timezone
from typing import Any

REDACTED_FIELDS = frozenset({
    "host", "port", "user", "password",
    "client_secret", "access_token", "refresh_token",
})

_HANDLER_NAME = "app.json"

# Attributes every LogRecord has; anything else came in through `extra`.
_RECORD_ATTRS = frozenset(
    vars(logging.LogRecord("", 0, "", 0, "", (), None))
) | {"message", "asctime", "taskName"}


def record_extras(record: logging.LogRecord) -> dict[str, Any]:
    """Fields passed via `extra`, minus redacted ones."""
    return {
        key: val for key, val in record.__dict__.items()
        if key not in _RECORD_ATTRS and key not in REDACTED_FIELDS
        and not key.startswith("_")
    }


class JSONFormatter(logging.Formatter):
    """Format logs as JSON for structured logging in production."""

    def format(self, record: logging.LogRecord) -> str:
        log = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        for key, val in record_extras(record).items():
            if val is not None:
                log[key] = val
        if record.exc_info:
            log["exception"] = self.formatException(record.exc_info)
        return json.dumps(log, ensure_ascii=False, default=str)


class _FieldsAdapter(logging.LoggerAdapter):
    """LoggerAdapter that merges bound fields under each call's own extra."""

    def process(self, msg, kwargs):
        kwargs["extra"] = {**self.extra, **(kwargs.get("extra") or {})}
        return msg, kwargs


def with_fields(logger: logging.Logger, **fields: Any) -> logging.LoggerAdapter:
    """Bind *fields* to every record logged through the returned adapter."""
    return _FieldsAdapter(logger, fields)


def setup_logging(level: str = "INFO", fmt: str = "json"):
    """Configure logging for the application."""
    handler = logging.StreamHandler()
    handler.set_name(_HANDLER_NAME)
    if fmt == "json":
        handler.setFormatter(JSONFormatter())
    else:
        handler.setFormatter(logging.Formatter(
            "%(asctime)s %(levelname)s %(name)s: %(message)s",
        ))
    for existing in list(logging.root.handlers):
        if existing.get_name() == _HANDLER_NAME:
            logging.root.removeHandler(existing)
    logging.root.addHandler(handler)
    logging.root.setLevel(getattr(logging, level.upper(), logging.INFO))
    return handler
