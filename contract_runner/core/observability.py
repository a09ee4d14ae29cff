"""
Observability module for the contract runner.

Provides:
- Structured logging with JSON format
- Case context (group and title) attached to every record logged while a case runs
- Header redaction for log records

Usage:
    from contract_runner.core.observability import (
        case_context,
        configure_structured_logging,
        redact_headers,
    )
"""

import json
import logging
from collections.abc import Iterator, Mapping
from contextlib import contextmanager
from contextvars import ContextVar
from datetime import UTC, datetime

# ============================================================================
# Context Variables for Case Tracking
# ============================================================================

_case_title_ctx: ContextVar[str] = ContextVar("case_title", default="")
_case_group_ctx: ContextVar[str] = ContextVar("case_group", default="")


def get_case_title() -> str:
    """Get the title of the case currently running."""
    return _case_title_ctx.get()


def get_case_group() -> str:
    """Get the group of the case currently running."""
    return _case_group_ctx.get()


@contextmanager
def case_context(title: str, group: str | None = None) -> Iterator[None]:
    """Bind case title and group for the duration of one case."""
    title_token = _case_title_ctx.set(title)
    group_token = _case_group_ctx.set(group or "")
    try:
        yield
    finally:
        _case_title_ctx.reset(title_token)
        _case_group_ctx.reset(group_token)


# Headers that must not appear in log records
SENSITIVE_HEADERS = {
    "authorization",
    "cookie",
    "set-cookie",
    "x-api-key",
    "x-auth-token",
}


def redact_headers(headers: Mapping[str, str]) -> dict[str, str]:
    """Redact sensitive headers."""
    return {
        k: "***REDACTED***" if k.lower() in SENSITIVE_HEADERS else v for k, v in headers.items()
    }


# ============================================================================
# Structured Logging Configuration
# ============================================================================

_RESERVED_ATTRS = {
    "name",
    "msg",
    "args",
    "levelname",
    "levelno",
    "pathname",
    "filename",
    "module",
    "lineno",
    "funcName",
    "created",
    "msecs",
    "relativeCreated",
    "thread",
    "threadName",
    "processName",
    "process",
    "taskName",
    "getMessage",
    "exc_info",
    "exc_text",
    "stack_info",
}


class StructuredFormatter(logging.Formatter):
    """
    JSON formatter for structured logging.

    Outputs logs as JSON with standard fields:
    - timestamp: ISO 8601 format
    - level: Log level
    - logger: Logger name
    - message: Log message
    - case: Title of the running case (if any)
    - group: Group of the running case (if any)
    - extra: Any additional context from logging.extra
    """

    def format(self, record: logging.LogRecord) -> str:
        log_entry = {
            "timestamp": datetime.fromtimestamp(record.created, tz=UTC).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        title = get_case_title()
        if title:
            log_entry["case"] = title

        group = get_case_group()
        if group:
            log_entry["group"] = group

        if record.exc_info:
            log_entry["exception"] = {
                "type": record.exc_info[0].__name__ if record.exc_info[0] else None,
                "message": str(record.exc_info[1]) if record.exc_info[1] else None,
            }

        extra_keys = {k: v for k, v in record.__dict__.items() if k not in _RESERVED_ATTRS}
        if extra_keys:
            log_entry["extra"] = extra_keys

        return json.dumps(log_entry, default=str)


def configure_structured_logging(level: str = "INFO", structured: bool = True) -> None:
    """
    Configure root logger.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        structured: JSON output when True, plain text otherwise
    """
    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.setLevel(getattr(logging, level.upper(), logging.INFO))

    handler = logging.StreamHandler()
    if structured:
        handler.setFormatter(StructuredFormatter())
    else:
        handler.setFormatter(logging.Formatter("%(levelname)s %(name)s: %(message)s"))

    root_logger.addHandler(handler)
