"""
Structured logging: timestamp, level, event_type, logger name.

structlog with ISO timestamps and consistent keys. Every module uses
get_logger(__name__) and logs a snake_case event_type first, then key/value
context:

    logger.info("analytics_pipeline_done", course_count=8, trend="rising")

Defaults come from LOG_LEVEL (INFO) and LOG_FORMAT (json | console); tools
may reconfigure with configure_logging(). Logs go to stderr so stdout stays
free for report output.

Uses only stdlib logging and structlog; no gpa_insight imports to avoid circular imports.
"""

from __future__ import annotations

import logging
import os
import sys
from datetime import datetime, timezone
from typing import Any

import structlog

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").strip().upper()
LOG_FORMAT = os.getenv("LOG_FORMAT", "json").strip().lower()


def _level_value(level: str) -> int:
    value = logging.getLevelName(level.upper())
    return value if isinstance(value, int) else logging.INFO


def _add_timestamp(
    logger: Any,
    method_name: str,
    event_dict: dict[str, Any],
) -> dict[str, Any]:
    """ISO 8601 UTC timestamp unless the caller supplied one."""
    event_dict.setdefault("timestamp", datetime.now(timezone.utc).isoformat())
    return event_dict


def _event_type(
    logger: Any,
    method_name: str,
    event_dict: dict[str, Any],
) -> dict[str, Any]:
    """structlog's positional 'event' becomes event_type."""
    if "event" in event_dict and "event_type" not in event_dict:
        event_dict["event_type"] = event_dict.pop("event")
    return event_dict


class _NamedPrintLogger(structlog.PrintLogger):
    """PrintLogger that remembers the module name it was created for."""

    def __init__(self, name: str) -> None:
        super().__init__(file=sys.stderr)
        self.name = name


def _stderr_logger(*args: Any) -> _NamedPrintLogger:
    # sys.stderr is looked up per logger so redirected streams are honored
    return _NamedPrintLogger(str(args[0]) if args else "gpa_insight")


def _add_logger_name(
    logger: Any,
    method_name: str,
    event_dict: dict[str, Any],
) -> dict[str, Any]:
    name = getattr(logger, "name", None)
    if name:
        event_dict.setdefault("logger", name)
    return event_dict


def configure_logging(level: str | None = None, fmt: str | None = None) -> None:
    """
    (Re)configure structlog.

    Args:
        level: DEBUG | INFO | WARNING | ERROR; default LOG_LEVEL.
        fmt: json | console; default LOG_FORMAT.
    """
    level = (level or LOG_LEVEL).upper()
    fmt = (fmt or LOG_FORMAT).lower()
    processors: list[Any] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        _add_logger_name,
        structlog.processors.format_exc_info,
        _add_timestamp,
    ]
    if fmt == "json":
        processors.append(_event_type)
        processors.append(structlog.processors.JSONRenderer(sort_keys=True))
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty()))
    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(_level_value(level)),
        context_class=dict,
        logger_factory=_stderr_logger,
        cache_logger_on_first_use=False,
    )


if not structlog.is_configured():
    configure_logging()


def get_logger(name: str) -> structlog.BoundLogger:
    """
    Return a lazy structured logger for the module name.

    Resolved on every call, so configure_logging() also applies to
    module-level loggers created at import time.
    """
    return structlog.get_logger(name)
