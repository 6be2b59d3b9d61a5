"""
Structured logging for redditsync.

Two output modes share one field model: JSON lines for aggregation and a
compact single-line console form for local work. Fields passed through
`extra=` are carried into both, along with the active trace id.

Usage:
    from redditsync.observability.logging import setup_logging, get_logger

    # Once, by the embedding service:
    setup_logging(service_name="viewer-sync")

    # Per module:
    logger = get_logger(__name__)
    logger.info("Translated comment tree", extra={"post_id": "abc", "nodes": 42})

JSON output:
    {"timestamp": "2026-10-18T00:45:00.123000+00:00", "level": "INFO",
     "service": "viewer-sync", "logger": "redditsync.translation.tree",
     "message": "Translated comment tree", "trace_id": "abc", "post_id": "abc", "nodes": 42}
"""

import json
import logging
import sys
from contextvars import ContextVar
from datetime import datetime, timezone
from typing import Any, Optional

from redditsync.config.settings import settings

# Trace id of the post/notification being processed; each asyncio task sees its own
_trace_id: ContextVar[Optional[str]] = ContextVar("trace_id", default=None)

# Attributes every LogRecord has; anything else came from `extra=`
_RECORD_ATTRS = frozenset(vars(logging.LogRecord("", 0, "", 0, "", None, None))) | {
    "message", "asctime", "taskName",
}

_NOISY_LOGGERS = ("httpx", "httpcore", "asyncio")


def get_trace_id() -> Optional[str]:
    return _trace_id.get()


def set_trace_id(trace_id: Optional[str]) -> None:
    _trace_id.set(trace_id)


def clear_trace_id() -> None:
    _trace_id.set(None)


class _ServiceFormatter(logging.Formatter):
    """Base for the two formatters: service name plus extra-field extraction."""

    def __init__(self, service_name: str = "unknown"):
        super().__init__()
        self.service_name = service_name

    @staticmethod
    def extra_fields(record: logging.LogRecord) -> dict[str, Any]:
        return {
            key: value for key, value in vars(record).items()
            if key not in _RECORD_ATTRS and not key.startswith("_")
        }


class JSONFormatter(_ServiceFormatter):
    """One JSON object per record."""

    def format(self, record: logging.LogRecord) -> str:
        entry: dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "service": self.service_name,
            "logger": record.name,
            "message": record.getMessage(),
        }
        trace_id = get_trace_id()
        if trace_id:
            entry["trace_id"] = trace_id
        if record.levelno >= logging.ERROR:
            entry["source"] = f"{record.pathname}:{record.lineno}"
            entry["function"] = record.funcName
        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)

        entry.update(self.extra_fields(record))
        # default=str covers extras that are not JSON-native
        return json.dumps(entry, ensure_ascii=False, default=str)


class ConsoleFormatter(_ServiceFormatter):
    """
    Single-line console output for development.

    Format: LEVEL service/logger [trace] message | key=value ...
    """

    LEVEL_COLORS = {
        logging.DEBUG: "\033[2m",
        logging.INFO: "\033[32m",
        logging.WARNING: "\033[33m",
        logging.ERROR: "\033[31m",
        logging.CRITICAL: "\033[1;31m",
    }

    def __init__(self, service_name: str = "unknown", use_colors: bool = True):
        super().__init__(service_name)
        self.use_colors = use_colors and sys.stderr.isatty()

    def _level(self, record: logging.LogRecord) -> str:
        if not self.use_colors:
            return record.levelname
        return f"{self.LEVEL_COLORS.get(record.levelno, '')}{record.levelname}\033[0m"

    def format(self, record: logging.LogRecord) -> str:
        parts = [self._level(record), f"{self.service_name}/{record.name.rsplit('.', 1)[-1]}"]
        trace_id = get_trace_id()
        if trace_id:
            parts.append(f"[{trace_id[:8]}]")
        parts.append(record.getMessage())

        line = " ".join(parts)
        extra = self.extra_fields(record)
        if extra:
            line += " | " + " ".join(f"{key}={value}" for key, value in extra.items())
        if record.exc_info:
            line += "\n" + self.formatException(record.exc_info)
        return line


def _build_formatter(service_name: str, json_format: bool) -> logging.Formatter:
    if json_format:
        return JSONFormatter(service_name=service_name)
    return ConsoleFormatter(service_name=service_name)


def setup_logging(
    service_name: str,
    level: Optional[str] = None,
    json_format: Optional[bool] = None,
) -> None:
    """
    Install a single stderr handler on the root logger.

    Args:
        service_name: Name of the embedding service (e.g., "viewer-sync", "push-worker")
        level: Log level name. Defaults to settings.LOG_LEVEL.
        json_format: JSON lines when true, console lines otherwise.
            Defaults to settings.LOG_FORMAT ("console" selects console output).
    """
    level = (level or settings.LOG_LEVEL).upper()
    log_level = logging.getLevelName(level)
    if not isinstance(log_level, int):
        log_level = logging.INFO
    if json_format is None:
        json_format = settings.LOG_FORMAT.lower() != "console"

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(_build_formatter(service_name, json_format))

    root = logging.getLogger()
    root.handlers[:] = [handler]
    root.setLevel(log_level)

    for name in _NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    logging.getLogger(__name__).debug(
        "Logging configured",
        extra={"log_level": level, "json_format": json_format},
    )


def get_logger(name: str) -> logging.Logger:
    """Module logger, typically `get_logger(__name__)`."""
    return logging.getLogger(name)


class LogContext:
    """
    Sets the trace id for the duration of a block and restores the previous one.

    Usage:
        with LogContext(trace_id=post_id):
            logger.info("Translating")  # carries trace_id
    """

    def __init__(self, trace_id: str):
        self.trace_id = trace_id
        self._token = None

    def __enter__(self) -> "LogContext":
        self._token = _trace_id.set(self.trace_id)
        return self

    def __exit__(self, *exc_info) -> None:
        _trace_id.reset(self._token)
