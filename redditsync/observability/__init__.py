"""
Observability module for redditsync.

Provides:
- Prometheus metrics (metrics.py)
- Structured JSON logging (logging.py)
"""

from .logging import (
    setup_logging,
    get_logger,
    LogContext,
    set_trace_id,
    get_trace_id,
    clear_trace_id,
)

from .metrics import (
    metrics_server,
    record_content_error,
    record_notification_decision,
    record_translation,
    record_translation_error,
)

__all__ = [
    # Logging
    "setup_logging",
    "get_logger",
    "LogContext",
    "set_trace_id",
    "get_trace_id",
    "clear_trace_id",
    # Metrics
    "metrics_server",
    "record_content_error",
    "record_notification_decision",
    "record_translation",
    "record_translation_error",
]
