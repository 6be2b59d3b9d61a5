"""
Prometheus Metrics for redditsync

Centralized metrics definitions for:
- Translation gateway (outcomes, latency) and cache (size, evictions)
- Comment tree translation
- Session lifecycle
- Content API fetches
- Notification gate decisions and dispatch

All modules import metrics from here to ensure consistent names.
"""

import logging

from prometheus_client import Counter, Gauge, Histogram, start_http_server

logger = logging.getLogger(__name__)

# =============================================================================
# TRANSLATION METRICS
# =============================================================================

translation_requests_total = Counter(
    "redditsync_translation_requests_total",
    "Translation requests by outcome",
    ["outcome"],  # passthrough, cache_hit, translated, fallback, circuit_open
)

translation_errors_total = Counter(
    "redditsync_translation_errors_total",
    "Translation endpoint failures swallowed by the gateway",
    ["error_type"],  # network, upstream, timeout, empty
)

translation_duration_seconds = Histogram(
    "redditsync_translation_duration_seconds",
    "Latency of translation endpoint calls",
    buckets=[0.05, 0.1, 0.25, 0.5, 1, 2, 5, 10, 30],
)

translation_cache_size = Gauge(
    "redditsync_translation_cache_size",
    "Entries currently held in the translation cache",
)

translation_cache_evictions_total = Counter(
    "redditsync_translation_cache_evictions_total",
    "Entries evicted from the translation cache",
)

tree_nodes_translated_total = Counter(
    "redditsync_tree_nodes_translated_total",
    "Comment nodes processed by the tree translator",
)

# =============================================================================
# SESSION / CONTENT METRICS
# =============================================================================

session_events_total = Counter(
    "redditsync_session_events_total",
    "Session store events",
    ["event"],  # save, clear, storage_error
)

content_fetch_errors_total = Counter(
    "redditsync_content_fetch_errors_total",
    "Content API fetch failures surfaced to callers",
    ["operation", "error_type"],
)

# =============================================================================
# NOTIFICATION METRICS
# =============================================================================

notification_decisions_total = Counter(
    "redditsync_notification_decisions_total",
    "Notification gate decisions",
    ["category", "reason"],  # reason: delivered, category_disabled, quiet_hours
)

notification_dispatch_total = Counter(
    "redditsync_notification_dispatch_total",
    "Dispatch outcomes",
    ["status"],  # sent, skipped, failed
)


# =============================================================================
# HELPER FUNCTIONS
# =============================================================================

def record_translation(outcome: str) -> None:
    """Record a translation request outcome."""
    translation_requests_total.labels(outcome=outcome).inc()


def record_translation_error(error_type: str) -> None:
    """Record a swallowed translation failure."""
    translation_errors_total.labels(error_type=error_type).inc()


def record_notification_decision(category: str, reason: str) -> None:
    """Record a notification gate decision."""
    notification_decisions_total.labels(category=category, reason=reason).inc()


def record_content_error(operation: str, error_type: str) -> None:
    """Record a content API failure."""
    content_fetch_errors_total.labels(operation=operation, error_type=error_type).inc()


def metrics_server(port: int = 8000) -> None:
    """Start the Prometheus metrics HTTP server."""
    start_http_server(port)
    logger.info(f"Metrics server started on port {port}")
