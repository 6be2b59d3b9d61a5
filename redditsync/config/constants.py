"""
Shared configuration constants for redditsync.

This module centralizes magic numbers and default values used across the
session, translation and notification layers. Values can be overridden via
environment variables.

Usage:
    from redditsync.config.constants import Timeouts

    async with httpx.AsyncClient(timeout=Timeouts.HTTP_DEFAULT) as client:
        ...
"""

import os


class Timeouts:
    """HTTP and operation timeout constants (in seconds)."""

    HTTP_DEFAULT = float(os.getenv("HTTP_TIMEOUT_DEFAULT", "30.0"))
    """Default timeout for HTTP requests."""

    HTTP_SHORT = float(os.getenv("HTTP_TIMEOUT_SHORT", "10.0"))
    """Short timeout for quick API calls (token exchange, user info)."""

    TRANSLATION_CALL = float(os.getenv("TRANSLATION_CALL_TIMEOUT", "30.0"))
    """Upper bound for a single translation call, independent per call."""


class CacheConfig:
    """Translation cache sizing."""

    TRANSLATION_CAPACITY = int(os.getenv("TRANSLATION_CACHE_CAPACITY", "1000"))
    """Max cached translations before a batch eviction runs."""

    TRANSLATION_EVICTION_BATCH = int(os.getenv("TRANSLATION_CACHE_EVICTION_BATCH", "200"))
    """Entries removed per eviction pass (oldest first)."""

    TRANSLATION_MIN_LENGTH = 3
    """Texts shorter than this are never sent for translation."""


class ContentLimits:
    """Content API paging limits."""

    LISTING_PAGE_SIZE = 25
    """Posts per listing page."""

    COMMENTS_LIMIT = 100
    """Top-level comments requested per post."""

    TOP_TIME_WINDOWS = ("hour", "day", "week", "month", "year", "all")
    """Valid `t` values for top listings."""

    COMMENT_SORTS = (
        "confidence", "top", "new", "controversial", "old", "random", "qa", "live", "best",
    )
