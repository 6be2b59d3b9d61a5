"""Configuration management module."""

from .settings import Settings, settings
from .constants import (
    CacheConfig,
    ContentLimits,
    Timeouts,
)

__all__ = [
    "Settings",
    "settings",
    "Timeouts",
    "CacheConfig",
    "ContentLimits",
]
