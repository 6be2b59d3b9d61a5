"""
Configuration Management Module

Environment-based configuration with validation using Pydantic Settings.

All components load settings from environment variables defined in the
.env file. Every value has a default so the package imports cleanly in
development and tests.
"""

from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .constants import CacheConfig, Timeouts


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    All configuration is centralized here to prevent hardcoded values
    scattered throughout the codebase.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",  # Ignore extra environment variables
    )

    # =============================================================================
    # LOGGING
    # =============================================================================
    LOG_LEVEL: str = Field(default="INFO", description="Logging level")
    LOG_FORMAT: str = Field(default="json", description="Logging format: json or console")

    # =============================================================================
    # REDIS (session/preferences storage & push handoff)
    # =============================================================================
    REDIS_URL: str = Field(default="redis://localhost:6379/0", description="Redis connection URL")
    REDIS_KEY_PREFIX: str = Field(default="redditsync:", description="Prefix for all stored keys")

    # =============================================================================
    # CONTENT API (Reddit)
    # =============================================================================
    REDDIT_API_BASE_URL: str = Field(
        default="https://oauth.reddit.com", description="Authenticated content API base URL"
    )
    REDDIT_AUTH_BASE_URL: str = Field(
        default="https://www.reddit.com", description="OAuth authorize/token base URL"
    )
    REDDIT_CLIENT_ID: str = Field(default="", description="Installed-app OAuth client id")
    REDDIT_REDIRECT_URI: str = Field(
        default="redditviewer://oauth/callback", description="OAuth redirect URI"
    )
    REDDIT_USER_AGENT: str = Field(
        default="python:redditsync:v0.1.0", description="User-Agent sent to the content API"
    )
    REDDIT_OAUTH_SCOPE: str = Field(
        default="identity read history submit", description="Requested OAuth scopes"
    )

    # =============================================================================
    # TRANSLATION
    # =============================================================================
    TRANSLATION_API_URL: str = Field(
        default="http://localhost:8080", description="Translation service base URL"
    )
    TRANSLATION_API_KEY: Optional[str] = Field(None, description="Bearer key for the translation service")
    TRANSLATION_SOURCE_LANG: str = Field(default="en", description="Default source language")
    TRANSLATION_TARGET_LANG: str = Field(default="ja", description="Default target language")
    TRANSLATION_TIMEOUT_SECONDS: float = Field(
        default=Timeouts.TRANSLATION_CALL, description="Per-call translation timeout"
    )
    TRANSLATION_MIN_LENGTH: int = Field(
        default=CacheConfig.TRANSLATION_MIN_LENGTH, description="Shorter texts are passed through"
    )
    TRANSLATION_CACHE_CAPACITY: int = Field(
        default=CacheConfig.TRANSLATION_CAPACITY, description="Max cached translations"
    )
    TRANSLATION_CACHE_EVICTION_BATCH: int = Field(
        default=CacheConfig.TRANSLATION_EVICTION_BATCH, description="Entries evicted per pass"
    )
    TRANSLATION_CACHE_POLICY: str = Field(
        default="fifo", description="Cache eviction policy: fifo or lru"
    )
    TRANSLATION_MAX_CONCURRENCY: int = Field(
        default=8, description="Max in-flight translation calls per comment tree"
    )
    TRANSLATION_BREAKER_THRESHOLD: int = Field(
        default=5, description="Consecutive translation failures before fast-failing"
    )
    TRANSLATION_BREAKER_RECOVERY_SECONDS: int = Field(
        default=60, description="Seconds before retrying a failing translation endpoint"
    )

    # =============================================================================
    # NOTIFICATIONS
    # =============================================================================
    NOTIFICATION_CHANNEL: str = Field(
        default="notifications:push", description="Redis channel consumed by the push transport"
    )
    NOTIFICATION_HISTORY_LIMIT: int = Field(
        default=50, description="Delivery outcomes kept per user"
    )
    NOTIFICATION_HISTORY_MAX_USERS: int = Field(
        default=1000, description="Users whose history is kept; least recently notified are dropped"
    )

    @field_validator("LOG_LEVEL")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level."""
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        v_upper = v.upper()
        if v_upper not in valid_levels:
            raise ValueError(f"LOG_LEVEL must be one of {valid_levels}")
        return v_upper

    @field_validator("TRANSLATION_CACHE_POLICY")
    @classmethod
    def validate_cache_policy(cls, v: str) -> str:
        """Validate cache eviction policy."""
        v_lower = v.lower()
        if v_lower not in ("fifo", "lru"):
            raise ValueError("TRANSLATION_CACHE_POLICY must be 'fifo' or 'lru'")
        return v_lower

    @field_validator(
        "TRANSLATION_CACHE_CAPACITY",
        "TRANSLATION_CACHE_EVICTION_BATCH",
        "TRANSLATION_MAX_CONCURRENCY",
        "NOTIFICATION_HISTORY_LIMIT",
        "NOTIFICATION_HISTORY_MAX_USERS",
    )
    @classmethod
    def validate_positive(cls, v: int) -> int:
        if v < 1:
            raise ValueError("must be >= 1")
        return v

    @property
    def translation_configured(self) -> bool:
        """True when a translation key is set (placeholder keys don't count)."""
        return bool(self.TRANSLATION_API_KEY) and "YOUR_" not in self.TRANSLATION_API_KEY


# Global settings instance (singleton)
settings = Settings()
