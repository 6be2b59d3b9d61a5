"""
Data models for redditsync.

All models are Pydantic v2; content and session models are immutable and
copied with `model_copy(update=...)`.
"""

from .content import CommentNode, Listing, Post, Subreddit
from .notification import (
    NotificationCategory,
    NotificationFrequency,
    NotificationPreferences,
    QuietHours,
)
from .session import AuthState, ContentUser, Session, TokenResponse

__all__ = [
    "AuthState",
    "CommentNode",
    "ContentUser",
    "Listing",
    "NotificationCategory",
    "NotificationFrequency",
    "NotificationPreferences",
    "Post",
    "QuietHours",
    "Session",
    "Subreddit",
    "TokenResponse",
]
