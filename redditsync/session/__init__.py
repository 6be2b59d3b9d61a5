"""Session persistence and OAuth exchanges."""
from .oauth import OAuthClient
from .store import SessionStore, now_ms

__all__ = ["OAuthClient", "SessionStore", "now_ms"]
