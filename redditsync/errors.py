"""
Error taxonomy for the synchronization layer.

Nothing here is fatal to the process. Callers degrade instead:
- StorageError: treat the session as unauthenticated
- NetworkError / UpstreamError: content fetches surface them for retry,
  the translation gateway swallows them and returns the original text
- ValidationError: malformed quiet hours are treated as disabled
"""

from typing import Optional


class SyncError(Exception):
    """Base class for all redditsync errors."""


class StorageError(SyncError):
    """Persisted state could not be read or written."""


class NetworkError(SyncError):
    """A remote call failed before a usable response was received."""


class UpstreamError(NetworkError):
    """The remote service answered, but with an error or a malformed body."""

    def __init__(self, message: str, status_code: Optional[int] = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class ValidationError(SyncError):
    """Input data did not match the expected format."""


class AuthError(SyncError):
    """Authentication related errors."""
