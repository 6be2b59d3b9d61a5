"""Authentication session models."""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class Session(BaseModel):
    """
    Persisted authentication session for one installation.

    `expires_at` is epoch milliseconds; 0 means "never issued".
    """

    model_config = ConfigDict(frozen=True)

    access_token: Optional[str] = None
    refresh_token: Optional[str] = None
    username: Optional[str] = None
    expires_at: int = 0

    @classmethod
    def empty(cls) -> "Session":
        return cls()

    def is_expired(self, now_ms: int) -> bool:
        return now_ms >= self.expires_at

    def is_authenticated(self, now_ms: int) -> bool:
        return bool(self.access_token) and not self.is_expired(now_ms)


class AuthState(BaseModel):
    """Auth state derived from a single Session read."""

    model_config = ConfigDict(frozen=True)

    is_authenticated: bool = False
    access_token: Optional[str] = None
    refresh_token: Optional[str] = None
    username: Optional[str] = None
    expires_at: int = 0

    @classmethod
    def from_session(cls, session: Session, now_ms: int) -> "AuthState":
        return cls(
            is_authenticated=session.is_authenticated(now_ms),
            access_token=session.access_token,
            refresh_token=session.refresh_token,
            username=session.username,
            expires_at=session.expires_at,
        )


class TokenResponse(BaseModel):
    """OAuth token endpoint response (authorization_code and refresh_token grants)."""

    access_token: str
    token_type: str = "bearer"
    expires_in: int = Field(..., description="Lifetime in seconds")
    scope: str = ""
    refresh_token: Optional[str] = None  # Omitted on refresh


class ContentUser(BaseModel):
    """The signed-in account as reported by /api/v1/me."""

    id: str
    name: str
    total_karma: int = 0
    link_karma: int = 0
    comment_karma: int = 0
    created: int = 0  # epoch ms
    icon_img: Optional[str] = None
    is_employee: bool = False
    is_gold: bool = False
    is_premium: bool = False
