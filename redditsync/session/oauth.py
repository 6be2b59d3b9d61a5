"""
OAuth client for the content API (installed-app flow).

Performs the authorization-code and refresh-token exchanges and records
the results in the SessionStore. The store itself never talks to the
network.

Flow:
    url = oauth.build_authorize_url()       # open in a browser
    ...redirect arrives with ?code=...&state=...
    await oauth.handle_callback(code, state)
    ...later, when the access token expires
    await oauth.refresh()
"""

import base64
import secrets
from typing import Optional
from urllib.parse import urlencode

import httpx
from pydantic import ValidationError as PydanticValidationError

from redditsync.config.constants import Timeouts
from redditsync.config.settings import settings
from redditsync.content.mapper import map_user
from redditsync.errors import AuthError, NetworkError, UpstreamError
from redditsync.models.session import ContentUser, Session, TokenResponse
from redditsync.observability import get_logger

from .store import SessionStore

logger = get_logger(__name__)

AUTHORIZE_PATH = "/api/v1/authorize.compact"
TOKEN_PATH = "/api/v1/access_token"
ME_PATH = "/api/v1/me"


class OAuthClient:
    """Authorization-code and refresh-token exchanges for one installation."""

    def __init__(
        self,
        session_store: SessionStore,
        client_id: Optional[str] = None,
        redirect_uri: Optional[str] = None,
        auth_base_url: Optional[str] = None,
        api_base_url: Optional[str] = None,
        user_agent: Optional[str] = None,
        scope: Optional[str] = None,
        http_client: Optional[httpx.AsyncClient] = None,
    ) -> None:
        self.session_store = session_store
        self.client_id = client_id if client_id is not None else settings.REDDIT_CLIENT_ID
        self.redirect_uri = redirect_uri or settings.REDDIT_REDIRECT_URI
        self.auth_base_url = (auth_base_url or settings.REDDIT_AUTH_BASE_URL).rstrip("/")
        self.api_base_url = (api_base_url or settings.REDDIT_API_BASE_URL).rstrip("/")
        self.user_agent = user_agent or settings.REDDIT_USER_AGENT
        self.scope = scope or settings.REDDIT_OAUTH_SCOPE
        self._client = http_client
        self._pending_state: Optional[str] = None

    def _http(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=Timeouts.HTTP_SHORT)
        return self._client

    def _basic_auth(self) -> str:
        # Installed apps have no secret: "client_id:"
        encoded = base64.b64encode(f"{self.client_id}:".encode()).decode("ascii")
        return f"Basic {encoded}"

    def build_authorize_url(self) -> str:
        """Start a new flow and return the URL the user must visit."""
        self._pending_state = secrets.token_urlsafe(32)
        params = {
            "client_id": self.client_id,
            "response_type": "code",
            "state": self._pending_state,
            "redirect_uri": self.redirect_uri,
            "duration": "permanent",
            "scope": self.scope,
        }
        return f"{self.auth_base_url}{AUTHORIZE_PATH}?{urlencode(params)}"

    async def handle_callback(self, code: str, state: Optional[str]) -> Session:
        """
        Exchange the authorization code and persist the new session.

        Raises:
            AuthError: state mismatch, missing code, or rejected exchange
            NetworkError: the token or identity endpoint was unreachable
        """
        expected, self._pending_state = self._pending_state, None
        if expected is None or state != expected:
            raise AuthError("OAuth state mismatch")
        if not code:
            raise AuthError("No authorization code received")

        token = await self._token_request({
            "grant_type": "authorization_code",
            "code": code,
            "redirect_uri": self.redirect_uri,
        })
        user = await self._fetch_me(f"bearer {token.access_token}")
        session = await self.session_store.save(
            access_token=token.access_token,
            username=user.name,
            expires_at=self._expires_at(token),
            refresh_token=token.refresh_token,
        )
        logger.info("OAuth sign-in complete", extra={"username": user.name})
        return session

    async def refresh(self) -> Session:
        """Trade the stored refresh token for a new access token."""
        current = await self.session_store.read()
        if not current.refresh_token:
            raise AuthError("No refresh token stored")

        token = await self._token_request({
            "grant_type": "refresh_token",
            "refresh_token": current.refresh_token,
        })
        session = await self.session_store.save(
            access_token=token.access_token,
            username=current.username,
            expires_at=self._expires_at(token),
            refresh_token=token.refresh_token,
        )
        logger.info("Access token refreshed", extra={"username": current.username})
        return session

    async def get_current_user(self) -> ContentUser:
        header = await self.session_store.auth_header()
        if header is None:
            raise AuthError("Not signed in")
        return await self._fetch_me(header)

    async def logout(self) -> None:
        await self.session_store.clear()

    def _expires_at(self, token: TokenResponse) -> int:
        return self.session_store.now() + token.expires_in * 1000

    async def _token_request(self, form: dict) -> TokenResponse:
        try:
            response = await self._http().post(
                f"{self.auth_base_url}{TOKEN_PATH}",
                data=form,
                headers={"Authorization": self._basic_auth(), "User-Agent": self.user_agent},
            )
        except httpx.HTTPError as e:
            raise NetworkError(f"Token endpoint unreachable: {e}") from e

        if response.status_code in (400, 401, 403):
            raise AuthError(f"Authentication failed: HTTP {response.status_code}")
        if response.status_code != 200:
            raise UpstreamError(
                f"Token endpoint returned HTTP {response.status_code}", response.status_code
            )
        try:
            payload = response.json()
            if "error" in payload:
                raise AuthError(f"Authentication failed: {payload['error']}")
            return TokenResponse.model_validate(payload)
        except (ValueError, PydanticValidationError) as e:
            raise UpstreamError(f"Malformed token response: {e}", response.status_code) from e

    async def _fetch_me(self, auth_header: str) -> ContentUser:
        try:
            response = await self._http().get(
                f"{self.api_base_url}{ME_PATH}",
                headers={"Authorization": auth_header, "User-Agent": self.user_agent},
            )
        except httpx.HTTPError as e:
            raise NetworkError(f"Identity endpoint unreachable: {e}") from e

        if response.status_code != 200:
            raise UpstreamError("Failed to get user info", response.status_code)

        try:
            return map_user(response.json())
        except (ValueError, KeyError, PydanticValidationError) as e:
            raise UpstreamError(f"Malformed user info: {e}", response.status_code) from e

    async def close(self) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None
