"""Tests for OAuthClient using httpx.MockTransport."""
import base64
from urllib.parse import parse_qs, urlparse

import httpx
import pytest

from redditsync.errors import AuthError, UpstreamError
from redditsync.session.oauth import OAuthClient

ME = {"id": "u1", "name": "alice", "total_karma": 10, "created_utc": 1_600_000_000, "icon_img": ""}


def make_client(session_store, handler) -> OAuthClient:
    http = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return OAuthClient(
        session_store,
        client_id="cid",
        redirect_uri="app://callback",
        auth_base_url="https://auth.test",
        api_base_url="https://api.test",
        user_agent="tests",
        http_client=http,
    )


def state_from(url: str) -> str:
    return parse_qs(urlparse(url).query)["state"][0]


def test_authorize_url_contains_flow_parameters(session_store):
    oauth = make_client(session_store, lambda request: httpx.Response(500))

    url = oauth.build_authorize_url()
    params = parse_qs(urlparse(url).query)

    assert url.startswith("https://auth.test/api/v1/authorize.compact?")
    assert params["client_id"] == ["cid"]
    assert params["response_type"] == ["code"]
    assert params["duration"] == ["permanent"]
    assert params["scope"] == ["identity read history submit"]
    assert len(params["state"][0]) >= 32


@pytest.mark.asyncio
async def test_callback_exchanges_code_and_saves_session(session_store, clock):
    seen = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        if request.url.path == "/api/v1/access_token":
            return httpx.Response(200, json={
                "access_token": "tok", "token_type": "bearer", "expires_in": 3600,
                "scope": "read", "refresh_token": "r1",
            })
        return httpx.Response(200, json=ME)

    oauth = make_client(session_store, handler)
    state = state_from(oauth.build_authorize_url())

    session = await oauth.handle_callback("the-code", state)

    assert session.access_token == "tok"
    assert session.refresh_token == "r1"
    assert session.username == "alice"
    assert session.expires_at == clock.now + 3_600_000
    assert (await session_store.auth_state()).is_authenticated

    token_request, me_request = seen
    assert token_request.headers["Authorization"] == "Basic " + base64.b64encode(b"cid:").decode()
    assert parse_qs(token_request.content.decode())["grant_type"] == ["authorization_code"]
    assert me_request.headers["Authorization"] == "bearer tok"


@pytest.mark.asyncio
async def test_callback_rejects_state_mismatch(session_store):
    oauth = make_client(session_store, lambda request: httpx.Response(500))
    oauth.build_authorize_url()

    with pytest.raises(AuthError):
        await oauth.handle_callback("code", "forged")

    assert not (await session_store.auth_state()).is_authenticated


@pytest.mark.asyncio
async def test_rejected_exchange_raises_auth_error(session_store):
    oauth = make_client(session_store, lambda request: httpx.Response(401))
    state = state_from(oauth.build_authorize_url())

    with pytest.raises(AuthError):
        await oauth.handle_callback("code", state)


@pytest.mark.asyncio
async def test_refresh_keeps_refresh_token_when_omitted(session_store, clock):
    await session_store.save("old", username="alice", expires_at=clock.now - 1, refresh_token="r1")

    def handler(request: httpx.Request) -> httpx.Response:
        form = parse_qs(request.content.decode())
        assert form["grant_type"] == ["refresh_token"]
        assert form["refresh_token"] == ["r1"]
        return httpx.Response(200, json={"access_token": "new", "expires_in": 60})

    oauth = make_client(session_store, handler)
    session = await oauth.refresh()

    assert session.access_token == "new"
    assert session.refresh_token == "r1"
    assert session.username == "alice"
    assert (await session_store.auth_state()).is_authenticated


@pytest.mark.asyncio
async def test_refresh_without_refresh_token_raises(session_store):
    oauth = make_client(session_store, lambda request: httpx.Response(500))

    with pytest.raises(AuthError):
        await oauth.refresh()


@pytest.mark.asyncio
async def test_malformed_token_response_raises_upstream_error(session_store):
    oauth = make_client(session_store, lambda request: httpx.Response(200, json={"nope": 1}))
    state = state_from(oauth.build_authorize_url())

    with pytest.raises(UpstreamError):
        await oauth.handle_callback("code", state)


@pytest.mark.asyncio
async def test_logout_clears_session(session_store, clock):
    await session_store.save("tok", username="alice", expires_at=clock.now + 60_000)
    oauth = make_client(session_store, lambda request: httpx.Response(500))

    await oauth.logout()

    assert (await session_store.read()).access_token is None
