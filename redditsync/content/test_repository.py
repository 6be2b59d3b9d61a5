"""End-to-end tests for ContentRepository."""
import httpx
import pytest

from redditsync.content.client import ContentApiClient
from redditsync.content.fixtures import comment, comments_payload
from redditsync.content.repository import ContentRepository
from redditsync.errors import AuthError, NetworkError, UpstreamError, ValidationError
from redditsync.testing import StubTranslationClient
from redditsync.translation.gateway import TranslationGateway
from redditsync.translation.tree import TreeTranslator

HOUR_MS = 3_600_000


def make_repository(session_store, gateway, handler) -> ContentRepository:
    http = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    client = ContentApiClient(base_url="https://api.test", http_client=http)
    return ContentRepository(session_store, client, gateway, TreeTranslator(gateway, max_concurrency=2))


@pytest.mark.asyncio
async def test_post_detail_filters_and_translates(session_store, clock, gateway):
    await session_store.save("tok", username="alice", expires_at=clock.now + HOUR_MS)
    payload = comments_payload([
        comment("c1", "[deleted]"),
        comment("c2", "A valid comment", replies=[comment("c3", "A valid reply", depth=1)]),
    ])
    repo = make_repository(session_store, gateway, lambda r: httpx.Response(200, json=payload))

    post, comments = await repo.post_detail("python", "p1")

    assert post.title_translated == "[ja] Interesting post title"
    assert [c.id for c in comments] == ["c2"]
    valid = comments[0]
    assert valid.body_translated == "[ja] A valid comment"
    reply = valid.replies[0]
    assert reply.id == "c3"
    assert reply.depth == valid.depth + 1
    assert reply.body_translated == "[ja] A valid reply"


@pytest.mark.asyncio
async def test_post_detail_without_translation_skips_gateway(session_store, clock, gateway, stub_client):
    await session_store.save("tok", username="alice", expires_at=clock.now + HOUR_MS)
    payload = comments_payload([comment("c2", "A valid comment")])
    repo = make_repository(session_store, gateway, lambda r: httpx.Response(200, json=payload))

    _, comments = await repo.post_detail("python", "p1", translate=False)

    assert comments[0].body_translated is None
    assert stub_client.calls == []


@pytest.mark.asyncio
async def test_expired_session_raises_auth_error(session_store, clock, gateway):
    await session_store.save("tok", username="alice", expires_at=clock.now - 1)
    repo = make_repository(session_store, gateway, lambda r: httpx.Response(200, json={}))

    with pytest.raises(AuthError):
        await repo.home_feed()


@pytest.mark.asyncio
async def test_content_errors_surface_to_caller(session_store, clock, gateway):
    await session_store.save("tok", username="alice", expires_at=clock.now + HOUR_MS)
    repo = make_repository(session_store, gateway, lambda r: httpx.Response(500))

    with pytest.raises(UpstreamError):
        await repo.post_detail("python", "p1")


@pytest.mark.asyncio
async def test_top_posts_passes_time_window(session_store, clock, gateway):
    await session_store.save("tok", username="alice", expires_at=clock.now + HOUR_MS)
    seen = []

    def handler(request):
        seen.append(request)
        return httpx.Response(200, json={"data": {"children": [], "after": None}})

    repo = make_repository(session_store, gateway, handler)
    listing = await repo.top_posts("python", time="week")

    assert listing.items == []
    assert seen[0].url.params["t"] == "week"
    assert seen[0].url.path == "/r/python/top.json"

    with pytest.raises(ValidationError):
        await repo.top_posts("python", time="decade")


@pytest.mark.asyncio
async def test_translation_outage_still_returns_content(session_store, clock, cache):

    await session_store.save("tok", username="alice", expires_at=clock.now + HOUR_MS)
    gateway = TranslationGateway(cache=cache, client=StubTranslationClient(error=NetworkError("down")))
    payload = comments_payload([comment("c2", "A valid comment")])
    repo = make_repository(session_store, gateway, lambda r: httpx.Response(200, json=payload))

    post, comments = await repo.post_detail("python", "p1")

    assert post.title_translated == post.title
    assert comments[0].body_translated == "A valid comment"


@pytest.mark.asyncio
async def test_post_detail_sort_is_forwarded_and_validated(session_store, clock, gateway):
    await session_store.save("tok", username="alice", expires_at=clock.now + HOUR_MS)
    seen = []

    def handler(request):
        seen.append(request)
        return httpx.Response(200, json=comments_payload([]))

    repo = make_repository(session_store, gateway, handler)
    await repo.post_detail("python", "p1", translate=False, sort="new")

    assert seen[0].url.params["sort"] == "new"

    with pytest.raises(ValidationError):
        await repo.post_detail("python", "p1", sort="sideways")
