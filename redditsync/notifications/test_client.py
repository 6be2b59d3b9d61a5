"""Tests for NotificationClient."""
import json
from datetime import datetime
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from redditsync.errors import StorageError
from redditsync.models.notification import NotificationCategory

from .client import NotificationClient
from .preferences import NotificationPreferencesStore

NOON = datetime(2026, 3, 14, 12, 0)
LATE = datetime(2026, 3, 14, 23, 30)


@pytest.fixture
def mock_redis():
    """Mock Redis client."""
    redis = MagicMock()
    redis.publish = AsyncMock()
    redis.aclose = AsyncMock()
    return redis


@pytest.fixture
def prefs_store(kv_store):
    return NotificationPreferencesStore(kv_store)


@pytest.mark.asyncio
async def test_dispatch_publishes_event(mock_redis, prefs_store):
    """Allowed notification should be published to the channel."""
    with patch("redditsync.notifications.client.Redis.from_url", return_value=mock_redis):
        client = NotificationClient(prefs_store, "redis://localhost", channel="push:test")

        outcome = await client.dispatch(
            "u1", NotificationCategory.MENTIONS, "Mentioned", "in r/python",
            data={"post_id": "p1"}, now=NOON,
        )

        assert outcome.status == "sent"
        channel, payload = mock_redis.publish.call_args[0]
        assert channel == "push:test"
        event = json.loads(payload)
        assert event["user_id"] == "u1"
        assert event["category"] == "mentions"
        assert event["data"] == {"post_id": "p1"}
        assert "timestamp" in event


@pytest.mark.asyncio
async def test_quiet_hours_suppress_dispatch(mock_redis, prefs_store):
    """Notifications inside quiet hours are recorded but not published."""
    await prefs_store.update("u1", {"quietHours": {"enabled": True, "start": "22:00", "end": "08:00"}})

    with patch("redditsync.notifications.client.Redis.from_url", return_value=mock_redis):
        client = NotificationClient(prefs_store, "redis://localhost")

        outcome = await client.dispatch("u1", NotificationCategory.NEW_POSTS, "t", "b", now=LATE)

        assert outcome.status == "skipped"
        assert outcome.reason == "quiet_hours"
        assert not mock_redis.publish.called


@pytest.mark.asyncio
async def test_disabled_category_skipped(mock_redis, prefs_store):
    with patch("redditsync.notifications.client.Redis.from_url", return_value=mock_redis):
        client = NotificationClient(prefs_store, "redis://localhost")

        outcome = await client.dispatch("u1", NotificationCategory.UPVOTES, "t", "b", now=NOON)

        assert outcome.reason == "category_disabled"
        assert not mock_redis.publish.called


@pytest.mark.asyncio
async def test_publish_failure_is_recorded_not_raised(mock_redis, prefs_store):
    """Redis publish failure should not crash (fire-and-forget)."""
    mock_redis.publish.side_effect = Exception("Redis connection failed")

    with patch("redditsync.notifications.client.Redis.from_url", return_value=mock_redis):
        client = NotificationClient(prefs_store, "redis://localhost")

        outcome = await client.dispatch("u1", NotificationCategory.MENTIONS, "t", "b", now=NOON)

        assert outcome.status == "failed"
        assert outcome.reason == "transport_error"


@pytest.mark.asyncio
async def test_unreadable_preferences_skip_dispatch(mock_redis):
    store = MagicMock()
    store.get = AsyncMock(side_effect=StorageError("down"))

    with patch("redditsync.notifications.client.Redis.from_url", return_value=mock_redis):
        client = NotificationClient(store, "redis://localhost")

        outcome = await client.dispatch("u1", NotificationCategory.MENTIONS, "t", "b", now=NOON)

        assert outcome.status == "skipped"
        assert outcome.reason == "preferences_unavailable"
        assert not mock_redis.publish.called


@pytest.mark.asyncio
async def test_history_newest_first_and_bounded(mock_redis, prefs_store):
    with patch("redditsync.notifications.client.Redis.from_url", return_value=mock_redis):
        client = NotificationClient(prefs_store, "redis://localhost", history_limit=2)

        for title in ("first", "second", "third"):
            await client.dispatch("u1", NotificationCategory.MENTIONS, title, "b", now=NOON)

        assert [o.title for o in client.history("u1")] == ["third", "second"]
        assert [o.title for o in client.history("u1", limit=1)] == ["third"]
        assert client.history("u2") == []


@pytest.mark.asyncio
async def test_redis_connection_reused_and_closed(mock_redis, prefs_store):
    with patch("redditsync.notifications.client.Redis.from_url", return_value=mock_redis) as from_url:
        client = NotificationClient(prefs_store, "redis://localhost")

        await client.dispatch("u1", NotificationCategory.MENTIONS, "a", "b", now=NOON)
        await client.dispatch("u1", NotificationCategory.MENTIONS, "c", "d", now=NOON)
        await client.close()

        assert from_url.call_count == 1
        mock_redis.aclose.assert_awaited_once()
        assert client.redis is None


@pytest.mark.asyncio
async def test_history_offset_pages_through_outcomes(mock_redis, prefs_store):
    with patch("redditsync.notifications.client.Redis.from_url", return_value=mock_redis):
        client = NotificationClient(prefs_store, "redis://localhost")

        for title in ("first", "second", "third", "fourth"):
            await client.dispatch("u1", NotificationCategory.MENTIONS, title, "b", now=NOON)

        assert [o.title for o in client.history("u1", limit=2, offset=1)] == ["third", "second"]
        assert [o.title for o in client.history("u1", offset=3)] == ["first"]
        assert client.history("u1", offset=10) == []


@pytest.mark.asyncio
async def test_history_drops_least_recently_notified_users(mock_redis, prefs_store):
    with patch("redditsync.notifications.client.Redis.from_url", return_value=mock_redis):
        client = NotificationClient(prefs_store, "redis://localhost", max_history_users=2)

        await client.dispatch("u1", NotificationCategory.MENTIONS, "a", "b", now=NOON)
        await client.dispatch("u2", NotificationCategory.MENTIONS, "a", "b", now=NOON)
        await client.dispatch("u1", NotificationCategory.MENTIONS, "c", "d", now=NOON)
        await client.dispatch("u3", NotificationCategory.MENTIONS, "a", "b", now=NOON)

        assert client.history("u2") == []
        assert [o.title for o in client.history("u1")] == ["c", "a"]
        assert len(client.history("u3")) == 1
