"""
Opaque key-value storage for persisted state.

The session record and per-user notification preferences are stored as
JSON strings under plain string keys. Backends:

- InMemoryKeyValueStore: process-local dict (tests, single-process use)
- RedisKeyValueStore: redis.asyncio, shared across workers

Any backend failure is raised as StorageError so callers can degrade.
"""

import asyncio
from typing import Optional, Protocol

import redis.asyncio as redis
from redis.exceptions import RedisError

from redditsync.config.settings import settings
from redditsync.errors import StorageError
from redditsync.observability import get_logger

logger = get_logger(__name__)


class KeyValueStore(Protocol):
    """Minimal async key-value contract used by the stores in this package."""

    async def get(self, key: str) -> Optional[str]: ...

    async def set(self, key: str, value: str) -> None: ...

    async def delete(self, *keys: str) -> None: ...


class InMemoryKeyValueStore:
    """Dict-backed store. Each operation is atomic with respect to the others."""

    def __init__(self) -> None:
        self._data: dict[str, str] = {}
        self._lock = asyncio.Lock()

    async def get(self, key: str) -> Optional[str]:
        return self._data.get(key)

    async def set(self, key: str, value: str) -> None:
        async with self._lock:
            self._data[key] = value

    async def delete(self, *keys: str) -> None:
        async with self._lock:
            for key in keys:
                self._data.pop(key, None)

    def __len__(self) -> int:
        return len(self._data)


class RedisKeyValueStore:
    """
    Redis-backed store.

    Example:
        store = RedisKeyValueStore("redis://redis:6379/0", prefix="redditsync:")
        await store.set("auth_session", "{...}")
    """

    def __init__(self, redis_url: str, prefix: str = "") -> None:
        self.redis_url = redis_url
        self.prefix = prefix
        self.redis: Optional[redis.Redis] = None

    @classmethod
    def from_settings(cls) -> "RedisKeyValueStore":
        return cls(settings.REDIS_URL, prefix=settings.REDIS_KEY_PREFIX)

    async def _get_redis(self) -> redis.Redis:
        """Get or create Redis connection."""
        if self.redis is None:
            self.redis = redis.from_url(self.redis_url, decode_responses=True)
        return self.redis

    def _key(self, key: str) -> str:
        return f"{self.prefix}{key}"

    async def get(self, key: str) -> Optional[str]:
        try:
            client = await self._get_redis()
            return await client.get(self._key(key))
        except RedisError as e:
            logger.warning(f"Redis get failed: {e}", extra={"key": key})
            raise StorageError(f"read failed for {key}") from e

    async def set(self, key: str, value: str) -> None:
        try:
            client = await self._get_redis()
            await client.set(self._key(key), value)
        except RedisError as e:
            logger.warning(f"Redis set failed: {e}", extra={"key": key})
            raise StorageError(f"write failed for {key}") from e

    async def delete(self, *keys: str) -> None:
        if not keys:
            return
        try:
            client = await self._get_redis()
            await client.delete(*(self._key(k) for k in keys))
        except RedisError as e:
            logger.warning(f"Redis delete failed: {e}", extra={"keys": list(keys)})
            raise StorageError(f"delete failed for {', '.join(keys)}") from e

    async def close(self) -> None:
        """Close Redis connection."""
        if self.redis:
            await self.redis.aclose()
            self.redis = None
