"""
In-memory translation cache.

Maps source text (trimmed of surrounding whitespace) to its translation.
Pure memoization: nothing is persisted across restarts.

Eviction runs once the size exceeds `capacity` and removes the oldest
`eviction_batch_size` entries in one pass. With the default FIFO policy
"oldest" means insertion order, so a frequently read old entry is still
evicted before a cold recent one. LRU is available as an alternative.
"""

import threading
from collections import OrderedDict
from enum import Enum
from typing import Optional

from redditsync.config.constants import CacheConfig
from redditsync.observability import get_logger
from redditsync.observability.metrics import (
    translation_cache_evictions_total,
    translation_cache_size,
)

logger = get_logger(__name__)


class EvictionPolicy(str, Enum):
    FIFO = "fifo"  # insertion order; reads and overwrites keep position
    LRU = "lru"    # reads and writes move the key to the newest position


def normalize(text: str) -> str:
    return text.strip()


class TranslationCache:
    """
    Bounded, thread-safe translation cache.

    `get` returns None on a miss; an empty string is a valid cached value.
    """

    def __init__(
        self,
        capacity: int = CacheConfig.TRANSLATION_CAPACITY,
        eviction_batch_size: int = CacheConfig.TRANSLATION_EVICTION_BATCH,
        policy: EvictionPolicy = EvictionPolicy.FIFO,
    ) -> None:
        if capacity < 1 or eviction_batch_size < 1:
            raise ValueError("capacity and eviction_batch_size must be >= 1")
        self.capacity = capacity
        self.eviction_batch_size = eviction_batch_size
        self.policy = EvictionPolicy(policy)
        self._entries: OrderedDict[str, str] = OrderedDict()
        self._lock = threading.Lock()
        self._hits = 0
        self._misses = 0
        self._evictions = 0

    def get(self, text: str) -> Optional[str]:
        key = normalize(text)
        with self._lock:
            value = self._entries.get(key)
            if value is None:
                self._misses += 1
                return None
            self._hits += 1
            if self.policy is EvictionPolicy.LRU:
                self._entries.move_to_end(key)
            return value

    def put(self, text: str, translated: str) -> None:
        key = normalize(text)
        with self._lock:
            self._entries[key] = translated
            if self.policy is EvictionPolicy.LRU:
                self._entries.move_to_end(key)
            evicted = 0
            if len(self._entries) > self.capacity:
                evicted = self._evict_oldest()
            size = len(self._entries)

        translation_cache_size.set(size)
        if evicted:
            translation_cache_evictions_total.inc(evicted)
            logger.debug(
                "Translation cache evicted oldest entries",
                extra={"evicted": evicted, "size": size},
            )

    def _evict_oldest(self) -> int:
        count = min(self.eviction_batch_size, len(self._entries))
        for _ in range(count):
            self._entries.popitem(last=False)
        self._evictions += count
        return count

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()
        translation_cache_size.set(0)

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def __contains__(self, text: str) -> bool:
        with self._lock:
            return normalize(text) in self._entries

    def stats(self) -> dict:
        with self._lock:
            return {
                "size": len(self._entries),
                "capacity": self.capacity,
                "eviction_batch_size": self.eviction_batch_size,
                "policy": self.policy.value,
                "hits": self._hits,
                "misses": self._misses,
                "evictions": self._evictions,
            }
