"""Key-value storage backends."""
from .kv import InMemoryKeyValueStore, KeyValueStore, RedisKeyValueStore

__all__ = ["InMemoryKeyValueStore", "KeyValueStore", "RedisKeyValueStore"]
