"""Shared fixtures for redditsync tests."""
import pytest

from redditsync.session.store import SessionStore
from redditsync.storage.kv import InMemoryKeyValueStore
from redditsync.testing import FakeClock, StubTranslationClient
from redditsync.translation.cache import TranslationCache
from redditsync.translation.gateway import TranslationGateway
from redditsync.utils.circuit_breaker import CircuitBreaker


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def kv_store():
    return InMemoryKeyValueStore()


@pytest.fixture
def session_store(kv_store, clock):
    return SessionStore(kv_store, clock=clock)


@pytest.fixture
def stub_client():
    return StubTranslationClient()


@pytest.fixture
def cache():
    return TranslationCache()


@pytest.fixture
def gateway(cache, stub_client):
    return TranslationGateway(
        cache=cache,
        client=stub_client,
        timeout=1.0,
        min_length=3,
        source_lang="en",
        target_lang="ja",
        breaker=CircuitBreaker(failure_threshold=100, recovery_time=60),
    )
