"""
Translation gateway with graceful fallback.

`translate` always succeeds: short or blank text, an open circuit, a
network error, a non-success response, a timeout or an empty result all
yield the original text. Callers never handle translation failure.

Order of checks:
1. blank or shorter than `min_length` -> original, no call
2. cache hit -> cached value, no call
3. circuit open -> original, no call
4. endpoint call bounded by `timeout`; non-empty results are cached

A cancelled call propagates CancelledError and writes nothing to the cache.
"""

import asyncio
import time
from typing import Optional

from redditsync.config.settings import settings
from redditsync.errors import NetworkError, UpstreamError
from redditsync.models.content import Post
from redditsync.observability import get_logger, record_translation, record_translation_error
from redditsync.observability.metrics import translation_duration_seconds
from redditsync.utils.circuit_breaker import Admission, CircuitBreaker

from .cache import EvictionPolicy, TranslationCache
from .client import TranslationApiClient

logger = get_logger(__name__)


class TranslationGateway:
    """Cache-first translation with fallback to the original text."""

    def __init__(
        self,
        cache: TranslationCache,
        client: TranslationApiClient,
        timeout: float = settings.TRANSLATION_TIMEOUT_SECONDS,
        min_length: int = settings.TRANSLATION_MIN_LENGTH,
        source_lang: str = settings.TRANSLATION_SOURCE_LANG,
        target_lang: str = settings.TRANSLATION_TARGET_LANG,
        breaker: Optional[CircuitBreaker] = None,
    ) -> None:
        self.cache = cache
        self.client = client
        self.timeout = timeout
        self.min_length = min_length
        self.source_lang = source_lang
        self.target_lang = target_lang
        self.breaker = breaker or CircuitBreaker(
            failure_threshold=settings.TRANSLATION_BREAKER_THRESHOLD,
            recovery_time=settings.TRANSLATION_BREAKER_RECOVERY_SECONDS,
        )

    @classmethod
    def from_settings(cls) -> "TranslationGateway":
        """Build a gateway, cache and client from the global settings."""
        if not settings.translation_configured:
            logger.warning("TRANSLATION_API_KEY not set, translation calls will likely be rejected")
        cache = TranslationCache(
            capacity=settings.TRANSLATION_CACHE_CAPACITY,
            eviction_batch_size=settings.TRANSLATION_CACHE_EVICTION_BATCH,
            policy=EvictionPolicy(settings.TRANSLATION_CACHE_POLICY),
        )
        return cls(cache=cache, client=TranslationApiClient())

    def is_translatable(self, text: Optional[str]) -> bool:
        return bool(text) and not text.isspace() and len(text) >= self.min_length

    async def translate(
        self,
        text: str,
        source_lang: Optional[str] = None,
        target_lang: Optional[str] = None,
    ) -> str:
        if not self.is_translatable(text):
            record_translation("passthrough")
            return text

        cached = self.cache.get(text)
        if cached is not None:
            record_translation("cache_hit")
            return cached

        admission = self.breaker.admit()
        if admission is Admission.REJECTED:
            record_translation("circuit_open")
            return text

        source = source_lang or self.source_lang
        target = target_lang or self.target_lang
        started = time.monotonic()
        try:
            translated = await asyncio.wait_for(
                self.client.translate(text, source, target), timeout=self.timeout
            )
        except asyncio.CancelledError:
            if admission is Admission.TRIAL:
                self.breaker.release_trial()
            raise
        except asyncio.TimeoutError:
            return self._fallback(text, "timeout", f"timed out after {self.timeout}s")
        except UpstreamError as e:
            return self._fallback(text, "upstream", str(e))
        except NetworkError as e:
            return self._fallback(text, "network", str(e))
        except Exception as e:
            return self._fallback(text, "unexpected", repr(e))
        finally:
            translation_duration_seconds.observe(time.monotonic() - started)

        if not translated or not translated.strip():
            return self._fallback(text, "empty", "empty translation")

        self.breaker.record_success()
        self.cache.put(text, translated)
        record_translation("translated")
        return translated

    def _fallback(self, text: str, error_type: str, detail: str) -> str:
        self.breaker.record_failure()
        record_translation_error(error_type)
        record_translation("fallback")
        logger.warning(
            f"Translation unavailable, using original text: {detail}",
            extra={"error_type": error_type, "chars": len(text)},
        )
        return text

    async def translate_post(self, post: Post) -> Post:
        """Fill in title/selftext translations that are still missing."""
        if not post.needs_translation:
            return post

        title_translated = post.title_translated
        selftext_translated = post.selftext_translated
        if title_translated is None:
            title_translated = await self.translate(post.title)
        if post.selftext is not None and selftext_translated is None:
            selftext_translated = await self.translate(post.selftext)

        return post.model_copy(update={
            "title_translated": title_translated,
            "selftext_translated": selftext_translated,
        })
