"""Test doubles shared by the test suites."""
import asyncio
from typing import Callable, Optional

NOW_MS = 1_760_000_000_000


class FakeClock:
    """Settable millisecond clock."""

    def __init__(self, now: int = NOW_MS) -> None:
        self.now = now

    def __call__(self) -> int:
        return self.now

    def advance(self, ms: int) -> None:
        self.now += ms


class StubTranslationClient:
    """Call-counting stand-in for TranslationApiClient."""

    def __init__(
        self,
        translate_fn: Optional[Callable[[str], str]] = None,
        error: Optional[BaseException] = None,
        delay: float = 0.0,
    ) -> None:
        self.translate_fn = translate_fn or (lambda text: f"[ja] {text}")
        self.error = error
        self.delay = delay
        self.calls: list[tuple[str, str, str]] = []
        self.in_flight = 0
        self.max_in_flight = 0

    async def translate(self, text: str, source: str, target: str) -> str:
        self.calls.append((text, source, target))
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        try:
            if self.delay:
                await asyncio.sleep(self.delay)
            if self.error is not None:
                raise self.error
            return self.translate_fn(text)
        finally:
            self.in_flight -= 1
