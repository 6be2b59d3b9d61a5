"""
Circuit Breaker for the translation endpoint.

Translation is an enhancement, so when the endpoint keeps failing the
gateway stops calling it for a while and serves original text instead.

States:
- CLOSED: Normal operation, requests flow through
- OPEN: Circuit tripped, requests skipped (fast fallback)
- HALF_OPEN: Recovery window elapsed, one trial request allowed

Usage:
    breaker = CircuitBreaker(failure_threshold=5, recovery_time=60)

    if not breaker.allow_request():
        return original_text

    try:
        result = await call()
        breaker.record_success()
    except NetworkError:
        breaker.record_failure()
"""

import threading
import time
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Optional

from redditsync.observability import get_logger

logger = get_logger(__name__)


class CircuitState(Enum):
    """Circuit breaker states."""
    CLOSED = "closed"
    OPEN = "open"
    HALF_OPEN = "half_open"


class Admission(Enum):
    """Outcome of asking the breaker for permission to call."""
    REJECTED = "rejected"
    NORMAL = "normal"
    TRIAL = "trial"


@dataclass
class CircuitBreaker:
    """
    Tracks consecutive failures of one remote dependency.

    Attributes:
        failure_threshold: Consecutive failures that open the circuit
        recovery_time: Seconds the circuit stays open before a trial request
        name: Label used in log messages
        clock: Monotonic time source (seconds)
    """

    failure_threshold: int = 5
    recovery_time: float = 60.0
    name: str = "translation"
    clock: Callable[[], float] = time.monotonic

    state: CircuitState = field(default=CircuitState.CLOSED)
    failure_count: int = field(default=0)
    opened_at: Optional[float] = field(default=None)
    trial_in_flight: bool = field(default=False)

    total_successes: int = field(default=0)
    total_failures: int = field(default=0)
    times_opened: int = field(default=0)

    _lock: threading.Lock = field(default_factory=threading.Lock, repr=False)

    def admit(self) -> Admission:
        """
        Decide whether a call may go out now.

        An OPEN circuit whose recovery time has elapsed moves to HALF_OPEN
        and admits exactly one call as the trial. Only the holder of a
        TRIAL admission may hand it back with `release_trial`.
        """
        with self._lock:
            if self.state is CircuitState.CLOSED:
                return Admission.NORMAL
            if self.state is CircuitState.OPEN:
                if self.clock() - (self.opened_at or 0.0) < self.recovery_time:
                    return Admission.REJECTED
                self.state = CircuitState.HALF_OPEN
                logger.info(f"CircuitBreaker[{self.name}]: OPEN → HALF_OPEN (allowing trial request)")
            if self.trial_in_flight:
                return Admission.REJECTED
            self.trial_in_flight = True
            return Admission.TRIAL

    def allow_request(self) -> bool:
        """True if a call may go out now. See `admit`."""
        return self.admit() is not Admission.REJECTED

    def record_success(self) -> None:
        with self._lock:
            self.failure_count = 0
            self.total_successes += 1
            self.trial_in_flight = False
            if self.state is not CircuitState.CLOSED:
                self.state = CircuitState.CLOSED
                self.opened_at = None
                logger.info(f"CircuitBreaker[{self.name}]: → CLOSED (endpoint recovered)")

    def record_failure(self) -> None:
        with self._lock:
            self.failure_count += 1
            self.total_failures += 1
            was_trial = self.trial_in_flight
            self.trial_in_flight = False
            if self.state is CircuitState.HALF_OPEN and was_trial:
                self._open("trial request failed")
            elif self.state is CircuitState.CLOSED and self.failure_count >= self.failure_threshold:
                self._open(f"{self.failure_count} consecutive failures")

    def release_trial(self) -> None:
        """Give back a TRIAL admission whose request was cancelled."""
        with self._lock:
            self.trial_in_flight = False

    def _open(self, reason: str) -> None:
        self.state = CircuitState.OPEN
        self.opened_at = self.clock()
        self.times_opened += 1
        logger.warning(f"CircuitBreaker[{self.name}]: → OPEN ({reason})")

    def reset(self) -> None:
        with self._lock:
            self.state = CircuitState.CLOSED
            self.failure_count = 0
            self.opened_at = None
            self.trial_in_flight = False

    def get_stats(self) -> dict:
        with self._lock:
            return {
                "state": self.state.value,
                "failure_count": self.failure_count,
                "total_successes": self.total_successes,
                "total_failures": self.total_failures,
                "times_opened": self.times_opened,
                "thresholds": {
                    "failure_threshold": self.failure_threshold,
                    "recovery_time": self.recovery_time,
                },
            }
