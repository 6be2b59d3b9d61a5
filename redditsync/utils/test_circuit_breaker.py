"""Tests for CircuitBreaker."""
from redditsync.utils.circuit_breaker import Admission, CircuitBreaker, CircuitState


class Clock:
    def __init__(self):
        self.now = 0.0

    def __call__(self):
        return self.now


def make_breaker(threshold=3, recovery=10.0):
    clock = Clock()
    return CircuitBreaker(failure_threshold=threshold, recovery_time=recovery, clock=clock), clock


def test_opens_after_consecutive_failures():
    breaker, _ = make_breaker()

    for _ in range(3):
        assert breaker.allow_request()
        breaker.record_failure()

    assert breaker.state is CircuitState.OPEN
    assert not breaker.allow_request()


def test_success_resets_failure_count():
    breaker, _ = make_breaker()

    breaker.record_failure()
    breaker.record_failure()
    breaker.record_success()
    breaker.record_failure()

    assert breaker.state is CircuitState.CLOSED
    assert breaker.failure_count == 1


def test_half_open_allows_single_trial():
    breaker, clock = make_breaker(threshold=1)
    breaker.record_failure()

    clock.now = 10.0
    assert breaker.allow_request()
    assert breaker.state is CircuitState.HALF_OPEN
    assert not breaker.allow_request()


def test_successful_trial_closes_circuit():
    breaker, clock = make_breaker(threshold=1)
    breaker.record_failure()
    clock.now = 11.0

    assert breaker.allow_request()
    breaker.record_success()

    assert breaker.state is CircuitState.CLOSED
    assert breaker.allow_request()


def test_failed_trial_reopens_circuit():
    breaker, clock = make_breaker(threshold=1)
    breaker.record_failure()
    clock.now = 11.0

    assert breaker.allow_request()
    breaker.record_failure()

    assert breaker.state is CircuitState.OPEN
    assert breaker.opened_at == 11.0
    assert not breaker.allow_request()


def test_released_trial_can_be_retried():
    breaker, clock = make_breaker(threshold=1)
    breaker.record_failure()
    clock.now = 11.0

    assert breaker.allow_request()
    breaker.release_trial()

    assert breaker.allow_request()


def test_stats_and_reset():
    breaker, _ = make_breaker(threshold=1)
    breaker.record_failure()

    stats = breaker.get_stats()
    assert stats["state"] == "open"
    assert stats["times_opened"] == 1
    assert stats["total_failures"] == 1

    breaker.reset()
    assert breaker.state is CircuitState.CLOSED
    assert breaker.allow_request()


def test_admission_kinds():
    breaker, clock = make_breaker(threshold=1)

    assert breaker.admit() is Admission.NORMAL
    breaker.record_failure()
    assert breaker.admit() is Admission.REJECTED

    clock.now = 10.0
    assert breaker.admit() is Admission.TRIAL
    assert breaker.admit() is Admission.REJECTED


def test_only_the_trial_is_released():
    breaker, clock = make_breaker(threshold=1)
    ordinary = breaker.admit()
    breaker.record_failure()
    clock.now = 10.0
    trial = breaker.admit()

    # the ordinary call is cancelled: it holds no trial slot to give back
    if ordinary is Admission.TRIAL:
        breaker.release_trial()
    assert breaker.admit() is Admission.REJECTED

    if trial is Admission.TRIAL:
        breaker.release_trial()
    assert breaker.admit() is Admission.TRIAL
