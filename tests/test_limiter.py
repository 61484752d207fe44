"""Tests for the non-blocking capacity limiter."""

from __future__ import annotations

import threading

import pytest

from bridge.errors import CapacityExceededError
from bridge.services import CapacityLimiter


def test_try_acquire_takes_tokens_until_full():
    limiter = CapacityLimiter(3)

    assert [limiter.try_acquire() for _ in range(4)] == [True, True, True, False]
    assert limiter.in_flight == 3
    assert limiter.available == 0


def test_release_admits_exactly_one_more():
    limiter = CapacityLimiter(2)
    limiter.try_acquire()
    limiter.try_acquire()

    limiter.release()

    assert limiter.try_acquire() is True
    assert limiter.try_acquire() is False


def test_release_without_acquire_is_an_error():
    limiter = CapacityLimiter(1)

    with pytest.raises(RuntimeError):
        limiter.release()


@pytest.mark.parametrize("capacity", [0, -1])
def test_capacity_must_be_positive(capacity):
    with pytest.raises(ValueError):
        CapacityLimiter(capacity)


def test_admission_releases_on_success_and_failure():
    limiter = CapacityLimiter(1)

    with limiter.admission():
        assert limiter.in_flight == 1
    assert limiter.in_flight == 0

    with pytest.raises(KeyError):
        with limiter.admission():
            raise KeyError("boom")
    assert limiter.in_flight == 0


def test_admission_rejects_when_full_without_consuming_a_token():
    limiter = CapacityLimiter(1)
    limiter.try_acquire()

    with pytest.raises(CapacityExceededError) as excinfo:
        with limiter.admission():
            pytest.fail("body must not run when the gate is full")

    assert excinfo.value.status_code == 503
    assert limiter.in_flight == 1


def test_concurrent_acquires_never_exceed_capacity():
    limiter = CapacityLimiter(5)
    start = threading.Barrier(20)
    results: list[bool] = []
    results_lock = threading.Lock()

    def worker():
        start.wait()
        acquired = limiter.try_acquire()
        with results_lock:
            results.append(acquired)

    threads = [threading.Thread(target=worker) for _ in range(20)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert results.count(True) == 5
    assert results.count(False) == 15
    assert limiter.in_flight == 5
