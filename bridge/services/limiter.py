"""Admission control for the processing pipeline."""

from __future__ import annotations

import threading
from contextlib import contextmanager
from typing import Iterator

from bridge.errors import CapacityExceededError


class CapacityLimiter:
    """Fixed-size counting gate that rejects instead of queueing.

    ``try_acquire`` never blocks: it either takes one of ``capacity`` tokens
    or returns ``False``. Every successful acquire must be paired with exactly
    one ``release``; prefer :meth:`admission`, which guarantees that.
    """

    def __init__(self, capacity: int) -> None:
        if capacity < 1:
            raise ValueError("capacity must be at least 1")
        self._capacity = capacity
        self._in_flight = 0
        self._lock = threading.Lock()

    @property
    def capacity(self) -> int:
        return self._capacity

    @property
    def in_flight(self) -> int:
        with self._lock:
            return self._in_flight

    @property
    def available(self) -> int:
        with self._lock:
            return self._capacity - self._in_flight

    def try_acquire(self) -> bool:
        with self._lock:
            if self._in_flight >= self._capacity:
                return False
            self._in_flight += 1
            return True

    def release(self) -> None:
        with self._lock:
            if self._in_flight == 0:
                raise RuntimeError("release() called without a matching acquire")
            self._in_flight -= 1

    @contextmanager
    def admission(self) -> Iterator[None]:
        """Hold one token for the body of the ``with`` block."""

        if not self.try_acquire():
            raise CapacityExceededError()
        try:
            yield
        finally:
            self.release()


__all__ = ["CapacityLimiter"]
