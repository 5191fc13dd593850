"""A value shared between threads, guarded by a lock and a condition."""

from __future__ import annotations

import threading
import time
from typing import Generic, TypeVar

T = TypeVar("T")


class SharedValue(Generic[T]):
    """Holds one value; reads and writes take a lock, writers may wake waiters."""

    def __init__(self, value: T | None = None) -> None:
        self._value = value
        self._last_copy = value
        self.lock = threading.Lock()
        self._signal = threading.Condition(self.lock)

    def assign(self, value: T) -> None:
        """Set the value."""
        with self._signal:
            self._value = self._last_copy = value

    def assign_and_notify_all(self, value: T) -> None:
        """Set the value and wake every thread waiting for a signal."""
        with self._signal:
            self._value = value
            self._signal.notify_all()

    def notify_all(self) -> None:
        """Wake every thread waiting for a signal."""
        with self._signal:
            self._signal.notify_all()

    def get(self) -> T:
        """Return the current value."""
        with self._signal:
            self._last_copy = self._value
            return self._last_copy

    def wait_for_signal(self, timeout: float | None = None) -> T:
        """Block until notified, then return the value.

        Raises ``TimeoutError`` if ``timeout`` seconds pass without a signal.
        """
        with self._signal:
            if not self._signal.wait(timeout):
                raise TimeoutError("no signal received")
            self._last_copy = self._value
            return self._last_copy

    def get_after(self, wait_us: int = 33000) -> T:
        """Sleep ``wait_us`` microseconds, then return the value."""
        time.sleep(wait_us / 1_000_000)
        return self.get()

    def increment(self) -> None:
        """Add one to the value."""
        with self._signal:
            self._value += 1

    def add(self, other) -> None:
        """Add ``other`` to the value."""
        with self._signal:
            self._value += other