"""Cross-stage shared state: a counter and the cancellation flag.

These are the only mutable objects shared between stages. Both are handed to
each ``ActionRunner`` by reference and mutated only through their methods.

Dependencies: (none, leaf module)
Wired in: pipeline/actions.py, pipeline/driver.py, cli.py
"""

from __future__ import annotations

import threading


class SharedCounter:
    """Integer counter with atomic increments."""

    def __init__(self, start: int = 0) -> None:
        self._value = start
        self._lock = threading.Lock()

    def increment(self, amount: int = 1) -> int:
        """Add ``amount`` and return the new value."""
        with self._lock:
            self._value += amount
            return self._value

    @property
    def value(self) -> int:
        with self._lock:
            return self._value

    def __repr__(self) -> str:
        return f"SharedCounter({self.value})"


class CancelSignal:
    """Level-triggered cancellation flag.

    Single writer (normally a SIGINT handler), many readers. Once set it stays
    set. Reads never block. Backed by ``threading.Event`` so setting it from a
    signal handler or another thread is safe.
    """

    def __init__(self) -> None:
        self._event = threading.Event()

    def set(self) -> None:
        self._event.set()

    def is_set(self) -> bool:
        return self._event.is_set()
