"""Thread-safe counter primitives backing the per-class token store.

Every method of :class:`ConcurrentCounterMap` is atomic on its own, and
:class:`AtomicCounter` is atomic on its own, but nothing makes a map update
and the matching counter update atomic *together*. A reader that looks at
both in quick succession may observe one update without the other. Callers
treat this as a short staleness window of a statistical counter.
"""

from __future__ import annotations

import threading
from collections.abc import Hashable


class AtomicCounter:
    """Integer counter with atomic increment and decrement."""

    def __init__(self, initial: int = 0) -> None:
        self._value = initial
        self._lock = threading.Lock()

    @property
    def value(self) -> int:
        return self._value

    def increment(self, amount: int = 1) -> int:
        with self._lock:
            self._value += amount
            return self._value

    def decrement(self, amount: int = 1) -> int:
        with self._lock:
            self._value -= amount
            return self._value

    def reset(self) -> None:
        with self._lock:
            self._value = 0

    def __int__(self) -> int:
        return self._value


class ConcurrentCounterMap:
    """Mapping of keys to non-negative counts with compare-and-swap updates."""

    def __init__(self) -> None:
        self._counts: dict[Hashable, int] = {}
        self._lock = threading.Lock()

    def add_or_increment(self, key: Hashable) -> int:
        """Create the entry at 1 or increment it; returns the new count."""

        with self._lock:
            count = self._counts.get(key, 0) + 1
            self._counts[key] = count
            return count

    def try_get(self, key: Hashable) -> int | None:
        return self._counts.get(key)

    def try_update(self, key: Hashable, new_value: int, expected: int) -> bool:
        """Replace the count only if it still equals ``expected``."""

        with self._lock:
            if self._counts.get(key) != expected:
                return False
            self._counts[key] = new_value
            return True

    def remove_if_equal(self, key: Hashable, value: int) -> bool:
        with self._lock:
            if self._counts.get(key) != value:
                return False
            del self._counts[key]
            return True

    def try_remove(self, key: Hashable) -> int | None:
        """Remove the entry and return its last count, or None when absent."""

        with self._lock:
            return self._counts.pop(key, None)

    def snapshot(self) -> list[tuple[Hashable, int]]:
        with self._lock:
            return list(self._counts.items())

    def clear(self) -> None:
        with self._lock:
            self._counts.clear()

    def __contains__(self, key: object) -> bool:
        return key in self._counts

    def __len__(self) -> int:
        return len(self._counts)


__all__ = ["AtomicCounter", "ConcurrentCounterMap"]
