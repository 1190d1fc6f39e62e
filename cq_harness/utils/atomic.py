"""Thread-safe primitives shared between delivery threads and waiters.

Every mutation is a single locked operation, so callers never need their own
locking. Readers get a consistent value for one primitive at a time; nothing
here is atomic across several primitives.
"""

import threading
from typing import Any, FrozenSet, Iterable


class AtomicCounter:
    """A monotonically increasing integer counter."""

    def __init__(self, initial: int = 0):
        self._value = initial
        self._lock = threading.Lock()

    def increment(self, delta: int = 1) -> int:
        """Add ``delta`` and return the new value."""
        with self._lock:
            self._value += delta
            return self._value

    @property
    def value(self) -> int:
        with self._lock:
            return self._value

    def __int__(self) -> int:
        return self.value

    def __repr__(self) -> str:
        return f"AtomicCounter({self.value})"


class ConcurrentSet:
    """A set whose add/contains/clear calls are safe across threads."""

    def __init__(self, items: Iterable[Any] = ()):
        self._items = set(items)
        self._lock = threading.Lock()

    def add(self, item: Any) -> None:
        with self._lock:
            self._items.add(item)

    def clear(self) -> None:
        with self._lock:
            self._items.clear()

    def snapshot(self) -> FrozenSet[Any]:
        """Return an immutable copy of the current members."""
        with self._lock:
            return frozenset(self._items)

    def __contains__(self, item: Any) -> bool:
        with self._lock:
            return item in self._items

    def __len__(self) -> int:
        with self._lock:
            return len(self._items)

    def __repr__(self) -> str:
        return f"{{{', '.join(repr(item) for item in self.snapshot())}}}"
