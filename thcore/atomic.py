"""Thread-safe integer cell used for reference counting."""

from __future__ import annotations

import threading


class AtomicInt:
    """An integer whose operations are atomic with respect to other threads."""

    __slots__ = ("_value", "_lock")

    def __init__(self, value: int = 0) -> None:
        self._value = int(value)
        self._lock = threading.Lock()

    def set(self, new_value: int) -> None:
        """Store ``new_value``."""
        with self._lock:
            self._value = int(new_value)

    def get(self) -> int:
        """Return the current value."""
        with self._lock:
            return self._value

    def add(self, value: int) -> int:
        """Add ``value`` and return the previous value."""
        with self._lock:
            old = self._value
            self._value = old + value
            return old

    def compare_and_swap(self, old_value: int, new_value: int) -> bool:
        """Set to ``new_value`` if currently ``old_value``; report success."""
        with self._lock:
            if self._value == old_value:
                self._value = int(new_value)
                return True
            return False

    def increment_ref(self) -> None:
        """Increase the count by one."""
        self.add(1)

    def decrement_ref(self) -> bool:
        """Decrease the count by one; True if it has reached zero."""
        return self.add(-1) == 1

    def __repr__(self) -> str:
        return f"AtomicInt({self.get()})"