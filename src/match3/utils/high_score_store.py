from __future__ import annotations

import threading
from typing import Protocol


class HighScoreStoreError(Exception):
    """Raised by store adapters when the backing storage cannot be read or written."""


class HighScoreStore(Protocol):
    """Persistence boundary for the best score. Adapters live outside the engine."""

    def get_high_score(self) -> int:
        """Return the stored high score, or 0 if none was ever saved."""
        ...

    def save_high_score(self, score: int) -> bool:
        """Store ``score`` if it beats the stored value; return whether it did."""
        ...


class InMemoryHighScoreStore:
    """Process-local store, useful for tests and headless runs."""

    def __init__(self, initial: int = 0):
        if initial < 0:
            raise ValueError(f"High score must not be negative, got {initial}")
        self._value = initial
        self._lock = threading.Lock()

    def get_high_score(self) -> int:
        with self._lock:
            return self._value

    def save_high_score(self, score: int) -> bool:
        with self._lock:
            # Re-check under the lock; the caller's idea of the record may be stale.
            if score <= self._value:
                return False
            self._value = score
            return True
