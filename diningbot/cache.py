"""Thread-safe in-memory cache of menu results with a time-to-live."""

import threading
import time
from dataclasses import dataclass
from datetime import timedelta


@dataclass(frozen=True)
class _Entry:
    items: tuple[str, ...]
    stamp: float


class MenuCache:
    """Caches menu item lists keyed by location, date and meal type."""

    def __init__(self, ttl):
        """Create a cache whose entries expire after ``ttl`` seconds (or a timedelta)."""
        if isinstance(ttl, timedelta):
            ttl = ttl.total_seconds()
        self.ttl = float(ttl)
        self._lock = threading.Lock()
        self._entries: dict[tuple[str, str, str], _Entry] = {}

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def _expired(self, entry: _Entry, now: float) -> bool:
        return now - entry.stamp > self.ttl

    def get(self, location, date, meal_type):
        """Return a copy of the cached items, or None on a miss or expiry."""
        with self._lock:
            entry = self._entries.get((location, date, meal_type))
            if entry is None or self._expired(entry, time.monotonic()):
                return None
            return list(entry.items)

    def set(self, location, date, meal_type, items):
        """Store a copy of ``items`` for the given key."""
        entry = _Entry(tuple(items), time.monotonic())
        with self._lock:
            self._entries[(location, date, meal_type)] = entry

    def clear(self):
        """Remove every entry."""
        with self._lock:
            self._entries.clear()

    def clean_expired(self):
        """Remove entries whose time-to-live has passed."""
        now = time.monotonic()
        with self._lock:
            self._entries = {
                key: entry
                for key, entry in self._entries.items()
                if not self._expired(entry, now)
            }