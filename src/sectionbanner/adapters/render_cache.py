"""Adapter: in-memory render cache with tag invalidation."""

from __future__ import annotations

import threading
import time
from dataclasses import dataclass, field
from typing import Any

from ..models.responses import CACHE_PERMANENT

INVALIDATIONS_KEY = "section_banner.cache_invalidations"

_MISSING = object()


@dataclass
class _Entry:
    value: Any
    tags: tuple[str, ...]
    checksum: int
    expires_at: float | None = field(default=None)


class TagAwareMemoryCache:
    """Cache entries keyed by string, invalidated by tag or by max-age.

    Each tag carries an invalidation counter; an entry is valid only while
    the sum of its tags' counters equals the sum recorded when it was set.

    Given a key-value ``state`` store, the counters live there instead of in
    this process, so an invalidation made by any process sharing that store
    (studio server, CLI) stales entries cached here.
    """

    def __init__(self, max_size: int = 1000, state: Any = None, state_key: str = INVALIDATIONS_KEY) -> None:
        self._entries: dict[str, _Entry] = {}
        self._invalidations: dict[str, int] = {}
        self._max_size = max_size
        self._state = state
        self._state_key = state_key
        self._lock = threading.Lock()

    def _counters(self) -> dict[str, int]:
        if self._state is None:
            return self._invalidations
        stored = self._state.get(self._state_key, {})
        return stored if isinstance(stored, dict) else {}

    @staticmethod
    def _checksum(tags: tuple[str, ...], counters: dict[str, int]) -> int:
        return sum(int(counters.get(tag, 0)) for tag in tags)

    def get(self, key: str, default: Any = None) -> Any:
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return default
            stale = entry.checksum != self._checksum(entry.tags, self._counters())
            expired = entry.expires_at is not None and time.monotonic() >= entry.expires_at
            if stale or expired:
                del self._entries[key]
                return default
            return entry.value

    def set(self, key: str, value: Any, tags: list[str] | None = None, max_age: int = CACHE_PERMANENT) -> None:
        if max_age == 0:
            return
        tag_tuple = tuple(tags or ())
        expires_at = None if max_age < 0 else time.monotonic() + max_age
        with self._lock:
            if key not in self._entries and len(self._entries) >= self._max_size:
                # FIFO eviction
                self._entries.pop(next(iter(self._entries)))
            checksum = self._checksum(tag_tuple, self._counters())
            self._entries[key] = _Entry(value, tag_tuple, checksum, expires_at)

    def contains(self, key: str) -> bool:
        return self.get(key, _MISSING) is not _MISSING

    def invalidate_tags(self, tags: list[str]) -> None:
        with self._lock:
            counters = dict(self._counters())
            for tag in tags:
                counters[tag] = int(counters.get(tag, 0)) + 1
            if self._state is None:
                self._invalidations = counters
            else:
                self._state.set(self._state_key, counters)

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def stats(self) -> dict[str, Any]:
        with self._lock:
            return {
                "entries": len(self._entries),
                "max_size": self._max_size,
                "shared": self._state is not None,
                "invalidated_tags": dict(self._counters()),
            }
