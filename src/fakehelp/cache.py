"""In-memory TTL cache for upstream entities (players).

Each entry with a finite TTL owns one ``loop.call_later`` timer that
removes it. Entries are never persisted.
"""

from __future__ import annotations

import asyncio
import logging
import time
from dataclasses import dataclass
from typing import Any

_logger = logging.getLogger(__name__)


@dataclass(slots=True)
class CacheEntry:
    """A cached value and its pending expiry timer."""

    key: str
    value: Any
    expires_at: float | None = None
    timer: asyncio.TimerHandle | None = None


class TtlCache:
    """Key/value cache whose entries expire ``ttl`` seconds after insertion.

    ``ttl <= 0`` disables expiry. Setting a falsy key or value is a no-op,
    mirroring what the callers treat as "nothing to cache".
    """

    def __init__(self, ttl: float = 60.0) -> None:
        self._ttl = ttl
        self._entries: dict[str, CacheEntry] = {}

    @property
    def ttl(self) -> float:
        return self._ttl

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key: object) -> bool:
        return key in self._entries

    def get(self, key: str | None) -> Any:
        if not key:
            return None
        entry = self._entries.get(key)
        return entry.value if entry is not None else None

    def set(self, key: str | None, value: Any) -> None:
        """Store *value* and (re)start its expiry timer."""
        if not key or not value:
            return
        entry = self._entries.get(key)
        if entry is None:
            entry = CacheEntry(key=key, value=value)
            self._entries[key] = entry
        else:
            entry.value = value
        self._schedule_removal(entry)

    def extend(self, key: str) -> None:
        """Restart the expiry timer of *key* without touching its value."""
        entry = self._entries.get(key)
        if entry is not None:
            self._schedule_removal(entry)

    def remove(self, key: str | None) -> None:
        if not key:
            return
        entry = self._entries.pop(key, None)
        if entry is not None and entry.timer is not None:
            entry.timer.cancel()

    def clear(self) -> None:
        """Drop every entry and cancel all pending timers."""
        for entry in self._entries.values():
            if entry.timer is not None:
                entry.timer.cancel()
        self._entries.clear()

    def _schedule_removal(self, entry: CacheEntry) -> None:
        if entry.timer is not None:
            entry.timer.cancel()
            entry.timer = None
        if self._ttl <= 0:
            entry.expires_at = None
            return
        loop = asyncio.get_running_loop()
        entry.expires_at = time.monotonic() + self._ttl
        entry.timer = loop.call_later(self._ttl, self._expire, entry.key, entry)

    def _expire(self, key: str, entry: CacheEntry) -> None:
        # Only drop the entry this timer was scheduled for.
        if self._entries.get(key) is entry:
            del self._entries[key]
            _logger.debug("Cache entry %s expired", key)
