"""
Per-table read cache with lazy TTL expiry.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import Callable, Dict, Iterable, Optional

logger = logging.getLogger(__name__)

DEFAULT_TTL_SECONDS = 300.0


@dataclass
class CacheEntry:
    data: Optional[list] = None
    timestamp: float = 0.0


class TableCache:
    """
    One cache slot per logical table, fixed at construction.

    An entry is served while it holds data and is younger than the TTL.
    Entries are never evicted in the background; expiry is checked on access.
    Concurrent misses on the same slot each fetch upstream (no single-flight).
    """

    def __init__(
        self,
        slots: Iterable[str],
        ttl_seconds: float = DEFAULT_TTL_SECONDS,
        clock: Callable[[], float] = time.monotonic,
    ):
        """
        Args:
            slots: Logical table names that get a cache slot.
            ttl_seconds: How long a fetched result stays valid.
            clock: Monotonic time source in seconds.
        """
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self._entries: Dict[str, CacheEntry] = {slot: CacheEntry() for slot in slots}

    @property
    def slots(self) -> list[str]:
        return list(self._entries)

    def entry(self, slot: str) -> CacheEntry:
        return self._entries[slot]

    def get(self, slot: str) -> Optional[list]:
        """
        Return the cached rows for a slot, or None when empty or expired.

        Raises:
            KeyError: if the slot is unknown
        """
        entry = self._entries[slot]
        if entry.data is None:
            return None
        if self._clock() - entry.timestamp >= self.ttl_seconds:
            return None
        return entry.data

    def set(self, slot: str, data: list) -> None:
        if slot not in self._entries:
            raise KeyError(slot)
        self._entries[slot] = CacheEntry(data=data, timestamp=self._clock())

    def read(self, slot: str, fetch: Callable[[], list]) -> list:
        """
        Return cached rows when valid, otherwise call fetch and cache its result.

        Errors raised by fetch propagate and leave the slot untouched.
        """
        cached = self.get(slot)
        if cached is not None:
            logger.debug("Cache hit for %s", slot)
            return cached

        logger.debug("Cache miss for %s, fetching", slot)
        data = fetch()
        self.set(slot, data)
        return data

    def invalidate(self, slot: str) -> None:
        if slot in self._entries:
            self._entries[slot] = CacheEntry()

    def clear_all(self) -> None:
        for slot in self._entries:
            self._entries[slot] = CacheEntry()
