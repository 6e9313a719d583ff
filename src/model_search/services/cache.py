"""Process-lifetime TTL cache used for popular results and proxied images."""

from __future__ import annotations

import logging
import math
import time
from dataclasses import dataclass
from typing import Callable, Generic, Hashable, TypeVar

from cachetools import TTLCache as _ExpiringStore

logger = logging.getLogger(__name__)

V = TypeVar("V")

Clock = Callable[[], float]


@dataclass
class CacheEntry(Generic[V]):
    value: V
    timestamp: float


class TTLCache(Generic[V]):
    """Key/value store whose entries expire ``ttl_s`` seconds after insertion.

    Backed by ``cachetools.TTLCache`` with an unbounded size, so entries leave
    only by expiring. A stale entry is never returned by ``get``. With
    ``max_entries`` set, an insert that grows the cache past that size
    triggers ``evict_expired``; live entries are never evicted.

    Values are replaced last-writer-wins; there is no locking because every
    operation runs to completion on the event loop.
    """

    def __init__(
        self,
        ttl_s: float,
        *,
        clock: Clock = time.monotonic,
        max_entries: int | None = None,
    ) -> None:
        self.ttl_s = ttl_s
        self.max_entries = max_entries
        self._clock = clock
        self._entries: _ExpiringStore[Hashable, CacheEntry[V]] = _ExpiringStore(
            maxsize=math.inf, ttl=ttl_s, timer=clock
        )

    def get(self, key: Hashable) -> V | None:
        entry = self._entries.get(key)
        return entry.value if entry is not None else None

    def put(self, key: Hashable, value: V) -> None:
        self._entries[key] = CacheEntry(value=value, timestamp=self._clock())
        if self.max_entries is not None and self._entries.currsize > self.max_entries:
            evicted = self.evict_expired()
            logger.debug("Cache over %d entries, evicted %d", self.max_entries, evicted)

    def evict_expired(self) -> int:
        """Drop every stale entry. Returns the number removed."""
        return len(self._entries.expire())

    def clear(self) -> None:
        self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key: Hashable) -> bool:
        return key in self._entries
