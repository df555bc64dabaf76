"""In-memory resolver cache with TTL staleness and LRU eviction."""

import time
from collections import OrderedDict
from collections.abc import Callable

from livery.types import CacheEntry, CacheState, Theme

Clock = Callable[[], int]


def now_ms() -> int:
    """Current Unix time in milliseconds."""
    return int(time.time() * 1000)


class ResolverCache:
    """Keyed store of resolved themes.

    All operations are synchronous and never trigger I/O. Whether a stale
    entry is served or refetched is the resolver's decision; the cache only
    reports freshness.
    """

    def __init__(self, max_size: int | None = 100, clock: Clock | None = None) -> None:
        if max_size is not None and max_size < 1:
            raise ValueError("max_size must be at least 1")
        self._entries: OrderedDict[str, CacheEntry] = OrderedDict()
        self._max_size = max_size
        self._clock = clock or now_ms

    def now(self) -> int:
        return self._clock()

    def get(self, key: str) -> CacheEntry | None:
        """Get an entry regardless of freshness."""
        entry = self._entries.get(key)
        if entry is not None:
            self._entries.move_to_end(key)  # LRU touch
        return entry

    def put(self, key: str, value: Theme, ttl: int) -> CacheEntry:
        """Store a theme, replacing any previous entry for ``key``."""
        entry = CacheEntry(key=key, value=value, fetched_at=self.now(), ttl=ttl)
        self._entries[key] = entry
        self._entries.move_to_end(key)
        if self._max_size is not None and len(self._entries) > self._max_size:
            self._entries.popitem(last=False)
        return entry

    def invalidate(self, key: str) -> None:
        self._entries.pop(key, None)

    def clear(self) -> None:
        self._entries.clear()

    def is_stale(self, entry: CacheEntry) -> bool:
        return entry.is_stale(self.now())

    def state(self, key: str, *, revalidating: bool = False) -> CacheState | None:
        """Freshness of the entry for ``key``, or None if there is none."""
        entry = self._entries.get(key)
        if entry is None:
            return None
        return entry.state(self.now(), revalidating=revalidating)

    def keys(self) -> list[str]:
        return list(self._entries)

    def __contains__(self, key: object) -> bool:
        return key in self._entries

    def __len__(self) -> int:
        return len(self._entries)
