"""
Query Cache
Keyed, invalidatable read-through cache for API responses.

Keys are tuples such as ``("employees", "list", (("page", 1),))``; operations
that take a prefix act on every key starting with it.
"""
import asyncio
import time
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Dict, Hashable, List, Mapping, Optional, Tuple

from farmledger.config import settings


QueryKey = Tuple[Hashable, ...]


def make_key(*parts: Hashable, params: Optional[Mapping[str, Any]] = None) -> QueryKey:
    """Build a cache key. Unset params are left out so equal queries share a key."""
    key: QueryKey = tuple(parts)
    if params is not None:
        key += (tuple(sorted(
            (name, value) for name, value in params.items() if value not in (None, "")
        )),)
    return key


@dataclass
class CacheEntry:
    """Cached data for one key."""
    data: Any
    updated_at: float
    invalidated: bool = False


class QueryCache:
    """
    Read-through cache for query results.

    Entries are served until they are older than ``stale_time`` seconds or
    have been invalidated. Concurrent fetches of one key share a single load.
    """

    def __init__(
        self,
        stale_time: Optional[float] = None,
        clock: Callable[[], float] = time.monotonic
    ):
        self.stale_time = settings.cache_stale_seconds if stale_time is None else stale_time
        self._clock = clock
        self._entries: Dict[QueryKey, CacheEntry] = {}
        self._inflight: Dict[QueryKey, "asyncio.Task[Any]"] = {}
        self._versions: Dict[QueryKey, int] = {}

    @staticmethod
    def _matches(key: QueryKey, prefix: QueryKey) -> bool:
        return key[:len(prefix)] == prefix

    def keys(self, prefix: QueryKey = ()) -> List[QueryKey]:
        return [key for key in self._entries if self._matches(key, prefix)]

    def get_data(self, key: QueryKey) -> Any:
        """Cached data for ``key``, stale or not; None when absent."""
        entry = self._entries.get(key)
        return entry.data if entry else None

    def is_stale(self, key: QueryKey) -> bool:
        entry = self._entries.get(key)
        if entry is None or entry.invalidated:
            return True
        return self._clock() - entry.updated_at >= self.stale_time

    def is_fetching(self, key: QueryKey) -> bool:
        return key in self._inflight

    def set(self, key: QueryKey, data: Any) -> None:
        """Write data for a key directly, marking it fresh."""
        self._entries[key] = CacheEntry(data=data, updated_at=self._clock())

    def invalidate(self, prefix: QueryKey) -> int:
        """Mark every matching entry stale so the next read refetches it."""
        count = 0
        for key in self.keys(prefix):
            self._entries[key].invalidated = True
            count += 1
        self._bump(prefix)
        return count

    def remove(self, prefix: QueryKey) -> int:
        """Forget every matching entry."""
        keys = self.keys(prefix)
        for key in keys:
            del self._entries[key]
        self._bump(prefix)
        return len(keys)

    def update_where(self, prefix: QueryKey, updater: Callable[[Any], Any]) -> int:
        """Replace the data of every matching entry with ``updater(data)``."""
        keys = self.keys(prefix)
        for key in keys:
            entry = self._entries[key]
            entry.data = updater(entry.data)
        return len(keys)

    async def fetch(self, key: QueryKey, loader: Callable[[], Awaitable[Any]]) -> Any:
        """
        Return fresh cached data for ``key``, or load it.

        A load already running for the key is awaited instead of starting a
        second request.
        """
        if not self.is_stale(key):
            return self._entries[key].data

        task = self._inflight.get(key)
        if task is None:
            task = asyncio.ensure_future(
                self._load(key, loader, self._versions.get(key, 0))
            )
            self._inflight[key] = task
        # A cancelled waiter must not cancel the load the others share
        return await asyncio.shield(task)

    async def _load(
        self,
        key: QueryKey,
        loader: Callable[[], Awaitable[Any]],
        version: int
    ) -> Any:
        try:
            data = await loader()
            self.set(key, data)
            if self._versions.get(key, 0) != version:
                # Invalidated while loading: keep the data but refetch next time
                self._entries[key].invalidated = True
            return data
        finally:
            self._inflight.pop(key, None)

    def _bump(self, prefix: QueryKey) -> None:
        for key in list(self._inflight):
            if self._matches(key, prefix):
                self._versions[key] = self._versions.get(key, 0) + 1
