"""Short-lived, single-flight cache of per-symbol bundles."""

import asyncio
import logging
import os
import time
from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from stock_signal.data.models import UnifiedBundle
from stock_signal.utils.validators import normalize_symbol

logger = logging.getLogger(__name__)

DEFAULT_TTL_SECONDS = float(os.environ.get("SIGNAL_CACHE_TTL", "10"))

BundleFetcher = Callable[[str], Awaitable[UnifiedBundle | None]]


@dataclass(frozen=True)
class CacheEntry:
    bundle: UnifiedBundle
    created_at: float


class BundleCache:
    """
    In-memory TTL cache keyed by normalized symbol.

    Every reader inside the freshness window gets the same bundle object, so
    the overview and detail views of a symbol always agree. Concurrent misses
    for one symbol share a single in-flight fetch. Entries are replaced
    wholesale and never mutated; nothing is persisted.
    """

    def __init__(
        self,
        ttl_seconds: float = DEFAULT_TTL_SECONDS,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.ttl = ttl_seconds
        self._clock = clock
        self._entries: dict[str, CacheEntry] = {}
        self._inflight: dict[str, asyncio.Task[CacheEntry | None]] = {}

    def age(self, entry: CacheEntry) -> float:
        """Seconds since the entry was stored."""
        return self._clock() - entry.created_at

    def _is_fresh(self, entry: CacheEntry) -> bool:
        return self.age(entry) < self.ttl

    def entry(self, symbol: str) -> CacheEntry | None:
        """Fresh entry for symbol, or None. Never fetches."""
        entry = self._entries.get(normalize_symbol(symbol))
        if entry is None or not self._is_fresh(entry):
            return None
        return entry

    def get(self, symbol: str) -> UnifiedBundle | None:
        """Fresh bundle for symbol, or None. Never fetches."""
        entry = self.entry(symbol)
        return entry.bundle if entry else None

    async def get_or_fetch(self, symbol: str, fetch: BundleFetcher) -> UnifiedBundle | None:
        """
        Return the fresh bundle for symbol, fetching it on a miss.

        Args:
            symbol: Ticker symbol (normalized before lookup)
            fetch: Coroutine function producing a bundle, or None on failure

        Returns:
            The cached or newly fetched bundle; None if the fetch failed
        """
        entry = await self.entry_or_fetch(symbol, fetch)
        return entry.bundle if entry else None

    async def entry_or_fetch(self, symbol: str, fetch: BundleFetcher) -> CacheEntry | None:
        """Like get_or_fetch, but returns the entry so its age matches the bundle."""
        key = normalize_symbol(symbol)

        entry = self.entry(key)
        if entry is not None:
            logger.debug(f"bundle({key}): cache hit")
            return entry

        # No await between lookup and registration: atomic on the event loop
        task = self._inflight.get(key)
        if task is None:
            task = asyncio.create_task(self._refresh(key, fetch))
            self._inflight[key] = task
        else:
            logger.debug(f"bundle({key}): joining in-flight fetch")

        # The task belongs to the cache: cancelling any waiter, including
        # the one that started it, leaves the fetch running for the others
        return await asyncio.shield(task)

    async def _refresh(self, key: str, fetch: BundleFetcher) -> CacheEntry | None:
        # An expired entry is never served again, success or not
        self._entries.pop(key, None)
        try:
            bundle = await fetch(key)
            if bundle is None:
                return None
            entry = CacheEntry(bundle=bundle, created_at=self._clock())
            self._entries[key] = entry
            return entry
        finally:
            if self._inflight.get(key) is asyncio.current_task():
                self._inflight.pop(key, None)

    def invalidate(self, symbol: str) -> None:
        self._entries.pop(normalize_symbol(symbol), None)

    def clear(self) -> None:
        """Drop all entries. In-flight fetches still complete and store."""
        self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)
