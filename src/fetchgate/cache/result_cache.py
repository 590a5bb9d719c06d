# src/fetchgate/cache/result_cache.py

from __future__ import annotations

"""
Result cache.

Keyed value store with:
- per-entry TTL (fresh iff now < expires_at),
- single-flight fetches: concurrent get_or_fetch() calls for one key share a single fetch,
- bounded size: over capacity, expired entries go first, then the oldest-inserted ones.

Failed fetches are never cached and never retried here.
"""

import asyncio
import logging
import time
from collections import OrderedDict
from typing import Any, Callable

from ..core.limits import clamp_int
from ..core.ports import Clock, Operation
from .cache_models import CacheEntry

logger = logging.getLogger(__name__)

DEFAULT_TTL_MS = 5 * 60 * 1000
DEFAULT_MAX_ENTRIES = 500

_MISSING: Any = object()


def monotonic_ms() -> float:
    return time.monotonic() * 1000.0


def _retrieve_exception(task: asyncio.Task[Any]) -> None:
    # Joiners receive the error via shield(); mark it retrieved for the case where every joiner went away.
    if not task.cancelled():
        task.exception()


class ResultCache:
    """TTL cache with in-flight deduplication and FIFO eviction."""

    def __init__(
        self,
        *,
        default_ttl_ms: int = DEFAULT_TTL_MS,
        max_entries: int = DEFAULT_MAX_ENTRIES,
        clock: Clock | None = None,
    ) -> None:
        self._default_ttl_ms = clamp_int(default_ttl_ms, minimum=0, name="default_ttl_ms")
        self._max_entries = clamp_int(max_entries, minimum=1, name="max_cache_entries")
        self._clock: Clock = clock or monotonic_ms
        # Insertion order doubles as eviction order.
        self._store: OrderedDict[str, CacheEntry] = OrderedDict()
        self._in_flight: dict[str, asyncio.Task[Any]] = {}

    @property
    def default_ttl_ms(self) -> int:
        return self._default_ttl_ms

    @property
    def max_entries(self) -> int:
        return self._max_entries

    def __len__(self) -> int:
        return len(self._store)

    def keys(self) -> list[str]:
        return list(self._store)

    def in_flight_keys(self) -> list[str]:
        return list(self._in_flight)

    def _ttl(self, ttl_ms: int | None) -> int:
        if ttl_ms is None:
            return self._default_ttl_ms
        return clamp_int(ttl_ms, minimum=0, name="ttl_ms")

    # ---- reads ----

    def has_fresh(self, key: str) -> bool:
        entry = self._store.get(key)
        return entry is not None and entry.is_fresh(self._clock())

    def peek(self, key: str, default: Any = None) -> Any:
        """Return the fresh value for `key`, or `default`. Never fetches."""
        entry = self._store.get(key)
        if entry is not None and entry.is_fresh(self._clock()):
            return entry.value
        return default

    # ---- writes ----

    def set(self, key: str, value: Any, ttl_ms: int | None = None) -> None:
        # Overwriting an existing key keeps its original insertion position.
        self._store[key] = CacheEntry(value=value, expires_at=self._clock() + self._ttl(ttl_ms))
        self._evict_if_needed()

    def invalidate(self, key: str) -> None:
        """
        Drop the entry and forget any in-flight fetch.

        The fetch itself keeps running and its callers still get the result,
        but the result is not stored.
        """
        self._store.pop(key, None)
        self._in_flight.pop(key, None)

    def clear(self) -> None:
        self._store.clear()
        self._in_flight.clear()

    def purge_expired(self) -> int:
        """Delete every entry whose expiry is <= now. Returns the number removed."""
        now = self._clock()
        expired = [key for key, entry in self._store.items() if not entry.is_fresh(now)]
        for key in expired:
            del self._store[key]
        if expired:
            logger.debug("Purged %d expired cache entries", len(expired))
        return len(expired)

    def _evict_if_needed(self) -> None:
        if len(self._store) <= self._max_entries:
            return

        # 1) expired entries cost nothing to drop
        self.purge_expired()

        # 2) still over: oldest-inserted first
        evicted = 0
        while len(self._store) > self._max_entries:
            self._store.popitem(last=False)
            evicted += 1
        if evicted:
            logger.debug("Evicted %d cache entries (max=%d)", evicted, self._max_entries)

    # ---- single-flight fetch ----

    async def get_or_fetch(
        self,
        key: str,
        fetch_fn: Operation[Any],
        ttl_ms: int | None = None,
    ) -> Any:
        """
        Return a fresh cached value, or fetch it once for all concurrent callers.

        - fresh entry: returned without fetching
        - fetch already running for `key`: wait for it and share its outcome
        - otherwise: start `fetch_fn`, cache the result on success, nothing on failure

        Exceptions from `fetch_fn` propagate unchanged to every waiting caller.
        Cancelling one caller does not cancel the shared fetch.
        """
        value = self.peek(key, _MISSING)
        if value is not _MISSING:
            return value

        shared = self._in_flight.get(key)
        if shared is None:
            shared = asyncio.get_running_loop().create_task(
                self._fetch(key, fetch_fn, self._ttl(ttl_ms))
            )
            shared.add_done_callback(_retrieve_exception)
            self._in_flight[key] = shared
        else:
            logger.debug("Joining in-flight fetch for %s", key)

        return await asyncio.shield(shared)

    async def _fetch(self, key: str, fetch_fn: Callable[[], Any], ttl_ms: int) -> Any:
        me = asyncio.current_task()
        try:
            value = await fetch_fn()
            # After invalidate()/clear() the result still goes to our joiners but not into the store.
            if self._in_flight.get(key) is me:
                self._store[key] = CacheEntry(value=value, expires_at=self._clock() + ttl_ms)
                self._evict_if_needed()
            else:
                logger.debug("Discarding result for %s: invalidated during fetch", key)
            return value
        finally:
            # Only drop our own marker: invalidate() may have let a newer fetch take the key.
            if self._in_flight.get(key) is me:
                del self._in_flight[key]
