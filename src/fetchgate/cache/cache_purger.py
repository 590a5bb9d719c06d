# src/fetchgate/cache/cache_purger.py

from __future__ import annotations

import asyncio
import logging

from .result_cache import ResultCache

logger = logging.getLogger(__name__)


async def run_cache_purger(cache: ResultCache, *, interval_seconds: float = 300.0) -> None:
    """
    Simple polling purger.

    Every interval_seconds, drop expired entries from `cache`.
    Reads never purge on their own, so long-running processes should run this.

    To stop the purger, cancel the coroutine/task.
    """
    sleep_s = max(0.05, float(interval_seconds))

    while True:
        await asyncio.sleep(sleep_s)

        try:
            removed = cache.purge_expired()
        except Exception:
            logger.exception("purge_expired failed")
            continue

        if removed:
            logger.info("Cache purge removed %d expired entries (size=%d)", removed, len(cache))
