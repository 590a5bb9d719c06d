# src/fetchgate/tasks/fetch_api.py

from __future__ import annotations

import logging
from typing import Any

from ..cache.result_cache import ResultCache
from ..core.ports import Operation
from .task_scheduler import TaskScheduler

logger = logging.getLogger(__name__)

_MISSING: Any = object()


async def fetch_cached(
    scheduler: TaskScheduler,
    cache: ResultCache,
    key: str,
    fetch_fn: Operation[Any],
    *,
    ttl_ms: int | None = None,
) -> Any:
    """
    Cache-first fetch.

    A fresh cache hit is returned directly and never touches the scheduler.
    On a miss the fetch-and-populate step is queued on the scheduler, so the
    upstream sees at most `scheduler.limit` requests at once, and concurrent
    misses for the same key still share one fetch.
    """
    cached = cache.peek(key, _MISSING)
    if cached is not _MISSING:
        logger.debug("Cache hit for %s", key)
        return cached

    return await scheduler.submit(lambda: cache.get_or_fetch(key, fetch_fn, ttl_ms))
