# src/fetchgate/cli/bootstrap.py

"""
CLI bootstrap helpers.

This module is the "composition root":
- loads settings once,
- ensures local (gitignored) directories exist,
- builds the single process-wide scheduler and cache and wires them into AppState.

Nothing else in the package holds a global scheduler or cache.
"""

from __future__ import annotations

import logging

from ..cache.result_cache import ResultCache
from ..config import get_settings
from ..core.ports import UserSource
from ..core.state import AppState
from ..tasks.task_scheduler import TaskScheduler
from ..users.user_client import UserDirectoryClient

logger = logging.getLogger(__name__)


def _ensure_local_dirs(settings) -> None:
    settings.data_dir.mkdir(parents=True, exist_ok=True)


def create_initial_state(*, settings=None, users: UserSource | None = None) -> AppState:
    """
    Create AppState from the provided settings.

    Keeping settings (and the upstream client) injectable makes the app easier to test.
    If settings is None, falls back to get_settings().
    """
    if settings is None:
        settings = get_settings()

    _ensure_local_dirs(settings)

    if users is None:
        users = UserDirectoryClient(
            settings.api_base_url,
            timeout_seconds=settings.http_timeout_seconds,
            simulated_delay_ms=settings.simulated_delay_ms,
        )

    state = AppState(
        settings=settings,
        scheduler=TaskScheduler(settings.concurrency_limit),
        cache=ResultCache(
            default_ttl_ms=settings.default_ttl_ms,
            max_entries=settings.max_cache_entries,
        ),
        users=users,
    )
    logger.debug(
        "State ready: limit=%d ttl_ms=%d max_entries=%d",
        state.scheduler.limit,
        state.cache.default_ttl_ms,
        state.cache.max_entries,
    )
    return state
