# tests/conftest.py

from __future__ import annotations

from types import SimpleNamespace

import pytest

from fetchgate.cache.result_cache import ResultCache
from fetchgate.core.state import AppState
from fetchgate.tasks.task_scheduler import TaskScheduler

from .fakes import FakeClock, FakeUserSource


@pytest.fixture()
def settings() -> SimpleNamespace:
    """
    Minimal settings object compatible with AppState and the CLI modules.

    We intentionally use a SimpleNamespace rather than importing real config,
    to keep unit tests isolated from the environment.
    """
    return SimpleNamespace(
        concurrency_limit=2,
        default_ttl_ms=60_000,
        max_cache_entries=50,
        busy_debounce_ms=0,
    )


@pytest.fixture()
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture()
def users() -> FakeUserSource:
    return FakeUserSource([1, 2, 3, 4, 5])


@pytest.fixture()
def state(settings: SimpleNamespace, clock: FakeClock, users: FakeUserSource) -> AppState:
    """AppState with a fresh scheduler/cache pair and a fake upstream."""
    return AppState(
        settings=settings,
        scheduler=TaskScheduler(settings.concurrency_limit),
        cache=ResultCache(
            default_ttl_ms=settings.default_ttl_ms,
            max_entries=settings.max_cache_entries,
            clock=clock,
        ),
        users=users,
    )
