# src/fetchgate/core/state.py

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from ..cache.result_cache import ResultCache
from ..tasks.task_scheduler import TaskScheduler
from .ports import UserSource


@dataclass
class AppState:
    # Settings object (or a test stand-in) kept on the state for modules that need tuning values.
    settings: Any

    scheduler: TaskScheduler
    cache: ResultCache
    users: UserSource
