# src/fetchgate/tasks/task_models.py

from __future__ import annotations

import asyncio
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from ..core.ports import Operation


@dataclass(slots=True, frozen=True)
class QueueState:
    """Snapshot broadcast to observers on every admission and completion."""

    active: int
    pending: int


QueueObserver = Callable[[QueueState], Any]


@dataclass(slots=True)
class PendingSlot:
    operation: Operation[Any]
    future: asyncio.Future[Any]
    seq: int
