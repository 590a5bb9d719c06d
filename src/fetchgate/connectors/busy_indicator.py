# src/fetchgate/connectors/busy_indicator.py

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable

from ..tasks.task_models import QueueState

logger = logging.getLogger(__name__)


class BusyIndicator:
    """
    Scheduler observer that reports busy/idle transitions.

    Rapid active->idle->active flips (one operation finishing as the next is
    admitted) are smoothed by a debounce: only the state that is still current
    `debounce_ms` after the last notification is reported.

    Must be subscribed from code running on the event loop.
    """

    def __init__(
        self,
        emit: Callable[[bool, QueueState], None],
        *,
        debounce_ms: int = 120,
    ) -> None:
        self._emit = emit
        self._debounce_s = max(0, int(debounce_ms)) / 1000.0
        self._busy = False
        self._timer: asyncio.TimerHandle | None = None

    @property
    def busy(self) -> bool:
        return self._busy

    def __call__(self, state: QueueState) -> None:
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None

        if self._debounce_s <= 0:
            self._apply(state)
            return

        loop = asyncio.get_running_loop()
        self._timer = loop.call_later(self._debounce_s, self._apply, state)

    def _apply(self, state: QueueState) -> None:
        self._timer = None
        busy = state.active > 0
        if busy == self._busy:
            return
        self._busy = busy
        self._emit(busy, state)

    def close(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None
