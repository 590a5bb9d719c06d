# src/fetchgate/tasks/task_scheduler.py

from __future__ import annotations

"""
Task scheduler.

Admits at most `limit` operations at a time:
- submitted operations wait in a FIFO deque,
- a free slot always goes to the earliest-submitted waiting operation,
- every admission and completion is broadcast to observers as a QueueState.

All bookkeeping happens on the event loop thread between awaits, so no lock is needed.
Admitted operations are never cancelled or timed out by the scheduler.
"""

import asyncio
import itertools
import logging
from collections import deque
from collections.abc import Callable
from typing import Any

from ..core.limits import clamp_int
from ..core.ports import Operation
from .task_models import PendingSlot, QueueObserver, QueueState

logger = logging.getLogger(__name__)

DEFAULT_CONCURRENCY_LIMIT = 2


class TaskScheduler:
    """Bounded-concurrency FIFO scheduler with observable occupancy."""

    def __init__(self, limit: int = DEFAULT_CONCURRENCY_LIMIT) -> None:
        self._limit = clamp_int(limit, minimum=1, name="concurrency_limit")
        self._pending: deque[PendingSlot] = deque()
        self._active = 0
        self._observers: dict[int, QueueObserver] = {}
        self._observer_ids = itertools.count(1)
        self._seq = itertools.count(1)
        # Strong refs so running operations are not garbage-collected mid-flight.
        self._running: set[asyncio.Task[None]] = set()

    # ---- configuration / inspection ----

    @property
    def limit(self) -> int:
        return self._limit

    @property
    def active_count(self) -> int:
        return self._active

    @property
    def pending_count(self) -> int:
        return len(self._pending)

    @property
    def is_busy(self) -> bool:
        return self._active > 0

    def snapshot(self) -> QueueState:
        return QueueState(active=self._active, pending=len(self._pending))

    def configure(self, limit: int) -> None:
        """
        Change the concurrency limit (clamped to >= 1).

        Running operations are never preempted. Lowering the limit only delays future
        admissions; raising it lets waiting operations start right away.
        """
        self._limit = clamp_int(limit, minimum=1, name="concurrency_limit")
        logger.debug("Concurrency limit set to %d", self._limit)
        self._run_next()

    # ---- observers ----

    def subscribe(self, observer: QueueObserver) -> Callable[[], None]:
        """
        Register an observer and push the current state to it immediately.

        Returns an unsubscribe callable (safe to call more than once).
        """
        handle = next(self._observer_ids)
        self._observers[handle] = observer
        self._notify(observer, self.snapshot())

        def unsubscribe() -> None:
            self._observers.pop(handle, None)

        return unsubscribe

    def _notify(self, observer: QueueObserver, state: QueueState) -> None:
        try:
            observer(state)
        except Exception:
            # A broken observer must not affect the queue or other observers.
            logger.debug("Queue observer failed", exc_info=True)

    def _broadcast(self) -> None:
        state = self.snapshot()
        for observer in list(self._observers.values()):
            self._notify(observer, state)

    # ---- submission / admission ----

    def submit(self, operation: Operation[Any]) -> asyncio.Future[Any]:
        """
        Queue `operation` and return a future settled with its outcome.

        Must be called from a running event loop.
        """
        loop = asyncio.get_running_loop()
        slot = PendingSlot(operation=operation, future=loop.create_future(), seq=next(self._seq))
        self._pending.append(slot)
        self._run_next()
        return slot.future

    def _run_next(self) -> None:
        while self._active < self._limit and self._pending:
            slot = self._pending.popleft()
            self._active += 1
            logger.debug(
                "Admitted op #%d (active=%d pending=%d)", slot.seq, self._active, len(self._pending)
            )
            self._broadcast()

            task = asyncio.get_running_loop().create_task(self._execute(slot))
            self._running.add(task)
            task.add_done_callback(self._running.discard)

    async def _execute(self, slot: PendingSlot) -> None:
        try:
            result = await slot.operation()
        except asyncio.CancelledError:
            # Only happens on loop shutdown; the scheduler itself never cancels.
            slot.future.cancel()
            raise
        except Exception as exc:
            if not slot.future.done():
                slot.future.set_exception(exc)
        else:
            if not slot.future.done():
                slot.future.set_result(result)
        finally:
            self._active -= 1
            logger.debug(
                "Completed op #%d (active=%d pending=%d)", slot.seq, self._active, len(self._pending)
            )
            self._broadcast()
            self._run_next()
