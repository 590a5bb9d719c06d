# src/fetchgate/connectors/console_connector.py

from __future__ import annotations

import asyncio
import logging
from datetime import datetime

from ..cli.commands import registry as command_registry
from ..core.state import AppState
from ..tasks.task_models import QueueState
from .busy_indicator import BusyIndicator

logger = logging.getLogger(__name__)


def _ts_local() -> str:
    return datetime.now().astimezone().strftime("%Y-%m-%d %H:%M:%S")


def _print_ts(text: str) -> None:
    print(f"[{_ts_local()}] {text}", flush=True)


def _report_busy(busy: bool, state: QueueState) -> None:
    if busy:
        _print_ts(f"Loading data... (active={state.active} pending={state.pending})")
    else:
        _print_ts("Idle.")


async def run_console_loop(state: AppState) -> None:
    """
    Interactive REPL on the event loop.

    input() runs in a worker thread so scheduled fetches keep progressing
    while the prompt is waiting.
    """
    logger.info("Console connector started (limit=%d).", state.scheduler.limit)
    _print_ts("[CONSOLE] Type /help for commands. Use /exit to quit.\n")

    indicator = BusyIndicator(
        _report_busy,
        debounce_ms=int(getattr(state.settings, "busy_debounce_ms", 120)),
    )
    unsubscribe = state.scheduler.subscribe(indicator)

    try:
        while True:
            try:
                line = (await asyncio.to_thread(input, ">>> ")).strip()
            except EOFError:
                logger.info("Console EOF received, exiting.")
                break
            except KeyboardInterrupt:
                logger.info("Console KeyboardInterrupt, exiting.")
                print()
                break

            if not line:
                continue

            if line.lower() in ("/exit", "/quit"):
                logger.info("Console exit command received.")
                break

            try:
                reply = await command_registry.handle(state, line, emit=_print_ts)
            except Exception:
                logger.exception("Command failed: %s", line)
                _print_ts("Command failed (see log).")
                continue

            if reply is None:
                _print_ts("Not a command. Use /help.")
            else:
                print(reply, flush=True)
    finally:
        unsubscribe()
        indicator.close()
