# src/fetchgate/cli/main.py

"""
CLI entrypoint.

Initializes logging, builds AppState, then runs on one event loop:
- the periodic cache purger (background task),
- the console REPL.
"""

from __future__ import annotations

import asyncio
import contextlib
import logging

from ..cache.cache_purger import run_cache_purger
from ..cli.bootstrap import create_initial_state
from ..config import get_settings
from ..connectors.console_connector import run_console_loop
from ..core.state import AppState
from ..logging_setup import setup_logging

logger = logging.getLogger(__name__)


async def _shutdown(state: AppState) -> None:
    """Best-effort shutdown (no exceptions should escape)."""
    try:
        await state.users.aclose()
    except Exception:
        logger.debug("User client close failed.", exc_info=True)


async def _run(state: AppState) -> None:
    purger = asyncio.create_task(
        run_cache_purger(state.cache, interval_seconds=state.settings.purge_interval_seconds)
    )
    try:
        await run_console_loop(state)
    finally:
        purger.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await purger
        await _shutdown(state)


def main() -> None:
    settings = get_settings()

    level_name = str(getattr(settings, "log_level", "INFO")).upper()
    console_level = getattr(logging, level_name, logging.INFO)
    setup_logging(log_dir=settings.data_dir, console_level=console_level)

    logger.info("Starting %s...", settings.app_name)

    state = create_initial_state(settings=settings)

    try:
        asyncio.run(_run(state))
    except KeyboardInterrupt:
        logger.info("Interrupted.")
    logger.info("Bye.")


if __name__ == "__main__":
    main()
