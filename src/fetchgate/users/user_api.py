# src/fetchgate/users/user_api.py

from __future__ import annotations

import asyncio
import logging
from collections.abc import Iterable

from ..core.state import AppState
from ..tasks.fetch_api import fetch_cached
from .user_models import UserDetails

logger = logging.getLogger(__name__)


def user_cache_key(user_id: int) -> str:
    return f"user:{int(user_id)}"


async def load_user_details(state: AppState, user_id: int) -> UserDetails:
    """
    Convenience helper: user details through the cache and the scheduler.
    Uses state.scheduler / state.cache / state.users (constructed in bootstrap).
    """
    return await fetch_cached(
        state.scheduler,
        state.cache,
        user_cache_key(user_id),
        lambda: state.users.get_user(user_id),
    )


async def load_many_user_details(
    state: AppState, user_ids: Iterable[int]
) -> dict[int, UserDetails | BaseException]:
    """
    Load several users at once ("open all").

    All requests are issued together; the scheduler keeps the upstream load bounded.
    A failure for one id is returned in its slot and does not affect the others.
    """
    ids = list(dict.fromkeys(int(i) for i in user_ids))
    results = await asyncio.gather(
        *(load_user_details(state, uid) for uid in ids),
        return_exceptions=True,
    )
    out: dict[int, UserDetails | BaseException] = {}
    for uid, res in zip(ids, results):
        if isinstance(res, BaseException):
            logger.warning("Failed to load user %s: %s", uid, res)
        out[uid] = res
    return out
