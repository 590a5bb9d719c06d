# src/fetchgate/users/user_client.py

from __future__ import annotations

import asyncio
import logging

import httpx

from .user_models import UserDetails, UserSummary

logger = logging.getLogger(__name__)


class UserDirectoryClient:
    """
    Async client for a JSONPlaceholder-compatible /users API.

    No retries and no caching here: callers go through the scheduler and the
    result cache. HTTP errors propagate as httpx exceptions.
    """

    def __init__(
        self,
        base_url: str,
        *,
        timeout_seconds: float = 10.0,
        simulated_delay_ms: int = 0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._simulated_delay_s = max(0, int(simulated_delay_ms)) / 1000.0
        self._http = httpx.AsyncClient(
            base_url=base_url,
            timeout=httpx.Timeout(timeout_seconds),
            transport=transport,
        )

    async def list_users(self) -> list[UserSummary]:
        resp = await self._http.get("/users")
        resp.raise_for_status()
        data = resp.json()
        if not isinstance(data, list):
            raise ValueError(f"Unexpected /users payload: {type(data).__name__}")
        return [UserSummary.from_json(item) for item in data if isinstance(item, dict)]

    async def get_user(self, user_id: int) -> UserDetails:
        logger.debug("GET /users/%s", user_id)
        resp = await self._http.get(f"/users/{int(user_id)}")
        resp.raise_for_status()
        if self._simulated_delay_s:
            # Makes queueing visible in demos.
            await asyncio.sleep(self._simulated_delay_s)
        return UserDetails.from_json(resp.json())

    async def aclose(self) -> None:
        await self._http.aclose()
