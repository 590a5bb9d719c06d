# src/fetchgate/core/ports.py

from __future__ import annotations

"""
Ports (interfaces) used by the core.

The scheduler and cache accept plain callables; the user directory is a Protocol
so the CLI can run against the real HTTP client and tests against a fake.
"""

from typing import Any, Awaitable, Callable, Protocol, TypeVar

T = TypeVar("T")

Operation = Callable[[], Awaitable[T]]
# Zero-argument unit of async work. Success is the return value, failure is an exception.

Clock = Callable[[], float]
# Current instant in milliseconds.


class UserSource(Protocol):
    """Upstream resource that the scheduler protects (JSONPlaceholder-compatible)."""

    def list_users(self) -> Awaitable[list[Any]]: ...

    def get_user(self, user_id: int) -> Awaitable[Any]: ...

    def aclose(self) -> Awaitable[None]: ...
