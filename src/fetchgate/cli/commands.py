# src/fetchgate/cli/commands.py

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable

from ..core.state import AppState
from ..tasks.fetch_api import fetch_cached
from ..users.user_api import load_many_user_details, load_user_details
from ..users.user_models import UserDetails, UserSummary

CommandEmitter = Callable[[str], None]
CommandHandler = Callable[[AppState, list[str], CommandEmitter | None], Awaitable[str]]

logger = logging.getLogger(__name__)

USERS_LIST_KEY = "users:list"


class CommandRegistry:
    """Simple slash-command registry used by the console connector (/help, /user, ...)."""

    def __init__(self) -> None:
        self._handlers: dict[str, CommandHandler] = {}
        self._help: dict[str, str] = {}

    def register(
        self,
        name: str,
        handler: CommandHandler,
        help_text: str,
        aliases: list[str] | None = None,
    ) -> None:
        aliases = aliases or []
        key = name.lower()
        self._handlers[key] = handler
        self._help[key] = help_text
        for alias in aliases:
            self._handlers[alias.lower()] = handler

    async def handle(
        self,
        state: AppState,
        line: str,
        emit: CommandEmitter | None = None,
    ) -> str | None:
        """
        Handle a string like "/command args".
        Returns a reply string or None if not a command.
        """
        if not line.startswith("/"):
            return None

        parts = line[1:].split()
        if not parts:
            return "Empty command. Use /help to list available commands."

        name = parts[0].lower()
        args = parts[1:]

        handler = self._handlers.get(name)
        if not handler:
            return f"Unknown command: /{name}. Use /help to list available commands."

        return await handler(state, args, emit)

    def build_help(self) -> str:
        lines = ["Available commands:"]
        for name, help_text in self._help.items():
            lines.append(f"  /{name} - {help_text}")
        return "\n".join(lines)


registry = CommandRegistry()


def _format_details(d: UserDetails) -> str:
    return (
        f"#{d.id} {d.name}\n"
        f"  Email: {d.email}\n"
        f"  Phone: {d.phone}\n"
        f"  Company: {d.company}\n"
        f"  City: {d.city}"
    )


def _parse_ids(args: list[str]) -> list[int] | None:
    try:
        return [int(a) for a in args]
    except ValueError:
        return None


async def _list_users(state: AppState) -> list[UserSummary]:
    return await fetch_cached(state.scheduler, state.cache, USERS_LIST_KEY, state.users.list_users)


async def cmd_help(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str:
    return registry.build_help()


async def cmd_status(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str:
    q = state.scheduler.snapshot()
    return (
        "Status:\n"
        f"  Concurrency limit: {state.scheduler.limit}\n"
        f"  Active: {q.active}  Pending: {q.pending}\n"
        f"  Cache entries: {len(state.cache)}/{state.cache.max_entries}\n"
        f"  In-flight fetches: {len(state.cache.in_flight_keys())}\n"
        f"  Default TTL: {state.cache.default_ttl_ms} ms"
    )


async def cmd_users(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str:
    try:
        users = await _list_users(state)
    except Exception as e:
        logger.exception("Fetching user list failed")
        return f"Error: {e}"

    if not users:
        return "No users."
    return "\n".join(f"  {u.id:>3}  {u.name} ({u.username})" for u in users)


async def cmd_user(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str:
    ids = _parse_ids(args)
    if not ids:
        return "Usage: /user <id> [<id> ...]"

    if len(ids) == 1:
        try:
            return _format_details(await load_user_details(state, ids[0]))
        except Exception as e:
            return f"Error (id {ids[0]}): {e}"

    results = await load_many_user_details(state, ids)
    return _format_results(results)


async def cmd_all(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str:
    try:
        users = await _list_users(state)
    except Exception as e:
        logger.exception("Fetching user list failed")
        return f"Error: {e}"

    if emit is not None:
        emit(f"Loading details for {len(users)} users (limit {state.scheduler.limit})...")
    results = await load_many_user_details(state, [u.id for u in users])
    return _format_results(results)


def _format_results(results: dict[int, UserDetails | BaseException]) -> str:
    blocks: list[str] = []
    for uid, res in results.items():
        if isinstance(res, BaseException):
            blocks.append(f"#{uid} Error: {res}")
        else:
            blocks.append(_format_details(res))
    return "\n".join(blocks)


async def cmd_limit(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str:
    if not args:
        return f"Concurrency limit: {state.scheduler.limit}"
    state.scheduler.configure(args[0])
    return f"Concurrency limit set to {state.scheduler.limit}."


async def cmd_purge(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str:
    removed = state.cache.purge_expired()
    return f"Purged {removed} expired entries ({len(state.cache)} left)."


async def cmd_invalidate(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str:
    if not args:
        return "Usage: /invalidate <key> (e.g. user:3)"
    for key in args:
        state.cache.invalidate(key)
    return f"Invalidated: {', '.join(args)}"


async def cmd_clear(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str:
    state.cache.clear()
    return "Cache cleared."


registry.register("help", cmd_help, "show this help", aliases=["h", "?"])
registry.register("status", cmd_status, "scheduler and cache state")
registry.register("users", cmd_users, "list users")
registry.register("user", cmd_user, "show details for one or more user ids", aliases=["u"])
registry.register("all", cmd_all, "load details for every user at once")
registry.register("limit", cmd_limit, "show or set the concurrency limit")
registry.register("purge", cmd_purge, "remove expired cache entries")
registry.register("invalidate", cmd_invalidate, "drop cache keys")
registry.register("clear", cmd_clear, "drop the whole cache")
