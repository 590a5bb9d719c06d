# src/fetchgate/config.py

"""Centralized settings loaded from environment variables (+ optional .env).

Design goals:
- One Settings object for the whole app.
- Nothing required at import time; every value has a default.
- Invalid numbers fall back to defaults here; range clamping happens in the components.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

ENV_PREFIX = "FETCHGATE"


def _k(suffix: str) -> str:
    """Build env var name with the project prefix."""
    return f"{ENV_PREFIX}_{suffix}"


def _load_dotenv_if_available() -> None:
    """Load .env locally if python-dotenv is installed. Safe no-op otherwise."""
    try:
        from dotenv import load_dotenv  # type: ignore
    except ImportError:
        return
    load_dotenv(override=False)


_load_dotenv_if_available()


def _env(name: str, default: str = "") -> str:
    v = os.getenv(name)
    return default if v is None else v


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return float(raw)
    except ValueError:
        return default


def _env_path(name: str, default: Path) -> Path:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    return Path(raw).expanduser()


@dataclass(frozen=True, slots=True)
class Settings:
    # ---- App / logging ----
    app_name: str
    log_level: str
    data_dir: Path

    # ---- Scheduler ----
    concurrency_limit: int

    # ---- Cache ----
    default_ttl_ms: int
    max_cache_entries: int
    purge_interval_seconds: float

    # ---- Upstream API ----
    api_base_url: str
    http_timeout_seconds: float
    simulated_delay_ms: int

    # ---- Console ----
    busy_debounce_ms: int

    @staticmethod
    def from_env() -> "Settings":
        return Settings(
            app_name=_env(_k("APP_NAME"), "fetchgate"),
            log_level=_env(_k("LOG_LEVEL"), "INFO"),
            data_dir=_env_path(_k("DATA_DIR"), Path(".local/fetchgate")),
            concurrency_limit=_env_int(_k("CONCURRENCY_LIMIT"), 2),
            default_ttl_ms=_env_int(_k("DEFAULT_TTL_MS"), 5 * 60 * 1000),
            max_cache_entries=_env_int(_k("MAX_CACHE_ENTRIES"), 500),
            purge_interval_seconds=_env_float(_k("PURGE_INTERVAL_SECONDS"), 300.0),
            api_base_url=_env(_k("API_BASE_URL"), "https://jsonplaceholder.typicode.com"),
            http_timeout_seconds=_env_float(_k("HTTP_TIMEOUT_SECONDS"), 10.0),
            simulated_delay_ms=_env_int(_k("SIMULATED_DELAY_MS"), 0),
            busy_debounce_ms=_env_int(_k("BUSY_DEBOUNCE_MS"), 120),
        )


SETTINGS = Settings.from_env()


def get_settings() -> Settings:
    return SETTINGS
