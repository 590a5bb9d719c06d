"""
Documentation-only module (safe to commit).

The real configuration is loaded from environment variables (optionally via a local .env file).
This file exists to make the repo self-documenting even without opening .env.example.
"""

ENV_VARS = {
    # App / logging
    "FETCHGATE_APP_NAME": "App display name (default: fetchgate).",
    "FETCHGATE_LOG_LEVEL": "Console logging level (default: INFO). The log file always gets DEBUG.",
    "FETCHGATE_DATA_DIR": "Local data directory for logs (default: .local/fetchgate).",
    # Scheduler
    "FETCHGATE_CONCURRENCY_LIMIT": "Max fetches running at once (default: 2, minimum 1).",
    # Cache
    "FETCHGATE_DEFAULT_TTL_MS": "Default cache TTL in milliseconds (default: 300000).",
    "FETCHGATE_MAX_CACHE_ENTRIES": "Cache capacity before eviction (default: 500).",
    "FETCHGATE_PURGE_INTERVAL_SECONDS": "Background purge of expired entries (default: 300).",
    # Upstream API
    "FETCHGATE_API_BASE_URL": "Users API (default: https://jsonplaceholder.typicode.com).",
    "FETCHGATE_HTTP_TIMEOUT_SECONDS": "HTTP timeout (default: 10).",
    "FETCHGATE_SIMULATED_DELAY_MS": "Extra delay after each detail fetch, for demos (default: 0).",
    # Console
    "FETCHGATE_BUSY_DEBOUNCE_MS": "Debounce for the busy/idle indicator (default: 120).",
}
