"""Cache-related dataclasses."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any


@dataclass(slots=True)
class CacheEntry:
    """Cached value and the instant (ms, cache clock) at which it goes stale."""

    value: Any
    expires_at: float

    def is_fresh(self, now: float) -> bool:
        return now < self.expires_at
