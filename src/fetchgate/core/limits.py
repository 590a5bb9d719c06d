# src/fetchgate/core/limits.py

from __future__ import annotations

import logging
from typing import Any

logger = logging.getLogger(__name__)


def clamp_int(value: Any, *, minimum: int, name: str = "value") -> int:
    """
    Coerce a configuration value to an int >= minimum.

    Invalid input is corrected rather than raised: non-numeric values and
    values below the minimum both become `minimum`.
    """
    try:
        n = int(value)
    except (TypeError, ValueError):
        logger.debug("Invalid %s=%r, using %d", name, value, minimum)
        return minimum

    if n < minimum:
        logger.debug("Clamped %s=%d to %d", name, n, minimum)
        return minimum
    return n
