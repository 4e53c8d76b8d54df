"""Display formatting helpers shared by the renderers."""

import math
import time
from typing import Any, Optional

MINUTE = 60
HOUR = 3600
DAY = 86400
MONTH = 2592000  # 30 days
YEAR = 31536000  # 365 days

UNKNOWN_TIME = "unknown"


def _as_number(value: Any) -> float:
    if isinstance(value, bool):
        return float(value)
    if isinstance(value, (int, float)) and math.isfinite(value):
        return float(value)
    return 0.0


def format_number(value: Any) -> str:
    """
    Format a count for display.

    Values of a million or more become ``X.xM``, values of a thousand or more
    become ``X.xK``; anything smaller is shown as a plain integer. Missing or
    non-numeric values count as 0.

    Args:
        value: The count to format

    Returns:
        str: The formatted count, e.g. ``"1.5K"``
    """
    number = _as_number(value)
    if number >= 1_000_000:
        return f"{number / 1_000_000:.1f}M"
    if number >= 1_000:
        return f"{number / 1_000:.1f}K"
    return str(int(number))


def format_time(timestamp: Any, now: Optional[float] = None) -> str:
    """
    Format a Unix timestamp (seconds) as a coarse relative age.

    Args:
        timestamp: Creation time in seconds since the epoch
        now: Reference time; defaults to the current time

    Returns:
        str: ``"just now"``, ``"5m ago"``, ``"3h ago"``, ``"2d ago"``,
        ``"4mo ago"`` or ``"1y ago"``; ``"unknown"`` when the timestamp is missing.
    """
    if isinstance(timestamp, bool) or not isinstance(timestamp, (int, float)) or not math.isfinite(timestamp):
        return UNKNOWN_TIME

    current = time.time() if now is None else now
    diff = current - timestamp

    if diff < MINUTE:
        return "just now"
    if diff < HOUR:
        return f"{math.floor(diff / MINUTE)}m ago"
    if diff < DAY:
        return f"{math.floor(diff / HOUR)}h ago"
    if diff < MONTH:
        return f"{math.floor(diff / DAY)}d ago"
    if diff < YEAR:
        return f"{math.floor(diff / MONTH)}mo ago"
    return f"{math.floor(diff / YEAR)}y ago"


def truncate_text(text: Optional[str], max_length: int = 200) -> str:
    """Return ``text`` cut to ``max_length`` characters plus an ellipsis when longer."""
    if not text:
        return ""
    if len(text) <= max_length:
        return text
    return text[:max_length] + "..."
