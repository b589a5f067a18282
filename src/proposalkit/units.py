"""Time unit conversions for instruction hold-up times."""

from __future__ import annotations

__all__ = ["SECONDS_PER_DAY", "get_days_from_timestamp", "get_timestamp_from_days"]

SECONDS_PER_DAY = 24 * 60 * 60


def get_timestamp_from_days(days: float) -> int:
    """Convert a number of days to a duration in seconds."""
    return int(round(days * SECONDS_PER_DAY))


def get_days_from_timestamp(seconds: int) -> float:
    return seconds / SECONDS_PER_DAY
