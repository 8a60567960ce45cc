"""Time-related utility functions."""

from enum import Enum

MS_PER_HOUR = 3_600_000
MS_PER_DAY = 86_400_000


class TickGranularity(str, Enum):
    """Header tick density for a given zoom level."""
    HOURS = "hours"
    DAYS = "days"
    WEEKS = "weeks"
    MONTHS = "months"


def days_to_ms(days: float) -> float:
    """Convert days to milliseconds."""
    return days * MS_PER_DAY


def format_duration(ms: float) -> str:
    """Format a duration in milliseconds as a human-readable string.

    Args:
        ms: Duration in milliseconds

    Returns:
        Formatted string like "3d 4h", "2h 15m" or "45s"
    """
    seconds = ms / 1000
    if seconds < 60:
        return f"{int(seconds)}s"

    minutes = int(seconds // 60)
    if minutes < 60:
        remaining_seconds = int(seconds % 60)
        if remaining_seconds > 0:
            return f"{minutes}m {remaining_seconds}s"
        return f"{minutes}m"

    hours = minutes // 60
    if hours < 24:
        remaining_minutes = minutes % 60
        if remaining_minutes > 0:
            return f"{hours}h {remaining_minutes}m"
        return f"{hours}h"

    days = hours // 24
    remaining_hours = hours % 24
    if remaining_hours > 0:
        return f"{days}d {remaining_hours}h"
    return f"{days}d"


def tick_granularity(scale: float) -> TickGranularity:
    """Pick the header tick density for a zoom scale in px/ms."""
    px_per_hour = scale * MS_PER_HOUR
    if px_per_hour >= 6:
        return TickGranularity.HOURS
    if px_per_hour >= 0.25:
        return TickGranularity.DAYS
    if px_per_hour >= 0.02:
        return TickGranularity.WEEKS
    return TickGranularity.MONTHS
