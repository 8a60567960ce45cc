"""Utility functions for the timeline layout engine."""

from timeline_layout.utils.time_utils import (
    MS_PER_DAY,
    MS_PER_HOUR,
    TickGranularity,
    days_to_ms,
    format_duration,
    tick_granularity,
)

__all__ = [
    "MS_PER_DAY",
    "MS_PER_HOUR",
    "TickGranularity",
    "days_to_ms",
    "format_duration",
    "tick_granularity",
]
