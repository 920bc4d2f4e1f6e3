"""Utility functions for daytracker."""

from .dates import to_day, day_key, today
from .formatting import (
    format_minutes,
    truncate,
    clamp_remaining,
    budget_progress,
)

__all__ = [
    'to_day',
    'day_key',
    'today',
    'format_minutes',
    'truncate',
    'clamp_remaining',
    'budget_progress',
]
