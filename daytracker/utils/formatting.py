"""
Display formatting helpers.
"""

from ..config import MAX_MINUTES_PER_DAY


def format_minutes(minutes: int) -> str:
    """
    Format minutes as a compact hours/minutes string.

    Examples:
        45 -> '45m', 120 -> '2h', 90 -> '1h 30m'
    """
    hours, mins = divmod(int(minutes), 60)
    if hours == 0:
        return f"{mins}m"
    if mins == 0:
        return f"{hours}h"
    return f"{hours}h {mins}m"


def truncate(text: str, length: int, suffix: str = "...") -> str:
    """Cut text to `length` characters, appending suffix when shortened."""
    if len(text) > length:
        return text[:length] + suffix
    return text


def clamp_remaining(minutes: int) -> int:
    """Remaining minutes for display. The ledger itself never clamps."""
    return max(0, minutes)


def budget_progress(total_minutes: int, max_minutes: int = MAX_MINUTES_PER_DAY) -> float:
    """Percentage of the day already logged, clamped to [0, 100]."""
    if max_minutes <= 0:
        return 0.0
    return min(100.0, max(0.0, total_minutes / max_minutes * 100))
