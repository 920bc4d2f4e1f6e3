"""
Day selection helpers.
A day is a local calendar date with no time component.
"""

from datetime import date, datetime
from typing import Union

DayLike = Union[date, datetime, str]


def to_day(value: DayLike) -> date:
    """
    Normalize a day selection to a date.

    Args:
        value: date, datetime (its local date is used) or 'YYYY-MM-DD' string

    Returns:
        The calendar date

    Raises:
        ValueError: If a string is not an ISO date
        TypeError: For any other type
    """
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        return date.fromisoformat(value.strip())
    raise TypeError(f"Cannot interpret {type(value).__name__} as a day")


def day_key(value: DayLike) -> str:
    """'YYYY-MM-DD' key used to scope stored activities."""
    return to_day(value).isoformat()


def today() -> date:
    """Current local calendar day."""
    return date.today()
