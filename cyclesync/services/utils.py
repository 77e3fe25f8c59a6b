"""
Shared utility functions for cycle-related services.

These utilities handle date coercion, whole-day differences and the on-read
ordering of a profile's intervals.
"""
import math
from typing import List, Optional, Union
from datetime import date, datetime

from cyclesync.models.cycle import CycleInterval
from cyclesync.models.profile import Profile
from cyclesync.services.exceptions import InvalidInputError

DateLike = Union[date, datetime, str]


def to_date(value: DateLike) -> date:
    """
    Coerce a date, datetime or ISO date string to a calendar day.

    Time of day is discarded, so every comparison works at day granularity.

    Args:
        value: Date to coerce

    Returns:
        Calendar date

    Raises:
        InvalidInputError: If the value cannot be read as a date

    Example:
        >>> to_date("2024-01-05")
        datetime.date(2024, 1, 5)
    """
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        text = value.strip()
        try:
            return date.fromisoformat(text[:10])
        except ValueError:
            raise InvalidInputError(f"Not a valid date: {value!r}")
    raise InvalidInputError(f"Unsupported date value: {value!r}")


def days_between(later: date, earlier: date) -> int:
    """Signed whole-day difference between two calendar days."""
    return (later - earlier).days


def round_half_up(value: float) -> int:
    """Round to the nearest integer with halves going up."""
    return int(math.floor(value + 0.5))


def sorted_intervals(profile: Optional[Profile]) -> List[CycleInterval]:
    """
    Order a profile's intervals by start date, most recent first.

    The order is derived on every call so out-of-order and retroactive inserts
    need no fix-up. Among intervals sharing a start date the one added last
    comes first.

    Args:
        profile: Profile to read, or None

    Returns:
        New list of the profile's intervals (the interval objects themselves
        are shared, not copied)
    """
    if profile is None:
        return []
    indexed = list(enumerate(profile.cycles))
    indexed.sort(key=lambda item: (item[1].start_date, item[0]), reverse=True)
    return [interval for _, interval in indexed]


def latest_interval(profile: Optional[Profile]) -> Optional[CycleInterval]:
    """Most recent interval by start date, or None when there are none."""
    intervals = sorted_intervals(profile)
    return intervals[0] if intervals else None
