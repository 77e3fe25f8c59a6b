"""
Service module for historical cycle data analysis.

This module provides the analytics views over a profile: per-interval cycle
lengths with a variance label against the rolling average, the trend chart
series and the daily log history.

Typical usage:
    history = get_cycle_history(profile)
    for entry in history:
        print(f"{entry.start_date}: {entry.status}")
"""
from typing import List, Optional, Tuple
from datetime import date

from cyclesync.models.cycle import CycleInterval
from cyclesync.models.log import DailyLog
from cyclesync.models.phase import HistoryEntry, TrendPoint
from cyclesync.models.profile import Profile
from cyclesync.services.constants import REGULAR_VARIANCE_DAYS, TREND_CHART_CYCLES
from cyclesync.services.cycle import average_cycle_length
from cyclesync.services.utils import days_between, sorted_intervals

CURRENT_STATUS = "Active"
REGULAR_STATUS = "Regular"


def classify_historical_variance(interval_length_days: int, average_length: int) -> str:
    """
    Label a completed cycle length against the average.

    Args:
        interval_length_days: Observed cycle length in days
        average_length: Rolling average cycle length in days

    Returns:
        "Regular" within two days of the average, otherwise the signed
        difference such as "+4 days" or "-3 days"

    Example:
        >>> classify_historical_variance(32, 28)
        '+4 days'
    """
    variance = interval_length_days - average_length
    if abs(variance) <= REGULAR_VARIANCE_DAYS:
        return REGULAR_STATUS
    sign = "+" if variance > 0 else ""
    return f"{sign}{variance} days"


def period_length(interval: CycleInterval) -> Optional[int]:
    """
    Bleeding length of an interval in days, both ends included.

    Open intervals have no length yet. An end before the start counts as zero.
    """
    if interval.is_open:
        return None
    return max(0, days_between(interval.end_date, interval.start_date) + 1)


def get_cycle_history(profile: Optional[Profile]) -> List[HistoryEntry]:
    """
    Build the cycle history list, most recent first.

    The length of a cycle is the distance from its start to the start of the
    following interval, so the most recent interval is always reported as
    the current one.

    Args:
        profile: Profile to analyze

    Returns:
        List of HistoryEntry objects
    """
    intervals = sorted_intervals(profile)
    average = average_cycle_length(profile)
    history = []

    for idx, interval in enumerate(intervals):
        if idx == 0:
            history.append(HistoryEntry(
                start_date=interval.start_date,
                end_date=interval.end_date,
                period_length=period_length(interval),
                status=CURRENT_STATUS,
                is_current=True
            ))
            continue

        length = days_between(intervals[idx - 1].start_date, interval.start_date)
        status = classify_historical_variance(length, average)
        history.append(HistoryEntry(
            start_date=interval.start_date,
            end_date=interval.end_date,
            cycle_length=length,
            period_length=period_length(interval),
            status=status,
            is_regular=status == REGULAR_STATUS
        ))

    return history


def get_trend_data(profile: Optional[Profile], max_cycles: int = TREND_CHART_CYCLES) -> List[TrendPoint]:
    """
    Completed cycle lengths for the trend chart, oldest first.

    Args:
        profile: Profile to analyze
        max_cycles: Maximum number of completed cycles to include

    Returns:
        List of TrendPoint objects; empty when fewer than two intervals exist
    """
    intervals = sorted_intervals(profile)
    points = []
    for i in range(min(len(intervals) - 1, max_cycles), 0, -1):
        points.append(TrendPoint(
            start_date=intervals[i].start_date,
            length=days_between(intervals[i - 1].start_date, intervals[i].start_date)
        ))
    return points


def get_log_history(profile: Optional[Profile]) -> List[Tuple[date, DailyLog]]:
    """Daily logs as (day, log) pairs, most recent day first."""
    if profile is None:
        return []
    return sorted(profile.logs.items(), key=lambda item: item[0], reverse=True)
