"""
Calendar grid service.

Builds per-day display flags for a month: recorded period days, the predicted
next start, the fertile window and days that carry a daily log. Predictions
are only marked on days after today.
"""
import calendar
from datetime import date
from typing import Optional

from cyclesync.models.phase import CalendarDay, CalendarMonth
from cyclesync.models.profile import Profile
from cyclesync.services.cycle import fertile_window, is_period_day, next_period_date
from cyclesync.services.utils import DateLike, to_date


def build_month(profile: Optional[Profile], year: int, month: int, today: DateLike) -> CalendarMonth:
    """
    Build the calendar grid for one month.

    Args:
        profile: Profile to display, or None
        year: Calendar year
        month: Month number, 1-12
        today: Current day

    Returns:
        CalendarMonth whose ``leading_blanks`` is the weekday of the first
        day with Sunday as 0
    """
    today = to_date(today)
    first_weekday, days_in_month = calendar.monthrange(year, month)
    leading_blanks = (first_weekday + 1) % 7

    predicted_start = next_period_date(profile)
    window = fertile_window(predicted_start) if predicted_start else None
    logged_days = set(profile.logs) if profile is not None else set()

    days = []
    for day_number in range(1, days_in_month + 1):
        cell = date(year, month, day_number)
        is_future = cell > today
        days.append(CalendarDay(
            date=cell,
            is_today=cell == today,
            is_period=is_period_day(profile, cell, today),
            is_predicted=is_future and cell == predicted_start,
            is_fertile=is_future and window is not None and window.contains(cell),
            has_log=cell in logged_days
        ))

    return CalendarMonth(year=year, month=month, leading_blanks=leading_blanks, days=days)
