"""
Service module for menstrual cycle calculations and predictions.

This module holds the derivation engine: rolling average cycle length, phase
classification for the current day, next-period projection, fertile window
estimation and calendar membership checks. Every function is a pure read of
a profile's intervals; none of them mutates the profile.

Typical usage:
    profile = store.get_active_profile()
    phase = classify_phase(profile, date.today())
    prediction = predict_next_period(profile, date.today())
    if prediction:
        print(prediction.message)
"""
from typing import Optional
from datetime import date, timedelta

from cyclesync.models.cycle import CycleInterval
from cyclesync.models.phase import FertileWindow, PhaseType, Prediction, PredictionStatus
from cyclesync.models.profile import Profile
from cyclesync.services.constants import (
    AVERAGE_WINDOW,
    DEFAULT_CYCLE_LENGTH,
    FERTILE_MARGIN_DAYS,
    FOLLICULAR_END_DAY,
    LATE_THRESHOLD_DAYS,
    LUTEAL_LENGTH_DAYS,
    OVULATION_END_DAY,
    OVULATION_START_DAY,
)
from cyclesync.services.utils import (
    DateLike,
    days_between,
    latest_interval,
    round_half_up,
    sorted_intervals,
    to_date,
)


def average_cycle_length(profile: Optional[Profile]) -> int:
    """
    Estimate cycle length from the most recent period starts.

    Uses at most the four most recent intervals. Gaps between consecutive
    starts are taken as absolute whole-day counts, so the result does not
    depend on input order.

    Args:
        profile: Profile to analyze

    Returns:
        Rounded mean gap in days, or 28 with fewer than two intervals

    Example:
        >>> average_cycle_length(profile)  # starts Jan 1, Jan 29, Feb 26
        28
    """
    recent = sorted_intervals(profile)[:AVERAGE_WINDOW]
    if len(recent) < 2:
        return DEFAULT_CYCLE_LENGTH

    gaps = [
        abs(days_between(recent[i].start_date, recent[i + 1].start_date))
        for i in range(len(recent) - 1)
    ]
    return round_half_up(sum(gaps) / len(gaps))


def is_period_active(profile: Optional[Profile]) -> bool:
    """Check if the most recent interval is still open."""
    latest = latest_interval(profile)
    return latest is not None and latest.is_open


def day_in_cycle(profile: Optional[Profile], today: DateLike) -> Optional[int]:
    """
    Count the current day of the cycle.

    The period start date is day 1. A start logged after ``today`` counts
    the whole days between the two instead.

    Args:
        profile: Profile to analyze
        today: Day to measure from

    Returns:
        Day count, or None when the profile has no intervals
    """
    latest = latest_interval(profile)
    if latest is None:
        return None
    elapsed = days_between(to_date(today), latest.start_date)
    if elapsed < 0:
        return -elapsed
    return elapsed + 1


def classify_phase(profile: Optional[Profile], today: DateLike) -> Optional[PhaseType]:
    """
    Classify a day into a cycle phase.

    An open interval always means menstruation. Otherwise days before 12 are
    follicular, days 12-16 ovulation and later days luteal. A day more than
    five days past the average cycle length is reported as late, overriding
    every other phase.

    Args:
        profile: Profile to analyze
        today: Day to classify

    Returns:
        PhaseType, or None when the profile has no intervals

    Example:
        >>> classify_phase(profile, date(2024, 1, 14))  # last start Jan 1, closed
        <PhaseType.OVULATION: 'ovulation'>
    """
    latest = latest_interval(profile)
    if latest is None:
        return None

    cycle_day = day_in_cycle(profile, today)
    average = average_cycle_length(profile)

    if latest.is_open:
        phase = PhaseType.MENSTRUAL
    elif cycle_day < FOLLICULAR_END_DAY:
        phase = PhaseType.FOLLICULAR
    elif OVULATION_START_DAY <= cycle_day <= OVULATION_END_DAY:
        phase = PhaseType.OVULATION
    else:
        phase = PhaseType.LUTEAL

    if cycle_day > average + LATE_THRESHOLD_DAYS:
        phase = PhaseType.LATE

    return phase


def next_period_date(profile: Optional[Profile]) -> Optional[date]:
    """Projected next start: latest start plus the average cycle length."""
    latest = latest_interval(profile)
    if latest is None:
        return None
    return latest.start_date + timedelta(days=average_cycle_length(profile))


def predict_next_period(profile: Optional[Profile], today: DateLike) -> Optional[Prediction]:
    """
    Project the next period from the single most recent start.

    Args:
        profile: Profile to analyze
        today: Day the prediction is made on

    Returns:
        Prediction with days until the next start (negative when late),
        or None when the profile has no intervals

    Example:
        >>> prediction = predict_next_period(profile, date.today())
        >>> print(prediction.message)
        Next period predicted in 12 days.
    """
    next_start = next_period_date(profile)
    if next_start is None:
        return None

    days_until = days_between(next_start, to_date(today))
    if days_until > 0:
        status = PredictionStatus.UPCOMING
    elif days_until == 0:
        status = PredictionStatus.EXPECTED_TODAY
    else:
        status = PredictionStatus.LATE

    return Prediction(next_start=next_start, days_until=days_until, status=status)


def fertile_window(predicted_next_start: DateLike) -> FertileWindow:
    """
    Estimate ovulation and the fertile window before a predicted period.

    Ovulation is placed 14 days before the predicted start; the window spans
    two days either side of it, inclusive.

    Args:
        predicted_next_start: Predicted first day of the next period

    Returns:
        FertileWindow with day-aligned bounds
    """
    ovulation = to_date(predicted_next_start) - timedelta(days=LUTEAL_LENGTH_DAYS)
    return FertileWindow(
        ovulation_date=ovulation,
        start_date=ovulation - timedelta(days=FERTILE_MARGIN_DAYS),
        end_date=ovulation + timedelta(days=FERTILE_MARGIN_DAYS)
    )


def _interval_contains(interval: CycleInterval, day: date, today: date) -> bool:
    end = today if interval.is_open else interval.end_date
    return interval.start_date <= day <= end


def is_period_day(profile: Optional[Profile], day: DateLike, today: DateLike) -> bool:
    """
    Check if a day falls inside any recorded period.

    Open intervals run up to ``today``. Both bounds are inclusive; an interval
    whose end precedes its start contains no days.
    """
    day = to_date(day)
    today = to_date(today)
    return any(_interval_contains(interval, day, today) for interval in sorted_intervals(profile))


def is_predicted_start(profile: Optional[Profile], day: DateLike) -> bool:
    """Check if a day is the projected next period start."""
    next_start = next_period_date(profile)
    return next_start is not None and to_date(day) == next_start


def is_fertile_day(profile: Optional[Profile], day: DateLike) -> bool:
    """Check if a day falls in the fertile window before the next period."""
    next_start = next_period_date(profile)
    if next_start is None:
        return False
    return fertile_window(next_start).contains(to_date(day))
