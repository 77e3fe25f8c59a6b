"""
Tests for cycle history, trend data and log history.
"""
import pytest
from datetime import date, timedelta

from cyclesync.models.cycle import CycleInterval
from cyclesync.models.log import DailyLog, Mood
from cyclesync.services.history import (
    classify_historical_variance,
    get_cycle_history,
    get_log_history,
    get_trend_data,
    period_length,
)


@pytest.mark.parametrize("length,average,expected", [
    (28, 28, "Regular"),
    (30, 28, "Regular"),
    (26, 28, "Regular"),
    (31, 28, "+3 days"),
    (32, 28, "+4 days"),
    (25, 28, "-3 days"),
])
def test_classify_historical_variance(length, average, expected):
    """Test variance labels around the two day tolerance."""
    assert classify_historical_variance(length, average) == expected


def test_period_length():
    """Test inclusive bleeding length with open and degenerate intervals."""
    assert period_length(CycleInterval(start_date=date(2024, 1, 1), end_date=date(2024, 1, 5))) == 5
    assert period_length(CycleInterval(start_date=date(2024, 1, 1), end_date=date(2024, 1, 1))) == 1
    assert period_length(CycleInterval(start_date=date(2024, 1, 1))) is None
    assert period_length(CycleInterval(start_date=date(2024, 1, 10), end_date=date(2024, 1, 5))) == 0


def test_cycle_history(history_profile):
    """Test history rows are most recent first with variance against the average."""
    history = get_cycle_history(history_profile)

    assert [entry.start_date for entry in history] == [
        date(2024, 3, 3), date(2024, 1, 29), date(2024, 1, 1)
    ]

    current = history[0]
    assert current.is_current
    assert current.status == "Active"
    assert current.cycle_length is None
    assert current.period_length is None

    # Average of 34 and 28 is 31
    assert history[1].cycle_length == 34
    assert history[1].status == "+3 days"
    assert history[1].is_regular is False
    assert history[1].period_length == 5

    assert history[2].cycle_length == 28
    assert history[2].status == "-3 days"


def test_cycle_history_regular(regular_profile):
    """Test regular cycles are labelled as such."""
    history = get_cycle_history(regular_profile)

    assert history[0].status == "Active"
    assert all(entry.status == "Regular" for entry in history[1:])
    assert all(entry.is_regular for entry in history[1:])


def test_cycle_history_closed_latest_still_current(profile_factory):
    """Test the latest interval is current even after it was closed."""
    profile = profile_factory((date(2024, 1, 1), date(2024, 1, 5)))

    history = get_cycle_history(profile)

    assert len(history) == 1
    assert history[0].is_current
    assert history[0].period_length == 5


def test_cycle_history_empty(profile_factory):
    """Test an empty profile has no history."""
    assert get_cycle_history(profile_factory()) == []
    assert get_cycle_history(None) == []


def test_trend_data_oldest_first(history_profile):
    """Test trend points run from the oldest completed cycle."""
    points = get_trend_data(history_profile)

    assert [(p.start_date, p.length) for p in points] == [
        (date(2024, 1, 1), 28),
        (date(2024, 1, 29), 34),
    ]


def test_trend_data_capped(profile_factory):
    """Test only the six most recent completed cycles are charted."""
    profile = profile_factory(*[
        (date(2023, 1, 1) + timedelta(days=i * 30), None) for i in range(10)
    ])

    points = get_trend_data(profile)

    assert len(points) == 6
    assert points[-1].start_date == date(2023, 1, 1) + timedelta(days=8 * 30)
    assert all(p.length == 30 for p in points)


def test_trend_data_not_enough_data(profile_factory):
    """Test a single interval yields no trend points."""
    assert get_trend_data(profile_factory((date(2024, 1, 1), None))) == []
    assert get_trend_data(profile_factory()) == []


def test_log_history_most_recent_first(profile_factory):
    """Test logs are listed newest day first."""
    profile = profile_factory()
    profile.logs[date(2024, 1, 2)] = DailyLog(mood="sad")
    profile.logs[date(2024, 1, 10)] = DailyLog(mood="happy", symptoms=["acne"])
    profile.logs[date(2024, 1, 5)] = DailyLog(flow="light")

    history = get_log_history(profile)

    assert [day for day, _ in history] == [date(2024, 1, 10), date(2024, 1, 5), date(2024, 1, 2)]
    assert history[0][1].mood == Mood.HAPPY
    assert get_log_history(None) == []
