"""
Tests for dashboard status, affirmations and partner messages.
"""
import random
from datetime import date

from cyclesync.models.phase import PhaseType, PredictionStatus
from cyclesync.services.constants import AFFIRMATIONS, PARTNER_MESSAGES, PHASE_COLORS, NO_DATA_COLOR
from cyclesync.services.phase import (
    cycle_progress,
    due_reminder,
    get_cycle_status,
    is_period_due_tomorrow,
    partner_message,
    phase_color,
    pick_affirmation,
)


def test_status_without_data(profile_factory):
    """Test the dashboard degrades to a no-data state."""
    for profile in (None, profile_factory()):
        status = get_cycle_status(profile, date(2024, 1, 1))

        assert status.has_data is False
        assert status.day_label == "Day ?"
        assert status.phase_label == "No data yet"
        assert status.phase is None
        assert status.color == NO_DATA_COLOR
        assert status.prediction is None
        assert status.average_cycle_length == 28
        assert status.next_action == "log_start"


def test_status_ovulation(profile_factory):
    """Test a full dashboard bundle on day 14."""
    profile = profile_factory((date(2024, 1, 1), date(2024, 1, 5)))

    status = get_cycle_status(profile, date(2024, 1, 14), rng=random.Random(1))

    assert status.has_data
    assert status.day_in_cycle == 14
    assert status.day_label == "Day 14"
    assert status.phase == PhaseType.OVULATION
    assert status.phase_label == "Ovulation Phase"
    assert status.color == "#B8E0D2"
    assert status.progress_percent == 50.0
    assert status.prediction.days_until == 15
    assert status.prediction.status == PredictionStatus.UPCOMING
    assert status.affirmation in AFFIRMATIONS[PhaseType.OVULATION]
    assert status.partner_message == PARTNER_MESSAGES[PhaseType.OVULATION]
    assert status.next_action == "log_start"


def test_status_active_period(profile_factory):
    """Test an open period offers the end action."""
    profile = profile_factory((date(2024, 1, 1), None))

    status = get_cycle_status(profile, date(2024, 1, 2), rng=random.Random(0))

    assert status.phase == PhaseType.MENSTRUAL
    assert status.period_active
    assert status.next_action == "log_end"


def test_status_start_date_is_day_one(profile_factory):
    """Test the dashboard shows day 1 on the date the period started."""
    profile = profile_factory((date(2024, 1, 1), None))

    status = get_cycle_status(profile, date(2024, 1, 1), rng=random.Random(0))

    assert status.day_in_cycle == 1
    assert status.day_label == "Day 1"
    assert status.phase == PhaseType.MENSTRUAL


def test_status_late(profile_factory):
    """Test a late period reports the late color and full progress."""
    profile = profile_factory((date(2024, 1, 1), date(2024, 1, 5)))

    status = get_cycle_status(profile, date(2024, 2, 10), rng=random.Random(0))

    assert status.phase == PhaseType.LATE
    assert status.color == PHASE_COLORS[PhaseType.LATE]
    assert status.progress_percent == 100.0
    assert status.prediction.badge == "12 days late"


def test_pick_affirmation_is_reproducible():
    """Test the same seed yields the same affirmation."""
    first = pick_affirmation(PhaseType.LUTEAL, random.Random(7))
    second = pick_affirmation(PhaseType.LUTEAL, random.Random(7))

    assert first == second
    assert first in AFFIRMATIONS[PhaseType.LUTEAL]


def test_pick_affirmation_unknown_phase_falls_back():
    """Test a missing phase uses the menstrual affirmations."""
    assert pick_affirmation(None, random.Random(3)) in AFFIRMATIONS[PhaseType.MENSTRUAL]


def test_partner_messages_cover_every_phase():
    """Test each phase has a share message."""
    for phase in PhaseType:
        assert partner_message(phase) == PARTNER_MESSAGES[phase]
    assert partner_message(None) == PARTNER_MESSAGES[PhaseType.MENSTRUAL]


def test_phase_color():
    """Test color tokens per phase."""
    assert phase_color(PhaseType.MENSTRUAL) == "#FF8DA1"
    assert phase_color(PhaseType.FOLLICULAR) == "#C8B6FF"
    assert phase_color(PhaseType.LUTEAL) == "#FFD166"
    assert phase_color(None) == NO_DATA_COLOR


def test_cycle_progress_capped():
    """Test progress never exceeds 100 percent."""
    assert cycle_progress(14, 28) == 50.0
    assert cycle_progress(40, 28) == 100.0


def test_due_tomorrow(profile_factory):
    """Test the reminder fires the day before the predicted start."""
    profile = profile_factory((date(2024, 1, 1), date(2024, 1, 5)))

    assert is_period_due_tomorrow(profile, date(2024, 1, 28))
    assert due_reminder(profile, date(2024, 1, 28)) == "Your period is predicted to start tomorrow!"
    assert not is_period_due_tomorrow(profile, date(2024, 1, 27))
    assert due_reminder(profile, date(2024, 1, 29)) is None
    assert not is_period_due_tomorrow(profile_factory(), date(2024, 1, 28))
