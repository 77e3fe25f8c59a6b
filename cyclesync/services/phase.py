"""
Service module for phase-specific content and the dashboard status.

This module turns the derived phase into what the dashboard shows: labels,
colors, ring progress, affirmations and the partner share message. Random
choices take an explicit ``random.Random`` so results can be reproduced.

Typical usage:
    >>> status = get_cycle_status(profile, date.today(), rng=random.Random())
    >>> print(status.day_label, status.phase_label)
    >>> share_text = partner_message(status.phase)
"""
import random
from typing import Optional

from cyclesync.models.phase import CycleStatus, PhaseType
from cyclesync.models.profile import Profile
from cyclesync.services.constants import (
    AFFIRMATIONS,
    DUE_TOMORROW_MESSAGE,
    NO_DATA_COLOR,
    PARTNER_MESSAGES,
    PHASE_COLORS,
)
from cyclesync.services.cycle import (
    average_cycle_length,
    classify_phase,
    day_in_cycle,
    is_period_active,
    predict_next_period,
)
from cyclesync.services.utils import DateLike

NO_DATA_DAY_LABEL = "Day ?"
NO_DATA_PHASE_LABEL = "No data yet"


def phase_color(phase: Optional[PhaseType]) -> str:
    """Color token for a phase; the neutral token when there is no data."""
    if phase is None:
        return NO_DATA_COLOR
    return PHASE_COLORS[phase]


def pick_affirmation(phase: Optional[PhaseType], rng: random.Random) -> str:
    """
    Choose an affirmation for a phase.

    Args:
        phase: Current phase; unknown phases use the menstrual set
        rng: Source of randomness supplied by the caller

    Returns:
        One affirmation string
    """
    affirmations = AFFIRMATIONS.get(phase) or AFFIRMATIONS[PhaseType.MENSTRUAL]
    return rng.choice(affirmations)


def partner_message(phase: Optional[PhaseType]) -> str:
    """Share-ready status message for a phase."""
    return PARTNER_MESSAGES.get(phase) or PARTNER_MESSAGES[PhaseType.MENSTRUAL]


def cycle_progress(cycle_day: int, average_length: int) -> float:
    """Share of the average cycle elapsed, as a percentage capped at 100."""
    if average_length <= 0:
        return 100.0
    return min(cycle_day / average_length * 100, 100.0)


def get_cycle_status(
    profile: Optional[Profile],
    today: DateLike,
    rng: Optional[random.Random] = None
) -> CycleStatus:
    """
    Collect the dashboard values for a profile.

    Args:
        profile: Active profile, or None before onboarding
        today: Day to report on
        rng: Randomness for the affirmation; a fresh ``random.Random`` when omitted

    Returns:
        CycleStatus; ``has_data`` is False when no period has been logged

    Example:
        >>> status = get_cycle_status(profile, date(2024, 1, 14), random.Random(1))
        >>> status.phase_label
        'Ovulation Phase'
    """
    average = average_cycle_length(profile)
    phase = classify_phase(profile, today)

    if phase is None:
        return CycleStatus(
            has_data=False,
            day_label=NO_DATA_DAY_LABEL,
            phase_label=NO_DATA_PHASE_LABEL,
            color=NO_DATA_COLOR,
            average_cycle_length=average
        )

    if rng is None:
        rng = random.Random()

    cycle_day = day_in_cycle(profile, today)
    return CycleStatus(
        has_data=True,
        day_in_cycle=cycle_day,
        day_label=f"Day {cycle_day}",
        phase=phase,
        phase_label=phase.label,
        color=phase_color(phase),
        progress_percent=cycle_progress(cycle_day, average),
        average_cycle_length=average,
        prediction=predict_next_period(profile, today),
        affirmation=pick_affirmation(phase, rng),
        partner_message=partner_message(phase),
        period_active=is_period_active(profile)
    )


def is_period_due_tomorrow(profile: Optional[Profile], today: DateLike) -> bool:
    """Check if the next period is predicted to start the day after ``today``."""
    prediction = predict_next_period(profile, today)
    return prediction is not None and prediction.days_until == 1


def due_reminder(profile: Optional[Profile], today: DateLike) -> Optional[str]:
    """Reminder text for the notification layer, or None when nothing is due."""
    if is_period_due_tomorrow(profile, today):
        return DUE_TOMORROW_MESSAGE
    return None
