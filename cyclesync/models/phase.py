"""
Derived cycle model definitions: phases, predictions and display bundles.
"""
from enum import Enum
from datetime import date
from typing import List, Optional
from pydantic import BaseModel, computed_field


class PhaseType(str, Enum):
    """
    Cycle phases, including the overdue state.
    """
    MENSTRUAL = "menstrual"
    FOLLICULAR = "follicular"
    OVULATION = "ovulation"
    LUTEAL = "luteal"
    LATE = "late"

    @property
    def label(self) -> str:
        """Human readable phase name."""
        return f"{self.value.title()} Phase"


class PredictionStatus(str, Enum):
    """
    Where today sits relative to the predicted next period.
    """
    UPCOMING = "upcoming"
    EXPECTED_TODAY = "expected_today"
    LATE = "late"


class Prediction(BaseModel):
    """
    Forward projection of the next period from the most recent start.
    """
    next_start: date
    days_until: int
    status: PredictionStatus

    @computed_field
    @property
    def message(self) -> str:
        """Prediction sentence for the dashboard."""
        if self.status == PredictionStatus.UPCOMING:
            return f"Next period predicted in {self.days_until} days."
        if self.status == PredictionStatus.EXPECTED_TODAY:
            return "Period expected today."
        return f"Period was expected {abs(self.days_until)} days ago."

    @computed_field
    @property
    def badge(self) -> Optional[str]:
        """Short status tag; None when nothing needs flagging."""
        if self.status == PredictionStatus.EXPECTED_TODAY:
            return "Expected Today"
        if self.status == PredictionStatus.LATE:
            return f"{abs(self.days_until)} days late"
        return None


class FertileWindow(BaseModel):
    """
    Estimated ovulation day and the five-day window around it.
    """
    ovulation_date: date
    start_date: date
    end_date: date

    def contains(self, day: date) -> bool:
        """Check if a day falls inside the window, bounds included."""
        return self.start_date <= day <= self.end_date


class CycleStatus(BaseModel):
    """
    Everything the dashboard shows for the active profile.

    When ``has_data`` is False every derived field except the labels is None.
    """
    has_data: bool
    day_in_cycle: Optional[int] = None
    day_label: str
    phase: Optional[PhaseType] = None
    phase_label: str
    color: str
    progress_percent: float = 0.0
    average_cycle_length: int
    prediction: Optional[Prediction] = None
    affirmation: Optional[str] = None
    partner_message: Optional[str] = None
    period_active: bool = False

    @computed_field
    @property
    def next_action(self) -> str:
        """Which period log button applies right now."""
        return "log_end" if self.period_active else "log_start"


class CalendarDay(BaseModel):
    """
    Display flags for a single calendar grid cell.
    """
    date: date
    is_today: bool = False
    is_period: bool = False
    is_predicted: bool = False
    is_fertile: bool = False
    has_log: bool = False


class CalendarMonth(BaseModel):
    """
    A month of calendar cells with the number of blank leading cells.
    """
    year: int
    month: int
    leading_blanks: int
    days: List[CalendarDay]


class HistoryEntry(BaseModel):
    """
    One row of the cycle history list.

    The most recent interval has no length yet and is reported as active.
    """
    start_date: date
    end_date: Optional[date] = None
    cycle_length: Optional[int] = None
    period_length: Optional[int] = None
    status: str
    is_current: bool = False
    is_regular: Optional[bool] = None


class TrendPoint(BaseModel):
    """
    A completed cycle length for the trend chart.
    """
    start_date: date
    length: int
