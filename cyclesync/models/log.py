"""
Daily log model definitions for mood, flow and symptom tracking.
"""
from enum import Enum
from typing import Any, List, Optional
from pydantic import BaseModel, field_validator


class Mood(str, Enum):
    """
    Mood tags available in the daily log.
    """
    HAPPY = "happy"
    CALM = "calm"
    SAD = "sad"
    TIRED = "tired"
    ANGRY = "angry"


class Flow(str, Enum):
    """
    Flow intensity tags available in the daily log.
    """
    SPOTTING = "spotting"
    LIGHT = "light"
    MEDIUM = "medium"
    HEAVY = "heavy"


class DailyLog(BaseModel):
    """
    Represents everything logged for a single calendar day.

    Re-saving the same day replaces the whole entry; fields are never merged.
    """
    mood: Optional[Mood] = None
    flow: Optional[Flow] = None
    symptoms: List[str] = []

    @field_validator("mood", "flow", mode="before")
    @classmethod
    def unset_to_none(cls, value: Any) -> Any:
        """Treat empty and "unset" tags as no selection."""
        if value in ("", "unset"):
            return None
        return value

    @field_validator("symptoms", mode="before")
    @classmethod
    def collapse_duplicates(cls, value: Any) -> Any:
        """Strip symptom tags and drop duplicates, keeping first-seen order."""
        if value is None:
            return []
        if isinstance(value, str):
            value = [value]
        seen = []
        for symptom in value:
            tag = str(symptom).strip()
            if tag and tag not in seen:
                seen.append(tag)
        return seen
