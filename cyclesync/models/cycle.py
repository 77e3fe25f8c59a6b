"""
Cycle interval model definition.
"""
from datetime import date
from typing import Optional
from pydantic import BaseModel, ConfigDict, Field


class CycleInterval(BaseModel):
    """
    Represents one recorded bleeding episode.

    An interval without an end date is "open": the period is still ongoing.
    End dates earlier than the start date are accepted as stored; the cycle
    services treat them as zero-length.
    """
    model_config = ConfigDict(populate_by_name=True)

    start_date: date = Field(..., alias="startDate")
    end_date: Optional[date] = Field(None, alias="endDate")

    @property
    def is_open(self) -> bool:
        """Check if the period is still ongoing."""
        return self.end_date is None
