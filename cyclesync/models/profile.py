"""
Profile model definition for the CycleSync store.
"""
from datetime import date
from typing import Dict, List
from pydantic import BaseModel, ConfigDict, Field

from cyclesync.models.cycle import CycleInterval
from cyclesync.models.log import DailyLog

DEFAULT_THEME_COLOR = "#FF8DA1"


class Profile(BaseModel):
    """
    Represents one tracked person with an independent cycle timeline.

    Intervals are kept in insertion order; display order is derived on read.
    """
    model_config = ConfigDict(populate_by_name=True)

    id: str
    name: str
    theme_color: str = Field(DEFAULT_THEME_COLOR, alias="themeColor")
    cycles: List[CycleInterval] = []
    logs: Dict[date, DailyLog] = {}
