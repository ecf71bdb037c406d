"""HTTP request and response models."""

from datetime import date
from typing import Any, Optional

from pydantic import BaseModel

from ..core.models import CountType, Frequency, HabitCategory, Record


class HabitCreate(Record):
    """Body for creating a habit."""

    name: str
    description: str = ""
    icon: str = ""
    color: str = ""
    target: int = 1
    count_type: CountType = CountType.COMPLETION
    count_unit: str = ""
    frequency: Frequency = Frequency.DAILY
    custom_days: list[int] = []
    category: HabitCategory = HabitCategory.CUSTOM
    reminder_time: Optional[str] = None
    reminder_enabled: bool = False


class HabitUpdate(Record):
    """Body for a partial habit update; only fields sent are applied."""

    name: Optional[str] = None
    description: Optional[str] = None
    icon: Optional[str] = None
    color: Optional[str] = None
    target: Optional[int] = None
    count_type: Optional[CountType] = None
    count_unit: Optional[str] = None
    frequency: Optional[Frequency] = None
    custom_days: Optional[list[int]] = None
    category: Optional[HabitCategory] = None
    reminder_time: Optional[str] = None
    reminder_enabled: Optional[bool] = None


class CompletionSummary(BaseModel):
    """Response for /api/stats/summary."""

    completed: int
    total: int
    percentage: int
    longest_streak: int


class ConsistencyItem(BaseModel):
    habit_id: str
    name: str
    score: int
    completed_days: int
    range_days: int


class CorrelationItem(BaseModel):
    habit1_id: str
    habit2_id: str
    habit1_name: str
    habit2_name: str
    score: int
    level: Optional[str] = None


class HabitTrend(BaseModel):
    """Response for /api/habits/{id}/trend."""

    habit_id: str
    dates: list[date]
    rolling_average: list[float]
    current_streak: int
    best_streak: int


class ImportResponse(BaseModel):
    status: str = "success"
    imported: int
    preferences: dict[str, Any] = {}
