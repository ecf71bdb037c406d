"""Habit and history entry records."""

import uuid
from datetime import date, datetime
from enum import Enum
from typing import Any, Optional

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    ValidationError,
    field_serializer,
    field_validator,
    model_validator,
)
from pydantic.alias_generators import to_camel

from .dates import date_range, weekday_index


class CountType(str, Enum):
    COMPLETION = "completion"
    COUNT = "count"


class Frequency(str, Enum):
    DAILY = "daily"
    WEEKLY = "weekly"
    CUSTOM = "custom"


class HabitCategory(str, Enum):
    HEALTH = "health"
    PRODUCTIVITY = "productivity"
    LEARNING = "learning"
    MINDFULNESS = "mindfulness"
    FINANCE = "finance"
    SOCIAL = "social"
    CUSTOM = "custom"


CATEGORY_COLORS = {
    HabitCategory.HEALTH: "#4ade80",
    HabitCategory.PRODUCTIVITY: "#3b82f6",
    HabitCategory.LEARNING: "#a855f7",
    HabitCategory.MINDFULNESS: "#ec4899",
    HabitCategory.FINANCE: "#eab308",
    HabitCategory.SOCIAL: "#f97316",
    HabitCategory.CUSTOM: "#64748b",
}


class HabitValidationError(ValueError):
    """A habit definition violates a field rule."""

    def __init__(self, field: str, message: str):
        super().__init__(f"{field}: {message}")
        self.field = field
        self.message = message


class Record(BaseModel):
    """Base for records serialised with the camelCase keys of the export format."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
    )


class HistoryEntry(Record):
    """One closed (or partially recorded) cycle of a habit."""

    date: date
    count: int = 0
    completed: bool = False
    time_of_completion: Optional[datetime] = None

    @field_validator("count", mode="before")
    @classmethod
    def _missing_count_is_zero(cls, value: Any) -> Any:
        return 0 if value is None else value

    @field_validator("completed", mode="before")
    @classmethod
    def _missing_completed_is_false(cls, value: Any) -> Any:
        return False if value is None else value

    @field_validator("count")
    @classmethod
    def _count_not_negative(cls, value: int) -> int:
        return max(value, 0)


class Habit(Record):
    """A tracked habit and its completion history."""

    id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    name: str
    description: str = ""
    icon: str = ""
    color: str = ""
    target: int = 1
    count_type: CountType = CountType.COMPLETION
    count_unit: str = ""
    frequency: Frequency = Frequency.DAILY
    custom_days: list[int] = Field(default_factory=list)
    category: HabitCategory = HabitCategory.CUSTOM
    progress: int = 0
    cycle_date: Optional[date] = None
    streak: int = 0  # run ending today, or yesterday until today is closed
    reminder_time: Optional[str] = None
    reminder_enabled: bool = False
    history: dict[date, HistoryEntry] = Field(default_factory=dict)
    created_at: datetime = Field(default_factory=lambda: datetime.now().astimezone())
    updated_at: datetime = Field(default_factory=lambda: datetime.now().astimezone())

    @field_validator("history", mode="before")
    @classmethod
    def _history_from_list(cls, value: Any) -> Any:
        # Stored as an array; later entries for the same date win.
        if isinstance(value, list):
            entries = {}
            for item in value:
                entry = item if isinstance(item, HistoryEntry) else HistoryEntry.model_validate(item)
                entries[entry.date] = entry
            return entries
        return value

    @field_serializer("history")
    def _history_to_list(self, history: dict[date, HistoryEntry]) -> list[dict]:
        return [entry.model_dump(mode="json", by_alias=True) for entry in history.values()]

    @model_validator(mode="after")
    def _check_fields(self) -> "Habit":
        if not self.name or not self.name.strip():
            raise HabitValidationError("name", "must not be empty")
        if self.target < 1:
            raise HabitValidationError("target", f"must be at least 1, got {self.target}")
        if self.count_type == CountType.COUNT and not self.count_unit.strip():
            raise HabitValidationError("countUnit", "is required for count habits")
        bad_days = [day for day in self.custom_days if not 0 <= day <= 6]
        if bad_days:
            raise HabitValidationError("customDays", f"weekday indices must be 0-6, got {bad_days}")
        if self.frequency == Frequency.CUSTOM and not self.custom_days:
            raise HabitValidationError("customDays", "custom frequency needs at least one weekday")
        if self.reminder_time is not None:
            try:
                datetime.strptime(self.reminder_time, "%H:%M")
            except ValueError:
                raise HabitValidationError(
                    "reminderTime", f"must be HH:MM, got {self.reminder_time!r}"
                ) from None
        self.custom_days = sorted(set(self.custom_days))
        if not self.color:
            self.color = CATEGORY_COLORS[self.category]
        self.progress = min(max(self.progress, 0), self.target)
        self.streak = max(self.streak, 0)
        return self

    # History access

    def entry_for(self, day: date) -> Optional[HistoryEntry]:
        return self.history.get(day)

    def put_entry(self, entry: HistoryEntry) -> None:
        """Write the entry for its date, replacing any existing one."""
        self.history[entry.date] = entry

    def remove_entry(self, day: date) -> Optional[HistoryEntry]:
        return self.history.pop(day, None)

    def is_completed_on(self, day: date) -> bool:
        entry = self.history.get(day)
        return entry is not None and entry.completed

    # Schedule

    def is_due(self, day: date) -> bool:
        """
        Whether the habit is scheduled on a day.

        Daily habits are due every day, custom ones on their weekdays only.
        Weekly habits are due any day unless customDays narrows them.
        """
        if self.frequency == Frequency.DAILY:
            return True
        if self.frequency == Frequency.WEEKLY and not self.custom_days:
            return True
        return weekday_index(day) in self.custom_days

    def due_dates(self, start: date, end: date) -> list[date]:
        return [day for day in date_range(start, end) if self.is_due(day)]


def build_habit(data: dict[str, Any]) -> Habit:
    """
    Validate raw habit fields into a Habit.

    Raises:
        HabitValidationError: naming the first offending field
    """
    try:
        return Habit.model_validate(data)
    except ValidationError as e:
        error = e.errors()[0]
        original = error.get("ctx", {}).get("error")
        if isinstance(original, HabitValidationError):
            raise original from None
        field = ".".join(str(part) for part in error["loc"]) or "habit"
        raise HabitValidationError(field, error["msg"]) from None
