"""Habit collection service."""

import logging
import random
from datetime import datetime
from typing import Any, Callable, Optional

from ..core import progress, statistics
from ..core.clock import Clock
from ..core.models import Habit, build_habit
from ..core.seed import SeedGenerator
from ..core.streaks import longest_streak
from .repository import HabitRepository, MemoryRepository
from .snapshot import Snapshot, dump_snapshot, export_snapshot, load_snapshot

logger = logging.getLogger(__name__)

# Managed by the engine, never set directly by callers.
PROTECTED_FIELDS = {"id", "history", "progress", "streak", "cycle_date", "created_at", "updated_at"}


class HabitService:
    """
    Owns the habit collection and applies user actions to it.

    Every mutation is applied to a copy of the habit and swapped in whole,
    then the collection is handed to the repository. Unknown habit ids are
    ignored rather than raised, since the UI may race with a delete.
    """

    def __init__(
        self,
        repository: Optional[HabitRepository] = None,
        clock: Optional[Clock] = None,
    ):
        """
        Initialize the service and load the stored collection.

        Args:
            repository: Persistence port (defaults to in-memory)
            clock: Source of "now" and day boundaries
        """
        self.repository = repository or MemoryRepository()
        self.clock = clock or Clock()
        self._habits: dict[str, Habit] = {
            habit.id: habit for habit in self.repository.load()
        }
        logger.info(f"Habit service ready with {len(self._habits)} habits")

    @property
    def habits(self) -> list[Habit]:
        return list(self._habits.values())

    def get(self, habit_id: str) -> Optional[Habit]:
        return self._habits.get(habit_id)

    def _save(self):
        self.repository.save(self.habits)

    # Habit definitions

    def add_habit(self, **fields: Any) -> Habit:
        """
        Create a habit from its definition fields.

        Raises:
            HabitValidationError: invalid name, target, countUnit, ...
        """
        ignored = PROTECTED_FIELDS.intersection(fields)
        if ignored:
            logger.warning(f"Ignoring engine-managed fields on create: {sorted(ignored)}")

        now = self.clock.now()
        data = {key: value for key, value in fields.items() if key not in PROTECTED_FIELDS}
        habit = build_habit({**data, "created_at": now, "updated_at": now})

        self._habits[habit.id] = habit
        self._save()
        logger.info(f"Added habit {habit.name} ({habit.id})")
        return habit

    def update_habit(self, habit_id: str, **changes: Any) -> Optional[Habit]:
        """
        Apply changes to a habit's definition.

        Returns:
            The updated habit, or None for an unknown id

        Raises:
            HabitValidationError: the result would be an invalid habit
        """
        habit = self.get(habit_id)
        if habit is None:
            logger.warning(f"Update for unknown habit {habit_id}")
            return None

        ignored = PROTECTED_FIELDS.intersection(changes)
        if ignored:
            logger.warning(f"Ignoring engine-managed fields on update: {sorted(ignored)}")
        changes = {key: value for key, value in changes.items() if key not in PROTECTED_FIELDS}

        data = habit.model_dump()
        data.update(changes)
        data["updated_at"] = self.clock.now()

        updated = build_habit(data)
        self._habits[habit_id] = updated
        self._save()
        logger.info(f"Updated habit {updated.name} ({habit_id}): {sorted(changes)}")
        return updated

    def delete_habit(self, habit_id: str) -> bool:
        habit = self._habits.pop(habit_id, None)
        if habit is None:
            return False
        self._save()
        logger.info(f"Deleted habit {habit.name} ({habit_id})")
        return True

    def toggle_reminder(self, habit_id: str, enabled: bool) -> Optional[Habit]:
        return self.update_habit(habit_id, reminder_enabled=enabled)

    def set_reminder_time(self, habit_id: str, reminder_time: str) -> Optional[Habit]:
        return self.update_habit(habit_id, reminder_time=reminder_time)

    # Progress

    def _mutate(
        self, habit_id: str, operation: Callable[[Habit, datetime], None]
    ) -> Optional[Habit]:
        habit = self.get(habit_id)
        if habit is None:
            logger.warning(f"{operation.__name__} for unknown habit {habit_id}")
            return None

        working = habit.model_copy(deep=True)
        operation(working, self.clock.now())
        self._habits[habit_id] = working
        self._save()
        return working

    def increment(self, habit_id: str) -> Optional[Habit]:
        return self._mutate(habit_id, progress.increment)

    def decrement(self, habit_id: str) -> Optional[Habit]:
        return self._mutate(habit_id, progress.decrement)

    def complete(self, habit_id: str) -> Optional[Habit]:
        return self._mutate(habit_id, progress.complete)

    def undo_complete(self, habit_id: str) -> Optional[Habit]:
        return self._mutate(habit_id, progress.undo_complete)

    def is_completed_today(self, habit_id: str) -> bool:
        habit = self.get(habit_id)
        if habit is None:
            return False
        return progress.is_completed_today(habit, self.clock.today())

    # Statistics bound to the clock

    def completion_stats(self) -> statistics.CompletionStats:
        return statistics.completion_stats(self.habits, self.clock.today())

    def longest_streak(self) -> int:
        return longest_streak(self.habits)

    def calendar_data(self, habit_id: str, days: int = 365) -> list[statistics.CalendarDay]:
        habit = self.get(habit_id)
        if habit is None:
            return []
        return statistics.calendar_data(habit, self.clock.today(), days)

    def time_of_day_distribution(self) -> statistics.TimeOfDayDistribution:
        return statistics.time_of_day_distribution(self.habits, self.clock.tz)

    # Export / import

    def export_snapshot(self, preferences: Optional[dict[str, Any]] = None) -> dict[str, Any]:
        return export_snapshot(self.habits, preferences)

    def export_json(self, preferences: Optional[dict[str, Any]] = None) -> str:
        return dump_snapshot(self.habits, preferences)

    def import_snapshot(self, text: str) -> Snapshot:
        """
        Replace the collection with a snapshot's habits.

        The snapshot is fully validated first; on any error the current
        collection is left untouched.

        Raises:
            SnapshotError: malformed or invalid snapshot
        """
        snapshot = load_snapshot(text)
        self._habits = {habit.id: habit for habit in snapshot.habits}
        self._save()
        logger.info(f"Imported {len(snapshot.habits)} habits")
        return snapshot

    def generate_mock_data(self, seed: Optional[int] = None, days: int = 90) -> list[Habit]:
        """Replace the collection with demo habits and generated history."""
        generator = SeedGenerator(random.Random(seed))
        habits = generator.generate_mock_data(self.clock.now(), days)
        self._habits = {habit.id: habit for habit in habits}
        self._save()
        return habits
