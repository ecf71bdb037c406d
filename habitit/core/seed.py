"""Synthetic habit history for demos and test fixtures."""

import logging
import random
from dataclasses import dataclass
from datetime import date, datetime, time, timedelta, tzinfo
from typing import Optional

from .dates import weekday_index
from .models import CountType, Frequency, Habit, HabitCategory, HistoryEntry, build_habit
from .streaks import current_streak

logger = logging.getLogger(__name__)


@dataclass
class HabitProfile:
    """How reliably a habit gets done, and on which weekdays."""
    consistency: float = 0.7
    weekdays: Optional[frozenset[int]] = None  # None = any day
    count_range: Optional[tuple[int, int]] = None


MOCK_HABITS = [
    {
        "name": "Morning Run",
        "description": "Run for 30 minutes every morning to boost energy levels",
        "icon": "🏃",
        "target": 1,
        "frequency": Frequency.DAILY,
        "category": HabitCategory.HEALTH,
        "reminder_time": "07:00",
        "reminder_enabled": True,
    },
    {
        "name": "Drink Water",
        "description": "Drink 8 glasses of water daily for better hydration",
        "icon": "💧",
        "target": 8,
        "frequency": Frequency.DAILY,
        "category": HabitCategory.HEALTH,
        "reminder_time": "10:00",
        "count_type": CountType.COUNT,
        "count_unit": "glasses",
    },
    {
        "name": "Read Books",
        "description": "Read for at least 30 minutes daily to expand knowledge",
        "icon": "📚",
        "target": 1,
        "frequency": Frequency.DAILY,
        "category": HabitCategory.LEARNING,
        "reminder_time": "21:00",
        "reminder_enabled": True,
    },
    {
        "name": "Meditate",
        "description": "Practice mindfulness for 10 minutes each day",
        "icon": "🧘",
        "target": 1,
        "frequency": Frequency.DAILY,
        "category": HabitCategory.MINDFULNESS,
        "reminder_time": "07:30",
    },
    {
        "name": "Code Project",
        "description": "Work on personal coding projects to improve skills",
        "icon": "💻",
        "target": 2,
        "frequency": Frequency.WEEKLY,
        "category": HabitCategory.PRODUCTIVITY,
        "reminder_time": "18:00",
        "reminder_enabled": True,
        "count_type": CountType.COUNT,
        "count_unit": "hours",
    },
    {
        "name": "Budget Review",
        "description": "Review personal finances weekly",
        "icon": "💰",
        "target": 1,
        "frequency": Frequency.WEEKLY,
        "category": HabitCategory.FINANCE,
        "reminder_time": "20:00",
        "reminder_enabled": True,
    },
    {
        "name": "Call Family",
        "description": "Call parents or siblings weekly to stay connected",
        "icon": "👥",
        "target": 1,
        "frequency": Frequency.WEEKLY,
        "category": HabitCategory.SOCIAL,
        "reminder_time": "19:00",
        "reminder_enabled": True,
    },
    {
        "name": "Guitar Practice",
        "description": "Practice guitar to improve musical skills",
        "icon": "🎸",
        "target": 3,
        "frequency": Frequency.WEEKLY,
        "category": HabitCategory.CUSTOM,
        "reminder_time": "17:00",
        "count_type": CountType.COUNT,
        "count_unit": "sessions",
    },
    {
        "name": "Journaling",
        "description": "Write in journal to reflect on thoughts and experiences",
        "icon": "📝",
        "target": 1,
        "frequency": Frequency.DAILY,
        "category": HabitCategory.MINDFULNESS,
        "reminder_time": "22:00",
        "reminder_enabled": True,
    },
    {
        "name": "Learn Language",
        "description": "Practice new language skills with daily exercises",
        "icon": "🗣️",
        "target": 1,
        "frequency": Frequency.DAILY,
        "category": HabitCategory.LEARNING,
        "reminder_time": "18:30",
    },
]

WEEKEND = frozenset({0, 6})

PROFILES = {
    "Morning Run": HabitProfile(consistency=0.7),
    "Drink Water": HabitProfile(consistency=0.85, count_range=(6, 8)),
    "Read Books": HabitProfile(consistency=0.65),
    "Meditate": HabitProfile(consistency=0.5),
    "Code Project": HabitProfile(consistency=0.8, weekdays=WEEKEND, count_range=(1, 3)),
    "Budget Review": HabitProfile(consistency=0.9, weekdays=frozenset({0})),
    "Call Family": HabitProfile(consistency=0.95, weekdays=WEEKEND),
    "Guitar Practice": HabitProfile(consistency=0.4, count_range=(1, 2)),
    "Journaling": HabitProfile(consistency=0.75),
    "Learn Language": HabitProfile(consistency=0.55),
}


class SeedGenerator:
    """
    Generates plausible completion history.

    All randomness comes from the injected random.Random, so a fixed seed
    gives identical output.
    """

    def __init__(self, rng: Optional[random.Random] = None):
        self.rng = rng or random.Random()

    def profile_for(self, habit: Habit) -> HabitProfile:
        """Known demo profile, or one derived from the habit's schedule."""
        if habit.name in PROFILES:
            return PROFILES[habit.name]
        if habit.custom_days:
            return HabitProfile(weekdays=frozenset(habit.custom_days))
        if habit.frequency == Frequency.WEEKLY:
            return HabitProfile(consistency=0.4)
        return HabitProfile()

    def generate_history(
        self,
        habit: Habit,
        days: int,
        today: date,
        profile: Optional[HabitProfile] = None,
        tz: Optional[tzinfo] = None,
    ) -> list[HistoryEntry]:
        """
        Generate entries for the `days` days before today, and today.

        Args:
            habit: Habit the history is for
            days: How far back to start
            today: Last day generated
            profile: Overrides the habit's profile
            tz: Zone attached to completion times

        Returns:
            Completed entries in chronological order
        """
        profile = profile or self.profile_for(habit)
        entries = []

        for offset in range(days, -1, -1):
            day = today - timedelta(days=offset)

            if profile.weekdays is not None and weekday_index(day) not in profile.weekdays:
                continue
            if self.rng.random() >= profile.consistency:
                continue

            entries.append(
                HistoryEntry(
                    date=day,
                    count=self._count(habit, profile),
                    completed=True,
                    time_of_completion=datetime.combine(
                        day,
                        time(hour=self.rng.randint(8, 19), minute=self.rng.randint(0, 59)),
                        tzinfo=tz,
                    ),
                )
            )

        return entries

    def _count(self, habit: Habit, profile: HabitProfile) -> int:
        if habit.count_type == CountType.COMPLETION:
            return 1
        if profile.count_range is None:
            return habit.target
        low, high = profile.count_range
        return self.rng.randint(low, high)

    def mock_habits(self, now: datetime) -> list[Habit]:
        """The demo habit set, with no history."""
        return [
            build_habit({**fields, "created_at": now, "updated_at": now})
            for fields in MOCK_HABITS
        ]

    def generate_mock_data(self, now: datetime, days: int = 90) -> list[Habit]:
        """
        Demo habits with `days` of history ending at now.

        Each habit's streak is derived from its generated history.
        """
        today = now.date()
        habits = self.mock_habits(now)

        for habit in habits:
            for entry in self.generate_history(habit, days, today, tz=now.tzinfo):
                habit.put_entry(entry)
            habit.streak = current_streak(habit.history, today)
            if habit.is_completed_on(today):
                habit.progress = habit.target
                habit.cycle_date = today
            logger.debug(
                f"Generated {len(habit.history)} entries for {habit.name} "
                f"(streak: {habit.streak})"
            )

        logger.info(f"Generated mock data for {len(habits)} habits over {days} days")
        return habits
