import os
import tempfile
from datetime import date, datetime, timezone
from pathlib import Path

import pytest

# habitit.main builds its file repository at import time.
os.environ.setdefault(
    "HABITIT_DATA_PATH", str(Path(tempfile.mkdtemp(prefix="habitit-")) / "habits.json")
)

from habitit.core.clock import FixedClock
from habitit.core.models import Habit, HistoryEntry, build_habit
from habitit.store.repository import MemoryRepository
from habitit.store.service import HabitService

NOW = datetime(2024, 1, 7, 9, 30, tzinfo=timezone.utc)
TODAY = NOW.date()


def make_habit(**fields) -> Habit:
    data = {"name": "Read", "target": 1}
    data.update(fields)
    return build_habit(data)


def with_completions(habit: Habit, days: list[date], **entry_fields) -> Habit:
    for day in days:
        habit.put_entry(HistoryEntry(date=day, count=habit.target, completed=True, **entry_fields))
    return habit


@pytest.fixture
def clock():
    return FixedClock(NOW)


@pytest.fixture
def repository():
    return MemoryRepository()


@pytest.fixture
def service(repository, clock):
    return HabitService(repository=repository, clock=clock)


@pytest.fixture
def water(service):
    return service.add_habit(
        name="Drink Water", target=3, count_type="count", count_unit="glasses"
    )


@pytest.fixture
def run(service):
    return service.add_habit(name="Morning Run", category="health")
