"""Persistence ports for the habit collection."""

import json
import logging
from pathlib import Path
from typing import Optional, Protocol

from ..core.models import Habit
from .snapshot import export_snapshot, load_snapshot

logger = logging.getLogger(__name__)


class HabitRepository(Protocol):
    """Loads and saves the whole habit collection."""

    def load(self) -> list[Habit]: ...

    def save(self, habits: list[Habit]) -> None: ...


class MemoryRepository:
    """Keeps the last saved collection in memory."""

    def __init__(self, habits: Optional[list[Habit]] = None):
        self.habits = [habit.model_copy(deep=True) for habit in habits or []]
        self.saves = 0

    def load(self) -> list[Habit]:
        return [habit.model_copy(deep=True) for habit in self.habits]

    def save(self, habits: list[Habit]):
        self.habits = [habit.model_copy(deep=True) for habit in habits]
        self.saves += 1


class JsonFileRepository:
    """Snapshot file in the export format, rewritten on every save."""

    def __init__(self, path: str = "data/habits.json"):
        """Initialize file store."""
        self.path = Path(path)
        self.path.parent.mkdir(parents=True, exist_ok=True)

    def load(self) -> list[Habit]:
        """Read habits from disk, empty if the file does not exist yet."""
        if not self.path.exists():
            logger.info(f"No snapshot at {self.path}, starting empty")
            return []

        snapshot = load_snapshot(self.path.read_text(encoding="utf-8"))
        logger.info(f"Loaded {len(snapshot.habits)} habits from {self.path}")
        return snapshot.habits

    def save(self, habits: list[Habit]):
        """Write habits atomically via a temporary file."""
        tmp_path = self.path.with_suffix(self.path.suffix + ".tmp")
        tmp_path.write_text(
            json.dumps(export_snapshot(habits), indent=2, ensure_ascii=False),
            encoding="utf-8",
        )
        tmp_path.replace(self.path)
        logger.debug(f"Saved {len(habits)} habits to {self.path}")
