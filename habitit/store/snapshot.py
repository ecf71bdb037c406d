"""Export/import snapshot format."""

import json
import logging
from typing import Any, Optional

from pydantic import ConfigDict, ValidationError

from ..core.models import Habit, HabitValidationError, Record

logger = logging.getLogger(__name__)


class SnapshotError(Exception):
    """A snapshot could not be read; nothing was imported."""


class Snapshot(Record):
    """
    Backup document: the habit list plus whatever UI preferences came with it.

    Keys other than "habits" (widgets, theme, ...) are kept verbatim.
    """

    model_config = ConfigDict(extra="allow")

    habits: list[Habit]

    @property
    def preferences(self) -> dict[str, Any]:
        return dict(self.model_extra or {})


def export_snapshot(
    habits: list[Habit], preferences: Optional[dict[str, Any]] = None
) -> dict[str, Any]:
    """Build the JSON-ready export document."""
    preferences = dict(preferences or {})
    if preferences.pop("habits", None) is not None:
        logger.warning("Ignoring 'habits' key in export preferences")
    snapshot = Snapshot(habits=habits, **preferences)
    return snapshot.model_dump(mode="json", by_alias=True)


def dump_snapshot(
    habits: list[Habit], preferences: Optional[dict[str, Any]] = None
) -> str:
    return json.dumps(export_snapshot(habits, preferences), indent=2, ensure_ascii=False)


def load_snapshot(text: str) -> Snapshot:
    """
    Parse an export document.

    Raises:
        SnapshotError: malformed JSON, missing habits, or any invalid habit
    """
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise SnapshotError(f"Snapshot is not valid JSON: {e}") from e

    if not isinstance(data, dict) or not isinstance(data.get("habits"), list):
        raise SnapshotError("Snapshot must be an object with a 'habits' array")

    try:
        snapshot = Snapshot.model_validate(data)
    except ValidationError as e:
        raise SnapshotError(f"Snapshot contains an invalid habit: {_describe(e)}") from e

    ids = [habit.id for habit in snapshot.habits]
    if len(ids) != len(set(ids)):
        raise SnapshotError("Snapshot contains duplicate habit ids")

    logger.info(f"Loaded snapshot with {len(snapshot.habits)} habits")
    return snapshot


def _describe(error: ValidationError) -> str:
    first = error.errors()[0]
    original = first.get("ctx", {}).get("error")
    location = ".".join(str(part) for part in first["loc"])
    if isinstance(original, HabitValidationError):
        return f"{location}: {original}"
    return f"{location}: {first['msg']}"
