"""Streak calculation over a habit's history."""

import logging
from datetime import date, timedelta
from typing import Iterable, Mapping, Optional

from .models import Habit, HistoryEntry

logger = logging.getLogger(__name__)

History = Mapping[date, HistoryEntry]


def completed_dates(
    history: History,
    start: Optional[date] = None,
    end: Optional[date] = None,
) -> set[date]:
    """
    Dates with a completed entry, optionally restricted to [start, end].

    Args:
        history: Mapping of date to entry
        start: Inclusive lower bound (None for unbounded)
        end: Inclusive upper bound (None for unbounded)

    Returns:
        Set of completed dates
    """
    return {
        day
        for day, entry in history.items()
        if entry.completed
        and (start is None or day >= start)
        and (end is None or day <= end)
    }


def current_streak(history: History, as_of: date) -> int:
    """
    Count consecutive completed days ending at as_of.

    Walks backwards one calendar day at a time and stops at the first day
    without a completed entry, so a missed as_of gives 0.
    """
    streak = 0
    cursor = as_of
    while True:
        entry = history.get(cursor)
        if entry is None or not entry.completed:
            break
        streak += 1
        cursor -= timedelta(days=1)
    return streak


def best_streak(history: History) -> int:
    """
    Longest run of consecutive completed days anywhere in the history.

    Entries are sorted by date first; incomplete entries and missing days
    both break a run.
    """
    best = 0
    current = 0
    previous: Optional[date] = None

    for day in sorted(completed_dates(history)):
        if previous is not None and day - previous == timedelta(days=1):
            current += 1
        else:
            current = 1
        best = max(best, current)
        previous = day

    return best


def longest_streak(habits: Iterable[Habit]) -> int:
    """Highest cached streak across habits, 0 for none."""
    return max((habit.streak for habit in habits), default=0)
