"""Progress engine: mutates a habit's current cycle."""

import logging
from datetime import date, datetime, timedelta

from .models import CountType, Habit, HistoryEntry
from .streaks import current_streak

logger = logging.getLogger(__name__)


def start_cycle(habit: Habit, today: date) -> None:
    """
    Roll the habit over to today's cycle if a new day has begun.

    Progress belongs to the day it was accumulated on. On the first mutation
    of a new day it resets to 0 and the cached streak is re-derived as the run
    ending today, or the run ending yesterday while today is still open.
    Today's completion then extends it.
    """
    if habit.cycle_date == today:
        return

    # Undated progress (never mutated, or imported) is taken as today's.
    if habit.cycle_date is not None and not habit.is_completed_on(today):
        habit.progress = 0

    logger.debug(f"New cycle for {habit.name}: {habit.cycle_date} -> {today}")
    habit.streak = current_streak(habit.history, today) or current_streak(
        habit.history, today - timedelta(days=1)
    )
    habit.cycle_date = today


def increment(habit: Habit, now: datetime) -> None:
    """
    Add one unit of progress to a count habit.

    Reaching the target closes the cycle exactly like complete().
    """
    if habit.count_type != CountType.COUNT:
        logger.debug(f"Ignoring increment on completion habit {habit.name}")
        return

    today = now.date()
    start_cycle(habit, today)

    if habit.progress >= habit.target:
        return

    habit.progress = min(habit.progress + 1, habit.target)
    habit.updated_at = now

    if habit.progress == habit.target:
        complete(habit, now)


def decrement(habit: Habit, now: datetime) -> None:
    """
    Remove one unit of progress from a count habit.

    History and streak are left alone, so a day already closed stays closed.
    """
    if habit.count_type != CountType.COUNT:
        logger.debug(f"Ignoring decrement on completion habit {habit.name}")
        return

    start_cycle(habit, now.date())
    habit.progress = max(habit.progress - 1, 0)
    habit.updated_at = now


def complete(habit: Habit, now: datetime) -> None:
    """
    Close today's cycle.

    Writes (or overwrites) today's entry and fills progress. The streak only
    grows the first time a day is closed.
    """
    today = now.date()
    start_cycle(habit, today)

    already_completed = habit.is_completed_on(today)

    habit.put_entry(
        HistoryEntry(
            date=today,
            count=max(habit.progress, habit.target),
            completed=True,
            time_of_completion=now,
        )
    )
    habit.progress = habit.target
    if not already_completed:
        habit.streak += 1
    habit.updated_at = now

    logger.info(f"Completed {habit.name} for {today} (streak: {habit.streak})")


def undo_complete(habit: Habit, now: datetime) -> None:
    """
    Reopen today's cycle.

    Today's entry is removed outright and progress goes back to 0, even if
    some partial count had been recorded before completion.
    """
    today = now.date()
    start_cycle(habit, today)

    removed = habit.remove_entry(today)
    habit.progress = 0
    if removed is not None and removed.completed:
        habit.streak = max(habit.streak - 1, 0)
    habit.updated_at = now

    logger.info(f"Undid completion of {habit.name} for {today} (streak: {habit.streak})")


def is_completed_today(habit: Habit, today: date) -> bool:
    return habit.is_completed_on(today)
