"""Derived statistics over a habit collection."""

import logging
import math
from collections import Counter
from dataclasses import dataclass
from datetime import date, datetime, timedelta, tzinfo
from itertools import combinations
from typing import Iterable, Optional, Sequence

from .dates import (
    DAY_NAMES,
    DateLike,
    date_range,
    day_count,
    days_in_month,
    month_bounds,
    parse_date,
    weekday_index,
)
from .models import Habit, HabitCategory
from .streaks import completed_dates

logger = logging.getLogger(__name__)


def as_percentage(part: float, whole: float) -> int:
    """Percentage rounded half up, 0 when whole is 0."""
    if whole <= 0:
        return 0
    return math.floor(part / whole * 100 + 0.5)


@dataclass
class CompletionStats:
    """Habits completed today out of all habits."""
    completed: int = 0
    total: int = 0

    @property
    def percentage(self) -> int:
        return as_percentage(self.completed, self.total)


@dataclass
class WeekdayCompletion:
    """History entries that fell on one weekday."""
    day: str
    completed: int = 0
    total: int = 0


@dataclass
class RangeAnalysis:
    """Consistency of one habit over a date range."""
    habit: Habit
    score: int
    completed_days: int
    range_days: int


@dataclass
class TimeOfDayDistribution:
    """Completions bucketed by hour of day."""
    morning: int = 0  # 05:00-11:59
    afternoon: int = 0  # 12:00-16:59
    evening: int = 0  # 17:00-21:59
    night: int = 0

    @property
    def total(self) -> int:
        return self.morning + self.afternoon + self.evening + self.night

    def percentages(self) -> dict[str, int]:
        total = self.total
        return {
            "morning": as_percentage(self.morning, total),
            "afternoon": as_percentage(self.afternoon, total),
            "evening": as_percentage(self.evening, total),
            "night": as_percentage(self.night, total),
        }


@dataclass
class HabitCorrelation:
    """How often two habits are completed on the same days."""
    habit1: Habit
    habit2: Habit
    score: int
    level: Optional[str]


@dataclass
class CalendarDay:
    date: date
    completed: bool
    percentage: float = 0.0


@dataclass
class TrendPoint:
    """Consistency score over one interval of a trend."""
    start: date
    end: date
    score: int
    interval: str = "day"


# Today / collection-level views


def completion_stats(habits: Iterable[Habit], today: date) -> CompletionStats:
    """Count habits completed today against the total."""
    stats = CompletionStats()
    for habit in habits:
        stats.total += 1
        if habit.is_completed_on(today):
            stats.completed += 1
    return stats


def category_stats(habits: Iterable[Habit]) -> dict[HabitCategory, int]:
    """Number of habits per category."""
    return dict(Counter(habit.category for habit in habits))


def weekly_completion(habits: Iterable[Habit]) -> list[WeekdayCompletion]:
    """
    Tally every history entry by the weekday it occurred on.

    This is an all-time view, not a rolling last-7-days window.

    Returns:
        Seven buckets, Sunday first
    """
    buckets = [WeekdayCompletion(day=name) for name in DAY_NAMES]
    for habit in habits:
        for day, entry in habit.history.items():
            bucket = buckets[weekday_index(day)]
            bucket.total += 1
            if entry.completed:
                bucket.completed += 1
    return buckets


# Consistency


def consistency_score(
    habit: Habit,
    range_start: DateLike,
    range_end: DateLike,
    due_only: bool = False,
) -> int:
    """
    Percentage of days in a range on which the habit was completed.

    Args:
        habit: Habit to score
        range_start: First day (inclusive)
        range_end: Last day (inclusive)
        due_only: Score against the habit's scheduled days instead of
            every calendar day

    Returns:
        Integer 0-100; 0 for an empty or inverted range
    """
    start, end = parse_date(range_start), parse_date(range_end)
    done = completed_dates(habit.history, start, end)

    if due_only:
        due = habit.due_dates(start, end)
        return min(as_percentage(len(done.intersection(due)), len(due)), 100)

    return min(as_percentage(len(done), day_count(start, end)), 100)


def consistency_scores(
    habits: Iterable[Habit], range_start: DateLike, range_end: DateLike
) -> list[RangeAnalysis]:
    """Consistency analysis of every habit over the same range."""
    start, end = parse_date(range_start), parse_date(range_end)
    range_days = day_count(start, end)

    results = []
    for habit in habits:
        completed_days = len(completed_dates(habit.history, start, end))
        results.append(
            RangeAnalysis(
                habit=habit,
                score=min(as_percentage(completed_days, range_days), 100),
                completed_days=completed_days,
                range_days=range_days,
            )
        )
    return results


def monthly_progress(habit: Habit, year: int, month: int) -> int:
    """Share of the month's days on which the habit was completed."""
    start, end = month_bounds(year, month)
    done = completed_dates(habit.history, start, end)
    return as_percentage(len(done), days_in_month(year, month))


def consistency_trend(
    habit: Habit,
    range_start: DateLike,
    range_end: DateLike,
    periods: int = 7,
) -> list[TrendPoint]:
    """
    Consistency over successive intervals, walking back from range_end.

    Interval length follows the range length: days up to 30 days, weeks up
    to 90, then 30-day months. At most `periods` intervals are produced and
    none starts before range_start.

    Returns:
        Trend points in chronological order
    """
    start, end = parse_date(range_start), parse_date(range_end)
    total_days = day_count(start, end)

    if total_days > 90:
        length, label = 30, "month"
    elif total_days > 30:
        length, label = 7, "week"
    else:
        length, label = 1, "day"

    points = []
    cursor = end
    while len(points) < periods and cursor >= start:
        interval_start = max(cursor - timedelta(days=length - 1), start)
        points.append(
            TrendPoint(
                start=interval_start,
                end=cursor,
                score=consistency_score(habit, interval_start, cursor),
                interval=label,
            )
        )
        cursor = interval_start - timedelta(days=1)

    points.reverse()
    return points


def rolling_average(
    habit: Habit, dates: Sequence[DateLike], window_size: int = 7
) -> list[float]:
    """
    Trailing average of daily completion, as a percentage per date.

    Each value averages completed (1) / missed (0) over the window of
    window_size days ending at that date; at the start of the sequence the
    window holds however many days are available.

    Args:
        habit: Habit to chart
        dates: Chronological dates to produce values for
        window_size: Window length in days

    Returns:
        One percentage per input date
    """
    window_size = max(window_size, 1)
    days = [parse_date(day) for day in dates]
    if not days:
        return []

    first = days[0]
    averages = []
    for day in days:
        window = date_range(max(day - timedelta(days=window_size - 1), first), day)
        done = sum(1 for d in window if habit.is_completed_on(d))
        averages.append(done / len(window) * 100 if window else 0.0)
    return averages


# Time of day


def _bucket_for_hour(hour: int) -> str:
    if 5 <= hour < 12:
        return "morning"
    if 12 <= hour < 17:
        return "afternoon"
    if 17 <= hour < 22:
        return "evening"
    return "night"


def time_of_day_distribution(
    habits: Iterable[Habit], tz: Optional[tzinfo] = None
) -> TimeOfDayDistribution:
    """
    Bucket completions by the hour they were made.

    Entries without a completion time are skipped. Aware timestamps are
    converted to tz, or to system local time when tz is None. Naive ones
    are taken as local already.
    """
    distribution = TimeOfDayDistribution()
    for habit in habits:
        for entry in habit.history.values():
            if not entry.completed or entry.time_of_completion is None:
                continue
            moment: datetime = entry.time_of_completion
            if moment.tzinfo is not None:
                moment = moment.astimezone(tz)
            bucket = _bucket_for_hour(moment.hour)
            setattr(distribution, bucket, getattr(distribution, bucket) + 1)
    return distribution


# Correlation


def correlation(
    habit_a: Habit, habit_b: Habit, range_start: DateLike, range_end: DateLike
) -> int:
    """
    Jaccard similarity of two habits' completed dates in a range.

    Returns:
        |A ∩ B| / |A ∪ B| as a rounded percentage, 0 for an empty union
    """
    start, end = parse_date(range_start), parse_date(range_end)
    dates_a = completed_dates(habit_a.history, start, end)
    dates_b = completed_dates(habit_b.history, start, end)
    return as_percentage(len(dates_a & dates_b), len(dates_a | dates_b))


def correlation_level(score: int) -> Optional[str]:
    """Qualitative label for a correlation score, None when 0."""
    if score >= 70:
        return "Strong"
    elif score >= 40:
        return "Moderate"
    elif score >= 20:
        return "Weak"
    elif score > 0:
        return "Very weak"
    return None


def habit_correlations(
    habits: Sequence[Habit], range_start: DateLike, range_end: DateLike
) -> list[HabitCorrelation]:
    """
    Correlation of every habit pair with some overlap, strongest first.
    """
    results = []
    for habit1, habit2 in combinations(habits, 2):
        score = correlation(habit1, habit2, range_start, range_end)
        if score > 0:
            results.append(
                HabitCorrelation(
                    habit1=habit1,
                    habit2=habit2,
                    score=score,
                    level=correlation_level(score),
                )
            )

    results.sort(key=lambda c: c.score, reverse=True)
    logger.debug(f"Found {len(results)} correlated habit pairs")
    return results


# Calendar


def calendar_data(habit: Habit, today: date, days: int = 365) -> list[CalendarDay]:
    """
    Per-day completion for the last `days` days, oldest first.

    percentage is the day's count against the target, capped at 1.
    """
    calendar = []
    for day in date_range(today - timedelta(days=days - 1), today):
        entry = habit.entry_for(day)
        if entry is None:
            calendar.append(CalendarDay(date=day, completed=False))
            continue
        calendar.append(
            CalendarDay(
                date=day,
                completed=entry.completed,
                percentage=min(entry.count / habit.target, 1.0),
            )
        )
    return calendar
