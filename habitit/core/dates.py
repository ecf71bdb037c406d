"""Calendar and date-range helpers."""

import calendar
from datetime import date, datetime, timedelta
from typing import Union

DateLike = Union[date, datetime, str]

DAY_NAMES = ["Sun", "Mon", "Tue", "Wed", "Thu", "Fri", "Sat"]


def parse_date(value: DateLike) -> date:
    """
    Coerce a date, datetime or ISO string to a date.

    Args:
        value: date, datetime, "YYYY-MM-DD" or a full ISO timestamp

    Returns:
        Calendar date
    """
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if len(value) > 10:
        return datetime.fromisoformat(value).date()
    return date.fromisoformat(value)


def weekday_index(day: DateLike) -> int:
    """
    Get day of week where Sunday=0, Saturday=6.

    Python's weekday() is Monday=0, Sunday=6.
    """
    return (parse_date(day).weekday() + 1) % 7


def days_in_month(year: int, month: int) -> int:
    """Number of days in a month (month is 1-12)."""
    return calendar.monthrange(year, month)[1]


def first_weekday_of_month(year: int, month: int) -> int:
    """Weekday of the 1st of the month, 0=Sunday."""
    return weekday_index(date(year, month, 1))


def month_bounds(year: int, month: int) -> tuple[date, date]:
    """First and last day of a month."""
    return date(year, month, 1), date(year, month, days_in_month(year, month))


def date_range(start: DateLike, end: DateLike) -> list[date]:
    """
    All dates from start to end, both inclusive.

    Returns an empty list when start is after end.
    """
    start, end = parse_date(start), parse_date(end)
    return [start + timedelta(days=i) for i in range((end - start).days + 1)]


def enumerate_dates(start: DateLike, end: DateLike) -> list[str]:
    """Inclusive range as ISO date strings."""
    return [day.isoformat() for day in date_range(start, end)]


def day_count(start: DateLike, end: DateLike) -> int:
    """Inclusive number of days in a range, 0 if inverted."""
    return max((parse_date(end) - parse_date(start)).days + 1, 0)
