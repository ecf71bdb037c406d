from datetime import date, datetime

from habitit.core.clock import Clock
from habitit.core.dates import (
    date_range,
    day_count,
    days_in_month,
    enumerate_dates,
    first_weekday_of_month,
    month_bounds,
    parse_date,
    weekday_index,
)


def test_days_in_month():
    assert days_in_month(2024, 2) == 29
    assert days_in_month(2023, 2) == 28
    assert days_in_month(2024, 12) == 31


def test_first_weekday_is_sunday_based():
    # 2023-10-01 was a Sunday, 2024-01-01 a Monday
    assert first_weekday_of_month(2023, 10) == 0
    assert first_weekday_of_month(2024, 1) == 1


def test_weekday_index():
    assert weekday_index(date(2024, 1, 6)) == 6  # Saturday
    assert weekday_index("2024-01-07") == 0  # Sunday


def test_enumerate_dates_inclusive():
    assert enumerate_dates(date(2024, 1, 30), date(2024, 2, 2)) == [
        "2024-01-30",
        "2024-01-31",
        "2024-02-01",
        "2024-02-02",
    ]
    assert enumerate_dates("2024-01-01", "2024-01-01") == ["2024-01-01"]


def test_enumerate_dates_inverted_is_empty():
    assert enumerate_dates(date(2024, 1, 5), date(2024, 1, 1)) == []
    assert day_count(date(2024, 1, 5), date(2024, 1, 1)) == 0


def test_ranges_are_restartable():
    days = date_range("2024-01-01", "2024-01-03")
    assert list(days) == list(days)
    assert len(days) == day_count("2024-01-01", "2024-01-03") == 3


def test_parse_date_variants():
    assert parse_date("2024-03-04") == date(2024, 3, 4)
    assert parse_date("2024-03-04T22:15:00+00:00") == date(2024, 3, 4)
    assert parse_date(datetime(2024, 3, 4, 8)) == date(2024, 3, 4)


def test_month_bounds():
    assert month_bounds(2024, 2) == (date(2024, 2, 1), date(2024, 2, 29))


def test_clock_timezone():
    clock = Clock("Pacific/Auckland")
    assert clock.now().utcoffset() is not None
    assert clock.today() == clock.now().date()
    assert Clock().now().tzinfo is not None
