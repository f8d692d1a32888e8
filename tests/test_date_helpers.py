from datetime import date, datetime, timedelta, timezone

import pytest

from utils.date_helpers import (
    format_display_date, friendly_month, month_window, next_month,
    parse_datetime, period_bounds, prev_month, to_iso,
)


def test_month_window_covers_whole_month():
    start, end = month_window(2024, 3)
    assert start == datetime(2024, 3, 1)
    assert end.date() == date(2024, 3, 31)
    assert end >= datetime(2024, 3, 31, 23, 59, 59)
    assert end + timedelta(microseconds=1) == datetime(2024, 4, 1)


@pytest.mark.parametrize("year, month, last", [(2024, 2, 29), (2023, 2, 28), (2024, 12, 31), (2024, 4, 30)])
def test_month_window_last_day(year, month, last):
    assert month_window(year, month)[1].day == last


@pytest.mark.parametrize("month", [0, 13])
def test_month_window_rejects_bad_month(month):
    with pytest.raises(ValueError):
        month_window(2024, month)


def test_period_bounds_expand_dates():
    start, end = period_bounds(date(2024, 3, 1), date(2024, 3, 2))
    assert start == datetime(2024, 3, 1)
    assert end.date() == date(2024, 3, 2) and end.hour == 23
    exact = datetime(2024, 3, 2, 8, 0)
    assert period_bounds(exact, exact) == (exact, exact)


def test_parse_datetime_variants():
    assert parse_datetime("2024-03-05") == datetime(2024, 3, 5)
    assert parse_datetime("2024-03-05T10:20:30") == datetime(2024, 3, 5, 10, 20, 30)
    assert parse_datetime(date(2024, 3, 5)) == datetime(2024, 3, 5)
    assert parse_datetime("2024/03/05") == datetime(2024, 3, 5)
    assert parse_datetime("") is None
    assert parse_datetime("garbage") is None
    assert parse_datetime(42) is None


def test_parse_datetime_converts_aware_values_to_local_naive():
    aware = datetime(2024, 3, 5, 12, 0, tzinfo=timezone.utc)
    parsed = parse_datetime("2024-03-05T12:00:00Z")
    assert parsed.tzinfo is None
    assert parsed == aware.astimezone().replace(tzinfo=None)


def test_to_iso():
    assert to_iso(date(2024, 3, 5)) == "2024-03-05"
    assert to_iso(datetime(2024, 3, 5, 9, 5)) == "2024-03-05T09:05:00"


def test_month_navigation():
    assert prev_month(2024, 1) == (2023, 12)
    assert prev_month(2024, 5) == (2024, 4)
    assert next_month(2024, 12) == (2025, 1)
    assert next_month(2024, 5) == (2024, 6)
    assert friendly_month(2024, 3) == "March 2024"


def test_format_display_date():
    assert format_display_date(datetime(2024, 3, 5, 10, 0)) == "05/03/2024"
    assert format_display_date("2024-03-05", "YYYY-MM-DD") == "2024-03-05"
    assert format_display_date("") == ""


def test_month_window_includes_sub_second_stamps_on_last_day():
    start, end = month_window(2024, 3)
    assert start <= datetime(2024, 3, 31, 23, 59, 59, 500000) <= end
