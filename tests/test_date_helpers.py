from datetime import date, datetime

import pytest

from utils.date_helpers import (
    at_time, clamp_day_to_month, first_weekday_on_or_after,
    format_display_date, format_display_timestamp, format_schedule_preview,
    parse_date, parse_display_date, parse_time, parse_timestamp, shift_month,
    weekday_index,
)


def test_shift_month_rolls_over_year():
    assert shift_month(2024, 12, 1) == (2025, 1)
    assert shift_month(2024, 1, -1) == (2023, 12)
    assert shift_month(2024, 5, 20) == (2026, 1)


def test_clamp_day_to_month():
    assert clamp_day_to_month(2024, 2, 31) == 29
    assert clamp_day_to_month(2023, 2, 31) == 28
    assert clamp_day_to_month(2024, 4, 31) == 30
    assert clamp_day_to_month(2024, 5, 12) == 12


def test_weekday_index_is_sunday_based():
    assert weekday_index(date(2024, 1, 7)) == 0   # Sunday
    assert weekday_index(date(2024, 1, 8)) == 1   # Monday
    assert weekday_index(date(2024, 1, 13)) == 6  # Saturday


def test_first_weekday_on_or_after():
    assert first_weekday_on_or_after(date(2024, 1, 8), 1) == date(2024, 1, 8)
    assert first_weekday_on_or_after(date(2024, 1, 8), 0) == date(2024, 1, 14)


def test_parse_date_accepts_iso_and_rejects_junk():
    assert parse_date("2024-02-29") == date(2024, 2, 29)
    assert parse_date("2023-02-29") is None
    assert parse_date("") is None
    assert parse_date("tomorrow") is None


def test_parse_time():
    assert parse_time("09:30").hour == 9
    assert parse_time("25:00") is None
    assert parse_time("") is None


def test_at_time_combines_date_and_clock():
    assert at_time(date(2024, 3, 1), "14:05") == datetime(2024, 3, 1, 14, 5)
    with pytest.raises(ValueError):
        at_time(date(2024, 3, 1), "2pm")


def test_parse_timestamp():
    assert parse_timestamp("2024-03-01T14:05:00") == datetime(2024, 3, 1, 14, 5)
    assert parse_timestamp(None) is None
    assert parse_timestamp("") is None


def test_display_formats():
    assert format_display_date("2024-03-01", "DD/MM/YYYY") == "01/03/2024"
    assert format_display_date("not a date") == "not a date"
    assert format_display_timestamp(datetime(2024, 3, 1, 9, 0), "YYYY-MM-DD") == "2024-03-01 09:00"
    assert format_display_timestamp(None) == ""


def test_parse_display_date_falls_back_to_iso():
    assert parse_display_date("01.03.2024", "DD.MM.YYYY") == date(2024, 3, 1)
    assert parse_display_date("2024-03-01", "MM/DD/YYYY") == date(2024, 3, 1)
    assert parse_display_date("", "MM/DD/YYYY") is None


def test_format_schedule_preview_includes_weekday():
    lines = format_schedule_preview([date(2024, 1, 8)], "YYYY-MM-DD")
    assert len(lines) == 1
    assert lines[0].endswith("2024-01-08")
