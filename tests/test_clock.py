"""Tests for clock sources and date helpers."""

from datetime import date, datetime, timezone

from shelflife.clock import (
    FixedClock,
    SystemClock,
    days_between,
    parse_date,
    seconds_between,
    start_of_day,
)


def test_fixed_clock():
    clock = FixedClock(datetime(2024, 6, 10, 9, 30))
    assert clock.now() == datetime(2024, 6, 10, 9, 30)
    assert clock.today() == datetime(2024, 6, 10)


def test_fixed_clock_from_date():
    clock = FixedClock(date(2024, 6, 10))
    assert clock.now() == datetime(2024, 6, 10)


def test_fixed_clock_advance():
    clock = FixedClock(datetime(2024, 6, 10, 23, 0))
    clock.advance(hours=2)
    assert clock.today() == datetime(2024, 6, 11)


def test_system_clock_today_is_midnight():
    today = SystemClock().today()
    assert (today.hour, today.minute, today.second, today.microsecond) == (0, 0, 0, 0)


def test_start_of_day():
    assert start_of_day(datetime(2024, 6, 10, 17, 45, 3, 12)) == datetime(2024, 6, 10)
    assert start_of_day(date(2024, 6, 10)) == datetime(2024, 6, 10)


def test_parse_date_formats():
    assert parse_date("2024-06-13") == datetime(2024, 6, 13)
    assert parse_date(" 2024-06-13 ") == datetime(2024, 6, 13)
    assert parse_date("2024-06-13T18:30:00") == datetime(2024, 6, 13)
    assert parse_date(date(2024, 6, 13)) == datetime(2024, 6, 13)


def test_parse_date_aware_datetime_keeps_its_calendar_day():
    aware = datetime(2024, 6, 13, 23, 30, tzinfo=timezone.utc)
    assert parse_date(aware.isoformat()) == datetime(2024, 6, 13)


def test_parse_date_invalid():
    assert parse_date("2024-02-30") is None
    assert parse_date("tomorrow") is None
    assert parse_date("") is None
    assert parse_date(None) is None
    assert parse_date(20240613) is None


def test_days_between():
    assert days_between(datetime(2024, 6, 13), datetime(2024, 6, 10)) == 3
    assert days_between(datetime(2024, 6, 9, 23), datetime(2024, 6, 10, 1)) == -1
    # Leap day
    assert days_between(datetime(2024, 3, 1), datetime(2024, 2, 28)) == 2


def test_seconds_between():
    assert seconds_between(datetime(2024, 6, 11), datetime(2024, 6, 10, 23, 59, 30)) == 30
    assert seconds_between(datetime(2024, 6, 10), datetime(2024, 6, 10, 0, 0, 1)) == -1
    assert seconds_between(datetime(2024, 6, 10, 0, 0, 1), datetime(2024, 6, 10, 0, 0, 0, 500000)) == 0
