from __future__ import annotations

from datetime import datetime

import pytest

from weekday_planner.services.timeclock import (
    allowed_minutes,
    arrival_from_clock,
    parse_hhmm,
    round_minute,
    system_clock,
    to_clock,
    to_hhmm,
)


def test_clock_formats() -> None:
    assert to_clock(19 * 60 + 5) == "19:05"
    assert to_clock(9 * 60 + 30) == "9:30"
    assert to_clock(23 * 60 + 30 + 60) == "24:30"
    assert to_hhmm(9 * 60 + 5) == "09:05"


def test_to_hhmm_rejects_minutes_outside_the_day() -> None:
    with pytest.raises(ValueError):
        to_hhmm(24 * 60)
    with pytest.raises(ValueError):
        to_hhmm(-1)


@pytest.mark.parametrize(
    "value,expected",
    [("00:00", 0), ("09:05", 545), ("23:59", 1439), ("21:00", 1260)],
)
def test_parse_hhmm(value: str, expected: int) -> None:
    assert parse_hhmm(value) == expected


@pytest.mark.parametrize("value", ["24:00", "9:05", "21:60", "2100", "", "aa:bb"])
def test_parse_hhmm_rejects_malformed(value: str) -> None:
    with pytest.raises(ValueError):
        parse_hhmm(value)


@pytest.mark.parametrize(
    "minute,expected",
    [(0, 0), (4, 0), (5, 10), (14, 10), (15, 20), (44, 40), (54, 50), (55, 50), (59, 50)],
)
def test_round_minute_clamps_below_the_hour(minute: int, expected: int) -> None:
    assert round_minute(minute) == expected


def test_allowed_minutes_follow_step() -> None:
    assert allowed_minutes(10) == (0, 10, 20, 30, 40, 50)
    assert allowed_minutes(15) == (0, 15, 30, 45)


def test_arrival_from_clock_keeps_hour() -> None:
    assert arrival_from_clock(datetime(2026, 10, 19, 18, 57)) == (18, 50)
    assert arrival_from_clock(datetime(2026, 10, 19, 18, 33)) == (18, 30)


def test_system_clock_defaults_to_host_local_zone() -> None:
    now = system_clock()()
    assert now.tzinfo is not None
    assert now.utcoffset() == datetime.now().astimezone().utcoffset()


def test_system_clock_honours_named_zone() -> None:
    now = system_clock("UTC")()
    assert str(now.tzinfo) == "UTC"
    assert now.utcoffset().total_seconds() == 0
