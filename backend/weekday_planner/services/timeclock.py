"""Minute-of-day arithmetic for the evening timeline.

All times are integer minutes since local midnight. There is no date rollover:
values past 1440 only ever appear transiently while signalling overtime.
"""
from __future__ import annotations

import re
from datetime import datetime
from typing import Callable, Optional, Tuple
from zoneinfo import ZoneInfo

MINUTES_PER_DAY = 24 * 60

Clock = Callable[[], datetime]

_HHMM_RE = re.compile(r"^([01]\d|2[0-3]):([0-5]\d)$")


def minutes_of_day(hour: int, minute: int) -> int:
    return hour * 60 + minute


def to_clock(minutes: int) -> str:
    """Display format: ``19:05``, ``9:30`` (hour not padded)."""
    hour, minute = divmod(minutes, 60)
    return f"{hour}:{minute:02d}"


def to_hhmm(minutes: int) -> str:
    """Wire/storage format ``HH:MM``; only valid for a time inside the day."""
    if not 0 <= minutes < MINUTES_PER_DAY:
        raise ValueError(f"{minutes} is not a minute of the day")
    hour, minute = divmod(minutes, 60)
    return f"{hour:02d}:{minute:02d}"


def parse_hhmm(value: str) -> int:
    match = _HHMM_RE.match(value or "")
    if not match:
        raise ValueError(f"Expected HH:MM, got {value!r}")
    return minutes_of_day(int(match.group(1)), int(match.group(2)))


def round_minute(minute: int, step: int = 10) -> int:
    """Round to the nearest ``step``; results that would reach 60 clamp to the last step below it."""
    if step <= 0:
        raise ValueError("step must be positive")
    rounded = ((minute * 2 + step) // (step * 2)) * step
    if rounded >= 60:
        return (59 // step) * step
    return rounded


def allowed_minutes(step: int = 10) -> Tuple[int, ...]:
    return tuple(range(0, 60, step))


def arrival_from_clock(now: datetime, step: int = 10) -> Tuple[int, int]:
    """(hour, minute) for "I just got home", rounded to the arrival granularity."""
    return now.hour, round_minute(now.minute, step)


def system_clock(tz_name: Optional[str] = None) -> Clock:
    """Aware wall clock in ``tz_name``, or in the host's local zone when unset."""
    tz = ZoneInfo(tz_name) if tz_name else None

    def _now() -> datetime:
        if tz is None:
            return datetime.now().astimezone()
        return datetime.now(tz)

    return _now
