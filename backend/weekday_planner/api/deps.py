"""Shared FastAPI dependencies."""
from __future__ import annotations

from weekday_planner.core.config import settings
from weekday_planner.services.timeclock import Clock, system_clock


def get_clock() -> Clock:
    """Wall clock in the planner's timezone; overridden in tests."""
    return system_clock(settings.scheduler_timezone)
