"""Input validation and the build-plus-summary entry point used by routes and records."""
from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional

from weekday_planner.core.config import Settings, settings as default_settings
from weekday_planner.core.exceptions import ValidationError
from weekday_planner.services.schedule_builder import (
    PlannerInput,
    ScheduleEvent,
    build_schedule,
    get_policy,
)
from weekday_planner.services.schedule_metrics import ScheduleSummary, summarize_schedule
from weekday_planner.services.timeclock import allowed_minutes


@dataclass
class PlannedEvening:
    policy: str
    events: List[ScheduleEvent]
    summary: ScheduleSummary


def validate_planner_input(planner_input: PlannerInput, settings: Optional[Settings] = None) -> None:
    settings = settings or default_settings
    errors = []
    if not 0 <= planner_input.arrival_hour <= 23:
        errors.append("arrival_hour must be between 0 and 23")
    allowed = allowed_minutes(settings.arrival_minute_step)
    if planner_input.arrival_minute not in allowed:
        errors.append(f"arrival_minute must be one of {list(allowed)}")
    if not settings.study_minutes_min <= planner_input.study_minutes <= settings.study_minutes_max:
        errors.append(
            f"study_minutes must be between {settings.study_minutes_min} and {settings.study_minutes_max}"
        )
    elif (planner_input.study_minutes - settings.study_minutes_min) % settings.study_minutes_step:
        errors.append(f"study_minutes must move in steps of {settings.study_minutes_step}")
    if errors:
        raise ValidationError("Invalid planner input", details=errors)


def plan_evening(
    planner_input: PlannerInput,
    policy: Optional[str] = None,
    settings: Optional[Settings] = None,
) -> PlannedEvening:
    """Validate, build with the configured (or given) policy and summarize."""
    settings = settings or default_settings
    validate_planner_input(planner_input, settings)
    try:
        strategy = get_policy(policy or settings.schedule_policy)
    except ValueError as exc:
        raise ValidationError(str(exc)) from exc
    events = build_schedule(planner_input, strategy)
    return PlannedEvening(policy=strategy.name, events=events, summary=summarize_schedule(events))
