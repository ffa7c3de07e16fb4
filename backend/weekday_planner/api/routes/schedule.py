"""Schedule preview endpoints."""
from __future__ import annotations

from time import perf_counter

from fastapi import APIRouter, Depends, Request

from weekday_planner.api.deps import get_clock
from weekday_planner.api.schemas.schedule import (
    CurrentArrivalResponse,
    ScheduleEventView,
    SchedulePreviewRequest,
    SchedulePreviewResponse,
)
from weekday_planner.core.config import settings
from weekday_planner.observability.metrics import log_metric
from weekday_planner.observability.tracing import trace
from weekday_planner.services.schedule_service import plan_evening
from weekday_planner.services.timeclock import Clock, arrival_from_clock, minutes_of_day, to_clock

router = APIRouter()


@router.post("/schedule/preview", response_model=SchedulePreviewResponse, tags=["schedule"])
def preview_schedule(request: Request, payload: SchedulePreviewRequest) -> SchedulePreviewResponse:
    """Build the evening timeline for the given arrival and preferences without saving it."""
    request_id = getattr(request.state, "request_id", None)
    planner_input = payload.to_planner_input()
    start = perf_counter()
    with trace(
        "schedule.preview",
        metadata={
            "arrival": to_clock(planner_input.arrival),
            "has_dinner": planner_input.has_dinner,
            "has_laundry": planner_input.has_laundry,
            "study_minutes": planner_input.study_minutes,
            "policy": payload.policy or settings.schedule_policy,
        },
        request_id=request_id,
    ):
        planned = plan_evening(planner_input, payload.policy)

    latency_ms = (perf_counter() - start) * 1000
    log_metric("schedule.preview.success", 1, metadata={"policy": planned.policy})
    log_metric("schedule.preview.overtime", 1 if planned.summary.is_overtime else 0)
    log_metric("schedule.preview.latency_ms", latency_ms)

    return SchedulePreviewResponse(
        policy=planned.policy,
        events=[
            ScheduleEventView(
                **event.to_dict(),
                start=to_clock(event.start_minute),
                end=to_clock(event.end_minute),
            )
            for event in planned.events
        ],
        total_free_time=planned.summary.total_free_time,
        is_overtime=planned.summary.is_overtime,
        study_minutes_scheduled=planned.summary.study_minutes,
        overrun_minutes=planned.summary.overrun_minutes,
        request_id=request_id or "",
    )


@router.get("/schedule/current-arrival", response_model=CurrentArrivalResponse, tags=["schedule"])
def current_arrival(request: Request, clock: Clock = Depends(get_clock)) -> CurrentArrivalResponse:
    """Current time rounded to the arrival granularity, for a "just got home" button."""
    request_id = getattr(request.state, "request_id", None)
    hour, minute = arrival_from_clock(clock(), settings.arrival_minute_step)
    return CurrentArrivalResponse(
        arrival_hour=hour,
        arrival_minute=minute,
        clock=to_clock(minutes_of_day(hour, minute)),
        request_id=request_id or "",
    )
