"""Schemas for schedule preview endpoints."""
from __future__ import annotations

from typing import List, Literal, Optional

from pydantic import BaseModel, Field

from weekday_planner.services.schedule_builder import EventKind, PlannerInput

PolicyName = Literal["split_study", "fixed_bath"]


class PlannerInputPayload(BaseModel):
    arrival_hour: int = Field(..., ge=0, le=23)
    arrival_minute: int = Field(..., ge=0, le=59)
    has_dinner: bool = True
    has_laundry: bool = False
    study_minutes: int = Field(..., ge=0)

    def to_planner_input(self) -> PlannerInput:
        return PlannerInput(
            arrival_hour=self.arrival_hour,
            arrival_minute=self.arrival_minute,
            has_dinner=self.has_dinner,
            has_laundry=self.has_laundry,
            study_minutes=self.study_minutes,
        )


class ScheduleEventPayload(BaseModel):
    id: str = Field(..., min_length=1)
    start_minute: int
    duration_minute: int = Field(..., ge=0)
    label: str
    kind: EventKind


class ScheduleEventView(ScheduleEventPayload):
    start: str
    end: str


class SchedulePreviewRequest(PlannerInputPayload):
    policy: Optional[PolicyName] = None


class SchedulePreviewResponse(BaseModel):
    policy: str
    events: List[ScheduleEventView]
    total_free_time: int
    is_overtime: bool
    study_minutes_scheduled: int
    overrun_minutes: int
    request_id: str


class CurrentArrivalResponse(BaseModel):
    arrival_hour: int
    arrival_minute: int
    clock: str
    request_id: str
