"""Schemas for daily record endpoints."""
from __future__ import annotations

from datetime import date, datetime
from typing import List, Optional
from uuid import UUID

from pydantic import BaseModel, Field, field_validator

from weekday_planner.api.schemas.schedule import PlannerInputPayload, ScheduleEventPayload


class DailyRecordSaveRequest(PlannerInputPayload):
    date: date
    total_free_time: Optional[int] = None
    schedule: Optional[List[ScheduleEventPayload]] = None
    completed_tasks: List[str] = Field(default_factory=list)
    notes: str = ""

    @field_validator("completed_tasks")
    @classmethod
    def _dedupe(cls, value: List[str]) -> List[str]:
        return list(dict.fromkeys(value))


class DailyRecordPayload(BaseModel):
    id: UUID
    date: date
    arrival_hour: int
    arrival_minute: int
    has_dinner: bool
    has_laundry: bool
    study_minutes: int
    total_free_time: int
    is_overtime: bool
    schedule_policy: Optional[str]
    schedule: List[ScheduleEventPayload]
    completed_tasks: List[str]
    notes: str
    created_at: Optional[datetime]
    updated_at: Optional[datetime]


class DailyRecordResponse(BaseModel):
    record: Optional[DailyRecordPayload]
    request_id: str


class DailyRecordListResponse(BaseModel):
    records: List[DailyRecordPayload]
    request_id: str


class TaskCompletionRequest(BaseModel):
    completed: bool


class TaskCompletionResponse(BaseModel):
    date: date
    task_id: str
    completed: bool
    completed_tasks: List[str]
    request_id: str


class NotesUpdateRequest(BaseModel):
    notes: str = Field(default="", max_length=2000)


class DeleteResponse(BaseModel):
    success: bool
    request_id: str
