"""Schemas for the analytics endpoint."""
from __future__ import annotations

from datetime import date
from typing import Dict, List

from pydantic import BaseModel


class WeeklyTrendPoint(BaseModel):
    start_date: date
    avg_free_time: int
    avg_study_time: int


class DailyFreeTimePoint(BaseModel):
    date: date
    free_time: int


class DailyStudyTimePoint(BaseModel):
    date: date
    study_time: int


class AnalyticsPayload(BaseModel):
    total_days: int
    avg_free_time: int
    avg_study_time: int
    avg_arrival_time: str
    dinner_rate: int
    laundry_rate: int
    task_completion_stats: Dict[str, int]
    weekly_trend: List[WeeklyTrendPoint]
    daily_free_time: List[DailyFreeTimePoint]
    daily_study_time: List[DailyStudyTimePoint]


class AnalyticsResponse(BaseModel):
    days: int
    analytics: AnalyticsPayload
    request_id: str
