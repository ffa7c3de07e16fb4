"""Schemas for job operations endpoints."""
from __future__ import annotations

from typing import Literal, Optional

from pydantic import BaseModel, Field


class JobRunRequest(BaseModel):
    job: Literal["dispatch_notifications"] = "dispatch_notifications"
    at: Optional[str] = Field(default=None, description="Run the sweep as if the clock read HH:MM")


class JobRunResponse(BaseModel):
    job: str
    checked_time: str
    matched: int
    sent: int
    failed: int
    subscriptions_removed: int
    purged: int
    skipped: bool
    request_id: str
