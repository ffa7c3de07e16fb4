"""Schemas for push subscription and reminder endpoints."""
from __future__ import annotations

from typing import List
from uuid import UUID

from pydantic import BaseModel, Field


class SubscriptionKeys(BaseModel):
    p256dh: str = Field(..., min_length=1)
    auth: str = Field(..., min_length=1)


class SubscriptionPayload(BaseModel):
    endpoint: str = Field(..., min_length=1)
    keys: SubscriptionKeys


class SubscribeRequest(BaseModel):
    subscription: SubscriptionPayload


class SubscribeResponse(BaseModel):
    success: bool
    subscription_id: UUID
    request_id: str


class UnsubscribeRequest(BaseModel):
    endpoint: str = Field(..., min_length=1)


class UnsubscribeResponse(BaseModel):
    success: bool
    removed: bool
    request_id: str


class ScheduleReminderRequest(BaseModel):
    subscription_endpoint: str = Field(..., min_length=1)
    event_id: str = Field(..., min_length=1, max_length=64)
    event_label: str = Field(..., min_length=1)
    scheduled_time: str = Field(..., description="Local wall-clock time, HH:MM")


class ScheduleReminderResponse(BaseModel):
    success: bool
    notification_id: UUID
    request_id: str


class CancelReminderRequest(BaseModel):
    subscription_endpoint: str = Field(..., min_length=1)
    event_id: str = Field(..., min_length=1, max_length=64)


class CancelReminderResponse(BaseModel):
    success: bool
    request_id: str


class ActiveReminder(BaseModel):
    event_id: str
    event_label: str
    scheduled_time: str


class ActiveRemindersResponse(BaseModel):
    notifications: List[ActiveReminder]
    request_id: str


class PublicKeyResponse(BaseModel):
    public_key: str
    request_id: str
