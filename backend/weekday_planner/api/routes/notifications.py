"""Push subscription and reminder routes."""
from __future__ import annotations

from fastapi import APIRouter, Depends, Query, Request
from sqlalchemy.orm import Session

from weekday_planner.api.schemas.notifications import (
    ActiveReminder,
    ActiveRemindersResponse,
    CancelReminderRequest,
    CancelReminderResponse,
    PublicKeyResponse,
    ScheduleReminderRequest,
    ScheduleReminderResponse,
    SubscribeRequest,
    SubscribeResponse,
    UnsubscribeRequest,
    UnsubscribeResponse,
)
from weekday_planner.core.config import settings
from weekday_planner.db.deps import get_db
from weekday_planner.observability.metrics import log_metric
from weekday_planner.observability.tracing import trace
from weekday_planner.services.reminder_service import (
    cancel_reminder,
    list_active_reminders,
    register_subscription,
    schedule_reminder,
    unregister_subscription,
)
from weekday_planner.services.vapid_keys import get_vapid_keys


router = APIRouter()


@router.get("/notifications/config", tags=["notifications"])
def get_notifications_config(request: Request) -> dict:
    request_id = getattr(request.state, "request_id", None)
    with trace(
        "notifications.config",
        metadata={"provider": settings.notifications_provider},
        request_id=request_id,
    ):
        log_metric("notifications.config.success", 1, metadata={"provider": settings.notifications_provider})
        return {
            "enabled": settings.notifications_enabled,
            "provider": settings.notifications_provider,
            "timezone": settings.scheduler_timezone or "local",
            "request_id": request_id or "",
        }


@router.get("/notifications/vapid-public-key", response_model=PublicKeyResponse, tags=["notifications"])
def get_public_key(request: Request, db: Session = Depends(get_db)) -> PublicKeyResponse:
    """Application server key for ``PushManager.subscribe``; generated on first use."""
    request_id = getattr(request.state, "request_id", None)
    with trace("notifications.vapid_public_key", request_id=request_id):
        keys = get_vapid_keys(db)
    return PublicKeyResponse(public_key=keys.public_key, request_id=request_id or "")


@router.post("/notifications/subscribe", response_model=SubscribeResponse, tags=["notifications"])
def subscribe(
    request: Request,
    payload: SubscribeRequest,
    db: Session = Depends(get_db),
) -> SubscribeResponse:
    request_id = getattr(request.state, "request_id", None)
    subscription = payload.subscription
    with trace("notifications.subscribe", request_id=request_id):
        subscription_id = register_subscription(
            db,
            endpoint=subscription.endpoint,
            p256dh=subscription.keys.p256dh,
            auth=subscription.keys.auth,
        )
    log_metric("notifications.subscribe.success", 1)
    return SubscribeResponse(success=True, subscription_id=subscription_id, request_id=request_id or "")


@router.post("/notifications/unsubscribe", response_model=UnsubscribeResponse, tags=["notifications"])
def unsubscribe(
    request: Request,
    payload: UnsubscribeRequest,
    db: Session = Depends(get_db),
) -> UnsubscribeResponse:
    request_id = getattr(request.state, "request_id", None)
    with trace("notifications.unsubscribe", request_id=request_id):
        removed = unregister_subscription(db, payload.endpoint)
    log_metric("notifications.unsubscribe.success", 1, metadata={"removed": removed})
    return UnsubscribeResponse(success=True, removed=removed, request_id=request_id or "")


@router.post("/notifications/schedule", response_model=ScheduleReminderResponse, tags=["notifications"])
def schedule(
    request: Request,
    payload: ScheduleReminderRequest,
    db: Session = Depends(get_db),
) -> ScheduleReminderResponse:
    """Bind a reminder for one schedule event; re-scheduling an event replaces it."""
    request_id = getattr(request.state, "request_id", None)
    metadata = {"event_id": payload.event_id, "scheduled_time": payload.scheduled_time}
    with trace("notifications.schedule", metadata=metadata, request_id=request_id):
        notification_id = schedule_reminder(
            db,
            endpoint=payload.subscription_endpoint,
            event_id=payload.event_id,
            label=payload.event_label,
            scheduled_time=payload.scheduled_time,
        )
    log_metric("notifications.schedule.success", 1, metadata={"event_id": payload.event_id})
    return ScheduleReminderResponse(success=True, notification_id=notification_id, request_id=request_id or "")


@router.post("/notifications/cancel", response_model=CancelReminderResponse, tags=["notifications"])
def cancel(
    request: Request,
    payload: CancelReminderRequest,
    db: Session = Depends(get_db),
) -> CancelReminderResponse:
    request_id = getattr(request.state, "request_id", None)
    with trace("notifications.cancel", metadata={"event_id": payload.event_id}, request_id=request_id):
        cancel_reminder(db, endpoint=payload.subscription_endpoint, event_id=payload.event_id)
    log_metric("notifications.cancel.success", 1, metadata={"event_id": payload.event_id})
    return CancelReminderResponse(success=True, request_id=request_id or "")


@router.get("/notifications/scheduled", response_model=ActiveRemindersResponse, tags=["notifications"])
def get_scheduled(
    request: Request,
    endpoint: str = Query(..., min_length=1),
    db: Session = Depends(get_db),
) -> ActiveRemindersResponse:
    request_id = getattr(request.state, "request_id", None)
    with trace("notifications.scheduled", request_id=request_id):
        bindings = list_active_reminders(db, endpoint)
    return ActiveRemindersResponse(
        notifications=[
            ActiveReminder(
                event_id=binding.event_id,
                event_label=binding.event_label,
                scheduled_time=binding.scheduled_time,
            )
            for binding in bindings
        ],
        request_id=request_id or "",
    )
