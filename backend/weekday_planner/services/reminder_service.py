"""Push subscriptions and per-event reminder bindings."""
from __future__ import annotations

import logging
from typing import List, Optional
from uuid import UUID

from sqlalchemy import func
from sqlalchemy.orm import Session

from weekday_planner.core.exceptions import NotFoundError, ValidationError
from weekday_planner.db.models.push_subscription import PushSubscription
from weekday_planner.db.models.scheduled_notification import ScheduledNotification
from weekday_planner.db.upsert import upsert
from weekday_planner.services.timeclock import parse_hhmm

logger = logging.getLogger(__name__)


def register_subscription(db: Session, *, endpoint: str, p256dh: str, auth: str) -> UUID:
    """Store a browser subscription, refreshing its keys when the endpoint is known."""
    try:
        upsert(
            db,
            PushSubscription,
            {"endpoint": endpoint, "keys_p256dh": p256dh, "keys_auth": auth},
            conflict_columns=["endpoint"],
            update_values={"updated_at": func.now()},
        )
        db.commit()
    except Exception:
        db.rollback()
        raise
    subscription = find_subscription(db, endpoint)
    if subscription is None:  # pragma: no cover - the upsert just wrote it
        raise NotFoundError("Subscription not found")
    return subscription.id


def unregister_subscription(db: Session, endpoint: str) -> bool:
    """Drop a subscription and, through the foreign key, its bindings. Idempotent."""
    removed = (
        db.query(PushSubscription)
        .filter(PushSubscription.endpoint == endpoint)
        .delete(synchronize_session=False)
    )
    db.commit()
    return bool(removed)


def find_subscription(db: Session, endpoint: str) -> Optional[PushSubscription]:
    return db.query(PushSubscription).filter(PushSubscription.endpoint == endpoint).one_or_none()


def schedule_reminder(
    db: Session,
    *,
    endpoint: str,
    event_id: str,
    label: str,
    scheduled_time: str,
) -> UUID:
    """
    Bind a reminder for ``event_id`` at ``scheduled_time`` (HH:MM).

    An existing binding for the same subscription and event is replaced and
    re-armed, including one that already fired.
    """
    try:
        parse_hhmm(scheduled_time)
    except ValueError as exc:
        raise ValidationError(str(exc)) from exc

    subscription = find_subscription(db, endpoint)
    if subscription is None:
        raise NotFoundError("Subscription not found")

    try:
        upsert(
            db,
            ScheduledNotification,
            {
                "subscription_id": subscription.id,
                "event_id": event_id,
                "event_label": label,
                "scheduled_time": scheduled_time,
                "notified": False,
                "notified_at": None,
            },
            conflict_columns=["subscription_id", "event_id"],
            update_values={"created_at": func.now()},
        )
        db.commit()
    except Exception:
        db.rollback()
        raise

    binding = (
        db.query(ScheduledNotification)
        .filter(
            ScheduledNotification.subscription_id == subscription.id,
            ScheduledNotification.event_id == event_id,
        )
        .one()
    )
    logger.info("Reminder %s scheduled at %s", event_id, scheduled_time)
    return binding.id


def cancel_reminder(db: Session, *, endpoint: str, event_id: str) -> bool:
    subscription = find_subscription(db, endpoint)
    if subscription is None:
        raise NotFoundError("Subscription not found")
    removed = (
        db.query(ScheduledNotification)
        .filter(
            ScheduledNotification.subscription_id == subscription.id,
            ScheduledNotification.event_id == event_id,
        )
        .delete(synchronize_session=False)
    )
    db.commit()
    return bool(removed)


def list_active_reminders(db: Session, endpoint: str) -> List[ScheduledNotification]:
    """Unfired bindings for ``endpoint``; an unknown endpoint simply has none."""
    subscription = find_subscription(db, endpoint)
    if subscription is None:
        return []
    return (
        db.query(ScheduledNotification)
        .filter(
            ScheduledNotification.subscription_id == subscription.id,
            ScheduledNotification.notified.is_(False),
        )
        .order_by(ScheduledNotification.scheduled_time, ScheduledNotification.event_id)
        .all()
    )
