"""Per-minute reminder dispatch."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional
from uuid import UUID

from sqlalchemy import and_, update
from sqlalchemy.orm import Session

from weekday_planner.core.config import settings
from weekday_planner.core.exceptions import DeliveryError
from weekday_planner.db.models.push_subscription import PushSubscription
from weekday_planner.db.models.scheduled_notification import ScheduledNotification
from weekday_planner.observability.metrics import log_metric
from weekday_planner.observability.tracing import trace
from weekday_planner.services.notifications.base import PushSender
from weekday_planner.services.notifications.factory import get_push_sender
from weekday_planner.services.vapid_keys import get_vapid_keys

logger = logging.getLogger(__name__)


@dataclass
class DispatchResult:
    checked_time: str
    matched: int = 0
    sent: int = 0
    failed: int = 0
    subscriptions_removed: int = 0
    purged: int = 0
    skipped: bool = False


@dataclass(frozen=True)
class _DueReminder:
    binding_id: UUID
    event_id: str
    event_label: str
    subscription_id: UUID
    subscription_info: Dict[str, Any]


def build_payload(event_id: str, label: str) -> Dict[str, Any]:
    return {
        "title": settings.notification_title,
        "body": f"{label}の時間です",
        "icon": settings.notification_icon,
        "badge": settings.notification_icon,
        "tag": event_id,
        "data": {"eventId": event_id, "url": "/"},
    }


def run_dispatch_sweep(
    db: Session,
    *,
    now: datetime,
    sender: Optional[PushSender] = None,
) -> DispatchResult:
    """
    Send every unfired reminder whose HH:MM equals ``now``'s.

    Matching is exact-minute: a reminder whose minute passes while the worker is
    down lapses. Each binding is claimed with a conditional UPDATE before the send,
    so overlapping sweeps cannot deliver it twice. A failed delivery releases the
    claim; a gone endpoint loses its subscription.
    """
    current = now.strftime("%H:%M")
    result = DispatchResult(checked_time=current)
    logger.info("Checking reminders for %s", current)

    if not settings.notifications_enabled:
        result.skipped = True
        log_metric("notifications.dispatch.skipped", 1, metadata={"reason": "notifications disabled"})
        return result

    # Plain snapshots: commits below expire ORM rows, and a removed subscription
    # takes its other bindings with it.
    due = [
        _DueReminder(
            binding_id=binding.id,
            event_id=binding.event_id,
            event_label=binding.event_label,
            subscription_id=subscription.id,
            subscription_info=subscription.subscription_info(),
        )
        for binding, subscription in (
            db.query(ScheduledNotification, PushSubscription)
            .join(PushSubscription, ScheduledNotification.subscription_id == PushSubscription.id)
            .filter(
                ScheduledNotification.scheduled_time == current,
                ScheduledNotification.notified.is_(False),
            )
            .all()
        )
    ]
    result.matched = len(due)

    with trace("notifications.dispatch", metadata={"checked_time": current, "matched": result.matched}):
        if due and sender is None:
            sender = get_push_sender(get_vapid_keys(db))

        for reminder in due:
            if not _claim(db, reminder.binding_id, now):
                continue
            try:
                sender.send(reminder.subscription_info, build_payload(reminder.event_id, reminder.event_label))
            except DeliveryError as exc:
                result.failed += 1
                if exc.gone:
                    logger.warning("Push endpoint gone (status=%s); removing subscription", exc.status)
                    removed = (
                        db.query(PushSubscription)
                        .filter(PushSubscription.id == reminder.subscription_id)
                        .delete(synchronize_session=False)
                    )
                    result.subscriptions_removed += removed
                else:
                    logger.error("Push delivery failed for %s: %s", reminder.event_id, exc.message)
                    _release(db, reminder.binding_id)
                db.commit()
                continue
            except Exception:
                # One broken sender must not cost the rest of this minute's reminders.
                result.failed += 1
                logger.exception("Unexpected push failure for %s", reminder.event_id)
                _release(db, reminder.binding_id)
                db.commit()
                continue
            result.sent += 1
            logger.info("Sent reminder for %s", reminder.event_label)

        result.purged = purge_fired(db, now=now)

    log_metric("notifications.dispatch.matched", result.matched)
    log_metric("notifications.dispatch.sent", result.sent)
    log_metric("notifications.dispatch.failed", result.failed)
    return result


def purge_fired(db: Session, *, now: datetime) -> int:
    """Delete fired bindings created more than the retention window ago."""
    cutoff = (now - timedelta(hours=settings.fired_retention_hours)).astimezone(timezone.utc)
    purged = (
        db.query(ScheduledNotification)
        .filter(
            ScheduledNotification.notified.is_(True),
            ScheduledNotification.created_at < cutoff,
        )
        .delete(synchronize_session=False)
    )
    db.commit()
    return purged


def _claim(db: Session, binding_id, now: datetime) -> bool:
    stmt = (
        update(ScheduledNotification)
        .where(and_(ScheduledNotification.id == binding_id, ScheduledNotification.notified.is_(False)))
        .values(notified=True, notified_at=now)
        .execution_options(synchronize_session=False)
    )
    claimed = db.execute(stmt).rowcount == 1
    db.commit()
    return claimed


def _release(db: Session, binding_id) -> None:
    db.execute(
        update(ScheduledNotification)
        .where(ScheduledNotification.id == binding_id)
        .values(notified=False, notified_at=None)
        .execution_options(synchronize_session=False)
    )
