"""Push sender factory."""
from __future__ import annotations

from weekday_planner.core.config import settings
from weekday_planner.services.notifications.base import PushSender
from weekday_planner.services.notifications.noop import NoopPushSender
from weekday_planner.services.notifications.webpush import WebPushSender
from weekday_planner.services.vapid_keys import VapidKeys


def get_push_sender(keys: VapidKeys) -> PushSender:
    provider = settings.notifications_provider.lower()
    if provider == "webpush":
        return WebPushSender(private_key=keys.private_key, subject=settings.vapid_subject)
    return NoopPushSender()
