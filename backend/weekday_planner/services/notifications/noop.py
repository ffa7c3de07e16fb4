"""No-op push provider (logs only)."""
from __future__ import annotations

import logging
from typing import Any, Dict

from weekday_planner.services.notifications.base import NotificationResult, PushSender

logger = logging.getLogger(__name__)


class NoopPushSender(PushSender):
    def send(self, subscription_info: Dict[str, Any], payload: Dict[str, Any]) -> NotificationResult:
        logger.info(
            "Push queued (noop) endpoint=%s tag=%s body=%s",
            subscription_info.get("endpoint"),
            payload.get("tag"),
            payload.get("body"),
        )
        return NotificationResult(status="noop", reason="push provider is noop")
