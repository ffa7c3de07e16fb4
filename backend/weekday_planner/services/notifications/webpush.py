"""Web Push provider backed by pywebpush."""
from __future__ import annotations

import json
import logging
from typing import Any, Dict

from pywebpush import WebPushException, webpush
from requests import RequestException

from weekday_planner.core.exceptions import DeliveryError
from weekday_planner.services.notifications.base import NotificationResult, PushSender

logger = logging.getLogger(__name__)

# Push services answer 404/410 for subscriptions the browser has dropped.
GONE_STATUSES = frozenset({404, 410})


class WebPushSender(PushSender):
    def __init__(self, *, private_key: str, subject: str, ttl: int = 60):
        self._private_key = private_key
        self._claims = {"sub": subject}
        self._ttl = ttl

    def send(self, subscription_info: Dict[str, Any], payload: Dict[str, Any]) -> NotificationResult:
        try:
            webpush(
                subscription_info=subscription_info,
                data=json.dumps(payload, ensure_ascii=False),
                vapid_private_key=self._private_key,
                vapid_claims=dict(self._claims),
                ttl=self._ttl,
            )
        except WebPushException as exc:
            status = getattr(exc.response, "status_code", None)
            raise DeliveryError(str(exc), gone=status in GONE_STATUSES, status=status) from exc
        except RequestException as exc:
            # pywebpush lets transport failures from requests through unwrapped.
            raise DeliveryError(f"push service unreachable: {exc}") from exc
        return NotificationResult(status="sent", reason="delivered to push service")
