"""Push sender interface."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict


@dataclass
class NotificationResult:
    status: str
    reason: str


class PushSender:
    """Base interface for push delivery providers."""

    def send(self, subscription_info: Dict[str, Any], payload: Dict[str, Any]) -> NotificationResult:
        """
        Deliver ``payload`` to one browser subscription.

        Raises ``DeliveryError`` on failure; ``gone=True`` means the endpoint no
        longer exists and the subscription should be dropped.
        """
        raise NotImplementedError
