"""
Domain exceptions for the planner.

Routes translate these into HTTP responses through the handlers registered in
``weekday_planner.main``; services and the API client raise them directly.
"""
from __future__ import annotations

from typing import Any, Optional


class PlannerError(Exception):
    """Base exception for the planner."""

    status_code = 500

    def __init__(self, message: str, details: Optional[Any] = None):
        self.message = message
        self.details = details
        super().__init__(message)


class ValidationError(PlannerError):
    """Missing or out-of-range input. Never retried."""

    status_code = 400


class NotFoundError(PlannerError):
    """A record or subscription required by the operation does not exist."""

    status_code = 404


class TransientStoreError(PlannerError):
    """Network or server-side failure talking to the store; callers may retry."""

    status_code = 503


class DeliveryError(PlannerError):
    """A push message could not be delivered."""

    def __init__(self, message: str, *, gone: bool = False, status: Optional[int] = None):
        super().__init__(message, details={"gone": gone, "status": status})
        self.gone = gone
        self.status = status
