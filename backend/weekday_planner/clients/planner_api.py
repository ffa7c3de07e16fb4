"""HTTP client for the planner's records and analytics endpoints."""
from __future__ import annotations

import logging
import time
from datetime import date
from typing import Any, Callable, Dict, List, Optional

import httpx

from weekday_planner.core.config import settings
from weekday_planner.core.exceptions import NotFoundError, TransientStoreError, ValidationError

logger = logging.getLogger(__name__)


class PlannerApiClient:
    """
    Synchronous client used by scripts and the UI layer to reach the record store.

    Transport failures and 5xx responses are retried up to ``max_retries`` times
    with a linear backoff; 4xx responses are raised immediately.
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        *,
        timeout: Optional[float] = None,
        max_retries: Optional[int] = None,
        backoff_seconds: Optional[float] = None,
        transport: Optional[httpx.BaseTransport] = None,
        sleep: Callable[[float], None] = time.sleep,
    ):
        self.max_retries = settings.client_max_retries if max_retries is None else max_retries
        self.backoff_seconds = settings.client_backoff_seconds if backoff_seconds is None else backoff_seconds
        self._sleep = sleep
        self._client = httpx.Client(
            base_url=base_url or settings.api_base_url,
            timeout=timeout or settings.client_timeout_seconds,
            transport=transport,
        )

    def close(self) -> None:
        self._client.close()

    def __enter__(self) -> "PlannerApiClient":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def save_record(self, record: Dict[str, Any]) -> Dict[str, Any]:
        return self._request("POST", "/records", json=record)["record"]

    def get_record(self, record_date: date) -> Optional[Dict[str, Any]]:
        return self._request("GET", f"/records/{record_date.isoformat()}")["record"]

    def list_records(
        self,
        *,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        limit: Optional[int] = None,
    ) -> List[Dict[str, Any]]:
        params: Dict[str, Any] = {}
        if start_date:
            params["start_date"] = start_date.isoformat()
        if end_date:
            params["end_date"] = end_date.isoformat()
        if limit:
            params["limit"] = limit
        return self._request("GET", "/records", params=params)["records"]

    def delete_record(self, record_date: date) -> None:
        self._request("DELETE", f"/records/{record_date.isoformat()}")

    def set_task_completion(self, record_date: date, task_id: str, completed: bool) -> List[str]:
        data = self._request(
            "PATCH",
            f"/records/{record_date.isoformat()}/tasks/{task_id}",
            json={"completed": completed},
        )
        return data["completed_tasks"]

    def get_analytics(self, days: Optional[int] = None) -> Dict[str, Any]:
        params = {"days": days} if days else None
        return self._request("GET", "/analytics", params=params)["analytics"]

    def _request(self, method: str, path: str, **kwargs: Any) -> Dict[str, Any]:
        last_error: Optional[str] = None
        for attempt in range(self.max_retries + 1):
            if attempt:
                self._sleep(self.backoff_seconds * attempt)
            try:
                response = self._client.request(method, path, **kwargs)
            except httpx.TransportError as exc:
                last_error = f"{type(exc).__name__}: {exc}"
                logger.warning("%s %s failed (attempt %s): %s", method, path, attempt + 1, last_error)
                continue

            if response.status_code >= 500:
                last_error = f"HTTP {response.status_code}"
                logger.warning("%s %s returned %s (attempt %s)", method, path, response.status_code, attempt + 1)
                continue
            if response.status_code == 404:
                raise NotFoundError(_detail(response), details=_errors(response))
            if response.status_code >= 400:
                raise ValidationError(_detail(response), details=_errors(response))
            return response.json()

        raise TransientStoreError(
            f"{method} {path} failed after {self.max_retries + 1} attempts",
            details=last_error,
        )


def _detail(response: httpx.Response) -> str:
    try:
        return str(response.json().get("detail") or response.reason_phrase)
    except ValueError:
        return response.reason_phrase


def _errors(response: httpx.Response) -> Any:
    try:
        return response.json().get("errors")
    except ValueError:
        return None
