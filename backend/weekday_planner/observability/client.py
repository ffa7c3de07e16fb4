"""Process-wide Opik client shared by the API and the dispatch worker."""
from __future__ import annotations

import logging
from threading import Lock
from typing import Optional

from weekday_planner.core.config import settings

try:
    from opik import Opik
except ImportError:  # pragma: no cover - opik is an optional extra
    Opik = None  # type: ignore[assignment]

logger = logging.getLogger(__name__)

_client: Optional["Opik"] = None
_client_lock = Lock()
_init_attempted = False


def _build_client() -> Optional["Opik"]:
    if not settings.opik_enabled:
        return None
    if not settings.opik_api_key:
        logger.warning("OPIK_ENABLED is set without OPIK_API_KEY; planner tracing stays off.")
        return None
    try:
        client = Opik(project_name=settings.opik_project, api_key=settings.opik_api_key)
    except Exception as exc:  # pragma: no cover - third-party init failure
        logger.warning("Opik init failed, planner tracing disabled: %s", exc)
        return None
    logger.info("Opik tracing enabled for project %s", settings.opik_project)
    return client


def init_opik() -> Optional["Opik"]:
    """
    Create the Opik client on first use.

    Initialization is attempted once per process; the worker's scheduler thread
    and request threads may race here, so the whole attempt runs under the lock.
    """
    global _client, _init_attempted

    if Opik is None:
        return None

    with _client_lock:
        if not _init_attempted:
            _init_attempted = True
            _client = _build_client()
        return _client


def get_opik_client() -> Optional["Opik"]:
    """Return the cached Opik client, or None when tracing is off."""
    if _client is not None:
        return _client
    return init_opik()


def flush_opik() -> None:
    """Push buffered traces before the process exits."""
    client = _client
    flush = getattr(client, "flush", None)
    if flush is None:
        return
    try:
        flush()
    except Exception:  # pragma: no cover - third-party failure
        logger.debug("Opik flush failed", exc_info=True)
