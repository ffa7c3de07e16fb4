"""Opik tracing around planner operations."""
from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import TYPE_CHECKING, Any, Dict, Iterator, Optional

from weekday_planner.core.context import get_request_id
from weekday_planner.observability import client as opik_client

if TYPE_CHECKING:  # pragma: no cover - typing helper
    from opik.api_objects.trace.trace_client import Trace
else:  # pragma: no cover - typing helper
    Trace = object  # type: ignore[assignment]

logger = logging.getLogger(__name__)


def get_opik_client():
    return opik_client.get_opik_client()


@contextmanager
def trace(
    name: str,
    metadata: Optional[Dict[str, Any]] = None,
    request_id: Optional[str] = None,
) -> Iterator[Optional["Trace"]]:
    """
    Open an Opik trace for the enclosed block.

    ``request_id`` defaults to the one bound by ``RequestIDMiddleware``; the
    dispatch worker runs outside any request and traces without one. Yields
    None when tracing is off.
    """
    client = get_opik_client()
    if client is None:
        yield None
        return

    trace_metadata = dict(metadata or {})
    request_id = request_id or get_request_id()
    if request_id:
        trace_metadata.setdefault("request_id", request_id)
    opik_trace = _start(client, name, trace_metadata)

    try:
        yield opik_trace
    except Exception as exc:
        _call(opik_trace, "update", error_info={"message": str(exc), "type": type(exc).__name__})
        raise
    finally:
        _call(opik_trace, "end")


def _start(client, name: str, metadata: Dict[str, Any]) -> Optional["Trace"]:
    try:
        return client.trace(name=name, metadata=metadata or None)
    except Exception as exc:  # pragma: no cover - third-party failure
        logger.debug("Unable to start Opik trace %s: %s", name, exc)
        return None


def _call(opik_trace: Optional["Trace"], method: str, **kwargs: Any) -> None:
    if opik_trace is None:
        return
    try:
        getattr(opik_trace, method)(**kwargs)
    except Exception:  # pragma: no cover - third-party failure
        logger.debug("Opik trace.%s failed", method, exc_info=True)
