"""Dedicated APScheduler worker process for reminder dispatch."""
from __future__ import annotations

import logging
import signal
import threading

from apscheduler.schedulers.background import BackgroundScheduler

from weekday_planner.core.config import settings
from weekday_planner.core.logging import configure_logging
from weekday_planner.db.session import SessionLocal
from weekday_planner.observability.client import flush_opik
from weekday_planner.services.dispatch import run_dispatch_sweep
from weekday_planner.services.timeclock import system_clock


logger = logging.getLogger(__name__)

DISPATCH_JOB_ID = "dispatch_notifications"


def main() -> None:
    configure_logging(log_level=settings.log_level)
    logger.info(
        "Dispatch worker starting (scheduler=%s, notifications=%s)",
        settings.scheduler_enabled,
        settings.notifications_enabled,
    )

    scheduler = BackgroundScheduler(timezone=settings.scheduler_timezone)

    if settings.scheduler_enabled:
        register_jobs(scheduler)
        scheduler.start()
        if settings.dispatch_run_on_startup:
            logger.info("Running dispatch once on startup")
            run_dispatch_job()
    else:
        logger.warning("Scheduler disabled via config; worker will idle")

    stop_event = threading.Event()

    def shutdown(signum, frame):  # pragma: no cover - signal handler
        logger.info("Dispatch worker shutting down (signal=%s)", signum)
        if scheduler.running:
            scheduler.shutdown(wait=False)
        flush_opik()
        stop_event.set()

    signal.signal(signal.SIGINT, shutdown)
    signal.signal(signal.SIGTERM, shutdown)

    try:
        stop_event.wait()
    except KeyboardInterrupt:  # pragma: no cover - manual stop
        shutdown(signal.SIGINT, None)


def register_jobs(scheduler: BackgroundScheduler) -> None:
    # One overlapping sweep at most; a late start still claims bindings row by row.
    scheduler.add_job(
        run_dispatch_job,
        trigger="cron",
        minute="*",
        second=0,
        id=DISPATCH_JOB_ID,
        replace_existing=True,
        max_instances=1,
        coalesce=True,
    )
    logger.info("Registered dispatch job (every minute, %s)", settings.scheduler_timezone or "local time")


def run_dispatch_job() -> None:
    clock = system_clock(settings.scheduler_timezone)
    session = SessionLocal()
    try:
        result = run_dispatch_sweep(session, now=clock())
        logger.info(
            "Dispatch complete at %s: matched=%s, sent=%s, failed=%s, purged=%s",
            result.checked_time,
            result.matched,
            result.sent,
            result.failed,
            result.purged,
        )
    except Exception:  # pragma: no cover - keep the scheduler alive
        session.rollback()
        logger.exception("Dispatch job failed")
    finally:
        session.close()


if __name__ == "__main__":  # pragma: no cover - manual launch
    main()
