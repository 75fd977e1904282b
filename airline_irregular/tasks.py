"""tasks.py – scheduling with APScheduler.

Every ``Settings.poll_interval_min`` minutes every airline source is checked
once. A failing source is logged and retried on the next tick.
"""

from __future__ import annotations

import logging

from apscheduler.schedulers.blocking import BlockingScheduler

from .config import Settings
from .runner import run_all

logger = logging.getLogger(__name__)


def build_scheduler(settings: Settings) -> BlockingScheduler:
    sched = BlockingScheduler(timezone="Asia/Tokyo")

    def check_job() -> None:
        """Check all sources and notify on changes."""
        results = run_all(settings)
        logger.info("Scheduled check finished: %s", results)

    sched.add_job(
        check_job,
        "interval",
        minutes=settings.poll_interval_min,
        id="check_all",
        max_instances=1,
        coalesce=True,
    )
    return sched


def start(settings: Settings) -> None:
    sched = build_scheduler(settings)
    logger.info("Checking every %d min", settings.poll_interval_min)
    sched.start()


__all__ = ["build_scheduler", "start"]
