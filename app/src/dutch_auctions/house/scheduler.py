"""
APScheduler setup for the `watch` command.

Re-renders auction statuses on a fixed interval until interrupted.
"""

from collections.abc import Callable
from datetime import datetime
from typing import Any

import structlog
from apscheduler.schedulers.blocking import BlockingScheduler
from apscheduler.triggers.interval import IntervalTrigger

from .constants import WATCH_MISFIRE_GRACE_SECONDS
from .tasks import render_current_auctions

logger = structlog.get_logger(__name__)


def create_scheduler(
    config_path: str | None,
    *,
    interval_seconds: int,
    emit: Callable[[str], Any] = print,
) -> BlockingScheduler:
    """
    Create and configure the APScheduler instance.

    Args:
        config_path: Path to TOML config file, None for defaults
        interval_seconds: Seconds between renders
        emit: Receives the rendered text

    Returns:
        Configured BlockingScheduler instance
    """
    job_defaults = {
        "max_instances": 1,  # Skip if previous render still running
        "coalesce": True,  # Merge missed runs
        "misfire_grace_time": WATCH_MISFIRE_GRACE_SECONDS,
    }

    scheduler = BlockingScheduler(job_defaults=job_defaults)

    # Pass config_path, not config object, so edits are picked up between renders
    scheduler.add_job(
        render_current_auctions,
        trigger=IntervalTrigger(seconds=interval_seconds),
        kwargs={"config_path": config_path, "emit": emit},
        id="render_auctions",
        name="Render Auction Statuses",
        next_run_time=datetime.now(),
    )

    logger.info("Scheduler configured", interval_seconds=interval_seconds)
    return scheduler


def run_scheduler(config_path: str | None, *, interval_seconds: int, emit: Callable[[str], Any] = print) -> None:
    """
    Start the scheduler and run until interrupted.

    Args:
        config_path: Path to TOML config file, None for defaults
        interval_seconds: Seconds between renders
        emit: Receives the rendered text
    """
    scheduler = create_scheduler(config_path, interval_seconds=interval_seconds, emit=emit)
    logger.info("Watching auctions", config_path=config_path, interval_seconds=interval_seconds)
    try:
        scheduler.start()
    except (KeyboardInterrupt, SystemExit):
        logger.info("Scheduler stopped")
