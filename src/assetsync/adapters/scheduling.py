"""Cron-driven feed import trigger on APScheduler."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Final

from apscheduler.schedulers.blocking import BlockingScheduler
from apscheduler.triggers.cron import CronTrigger

from assetsync.config.errors import ConfigurationError

if TYPE_CHECKING:
    from apscheduler.job import Job
    from apscheduler.schedulers.base import BaseScheduler

    from assetsync.config.feed import FeedScheduleConfig
    from assetsync.domain.feed_import.orchestrator import FeedImportOrchestrator

FEED_IMPORT_JOB_ID: Final[str] = "feed_import"

log = logging.getLogger(__name__)


def build_scheduler(config: FeedScheduleConfig) -> BlockingScheduler:
    return BlockingScheduler(
        timezone=config.timezone,
        job_defaults={
            "coalesce": True,
            "max_instances": 1,
            "misfire_grace_time": 300,
        },
    )


def run_feed_import_job(orchestrator: FeedImportOrchestrator) -> None:
    """Scheduler entry point; failures are logged so the scheduler keeps running."""

    try:
        summary = orchestrator.run_exclusive()
    except Exception:
        log.exception("Scheduled feed import failed")
        return
    if summary is not None and not summary.succeeded:
        log.error(
            "Scheduled feed import ingested no file (%s failed)", summary.failure_count
        )


def schedule_feed_import(
    scheduler: BaseScheduler,
    orchestrator: FeedImportOrchestrator,
    config: FeedScheduleConfig,
) -> Job | None:
    """Register the feed import on ``scheduler`` when scheduling is enabled."""

    if not config.enabled:
        log.info("Scheduled feed import disabled")
        return None

    try:
        trigger = CronTrigger.from_crontab(config.cron, timezone=config.timezone)
    except (ValueError, LookupError) as exc:
        raise ConfigurationError(
            f"Invalid feed import schedule {config.cron!r} ({config.timezone}): {exc}"
        ) from exc

    job = scheduler.add_job(
        run_feed_import_job,
        trigger=trigger,
        args=(orchestrator,),
        id=FEED_IMPORT_JOB_ID,
        name="Feed import",
        replace_existing=True,
        max_instances=1,
        coalesce=True,
    )
    log.info("Feed import scheduled: cron=%r timezone=%s", config.cron, config.timezone)
    return job
