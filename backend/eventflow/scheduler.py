"""Background scheduler for the daily maintenance jobs.

Uses APScheduler to run:
- the archiver (PUBLISHED -> COMPLETED for past events), daily at midnight
- the purge of old read notifications, daily shortly after
"""
import logging
from typing import Optional

from apscheduler.events import EVENT_JOB_ERROR, EVENT_JOB_MISSED
from apscheduler.schedulers.background import BackgroundScheduler
from apscheduler.triggers.cron import CronTrigger

from eventflow.config import settings
from eventflow.services.archiver import run_archiver, run_notification_purge

logger = logging.getLogger(__name__)

scheduler: Optional[BackgroundScheduler] = None


def _on_job_error(event):
    logger.error("Scheduled job FAILED: job_id=%s error=%s", event.job_id, event.exception)
    if event.traceback:
        logger.error("Traceback for job %s:\n%s", event.job_id, event.traceback)


def _on_job_missed(event):
    logger.warning("Scheduled job MISSED: job_id=%s scheduled_run_time=%s", event.job_id, event.scheduled_run_time)


def init_scheduler() -> BackgroundScheduler:
    """Create and start the scheduler. Called once at application startup."""
    global scheduler

    if scheduler is not None:
        logger.warning("Scheduler already initialized")
        return scheduler

    scheduler = BackgroundScheduler(
        timezone=settings.ARCHIVER_TIMEZONE,
        job_defaults={
            "coalesce": True,
            "max_instances": 1,
            "misfire_grace_time": 3600,
        },
    )

    scheduler.add_job(
        func=run_archiver,
        trigger=CronTrigger(hour=0, minute=0, timezone=settings.ARCHIVER_TIMEZONE),
        id="archive_past_events",
        name="Complete Past Published Events",
        replace_existing=True,
    )
    logger.info("Scheduled job: archive_past_events (daily at midnight %s)", settings.ARCHIVER_TIMEZONE)

    scheduler.add_job(
        func=run_notification_purge,
        trigger=CronTrigger(hour=0, minute=30, timezone=settings.ARCHIVER_TIMEZONE),
        id="purge_old_notifications",
        name="Purge Old Read Notifications",
        replace_existing=True,
    )
    logger.info("Scheduled job: purge_old_notifications (daily at 00:30 %s)", settings.ARCHIVER_TIMEZONE)

    scheduler.add_listener(_on_job_error, EVENT_JOB_ERROR)
    scheduler.add_listener(_on_job_missed, EVENT_JOB_MISSED)
    scheduler.start()
    logger.info("Background scheduler started")
    return scheduler


def shutdown_scheduler() -> None:
    global scheduler

    if scheduler is not None:
        scheduler.shutdown(wait=False)
        scheduler = None
        logger.info("Background scheduler stopped")
