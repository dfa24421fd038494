"""Daily sweep that completes published events whose date has passed.

This is a system transition and deliberately does not go through the owner
update rules in ``event_lifecycle``: the only rule here is the selection
predicate below. A failed run leaves rows PUBLISHED, so the next run retries
them; a second run after a successful one changes nothing.
"""
import logging
from datetime import datetime, timezone
from typing import Optional

import pytz
from sqlalchemy.orm import Session

from eventflow.config import settings
from eventflow.database import SessionLocal
from eventflow.models.event import Event, EventState
from eventflow.services.notification_service import purge_old_notifications

logger = logging.getLogger(__name__)


def archive_cutoff(now: datetime) -> datetime:
    """End of yesterday in the archiver timezone, as an aware UTC datetime."""
    tz = pytz.timezone(settings.ARCHIVER_TIMEZONE)
    local_now = now.astimezone(tz)
    start_of_today = tz.localize(datetime(local_now.year, local_now.month, local_now.day))
    return start_of_today.astimezone(pytz.utc)


def archive_past_events(db: Session, now: Optional[datetime] = None) -> int:
    """Bulk-set PUBLISHED events dated before the cutoff to COMPLETED.

    Returns the number of events changed; errors are logged and reported as 0.
    """
    now = now or datetime.now(timezone.utc)
    cutoff = archive_cutoff(now)
    try:
        completed = (
            db.query(Event)
            .filter(Event.state == EventState.published, Event.date < cutoff)
            .update({Event.state: EventState.completed}, synchronize_session=False)
        )
        db.commit()
    except Exception:
        db.rollback()
        logger.exception("Archiver run failed (cutoff %s); events stay PUBLISHED until the next run", cutoff.isoformat())
        return 0

    logger.info("Archiver completed %d published event(s) dated before %s", completed, cutoff.isoformat())
    return completed


def run_archiver() -> int:
    """Scheduler entry point; runs the sweep in its own session."""
    db = SessionLocal()
    try:
        return archive_past_events(db)
    finally:
        db.close()


def run_notification_purge() -> int:
    db = SessionLocal()
    try:
        return purge_old_notifications(db)
    finally:
        db.close()
