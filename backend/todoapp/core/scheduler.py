"""
Background scheduler for periodic tasks.

- Purge soft-deleted todos: hard-deletes todos whose deleted_at is older
  than TODO_RETENTION_HOURS. Runs every PURGE_INTERVAL_HOURS.
"""

from datetime import datetime, timedelta, timezone
from typing import Callable, Optional

from apscheduler.schedulers.background import BackgroundScheduler
from apscheduler.triggers.interval import IntervalTrigger
from sqlalchemy.orm import Session
from todoapp.core.config import settings
from todoapp.core.database import SessionLocal
from todoapp.storage.errors import StoreError
from todoapp.storage.todo_store import TodoStore
import logging

logger = logging.getLogger(__name__)

scheduler = BackgroundScheduler()


def purge_deleted_todos_job(
    session_factory: Callable[[], Session] = SessionLocal,
    retention_hours: Optional[int] = None,
    now: Optional[datetime] = None,
) -> int:
    """
    Hard-delete todos soft-deleted more than retention_hours ago.

    Returns the number of purged rows. Failures are logged and swallowed so a
    bad run never takes the scheduler down; the next interval retries.
    """
    if retention_hours is None:
        retention_hours = settings.TODO_RETENTION_HOURS
    cutoff = (now or datetime.now(timezone.utc)) - timedelta(hours=retention_hours)

    db = session_factory()
    try:
        purged = TodoStore(db).purge_deleted(older_than=cutoff)
        if purged == 0:
            logger.info("Purge job completed: no deleted todos past retention")
        return purged
    except StoreError as e:
        logger.error(f"Error in purge_deleted_todos_job: {str(e)}")
        return 0
    finally:
        db.close()


def start_scheduler():
    """Start the background scheduler (called from the app lifespan)"""
    if not scheduler.running:
        scheduler.add_job(
            purge_deleted_todos_job,
            trigger=IntervalTrigger(hours=settings.PURGE_INTERVAL_HOURS),
            id="purge_deleted_todos",
            name="Purge soft-deleted todos",
            replace_existing=True
        )

        scheduler.start()
        logger.info(
            f"Background scheduler started. Purge job scheduled every {settings.PURGE_INTERVAL_HOURS} hours."
        )


def stop_scheduler():
    """Stop the background scheduler (called on app shutdown)"""
    if scheduler.running:
        scheduler.shutdown()
        logger.info("Background scheduler stopped.")
