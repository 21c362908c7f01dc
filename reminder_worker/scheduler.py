"""
Daily Reminder Trigger

Registers the reminder pass as one daily cron job in the configured
timezone. Only one pass runs at a time: overlapping firings are coalesced
instead of started concurrently.
"""
import logging
from typing import Callable, Optional

import pytz
from apscheduler.schedulers.base import BaseScheduler
from apscheduler.schedulers.blocking import BlockingScheduler

from .scheduler_config import DAILY_JOB_ID, DEFAULT_TRIGGER_MINUTE
from .schemas import ReminderConfig

logger = logging.getLogger(__name__)


def build_scheduler(
    config: ReminderConfig,
    job: Callable[[], object],
    scheduler: Optional[BaseScheduler] = None
) -> BaseScheduler:
    """Create (or reuse) a scheduler holding the single daily reminder job."""
    if scheduler is None:
        scheduler = BlockingScheduler(timezone=pytz.timezone(config.timezone))

    scheduler.add_job(
        job,
        'cron',
        hour=config.trigger_hour,
        minute=DEFAULT_TRIGGER_MINUTE,
        id=DAILY_JOB_ID,
        replace_existing=True,
        max_instances=1,
        coalesce=True
    )
    return scheduler


def start_scheduler(scheduler: BaseScheduler, config: ReminderConfig):
    """Start the daily trigger. Blocks until the scheduler is shut down."""
    logger.info(f"🚀 Scheduler started: daily reminders at {config.trigger_hour:02d}:{DEFAULT_TRIGGER_MINUTE:02d} ({config.timezone})")
    scheduler.start()


def stop_scheduler(scheduler: BaseScheduler):
    """Stop the scheduler gracefully."""
    if scheduler.running:
        scheduler.shutdown(wait=False)
    logger.info("🛑 Scheduler stopped")
