import argparse
import logging
import os
import sys
from typing import List, Optional

from .config import load_env, load_reminder_config
from .errors import ReminderError
from .reminders import run_reminder_pass
from .scheduler import build_scheduler, start_scheduler, stop_scheduler
from .send import build_transport
from .store import open_store

# Configure logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


def run_once() -> int:
    """Single reminder pass with configuration from the environment."""
    config = load_reminder_config()
    store = open_store(config)
    transport = build_transport(os.getenv("REMINDER_TRANSPORT", "email"))
    report = run_reminder_pass(config, store, transport)
    return report.sent_count


def _scheduled_job():
    try:
        run_once()
    except ReminderError as e:
        logger.error(f"Reminder pass failed: {e}")


def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(description="Send D-1 / D0 event reminders from a tabular dataset")
    parser.add_argument("--once", action="store_true", help="Run a single pass and exit")
    args = parser.parse_args(argv)

    load_env()

    if args.once:
        try:
            run_once()
        except ReminderError as e:
            logger.error(f"Reminder pass failed: {e}")
            return 1
        return 0

    try:
        config = load_reminder_config()
    except ReminderError as e:
        logger.error(f"{e}")
        return 1

    scheduler = build_scheduler(config, _scheduled_job)
    try:
        start_scheduler(scheduler, config)
    except (KeyboardInterrupt, SystemExit):
        stop_scheduler(scheduler)
    return 0


if __name__ == "__main__":
    sys.exit(main())
