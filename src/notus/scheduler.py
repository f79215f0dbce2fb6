"""Daily reminder digest, run on a schedule."""

import logging
from datetime import date
from typing import Callable

from apscheduler.schedulers.blocking import BlockingScheduler
from apscheduler.triggers.cron import CronTrigger
from dateutil.relativedelta import relativedelta

from .adapters.json_store import JsonNotebookStore
from .config import Config, load_config
from .core.digest import format_digest
from .core.timetable import Timetable
from .ports.notebook_store import NotebookStore

logger = logging.getLogger(__name__)


def build_digest(timetable: Timetable, today: date | None = None) -> str:
    """Digest text for the reminders due on ``today``."""
    today = today or date.today()
    return format_digest(timetable.get_reminders(today), today)


def send_reminder_digest(
    store: NotebookStore,
    config: Config,
    echo: Callable[[str], None] = print,
    today: date | None = None,
) -> str:
    """Load the timetable and emit today's reminder digest."""
    timetable = store.load_timetable()
    timetable.reminder_horizon = relativedelta(months=config.reminder_horizon_months)
    digest = build_digest(timetable, today)
    logger.info("Sending reminder digest")
    echo(digest)
    return digest


def setup_scheduler(
    config: Config,
    store: NotebookStore,
    echo: Callable[[str], None] = print,
) -> BlockingScheduler:
    """Set up the daily digest job."""
    scheduler = BlockingScheduler(timezone=config.timezone or "America/Toronto")

    try:
        hour, minute = map(int, config.digest_time.split(":"))
        scheduler.add_job(
            send_reminder_digest,
            CronTrigger(hour=hour, minute=minute),
            args=[store, config, echo],
            id="reminder_digest",
        )
        logger.info(f"Scheduled reminder digest at {hour:02d}:{minute:02d}")
    except ValueError:
        logger.warning(f"Invalid digest time format: {config.digest_time}")

    return scheduler


def run_digest(config: Config | None = None, echo: Callable[[str], None] = print) -> None:
    """Run the digest scheduler until interrupted."""
    logging.basicConfig(
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        level=logging.INFO,
    )

    if config is None:
        config = load_config()
    store = JsonNotebookStore(config.data_file)
    scheduler = setup_scheduler(config, store, echo)

    logger.info("Starting Notus reminder digest...")
    scheduler.start()
