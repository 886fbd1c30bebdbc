# newsbubble/scheduler.py
from apscheduler.schedulers.background import BackgroundScheduler
from apscheduler.triggers.interval import IntervalTrigger
from apscheduler.events import EVENT_JOB_ERROR, EVENT_JOB_EXECUTED
import pytz

from .config import TIMEZONE, INGEST_INTERVAL_MINUTES
from .sources import ingest_feeds
from .store import get_session
from .logging_setup import get_logger

logger = get_logger("newsbubble.scheduler")
scheduler = BackgroundScheduler(timezone=pytz.timezone(TIMEZONE))


def run_ingest():
    with get_session() as s:
        return ingest_feeds(s)


def _job_listener(event):
    if event.exception:
        logger.error(
            "JOB_ERROR",
            exc_info=event.exception,
            extra={"handled": False, "job_id": event.job_id, "run_time": str(event.scheduled_run_time)},
        )
    else:
        logger.info(
            "JOB_OK",
            extra={"job_id": event.job_id, "run_time": str(event.scheduled_run_time)}
        )


def add_jobs():
    trigger = IntervalTrigger(minutes=INGEST_INTERVAL_MINUTES)
    scheduler.add_job(run_ingest, trigger, id="ingest_feeds", replace_existing=True, coalesce=True, max_instances=1)
    scheduler.add_listener(_job_listener, EVENT_JOB_EXECUTED | EVENT_JOB_ERROR)
    logger.info(f"Job registered: ingest_feeds every {INGEST_INTERVAL_MINUTES} min ({TIMEZONE})")


def start_scheduler():
    if not scheduler.running:
        scheduler.start()
        logger.info("APScheduler started")


def shutdown_scheduler(wait: bool = False):
    if scheduler.running:
        scheduler.shutdown(wait=wait)
        logger.info("APScheduler stopped")
