# newsbubble/lifespan.py
from contextlib import asynccontextmanager
import os

from fastapi import FastAPI

from .config import build_reasoner
from .logging_setup import get_logger
from .store import init_db
from .scheduler import add_jobs, start_scheduler, shutdown_scheduler

logger = get_logger("newsbubble.lifespan")


@asynccontextmanager
async def lifespan(app: FastAPI):
    # ---- Startup ----
    logger.info("APP STARTUP")
    init_db()
    app.state.reasoner = build_reasoner()

    scheduler_enabled = os.getenv("SCHEDULER_ENABLED", "1") not in ("0", "false", "no")
    if scheduler_enabled and not getattr(app.state, "scheduler_started", False):
        logger.info("Registering scheduler jobs")
        add_jobs()
        start_scheduler()
        app.state.scheduler_started = True

    yield

    # ---- Shutdown ----
    logger.info("APP SHUTDOWN")
    if getattr(app.state, "scheduler_started", False):
        logger.info("Stopping scheduler")
        shutdown_scheduler(wait=False)
        app.state.scheduler_started = False
