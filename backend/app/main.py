"""
FastAPI app entrypoint.

Runs the birthday scheduler (APScheduler, UTC cron every BIRTHDAY_TICK_MINUTES) and a small
read-only API for inspecting birthday jobs.
"""
import logging
import threading
from contextlib import asynccontextmanager
from pathlib import Path

from apscheduler.schedulers.background import BackgroundScheduler
from dotenv import load_dotenv
from fastapi import FastAPI

# Load .env from backend/ before any app code
load_dotenv(Path(__file__).resolve().parent.parent / ".env")

from app.api.routes import birthday_jobs
from app.config import settings
from app.core.constants import BIRTHDAY_TICK_JOB_ID
from app.core.logging import setup_logging
from app.scheduler.birthday_job import run_birthday_tick

setup_logging(settings)
logger = logging.getLogger(__name__)

_scheduler = BackgroundScheduler(timezone="UTC")


@asynccontextmanager
async def lifespan(app: FastAPI):
    _scheduler.add_job(
        run_birthday_tick,
        "cron",
        minute=f"*/{settings.birthday_tick_minutes}",
        id=BIRTHDAY_TICK_JOB_ID,
        max_instances=1,
        coalesce=True,
        # A tick delayed by a long previous pass still runs instead of being dropped
        misfire_grace_time=settings.birthday_tick_minutes * 60,
        replace_existing=True,
    )
    _scheduler.start()
    app.state.scheduler = _scheduler

    def startup_background():
        # Catch up after a restart: generation is idempotent, so run it once now.
        try:
            run_birthday_tick(force_generation=True)
            logger.info("Birthday tick on startup; next tick every %s min", settings.birthday_tick_minutes)
        except Exception as e:
            logger.warning("Birthday tick on startup failed: %s", e, exc_info=True)

    threading.Thread(target=startup_background, daemon=True).start()
    logger.info("Birthday scheduler started (notifier=%s)", settings.birthday_notifier)
    yield
    _scheduler.shutdown(wait=False)


app = FastAPI(title="Birthday Notifier", version="0.1.0", lifespan=lifespan)

app.include_router(birthday_jobs.router, tags=["birthday-jobs"])


@app.get("/", include_in_schema=False)
def root():
    """Root: point to API docs and health."""
    return {"message": "Birthday Notifier", "docs": "/docs", "health": "/health"}


@app.get("/health")
def health() -> dict[str, str | None]:
    job = _scheduler.get_job(BIRTHDAY_TICK_JOB_ID) if _scheduler.running else None
    next_run = job.next_run_time.isoformat() if job and job.next_run_time else None
    return {"status": "ok", "next_birthday_tick": next_run}
