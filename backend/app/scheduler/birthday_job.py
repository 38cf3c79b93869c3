"""
Birthday scheduler tick. Runs every BIRTHDAY_TICK_MINUTES (cron, UTC):
- every tick in UTC hour 0 is a generation tick: create today's pending jobs, then dispatch
  (generation is idempotent, so a dropped or late 00:00 run is picked up by the next one);
- every other tick only dispatches.

Nothing is carried between ticks; a restart just resumes ticking and everything is
re-derived from the birthday_jobs table and the current time.
"""
import logging
import threading
import time
from datetime import datetime
from typing import Callable

from sqlalchemy.orm import Session

from app.config import settings
from app.core.constants import GENERATION_HOUR_UTC
from app.db.session import SessionLocal
from app.services.birthday.clock import as_utc, utc_now
from app.services.birthday.dispatcher import dispatch_birthday_jobs
from app.services.birthday.generator import generate_birthday_jobs
from app.services.birthday.job_store import SqlJobStore
from app.services.birthday.types import TickKind, TickReport
from app.services.birthday.user_directory import SqlUserDirectory
from app.services.notifiers import Notifier, get_notifier

logger = logging.getLogger(__name__)

# Two passes must never run against the store at the same time (scheduled tick vs startup tick)
_tick_lock = threading.Lock()


def classify_tick(now: datetime) -> TickKind:
    """Generation on every tick of UTC hour 0, else dispatch."""
    if as_utc(now).hour == GENERATION_HOUR_UTC:
        return TickKind.GENERATION_TICK
    return TickKind.DISPATCH_TICK


def run_birthday_tick(
    now: datetime | None = None,
    *,
    force_generation: bool = False,
    session_factory: Callable[[], Session] = SessionLocal,
    notifier: Notifier | None = None,
    sleep: Callable[[float], None] = time.sleep,
) -> TickReport | None:
    """
    One tick. Returns a TickReport, or None when the tick was skipped (previous pass still
    running) or failed as a whole (logged; the next tick runs independently).
    """
    if not _tick_lock.acquire(blocking=False):
        logger.warning("Previous birthday tick still running; skipping this tick")
        return None
    try:
        now = as_utc(now or utc_now())
        kind = classify_tick(now)
        if force_generation:
            kind = TickKind.GENERATION_TICK
        report = TickReport(now=now, kind=kind)
        db = session_factory()
        try:
            store = SqlJobStore(db)
            directory = SqlUserDirectory(db)
            if kind is TickKind.GENERATION_TICK:
                report.generation = generate_birthday_jobs(
                    store,
                    directory,
                    now,
                    send_hour=settings.birthday_send_hour,
                    lookahead_days=settings.birthday_generation_lookahead_days,
                )
            report.dispatch = dispatch_birthday_jobs(
                store,
                directory,
                notifier or get_notifier(settings.birthday_notifier),
                now,
                send_hour=settings.birthday_send_hour,
                max_attempts=settings.birthday_max_attempts,
                backoff_base_seconds=settings.birthday_backoff_base_seconds,
                sleep=sleep,
            )
            return report
        except Exception as e:
            logger.exception("Birthday tick at %s failed: %s", now.isoformat(), e)
            db.rollback()
            return None
        finally:
            db.close()
    finally:
        _tick_lock.release()
