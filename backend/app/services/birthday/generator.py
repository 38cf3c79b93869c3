"""
Daily job generation: for every user whose birthday (month/day) is today in UTC, make sure
exactly one pending BirthdayJob exists. Safe to run more than once per day; a user with a
pending job is skipped, unless that job is stale (its send time passed without delivery),
in which case it is moved to the upcoming occurrence. Per-user problems are logged and
never stop the batch.
"""
import logging
from datetime import datetime, timedelta

from app.core.constants import SEND_HOUR, STALE_JOB_DAYS
from app.core.errors import InvalidBirthdayError, InvalidTimezoneError
from app.models.birthday_job import BirthdayJob
from app.models.user import User
from app.services.birthday.base import JobStore, UserDirectory
from app.services.birthday.clock import as_utc, utc_now
from app.services.birthday.occurrence import birthday_match_keys, next_send_utc
from app.services.birthday.types import BatchResult, Failed, Ok, Skipped, UnitResult

logger = logging.getLogger(__name__)


def generate_birthday_jobs(
    store: JobStore,
    directory: UserDirectory,
    now: datetime | None = None,
    *,
    send_hour: int = SEND_HOUR,
    lookahead_days: int = 0,
) -> BatchResult:
    """
    One generation pass for the UTC day of `now` (plus `lookahead_days` following days).
    Returns one result per matched user (and a Failed per directory key that could not be read).
    """
    now = as_utc(now or utc_now())
    today = now.date()
    result = BatchResult("generate")
    for offset in range(lookahead_days + 1):
        day = today + timedelta(days=offset)
        for month, dom in birthday_match_keys(day):
            try:
                users = directory.find_by_birthday_month_day(month, dom)
            except Exception as e:
                logger.exception("Could not read users born %02d-%02d: %s", month, dom, e)
                result.add(Failed(f"birthday:{month:02d}-{dom:02d}", str(e)))
                continue
            for user in users:
                result.add(_ensure_pending_job(store, user, now, send_hour))
    logger.info("Birthday generation for %s: %s", today.isoformat(), result.summary())
    return result


def _ensure_pending_job(store: JobStore, user: User, now: datetime, send_hour: int) -> UnitResult:
    key = f"user:{user.id}"
    try:
        pending = store.find_pending_by_user(user.id)
        if pending is not None and not _is_stale(pending, now):
            logger.debug("User %s already has a pending birthday job; skipping", user.id)
            return Skipped(key, "pending job exists")
        if user.birthday is None:
            raise InvalidBirthdayError(f"user {user.id} has no birthday")
        send_at = next_send_utc(user.birthday, user.timezone, now, send_hour=send_hour)
        occurrence = {
            "user_name": user.name,
            "user_email": user.email,
            "birthday": user.birthday,
            "timezone": user.timezone,
            "date": now.date(),
            "send_birthday_at": send_at,
            "attempts": 0,
        }
        if pending is not None:
            # Never delivered last time; reuse the row for this occurrence
            job_id = pending.id
            if not store.reschedule(job_id, occurrence):
                return Skipped(key, "pending job sent meanwhile")
            logger.warning("Rescheduled undelivered birthday job %s for user %s", job_id, user.id)
        else:
            job_id = store.insert(BirthdayJob(user_id=user.id, sent=False, **occurrence))
    except (InvalidTimezoneError, InvalidBirthdayError) as e:
        logger.warning("Skipping user %s: %s", user.id, e)
        return Failed(key, str(e))
    except Exception as e:
        logger.exception("Failed to create birthday job for user %s: %s", user.id, e)
        return Failed(key, str(e))
    logger.info("Birthday job %s for user %s sends at %s", job_id, user.id, send_at.isoformat())
    return Ok(key, f"job {job_id}")


def _is_stale(job: BirthdayJob, now: datetime) -> bool:
    return as_utc(job.send_birthday_at) < now - timedelta(days=STALE_JOB_DAYS)
