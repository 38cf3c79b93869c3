"""
Per-tick dispatch: send every pending birthday job whose owner is in their local send
hour right now.

Candidates are pending jobs with birthdays on UTC yesterday/today/tomorrow, since a
birthday in the owner's zone can fall on a neighbouring UTC day. A job is due when
local now and local send_birthday_at share year, month, day and hour, and that hour is
the send hour. Due jobs get up to max_attempts tries with exponential backoff; if all
fail the job stays pending and the next tick tries again.
"""
import logging
import time
from datetime import datetime
from typing import Callable

from app.core.constants import BACKOFF_BASE_SECONDS, MAX_SEND_ATTEMPTS, SEND_HOUR
from app.core.errors import DeliveryError, InvalidTimezoneError
from app.models.birthday_job import BirthdayJob
from app.services.birthday.base import JobStore, UserDirectory
from app.services.birthday.clock import as_utc, local_time, utc_now
from app.services.birthday.occurrence import birthday_message, next_send_utc, window_keys
from app.services.birthday.types import BatchResult, Failed, Ok, Skipped, UnitResult
from app.services.notifiers.base import Notifier

logger = logging.getLogger(__name__)


def is_due(job: BirthdayJob, now: datetime, send_hour: int = SEND_HOUR) -> bool:
    """True when `now`, in the job's zone, is inside the send hour of the job's occurrence."""
    if job.sent:
        return False
    local_now = local_time(now, job.timezone)
    if local_now.hour != send_hour:
        return False
    local_send = local_time(job.send_birthday_at, job.timezone)
    return (local_now.year, local_now.month, local_now.day, local_now.hour) == (
        local_send.year,
        local_send.month,
        local_send.day,
        local_send.hour,
    )


def dispatch_birthday_jobs(
    store: JobStore,
    directory: UserDirectory,
    notifier: Notifier,
    now: datetime | None = None,
    *,
    send_hour: int = SEND_HOUR,
    max_attempts: int = MAX_SEND_ATTEMPTS,
    backoff_base_seconds: float = BACKOFF_BASE_SECONDS,
    sleep: Callable[[float], None] = time.sleep,
) -> BatchResult:
    """
    One dispatch pass. Storage errors while listing candidates propagate (the whole tick
    fails); everything after that is per job.
    """
    now = as_utc(now or utc_now())
    result = BatchResult("dispatch")
    jobs = store.find_pending_by_birthday_month_day(window_keys(now.date()))
    for job in jobs:
        result.add(
            _dispatch_one(
                store,
                directory,
                notifier,
                job,
                now,
                send_hour=send_hour,
                max_attempts=max_attempts,
                backoff_base_seconds=backoff_base_seconds,
                sleep=sleep,
            )
        )
    if jobs:
        logger.info("Birthday dispatch at %s: %s", now.isoformat(), result.summary())
    return result


def _dispatch_one(
    store: JobStore,
    directory: UserDirectory,
    notifier: Notifier,
    job: BirthdayJob,
    now: datetime,
    *,
    send_hour: int,
    max_attempts: int,
    backoff_base_seconds: float,
    sleep: Callable[[float], None],
) -> UnitResult:
    key = f"job:{job.id}"
    try:
        due = is_due(job, now, send_hour)
    except InvalidTimezoneError as e:
        logger.warning("Skipping birthday job %s: %s", job.id, e)
        return Failed(key, str(e))
    if not due:
        logger.debug("Birthday job %s not in its local send window yet", job.id)
        return Skipped(key, "outside local send window")

    # Snapshot fields: read once, the ORM row is expired by every commit below
    job_id, user_id = job.id, job.user_id
    name, email = job.user_name, job.user_email
    birthday, zone = job.birthday, job.timezone
    message = birthday_message(name, email)

    for attempt in range(1, max_attempts + 1):
        try:
            if not notifier.send(name, email, message):
                raise DeliveryError(f"notifier reported failure for job {job_id}")
            if not store.transition_to_sent(job_id, now):
                logger.debug("Birthday job %s already sent by another dispatcher", job_id)
                return Skipped(key, "already sent")
        except Exception as e:
            logger.warning("Birthday job %s attempt %s/%s failed: %s", job_id, attempt, max_attempts, e)
            try:
                store.increment_attempts(job_id)
            except Exception as inc_err:
                logger.warning("Could not record attempt for birthday job %s: %s", job_id, inc_err)
            if attempt < max_attempts:
                sleep(backoff_base_seconds ** attempt)
            continue
        _record_next_birthday(directory, user_id, birthday, zone, now, send_hour)
        logger.info("Birthday message sent for job %s (user %s) on attempt %s", job_id, user_id, attempt)
        return Ok(key, f"sent on attempt {attempt}")

    logger.error("Birthday job %s still pending after %s attempts; will retry next tick", job_id, max_attempts)
    return Failed(key, f"delivery failed after {max_attempts} attempts")


def _record_next_birthday(directory: UserDirectory, user_id, birthday, zone, now, send_hour) -> None:
    # Job is already sent; a failure here must not trigger a resend
    try:
        next_at = next_send_utc(birthday, zone, now, send_hour=send_hour)
        directory.update_next_birthday(user_id, next_at)
    except Exception as e:
        logger.warning("Could not update next birthday for user %s: %s", user_id, e)
