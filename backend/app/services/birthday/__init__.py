"""
Birthday pipeline: daily job generation and per-tick dispatch.

- clock / occurrence: pure UTC <-> local time and next-occurrence math.
- job_store / user_directory: SQLAlchemy adapters for the JobStore / UserDirectory contracts.
- generator: ensure one pending job per user whose birthday is today (UTC).
- dispatcher: deliver due jobs (local 09:00) with bounded retry; leave failures pending.
"""
from app.services.birthday.dispatcher import dispatch_birthday_jobs, is_due
from app.services.birthday.generator import generate_birthday_jobs
from app.services.birthday.job_store import SqlJobStore
from app.services.birthday.occurrence import next_send_utc
from app.services.birthday.types import BatchResult, Failed, Ok, Skipped, TickKind, TickReport
from app.services.birthday.user_directory import SqlUserDirectory

__all__ = [
    "BatchResult",
    "Failed",
    "Ok",
    "Skipped",
    "SqlJobStore",
    "SqlUserDirectory",
    "TickKind",
    "TickReport",
    "dispatch_birthday_jobs",
    "generate_birthday_jobs",
    "is_due",
    "next_send_utc",
]
