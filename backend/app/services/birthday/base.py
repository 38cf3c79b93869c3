"""Storage contracts the birthday pipeline needs. SqlJobStore / SqlUserDirectory implement them;
tests and other backends can supply their own."""
from datetime import datetime
from typing import Protocol, Sequence

from app.models.birthday_job import BirthdayJob
from app.models.user import User


class JobStore(Protocol):
    """Persisted birthday jobs. Every write is committed before the call returns."""

    def find_pending_by_user(self, user_id: int) -> BirthdayJob | None:
        ...

    def insert(self, job: BirthdayJob) -> int:
        ...

    def find_pending_by_birthday_month_day(self, candidates: Sequence[tuple[int, int]]) -> list[BirthdayJob]:
        """Pending jobs whose snapshot birthday (month, day) is in `candidates`, newest first."""
        ...

    def transition_to_sent(self, job_id: int, sent_at: datetime) -> bool:
        """Mark sent (and count the attempt) only if still pending. False if it was already sent."""
        ...

    def increment_attempts(self, job_id: int) -> None:
        ...

    def reschedule(self, job_id: int, values: dict) -> bool:
        """Overwrite occurrence fields of a job only if still pending."""
        ...


class UserDirectory(Protocol):
    """Read access to users plus next-birthday bookkeeping."""

    def find_by_birthday_month_day(self, month: int, day: int) -> list[User]:
        ...

    def update_next_birthday(self, user_id: int, instant_utc: datetime) -> None:
        ...
