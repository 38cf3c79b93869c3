"""
SQLAlchemy-backed JobStore. Each write commits immediately so a tick abandoned mid-pass
leaves only whole single-job transitions behind.
"""
import logging
from datetime import datetime
from typing import Sequence

from sqlalchemy import and_, extract, or_
from sqlalchemy.orm import Session

from app.models.birthday_job import BirthdayJob

logger = logging.getLogger(__name__)


class SqlJobStore:
    def __init__(self, db: Session):
        self.db = db

    def _commit(self) -> None:
        try:
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise

    def get(self, job_id: int) -> BirthdayJob | None:
        return self.db.query(BirthdayJob).filter(BirthdayJob.id == job_id).first()

    def find_pending_by_user(self, user_id: int) -> BirthdayJob | None:
        return (
            self.db.query(BirthdayJob)
            .filter(BirthdayJob.user_id == user_id, BirthdayJob.sent.is_(False))
            .order_by(BirthdayJob.id.desc())
            .first()
        )

    def insert(self, job: BirthdayJob) -> int:
        self.db.add(job)
        self._commit()
        self.db.refresh(job)
        return job.id

    def find_pending_by_birthday_month_day(self, candidates: Sequence[tuple[int, int]]) -> list[BirthdayJob]:
        if not candidates:
            return []
        matches = [
            and_(
                extract("month", BirthdayJob.birthday) == month,
                extract("day", BirthdayJob.birthday) == day,
            )
            for month, day in candidates
        ]
        return (
            self.db.query(BirthdayJob)
            .filter(BirthdayJob.sent.is_(False), or_(*matches))
            .order_by(BirthdayJob.created_at.desc(), BirthdayJob.id.desc())
            .all()
        )

    def transition_to_sent(self, job_id: int, sent_at: datetime) -> bool:
        # Single conditional UPDATE: safe when more than one dispatcher runs
        updated = (
            self.db.query(BirthdayJob)
            .filter(BirthdayJob.id == job_id, BirthdayJob.sent.is_(False))
            .update(
                {
                    BirthdayJob.sent: True,
                    BirthdayJob.sent_at: sent_at,
                    BirthdayJob.attempts: BirthdayJob.attempts + 1,
                },
                synchronize_session=False,
            )
        )
        self._commit()
        if not updated:
            logger.debug("Birthday job %s was already sent; transition ignored", job_id)
        return updated == 1

    def increment_attempts(self, job_id: int) -> None:
        self.db.query(BirthdayJob).filter(BirthdayJob.id == job_id).update(
            {BirthdayJob.attempts: BirthdayJob.attempts + 1},
            synchronize_session=False,
        )
        self._commit()

    def list_recent(self, limit: int = 100, pending_only: bool = False) -> list[BirthdayJob]:
        q = self.db.query(BirthdayJob)
        if pending_only:
            q = q.filter(BirthdayJob.sent.is_(False))
        return q.order_by(BirthdayJob.created_at.desc(), BirthdayJob.id.desc()).limit(limit).all()

    def reschedule(self, job_id: int, values: dict) -> bool:
        """Overwrite the occurrence fields of a still-pending job. False if it was sent meanwhile."""
        updated = (
            self.db.query(BirthdayJob)
            .filter(BirthdayJob.id == job_id, BirthdayJob.sent.is_(False))
            .update({getattr(BirthdayJob, k): v for k, v in values.items()}, synchronize_session=False)
        )
        self._commit()
        return updated == 1
