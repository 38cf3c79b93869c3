"""SQLAlchemy-backed UserDirectory over the users table."""
from datetime import datetime

from sqlalchemy import extract
from sqlalchemy.orm import Session

from app.models.user import User


class SqlUserDirectory:
    def __init__(self, db: Session):
        self.db = db

    def find_by_birthday_month_day(self, month: int, day: int) -> list[User]:
        """Users born on month/day of any year, oldest account first."""
        return (
            self.db.query(User)
            .filter(
                extract("month", User.birthday) == month,
                extract("day", User.birthday) == day,
            )
            .order_by(User.id.asc())
            .all()
        )

    def update_next_birthday(self, user_id: int, instant_utc: datetime) -> None:
        try:
            self.db.query(User).filter(User.id == user_id).update(
                {User.next_birthday_at_utc: instant_utc},
                synchronize_session=False,
            )
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise
