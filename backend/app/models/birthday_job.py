"""One birthday occurrence to deliver. Created by the daily generator, flipped to sent by the dispatcher.

User fields are a snapshot taken at creation so delivery does not depend on later user edits.
At most one row per user_id has sent = false.
"""
from sqlalchemy import Boolean, Column, Date, DateTime, Index, Integer, String, false
from sqlalchemy.sql import func

from app.db.base import Base


class BirthdayJob(Base):
    __tablename__ = "birthday_jobs"
    __table_args__ = (Index("ix_birthday_jobs_user_sent", "user_id", "sent"),)

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(Integer, nullable=False, index=True)
    user_name = Column(String(255), nullable=False)
    user_email = Column(String(320), nullable=False)
    birthday = Column(Date, nullable=False)
    timezone = Column(String(64), nullable=False)
    date = Column(Date, nullable=False)  # UTC day the job was generated
    send_birthday_at = Column(DateTime(timezone=True), nullable=False)  # 09:00 local as UTC
    sent = Column(Boolean, nullable=False, default=False, server_default=false())
    sent_at = Column(DateTime(timezone=True), nullable=True)
    attempts = Column(Integer, nullable=False, default=0, server_default="0")
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)

    def serialize(self) -> dict:
        return {
            "id": self.id,
            "user_id": self.user_id,
            "user_name": self.user_name,
            "user_email": self.user_email,
            "birthday": self.birthday.isoformat() if self.birthday else None,
            "timezone": self.timezone,
            "date": self.date.isoformat() if self.date else None,
            "send_birthday_at": self.send_birthday_at.isoformat() if self.send_birthday_at else None,
            "sent": bool(self.sent),
            "sent_at": self.sent_at.isoformat() if self.sent_at else None,
            "attempts": self.attempts,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }
