"""User directory record. Account CRUD lives elsewhere; the birthday pipeline only reads it
and keeps next_birthday_at_utc current after each delivery."""
from sqlalchemy import Column, Date, DateTime, Integer, String
from sqlalchemy.sql import func

from app.db.base import Base


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(255), nullable=False)
    email = Column(String(320), nullable=False, unique=True, index=True)
    birthday = Column(Date, nullable=False)  # month/day matter; year only for age
    timezone = Column(String(64), nullable=False)  # IANA name, e.g. Asia/Jakarta
    next_birthday_at_utc = Column(DateTime(timezone=True), nullable=True)  # next 09:00 local send instant
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
