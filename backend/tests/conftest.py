"""
Pytest configuration and shared fixtures for the birthday backend tests.

Each test gets a fresh in-memory SQLite database; tests never touch DATABASE_URL's server.
"""
import os

# Before any app import: app.db.session builds its engine from settings at import time
os.environ["DATABASE_URL"] = "sqlite://"
os.environ.setdefault("BIRTHDAY_NOTIFIER", "log")

from datetime import date, datetime, timezone

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

import app.models  # noqa: F401  (register tables on Base.metadata)
from app.db.base import Base
from app.models.birthday_job import BirthdayJob
from app.models.user import User
from app.services.birthday.job_store import SqlJobStore
from app.services.birthday.user_directory import SqlUserDirectory


def utc(*args) -> datetime:
    return datetime(*args, tzinfo=timezone.utc)


class FakeNotifier:
    """Notifier double: plays back outcomes (True / False / exception), then succeeds."""

    notifier_id = "fake"

    def __init__(self, outcomes=None):
        self.outcomes = list(outcomes or [])
        self.calls = []

    def send(self, name, email, message):
        self.calls.append((name, email, message))
        outcome = self.outcomes.pop(0) if self.outcomes else True
        if isinstance(outcome, Exception):
            raise outcome
        return outcome


@pytest.fixture
def engine():
    eng = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(eng)
    yield eng
    eng.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    yield session
    session.close()


@pytest.fixture
def store(db):
    return SqlJobStore(db)


@pytest.fixture
def directory(db):
    return SqlUserDirectory(db)


@pytest.fixture
def add_user(db):
    def _add(name="Ana", birthday=date(1990, 12, 25), timezone="Asia/Jakarta", email=None):
        user = User(
            name=name,
            email=email or f"{name.lower().replace(' ', '.')}@example.com",
            birthday=birthday,
            timezone=timezone,
        )
        db.add(user)
        db.commit()
        db.refresh(user)
        return user

    return _add


@pytest.fixture
def add_job(store):
    """Insert a pending job directly (bypassing the generator)."""

    def _add(user_id=1, birthday=date(1990, 12, 25), timezone="Asia/Jakarta", send_at=None, name="Ana", on=None):
        job = BirthdayJob(
            user_id=user_id,
            user_name=name,
            user_email=f"{name.lower()}@example.com",
            birthday=birthday,
            timezone=timezone,
            date=on or date(2024, 12, 25),
            send_birthday_at=send_at or utc(2024, 12, 25, 2, 0),
            sent=False,
            attempts=0,
        )
        store.insert(job)
        return job.id

    return _add


@pytest.fixture
def notifier():
    return FakeNotifier()


@pytest.fixture
def sleeps():
    """Collects backoff delays instead of sleeping."""
    return []
