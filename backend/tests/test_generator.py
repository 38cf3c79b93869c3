from datetime import date

from app.models.birthday_job import BirthdayJob
from app.services.birthday.clock import as_utc
from app.services.birthday.generator import generate_birthday_jobs
from app.services.birthday.types import Failed, Ok, Skipped
from conftest import utc


def _jobs(db):
    return db.query(BirthdayJob).order_by(BirthdayJob.id).all()


def test_creates_job_for_todays_birthday(db, store, directory, add_user):
    user = add_user("Ana", birthday=date(1990, 12, 25), timezone="Asia/Jakarta")
    add_user("Budi", birthday=date(1990, 6, 1))

    result = generate_birthday_jobs(store, directory, utc(2024, 12, 25, 0, 0))

    assert [type(r) for r in result.results] == [Ok]
    [job] = _jobs(db)
    assert job.user_id == user.id
    assert job.user_name == "Ana"
    assert job.user_email == "ana@example.com"
    assert job.birthday == date(1990, 12, 25)
    assert job.timezone == "Asia/Jakarta"
    assert job.date == date(2024, 12, 25)
    assert as_utc(job.send_birthday_at) == utc(2024, 12, 25, 2, 0)
    assert job.sent is False
    assert job.sent_at is None
    assert job.attempts == 0


def test_rerun_same_day_is_idempotent(db, store, directory, add_user):
    add_user()
    now = utc(2024, 12, 25, 0, 0)

    generate_birthday_jobs(store, directory, now)
    again = generate_birthday_jobs(store, directory, now)

    assert len(_jobs(db)) == 1
    assert [type(r) for r in again.results] == [Skipped]
    assert again.skipped[0].reason == "pending job exists"


def test_bad_timezone_is_skipped_without_aborting(db, store, directory, add_user):
    bad = add_user("Broken", timezone="Mars/Olympus_Mons")
    good = add_user("Ana")

    result = generate_birthday_jobs(store, directory, utc(2024, 12, 25, 0, 0))

    assert [r.key for r in result.failed] == [f"user:{bad.id}"]
    assert [r.key for r in result.ok] == [f"user:{good.id}"]
    assert [j.user_id for j in _jobs(db)] == [good.id]


def test_directory_read_failure_is_per_key(db, store, directory, add_user):
    add_user("Ana", birthday=date(1990, 12, 26))

    class FlakyDirectory:
        def find_by_birthday_month_day(self, month, day):
            if (month, day) == (12, 25):
                raise RuntimeError("directory timeout")
            return directory.find_by_birthday_month_day(month, day)

        def update_next_birthday(self, user_id, instant_utc):
            directory.update_next_birthday(user_id, instant_utc)

    result = generate_birthday_jobs(store, FlakyDirectory(), utc(2024, 12, 25, 0, 0), lookahead_days=1)

    assert [(r.key, r.reason) for r in result.failed] == [("birthday:12-25", "directory timeout")]
    assert len(result.ok) == 1


def test_los_angeles_job_created_on_utc_new_year(db, store, directory, add_user):
    add_user("Lia", birthday=date(2000, 1, 1), timezone="America/Los_Angeles")

    generate_birthday_jobs(store, directory, utc(2024, 12, 31, 0, 0))
    assert _jobs(db) == []

    generate_birthday_jobs(store, directory, utc(2025, 1, 1, 0, 0))
    [job] = _jobs(db)
    assert job.date == date(2025, 1, 1)
    assert as_utc(job.send_birthday_at) == utc(2025, 1, 1, 17, 0)


def test_lookahead_covers_zones_ahead_of_utc(db, store, directory, add_user):
    add_user("Kai", birthday=date(1990, 12, 25), timezone="Pacific/Kiritimati")

    generate_birthday_jobs(store, directory, utc(2024, 12, 24, 0, 0), lookahead_days=1)

    [job] = _jobs(db)
    assert job.date == date(2024, 12, 24)
    assert as_utc(job.send_birthday_at) == utc(2024, 12, 24, 19, 0)


def test_without_lookahead_far_east_rolls_to_next_year(db, store, directory, add_user):
    add_user("Kai", birthday=date(1990, 12, 25), timezone="Pacific/Kiritimati")

    generate_birthday_jobs(store, directory, utc(2024, 12, 25, 0, 0))

    [job] = _jobs(db)
    assert as_utc(job.send_birthday_at) == utc(2025, 12, 24, 19, 0)


def test_feb_29_users_generated_on_feb_28_of_non_leap_year(db, store, directory, add_user):
    add_user("Leap", birthday=date(1992, 2, 29), timezone="UTC")

    result = generate_birthday_jobs(store, directory, utc(2025, 2, 28, 0, 0))

    assert len(result.ok) == 1
    [job] = _jobs(db)
    assert as_utc(job.send_birthday_at) == utc(2025, 2, 28, 9, 0)


def test_job_keeps_snapshot_after_user_changes(db, store, directory, add_user):
    user = add_user("Ana")
    generate_birthday_jobs(store, directory, utc(2024, 12, 25, 0, 0))

    user.name = "Ana Maria"
    user.timezone = "Europe/London"
    db.commit()

    [job] = _jobs(db)
    assert job.user_name == "Ana"
    assert job.timezone == "Asia/Jakarta"


def test_summary_counts(store, directory, add_user):
    add_user("Ana")
    add_user("Broken", timezone="nope")
    result = generate_birthday_jobs(store, directory, utc(2024, 12, 25, 0, 0))
    assert result.summary() == "generate: ok=1 skipped=0 failed=1"
    assert isinstance(result.failed[0], Failed)


def test_future_pending_job_is_not_rescheduled(db, store, directory, add_user, add_job):
    user = add_user("Ana", birthday=date(1990, 12, 25), timezone="Asia/Jakarta")
    add_job(user_id=user.id, send_at=utc(2025, 12, 25, 2, 0))

    result = generate_birthday_jobs(store, directory, utc(2024, 12, 25, 0, 0))

    assert [type(r) for r in result.results] == [Skipped]
    [job] = _jobs(db)
    assert as_utc(job.send_birthday_at) == utc(2025, 12, 25, 2, 0)


def test_stale_pending_job_moves_to_upcoming_occurrence(db, store, directory, add_user, add_job):
    user = add_user("Ana", birthday=date(1990, 12, 25), timezone="Asia/Jakarta", email="ana.new@example.com")
    job_id = add_job(user_id=user.id, send_at=utc(2023, 12, 25, 2, 0), on=date(2023, 12, 25))

    result = generate_birthday_jobs(store, directory, utc(2024, 12, 25, 0, 0))

    assert [type(r) for r in result.results] == [Ok]
    db.expire_all()
    [job] = _jobs(db)
    assert job.id == job_id
    assert job.date == date(2024, 12, 25)
    assert as_utc(job.send_birthday_at) == utc(2024, 12, 25, 2, 0)
    assert job.user_email == "ana.new@example.com"
    assert job.attempts == 0
