from datetime import date

import pytest

from app.core.errors import InvalidBirthdayError, InvalidTimezoneError
from app.services.birthday.clock import local_time
from app.services.birthday.occurrence import (
    birthday_in_year,
    birthday_match_keys,
    birthday_message,
    next_send_utc,
    window_keys,
)
from conftest import utc

ZONES = [
    "UTC",
    "Asia/Jakarta",
    "America/Los_Angeles",
    "Pacific/Kiritimati",
    "Pacific/Pago_Pago",
    "Asia/Kolkata",
    "Asia/Kathmandu",
    "America/St_Johns",
    "Europe/London",
    "Australia/Sydney",
]
BIRTH_DATES = [date(1990, 12, 25), date(2000, 1, 1), date(1985, 12, 31), date(1979, 7, 4), date(1995, 3, 10)]
NOWS = [utc(2024, 12, 25, 0, 0), utc(2024, 12, 31, 16, 0), utc(2025, 7, 4, 9, 0), utc(2025, 3, 10, 23, 59)]


@pytest.mark.parametrize("zone", ZONES)
@pytest.mark.parametrize("birth_date", BIRTH_DATES)
@pytest.mark.parametrize("now", NOWS)
def test_next_send_reads_nine_local_on_birthday(zone, birth_date, now):
    send_at = next_send_utc(birth_date, zone, now)
    local = local_time(send_at, zone)
    assert (local.month, local.day, local.hour, local.minute) == (birth_date.month, birth_date.day, 9, 0)
    assert send_at > now


def test_jakarta_this_year():
    assert next_send_utc(date(1990, 12, 25), "Asia/Jakarta", utc(2024, 12, 25, 0, 0)) == utc(2024, 12, 25, 2, 0)


def test_rolls_to_next_year_once_passed():
    assert next_send_utc(date(1990, 12, 25), "Asia/Jakarta", utc(2024, 12, 25, 2, 5)) == utc(2025, 12, 25, 2, 0)


def test_exactly_at_send_time_rolls_over():
    assert next_send_utc(date(1990, 12, 25), "Asia/Jakarta", utc(2024, 12, 25, 2, 0)) == utc(2025, 12, 25, 2, 0)


def test_los_angeles_new_year():
    # Still 2024-12-31 16:00 in LA; Jan 1 2024 has passed locally, so Jan 1 2025 09:00 PST
    assert next_send_utc(date(2000, 1, 1), "America/Los_Angeles", utc(2025, 1, 1, 0, 0)) == utc(2025, 1, 1, 17, 0)


def test_far_east_birthday_falls_on_previous_utc_day():
    assert next_send_utc(date(1990, 12, 25), "Pacific/Kiritimati", utc(2024, 12, 24, 0, 0)) == utc(2024, 12, 24, 19, 0)


def test_custom_send_hour():
    assert next_send_utc(date(1990, 12, 25), "UTC", utc(2024, 12, 1), send_hour=18) == utc(2024, 12, 25, 18, 0)


def test_feb_29_clamped_in_non_leap_year():
    assert next_send_utc(date(1992, 2, 29), "UTC", utc(2025, 1, 1)) == utc(2025, 2, 28, 9, 0)


def test_feb_29_kept_in_leap_year():
    assert next_send_utc(date(1992, 2, 29), "UTC", utc(2027, 6, 1)) == utc(2028, 2, 29, 9, 0)


def test_birthday_in_year():
    assert birthday_in_year(date(1992, 2, 29), 2023) == date(2023, 2, 28)
    assert birthday_in_year(date(1992, 2, 29), 2024) == date(2024, 2, 29)
    assert birthday_in_year(date(1990, 12, 25), 2024) == date(2024, 12, 25)


def test_birthday_match_keys():
    assert birthday_match_keys(date(2025, 2, 28)) == [(2, 28), (2, 29)]
    assert birthday_match_keys(date(2024, 2, 28)) == [(2, 28)]
    assert birthday_match_keys(date(2024, 2, 29)) == [(2, 29)]


def test_window_keys_span_year_boundary():
    assert window_keys(date(2025, 1, 1)) == [(12, 31), (1, 1), (1, 2)]


def test_window_keys_include_feb_29_in_non_leap_year():
    assert window_keys(date(2025, 3, 1)) == [(2, 28), (2, 29), (3, 1), (3, 2)]


def test_invalid_input():
    with pytest.raises(InvalidTimezoneError):
        next_send_utc(date(1990, 12, 25), "Nowhere/Special", utc(2024, 1, 1))
    with pytest.raises(InvalidBirthdayError):
        next_send_utc(None, "UTC", utc(2024, 1, 1))


def test_birthday_message():
    assert birthday_message("Ana", "ana@example.com") == "Happy Birthday, Ana! (ana@example.com)"
