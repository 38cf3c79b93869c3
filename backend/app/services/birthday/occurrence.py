"""
Next birthday occurrence: the next UTC instant at which local time in the user's zone
reads SEND_HOUR:00 on their birth month/day.

Feb 29 birthdays are celebrated on Feb 28 in non-leap years.
"""
import calendar
from datetime import date, datetime, timedelta

from app.core.constants import DISPATCH_WINDOW_DAYS, SEND_HOUR
from app.core.errors import InvalidBirthdayError
from app.services.birthday.clock import UTC, as_utc, resolve_zone


def birthday_in_year(birth_date: date, year: int) -> date:
    """Civil date of the birthday in `year` (Feb 29 -> Feb 28 when `year` is not a leap year)."""
    if (birth_date.month, birth_date.day) == (2, 29) and not calendar.isleap(year):
        return date(year, 2, 28)
    return date(year, birth_date.month, birth_date.day)


def birthday_match_keys(day: date) -> list[tuple[int, int]]:
    """(month, day) birthday keys celebrated on `day`."""
    keys = [(day.month, day.day)]
    if (day.month, day.day) == (2, 28) and not calendar.isleap(day.year):
        keys.append((2, 29))
    return keys


def window_keys(today: date, days: int = DISPATCH_WINDOW_DAYS) -> list[tuple[int, int]]:
    """Birthday keys for today +/- `days` (UTC calendar days), deduplicated, in day order."""
    keys: list[tuple[int, int]] = []
    for offset in range(-days, days + 1):
        for key in birthday_match_keys(today + timedelta(days=offset)):
            if key not in keys:
                keys.append(key)
    return keys


def _send_instant(birth_date: date, zone, year: int, send_hour: int) -> datetime:
    day = birthday_in_year(birth_date, year)
    local = datetime(day.year, day.month, day.day, send_hour, 0, 0, tzinfo=zone)
    return local.astimezone(UTC)


def next_send_utc(
    birth_date: date,
    zone: str,
    reference_now_utc: datetime,
    send_hour: int = SEND_HOUR,
) -> datetime:
    """
    Next UTC instant strictly after `reference_now_utc` at which `zone` local time is
    send_hour:00 on the birthday. Starts from the current local year and rolls one
    year forward when this year's occurrence is at or before the reference.
    Raises InvalidTimezoneError / InvalidBirthdayError for unusable input.
    """
    if not isinstance(birth_date, date):
        raise InvalidBirthdayError(f"birthday {birth_date!r} is not a date")
    tz = resolve_zone(zone)
    now = as_utc(reference_now_utc)
    year = now.astimezone(tz).year
    candidate = _send_instant(birth_date, tz, year, send_hour)
    if candidate <= now:
        candidate = _send_instant(birth_date, tz, year + 1, send_hour)
    return candidate


def birthday_message(name: str, email: str) -> str:
    return f"Happy Birthday, {name}! ({email})"
