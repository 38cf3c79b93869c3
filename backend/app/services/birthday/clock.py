"""
UTC <-> local civil time using the IANA tz database (zoneinfo; tzdata ships the data
where the OS has none). Every birthday computation goes through here.
"""
from datetime import datetime, timezone
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from app.core.errors import InvalidTimezoneError

UTC = timezone.utc


def utc_now() -> datetime:
    return datetime.now(UTC)


def as_utc(instant: datetime) -> datetime:
    """Aware UTC datetime. Naive values (SQLite drops tzinfo) are taken to be UTC."""
    if instant.tzinfo is None:
        return instant.replace(tzinfo=UTC)
    return instant.astimezone(UTC)


def start_of_utc_day(instant: datetime) -> datetime:
    return as_utc(instant).replace(hour=0, minute=0, second=0, microsecond=0)


def resolve_zone(zone: str) -> ZoneInfo:
    """ZoneInfo for an IANA name. Raises InvalidTimezoneError instead of zoneinfo's mix of errors."""
    if not isinstance(zone, str) or not zone.strip():
        raise InvalidTimezoneError(zone)
    try:
        return ZoneInfo(zone.strip())
    except (ZoneInfoNotFoundError, ValueError) as e:
        raise InvalidTimezoneError(zone) from e


def is_valid_timezone(zone: str) -> bool:
    try:
        resolve_zone(zone)
    except InvalidTimezoneError:
        return False
    return True


def local_time(instant_utc: datetime, zone: str) -> datetime:
    """Civil date/time in `zone` for a UTC instant (DST and historical offsets applied)."""
    return as_utc(instant_utc).astimezone(resolve_zone(zone))
