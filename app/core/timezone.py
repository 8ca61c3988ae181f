"""
Worker local calendar helpers

Everything here takes "now" explicitly; nothing reads the wall clock.
"""
from datetime import date, datetime, time, timedelta, timezone
from typing import Tuple
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from atams.exceptions import BadRequestException


def get_zone(tz_name: str) -> ZoneInfo:
    """Resolve an IANA timezone name, rejecting unknown names"""
    try:
        return ZoneInfo(tz_name)
    except (ZoneInfoNotFoundError, ValueError):
        raise BadRequestException(f"Unknown timezone: {tz_name}")


def local_today(now: datetime, tz_name: str) -> date:
    """Calendar date of `now` as seen by a worker in `tz_name`"""
    if now.tzinfo is None:
        now = now.replace(tzinfo=timezone.utc)
    return now.astimezone(get_zone(tz_name)).date()


def day_window(day: date, tz_name: str) -> Tuple[datetime, datetime]:
    """
    UTC bounds [start, end) of a local calendar day

    The end is the next local midnight, so DST days span 23 or 25 hours.
    """
    zone = get_zone(tz_name)
    start = datetime.combine(day, time.min, tzinfo=zone)
    end = datetime.combine(day + timedelta(days=1), time.min, tzinfo=zone)
    return start.astimezone(timezone.utc), end.astimezone(timezone.utc)


def range_window(date_from: date, date_to: date, tz_name: str) -> Tuple[datetime, datetime]:
    """UTC bounds [start, end) covering local days date_from..date_to inclusive"""
    start, _ = day_window(date_from, tz_name)
    _, end = day_window(date_to, tz_name)
    return start, end
