"""
Business (civil) time helpers.

Storage holds absolute instants in UTC. Every business rule (what "today"
is, when a lesson starts) runs on Indian Standard Time, a fixed UTC+05:30
offset. Nothing here reads the host machine's local zone.

All functions return timezone-aware UTC datetimes unless noted.
"""

import re
from datetime import date, datetime, time, timedelta, timezone
from typing import Callable, Optional, Tuple

from careernav.exceptions import MalformedScheduleItem

BUSINESS_TZ = timezone(timedelta(hours=5, minutes=30), name="IST")
ONE_DAY = timedelta(days=1)

_WALL_CLOCK_RE = re.compile(r"^\s*(\d{1,2}):(\d{2})(?::\d{2})?\s*$")


def as_utc(instant: datetime) -> datetime:
    """Normalise a stored instant to aware UTC. Naive values are taken as UTC."""
    if instant.tzinfo is None:
        return instant.replace(tzinfo=timezone.utc)
    return instant.astimezone(timezone.utc)


def business_now(clock: Optional[Callable[[], datetime]] = None) -> datetime:
    """Current instant. ``clock`` lets callers pin time for reproducible runs."""
    if clock is not None:
        return as_utc(clock())
    return datetime.now(timezone.utc)


def to_business(instant: datetime) -> datetime:
    return as_utc(instant).astimezone(BUSINESS_TZ)


def business_day_start(instant: datetime) -> datetime:
    """Instant of 00:00:00 business time on the business date containing ``instant``."""
    local = to_business(instant)
    midnight = datetime.combine(local.date(), time.min, tzinfo=BUSINESS_TZ)
    return midnight.astimezone(timezone.utc)


def business_day_end(instant: datetime) -> datetime:
    """Last millisecond of the business date containing ``instant``."""
    return business_day_start(instant) + ONE_DAY - timedelta(milliseconds=1)


def civil_date(instant: datetime) -> date:
    return to_business(instant).date()


def civil_time(instant: datetime) -> Tuple[int, int]:
    local = to_business(instant)
    return local.hour, local.minute


def business_datetime(year: int, month: int, day: int, hour: int = 0, minute: int = 0) -> datetime:
    """Build the instant for a business-time wall clock reading."""
    local = datetime(year, month, day, hour, minute, tzinfo=BUSINESS_TZ)
    return local.astimezone(timezone.utc)


def parse_wall_clock(value: Optional[str]) -> Tuple[int, int]:
    """
    Parse an "HH:MM" string into (hour, minute).

    Raises:
        MalformedScheduleItem: value is missing or not a valid time of day
    """
    if value is None:
        raise MalformedScheduleItem("missing wall-clock time")
    match = _WALL_CLOCK_RE.match(str(value))
    if not match:
        raise MalformedScheduleItem(f"invalid wall-clock time {value!r}")
    hour, minute = int(match.group(1)), int(match.group(2))
    if hour > 23 or minute > 59:
        raise MalformedScheduleItem(f"wall-clock time out of range {value!r}")
    return hour, minute


def format_wall_clock(instant: datetime) -> str:
    hour, minute = civil_time(instant)
    return f"{hour:02d}:{minute:02d}"
