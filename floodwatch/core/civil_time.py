"""Civil (deployment-local) time helpers."""

from datetime import date, datetime, time, timedelta
from typing import Optional, Tuple
from zoneinfo import ZoneInfo

from floodwatch.core.config import settings


def get_civil_timezone(time_zone: Optional[str] = None) -> ZoneInfo:
    """Return the configured deployment time zone."""
    return ZoneInfo(time_zone) if time_zone else settings.tzinfo


def civil_now(time_zone: Optional[str] = None) -> datetime:
    """Return the current time in the deployment time zone."""
    return datetime.now(get_civil_timezone(time_zone))


def civil_today(time_zone: Optional[str] = None) -> date:
    return civil_now(time_zone).date()


def to_civil(value: datetime, time_zone: Optional[str] = None) -> datetime:
    """Convert a datetime to the deployment time zone.

    Naive values are taken to already be civil wall-clock time.
    """
    tz = get_civil_timezone(time_zone)
    if value.tzinfo is None:
        return value.replace(tzinfo=tz)
    return value.astimezone(tz)


def day_window(day: date, time_zone: Optional[str] = None) -> Tuple[datetime, datetime]:
    """
    Half-open window [day 00:00, day+1 00:00) in civil time.

    Built from local midnights, so a DST transition day is 23 or 25 hours long.
    """
    tz = get_civil_timezone(time_zone)
    start = datetime.combine(day, time.min, tzinfo=tz)
    end = datetime.combine(day + timedelta(days=1), time.min, tzinfo=tz)
    return start, end
