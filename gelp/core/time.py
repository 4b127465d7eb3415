"""Timestamp helpers.

Every timestamp GELP writes is UTC. Some backends (SQLite) hand datetimes
back without tzinfo; ``as_utc`` restores it on the way out.
"""

from datetime import date, datetime, time, timedelta, timezone
from typing import Annotated, Optional, Tuple
from zoneinfo import ZoneInfo

from pydantic import AfterValidator


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def as_utc(value: Optional[datetime]) -> Optional[datetime]:
    if value is None:
        return None
    if value.tzinfo is None or value.utcoffset() is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def day_bounds_utc(tz_name: str, now: Optional[datetime] = None) -> Tuple[datetime, datetime]:
    """
    Return the [start, end) UTC instants of the calendar day containing ``now``
    as observed in ``tz_name``.
    """
    tz = ZoneInfo(tz_name)
    local_now = (now or utc_now()).astimezone(tz)
    local_day: date = local_now.date()

    start = datetime.combine(local_day, time.min, tzinfo=tz)
    end = datetime.combine(local_day + timedelta(days=1), time.min, tzinfo=tz)
    return start.astimezone(timezone.utc), end.astimezone(timezone.utc)


# pydantic field type for datetimes read back from the database
UtcDatetime = Annotated[datetime, AfterValidator(as_utc)]
