from __future__ import annotations
from datetime import datetime, timezone, timedelta
from typing import Optional
from zoneinfo import ZoneInfo


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def as_utc(dt: Optional[datetime]) -> Optional[datetime]:
    """Return dt as tz-aware UTC; naive values (SQLite round-trips) are taken to be UTC already."""
    if dt is None:
        return None
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def local_now(tz_name: str = '') -> datetime:
    """Current time in the configured zone, or the host's local zone when tz_name is empty."""
    if tz_name:
        return datetime.now(ZoneInfo(tz_name))
    return datetime.now().astimezone()


def start_of_day(now: datetime) -> datetime:
    return now.replace(hour=0, minute=0, second=0, microsecond=0)


def day_bounds(now: datetime, days_back: int):
    """(start, end) of the local day `days_back` days before now's day."""
    start = start_of_day(now) - timedelta(days=days_back)
    return start, start + timedelta(days=1)


def iso(dt: Optional[datetime]) -> Optional[str]:
    if dt is None:
        return None
    return as_utc(dt).isoformat().replace('+00:00', 'Z')
