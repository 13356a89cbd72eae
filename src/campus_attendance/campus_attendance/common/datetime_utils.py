from __future__ import annotations

from datetime import date, datetime
from zoneinfo import ZoneInfo

from ..core.constants import DEFAULT_LOCAL_TIMEZONE


def parse_iso_date(value: str) -> date:
    """Parse YYYY-MM-DD string into date."""
    return datetime.strptime(value, "%Y-%m-%d").date()


def now_local(tz_name: str = DEFAULT_LOCAL_TIMEZONE) -> datetime:
    """Current time in the courses' timezone.

    Note: Wrapped so tests can patch/mocked easier.
    """
    return datetime.now(ZoneInfo(tz_name))


def to_local(now: datetime, tz_name: str = DEFAULT_LOCAL_TIMEZONE) -> datetime:
    """Convert to the courses' timezone. Naive values are taken as already local."""
    if now.tzinfo is None:
        return now
    return now.astimezone(ZoneInfo(tz_name))
