from datetime import date, datetime
from typing import Any, Optional, Tuple

import pytz

UTC = pytz.utc

SECONDS_PER_HOUR = 60 * 60
SECONDS_PER_DAY = 24 * SECONDS_PER_HOUR


def ensure_utc(dt: datetime) -> datetime:
    """Treat naive timestamps as UTC and convert aware ones to UTC."""
    if dt.tzinfo is None:
        return UTC.localize(dt)
    return dt.astimezone(UTC)


def parse_timestamp(value: Any) -> Optional[datetime]:
    if value is None:
        return None
    if isinstance(value, datetime):
        return ensure_utc(value)
    if isinstance(value, date):
        return UTC.localize(datetime(value.year, value.month, value.day))
    try:
        return ensure_utc(datetime.fromisoformat(str(value).strip().replace('Z', '+00:00')))
    except ValueError:
        return None


def isoformat(value: Any) -> Optional[str]:
    ts = parse_timestamp(value)
    return ts.isoformat() if ts else None


def utc_now() -> datetime:
    return datetime.now(UTC)


def runtime_between(first: Any, last: Any) -> Tuple[int, int]:
    """Whole days and remaining whole hours between two timestamps."""
    start = parse_timestamp(first)
    end = parse_timestamp(last)
    if start is None or end is None or end <= start:
        return 0, 0
    seconds = (end - start).total_seconds()
    days = int(seconds // SECONDS_PER_DAY)
    hours = int((seconds % SECONDS_PER_DAY) // SECONDS_PER_HOUR)
    return days, hours


def format_runtime(days: int, hours: int) -> str:
    return f"{days}d {hours}h"


__all__ = ["UTC", "ensure_utc", "parse_timestamp", "isoformat", "utc_now", "runtime_between", "format_runtime"]
