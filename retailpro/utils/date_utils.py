"""Date manipulation utilities"""

from datetime import datetime, timedelta, timezone


def utc_now() -> datetime:
    """Current time as a timezone-aware UTC datetime"""
    return datetime.now(timezone.utc)


def ensure_utc(value: datetime) -> datetime:
    """Treat naive timestamps (e.g. a bare date from a form) as UTC"""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def add_days(from_time: datetime, days: int) -> datetime:
    """Shift a timestamp by whole days (calendar days, no business-day logic)"""
    return from_time + timedelta(days=days)
