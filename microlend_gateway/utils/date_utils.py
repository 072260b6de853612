"""Date manipulation utilities"""

from datetime import date, datetime, timedelta, timezone


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def as_utc(value: datetime) -> datetime:
    """Treat naive datetimes (e.g. from SQLite) as UTC"""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def days_between(start: datetime, end: datetime) -> float:
    """Fractional days from start to end"""
    return (as_utc(end) - as_utc(start)).total_seconds() / 86400


def add_days(from_date: date, days: int) -> date:
    return from_date + timedelta(days=days)
