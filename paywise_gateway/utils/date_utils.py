"""Date manipulation utilities"""

from datetime import date, datetime, timedelta, timezone


def utcnow() -> datetime:
    """Timezone-aware current UTC time"""
    return datetime.now(timezone.utc)


def days_from_now(days: int, now: datetime | None = None) -> datetime:
    """Point in time `days` days after now (UTC)"""
    return (now or utcnow()) + timedelta(days=days)


def as_date(value: date | datetime) -> date:
    """Calendar date of a date or datetime"""
    return value.date() if isinstance(value, datetime) else value
