from __future__ import annotations

from datetime import date, datetime, timezone
from zoneinfo import ZoneInfo


def parse_iso_date(value: str) -> date:
    """Parse YYYY-MM-DD string into date."""
    return datetime.strptime(value, "%Y-%m-%d").date()


def utc_now() -> datetime:
    """Current time as an aware UTC datetime.

    Note: Wrapped so tests can patch/mock easier.
    """
    return datetime.now(timezone.utc)


def as_utc(value: datetime) -> datetime:
    """Treat naive datetimes (as returned by MySQL DATETIME) as UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def calendar_day(value: datetime, tz: str) -> date:
    """Calendar date of ``value`` in the reference timezone ``tz``."""
    return as_utc(value).astimezone(ZoneInfo(tz)).date()


def to_db_datetime(value: datetime) -> datetime:
    """Naive UTC datetime for DATETIME columns."""
    return as_utc(value).replace(tzinfo=None)


def isoformat_utc(value: datetime) -> str:
    return as_utc(value).isoformat().replace("+00:00", "Z")
