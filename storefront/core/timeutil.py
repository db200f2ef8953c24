"""
Time helpers

All timestamps are stored as timestamptz and compared in UTC. Naive
datetimes are taken to be UTC already.
"""
from datetime import date, datetime, timezone
from typing import Optional


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def as_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def utc_date(value: Optional[datetime]) -> Optional[date]:
    return as_utc(value).date() if value is not None else None


def is_same_day(value: Optional[datetime], now: Optional[datetime] = None) -> bool:
    """True when `value` falls on the same UTC calendar day as `now`"""
    if value is None:
        return False
    return utc_date(value) == utc_date(now or utcnow())
