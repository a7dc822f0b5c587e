"""Date helpers for day-aligned queries and lenient parsing."""

from __future__ import annotations

from datetime import date, datetime, timedelta
from typing import Any, Optional, Tuple


def start_of_day(value: datetime | date) -> datetime:
    return datetime(value.year, value.month, value.day)


def day_bounds(value: datetime | date) -> Tuple[datetime, datetime]:
    """[midnight, next midnight) of the given calendar day."""
    start = start_of_day(value)
    return start, start + timedelta(days=1)


def month_bounds(value: datetime | date) -> Tuple[datetime, datetime]:
    first = datetime(value.year, value.month, 1)
    if value.month == 12:
        return first, datetime(value.year + 1, 1, 1)
    return first, datetime(value.year, value.month + 1, 1)


def whole_days_until(deadline: datetime, now: datetime) -> int:
    """Whole days between now and deadline, truncated toward zero.

    A deadline 30 hours ahead is 1 day away; one 12 hours overdue is 0.
    """
    return int((deadline - now).total_seconds() / 86400)


def to_local_naive(value: datetime) -> datetime:
    """Aware datetimes become naive local time; naive ones are returned as is."""
    if value.tzinfo is None:
        return value
    return value.astimezone().replace(tzinfo=None)


def parse_datetime(value: Any, fallback: Optional[datetime] = None) -> datetime:
    """Accept datetime, date or ISO-8601 text, else the fallback (default now).

    The result is always naive local time.
    """
    if isinstance(value, datetime):
        return to_local_naive(value)
    if isinstance(value, date):
        return start_of_day(value)
    if isinstance(value, str):
        try:
            return to_local_naive(datetime.fromisoformat(value))
        except ValueError:
            pass
    return fallback if fallback is not None else datetime.now()


def to_iso(value: Optional[datetime]) -> Optional[str]:
    return value.isoformat() if value is not None else None
