"""Aggregations behind the focus dashboard."""

from __future__ import annotations

from datetime import datetime, timedelta
from typing import Iterable, List, Optional, Tuple

from ..core.dates import start_of_day
from .models import FocusSession

WEEKDAY_LABELS = ["Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun"]


def week_bounds(now: datetime) -> Tuple[datetime, datetime]:
    """[Monday 00:00, next Monday 00:00) of the week containing ``now``."""
    monday = start_of_day(now) - timedelta(days=now.weekday())
    return monday, monday + timedelta(days=7)


def weekly_focus_hours(sessions: Iterable[FocusSession], now: Optional[datetime] = None) -> List[float]:
    """Focused hours per weekday of the current week, Monday first."""
    start, end = week_bounds(now or datetime.now())
    hours = [0.0] * 7
    for session in sessions:
        if start <= session.start < end:
            hours[session.start.weekday()] += session.duration_minutes / 60.0
    return hours


def minutes_for_day(sessions: Iterable[FocusSession]) -> int:
    return sum(s.duration_minutes for s in sessions)


def daily_progress(total_minutes: int, goal_minutes: int) -> float:
    if goal_minutes <= 0:
        return 0.0
    return min(total_minutes / goal_minutes, 1.0)
