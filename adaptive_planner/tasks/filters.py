"""In-memory task list filtering and ordering used by the list views."""

from __future__ import annotations

from datetime import date, datetime, timedelta
from enum import Enum
from typing import Iterable, List, Optional

from ..core.dates import day_bounds
from .models import Task


class TaskCompletionFilter(str, Enum):
    ALL = "all"
    INCOMPLETE = "incomplete"
    COMPLETED = "completed"
    OVERDUE = "overdue"


def sort_tasks(tasks: Iterable[Task]) -> List[Task]:
    """Incomplete tasks first, then by deadline."""
    return sorted(tasks, key=lambda t: (t.is_completed, t.deadline))


def filter_tasks(
    tasks: Iterable[Task],
    category: Optional[str] = None,
    completion: TaskCompletionFilter = TaskCompletionFilter.ALL,
    now: Optional[datetime] = None,
) -> List[Task]:
    now = now or datetime.now()
    result = list(tasks)
    if category is not None:
        result = [t for t in result if t.category == category]
    if completion is TaskCompletionFilter.INCOMPLETE:
        result = [t for t in result if not t.is_completed]
    elif completion is TaskCompletionFilter.COMPLETED:
        result = [t for t in result if t.is_completed]
    elif completion is TaskCompletionFilter.OVERDUE:
        result = [t for t in result if t.is_overdue(now)]
    return sort_tasks(result)


def empty_list_message(category: Optional[str], completion: TaskCompletionFilter) -> str:
    if category is not None or completion is not TaskCompletionFilter.ALL:
        return "No tasks match your current filters."
    return "No tasks yet. Add your first task to get started."


def tasks_due_on(tasks: Iterable[Task], day: date, include_completed: bool = False) -> List[Task]:
    start, end = day_bounds(day)
    return [
        t
        for t in tasks
        if start <= t.deadline < end and (include_completed or not t.is_completed)
    ]


def tasks_due_within(tasks: Iterable[Task], days: int, now: Optional[datetime] = None) -> List[Task]:
    """Open tasks due between now and the end of the day ``days`` days ahead."""
    now = now or datetime.now()
    _, horizon = day_bounds(now + timedelta(days=days))
    return sort_tasks(t for t in tasks if not t.is_completed and now <= t.deadline < horizon)
