"""Productivity patterns and completion statistics."""

from .productivity import (
    CompletedTask,
    ProductivityResult,
    TimeOfDayRange,
    analyze_productivity,
    completed_tasks_from,
    completion_stats,
)

__all__ = [
    "CompletedTask",
    "ProductivityResult",
    "TimeOfDayRange",
    "analyze_productivity",
    "completed_tasks_from",
    "completion_stats",
]
