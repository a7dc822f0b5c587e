"""Task management shared by the API server and the CLI."""

from .filters import TaskCompletionFilter, filter_tasks, sort_tasks
from .models import (
    DEFAULT_CATEGORIES,
    NO_CATEGORY,
    Subtask,
    Task,
    TaskEnergyLevel,
    TaskPriority,
)
from .prioritization import prioritize_tasks
from .repository import TaskRepository

__all__ = [
    "DEFAULT_CATEGORIES",
    "NO_CATEGORY",
    "Subtask",
    "Task",
    "TaskCompletionFilter",
    "TaskEnergyLevel",
    "TaskPriority",
    "TaskRepository",
    "filter_tasks",
    "prioritize_tasks",
    "sort_tasks",
]
