"""Pomodoro focus sessions and preferences."""

from .charts import weekly_focus_hours
from .models import FocusSession, UserFocusPrefs
from .repository import FocusRepository
from .timer import FocusTimer, FocusTimerRegistry, PomodoroPhase

__all__ = [
    "FocusRepository",
    "FocusSession",
    "FocusTimer",
    "FocusTimerRegistry",
    "PomodoroPhase",
    "UserFocusPrefs",
    "weekly_focus_hours",
]
