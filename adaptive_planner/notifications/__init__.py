"""Notification preferences and daily reminders."""

from .models import NotificationPreference
from .planner import Reminder, plan_reminders
from .repository import NotificationPreferenceRepository
from .scheduler import ReminderScheduler

__all__ = [
    "NotificationPreference",
    "NotificationPreferenceRepository",
    "Reminder",
    "ReminderScheduler",
    "plan_reminders",
]
