"""Daily reminder planning from notification preferences."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import List, Optional

from croniter import croniter

from .models import NotificationPreference

JOURNAL_REMINDER_ID = 1
MOOD_CHECK_REMINDER_ID = 2
TASKS_DUE_TODAY_REMINDER_ID = 3
TASKS_DUE_IN_REMINDER_ID = 4
TEST_NOTIFICATION_ID = 999

TASKS_DUE_IN_HOUR = 10
TASKS_DUE_IN_MINUTE = 0


@dataclass(slots=True)
class Reminder:
    id: int
    kind: str
    title: str
    body: str
    hour: int
    minute: int
    next_fire: datetime

    @property
    def cron(self) -> str:
        return daily_cron(self.hour, self.minute)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "kind": self.kind,
            "title": self.title,
            "body": self.body,
            "hour": self.hour,
            "minute": self.minute,
            "next_fire": self.next_fire.isoformat(),
        }


def daily_cron(hour: int, minute: int) -> str:
    return f"{minute} {hour} * * *"


def next_occurrence(hour: int, minute: int, now: datetime) -> datetime:
    """First hour:minute at or after ``now``."""
    # croniter returns strictly-later times, so start one second early
    return croniter(daily_cron(hour, minute), now - timedelta(seconds=1)).get_next(datetime)


def following_occurrence(reminder: Reminder) -> datetime:
    return croniter(reminder.cron, reminder.next_fire).get_next(datetime)


def plan_reminders(prefs: NotificationPreference, now: Optional[datetime] = None) -> List[Reminder]:
    """Daily repeating reminders for every enabled category, ordered by id."""
    now = now or datetime.now()
    if not prefs.enable_notifications:
        return []

    specs = []
    if prefs.enable_daily_journal:
        specs.append((
            JOURNAL_REMINDER_ID, "daily_journal", "Time to Journal",
            "Reflect on your day and capture your thoughts",
            prefs.journal_hour, prefs.journal_minute,
        ))
    if prefs.enable_mood_check:
        specs.append((
            MOOD_CHECK_REMINDER_ID, "mood_check", "Mood Check-in",
            "How are you feeling right now?",
            prefs.mood_check_hour, prefs.mood_check_minute,
        ))
    if prefs.enable_tasks_due_today:
        specs.append((
            TASKS_DUE_TODAY_REMINDER_ID, "tasks_due_today", "Tasks Due Today",
            "Check your tasks due today",
            prefs.tasks_due_today_hour, prefs.tasks_due_today_minute,
        ))
    if prefs.enable_tasks_due_in:
        specs.append((
            TASKS_DUE_IN_REMINDER_ID, "tasks_due_in", "Upcoming Tasks",
            f"Tasks due in {prefs.task_due_in_days} days - start planning!",
            TASKS_DUE_IN_HOUR, TASKS_DUE_IN_MINUTE,
        ))

    return [
        Reminder(
            id=rid,
            kind=kind,
            title=title,
            body=body,
            hour=hour,
            minute=minute,
            next_fire=next_occurrence(hour, minute, now),
        )
        for rid, kind, title, body, hour, minute in specs
    ]
