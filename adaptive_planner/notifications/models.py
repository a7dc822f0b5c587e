from __future__ import annotations

from dataclasses import asdict, dataclass, fields, replace
from typing import Any, Dict, Optional

from ..core.exceptions import ValidationError

# camelCase keys of the stored JSON document
_JSON_KEYS = {
    "enable_notifications": "enableNotifications",
    "enable_daily_journal": "enableDailyJournal",
    "enable_mood_check": "enableMoodCheck",
    "enable_tasks_due_today": "enableTasksDueToday",
    "task_due_in_days": "taskDueInDays",
    "enable_tasks_due_in": "enableTasksDueIn",
    "journal_hour": "journalHour",
    "journal_minute": "journalMinute",
    "mood_check_hour": "moodCheckHour",
    "mood_check_minute": "moodCheckMinute",
    "tasks_due_today_hour": "tasksDueTodayHour",
    "tasks_due_today_minute": "tasksDueTodayMinute",
}


def _parse_flag(value: Any) -> Optional[bool]:
    """Real booleans, 0/1 and the strings "true"/"false"; anything else is ignored."""
    if isinstance(value, bool):
        return value
    if isinstance(value, int) and value in (0, 1):
        return bool(value)
    if isinstance(value, str) and value.strip().lower() in ("true", "false"):
        return value.strip().lower() == "true"
    return None


@dataclass(slots=True)
class NotificationPreference:
    enable_notifications: bool = True
    enable_daily_journal: bool = True
    enable_mood_check: bool = True
    enable_tasks_due_today: bool = True
    task_due_in_days: int = 2
    enable_tasks_due_in: bool = True
    journal_hour: int = 8
    journal_minute: int = 0
    mood_check_hour: int = 12
    mood_check_minute: int = 0
    tasks_due_today_hour: int = 9
    tasks_due_today_minute: int = 0

    @classmethod
    def from_json(cls, data: Optional[Dict[str, Any]]) -> "NotificationPreference":
        """Missing keys keep their defaults; both camelCase and snake_case are read."""
        prefs = cls()
        if not data:
            return prefs
        for f in fields(cls):
            value = data.get(_JSON_KEYS[f.name], data.get(f.name))
            if value is None:
                continue
            if isinstance(getattr(prefs, f.name), bool):
                value = _parse_flag(value)
                if value is None:
                    continue
            else:
                value = int(value)
            setattr(prefs, f.name, value)
        return prefs

    def to_json(self) -> Dict[str, Any]:
        return {_JSON_KEYS[name]: value for name, value in asdict(self).items()}

    def copy_with(self, **changes: Any) -> "NotificationPreference":
        return replace(self, **changes)

    def validate(self) -> None:
        for name in ("journal_hour", "mood_check_hour", "tasks_due_today_hour"):
            value = getattr(self, name)
            if not 0 <= value <= 23:
                raise ValidationError(f"{name} must be between 0 and 23, got {value}")
        for name in ("journal_minute", "mood_check_minute", "tasks_due_today_minute"):
            value = getattr(self, name)
            if not 0 <= value <= 59:
                raise ValidationError(f"{name} must be between 0 and 59, got {value}")
        if self.task_due_in_days < 1:
            raise ValidationError(f"task_due_in_days must be at least 1, got {self.task_due_in_days}")
