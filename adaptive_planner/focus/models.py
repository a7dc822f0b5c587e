from __future__ import annotations

from dataclasses import asdict, dataclass, fields
from datetime import datetime
from typing import Any, Dict, Optional

from ..core.exceptions import ValidationError


@dataclass(slots=True)
class FocusSession:
    id: int
    user_id: str
    start: datetime
    end: datetime
    duration_minutes: int = 0


@dataclass(slots=True)
class UserFocusPrefs:
    """Pomodoro settings; a user without stored prefs gets these defaults."""

    user_id: str
    daily_goal_minutes: int = 240
    work_minutes: int = 25
    short_break_minutes: int = 5
    long_break_minutes: int = 15
    long_break_interval: int = 4

    @classmethod
    def from_dict(cls, user_id: str, data: Optional[Dict[str, Any]]) -> "UserFocusPrefs":
        prefs = cls(user_id=user_id)
        for f in fields(cls):
            if f.name != "user_id" and data and data.get(f.name) is not None:
                setattr(prefs, f.name, int(data[f.name]))
        return prefs

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data.pop("user_id")
        return data

    def validate(self) -> None:
        for name, value in self.to_dict().items():
            if value < 1:
                raise ValidationError(f"{name} must be at least 1, got {value}")
