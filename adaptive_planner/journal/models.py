from __future__ import annotations

import json
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import List, Optional

ERROR_MOOD = "Error"
MOOD_CHECK_IN_TEXT = "Mood check-in."


class JournalEntryType(str, Enum):
    """Full reflection vs. quick mood check-in."""

    FULL = "full"
    MOOD_CHECK_IN = "mood_check_in"


@dataclass(slots=True)
class JournalEntry:
    """Persisted journal entry with its (optional) AI analysis."""

    id: int
    user_id: str
    text: str
    date: datetime
    mood: Optional[str] = None
    ai_feedback: Optional[str] = None
    actionable_steps: Optional[List[str]] = None
    entry_type: JournalEntryType = JournalEntryType.FULL
    created_at: str = ""
    updated_at: str = ""

    @property
    def is_mood_check_in(self) -> bool:
        return self.entry_type is JournalEntryType.MOOD_CHECK_IN

    @property
    def has_analysis(self) -> bool:
        return bool(self.mood) and self.mood != ERROR_MOOD


def steps_to_json(steps: Optional[List[str]]) -> Optional[str]:
    if steps is None:
        return None
    return json.dumps(list(steps), ensure_ascii=False)


def steps_from_json(raw: Optional[str]) -> Optional[List[str]]:
    if raw is None:
        return None
    try:
        value = json.loads(raw)
    except json.JSONDecodeError:
        return []
    return [str(item) for item in value] if isinstance(value, list) else []
