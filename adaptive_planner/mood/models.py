from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

ENERGY_SCALE = {"low": 3.0, "medium": 6.0, "high": 9.0}
DEFAULT_ENERGY = 5.0


@dataclass(slots=True)
class MoodCheckIn:
    id: int
    user_id: str
    mood: str
    energy_level: str
    date: datetime
    created_at: str = ""


@dataclass(slots=True)
class UserStatus:
    """Current emotional state fed into task recommendations.

    ``current_energy`` is on a 0-10 scale, ``journal_sentiment`` on -1..1.
    """

    current_energy: float
    mood: Optional[str] = None
    journal_sentiment: Optional[float] = None

    @classmethod
    def from_mood_check_in(cls, mood: Optional[str], energy_level: Optional[str]) -> "UserStatus":
        energy = ENERGY_SCALE.get((energy_level or "").lower(), DEFAULT_ENERGY)
        return cls(current_energy=energy, mood=mood)
