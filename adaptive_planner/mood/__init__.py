"""Mood check-ins, streaks and the derived user status."""

from .models import MoodCheckIn, UserStatus
from .repository import MoodRepository, get_current_mood

__all__ = ["MoodCheckIn", "MoodRepository", "UserStatus", "get_current_mood"]
