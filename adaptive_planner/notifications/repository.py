from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Optional

from ..core.database import SQLiteRepository
from .models import NotificationPreference

logger = logging.getLogger(__name__)


class NotificationPreferenceRepository(SQLiteRepository):
    """One JSON preferences document per user."""

    table = "notification_preferences"

    def __init__(self, db_path: Optional[Path] = None):
        super().__init__(db_path)

    def _initialize(self) -> None:
        with self._connect() as conn:
            conn.execute(
                """
                CREATE TABLE IF NOT EXISTS notification_preferences (
                    user_id TEXT PRIMARY KEY,
                    preferences_json TEXT NOT NULL,
                    updated_at TEXT NOT NULL
                )
                """
            )
            conn.commit()

    def get(self, user_id: str) -> NotificationPreference:
        """Stored preferences, or the defaults when none (or garbage) is stored."""
        with self._connect() as conn:
            row = conn.execute(
                "SELECT preferences_json FROM notification_preferences WHERE user_id = ?",
                (user_id,),
            ).fetchone()
        if row is None:
            return NotificationPreference()
        try:
            return NotificationPreference.from_json(json.loads(row["preferences_json"]))
        except (json.JSONDecodeError, TypeError, ValueError) as e:
            logger.warning("Unreadable notification preferences for %s: %s", user_id, e)
            return NotificationPreference()

    def save(self, user_id: str, prefs: NotificationPreference) -> NotificationPreference:
        prefs.validate()
        with self._connect() as conn:
            conn.execute(
                """
                INSERT INTO notification_preferences (user_id, preferences_json, updated_at)
                VALUES (?, ?, ?)
                ON CONFLICT(user_id) DO UPDATE SET
                    preferences_json = excluded.preferences_json,
                    updated_at = excluded.updated_at
                """,
                (user_id, json.dumps(prefs.to_json()), self._now()),
            )
            conn.commit()
        return prefs

    def delete(self, user_id: str) -> int:
        return self.delete_all_for_user(user_id)
