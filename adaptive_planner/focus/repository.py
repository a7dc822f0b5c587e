from __future__ import annotations

import logging
import sqlite3
from datetime import date, datetime
from pathlib import Path
from typing import Any, Dict, List, Optional

from ..core.database import SQLiteRepository
from ..core.dates import day_bounds, parse_datetime
from .models import FocusSession, UserFocusPrefs

logger = logging.getLogger(__name__)

_PREF_COLUMNS = [
    "daily_goal_minutes",
    "work_minutes",
    "short_break_minutes",
    "long_break_minutes",
    "long_break_interval",
]


def format_reset_date(value: date) -> str:
    """``Y-M-D`` without zero padding, e.g. 2024-3-7."""
    return f"{value.year}-{value.month}-{value.day}"


class FocusRepository(SQLiteRepository):
    """Focus sessions plus one preferences row per user."""

    table = "focus_sessions"

    def __init__(self, db_path: Optional[Path] = None):
        super().__init__(db_path)

    def _initialize(self) -> None:
        with self._connect() as conn:
            conn.execute(
                """
                CREATE TABLE IF NOT EXISTS focus_sessions (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    user_id TEXT NOT NULL,
                    start TEXT NOT NULL,
                    end TEXT NOT NULL,
                    duration_minutes INTEGER NOT NULL DEFAULT 0
                )
                """
            )
            conn.execute(
                """
                CREATE TABLE IF NOT EXISTS focus_prefs (
                    user_id TEXT PRIMARY KEY,
                    daily_goal_minutes INTEGER,
                    work_minutes INTEGER,
                    short_break_minutes INTEGER,
                    long_break_minutes INTEGER,
                    long_break_interval INTEGER,
                    last_reset_date TEXT,
                    updated_at TEXT NOT NULL
                )
                """
            )
            conn.execute(
                "CREATE INDEX IF NOT EXISTS idx_focus_user_start ON focus_sessions(user_id, start)"
            )
            conn.commit()

    @staticmethod
    def _row_to_session(row: sqlite3.Row) -> FocusSession:
        start = parse_datetime(row["start"])
        return FocusSession(
            id=row["id"],
            user_id=row["user_id"] or "",
            start=start,
            end=parse_datetime(row["end"], fallback=start),
            duration_minutes=int(row["duration_minutes"] or 0),
        )

    def create_session(self, user_id: str, start: datetime) -> FocusSession:
        """Open session: end equals start until progress is recorded."""
        with self._connect() as conn:
            cursor = conn.execute(
                "INSERT INTO focus_sessions (user_id, start, end, duration_minutes) VALUES (?, ?, ?, 0)",
                (user_id, start.isoformat(), start.isoformat()),
            )
            conn.commit()
            session_id = cursor.lastrowid
        logger.debug("Focus session %s started for %s", session_id, user_id)
        return FocusSession(id=session_id, user_id=user_id, start=start, end=start)

    def update_session(
        self,
        session_id: int,
        end: Optional[datetime] = None,
        duration_minutes: Optional[int] = None,
    ) -> None:
        fields: list[str] = []
        params: list[Any] = []
        if end is not None:
            fields.append("end = ?")
            params.append(end.isoformat())
        if duration_minutes is not None:
            fields.append("duration_minutes = ?")
            params.append(duration_minutes)
        if not fields:
            return
        params.append(session_id)
        with self._connect() as conn:
            conn.execute(f"UPDATE focus_sessions SET {', '.join(fields)} WHERE id = ?", params)
            conn.commit()

    def get_session(self, session_id: int) -> Optional[FocusSession]:
        with self._connect() as conn:
            row = conn.execute("SELECT * FROM focus_sessions WHERE id = ?", (session_id,)).fetchone()
        return self._row_to_session(row) if row else None

    def sessions_between(self, user_id: str, start: datetime, end: datetime) -> List[FocusSession]:
        """Sessions whose start lies in [start, end)."""
        with self._connect() as conn:
            rows = conn.execute(
                """
                SELECT * FROM focus_sessions
                WHERE user_id = ? AND start >= ? AND start < ?
                ORDER BY start ASC
                """,
                (user_id, start.isoformat(), end.isoformat()),
            ).fetchall()
        return [self._row_to_session(row) for row in rows]

    def sessions_for_day(self, user_id: str, day: date | datetime) -> List[FocusSession]:
        start, end = day_bounds(day)
        return self.sessions_between(user_id, start, end)

    def _prefs_row(self, user_id: str) -> Optional[sqlite3.Row]:
        with self._connect() as conn:
            return conn.execute("SELECT * FROM focus_prefs WHERE user_id = ?", (user_id,)).fetchone()

    def get_prefs(self, user_id: str) -> UserFocusPrefs:
        row = self._prefs_row(user_id)
        data: Optional[Dict[str, Any]] = dict(row) if row else None
        return UserFocusPrefs.from_dict(user_id, data)

    def update_prefs(self, prefs: UserFocusPrefs) -> UserFocusPrefs:
        """Upsert; the last reset date is left untouched."""
        prefs.validate()
        values = prefs.to_dict()
        with self._connect() as conn:
            conn.execute(
                f"""
                INSERT INTO focus_prefs (user_id, {', '.join(_PREF_COLUMNS)}, updated_at)
                VALUES (?, ?, ?, ?, ?, ?, ?)
                ON CONFLICT(user_id) DO UPDATE SET
                    {', '.join(f'{c} = excluded.{c}' for c in _PREF_COLUMNS)},
                    updated_at = excluded.updated_at
                """,
                (prefs.user_id, *[values[c] for c in _PREF_COLUMNS], self._now()),
            )
            conn.commit()
        return self.get_prefs(prefs.user_id)

    def set_last_reset_date(self, user_id: str, value: date) -> str:
        stamp = format_reset_date(value)
        with self._connect() as conn:
            conn.execute(
                """
                INSERT INTO focus_prefs (user_id, last_reset_date, updated_at)
                VALUES (?, ?, ?)
                ON CONFLICT(user_id) DO UPDATE SET
                    last_reset_date = excluded.last_reset_date,
                    updated_at = excluded.updated_at
                """,
                (user_id, stamp, self._now()),
            )
            conn.commit()
        return stamp

    def get_last_reset_date(self, user_id: str) -> Optional[str]:
        row = self._prefs_row(user_id)
        return row["last_reset_date"] if row else None

    def delete_prefs(self, user_id: str) -> int:
        with self._connect() as conn:
            cursor = conn.execute("DELETE FROM focus_prefs WHERE user_id = ?", (user_id,))
            conn.commit()
            return cursor.rowcount
