from __future__ import annotations

import logging
import sqlite3
from datetime import date, datetime
from pathlib import Path
from typing import List, Optional

from ..core.database import SQLiteRepository
from ..core.dates import day_bounds, parse_datetime
from .models import JournalEntry, JournalEntryType, steps_from_json, steps_to_json

logger = logging.getLogger(__name__)


class JournalRepository(SQLiteRepository):
    """SQLite-backed journal store."""

    table = "journals"

    def __init__(self, db_path: Optional[Path] = None):
        super().__init__(db_path)

    def _initialize(self) -> None:
        with self._connect() as conn:
            conn.execute(
                """
                CREATE TABLE IF NOT EXISTS journals (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    user_id TEXT NOT NULL,
                    text TEXT NOT NULL,
                    date TEXT NOT NULL,
                    mood TEXT,
                    ai_feedback TEXT,
                    actionable_steps_json TEXT,
                    entry_type TEXT NOT NULL DEFAULT 'full',
                    created_at TEXT NOT NULL,
                    updated_at TEXT NOT NULL
                )
                """
            )
            conn.execute("CREATE INDEX IF NOT EXISTS idx_journals_user_date ON journals(user_id, date)")
            conn.commit()

    @staticmethod
    def _row_to_entry(row: sqlite3.Row) -> JournalEntry:
        entry_type = (
            JournalEntryType.MOOD_CHECK_IN
            if row["entry_type"] == JournalEntryType.MOOD_CHECK_IN.value
            else JournalEntryType.FULL
        )
        return JournalEntry(
            id=row["id"],
            user_id=row["user_id"],
            text=row["text"] or "",
            date=parse_datetime(row["date"]),
            mood=row["mood"],
            ai_feedback=row["ai_feedback"],
            actionable_steps=steps_from_json(row["actionable_steps_json"]),
            entry_type=entry_type,
            created_at=row["created_at"],
            updated_at=row["updated_at"],
        )

    def list(self, user_id: str) -> List[JournalEntry]:
        """All entries of a user, newest first."""
        with self._connect() as conn:
            rows = conn.execute(
                "SELECT * FROM journals WHERE user_id = ? ORDER BY date DESC, id DESC",
                (user_id,),
            ).fetchall()
        return [self._row_to_entry(row) for row in rows]

    def recent(self, user_id: str, limit: int = 10) -> List[JournalEntry]:
        with self._connect() as conn:
            rows = conn.execute(
                "SELECT * FROM journals WHERE user_id = ? ORDER BY date DESC, id DESC LIMIT ?",
                (user_id, limit),
            ).fetchall()
        return [self._row_to_entry(row) for row in rows]

    def get(self, entry_id: int, user_id: Optional[str] = None) -> Optional[JournalEntry]:
        query = "SELECT * FROM journals WHERE id = ?"
        params: list = [entry_id]
        if user_id is not None:
            query += " AND user_id = ?"
            params.append(user_id)
        with self._connect() as conn:
            row = conn.execute(query, params).fetchone()
        return self._row_to_entry(row) if row else None

    def create(
        self,
        user_id: str,
        text: str,
        entry_date: Optional[datetime] = None,
        entry_type: JournalEntryType = JournalEntryType.FULL,
        mood: Optional[str] = None,
        ai_feedback: Optional[str] = None,
        actionable_steps: Optional[List[str]] = None,
    ) -> JournalEntry:
        now = self._now()
        entry_date = entry_date or datetime.now()
        with self._connect() as conn:
            cursor = conn.execute(
                """
                INSERT INTO journals (
                    user_id, text, date, mood, ai_feedback, actionable_steps_json,
                    entry_type, created_at, updated_at
                )
                VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    user_id,
                    text,
                    entry_date.isoformat(),
                    mood,
                    ai_feedback,
                    steps_to_json(actionable_steps),
                    entry_type.value,
                    now,
                    now,
                ),
            )
            conn.commit()
            row = conn.execute(
                "SELECT * FROM journals WHERE id = ?", (cursor.lastrowid,)
            ).fetchone()
        logger.debug("Created %s journal entry %s for user %s", entry_type.value, row["id"], user_id)
        return self._row_to_entry(row)

    def update_text(self, entry_id: int, text: str) -> Optional[JournalEntry]:
        """Replace the text and drop the now-stale analysis."""
        with self._connect() as conn:
            conn.execute(
                """
                UPDATE journals
                SET text = ?, mood = NULL, ai_feedback = NULL,
                    actionable_steps_json = NULL, updated_at = ?
                WHERE id = ?
                """,
                (text, self._now(), entry_id),
            )
            conn.commit()
        return self.get(entry_id)

    def set_analysis(
        self,
        entry_id: int,
        mood: Optional[str],
        ai_feedback: Optional[str],
        actionable_steps: Optional[List[str]],
    ) -> Optional[JournalEntry]:
        with self._connect() as conn:
            conn.execute(
                """
                UPDATE journals
                SET mood = ?, ai_feedback = ?, actionable_steps_json = ?, updated_at = ?
                WHERE id = ?
                """,
                (mood, ai_feedback, steps_to_json(actionable_steps), self._now(), entry_id),
            )
            conn.commit()
        return self.get(entry_id)

    def delete(self, entry_id: int) -> bool:
        with self._connect() as conn:
            cursor = conn.execute("DELETE FROM journals WHERE id = ?", (entry_id,))
            conn.commit()
            return cursor.rowcount > 0

    def latest_mood_check_in(self, user_id: str, day: Optional[date] = None) -> Optional[JournalEntry]:
        """Newest mood check-in entry written on ``day`` (default today)."""
        start, end = day_bounds(day or datetime.now())
        with self._connect() as conn:
            row = conn.execute(
                """
                SELECT * FROM journals
                WHERE user_id = ? AND entry_type = ? AND date >= ? AND date < ?
                ORDER BY date DESC, id DESC
                LIMIT 1
                """,
                (
                    user_id,
                    JournalEntryType.MOOD_CHECK_IN.value,
                    start.isoformat(),
                    end.isoformat(),
                ),
            ).fetchone()
        return self._row_to_entry(row) if row else None
