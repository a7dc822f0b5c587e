from __future__ import annotations

import logging
import sqlite3
from datetime import date, datetime, timedelta
from pathlib import Path
from typing import Iterable, List, Optional

from ..core.database import SQLiteRepository
from ..core.dates import day_bounds, month_bounds, parse_datetime, start_of_day
from ..journal.models import JournalEntry
from .models import MoodCheckIn

logger = logging.getLogger(__name__)

STREAK_LOOKBACK_DAYS = 60


class MoodRepository(SQLiteRepository):
    """Mood check-ins; several per day are allowed."""

    table = "mood_check_ins"

    def __init__(self, db_path: Optional[Path] = None):
        super().__init__(db_path)

    def _initialize(self) -> None:
        with self._connect() as conn:
            conn.execute(
                """
                CREATE TABLE IF NOT EXISTS mood_check_ins (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    user_id TEXT NOT NULL,
                    mood TEXT NOT NULL,
                    energy_level TEXT NOT NULL,
                    date TEXT NOT NULL,
                    created_at TEXT NOT NULL
                )
                """
            )
            conn.execute(
                "CREATE INDEX IF NOT EXISTS idx_mood_user_date ON mood_check_ins(user_id, date)"
            )
            conn.commit()

    @staticmethod
    def _row_to_check_in(row: sqlite3.Row) -> MoodCheckIn:
        return MoodCheckIn(
            id=row["id"],
            user_id=row["user_id"],
            mood=row["mood"],
            energy_level=row["energy_level"],
            date=parse_datetime(row["date"]),
            created_at=row["created_at"],
        )

    def _between(self, user_id: str, start: datetime, end: datetime, newest_first: bool = False) -> List[MoodCheckIn]:
        order = "DESC" if newest_first else "ASC"
        with self._connect() as conn:
            rows = conn.execute(
                f"""
                SELECT * FROM mood_check_ins
                WHERE user_id = ? AND date >= ? AND date < ?
                ORDER BY date {order}, id {order}
                """,
                (user_id, start.isoformat(), end.isoformat()),
            ).fetchall()
        return [self._row_to_check_in(row) for row in rows]

    def add(self, user_id: str, mood: str, energy_level: str, now: Optional[datetime] = None) -> MoodCheckIn:
        moment = now or datetime.now()
        with self._connect() as conn:
            cursor = conn.execute(
                "INSERT INTO mood_check_ins (user_id, mood, energy_level, date, created_at) VALUES (?, ?, ?, ?, ?)",
                (user_id, mood, energy_level, moment.isoformat(), self._now()),
            )
            conn.commit()
            row = conn.execute(
                "SELECT * FROM mood_check_ins WHERE id = ?", (cursor.lastrowid,)
            ).fetchone()
        logger.info("Mood check-in for %s: %s/%s", user_id, mood, energy_level)
        return self._row_to_check_in(row)

    def has_mood_today(self, user_id: str, now: Optional[datetime] = None) -> bool:
        return bool(self.today(user_id, now))

    def today(self, user_id: str, now: Optional[datetime] = None) -> List[MoodCheckIn]:
        """Today's check-ins, oldest first."""
        start, end = day_bounds(now or datetime.now())
        return self._between(user_id, start, end)

    def latest_today(self, user_id: str, now: Optional[datetime] = None) -> Optional[MoodCheckIn]:
        items = self.today(user_id, now)
        return items[-1] if items else None

    def last_7_days(self, user_id: str, now: Optional[datetime] = None) -> List[MoodCheckIn]:
        today = start_of_day(now or datetime.now())
        return self._between(user_id, today - timedelta(days=6), today + timedelta(days=1))

    def month(self, user_id: str, month: date | datetime) -> List[MoodCheckIn]:
        start, end = month_bounds(month)
        return self._between(user_id, start, end)

    def recent(self, user_id: str, limit: int = 1) -> List[MoodCheckIn]:
        with self._connect() as conn:
            rows = conn.execute(
                "SELECT * FROM mood_check_ins WHERE user_id = ? ORDER BY date DESC, id DESC LIMIT ?",
                (user_id, limit),
            ).fetchall()
        return [self._row_to_check_in(row) for row in rows]

    def current_streak(self, user_id: str, now: Optional[datetime] = None) -> int:
        """Consecutive days with a check-in, counting back from today.

        A day without a check-in ends the streak, except today itself, which
        may still be pending.
        """
        today = start_of_day(now or datetime.now())
        items = self._between(
            user_id,
            today - timedelta(days=STREAK_LOOKBACK_DAYS),
            today + timedelta(days=1),
        )
        days_with = {start_of_day(item.date) for item in items}

        streak = 0
        for offset in range(STREAK_LOOKBACK_DAYS + 1):
            if today - timedelta(days=offset) in days_with:
                streak += 1
            elif offset == 0:
                continue
            else:
                break
        return streak


def get_current_mood(
    entries: Iterable[JournalEntry],
    check_ins: Iterable[MoodCheckIn],
) -> Optional[str]:
    """Mood of the newest journal entry or check-in; a check-in must be strictly newer to win."""
    with_mood = sorted((e for e in entries if e.mood), key=lambda e: e.date, reverse=True)
    latest_entry = with_mood[0] if with_mood else None
    ordered = sorted(check_ins, key=lambda c: c.date, reverse=True)
    latest_check_in = ordered[0] if ordered else None

    mood = latest_entry.mood if latest_entry else None
    if latest_check_in is not None and (
        latest_entry is None or latest_check_in.date > latest_entry.date
    ):
        mood = latest_check_in.mood
    return mood
