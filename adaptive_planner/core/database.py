"""SQLite plumbing shared by every repository.

All repositories write to one database file (data/adaptive_planner.db by
default). Every user-owned table carries a ``user_id`` column so that account
deletion can sweep it.
"""

from __future__ import annotations

import os
import sqlite3
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional

UNSET = object()

DB_PATH_ENV = "ADAPTIVE_PLANNER_DB_PATH"


def resolve_db_path(db_path: Optional[Path] = None) -> Path:
    """Explicit path > ADAPTIVE_PLANNER_DB_PATH > data/adaptive_planner.db"""
    if db_path:
        return Path(db_path)
    env_path = os.getenv(DB_PATH_ENV)
    if env_path:
        return Path(env_path)
    root = Path(__file__).resolve().parents[2]
    return root / "data" / "adaptive_planner.db"


class SQLiteRepository:
    """Base class: connection handling and schema bootstrap."""

    table: str = ""

    def __init__(self, db_path: Optional[Path] = None):
        self.db_path = resolve_db_path(db_path)
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        self._initialize()

    def _connect(self) -> sqlite3.Connection:
        conn = sqlite3.connect(self.db_path)
        conn.row_factory = sqlite3.Row
        return conn

    def _initialize(self) -> None:
        raise NotImplementedError

    @staticmethod
    def _now() -> str:
        return datetime.now(timezone.utc).isoformat()

    def delete_all_for_user(self, user_id: str) -> int:
        """Delete every row owned by ``user_id`` and return the row count."""
        with self._connect() as conn:
            cursor = conn.execute(f"DELETE FROM {self.table} WHERE user_id = ?", (user_id,))
            conn.commit()
            return cursor.rowcount
