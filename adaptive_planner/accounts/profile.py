from __future__ import annotations

import logging
import sqlite3
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Optional

from ..core.database import UNSET, SQLiteRepository, resolve_db_path
from ..core.exceptions import ValidationError

logger = logging.getLogger(__name__)

AVATAR_SUFFIXES = {".png", ".jpg", ".jpeg", ".webp", ".gif"}


@dataclass(slots=True)
class UserProfile:
    user_id: str
    display_name: str = ""
    email: str = ""
    avatar_path: Optional[str] = None
    created_at: str = ""
    updated_at: str = ""


class UserProfileRepository(SQLiteRepository):
    table = "user_profiles"

    def __init__(self, db_path: Optional[Path] = None):
        super().__init__(db_path)

    def _initialize(self) -> None:
        with self._connect() as conn:
            conn.execute(
                """
                CREATE TABLE IF NOT EXISTS user_profiles (
                    user_id TEXT PRIMARY KEY,
                    display_name TEXT NOT NULL DEFAULT '',
                    email TEXT NOT NULL DEFAULT '',
                    avatar_path TEXT,
                    created_at TEXT NOT NULL,
                    updated_at TEXT NOT NULL
                )
                """
            )
            conn.commit()

    @staticmethod
    def _row_to_profile(row: sqlite3.Row) -> UserProfile:
        return UserProfile(
            user_id=row["user_id"],
            display_name=row["display_name"] or "",
            email=row["email"] or "",
            avatar_path=row["avatar_path"],
            created_at=row["created_at"],
            updated_at=row["updated_at"],
        )

    def get(self, user_id: str) -> Optional[UserProfile]:
        with self._connect() as conn:
            row = conn.execute("SELECT * FROM user_profiles WHERE user_id = ?", (user_id,)).fetchone()
        return self._row_to_profile(row) if row else None

    def upsert(
        self,
        user_id: str,
        display_name: Optional[str] = None,
        email: Optional[str] = None,
        avatar_path: Any = UNSET,
    ) -> UserProfile:
        """Create or partially update; ``avatar_path=None`` clears the avatar."""
        current = self.get(user_id) or UserProfile(user_id=user_id)
        now = self._now()
        values = (
            user_id,
            display_name if display_name is not None else current.display_name,
            email if email is not None else current.email,
            current.avatar_path if avatar_path is UNSET else avatar_path,
            current.created_at or now,
            now,
        )
        with self._connect() as conn:
            conn.execute(
                """
                INSERT INTO user_profiles (user_id, display_name, email, avatar_path, created_at, updated_at)
                VALUES (?, ?, ?, ?, ?, ?)
                ON CONFLICT(user_id) DO UPDATE SET
                    display_name = excluded.display_name,
                    email = excluded.email,
                    avatar_path = excluded.avatar_path,
                    updated_at = excluded.updated_at
                """,
                values,
            )
            conn.commit()
        return self.get(user_id)


class AvatarStore:
    """Avatar images stored as ``<dir>/<user_id><suffix>``."""

    def __init__(self, avatar_dir: Optional[Path] = None):
        self.avatar_dir = Path(avatar_dir) if avatar_dir else resolve_db_path().parent / "avatars"
        self.avatar_dir.mkdir(parents=True, exist_ok=True)

    def _safe_name(self, user_id: str) -> str:
        name = "".join(c for c in user_id if c.isalnum() or c in "-_")
        if not name:
            raise ValidationError("user id is not usable as a file name")
        return name

    def save(self, user_id: str, data: bytes, suffix: str = ".png") -> Path:
        suffix = suffix.lower() if suffix.startswith(".") else f".{suffix.lower()}"
        if suffix not in AVATAR_SUFFIXES:
            raise ValidationError(f"unsupported avatar type: {suffix}")
        if not data:
            raise ValidationError("avatar image is empty")
        self.delete(user_id)
        path = self.avatar_dir / f"{self._safe_name(user_id)}{suffix}"
        path.write_bytes(data)
        logger.info("Avatar saved for %s (%d bytes)", user_id, len(data))
        return path

    def find(self, user_id: str) -> Optional[Path]:
        name = self._safe_name(user_id)
        for suffix in sorted(AVATAR_SUFFIXES):
            path = self.avatar_dir / f"{name}{suffix}"
            if path.exists():
                return path
        return None

    def delete(self, user_id: str) -> bool:
        """Remove the avatar; a missing avatar is not an error."""
        path = self.find(user_id)
        if path is None:
            return False
        path.unlink(missing_ok=True)
        return True
