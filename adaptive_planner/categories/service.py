"""Task categories: fixed defaults plus user-defined ones.

The list a user sees is always defaults, then custom categories in creation
order, then ``No Category``. Renaming or deleting a custom category moves the
user's tasks along with it.
"""

from __future__ import annotations

import logging
import sqlite3
from pathlib import Path
from typing import List, Optional

from ..core.database import SQLiteRepository
from ..core.exceptions import (
    DuplicateCategoryError,
    NotFoundError,
    ProtectedCategoryError,
    ValidationError,
)
from ..tasks.models import DEFAULT_CATEGORIES, NO_CATEGORY
from ..tasks.repository import TaskRepository

logger = logging.getLogger(__name__)


def is_custom_category(name: str) -> bool:
    return name not in DEFAULT_CATEGORIES and name != NO_CATEGORY


class CategoryRepository(SQLiteRepository):
    table = "task_categories"

    def __init__(self, db_path: Optional[Path] = None):
        super().__init__(db_path)

    def _initialize(self) -> None:
        with self._connect() as conn:
            conn.execute(
                """
                CREATE TABLE IF NOT EXISTS task_categories (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    user_id TEXT NOT NULL,
                    name TEXT NOT NULL,
                    name_lower TEXT NOT NULL,
                    created_at TEXT NOT NULL,
                    UNIQUE (user_id, name_lower)
                )
                """
            )
            conn.commit()

    def custom_names(self, user_id: str) -> List[str]:
        with self._connect() as conn:
            rows = conn.execute(
                "SELECT name FROM task_categories WHERE user_id = ? ORDER BY id ASC",
                (user_id,),
            ).fetchall()
        return [row["name"] for row in rows]

    def find(self, user_id: str, name: str) -> Optional[sqlite3.Row]:
        with self._connect() as conn:
            return conn.execute(
                "SELECT * FROM task_categories WHERE user_id = ? AND name = ?",
                (user_id, name),
            ).fetchone()

    def exists_ignoring_case(self, user_id: str, name: str) -> bool:
        with self._connect() as conn:
            row = conn.execute(
                "SELECT 1 FROM task_categories WHERE user_id = ? AND name_lower = ? LIMIT 1",
                (user_id, name.lower()),
            ).fetchone()
        return row is not None

    def insert(self, user_id: str, name: str) -> None:
        with self._connect() as conn:
            conn.execute(
                "INSERT INTO task_categories (user_id, name, name_lower, created_at) VALUES (?, ?, ?, ?)",
                (user_id, name, name.lower(), self._now()),
            )
            conn.commit()

    def rename(self, category_id: int, new_name: str) -> None:
        with self._connect() as conn:
            conn.execute(
                "UPDATE task_categories SET name = ?, name_lower = ? WHERE id = ?",
                (new_name, new_name.lower(), category_id),
            )
            conn.commit()

    def delete(self, category_id: int) -> None:
        with self._connect() as conn:
            conn.execute("DELETE FROM task_categories WHERE id = ?", (category_id,))
            conn.commit()


class CategoryService:
    def __init__(self, repository: CategoryRepository, task_repository: TaskRepository):
        self.repository = repository
        self.task_repository = task_repository

    def list_categories(self, user_id: str) -> List[str]:
        return [*DEFAULT_CATEGORIES, *self.repository.custom_names(user_id), NO_CATEGORY]

    def _check_new_name(self, user_id: str, name: str) -> str:
        clean = (name or "").strip()
        if not clean:
            raise ValidationError("Category name cannot be empty")
        reserved = {c.lower() for c in DEFAULT_CATEGORIES} | {NO_CATEGORY.lower()}
        if clean.lower() in reserved or self.repository.exists_ignoring_case(user_id, clean):
            raise DuplicateCategoryError("Category already exists")
        return clean

    def _custom_row(self, user_id: str, name: str, action: str) -> sqlite3.Row:
        if not is_custom_category(name):
            raise ProtectedCategoryError(f"Cannot {action} default categories")
        row = self.repository.find(user_id, name)
        if row is None:
            raise NotFoundError("Category not found")
        return row

    def add(self, user_id: str, name: str) -> str:
        clean = self._check_new_name(user_id, name)
        self.repository.insert(user_id, clean)
        logger.info("Category %r added for %s", clean, user_id)
        return clean

    def rename(self, user_id: str, old_name: str, new_name: str) -> int:
        """Rename a custom category; returns the number of tasks moved."""
        row = self._custom_row(user_id, old_name, "edit")
        if (new_name or "").strip().lower() == old_name.lower():
            clean = new_name.strip()
        else:
            clean = self._check_new_name(user_id, new_name)
        moved = self.task_repository.rename_category(user_id, old_name, clean)
        self.repository.rename(row["id"], clean)
        logger.info("Category %r renamed to %r for %s (%d tasks)", old_name, clean, user_id, moved)
        return moved

    def delete(self, user_id: str, name: str) -> int:
        """Delete a custom category; its tasks fall back to ``No Category``."""
        row = self._custom_row(user_id, name, "delete")
        moved = self.task_repository.rename_category(user_id, name, NO_CATEGORY)
        self.repository.delete(row["id"])
        logger.info("Category %r deleted for %s (%d tasks reassigned)", name, user_id, moved)
        return moved

    def clear_all(self, user_id: str) -> int:
        """Delete every custom category of the user."""
        names = self.repository.custom_names(user_id)
        for name in names:
            self.task_repository.rename_category(user_id, name, NO_CATEGORY)
        return self.repository.delete_all_for_user(user_id)
