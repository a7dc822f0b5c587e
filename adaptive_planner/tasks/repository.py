from __future__ import annotations

import logging
import sqlite3
from datetime import datetime, timedelta
from pathlib import Path
from typing import Any, Callable, Iterable, List, Optional

from ..core.database import UNSET, SQLiteRepository
from ..core.dates import parse_datetime, to_iso, to_local_naive
from .models import (
    Subtask,
    Task,
    TaskEnergyLevel,
    TaskPriority,
    enum_from_string,
    subtasks_from_json,
    subtasks_to_json,
)

logger = logging.getLogger(__name__)

SubtaskMutation = Callable[[List[Subtask]], Optional[List[Subtask]]]


class TaskRepository(SQLiteRepository):
    """SQLite-backed task store, one row per task, subtasks embedded as JSON."""

    table = "tasks"

    def __init__(self, db_path: Optional[Path] = None):
        super().__init__(db_path)

    def _initialize(self) -> None:
        with self._connect() as conn:
            conn.execute(
                """
                CREATE TABLE IF NOT EXISTS tasks (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    user_id TEXT NOT NULL,
                    title TEXT NOT NULL,
                    description TEXT,
                    deadline TEXT NOT NULL,
                    priority TEXT NOT NULL DEFAULT 'medium',
                    category TEXT NOT NULL DEFAULT 'Personal',
                    required_energy TEXT NOT NULL DEFAULT 'medium',
                    is_completed INTEGER NOT NULL DEFAULT 0,
                    subtasks_json TEXT NOT NULL DEFAULT '[]',
                    created_at TEXT NOT NULL,
                    updated_at TEXT NOT NULL,
                    completed_at TEXT
                )
                """
            )
            conn.execute("CREATE INDEX IF NOT EXISTS idx_tasks_user ON tasks(user_id)")
            conn.execute("CREATE INDEX IF NOT EXISTS idx_tasks_deadline ON tasks(deadline)")
            conn.commit()

    @staticmethod
    def _row_to_task(row: sqlite3.Row) -> Task:
        return Task(
            id=row["id"],
            user_id=row["user_id"] or "",
            title=row["title"] or "Untitled",
            description=row["description"],
            deadline=parse_datetime(
                row["deadline"], fallback=datetime.now() + timedelta(days=7)
            ),
            priority=enum_from_string(TaskPriority, row["priority"] or "medium"),
            category=row["category"] or "personal",
            required_energy=enum_from_string(
                TaskEnergyLevel, row["required_energy"] or "medium"
            ),
            is_completed=bool(row["is_completed"]),
            subtasks=subtasks_from_json(row["subtasks_json"]),
            created_at=row["created_at"],
            updated_at=row["updated_at"],
            completed_at=parse_datetime(row["completed_at"]) if row["completed_at"] else None,
        )

    def list(self, user_id: str) -> list[Task]:
        """All tasks of a user, earliest deadline first."""
        with self._connect() as conn:
            rows = conn.execute(
                "SELECT * FROM tasks WHERE user_id = ? ORDER BY deadline ASC, id ASC",
                (user_id,),
            ).fetchall()
        return [self._row_to_task(row) for row in rows]

    def list_completed(self, user_id: str) -> list[Task]:
        with self._connect() as conn:
            rows = conn.execute(
                "SELECT * FROM tasks WHERE user_id = ? AND is_completed = 1 ORDER BY deadline ASC",
                (user_id,),
            ).fetchall()
        return [self._row_to_task(row) for row in rows]

    def get(self, task_id: int, user_id: Optional[str] = None) -> Optional[Task]:
        """Fetch one task; with ``user_id`` the task must also belong to that user."""
        query = "SELECT * FROM tasks WHERE id = ?"
        params: list[Any] = [task_id]
        if user_id is not None:
            query += " AND user_id = ?"
            params.append(user_id)
        with self._connect() as conn:
            row = conn.execute(query, params).fetchone()
        return self._row_to_task(row) if row else None

    def create(
        self,
        user_id: str,
        title: str,
        deadline: datetime,
        priority: TaskPriority = TaskPriority.MEDIUM,
        category: str = "Personal",
        required_energy: TaskEnergyLevel = TaskEnergyLevel.MEDIUM,
        description: Optional[str] = None,
        subtasks: Optional[Iterable[Subtask]] = None,
        is_completed: bool = False,
    ) -> Task:
        now = self._now()
        completed_at = to_iso(datetime.now()) if is_completed else None
        with self._connect() as conn:
            cursor = conn.execute(
                """
                INSERT INTO tasks (
                    user_id, title, description, deadline, priority, category,
                    required_energy, is_completed, subtasks_json, created_at,
                    updated_at, completed_at
                )
                VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    user_id,
                    title,
                    description,
                    to_local_naive(deadline).isoformat(),
                    priority.value,
                    category,
                    required_energy.value,
                    int(is_completed),
                    subtasks_to_json(list(subtasks or [])),
                    now,
                    now,
                    completed_at,
                ),
            )
            conn.commit()
            row = conn.execute("SELECT * FROM tasks WHERE id = ?", (cursor.lastrowid,)).fetchone()
        logger.debug("Created task %s for user %s", row["id"], user_id)
        return self._row_to_task(row)

    def update(
        self,
        task_id: int,
        *,
        title: Optional[str] = None,
        description: Any = UNSET,
        deadline: Optional[datetime] = None,
        priority: Optional[TaskPriority] = None,
        category: Optional[str] = None,
        required_energy: Optional[TaskEnergyLevel] = None,
        is_completed: Optional[bool] = None,
        subtasks: Optional[List[Subtask]] = None,
    ) -> Optional[Task]:
        """Partial update. ``description=None`` clears it, UNSET leaves it alone."""
        fields: list[str] = []
        params: list[object] = []

        if title is not None:
            fields.append("title = ?")
            params.append(title)
        if description is not UNSET:
            fields.append("description = ?")
            params.append(description)
        if deadline is not None:
            fields.append("deadline = ?")
            params.append(to_local_naive(deadline).isoformat())
        if priority is not None:
            fields.append("priority = ?")
            params.append(priority.value)
        if category is not None:
            fields.append("category = ?")
            params.append(category)
        if required_energy is not None:
            fields.append("required_energy = ?")
            params.append(required_energy.value)
        if is_completed is not None:
            fields.append("is_completed = ?")
            params.append(int(is_completed))
            fields.append("completed_at = ?")
            params.append(to_iso(datetime.now()) if is_completed else None)
        if subtasks is not None:
            fields.append("subtasks_json = ?")
            params.append(subtasks_to_json(subtasks))

        if not fields:
            return self.get(task_id)

        fields.append("updated_at = ?")
        params.append(self._now())
        params.append(task_id)

        with self._connect() as conn:
            conn.execute(f"UPDATE tasks SET {', '.join(fields)} WHERE id = ?", params)
            conn.commit()
            row = conn.execute("SELECT * FROM tasks WHERE id = ?", (task_id,)).fetchone()

        return self._row_to_task(row) if row else None

    def delete(self, task_id: int) -> bool:
        with self._connect() as conn:
            cursor = conn.execute("DELETE FROM tasks WHERE id = ?", (task_id,))
            conn.commit()
            return cursor.rowcount > 0

    def _mutate_subtasks(self, task_id: int, mutate: SubtaskMutation) -> Optional[Task]:
        task = self.get(task_id)
        if task is None:
            return None
        updated = mutate(list(task.subtasks))
        if updated is None:
            return task
        return self.update(task_id, subtasks=updated)

    def add_subtasks(self, task_id: int, titles: Iterable[str]) -> Optional[Task]:
        """Append new subtasks after the existing ones."""
        clean = [t.strip() for t in titles if t and t.strip()]

        def append(existing: List[Subtask]) -> Optional[List[Subtask]]:
            if not clean:
                return None
            base = len(existing)
            return existing + [Subtask.new(title, base + i) for i, title in enumerate(clean)]

        return self._mutate_subtasks(task_id, append)

    def toggle_subtask(self, task_id: int, subtask_id: str) -> Optional[Task]:
        def toggle(existing: List[Subtask]) -> Optional[List[Subtask]]:
            for subtask in existing:
                if subtask.id == subtask_id:
                    subtask.is_completed = not subtask.is_completed
                    return existing
            return None

        return self._mutate_subtasks(task_id, toggle)

    def rename_subtask(self, task_id: int, subtask_id: str, title: str) -> Optional[Task]:
        def rename(existing: List[Subtask]) -> Optional[List[Subtask]]:
            for subtask in existing:
                if subtask.id == subtask_id:
                    subtask.title = title
                    return existing
            return None

        return self._mutate_subtasks(task_id, rename)

    def delete_subtask(self, task_id: int, subtask_id: str) -> Optional[Task]:
        def remove(existing: List[Subtask]) -> Optional[List[Subtask]]:
            remaining = [s for s in existing if s.id != subtask_id]
            return remaining if len(remaining) != len(existing) else None

        return self._mutate_subtasks(task_id, remove)

    def rename_category(self, user_id: str, old_name: str, new_name: str) -> int:
        """Move every task of ``user_id`` in ``old_name`` to ``new_name``."""
        with self._connect() as conn:
            cursor = conn.execute(
                "UPDATE tasks SET category = ?, updated_at = ? WHERE user_id = ? AND category = ?",
                (new_name, self._now(), user_id, old_name),
            )
            conn.commit()
            return cursor.rowcount
