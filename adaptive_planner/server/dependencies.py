"""Dependency helpers shared across FastAPI routes."""

from __future__ import annotations

import logging
from datetime import datetime
from functools import lru_cache
from pathlib import Path
from typing import Any, Optional

from fastapi import Header, HTTPException

from adaptive_planner.accounts import AccountDeletionService, AvatarStore, UserProfileRepository
from adaptive_planner.categories import CategoryRepository, CategoryService
from adaptive_planner.core.config import Config
from adaptive_planner.core.exceptions import (
    AuthenticationError,
    DuplicateCategoryError,
    NotFoundError,
    ProtectedCategoryError,
    ValidationError,
)
from adaptive_planner.core.logger import setup_logger
from adaptive_planner.core.openrouter_client import create_ai_client
from adaptive_planner.focus import FocusRepository, FocusSession, FocusTimerRegistry
from adaptive_planner.journal import JournalAnalyzer, JournalEntry, JournalRepository, JournalService
from adaptive_planner.mood import MoodCheckIn, MoodRepository
from adaptive_planner.notifications import NotificationPreferenceRepository, ReminderScheduler
from adaptive_planner.tasks import Task, TaskRepository
from adaptive_planner.tasks.breakdown import TaskBreakdownService

from .schemas import (
    FocusSessionResponse,
    JournalEntryResponse,
    MoodCheckInResponse,
    SubtaskResponse,
    TaskResponse,
)

logger = logging.getLogger(__name__)

config = Config.from_yaml()
setup_logger(log_level=config.log_level, log_file=config.log_file)

PROJECT_ROOT = Path(__file__).resolve().parents[2]


def _db_path() -> Optional[Path]:
    return Path(config.db_path) if config.db_path else None


@lru_cache(maxsize=1)
def get_ai_client() -> Any:
    """Lazily create the configured chat client."""
    return create_ai_client(config)


@lru_cache(maxsize=1)
def get_task_repository() -> TaskRepository:
    """Singleton TaskRepository."""
    return TaskRepository(_db_path())


@lru_cache(maxsize=1)
def get_journal_repository() -> JournalRepository:
    return JournalRepository(_db_path())


@lru_cache(maxsize=1)
def get_mood_repository() -> MoodRepository:
    return MoodRepository(_db_path())


@lru_cache(maxsize=1)
def get_focus_repository() -> FocusRepository:
    return FocusRepository(_db_path())


@lru_cache(maxsize=1)
def get_category_repository() -> CategoryRepository:
    return CategoryRepository(_db_path())


@lru_cache(maxsize=1)
def get_notification_repository() -> NotificationPreferenceRepository:
    return NotificationPreferenceRepository(_db_path())


@lru_cache(maxsize=1)
def get_profile_repository() -> UserProfileRepository:
    return UserProfileRepository(_db_path())


@lru_cache(maxsize=1)
def get_avatar_store() -> AvatarStore:
    avatar_dir = Path(config.avatar_dir)
    if not avatar_dir.is_absolute():
        avatar_dir = PROJECT_ROOT / avatar_dir
    return AvatarStore(avatar_dir)


@lru_cache(maxsize=1)
def get_journal_analyzer() -> JournalAnalyzer:
    return JournalAnalyzer(get_ai_client())


@lru_cache(maxsize=1)
def get_journal_service() -> JournalService:
    return JournalService(get_journal_repository(), get_journal_analyzer())


@lru_cache(maxsize=1)
def get_breakdown_service() -> TaskBreakdownService:
    return TaskBreakdownService(get_ai_client())


@lru_cache(maxsize=1)
def get_category_service() -> CategoryService:
    return CategoryService(get_category_repository(), get_task_repository())


@lru_cache(maxsize=1)
def get_timer_registry() -> FocusTimerRegistry:
    return FocusTimerRegistry(get_focus_repository())


@lru_cache(maxsize=1)
def get_reminder_scheduler() -> ReminderScheduler:
    """Lazily create and start the singleton ReminderScheduler."""
    scheduler = ReminderScheduler(
        task_repository=get_task_repository(),
        check_interval_seconds=config.notifications.check_interval_seconds,
        max_queue_size=config.notifications.max_queue_size,
    )
    scheduler.start()
    return scheduler


def _forget_user(user_id: str) -> None:
    get_timer_registry().discard(user_id)
    if get_reminder_scheduler.cache_info().currsize:
        get_reminder_scheduler().cancel(user_id)


@lru_cache(maxsize=1)
def get_account_deletion_service() -> AccountDeletionService:
    return AccountDeletionService(
        task_repository=get_task_repository(),
        mood_repository=get_mood_repository(),
        journal_repository=get_journal_repository(),
        focus_repository=get_focus_repository(),
        category_repository=get_category_repository(),
        notification_repository=get_notification_repository(),
        avatar_store=get_avatar_store(),
        profile_repository=get_profile_repository(),
        on_deleted=_forget_user,
    )


def reset_dependencies() -> None:
    """Drop every cached singleton (stops the scheduler if it was started)."""
    if get_reminder_scheduler.cache_info().currsize:
        get_reminder_scheduler().stop()
    for factory in (
        get_ai_client,
        get_task_repository,
        get_journal_repository,
        get_mood_repository,
        get_focus_repository,
        get_category_repository,
        get_notification_repository,
        get_profile_repository,
        get_avatar_store,
        get_journal_analyzer,
        get_journal_service,
        get_breakdown_service,
        get_category_service,
        get_timer_registry,
        get_reminder_scheduler,
        get_account_deletion_service,
    ):
        factory.cache_clear()


def get_current_user_id(x_user_id: Optional[str] = Header(default=None)) -> str:
    """The signed-in user, as asserted by the ``X-User-Id`` header."""
    if not x_user_id or not x_user_id.strip():
        raise HTTPException(status_code=401, detail="User not authenticated")
    return x_user_id.strip()


def to_http_error(exc: Exception, action: str) -> HTTPException:
    """Translate a domain error into the matching HTTP error."""
    if isinstance(exc, HTTPException):
        return exc
    if isinstance(exc, AuthenticationError):
        return HTTPException(status_code=401, detail=str(exc))
    if isinstance(exc, NotFoundError):
        return HTTPException(status_code=404, detail=str(exc))
    if isinstance(exc, (DuplicateCategoryError, ProtectedCategoryError)):
        return HTTPException(status_code=409, detail=str(exc))
    if isinstance(exc, ValidationError):
        return HTTPException(status_code=400, detail=str(exc))
    logger.exception("%s: %s", action, exc)
    return HTTPException(status_code=500, detail=action)


def serialize_task(task: Task) -> TaskResponse:
    """Convert domain Task to API response."""
    return TaskResponse(
        id=task.id,
        title=task.title,
        description=task.description,
        deadline=task.deadline,
        priority=task.priority,
        category=task.category,
        required_energy=task.required_energy,
        is_completed=task.is_completed,
        is_overdue=task.is_overdue(datetime.now()),
        subtasks=[
            SubtaskResponse(id=s.id, title=s.title, is_completed=s.is_completed, order=s.order)
            for s in sorted(task.subtasks, key=lambda s: s.order)
        ],
        completed_subtasks=task.completed_subtask_count,
        created_at=task.created_at,
        updated_at=task.updated_at,
        completed_at=task.completed_at,
    )


def serialize_journal_entry(entry: JournalEntry) -> JournalEntryResponse:
    return JournalEntryResponse(
        id=entry.id,
        text=entry.text,
        date=entry.date,
        mood=entry.mood,
        ai_feedback=entry.ai_feedback,
        actionable_steps=entry.actionable_steps,
        entry_type=entry.entry_type.value,
    )


def serialize_mood_check_in(check_in: MoodCheckIn) -> MoodCheckInResponse:
    return MoodCheckInResponse(
        id=check_in.id,
        mood=check_in.mood,
        energy_level=check_in.energy_level,
        date=check_in.date,
    )


def serialize_focus_session(session: FocusSession) -> FocusSessionResponse:
    return FocusSessionResponse(
        id=session.id,
        start=session.start,
        end=session.end,
        duration_minutes=session.duration_minutes,
    )
