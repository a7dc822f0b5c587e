"""Pydantic schemas for the FastAPI server."""

from __future__ import annotations

from datetime import date, datetime
from typing import Dict, List, Optional

from pydantic import BaseModel, Field

from adaptive_planner.tasks.models import TaskEnergyLevel, TaskPriority


class HealthResponse(BaseModel):
    """Response for health check endpoint."""

    status: str


class DeletedResponse(BaseModel):
    deleted: bool
    id: Optional[int] = None


# --- tasks -------------------------------------------------------------------


class SubtaskResponse(BaseModel):
    id: str
    title: str
    is_completed: bool
    order: int


class TaskResponse(BaseModel):
    """Serialized task."""

    id: int
    title: str
    description: Optional[str] = None
    deadline: datetime
    priority: TaskPriority
    category: str
    required_energy: TaskEnergyLevel
    is_completed: bool
    is_overdue: bool
    subtasks: List[SubtaskResponse] = Field(default_factory=list)
    completed_subtasks: int = 0
    created_at: Optional[str] = None
    updated_at: Optional[str] = None
    completed_at: Optional[datetime] = None


class TaskCreateRequest(BaseModel):
    """Request body for task creation."""

    title: str = Field(..., min_length=1, description="Task title")
    deadline: datetime = Field(..., description="Due date and time")
    description: Optional[str] = None
    priority: TaskPriority = TaskPriority.MEDIUM
    category: str = "Personal"
    required_energy: TaskEnergyLevel = TaskEnergyLevel.MEDIUM
    subtasks: List[str] = Field(default_factory=list, description="Initial subtask titles")


class TaskUpdateRequest(BaseModel):
    """Partial update; an explicit null description clears it."""

    title: Optional[str] = Field(default=None, min_length=1)
    deadline: Optional[datetime] = None
    description: Optional[str] = None
    priority: Optional[TaskPriority] = None
    category: Optional[str] = None
    required_energy: Optional[TaskEnergyLevel] = None
    is_completed: Optional[bool] = None


class SubtaskCreateRequest(BaseModel):
    titles: List[str] = Field(..., min_length=1)


class SubtaskRenameRequest(BaseModel):
    title: str = Field(..., min_length=1)


class BreakdownResponse(BaseModel):
    task_id: int
    subtasks: List[str]
    applied: bool


class CompletionStatsResponse(BaseModel):
    total: int
    completed: int
    remaining: int
    completion_percentage: float


# --- journal -----------------------------------------------------------------


class JournalEntryResponse(BaseModel):
    id: int
    text: str
    date: datetime
    mood: Optional[str] = None
    ai_feedback: Optional[str] = None
    actionable_steps: Optional[List[str]] = None
    entry_type: str


class JournalCreateRequest(BaseModel):
    text: str = Field(..., min_length=1, description="Journal text")


class JournalUpdateRequest(BaseModel):
    text: str = Field(..., min_length=1)


class MoodCheckInJournalRequest(BaseModel):
    mood: str = Field(..., min_length=1)


class TodayMoodResponse(BaseModel):
    mood: Optional[str] = None


class SentimentRequest(BaseModel):
    text: str = Field(..., min_length=1)
    use_ai: bool = Field(default=False, description="Use the AI analyzer instead of keywords")


# --- mood ----------------------------------------------------------------------


class MoodCheckInRequest(BaseModel):
    mood: str = Field(..., min_length=1)
    energy_level: str = Field(..., pattern="^(low|medium|high)$")


class MoodCheckInResponse(BaseModel):
    id: int
    mood: str
    energy_level: str
    date: datetime


class MoodStreakResponse(BaseModel):
    streak: int


class UserStatusResponse(BaseModel):
    current_energy: float
    mood: Optional[str] = None
    journal_sentiment: Optional[float] = None


# --- focus ---------------------------------------------------------------------


class FocusSessionResponse(BaseModel):
    id: int
    start: datetime
    end: datetime
    duration_minutes: int


class FocusPrefsModel(BaseModel):
    daily_goal_minutes: int = Field(default=240, ge=1)
    work_minutes: int = Field(default=25, ge=1)
    short_break_minutes: int = Field(default=5, ge=1)
    long_break_minutes: int = Field(default=15, ge=1)
    long_break_interval: int = Field(default=4, ge=1)


class FocusPrefsUpdateRequest(BaseModel):
    daily_goal_minutes: Optional[int] = Field(default=None, ge=1)
    work_minutes: Optional[int] = Field(default=None, ge=1)
    short_break_minutes: Optional[int] = Field(default=None, ge=1)
    long_break_minutes: Optional[int] = Field(default=None, ge=1)
    long_break_interval: Optional[int] = Field(default=None, ge=1)


class FocusDayResponse(BaseModel):
    date: date
    total_minutes: int
    goal_minutes: int
    progress: float
    sessions: List[FocusSessionResponse]


class FocusTimerResponse(BaseModel):
    phase: str
    remaining_seconds: int
    is_paused: bool
    completed_blocks: int
    active_session_id: Optional[int] = None
    saved_current_block_minutes: int
    last_sync: Optional[str] = None


class ResetDateRequest(BaseModel):
    date: date


class ResetDateResponse(BaseModel):
    last_reset_date: Optional[str] = None


# --- categories ----------------------------------------------------------------


class CategoryListResponse(BaseModel):
    categories: List[str]
    custom: List[str]


class CategoryCreateRequest(BaseModel):
    name: str = Field(..., min_length=1)


class CategoryRenameRequest(BaseModel):
    new_name: str = Field(..., min_length=1)


class CategoryChangeResponse(BaseModel):
    name: str
    tasks_moved: int = 0


# --- notifications -------------------------------------------------------------


class NotificationPreferenceModel(BaseModel):
    enable_notifications: bool = True
    enable_daily_journal: bool = True
    enable_mood_check: bool = True
    enable_tasks_due_today: bool = True
    task_due_in_days: int = Field(default=2, ge=1)
    enable_tasks_due_in: bool = True
    journal_hour: int = Field(default=8, ge=0, le=23)
    journal_minute: int = Field(default=0, ge=0, le=59)
    mood_check_hour: int = Field(default=12, ge=0, le=23)
    mood_check_minute: int = Field(default=0, ge=0, le=59)
    tasks_due_today_hour: int = Field(default=9, ge=0, le=23)
    tasks_due_today_minute: int = Field(default=0, ge=0, le=59)


class ReminderResponse(BaseModel):
    id: int
    kind: str
    title: str
    body: str
    hour: int
    minute: int
    next_fire: datetime


class NotificationMessage(BaseModel):
    id: int
    kind: str
    title: str
    body: str
    timestamp: str


class PendingNotificationsResponse(BaseModel):
    messages: List[NotificationMessage]


# --- analytics -----------------------------------------------------------------


class ProductivityResponse(BaseModel):
    best_time_of_day_label: str
    best_time_range: str
    best_day_of_week: str
    time_scores: Dict[str, float]
    day_scores: Dict[str, float]
    mood: Optional[str] = None
    journal_sentiment: float


class WeeklyFocusResponse(BaseModel):
    labels: List[str]
    hours: List[float]


class SentimentResponse(BaseModel):
    average_sentiment: float
    entry_count: int
    streak: int


# --- account -------------------------------------------------------------------


class ProfileResponse(BaseModel):
    user_id: str
    display_name: str
    email: str
    has_avatar: bool


class ProfileUpdateRequest(BaseModel):
    display_name: Optional[str] = None
    email: Optional[str] = None


class AccountDeleteRequest(BaseModel):
    confirmation: str = Field(..., description='Must be the literal "DELETE"')


class AccountDeleteResponse(BaseModel):
    deleted: bool
    counts: Dict[str, int]
