"""Productivity and progress analytics endpoints."""

from __future__ import annotations

import asyncio
import logging
from datetime import datetime

from fastapi import Depends, FastAPI

from adaptive_planner.analytics import analyze_productivity, completed_tasks_from, completion_stats
from adaptive_planner.focus.charts import WEEKDAY_LABELS, week_bounds, weekly_focus_hours
from adaptive_planner.journal.sentiment import average_journal_sentiment
from adaptive_planner.mood import get_current_mood

from ..dependencies import (
    get_current_user_id,
    get_focus_repository,
    get_journal_repository,
    get_mood_repository,
    get_task_repository,
    to_http_error,
)
from ..schemas import (
    CompletionStatsResponse,
    ProductivityResponse,
    SentimentResponse,
    WeeklyFocusResponse,
)

logger = logging.getLogger(__name__)


def _productivity(user_id: str) -> ProductivityResponse:
    tasks = get_task_repository().list_completed(user_id)
    entries = get_journal_repository().list(user_id)
    check_ins = get_mood_repository().recent(user_id, 1)
    mood = get_current_mood(entries, check_ins)
    sentiment = average_journal_sentiment(entries)
    result = analyze_productivity(completed_tasks_from(tasks, mood, sentiment))
    return ProductivityResponse(**result.to_dict(), mood=mood, journal_sentiment=sentiment)


def register_analytics_routes(app: FastAPI) -> None:
    """Register analytics endpoints."""

    @app.get("/api/analytics/productivity", response_model=ProductivityResponse)
    async def productivity(user_id: str = Depends(get_current_user_id)) -> ProductivityResponse:
        """Best time of day and weekday from completed tasks."""
        try:
            return await asyncio.to_thread(_productivity, user_id)
        except Exception as exc:
            raise to_http_error(exc, "Failed to analyze productivity") from exc

    @app.get("/api/analytics/completion", response_model=CompletionStatsResponse)
    async def completion(user_id: str = Depends(get_current_user_id)) -> CompletionStatsResponse:
        repo = get_task_repository()
        try:
            tasks = await asyncio.to_thread(repo.list, user_id)
            return CompletionStatsResponse(**completion_stats(tasks))
        except Exception as exc:
            raise to_http_error(exc, "Failed to compute completion stats") from exc

    @app.get("/api/analytics/weekly-focus", response_model=WeeklyFocusResponse)
    async def weekly_focus(user_id: str = Depends(get_current_user_id)) -> WeeklyFocusResponse:
        """Focused hours per weekday of the current week."""
        repo = get_focus_repository()
        now = datetime.now()
        start, end = week_bounds(now)
        try:
            sessions = await asyncio.to_thread(repo.sessions_between, user_id, start, end)
            return WeeklyFocusResponse(labels=WEEKDAY_LABELS, hours=weekly_focus_hours(sessions, now))
        except Exception as exc:
            raise to_http_error(exc, "Failed to load weekly focus") from exc

    @app.get("/api/analytics/sentiment", response_model=SentimentResponse)
    async def sentiment(user_id: str = Depends(get_current_user_id)) -> SentimentResponse:
        try:
            entries = await asyncio.to_thread(get_journal_repository().list, user_id)
            streak = await asyncio.to_thread(get_mood_repository().current_streak, user_id)
            return SentimentResponse(
                average_sentiment=average_journal_sentiment(entries),
                entry_count=len(entries),
                streak=streak,
            )
        except Exception as exc:
            raise to_http_error(exc, "Failed to compute sentiment") from exc
