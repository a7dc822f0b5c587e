"""Mood check-in endpoints."""

from __future__ import annotations

import asyncio
import logging
from datetime import date
from typing import List, Optional

from fastapi import Depends, FastAPI

from adaptive_planner.mood import UserStatus

from ..dependencies import (
    get_current_user_id,
    get_mood_repository,
    serialize_mood_check_in,
    to_http_error,
)
from ..schemas import (
    MoodCheckInRequest,
    MoodCheckInResponse,
    MoodStreakResponse,
    UserStatusResponse,
)

logger = logging.getLogger(__name__)


def register_mood_routes(app: FastAPI) -> None:
    """Register mood check-in endpoints."""

    @app.post("/api/moods", response_model=MoodCheckInResponse, status_code=201)
    async def add_mood(
        request: MoodCheckInRequest,
        user_id: str = Depends(get_current_user_id),
    ) -> MoodCheckInResponse:
        repo = get_mood_repository()
        try:
            check_in = await asyncio.to_thread(
                repo.add, user_id, request.mood.strip(), request.energy_level
            )
            return serialize_mood_check_in(check_in)
        except Exception as exc:
            raise to_http_error(exc, "Failed to add mood") from exc

    @app.get("/api/moods/today", response_model=List[MoodCheckInResponse])
    async def today_moods(user_id: str = Depends(get_current_user_id)) -> List[MoodCheckInResponse]:
        """Today's check-ins, oldest first."""
        repo = get_mood_repository()
        try:
            items = await asyncio.to_thread(repo.today, user_id)
            return [serialize_mood_check_in(c) for c in items]
        except Exception as exc:
            raise to_http_error(exc, "Failed to load today's moods") from exc

    @app.get("/api/moods/status", response_model=UserStatusResponse)
    async def user_status(user_id: str = Depends(get_current_user_id)) -> UserStatusResponse:
        """Energy/mood status from today's latest check-in."""
        repo = get_mood_repository()
        try:
            latest = await asyncio.to_thread(repo.latest_today, user_id)
            status = UserStatus.from_mood_check_in(
                latest.mood if latest else None,
                latest.energy_level if latest else None,
            )
            return UserStatusResponse(
                current_energy=status.current_energy,
                mood=status.mood,
                journal_sentiment=status.journal_sentiment,
            )
        except Exception as exc:
            raise to_http_error(exc, "Failed to load user status") from exc

    @app.get("/api/moods/week", response_model=List[MoodCheckInResponse])
    async def week_moods(user_id: str = Depends(get_current_user_id)) -> List[MoodCheckInResponse]:
        repo = get_mood_repository()
        try:
            items = await asyncio.to_thread(repo.last_7_days, user_id)
            return [serialize_mood_check_in(c) for c in items]
        except Exception as exc:
            raise to_http_error(exc, "Failed to load weekly moods") from exc

    @app.get("/api/moods/month", response_model=List[MoodCheckInResponse])
    async def month_moods(
        month: Optional[date] = None,
        user_id: str = Depends(get_current_user_id),
    ) -> List[MoodCheckInResponse]:
        """Check-ins of the month containing ``month`` (default this month)."""
        repo = get_mood_repository()
        try:
            items = await asyncio.to_thread(repo.month, user_id, month or date.today())
            return [serialize_mood_check_in(c) for c in items]
        except Exception as exc:
            raise to_http_error(exc, "Failed to load monthly moods") from exc

    @app.get("/api/moods/streak", response_model=MoodStreakResponse)
    async def mood_streak(user_id: str = Depends(get_current_user_id)) -> MoodStreakResponse:
        repo = get_mood_repository()
        try:
            streak = await asyncio.to_thread(repo.current_streak, user_id)
            return MoodStreakResponse(streak=streak)
        except Exception as exc:
            logger.exception("Failed to compute mood streak: %s", exc)
            return MoodStreakResponse(streak=0)
