"""Focus session, preference and Pomodoro timer endpoints."""

from __future__ import annotations

import asyncio
import logging
from datetime import date, datetime, time
from typing import List, Optional

from fastapi import Depends, FastAPI

from adaptive_planner.focus.charts import daily_progress, minutes_for_day

from ..dependencies import (
    get_current_user_id,
    get_focus_repository,
    get_timer_registry,
    serialize_focus_session,
    to_http_error,
)
from ..schemas import (
    FocusDayResponse,
    FocusPrefsModel,
    FocusPrefsUpdateRequest,
    FocusSessionResponse,
    FocusTimerResponse,
    ResetDateRequest,
    ResetDateResponse,
)

logger = logging.getLogger(__name__)


def _timer_state(user_id: str, command: Optional[str] = None) -> FocusTimerResponse:
    timer = get_timer_registry().get(user_id)
    if command is not None:
        getattr(timer, command)()
    timer.sync()
    return FocusTimerResponse(**timer.snapshot())


def register_focus_routes(app: FastAPI) -> None:
    """Register focus endpoints."""

    @app.get("/api/focus/sessions", response_model=List[FocusSessionResponse])
    async def list_sessions(
        start: date,
        end: date,
        user_id: str = Depends(get_current_user_id),
    ) -> List[FocusSessionResponse]:
        """Sessions started between ``start`` and ``end`` (both inclusive)."""
        repo = get_focus_repository()
        try:
            sessions = await asyncio.to_thread(
                repo.sessions_between,
                user_id,
                datetime.combine(start, time.min),
                datetime.combine(end, time.max),
            )
            return [serialize_focus_session(s) for s in sessions]
        except Exception as exc:
            raise to_http_error(exc, "Failed to list focus sessions") from exc

    @app.get("/api/focus/day", response_model=FocusDayResponse)
    async def focus_day(
        day: Optional[date] = None,
        user_id: str = Depends(get_current_user_id),
    ) -> FocusDayResponse:
        """Total focused minutes of a day against the daily goal."""
        repo = get_focus_repository()
        day = day or date.today()
        try:
            sessions = await asyncio.to_thread(repo.sessions_for_day, user_id, day)
            prefs = await asyncio.to_thread(repo.get_prefs, user_id)
            total = minutes_for_day(sessions)
            return FocusDayResponse(
                date=day,
                total_minutes=total,
                goal_minutes=prefs.daily_goal_minutes,
                progress=daily_progress(total, prefs.daily_goal_minutes),
                sessions=[serialize_focus_session(s) for s in sessions],
            )
        except Exception as exc:
            raise to_http_error(exc, "Failed to load focus day") from exc

    @app.get("/api/focus/prefs", response_model=FocusPrefsModel)
    async def get_prefs(user_id: str = Depends(get_current_user_id)) -> FocusPrefsModel:
        repo = get_focus_repository()
        try:
            prefs = await asyncio.to_thread(repo.get_prefs, user_id)
            return FocusPrefsModel(**prefs.to_dict())
        except Exception as exc:
            raise to_http_error(exc, "Failed to load focus preferences") from exc

    @app.put("/api/focus/prefs", response_model=FocusPrefsModel)
    async def update_prefs(
        request: FocusPrefsUpdateRequest,
        user_id: str = Depends(get_current_user_id),
    ) -> FocusPrefsModel:
        """Merge the given values into the stored preferences."""
        repo = get_focus_repository()
        try:
            prefs = await asyncio.to_thread(repo.get_prefs, user_id)
            for name, value in request.model_dump(exclude_none=True).items():
                setattr(prefs, name, value)
            saved = await asyncio.to_thread(repo.update_prefs, prefs)
            await asyncio.to_thread(get_timer_registry().reload_prefs, user_id)
            return FocusPrefsModel(**saved.to_dict())
        except Exception as exc:
            raise to_http_error(exc, "Failed to update focus preferences") from exc

    @app.get("/api/focus/reset-date", response_model=ResetDateResponse)
    async def get_reset_date(user_id: str = Depends(get_current_user_id)) -> ResetDateResponse:
        repo = get_focus_repository()
        try:
            stamp = await asyncio.to_thread(repo.get_last_reset_date, user_id)
            return ResetDateResponse(last_reset_date=stamp)
        except Exception as exc:
            raise to_http_error(exc, "Failed to load reset date") from exc

    @app.put("/api/focus/reset-date", response_model=ResetDateResponse)
    async def set_reset_date(
        request: ResetDateRequest,
        user_id: str = Depends(get_current_user_id),
    ) -> ResetDateResponse:
        repo = get_focus_repository()
        try:
            stamp = await asyncio.to_thread(repo.set_last_reset_date, user_id, request.date)
            return ResetDateResponse(last_reset_date=stamp)
        except Exception as exc:
            raise to_http_error(exc, "Failed to save reset date") from exc

    @app.get("/api/focus/timer", response_model=FocusTimerResponse)
    async def timer_state(user_id: str = Depends(get_current_user_id)) -> FocusTimerResponse:
        """Current timer state; due phase changes are applied first."""
        try:
            return await asyncio.to_thread(_timer_state, user_id)
        except Exception as exc:
            raise to_http_error(exc, "Failed to load focus timer") from exc

    @app.post("/api/focus/timer/start", response_model=FocusTimerResponse)
    async def timer_start(user_id: str = Depends(get_current_user_id)) -> FocusTimerResponse:
        try:
            return await asyncio.to_thread(_timer_state, user_id, "start_work")
        except Exception as exc:
            raise to_http_error(exc, "Failed to start focus timer") from exc

    @app.post("/api/focus/timer/pause", response_model=FocusTimerResponse)
    async def timer_pause(user_id: str = Depends(get_current_user_id)) -> FocusTimerResponse:
        try:
            return await asyncio.to_thread(_timer_state, user_id, "pause")
        except Exception as exc:
            raise to_http_error(exc, "Failed to pause focus timer") from exc

    @app.post("/api/focus/timer/resume", response_model=FocusTimerResponse)
    async def timer_resume(user_id: str = Depends(get_current_user_id)) -> FocusTimerResponse:
        try:
            return await asyncio.to_thread(_timer_state, user_id, "resume")
        except Exception as exc:
            raise to_http_error(exc, "Failed to resume focus timer") from exc

    @app.post("/api/focus/timer/save", response_model=FocusTimerResponse)
    async def timer_save(user_id: str = Depends(get_current_user_id)) -> FocusTimerResponse:
        """Persist the running block and stop."""
        try:
            return await asyncio.to_thread(_timer_state, user_id, "save_and_end")
        except Exception as exc:
            raise to_http_error(exc, "Failed to save focus session") from exc

    @app.post("/api/focus/timer/reset", response_model=FocusTimerResponse)
    async def timer_reset(user_id: str = Depends(get_current_user_id)) -> FocusTimerResponse:
        try:
            return await asyncio.to_thread(_timer_state, user_id, "reset")
        except Exception as exc:
            raise to_http_error(exc, "Failed to reset focus timer") from exc
