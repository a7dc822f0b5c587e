"""Notification preference and reminder endpoints."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import asdict
from typing import Any, Dict, List

from fastapi import Depends, FastAPI

from adaptive_planner.notifications import NotificationPreference

from ..dependencies import (
    get_current_user_id,
    get_notification_repository,
    get_reminder_scheduler,
    to_http_error,
)
from ..schemas import (
    NotificationMessage,
    NotificationPreferenceModel,
    PendingNotificationsResponse,
    ReminderResponse,
)

logger = logging.getLogger(__name__)


def _ensure_scheduled(user_id: str) -> None:
    # Reminders live in memory; plan them from the stored preferences after a restart.
    scheduler = get_reminder_scheduler()
    if not scheduler.upcoming(user_id):
        scheduler.reschedule(user_id, get_notification_repository().get(user_id))


def register_notification_routes(app: FastAPI) -> None:
    """Register notification endpoints."""

    @app.get("/api/notifications/prefs", response_model=NotificationPreferenceModel)
    async def get_prefs(user_id: str = Depends(get_current_user_id)) -> NotificationPreferenceModel:
        repo = get_notification_repository()
        try:
            prefs = await asyncio.to_thread(repo.get, user_id)
            return NotificationPreferenceModel(**asdict(prefs))
        except Exception as exc:
            raise to_http_error(exc, "Failed to load notification preferences") from exc

    @app.put("/api/notifications/prefs", response_model=NotificationPreferenceModel)
    async def update_prefs(
        request: NotificationPreferenceModel,
        user_id: str = Depends(get_current_user_id),
    ) -> NotificationPreferenceModel:
        """Save preferences and re-plan the user's reminders."""
        repo = get_notification_repository()
        try:
            prefs = NotificationPreference(**request.model_dump())
            saved = await asyncio.to_thread(repo.save, user_id, prefs)
            await asyncio.to_thread(get_reminder_scheduler().reschedule, user_id, saved)
            return NotificationPreferenceModel(**asdict(saved))
        except Exception as exc:
            raise to_http_error(exc, "Failed to save notification preferences") from exc

    @app.get("/api/notifications/upcoming", response_model=List[ReminderResponse])
    async def upcoming(user_id: str = Depends(get_current_user_id)) -> List[ReminderResponse]:
        try:
            await asyncio.to_thread(_ensure_scheduled, user_id)
            reminders = get_reminder_scheduler().upcoming(user_id)
            return [ReminderResponse(**asdict(r)) for r in reminders]
        except Exception as exc:
            raise to_http_error(exc, "Failed to list reminders") from exc

    @app.get("/api/notifications/pending", response_model=PendingNotificationsResponse)
    async def pending(user_id: str = Depends(get_current_user_id)) -> PendingNotificationsResponse:
        """Drain the reminders that fired since the last poll."""
        try:
            await asyncio.to_thread(_ensure_scheduled, user_id)
            messages = get_reminder_scheduler().get_pending(user_id)
            return PendingNotificationsResponse(
                messages=[NotificationMessage(**m) for m in messages]
            )
        except Exception as exc:
            raise to_http_error(exc, "Failed to load pending notifications") from exc

    @app.post("/api/notifications/test", response_model=NotificationMessage)
    async def send_test(user_id: str = Depends(get_current_user_id)) -> NotificationMessage:
        try:
            message = get_reminder_scheduler().send_test_notification(user_id)
            return NotificationMessage(**message)
        except Exception as exc:
            raise to_http_error(exc, "Failed to send test notification") from exc

    @app.get("/api/notifications/status")
    async def scheduler_status(user_id: str = Depends(get_current_user_id)) -> Dict[str, Any]:
        return get_reminder_scheduler().get_status()
