"""Journal endpoints."""

from __future__ import annotations

import asyncio
import logging
from datetime import date
from typing import Any, Dict, List, Optional

from fastapi import Depends, FastAPI, HTTPException

from adaptive_planner.journal import JournalEntryType
from adaptive_planner.journal.filters import filter_entries
from adaptive_planner.journal.sentiment import analyze_sentiment

from ..dependencies import (
    get_current_user_id,
    get_journal_analyzer,
    get_journal_repository,
    get_journal_service,
    serialize_journal_entry,
    to_http_error,
)
from ..schemas import (
    DeletedResponse,
    JournalCreateRequest,
    JournalEntryResponse,
    JournalUpdateRequest,
    MoodCheckInJournalRequest,
    SentimentRequest,
    TodayMoodResponse,
)

logger = logging.getLogger(__name__)


def register_journal_routes(app: FastAPI) -> None:
    """Register journal CRUD, mood check-in and sentiment endpoints."""

    @app.get("/api/journals", response_model=List[JournalEntryResponse])
    async def list_journals(
        mood: Optional[str] = None,
        entry_type: Optional[JournalEntryType] = None,
        search: Optional[str] = None,
        start: Optional[date] = None,
        end: Optional[date] = None,
        newest_first: bool = True,
        user_id: str = Depends(get_current_user_id),
    ) -> List[JournalEntryResponse]:
        repo = get_journal_repository()
        try:
            entries = await asyncio.to_thread(repo.list, user_id)
            filtered = filter_entries(entries, mood, entry_type, search, start, end, newest_first)
            return [serialize_journal_entry(e) for e in filtered]
        except Exception as exc:
            raise to_http_error(exc, "Failed to list journal entries") from exc

    @app.post("/api/journals", response_model=JournalEntryResponse, status_code=201)
    async def create_journal(
        request: JournalCreateRequest,
        user_id: str = Depends(get_current_user_id),
    ) -> JournalEntryResponse:
        """Save an entry and attach the AI analysis."""
        service = get_journal_service()
        try:
            entry = await asyncio.to_thread(service.add_entry, user_id, request.text)
            return serialize_journal_entry(entry)
        except Exception as exc:
            raise to_http_error(exc, "Failed to create journal entry") from exc

    @app.post("/api/journals/mood-check-in", response_model=JournalEntryResponse, status_code=201)
    async def journal_mood_check_in(
        request: MoodCheckInJournalRequest,
        user_id: str = Depends(get_current_user_id),
    ) -> JournalEntryResponse:
        service = get_journal_service()
        try:
            entry = await asyncio.to_thread(service.add_mood_check_in, user_id, request.mood)
            return serialize_journal_entry(entry)
        except Exception as exc:
            raise to_http_error(exc, "Failed to record mood check-in") from exc

    @app.get("/api/journals/today-mood", response_model=TodayMoodResponse)
    async def today_mood(user_id: str = Depends(get_current_user_id)) -> TodayMoodResponse:
        service = get_journal_service()
        try:
            mood = await asyncio.to_thread(service.latest_mood_for_today, user_id)
            return TodayMoodResponse(mood=mood)
        except Exception as exc:
            raise to_http_error(exc, "Failed to load today's mood") from exc

    @app.post("/api/journals/sentiment")
    async def journal_sentiment(
        request: SentimentRequest,
        user_id: str = Depends(get_current_user_id),
    ) -> Dict[str, Any]:
        """Sentiment of arbitrary text; keyword based unless ``use_ai`` is set."""
        try:
            analyzer = get_journal_analyzer() if request.use_ai else None
            return await asyncio.to_thread(analyze_sentiment, request.text, analyzer)
        except Exception as exc:
            raise to_http_error(exc, "Failed to analyze sentiment") from exc

    @app.get("/api/journals/{entry_id}", response_model=JournalEntryResponse)
    async def get_journal(entry_id: int, user_id: str = Depends(get_current_user_id)) -> JournalEntryResponse:
        repo = get_journal_repository()
        try:
            entry = await asyncio.to_thread(repo.get, entry_id, user_id)
            if entry is None:
                raise HTTPException(status_code=404, detail="Journal entry not found")
            return serialize_journal_entry(entry)
        except Exception as exc:
            raise to_http_error(exc, "Failed to load journal entry") from exc

    @app.put("/api/journals/{entry_id}", response_model=JournalEntryResponse)
    async def update_journal(
        entry_id: int,
        request: JournalUpdateRequest,
        user_id: str = Depends(get_current_user_id),
    ) -> JournalEntryResponse:
        """Replace the text and re-run the analysis."""
        service = get_journal_service()
        try:
            entry = await asyncio.to_thread(service.update_entry, entry_id, request.text, user_id)
            return serialize_journal_entry(entry)
        except Exception as exc:
            raise to_http_error(exc, "Failed to update journal entry") from exc

    @app.delete("/api/journals/{entry_id}", response_model=DeletedResponse)
    async def delete_journal(entry_id: int, user_id: str = Depends(get_current_user_id)) -> DeletedResponse:
        repo = get_journal_repository()
        try:
            entry = await asyncio.to_thread(repo.get, entry_id, user_id)
            if entry is None or not await asyncio.to_thread(repo.delete, entry_id):
                raise HTTPException(status_code=404, detail="Journal entry not found")
            return DeletedResponse(deleted=True, id=entry_id)
        except Exception as exc:
            raise to_http_error(exc, "Failed to delete journal entry") from exc
