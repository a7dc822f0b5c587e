"""Journal write path: persist first, then attach the AI analysis."""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Optional

from ..core.exceptions import AuthenticationError, NotFoundError, ValidationError
from .analyzer import JournalAnalyzer
from .models import ERROR_MOOD, MOOD_CHECK_IN_TEXT, JournalEntry, JournalEntryType
from .repository import JournalRepository

logger = logging.getLogger(__name__)

CREATE_FAILURE_FEEDBACK = "Could not analyze entry at this time."
UPDATE_FAILURE_FEEDBACK = "Could not re-analyze entry."


class JournalService:
    def __init__(self, repository: JournalRepository, analyzer: JournalAnalyzer):
        self.repository = repository
        self.analyzer = analyzer

    def add_entry(self, user_id: Optional[str], text: str, now: Optional[datetime] = None) -> JournalEntry:
        """Save a full entry, then analyze it.

        The entry is stored even when the analysis fails; it then carries the
        ``Error`` mood so the client can offer a retry.
        """
        if not user_id:
            raise AuthenticationError("user must be signed in to write a journal entry")
        if not text or not text.strip():
            raise ValidationError("journal text must not be empty")

        entry = self.repository.create(user_id, text.strip(), entry_date=now or datetime.now())
        return self._analyze_into(entry, CREATE_FAILURE_FEEDBACK)

    def update_entry(self, entry_id: int, text: str, user_id: Optional[str] = None) -> JournalEntry:
        if not text or not text.strip():
            raise ValidationError("journal text must not be empty")
        if self.repository.get(entry_id, user_id) is None:
            raise NotFoundError(f"journal entry {entry_id} not found")

        entry = self.repository.update_text(entry_id, text.strip())
        return self._analyze_into(entry, UPDATE_FAILURE_FEEDBACK)

    def add_mood_check_in(self, user_id: Optional[str], mood: str, now: Optional[datetime] = None) -> JournalEntry:
        if not user_id:
            raise AuthenticationError("user must be signed in to check in")
        if not mood or not mood.strip():
            raise ValidationError("mood must not be empty")
        return self.repository.create(
            user_id,
            MOOD_CHECK_IN_TEXT,
            entry_date=now or datetime.now(),
            entry_type=JournalEntryType.MOOD_CHECK_IN,
            mood=mood.strip(),
        )

    def latest_mood_for_today(self, user_id: str) -> Optional[str]:
        entry = self.repository.latest_mood_check_in(user_id)
        return entry.mood if entry else None

    def _analyze_into(self, entry: JournalEntry, failure_feedback: str) -> JournalEntry:
        try:
            analysis = self.analyzer.analyze_journal_entry(entry.text)
        except Exception:
            logger.exception("Analysis of journal entry %s raised", entry.id)
            analysis = {"mood": ERROR_MOOD}

        if analysis.get("mood") == ERROR_MOOD:
            mood, feedback, steps = ERROR_MOOD, failure_feedback, []
        else:
            mood = analysis.get("mood")
            feedback = analysis.get("feedback")
            steps = list(analysis.get("actionableSteps") or [])

        updated = self.repository.set_analysis(entry.id, mood, feedback, steps)
        logger.info("Journal entry %s analyzed: mood=%s", entry.id, mood)
        return updated if updated is not None else entry
