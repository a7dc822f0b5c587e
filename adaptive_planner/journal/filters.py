"""In-memory journal list ordering and filtering."""

from __future__ import annotations

from datetime import date, datetime
from typing import Iterable, List, Optional

from ..core.dates import start_of_day
from .models import JournalEntry, JournalEntryType


def sort_entries(entries: Iterable[JournalEntry], newest_first: bool = True) -> List[JournalEntry]:
    return sorted(entries, key=lambda e: e.date, reverse=newest_first)


def filter_entries(
    entries: Iterable[JournalEntry],
    mood: Optional[str] = None,
    entry_type: Optional[JournalEntryType] = None,
    search: Optional[str] = None,
    start: Optional[date] = None,
    end: Optional[date] = None,
    newest_first: bool = True,
) -> List[JournalEntry]:
    """Apply every given filter; ``start``/``end`` are inclusive calendar days."""
    result = list(entries)
    if mood:
        wanted = mood.lower()
        result = [e for e in result if (e.mood or "").lower() == wanted]
    if entry_type is not None:
        result = [e for e in result if e.entry_type is entry_type]
    if search:
        needle = search.lower()
        result = [
            e
            for e in result
            if needle in e.text.lower() or needle in (e.ai_feedback or "").lower()
        ]
    if start is not None:
        lower = start_of_day(start)
        result = [e for e in result if e.date >= lower]
    if end is not None:
        upper = start_of_day(end)
        result = [e for e in result if start_of_day(e.date) <= upper]
    return sort_entries(result, newest_first)


def entries_on(entries: Iterable[JournalEntry], day: date | datetime) -> List[JournalEntry]:
    target = start_of_day(day)
    return [e for e in entries if start_of_day(e.date) == target]
