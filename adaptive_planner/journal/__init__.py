"""Journal entries, AI reflection and sentiment scoring."""

from .analyzer import JournalAnalyzer
from .models import JournalEntry, JournalEntryType
from .repository import JournalRepository
from .service import JournalService

__all__ = [
    "JournalAnalyzer",
    "JournalEntry",
    "JournalEntryType",
    "JournalRepository",
    "JournalService",
]
