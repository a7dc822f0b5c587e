"""Journal repository, analyzer and service"""

from datetime import date, datetime, timedelta
from unittest.mock import MagicMock

import pytest

from adaptive_planner.core.exceptions import AuthenticationError, NotFoundError, ValidationError
from adaptive_planner.journal import (
    JournalAnalyzer,
    JournalEntryType,
    JournalRepository,
    JournalService,
)
from adaptive_planner.journal.analyzer import ERROR_FEEDBACK
from adaptive_planner.journal.filters import entries_on, filter_entries
from adaptive_planner.journal.models import ERROR_MOOD, MOOD_CHECK_IN_TEXT


@pytest.fixture
def repo(tmp_path):
    return JournalRepository(db_path=tmp_path / "journal.db")


@pytest.fixture
def mock_client():
    client = MagicMock()
    client.chat.return_value = {
        "mood": "Positive",
        "feedback": "Sounds like a great day.",
        "actionableSteps": ["Keep a gratitude list", "Go for a walk"],
    }
    return client


@pytest.fixture
def service(repo, mock_client):
    return JournalService(repo, JournalAnalyzer(mock_client))


def test_analyzer_returns_model_payload(mock_client):
    analyzer = JournalAnalyzer(mock_client)

    result = analyzer.analyze_journal_entry("I finished my thesis!")

    assert result["mood"] == "Positive"
    assert result["actionableSteps"] == ["Keep a gratitude list", "Go for a walk"]
    messages = mock_client.chat.call_args[0][0]
    assert messages[0]["role"] == "system"
    assert messages[1] == {"role": "user", "content": "I finished my thesis!"}
    assert mock_client.chat.call_args[1]["return_json"] is True


def test_analyzer_fills_missing_keys():
    client = MagicMock()
    client.chat.return_value = '```json\n{"actionableSteps": "not a list"}\n```'

    result = JournalAnalyzer(client).analyze_journal_entry("meh")

    assert result == {"mood": "Neutral", "feedback": "Thank you for sharing.", "actionableSteps": []}


def test_analyzer_errors_become_error_analysis():
    client = MagicMock()
    client.chat.side_effect = ConnectionError("offline")
    analyzer = JournalAnalyzer(client)

    result = analyzer.analyze_journal_entry("hello")

    assert result["mood"] == ERROR_MOOD
    assert result["feedback"] == ERROR_FEEDBACK
    assert analyzer.test_connection() is False
    assert JournalAnalyzer().analyze_journal_entry("x")["mood"] == ERROR_MOOD


def test_add_entry_attaches_analysis(service, repo):
    entry = service.add_entry("alice", "  Great run this morning  ")

    assert entry.text == "Great run this morning"
    assert entry.mood == "Positive"
    assert entry.ai_feedback == "Sounds like a great day."
    assert entry.actionable_steps == ["Keep a gratitude list", "Go for a walk"]
    assert entry.entry_type is JournalEntryType.FULL
    assert repo.get(entry.id, "alice").has_analysis


def test_add_entry_is_saved_even_when_analysis_fails(repo):
    client = MagicMock()
    client.chat.side_effect = TimeoutError("slow")
    service = JournalService(repo, JournalAnalyzer(client))

    entry = service.add_entry("alice", "Rainy day")

    assert entry.mood == ERROR_MOOD
    assert entry.ai_feedback == "Could not analyze entry at this time."
    assert entry.actionable_steps == []
    assert len(repo.list("alice")) == 1


def test_add_entry_validation(service):
    with pytest.raises(AuthenticationError):
        service.add_entry("", "text")
    with pytest.raises(ValidationError):
        service.add_entry("alice", "   ")


def test_update_entry_reanalyzes(service, mock_client):
    entry = service.add_entry("alice", "First draft")
    mock_client.chat.return_value = {"mood": "Mixed", "feedback": "Ups and downs.", "actionableSteps": []}

    updated = service.update_entry(entry.id, "Second thoughts", "alice")

    assert updated.text == "Second thoughts"
    assert updated.mood == "Mixed"
    assert updated.ai_feedback == "Ups and downs."


def test_update_entry_failure_feedback(service, mock_client):
    entry = service.add_entry("alice", "First draft")
    mock_client.chat.side_effect = RuntimeError("boom")

    updated = service.update_entry(entry.id, "Edited", "alice")

    assert updated.mood == ERROR_MOOD
    assert updated.ai_feedback == "Could not re-analyze entry."


def test_update_entry_of_other_user_is_not_found(service):
    entry = service.add_entry("alice", "Mine")
    with pytest.raises(NotFoundError):
        service.update_entry(entry.id, "Yours now", "bob")


def test_mood_check_in_entries(service, mock_client):
    entry = service.add_mood_check_in("alice", "Calm")

    assert entry.text == MOOD_CHECK_IN_TEXT
    assert entry.mood == "Calm"
    assert entry.is_mood_check_in
    mock_client.chat.assert_not_called()
    assert service.latest_mood_for_today("alice") == "Calm"
    assert service.latest_mood_for_today("bob") is None


def test_latest_mood_check_in_ignores_other_days(service, repo):
    yesterday = datetime.now() - timedelta(days=1)
    service.add_mood_check_in("alice", "Tired", now=yesterday)

    assert repo.latest_mood_check_in("alice") is None
    assert repo.latest_mood_check_in("alice", yesterday.date()).mood == "Tired"


def test_list_is_newest_first_and_recent_limits(repo):
    for day in range(1, 4):
        repo.create("alice", f"day {day}", entry_date=datetime(2025, 1, day, 20, 0))

    assert [e.text for e in repo.list("alice")] == ["day 3", "day 2", "day 1"]
    assert [e.text for e in repo.recent("alice", 2)] == ["day 3", "day 2"]


def test_filter_entries(repo):
    repo.create("u", "Went hiking", entry_date=datetime(2025, 2, 1, 9), mood="Positive")
    repo.create("u", "Missed the bus", entry_date=datetime(2025, 2, 2, 9), mood="Negative")
    repo.create(
        "u",
        MOOD_CHECK_IN_TEXT,
        entry_date=datetime(2025, 2, 3, 9),
        entry_type=JournalEntryType.MOOD_CHECK_IN,
        mood="Calm",
    )
    entries = repo.list("u")

    assert [e.text for e in filter_entries(entries, mood="positive")] == ["Went hiking"]
    assert len(filter_entries(entries, entry_type=JournalEntryType.MOOD_CHECK_IN)) == 1
    assert [e.text for e in filter_entries(entries, search="BUS")] == ["Missed the bus"]
    ranged = filter_entries(entries, start=date(2025, 2, 1), end=date(2025, 2, 2), newest_first=False)
    assert [e.text for e in ranged] == ["Went hiking", "Missed the bus"]
    assert [e.text for e in entries_on(entries, date(2025, 2, 2))] == ["Missed the bus"]
