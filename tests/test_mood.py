from datetime import date, datetime, timedelta

import pytest

from adaptive_planner.journal import JournalEntry
from adaptive_planner.mood import MoodCheckIn, MoodRepository, UserStatus, get_current_mood

NOW = datetime(2025, 5, 20, 18, 0)


@pytest.fixture
def repo(tmp_path):
    return MoodRepository(db_path=tmp_path / "mood.db")


def test_today_and_latest_today(repo):
    repo.add("alice", "Calm", "medium", now=NOW.replace(hour=8))
    repo.add("alice", "Focused", "high", now=NOW.replace(hour=12))
    repo.add("alice", "Sleepy", "low", now=NOW - timedelta(days=1))
    repo.add("bob", "Happy", "high", now=NOW)

    today = repo.today("alice", NOW)
    assert [c.mood for c in today] == ["Calm", "Focused"]
    assert repo.latest_today("alice", NOW).mood == "Focused"
    assert repo.has_mood_today("alice", NOW) is True
    assert repo.has_mood_today("carol", NOW) is False


def test_last_7_days_and_month(repo):
    for offset in (0, 3, 6, 7, 30):
        repo.add("alice", f"m{offset}", "medium", now=NOW - timedelta(days=offset))

    assert [c.mood for c in repo.last_7_days("alice", NOW)] == ["m6", "m3", "m0"]
    assert [c.mood for c in repo.month("alice", date(2025, 5, 1))] == ["m7", "m6", "m3", "m0"]


def test_recent_is_newest_first(repo):
    repo.add("alice", "Old", "low", now=NOW - timedelta(hours=3))
    repo.add("alice", "New", "high", now=NOW)

    assert [c.mood for c in repo.recent("alice", 2)] == ["New", "Old"]
    assert len(repo.recent("alice")) == 1


@pytest.mark.parametrize(
    "offsets, expected",
    [
        ([0, 1, 2, 4], 3),
        ([1, 2], 2),
        ([0, 2], 1),
        ([3], 0),
        ([], 0),
    ],
)
def test_current_streak(repo, offsets, expected):
    for offset in offsets:
        repo.add("alice", "Ok", "medium", now=NOW - timedelta(days=offset))
    assert repo.current_streak("alice", NOW) == expected


def test_user_status_energy_scale():
    assert UserStatus.from_mood_check_in("Happy", "high").current_energy == 9.0
    assert UserStatus.from_mood_check_in("Tired", "LOW").current_energy == 3.0
    status = UserStatus.from_mood_check_in(None, None)
    assert status.current_energy == 5.0
    assert status.mood is None


def make_entry(mood, when):
    return JournalEntry(id=1, user_id="u", text="t", date=when, mood=mood)


def make_check_in(mood, when):
    return MoodCheckIn(id=1, user_id="u", mood=mood, energy_level="medium", date=when)


def test_get_current_mood_prefers_newer_source():
    earlier, later = NOW - timedelta(hours=2), NOW

    assert get_current_mood([], []) is None
    assert get_current_mood([make_entry("Positive", later)], [make_check_in("Sad", earlier)]) == "Positive"
    assert get_current_mood([make_entry("Positive", earlier)], [make_check_in("Sad", later)]) == "Sad"
    # a tie keeps the journal mood
    assert get_current_mood([make_entry("Positive", NOW)], [make_check_in("Calm", NOW)]) == "Positive"
    # entries without a mood are ignored
    assert get_current_mood([make_entry(None, later)], [make_check_in("Calm", earlier)]) == "Calm"
