"""Notification preferences, reminder planning and the reminder scheduler"""

import json
from datetime import datetime, timedelta

import pytest

from adaptive_planner.core.exceptions import ValidationError
from adaptive_planner.notifications import (
    NotificationPreference,
    NotificationPreferenceRepository,
    ReminderScheduler,
    plan_reminders,
)
from adaptive_planner.notifications.planner import (
    TASKS_DUE_TODAY_REMINDER_ID,
    TEST_NOTIFICATION_ID,
    daily_cron,
    next_occurrence,
)
from adaptive_planner.tasks import TaskRepository

MONDAY = datetime(2025, 6, 2, 10, 30)


class FakeClock:
    def __init__(self, now: datetime):
        self.now = now

    def __call__(self) -> datetime:
        return self.now


def test_preference_json_round_keys():
    prefs = NotificationPreference.from_json({"journalHour": 21, "enableMoodCheck": False, "task_due_in_days": 3})
    assert prefs.journal_hour == 21
    assert prefs.enable_mood_check is False
    assert prefs.task_due_in_days == 3
    # untouched keys keep defaults
    assert prefs.mood_check_hour == 12

    data = prefs.to_json()
    assert data["journalHour"] == 21
    assert data["enableMoodCheck"] is False
    assert "journal_hour" not in data


def test_preference_flags_from_strings():
    prefs = NotificationPreference.from_json(
        {"enableNotifications": "false", "enableMoodCheck": "TRUE", "enableDailyJournal": 0, "enableTasksDueIn": "maybe"}
    )
    assert prefs.enable_notifications is False
    assert prefs.enable_mood_check is True
    assert prefs.enable_daily_journal is False
    # unrecognised values keep the default
    assert prefs.enable_tasks_due_in is True


def test_preference_validation():
    with pytest.raises(ValidationError):
        NotificationPreference(journal_hour=24).validate()
    with pytest.raises(ValidationError):
        NotificationPreference(mood_check_minute=60).validate()
    with pytest.raises(ValidationError):
        NotificationPreference(task_due_in_days=0).validate()
    NotificationPreference().validate()


def test_preference_repository(tmp_path):
    repo = NotificationPreferenceRepository(db_path=tmp_path / "notify.db")
    assert repo.get("alice") == NotificationPreference()

    repo.save("alice", NotificationPreference().copy_with(journal_hour=20, enable_tasks_due_in=False))
    stored = repo.get("alice")
    assert stored.journal_hour == 20
    assert stored.enable_tasks_due_in is False

    with repo._connect() as conn:
        conn.execute(
            "UPDATE notification_preferences SET preferences_json = ? WHERE user_id = ?",
            ("{not json", "alice"),
        )
        conn.commit()
    assert repo.get("alice") == NotificationPreference()

    assert repo.delete("alice") == 1


def test_next_occurrence_is_at_or_after_now():
    assert daily_cron(8, 5) == "5 8 * * *"
    assert next_occurrence(12, 0, MONDAY) == datetime(2025, 6, 2, 12, 0)
    assert next_occurrence(10, 30, MONDAY) == MONDAY
    assert next_occurrence(8, 0, MONDAY) == datetime(2025, 6, 3, 8, 0)


def test_plan_reminders_defaults():
    reminders = plan_reminders(NotificationPreference(), MONDAY)

    assert [r.id for r in reminders] == [1, 2, 3, 4]
    journal, mood, today, due_in = reminders
    assert journal.title == "Time to Journal"
    assert journal.next_fire == datetime(2025, 6, 3, 8, 0)
    assert mood.next_fire == datetime(2025, 6, 2, 12, 0)
    assert today.cron == "0 9 * * *"
    assert due_in.body == "Tasks due in 2 days - start planning!"
    assert due_in.next_fire == datetime(2025, 6, 3, 10, 0)


def test_plan_reminders_respects_switches():
    prefs = NotificationPreference(enable_daily_journal=False, enable_tasks_due_in=False)
    assert [r.kind for r in plan_reminders(prefs, MONDAY)] == ["mood_check", "tasks_due_today"]

    assert plan_reminders(NotificationPreference(enable_notifications=False), MONDAY) == []


def test_fire_due_counts_tasks_and_rearms(tmp_path):
    tasks = TaskRepository(db_path=tmp_path / "tasks.db")
    tasks.create("alice", "Pay rent", datetime(2025, 6, 2, 17, 0))
    tasks.create("alice", "Already paid", datetime(2025, 6, 2, 11, 0), is_completed=True)
    clock = FakeClock(datetime(2025, 6, 2, 8, 59))
    scheduler = ReminderScheduler(task_repository=tasks, clock=clock)
    scheduler.reschedule("alice", NotificationPreference(enable_daily_journal=False))

    assert scheduler.fire_due(datetime(2025, 6, 2, 9, 0)) == 1
    messages = scheduler.get_pending("alice")
    assert len(messages) == 1
    assert messages[0]["id"] == TASKS_DUE_TODAY_REMINDER_ID
    assert messages[0]["body"] == "You have 1 task(s) due today"
    assert scheduler.get_pending("alice") == []

    today = next(r for r in scheduler.upcoming("alice") if r.id == TASKS_DUE_TODAY_REMINDER_ID)
    assert today.next_fire == datetime(2025, 6, 3, 9, 0)


def test_fire_due_skips_missed_days():
    scheduler = ReminderScheduler(clock=FakeClock(MONDAY))
    scheduler.reschedule("alice", NotificationPreference())

    later = MONDAY + timedelta(days=3)
    assert scheduler.fire_due(later) == 4
    ids = sorted(m["id"] for m in scheduler.get_pending("alice"))
    assert ids == [1, 2, 3, 4]
    assert all(r.next_fire > later for r in scheduler.upcoming("alice"))


def test_queue_is_bounded_and_cancel_drops_everything():
    scheduler = ReminderScheduler(max_queue_size=2, clock=FakeClock(MONDAY))
    scheduler.reschedule("alice", NotificationPreference())
    for _ in range(3):
        message = scheduler.send_test_notification("alice")
    assert message["id"] == TEST_NOTIFICATION_ID
    assert message["title"] == "Test Notification"
    assert scheduler.get_status()["pending_count"] == 2

    scheduler.cancel("alice")
    assert scheduler.upcoming("alice") == []
    assert scheduler.get_pending("alice") == []


def test_start_stop():
    scheduler = ReminderScheduler(check_interval_seconds=1)
    scheduler.start()
    assert scheduler.is_running() is True
    assert scheduler.get_status()["running"] is True

    scheduler.stop()
    assert scheduler.is_running() is False


def test_stored_json_is_camel_case(tmp_path):
    repo = NotificationPreferenceRepository(db_path=tmp_path / "notify.db")
    repo.save("alice", NotificationPreference(mood_check_hour=15))
    with repo._connect() as conn:
        raw = conn.execute("SELECT preferences_json FROM notification_preferences").fetchone()[0]
    assert json.loads(raw)["moodCheckHour"] == 15
