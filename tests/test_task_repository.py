from datetime import datetime, timedelta, timezone

from adaptive_planner.core.database import UNSET
from adaptive_planner.tasks import (
    Subtask,
    TaskCompletionFilter,
    TaskEnergyLevel,
    TaskPriority,
    TaskRepository,
    filter_tasks,
)
from adaptive_planner.tasks.filters import empty_list_message, tasks_due_on, tasks_due_within


def make_repo(tmp_path) -> TaskRepository:
    return TaskRepository(db_path=tmp_path / "tasks.db")


def test_task_repository_crud_cycle(tmp_path):
    repo = make_repo(tmp_path)
    deadline = datetime(2025, 12, 1, 17, 0)

    created = repo.create(
        user_id="alice",
        title="Write report",
        deadline=deadline,
        priority=TaskPriority.HIGH,
        category="Work",
        required_energy=TaskEnergyLevel.HIGH,
        description="Quarterly numbers",
    )
    assert created.title == "Write report"
    assert created.priority is TaskPriority.HIGH
    assert created.deadline == deadline
    assert created.is_completed is False
    assert created.completed_at is None

    assert [t.id for t in repo.list("alice")] == [created.id]
    assert repo.list("bob") == []

    updated = repo.update(created.id, is_completed=True, description="Sent")
    assert updated.is_completed is True
    assert updated.completed_at is not None
    assert updated.description == "Sent"

    reopened = repo.update(created.id, is_completed=False)
    assert reopened.completed_at is None

    assert repo.delete(created.id) is True
    assert repo.delete(created.id) is False
    assert repo.list("alice") == []


def test_update_description_unset_versus_none(tmp_path):
    """UNSET keeps the description, None clears it"""
    repo = make_repo(tmp_path)
    task = repo.create("alice", "Read", datetime(2025, 5, 1), description="Chapter 3")

    kept = repo.update(task.id, title="Read more", description=UNSET)
    assert kept.title == "Read more"
    assert kept.description == "Chapter 3"

    cleared = repo.update(task.id, description=None)
    assert cleared.description is None


def test_get_checks_owner(tmp_path):
    repo = make_repo(tmp_path)
    task = repo.create("alice", "Private", datetime(2025, 5, 1))

    assert repo.get(task.id, "alice") is not None
    assert repo.get(task.id, "mallory") is None
    assert repo.get(task.id) is not None


def test_subtask_operations(tmp_path):
    repo = make_repo(tmp_path)
    task = repo.create(
        "alice",
        "Move house",
        datetime(2025, 6, 1),
        subtasks=[Subtask.new("Book van", 0)],
    )

    task = repo.add_subtasks(task.id, ["Pack boxes", "  ", "Clean flat"])
    assert [s.title for s in task.subtasks] == ["Book van", "Pack boxes", "Clean flat"]
    assert [s.order for s in task.subtasks] == [0, 1, 2]

    van = task.subtasks[0]
    task = repo.toggle_subtask(task.id, van.id)
    assert task.subtasks[0].is_completed is True
    assert task.completed_subtask_count == 1

    task = repo.rename_subtask(task.id, van.id, "Book a bigger van")
    assert task.subtasks[0].title == "Book a bigger van"

    task = repo.delete_subtask(task.id, van.id)
    assert [s.title for s in task.subtasks] == ["Pack boxes", "Clean flat"]

    # unknown subtask leaves the task untouched
    unchanged = repo.toggle_subtask(task.id, "missing")
    assert [s.is_completed for s in unchanged.subtasks] == [False, False]


def test_rename_category_moves_only_that_users_tasks(tmp_path):
    repo = make_repo(tmp_path)
    repo.create("alice", "A", datetime(2025, 1, 1), category="Garden")
    repo.create("alice", "B", datetime(2025, 1, 2), category="Garden")
    repo.create("bob", "C", datetime(2025, 1, 3), category="Garden")

    assert repo.rename_category("alice", "Garden", "Outdoor") == 2
    assert {t.category for t in repo.list("alice")} == {"Outdoor"}
    assert repo.list("bob")[0].category == "Garden"


def test_delete_all_for_user(tmp_path):
    repo = make_repo(tmp_path)
    repo.create("alice", "A", datetime(2025, 1, 1))
    repo.create("alice", "B", datetime(2025, 1, 2))
    repo.create("bob", "C", datetime(2025, 1, 3))

    assert repo.delete_all_for_user("alice") == 2
    assert repo.list("alice") == []
    assert len(repo.list("bob")) == 1


def test_filter_tasks_orders_incomplete_first(tmp_path):
    repo = make_repo(tmp_path)
    now = datetime(2025, 3, 10, 12, 0)
    done = repo.create("u", "Done", now - timedelta(days=5), category="Work", is_completed=True)
    overdue = repo.create("u", "Late", now - timedelta(days=1), category="Work")
    later = repo.create("u", "Later", now + timedelta(days=3), category="Study")

    tasks = repo.list("u")
    assert [t.id for t in filter_tasks(tasks, now=now)] == [overdue.id, later.id, done.id]
    assert [t.id for t in filter_tasks(tasks, category="Work", now=now)] == [overdue.id, done.id]
    assert [t.id for t in filter_tasks(tasks, completion=TaskCompletionFilter.COMPLETED)] == [done.id]
    assert [
        t.id for t in filter_tasks(tasks, completion=TaskCompletionFilter.OVERDUE, now=now)
    ] == [overdue.id]


def test_empty_list_message():
    assert empty_list_message(None, TaskCompletionFilter.ALL).startswith("No tasks yet")
    assert empty_list_message("Work", TaskCompletionFilter.ALL) == "No tasks match your current filters."


def test_due_helpers(tmp_path):
    repo = make_repo(tmp_path)
    now = datetime(2025, 3, 10, 8, 0)
    repo.create("u", "Today", datetime(2025, 3, 10, 18, 0))
    repo.create("u", "Day after tomorrow", datetime(2025, 3, 12, 23, 0))
    repo.create("u", "Next week", datetime(2025, 3, 17, 9, 0))
    repo.create("u", "Done today", datetime(2025, 3, 10, 9, 0), is_completed=True)

    tasks = repo.list("u")
    assert [t.title for t in tasks_due_on(tasks, now.date())] == ["Today"]
    assert len(tasks_due_on(tasks, now.date(), include_completed=True)) == 2
    assert [t.title for t in tasks_due_within(tasks, 2, now)] == ["Today", "Day after tomorrow"]


def test_partial_row_gets_document_defaults(tmp_path):
    """A hand-written row with empty or garbage columns still loads"""
    repo = make_repo(tmp_path)
    with repo._connect() as conn:
        cursor = conn.execute(
            """
            INSERT INTO tasks (user_id, title, deadline, priority, category, required_energy,
                               subtasks_json, created_at, updated_at)
            VALUES ('alice', '', 'not a date', 'urgent', '', 'extreme', '', 'x', 'x')
            """
        )
        conn.commit()
        task_id = cursor.lastrowid

    before = datetime.now()
    task = repo.get(task_id)
    after = datetime.now()

    assert task.title == "Untitled"
    assert task.category == "personal"
    assert task.priority is TaskPriority.HIGH
    assert task.required_energy is TaskEnergyLevel.HIGH
    assert task.subtasks == []
    assert task.is_completed is False
    assert before + timedelta(days=7) <= task.deadline <= after + timedelta(days=7)


def test_aware_deadline_is_stored_as_local_time(tmp_path):
    repo = make_repo(tmp_path)
    aware = datetime(2030, 6, 1, 12, 0, tzinfo=timezone(timedelta(hours=2)))

    task = repo.create("alice", "Call", aware)
    assert task.deadline.tzinfo is None
    assert task.deadline == aware.astimezone().replace(tzinfo=None)

    moved = repo.update(task.id, deadline=datetime(2030, 6, 2, tzinfo=timezone.utc))
    assert moved.deadline.tzinfo is None
    assert not moved.is_overdue(datetime.now())
