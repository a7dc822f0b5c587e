from datetime import datetime, timedelta

import pytest

from adaptive_planner.tasks import Task, TaskEnergyLevel, TaskPriority, prioritize_tasks
from adaptive_planner.tasks.prioritization import (
    deadline_score,
    energy_fit_score,
    mood_compatibility_score,
    score_task,
)

NOW = datetime(2025, 4, 1, 9, 0)


def make_task(task_id, deadline, priority=TaskPriority.MEDIUM, energy=TaskEnergyLevel.MEDIUM, done=False):
    return Task(
        id=task_id,
        user_id="u",
        title=f"task {task_id}",
        deadline=deadline,
        priority=priority,
        category="Work",
        required_energy=energy,
        is_completed=done,
    )


@pytest.mark.parametrize(
    "delta, expected",
    [
        (timedelta(hours=-30), 1.0),
        (timedelta(hours=20), 1.0),
        (timedelta(days=3, hours=1), 0.8),
        (timedelta(days=6), 0.5),
        (timedelta(days=10), 0.2),
    ],
)
def test_deadline_score(delta, expected):
    assert deadline_score(NOW + delta, NOW) == expected


def test_energy_fit_score():
    assert energy_fit_score(TaskEnergyLevel.HIGH, "high") == 1.0
    assert energy_fit_score(TaskEnergyLevel.MEDIUM, "low") == 0.5
    assert energy_fit_score(TaskEnergyLevel.HIGH, "low") == 0.1
    # missing user energy counts as medium
    assert energy_fit_score(TaskEnergyLevel.MEDIUM, None) == 1.0


def test_mood_compatibility_score():
    assert mood_compatibility_score(TaskEnergyLevel.LOW, "Stressed") == 0.8
    assert mood_compatibility_score(TaskEnergyLevel.HIGH, "happy") == 0.9
    assert mood_compatibility_score(TaskEnergyLevel.MEDIUM, None) == 0.7
    assert mood_compatibility_score(TaskEnergyLevel.LOW, "bored") == 0.6


def test_score_task_weights():
    task = make_task(1, NOW + timedelta(days=10), TaskPriority.HIGH, TaskEnergyLevel.HIGH)
    expected = 1.0 * 0.3 + 0.2 * 0.4 + 1.0 * 0.2 + 0.9 * 0.1
    assert score_task(task, "happy", "high", NOW) == pytest.approx(expected)


def test_completed_tasks_sink_to_the_end():
    done = make_task(1, NOW, TaskPriority.HIGH, done=True)
    open_task = make_task(2, NOW + timedelta(days=30), TaskPriority.LOW)

    assert score_task(done, None, None, NOW) == -1.0
    assert [t.id for t in prioritize_tasks([done, open_task], now=NOW)] == [2, 1]


def test_low_energy_prefers_easy_tasks():
    hard = make_task(1, NOW + timedelta(days=5), energy=TaskEnergyLevel.HIGH)
    easy = make_task(2, NOW + timedelta(days=5), energy=TaskEnergyLevel.LOW)

    ordered = prioritize_tasks([hard, easy], mood="sad", energy_level="low", now=NOW)
    assert [t.id for t in ordered] == [2, 1]

    ordered = prioritize_tasks([easy, hard], mood="energetic", energy_level="high", now=NOW)
    assert [t.id for t in ordered] == [1, 2]


def test_prioritize_returns_new_list():
    tasks = [make_task(1, NOW + timedelta(days=9)), make_task(2, NOW)]
    ordered = prioritize_tasks(tasks, now=NOW)
    assert [t.id for t in ordered] == [2, 1]
    assert [t.id for t in tasks] == [1, 2]
