"""Mood- and energy-aware task ordering.

Each open task gets a score in [0, 1] from four weighted parts:

- priority (30%): high 1.0, medium 0.6, low 0.3
- deadline urgency (40%): overdue/today 1.0, <=3 days 0.8, <=7 days 0.5, later 0.2
- energy fit (20%): how well the task's energy need matches the user's energy
- mood compatibility (10%): which energy level suits the current mood

Completed tasks score -1 and therefore sink to the end.
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Dict, Iterable, List, Optional

from ..core.dates import whole_days_until
from .models import Task, TaskEnergyLevel, TaskPriority

logger = logging.getLogger(__name__)

PRIORITY_WEIGHT = 0.30
DEADLINE_WEIGHT = 0.40
ENERGY_FIT_WEIGHT = 0.20
MOOD_WEIGHT = 0.10

PRIORITY_SCORES: Dict[TaskPriority, float] = {
    TaskPriority.HIGH: 1.0,
    TaskPriority.MEDIUM: 0.6,
    TaskPriority.LOW: 0.3,
}

_ADJACENT_ENERGY = {
    ("high", "medium"),
    ("medium", "high"),
    ("medium", "low"),
    ("low", "medium"),
}

_MOOD_TABLE: Dict[str, Dict[str, float]] = {
    "stressed": {"low": 0.8, "medium": 0.5, "high": 0.2},
    "sad": {"low": 0.8, "medium": 0.5, "high": 0.2},
    "happy": {"high": 0.9, "medium": 0.6, "low": 0.3},
    "energetic": {"high": 0.9, "medium": 0.6, "low": 0.3},
    "excited": {"high": 0.9, "medium": 0.6, "low": 0.3},
    "angry": {"high": 0.8, "medium": 0.5, "low": 0.3},
}


def deadline_score(deadline: datetime, now: datetime) -> float:
    days = whole_days_until(deadline, now)
    if days <= 0:
        return 1.0
    if days <= 3:
        return 0.8
    if days <= 7:
        return 0.5
    return 0.2


def energy_fit_score(task_energy: TaskEnergyLevel, user_energy: Optional[str]) -> float:
    user_level = (user_energy or "medium").lower()
    task_level = task_energy.value
    if user_level == task_level:
        return 1.0
    if (user_level, task_level) in _ADJACENT_ENERGY:
        return 0.5
    return 0.1


def mood_compatibility_score(task_energy: TaskEnergyLevel, mood: Optional[str]) -> float:
    table = _MOOD_TABLE.get((mood or "neutral").lower())
    if table is None:
        # neutral or unrecognised mood: slight preference for medium effort
        return 0.7 if task_energy is TaskEnergyLevel.MEDIUM else 0.6
    return table[task_energy.value]


def score_task(
    task: Task,
    mood: Optional[str],
    energy_level: Optional[str],
    now: Optional[datetime] = None,
) -> float:
    if task.is_completed:
        return -1.0
    now = now or datetime.now()
    total = (
        PRIORITY_SCORES.get(task.priority, 0.6) * PRIORITY_WEIGHT
        + deadline_score(task.deadline, now) * DEADLINE_WEIGHT
        + energy_fit_score(task.required_energy, energy_level) * ENERGY_FIT_WEIGHT
        + mood_compatibility_score(task.required_energy, mood) * MOOD_WEIGHT
    )
    return min(max(total, 0.0), 1.0)


def prioritize_tasks(
    tasks: Iterable[Task],
    mood: Optional[str] = None,
    energy_level: Optional[str] = None,
    now: Optional[datetime] = None,
) -> List[Task]:
    """Return a new list, best task to work on now first."""
    now = now or datetime.now()
    items = list(tasks)
    scores = {id(t): score_task(t, mood, energy_level, now) for t in items}
    ordered = sorted(items, key=lambda t: scores[id(t)], reverse=True)
    logger.info(
        "Prioritized %d tasks (mood=%s, energy=%s), top: %s",
        len(ordered),
        mood,
        energy_level,
        ordered[0].title if ordered else None,
    )
    return ordered
