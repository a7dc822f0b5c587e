"""When is the user most productive?

Completed tasks are scored and averaged per time-of-day bucket and per
weekday. A task's score is::

    1 + energy * 0.5 + mood adjustment + journal sentiment * 0.5 - 1 / difficulty

floored at 0, where energy and difficulty are 1 (low) .. 3 (high).
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Dict, Iterable, List, Optional

from ..tasks.models import Task, TaskEnergyLevel, TaskPriority

logger = logging.getLogger(__name__)

NO_DATA = "No data"


class TimeOfDayRange(str, Enum):
    EARLY_MORNING = "Early Morning"  # 5-8
    MORNING = "Morning"  # 8-11
    MIDDAY = "Midday"  # 11-14
    AFTERNOON = "Afternoon"  # 14-17
    EVENING = "Evening"  # 17-21
    NIGHT = "Night"  # 21-24
    LATE_NIGHT = "Late Night"  # 0-5


WEEKDAYS = ["Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday"]

_LEVEL_VALUE = {"low": 1.0, "medium": 2.0, "high": 3.0}

_MOOD_ADJUSTMENT = {
    "happy": 1.0,
    "energetic": 1.0,
    "neutral": 0.5,
    "stressed": 0.0,
    "sad": 0.0,
}


@dataclass(slots=True)
class CompletedTask:
    task_id: int
    completed_at: datetime
    task_energy_requirement: float
    task_difficulty: float
    mood: str
    journal_sentiment: float


@dataclass(slots=True)
class ProductivityResult:
    best_time_of_day_label: str
    best_time_range: TimeOfDayRange
    best_day_of_week: str
    time_scores: Dict[str, float] = field(default_factory=dict)
    day_scores: Dict[str, float] = field(default_factory=dict)

    def to_dict(self) -> dict:
        return {
            "best_time_of_day_label": self.best_time_of_day_label,
            "best_time_range": self.best_time_range.value,
            "best_day_of_week": self.best_day_of_week,
            "time_scores": dict(self.time_scores),
            "day_scores": dict(self.day_scores),
        }


def mood_adjustment(mood: str) -> float:
    return _MOOD_ADJUSTMENT.get((mood or "").lower(), 0.5)


def productivity_score(task: CompletedTask) -> float:
    score = 1.0
    score += task.task_energy_requirement * 0.5
    score += mood_adjustment(task.mood)
    score += task.journal_sentiment * 0.5
    if task.task_difficulty:
        score -= 1.0 / task.task_difficulty
    return max(score, 0.0)


def time_bucket(moment: datetime) -> TimeOfDayRange:
    hour = moment.hour
    if 5 <= hour < 8:
        return TimeOfDayRange.EARLY_MORNING
    if 8 <= hour < 11:
        return TimeOfDayRange.MORNING
    if 11 <= hour < 14:
        return TimeOfDayRange.MIDDAY
    if 14 <= hour < 17:
        return TimeOfDayRange.AFTERNOON
    if 17 <= hour < 21:
        return TimeOfDayRange.EVENING
    if hour >= 21:
        return TimeOfDayRange.NIGHT
    return TimeOfDayRange.LATE_NIGHT


def _averages(buckets: Dict[str, List[float]]) -> Dict[str, float]:
    return {k: (sum(v) / len(v) if v else 0.0) for k, v in buckets.items()}


def _first_best(scores: Dict[str, float]) -> str:
    best_key, best_value = None, None
    for key, value in scores.items():
        if best_value is None or value > best_value:
            best_key, best_value = key, value
    return best_key


def analyze_productivity(completed: Iterable[CompletedTask]) -> ProductivityResult:
    items = list(completed)
    if not items:
        return ProductivityResult(
            best_time_of_day_label=NO_DATA,
            best_time_range=TimeOfDayRange.EVENING,
            best_day_of_week=NO_DATA,
        )

    time_buckets: Dict[str, List[float]] = {r.value: [] for r in TimeOfDayRange}
    day_buckets: Dict[str, List[float]] = {d: [] for d in WEEKDAYS}
    for task in items:
        score = productivity_score(task)
        time_buckets[time_bucket(task.completed_at).value].append(score)
        day_buckets[WEEKDAYS[task.completed_at.weekday()]].append(score)

    time_scores = _averages(time_buckets)
    day_scores = _averages(day_buckets)
    best_time = _first_best(time_scores)
    result = ProductivityResult(
        best_time_of_day_label=best_time,
        best_time_range=TimeOfDayRange(best_time),
        best_day_of_week=_first_best(day_scores),
        time_scores=time_scores,
        day_scores=day_scores,
    )
    logger.debug(
        "Productivity over %d tasks: best %s / %s",
        len(items),
        result.best_time_of_day_label,
        result.best_day_of_week,
    )
    return result


def completed_tasks_from(
    tasks: Iterable[Task],
    mood: Optional[str],
    journal_sentiment: float,
    now: Optional[datetime] = None,
) -> List[CompletedTask]:
    """Completed tasks as analysis input; tasks without a completion time use ``now``."""
    now = now or datetime.now()
    return [
        CompletedTask(
            task_id=task.id,
            completed_at=task.completed_at or now,
            task_energy_requirement=_LEVEL_VALUE[TaskEnergyLevel(task.required_energy).value],
            task_difficulty=_LEVEL_VALUE[TaskPriority(task.priority).value],
            mood=mood or "neutral",
            journal_sentiment=journal_sentiment,
        )
        for task in tasks
        if task.is_completed
    ]


def completion_stats(tasks: Iterable[Task]) -> Dict[str, float]:
    items = list(tasks)
    total = len(items)
    completed = sum(1 for t in items if t.is_completed)
    return {
        "total": total,
        "completed": completed,
        "remaining": total - completed,
        "completion_percentage": (completed / total * 100.0) if total else 0.0,
    }
