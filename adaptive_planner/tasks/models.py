from __future__ import annotations

import json
import uuid
from dataclasses import asdict, dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional, Type, TypeVar

E = TypeVar("E", bound=Enum)

NO_CATEGORY = "No Category"
DEFAULT_CATEGORIES = ["Study", "Household", "Wellness", "Work", "Personal"]


class TaskPriority(str, Enum):
    """Urgency/importance of a task."""

    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class TaskEnergyLevel(str, Enum):
    """Effort a task needs; matched against the user's current energy."""

    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


def enum_from_string(enum_cls: Type[E], value: Optional[str]) -> E:
    """Lenient enum lookup: unknown values fall back to the first member."""
    members = list(enum_cls)
    for member in members:
        if member.value == value:
            return member
    return members[0]


@dataclass(slots=True)
class Subtask:
    """A unit of work inside a task; ``order`` may have gaps."""

    id: str
    title: str
    is_completed: bool = False
    order: int = 0

    @classmethod
    def new(cls, title: str, order: int) -> "Subtask":
        return cls(id=uuid.uuid4().hex, title=title, order=order)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Subtask":
        return cls(
            id=data.get("id") or "",
            title=data.get("title") or "",
            is_completed=bool(data.get("is_completed", False)),
            order=int(data.get("order") or 0),
        )

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


def subtasks_to_json(subtasks: List[Subtask]) -> str:
    return json.dumps([s.to_dict() for s in subtasks], ensure_ascii=False)


def subtasks_from_json(raw: Optional[str]) -> List[Subtask]:
    if not raw:
        return []
    return [Subtask.from_dict(item) for item in json.loads(raw)]


@dataclass(slots=True)
class Task:
    """Persisted task."""

    id: int
    user_id: str
    title: str
    deadline: datetime
    priority: TaskPriority
    category: str
    required_energy: TaskEnergyLevel
    description: Optional[str] = None
    is_completed: bool = False
    subtasks: List[Subtask] = field(default_factory=list)
    created_at: str = ""
    updated_at: str = ""
    completed_at: Optional[datetime] = None

    @property
    def completed_subtask_count(self) -> int:
        return sum(1 for s in self.subtasks if s.is_completed)

    def is_overdue(self, now: datetime) -> bool:
        return not self.is_completed and self.deadline < now
