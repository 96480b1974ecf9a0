from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Optional

from ..core.enums import TaskStatus


@dataclass(frozen=True)
class Task:
    task_id: int
    title: str
    description: str
    status: TaskStatus
    assigned_to: Optional[int] = None
    created_by: Optional[int] = None
    deadline: Optional[date] = None
    created_at: Optional[datetime] = None
    # Joined for display only.
    assigned_to_name: Optional[str] = None
    created_by_name: Optional[str] = None


@dataclass(frozen=True)
class TaskFilter:
    status: Optional[TaskStatus] = None
    assigned_to: Optional[int] = None
    created_by: Optional[int] = None


@dataclass(frozen=True)
class TaskBoard:
    """Tasks grouped into the three board columns."""

    todo: list[Task] = field(default_factory=list)
    in_progress: list[Task] = field(default_factory=list)
    done: list[Task] = field(default_factory=list)

    def column(self, status: TaskStatus) -> list[Task]:
        return {
            TaskStatus.TODO: self.todo,
            TaskStatus.IN_PROGRESS: self.in_progress,
            TaskStatus.DONE: self.done,
        }[status]
