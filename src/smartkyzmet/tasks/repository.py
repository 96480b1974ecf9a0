from __future__ import annotations

from datetime import date
from typing import Optional, Protocol, Sequence

from ..core.enums import TaskStatus
from .model import Task, TaskFilter


class TaskRepository(Protocol):
    def list_tasks(self, filters: TaskFilter) -> Sequence[Task]:
        raise NotImplementedError

    def get_by_id(self, task_id: int) -> Optional[Task]:
        raise NotImplementedError

    def create(
        self,
        *,
        title: str,
        description: str,
        status: TaskStatus,
        assigned_to: Optional[int],
        created_by: Optional[int],
        deadline: Optional[date],
    ) -> int:
        raise NotImplementedError

    def update(
        self,
        *,
        task_id: int,
        title: str,
        description: str,
        assigned_to: Optional[int],
        deadline: Optional[date],
    ) -> bool:
        raise NotImplementedError

    def update_status(self, task_id: int, status: TaskStatus) -> bool:
        raise NotImplementedError

    def delete(self, task_id: int) -> bool:
        raise NotImplementedError
