from __future__ import annotations

from typing import Optional

from ..common.validators import optional_date, optional_id, require_non_empty
from ..core.enums import TaskStatus
from ..core.exceptions import NotFoundError, ValidationError
from .model import Task, TaskBoard, TaskFilter
from .repository import TaskRepository


def parse_status(value: Optional[str]) -> TaskStatus:
    try:
        return TaskStatus((value or "").strip())
    except ValueError:
        raise ValidationError("Invalid task status")


class TaskService:
    """Use cases: task board and task CRUD."""

    def __init__(self, tasks: TaskRepository):
        self._tasks = tasks

    def board(self, *, assigned_to: Optional[int] = None, created_by: Optional[int] = None) -> TaskBoard:
        board = TaskBoard()
        for task in self._tasks.list_tasks(TaskFilter(assigned_to=assigned_to, created_by=created_by)):
            board.column(task.status).append(task)
        return board

    def get_task(self, task_id: int) -> Task:
        task = self._tasks.get_by_id(int(task_id))
        if not task:
            raise NotFoundError("Task not found")
        return task

    def create_task(
        self,
        *,
        title: str,
        description: str = "",
        assigned_to=None,
        deadline: Optional[str] = None,
        created_by: Optional[int] = None,
    ) -> int:
        title = require_non_empty(title)
        return self._tasks.create(
            title=title,
            description=(description or "").strip(),
            status=TaskStatus.TODO,
            assigned_to=optional_id(assigned_to),
            created_by=created_by,
            deadline=optional_date(deadline, "Deadline"),
        )

    def update_task(
        self,
        *,
        task_id: int,
        title: str,
        description: str = "",
        assigned_to=None,
        deadline: Optional[str] = None,
    ) -> None:
        self.get_task(task_id)
        title = require_non_empty(title)
        self._tasks.update(
            task_id=int(task_id),
            title=title,
            description=(description or "").strip(),
            assigned_to=optional_id(assigned_to),
            deadline=optional_date(deadline, "Deadline"),
        )

    def change_status(self, *, task_id: int, status: str) -> TaskStatus:
        new_status = parse_status(status)
        self.get_task(task_id)
        self._tasks.update_status(int(task_id), new_status)
        return new_status

    def delete_task(self, task_id: int) -> None:
        self._tasks.delete(int(task_id))
