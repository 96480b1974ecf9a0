from __future__ import annotations

from datetime import date
from typing import Optional, Sequence

from ..core.enums import TaskStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import as_date, as_datetime, build_where, db_cursor, fetchall, fetchone
from .model import Task, TaskFilter
from .repository import TaskRepository

_SELECT = """
    SELECT t.id, t.title, t.description, t.status, t.assigned_to, t.created_by,
           t.deadline, t.created_at,
           e1.name AS assigned_to_name,
           COALESCE(e2.name, u.username) AS created_by_name
    FROM tasks t
    LEFT JOIN employees e1 ON e1.id = t.assigned_to
    LEFT JOIN users u ON u.id = t.created_by
    LEFT JOIN employees e2 ON e2.id = u.employee_id
"""


def _to_task(r: dict) -> Task:
    return Task(
        task_id=int(r["id"]),
        title=r["title"],
        description=r.get("description") or "",
        status=TaskStatus(r["status"]),
        assigned_to=int(r["assigned_to"]) if r.get("assigned_to") is not None else None,
        created_by=int(r["created_by"]) if r.get("created_by") is not None else None,
        deadline=as_date(r.get("deadline")),
        created_at=as_datetime(r.get("created_at")),
        assigned_to_name=r.get("assigned_to_name"),
        created_by_name=r.get("created_by_name"),
    )


class MySQLTaskRepository(TaskRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_tasks(self, filters: TaskFilter) -> Sequence[Task]:
        where, params = build_where(
            [
                ("t.status=%s", filters.status.value if filters.status else None),
                ("t.assigned_to=%s", filters.assigned_to),
                ("t.created_by=%s", filters.created_by),
            ]
        )
        with db_cursor(self._conn_factory) as (_, cur):
            # Tasks without a deadline go last.
            cur.execute(
                f"{_SELECT} WHERE {where} ORDER BY t.deadline IS NULL, t.deadline ASC, t.id ASC",
                tuple(params),
            )
            return [_to_task(r) for r in fetchall(cur)]

    def get_by_id(self, task_id: int) -> Optional[Task]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"{_SELECT} WHERE t.id=%s", (int(task_id),))
            r = fetchone(cur)
            return _to_task(r) if r else None

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
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO tasks(title, description, status, assigned_to, created_by, deadline)
                VALUES(%s,%s,%s,%s,%s,%s)
                """,
                (title, description, status.value, assigned_to, created_by, deadline),
            )
            return int(cur.lastrowid)

    def update(
        self,
        *,
        task_id: int,
        title: str,
        description: str,
        assigned_to: Optional[int],
        deadline: Optional[date],
    ) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE tasks
                SET title=%s, description=%s, assigned_to=%s, deadline=%s, updated_at=NOW()
                WHERE id=%s
                """,
                (title, description, assigned_to, deadline, int(task_id)),
            )
            return cur.rowcount > 0

    def update_status(self, task_id: int, status: TaskStatus) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE tasks SET status=%s, updated_at=NOW() WHERE id=%s",
                (status.value, int(task_id)),
            )
            return cur.rowcount > 0

    def delete(self, task_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM tasks WHERE id=%s", (int(task_id),))
            return cur.rowcount > 0
