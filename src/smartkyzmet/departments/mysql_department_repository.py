from __future__ import annotations

from typing import Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import as_datetime, db_cursor, fetchall, fetchone
from .model import Department
from .repository import DepartmentRepository


def _to_department(r: dict) -> Department:
    return Department(
        department_id=int(r["id"]),
        name=r["name"],
        created_at=as_datetime(r.get("created_at")),
        employee_count=int(r.get("employee_count") or 0),
    )


class MySQLDepartmentRepository(DepartmentRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_all(self) -> Sequence[Department]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT id, name, created_at FROM departments ORDER BY name ASC")
            return [_to_department(r) for r in fetchall(cur)]

    def list_with_employee_count(self) -> Sequence[Department]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT d.id, d.name, d.created_at, COUNT(e.id) AS employee_count
                FROM departments d
                LEFT JOIN employees e ON e.department_id = d.id
                GROUP BY d.id, d.name, d.created_at
                ORDER BY d.name ASC
                """
            )
            return [_to_department(r) for r in fetchall(cur)]

    def get_by_id(self, department_id: int) -> Optional[Department]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT id, name, created_at FROM departments WHERE id=%s", (int(department_id),))
            r = fetchone(cur)
            return _to_department(r) if r else None

    def create(self, *, name: str) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("INSERT INTO departments(name, created_at) VALUES(%s, NOW())", (name,))
            return int(cur.lastrowid)

    def update(self, *, department_id: int, name: str) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE departments SET name=%s, updated_at=NOW() WHERE id=%s",
                (name, int(department_id)),
            )
            return cur.rowcount > 0

    def delete(self, department_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM departments WHERE id=%s", (int(department_id),))
            return cur.rowcount > 0

    def count(self) -> int:
        with db_cursor(self._conn_factory, dictionary=False) as (_, cur):
            cur.execute("SELECT COUNT(*) FROM departments")
            return int(cur.fetchone()[0])

    def count_employees(self, department_id: int) -> int:
        with db_cursor(self._conn_factory, dictionary=False) as (_, cur):
            cur.execute("SELECT COUNT(*) FROM employees WHERE department_id=%s", (int(department_id),))
            return int(cur.fetchone()[0])
