from __future__ import annotations

from typing import Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import as_datetime, db_cursor, fetchall, fetchone
from .model import Employee
from .repository import EmployeeRepository

_SELECT = """
    SELECT e.id, e.name, e.department_id, e.qr_code, e.photo, e.created_at,
           d.name AS department_name
    FROM employees e
    LEFT JOIN departments d ON d.id = e.department_id
"""


def _to_employee(r: dict) -> Employee:
    return Employee(
        employee_id=int(r["id"]),
        name=r["name"],
        department_id=int(r["department_id"]) if r.get("department_id") is not None else None,
        qr_code=r["qr_code"],
        photo=r.get("photo"),
        created_at=as_datetime(r.get("created_at")),
        department_name=r.get("department_name"),
    )


class MySQLEmployeeRepository(EmployeeRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_all(self) -> Sequence[Employee]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(_SELECT + " ORDER BY e.name ASC")
            return [_to_employee(r) for r in fetchall(cur)]

    def list_by_department(self, department_id: int) -> Sequence[Employee]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(_SELECT + " WHERE e.department_id=%s ORDER BY e.name ASC", (int(department_id),))
            return [_to_employee(r) for r in fetchall(cur)]

    def get_by_id(self, employee_id: int) -> Optional[Employee]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(_SELECT + " WHERE e.id=%s", (int(employee_id),))
            r = fetchone(cur)
            return _to_employee(r) if r else None

    def get_by_qr_code(self, qr_code: str) -> Optional[Employee]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(_SELECT + " WHERE e.qr_code=%s", (qr_code,))
            r = fetchone(cur)
            return _to_employee(r) if r else None

    def qr_code_exists(self, qr_code: str) -> bool:
        with db_cursor(self._conn_factory, dictionary=False) as (_, cur):
            cur.execute("SELECT 1 FROM employees WHERE qr_code=%s LIMIT 1", (qr_code,))
            return cur.fetchone() is not None

    def create(self, *, name: str, department_id: int, qr_code: str, photo: Optional[str] = None) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO employees(name, department_id, qr_code, photo, created_at)
                VALUES(%s,%s,%s,%s,NOW())
                """,
                (name, int(department_id), qr_code, photo),
            )
            return int(cur.lastrowid)

    def update(
        self,
        *,
        employee_id: int,
        name: str,
        department_id: int,
        photo: Optional[str] = None,
    ) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE employees
                SET name=%s, department_id=%s, photo=COALESCE(%s, photo), updated_at=NOW()
                WHERE id=%s
                """,
                (name, int(department_id), photo, int(employee_id)),
            )
            return cur.rowcount > 0

    def delete(self, employee_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM employees WHERE id=%s", (int(employee_id),))
            return cur.rowcount > 0

    def count(self) -> int:
        with db_cursor(self._conn_factory, dictionary=False) as (_, cur):
            cur.execute("SELECT COUNT(*) FROM employees")
            return int(cur.fetchone()[0])
