from __future__ import annotations

from datetime import date, datetime
from typing import Optional, Sequence

from ..core.constants import WORKDAY_START
from ..core.enums import Direction
from ..database.connection import DatabaseConnection
from ..database.mysql_base import as_datetime, build_where, db_cursor, fetchall, fetchone
from .model import AttendanceEvent, AttendanceLogRow, DepartmentAttendanceStats, LogFilter
from .repository import AttendanceRepository


class MySQLAttendanceRepository(AttendanceRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def log_event(self, *, employee_id: int, time: datetime, direction: Direction) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "INSERT INTO attendance_logs(employee_id, time, type) VALUES(%s,%s,%s)",
                (int(employee_id), time, direction.value),
            )
            return int(cur.lastrowid)

    def get_last_event(self, employee_id: int) -> Optional[AttendanceEvent]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT id, employee_id, time, type
                FROM attendance_logs
                WHERE employee_id=%s
                ORDER BY time DESC, id DESC
                LIMIT 1
                """,
                (int(employee_id),),
            )
            r = fetchone(cur)
            if not r:
                return None
            return AttendanceEvent(
                employee_id=int(r["employee_id"]),
                time=as_datetime(r["time"]),
                direction=Direction(r["type"]),
                log_id=int(r["id"]),
            )

    def list_logs(
        self,
        filters: LogFilter,
        *,
        newest_first: bool = True,
        limit: Optional[int] = None,
    ) -> Sequence[AttendanceLogRow]:
        where, params = build_where(
            [
                ("a.employee_id=%s", filters.employee_id),
                ("e.department_id=%s", filters.department_id),
                ("DATE(a.time) >= %s", filters.date_from),
                ("DATE(a.time) <= %s", filters.date_to),
            ]
        )
        order = "DESC" if newest_first else "ASC"
        sql = f"""
            SELECT a.id, a.employee_id, a.time, a.type,
                   e.name AS employee_name, e.department_id,
                   d.name AS department_name
            FROM attendance_logs a
            JOIN employees e ON e.id = a.employee_id
            LEFT JOIN departments d ON d.id = e.department_id
            WHERE {where}
            ORDER BY a.time {order}, a.id {order}
        """
        if limit is not None:
            sql += " LIMIT %s"
            params.append(int(limit))

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(sql, tuple(params))
            return [
                AttendanceLogRow(
                    log_id=int(r["id"]),
                    employee_id=int(r["employee_id"]),
                    employee_name=r["employee_name"],
                    department_id=int(r["department_id"]) if r.get("department_id") is not None else None,
                    department_name=r.get("department_name"),
                    time=as_datetime(r["time"]),
                    direction=Direction(r["type"]),
                )
                for r in fetchall(cur)
            ]

    def department_statistics(self, *, date_from: date, date_to: date) -> Sequence[DepartmentAttendanceStats]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT d.id, d.name,
                       COUNT(DISTINCT a.employee_id) AS employee_count,
                       COUNT(a.id) AS attendance_count,
                       SUM(CASE WHEN a.type = 'in' AND TIME(a.time) > %s THEN 1 ELSE 0 END) AS late_count
                FROM departments d
                LEFT JOIN employees e ON e.department_id = d.id
                LEFT JOIN attendance_logs a ON a.employee_id = e.id AND DATE(a.time) BETWEEN %s AND %s
                GROUP BY d.id, d.name
                ORDER BY d.name ASC
                """,
                (WORKDAY_START.strftime("%H:%M:59"), date_from, date_to),
            )
            return [
                DepartmentAttendanceStats(
                    department_id=int(r["id"]),
                    name=r["name"],
                    employee_count=int(r.get("employee_count") or 0),
                    attendance_count=int(r.get("attendance_count") or 0),
                    late_count=int(r.get("late_count") or 0),
                )
                for r in fetchall(cur)
            ]
