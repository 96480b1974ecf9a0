from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional

from ..core.enums import Direction


@dataclass(frozen=True)
class AttendanceEvent:
    """Domain entity: one scan. Immutable once recorded."""

    employee_id: int
    time: datetime
    direction: Direction
    log_id: Optional[int] = None


@dataclass(frozen=True)
class AttendanceLogRow:
    """Read-model for the log page, analytics and reports (log joined with employee/department)."""

    log_id: int
    employee_id: int
    employee_name: str
    department_id: Optional[int]
    department_name: Optional[str]
    time: datetime
    direction: Direction

    def to_event(self) -> AttendanceEvent:
        return AttendanceEvent(
            employee_id=self.employee_id,
            time=self.time,
            direction=self.direction,
            log_id=self.log_id,
        )


@dataclass(frozen=True)
class LogFilter:
    """Inclusive date range plus optional employee/department scope."""

    date_from: Optional[date] = None
    date_to: Optional[date] = None
    employee_id: Optional[int] = None
    department_id: Optional[int] = None


@dataclass(frozen=True)
class DepartmentAttendanceStats:
    department_id: int
    name: str
    employee_count: int
    attendance_count: int
    late_count: int
