from __future__ import annotations

from datetime import date, datetime
from typing import Optional, Protocol, Sequence

from ..core.enums import Direction
from .model import AttendanceEvent, AttendanceLogRow, DepartmentAttendanceStats, LogFilter


class AttendanceRepository(Protocol):
    def log_event(self, *, employee_id: int, time: datetime, direction: Direction) -> int:
        raise NotImplementedError

    def get_last_event(self, employee_id: int) -> Optional[AttendanceEvent]:
        raise NotImplementedError

    def list_logs(
        self,
        filters: LogFilter,
        *,
        newest_first: bool = True,
        limit: Optional[int] = None,
    ) -> Sequence[AttendanceLogRow]:
        raise NotImplementedError

    def department_statistics(self, *, date_from: date, date_to: date) -> Sequence[DepartmentAttendanceStats]:
        raise NotImplementedError
