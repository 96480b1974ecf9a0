from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, datetime, tzinfo
from typing import BinaryIO, Optional, Sequence

from ..common.datetime_utils import now_local, to_local
from ..core.enums import Direction
from ..core.exceptions import NotFoundError, ValidationError
from ..departments.repository import DepartmentRepository
from ..employees.model import Employee
from ..employees.qr import decode_qr_image
from ..employees.repository import EmployeeRepository
from .direction import resolve_direction
from .model import AttendanceLogRow, DepartmentAttendanceStats, LogFilter
from .repository import AttendanceRepository

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ScanResult:
    employee: Employee
    department_name: Optional[str]
    direction: Direction
    time: datetime


class AttendanceService:
    def __init__(
        self,
        attendance: AttendanceRepository,
        employees: EmployeeRepository,
        departments: DepartmentRepository,
        *,
        tz: Optional[tzinfo] = None,
    ):
        self._attendance = attendance
        self._employees = employees
        self._departments = departments
        self._tz = tz

    def now(self) -> datetime:
        return now_local(self._tz)

    def scan(self, qr_code: str, *, now: Optional[datetime] = None) -> ScanResult:
        """Record one scan; the direction comes from the employee's previous event."""

        qr_code = (qr_code or "").strip()
        if not qr_code:
            raise ValidationError("QR code is required")

        employee = self._employees.get_by_qr_code(qr_code)
        if not employee:
            raise NotFoundError("No employee with this QR code")

        now = to_local(now, self._tz) if now else self.now()
        last_event = self._attendance.get_last_event(employee.employee_id)
        direction = resolve_direction(last_event, now, tz=self._tz)

        self._attendance.log_event(employee_id=employee.employee_id, time=now, direction=direction)
        logger.info("Scan employee_id=%s direction=%s", employee.employee_id, direction.value)

        department_name = employee.department_name
        if department_name is None and employee.department_id:
            department = self._departments.get_by_id(employee.department_id)
            department_name = department.name if department else None

        return ScanResult(employee=employee, department_name=department_name, direction=direction, time=now)

    def scan_image(self, stream: BinaryIO, *, now: Optional[datetime] = None) -> ScanResult:
        qr_code = decode_qr_image(stream)
        if not qr_code:
            raise ValidationError("No QR code found in the image")
        return self.scan(qr_code, now=now)

    def list_logs(self, filters: LogFilter) -> Sequence[AttendanceLogRow]:
        return self._attendance.list_logs(filters)

    def logs_for_day(self, day: date) -> Sequence[AttendanceLogRow]:
        return self._attendance.list_logs(LogFilter(date_from=day, date_to=day))

    def recent_logs(self, limit: int) -> Sequence[AttendanceLogRow]:
        return self._attendance.list_logs(LogFilter(), limit=limit)

    def department_statistics(self, *, date_from: date, date_to: date) -> Sequence[DepartmentAttendanceStats]:
        return self._attendance.department_statistics(date_from=date_from, date_to=date_to)
