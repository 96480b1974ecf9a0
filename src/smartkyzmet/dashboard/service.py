from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Optional, Sequence

from ..attendance.model import AttendanceLogRow
from ..attendance.service import AttendanceService
from ..core.constants import DEFAULT_RECENT_LIMIT
from ..departments.service import DepartmentService
from ..employees.service import EmployeeService


@dataclass(frozen=True)
class DashboardSummary:
    total_employees: int
    total_departments: int
    today_attendance: Sequence[AttendanceLogRow]
    recent_attendance: Sequence[AttendanceLogRow]


class DashboardService:
    """Counts and recent activity for the landing page."""

    def __init__(
        self,
        employees: EmployeeService,
        departments: DepartmentService,
        attendance: AttendanceService,
        *,
        recent_limit: int = DEFAULT_RECENT_LIMIT,
    ):
        self._employees = employees
        self._departments = departments
        self._attendance = attendance
        self._recent_limit = recent_limit

    def summary(self, *, today: Optional[date] = None) -> DashboardSummary:
        today = today or self._attendance.now().date()
        return DashboardSummary(
            total_employees=self._employees.count(),
            total_departments=self._departments.count(),
            today_attendance=self._attendance.logs_for_day(today),
            recent_attendance=self._attendance.recent_logs(self._recent_limit),
        )
