from __future__ import annotations

from datetime import date
from typing import Optional

from ..analytics.classifier import is_late_arrival
from ..attendance.model import LogFilter
from ..attendance.repository import AttendanceRepository
from ..core.enums import Direction, ReportType
from ..core.exceptions import ValidationError
from ..departments.repository import DepartmentRepository
from ..employees.repository import EmployeeRepository
from .model import SpreadsheetReport

ALL_DEPARTMENTS = "All departments"


def parse_report_type(value: Optional[str]) -> ReportType:
    try:
        return ReportType((value or "").strip())
    except ValueError:
        raise ValidationError("Unknown report type")


class ReportService:
    """Use case: build tabular attendance reports for export."""

    def __init__(
        self,
        attendance: AttendanceRepository,
        employees: EmployeeRepository,
        departments: DepartmentRepository,
    ):
        self._attendance = attendance
        self._employees = employees
        self._departments = departments

    def generate(
        self,
        report_type: ReportType,
        *,
        date_from: date,
        date_to: date,
        department_id: Optional[int] = None,
    ) -> SpreadsheetReport:
        if report_type == ReportType.ATTENDANCE:
            return self.attendance_report(date_from=date_from, date_to=date_to, department_id=department_id)
        if report_type == ReportType.EMPLOYEE:
            return self.employee_report(date_from=date_from, date_to=date_to, department_id=department_id)
        if report_type == ReportType.DEPARTMENT:
            return self.department_report(date_from=date_from, date_to=date_to)
        raise ValidationError("Unknown report type")

    def _department_label(self, department_id: Optional[int]) -> str:
        if department_id:
            department = self._departments.get_by_id(int(department_id))
            if department:
                return department.name
        return ALL_DEPARTMENTS

    @staticmethod
    def _period(date_from: date, date_to: date) -> str:
        return f"Period: {date_from:%Y-%m-%d} to {date_to:%Y-%m-%d}"

    @staticmethod
    def _filename(report_type: ReportType, date_from: date, date_to: date) -> str:
        return f"{report_type.value}_report_{date_from:%Y%m%d}_{date_to:%Y%m%d}.xlsx"

    def attendance_report(
        self, *, date_from: date, date_to: date, department_id: Optional[int] = None
    ) -> SpreadsheetReport:
        logs = self._attendance.list_logs(
            LogFilter(date_from=date_from, date_to=date_to, department_id=department_id)
        )
        return SpreadsheetReport(
            title="Attendance report",
            subtitles=[f"Department: {self._department_label(department_id)}", self._period(date_from, date_to)],
            column_headers=["Employee", "Department", "Date and time", "Type"],
            rows=[
                [
                    r.employee_name,
                    r.department_name or "",
                    r.time.strftime("%Y-%m-%d %H:%M:%S"),
                    "In" if r.direction == Direction.IN else "Out",
                ]
                for r in logs
            ],
            filename=self._filename(ReportType.ATTENDANCE, date_from, date_to),
        )

    def employee_report(
        self, *, date_from: date, date_to: date, department_id: Optional[int] = None
    ) -> SpreadsheetReport:
        employees = (
            self._employees.list_by_department(int(department_id)) if department_id else self._employees.list_all()
        )
        logs = self._attendance.list_logs(
            LogFilter(date_from=date_from, date_to=date_to, department_id=department_id),
            newest_first=False,
        )

        counts: dict[int, list[int]] = {}
        for r in logs:
            ins, outs, lates = counts.get(r.employee_id, [0, 0, 0])
            if r.direction == Direction.IN:
                ins += 1
                if is_late_arrival(r.time):
                    lates += 1
            else:
                outs += 1
            counts[r.employee_id] = [ins, outs, lates]

        rows = []
        for e in employees:
            ins, outs, lates = counts.get(e.employee_id, [0, 0, 0])
            rows.append([e.name, e.department_name or "", ins, outs, lates])

        return SpreadsheetReport(
            title="Employee report",
            subtitles=[f"Department: {self._department_label(department_id)}", self._period(date_from, date_to)],
            column_headers=["Employee", "Department", "Check-ins", "Check-outs", "Late arrivals"],
            rows=rows,
            filename=self._filename(ReportType.EMPLOYEE, date_from, date_to),
        )

    def department_report(self, *, date_from: date, date_to: date) -> SpreadsheetReport:
        stats = self._attendance.department_statistics(date_from=date_from, date_to=date_to)
        return SpreadsheetReport(
            title="Department report",
            subtitles=[self._period(date_from, date_to)],
            column_headers=["Department", "Employees", "Visits", "Late arrivals"],
            rows=[[s.name, s.employee_count, s.attendance_count, s.late_count] for s in stats],
            filename=self._filename(ReportType.DEPARTMENT, date_from, date_to),
        )
