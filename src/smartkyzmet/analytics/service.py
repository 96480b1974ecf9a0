from __future__ import annotations

from datetime import date
from typing import Any, Optional

from ..attendance.model import LogFilter
from ..attendance.repository import AttendanceRepository
from ..core.constants import ANALYTICS_UNAVAILABLE
from .classifier import AttendanceClassifier
from .client import AnalyticsClient
from .model import AnalyticsReport, EmployeeAttendanceWindow
from .recommendations import build_recommendations


class AnalyticsService:
    """Use case: attendance discipline analysis for a date range."""

    def __init__(
        self,
        attendance: AttendanceRepository,
        *,
        classifier: Optional[AttendanceClassifier] = None,
        client: Optional[AnalyticsClient] = None,
    ):
        self._attendance = attendance
        self._classifier = classifier or AttendanceClassifier()
        self._client = client

    def build_windows(
        self,
        *,
        date_from: date,
        date_to: date,
        department_id: Optional[int] = None,
        employee_id: Optional[int] = None,
    ) -> list[EmployeeAttendanceWindow]:
        rows = self._attendance.list_logs(
            LogFilter(date_from=date_from, date_to=date_to, employee_id=employee_id, department_id=department_id),
            newest_first=False,
        )

        # Group by employee, keeping the order in which employees first appear.
        grouped: dict[int, dict[str, Any]] = {}
        for r in rows:
            entry = grouped.get(r.employee_id)
            if entry is None:
                entry = {"name": r.employee_name, "department": r.department_name, "events": []}
                grouped[r.employee_id] = entry
            entry["events"].append(r.to_event())

        return [
            EmployeeAttendanceWindow(
                employee_id=employee_id,
                employee_name=entry["name"],
                department_name=entry["department"],
                events=tuple(entry["events"]),
            )
            for employee_id, entry in grouped.items()
        ]

    def analyze(
        self,
        *,
        date_from: date,
        date_to: date,
        department_id: Optional[int] = None,
        employee_id: Optional[int] = None,
    ) -> AnalyticsReport:
        windows = self.build_windows(
            date_from=date_from, date_to=date_to, department_id=department_id, employee_id=employee_id
        )
        analysis = self._classifier.classify(windows)
        return AnalyticsReport(windows=windows, analysis=analysis, recommendations=build_recommendations(analysis))

    def analyze_remote(
        self,
        *,
        date_from: date,
        date_to: date,
        department_id: Optional[int] = None,
        employee_id: Optional[int] = None,
    ) -> dict[str, Any]:
        """Send the windows to the external analysis service (error payload on failure)."""

        if self._client is None:
            return dict(ANALYTICS_UNAVAILABLE)
        windows = self.build_windows(
            date_from=date_from, date_to=date_to, department_id=department_id, employee_id=employee_id
        )
        return self._client.analyze(windows)
