"""Attendance discipline classifier.

Pure read-aggregate-transform step: no I/O, no shared state, safe to call from
concurrent requests.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, time, tzinfo
from typing import Iterable, Optional

from ..common.datetime_utils import to_local
from ..core.constants import LATE_THRESHOLD_PERCENT, RISK_THRESHOLD_PERCENT, WORKDAY_END_HOUR, WORKDAY_START
from ..core.enums import ClassificationBucket, Direction
from .model import AttendanceAnalysis, EmployeeAssessment, EmployeeAttendanceWindow


def is_late_arrival(moment: datetime, *, start: time = WORKDAY_START) -> bool:
    """Late when the wall-clock minute is past `start` (09:00:59 still counts as 09:00)."""
    return (moment.hour, moment.minute) > (start.hour, start.minute)


def is_early_leave(moment: datetime, *, end_hour: int = WORKDAY_END_HOUR) -> bool:
    return moment.hour < end_hour


@dataclass(frozen=True)
class WindowTally:
    total_days: int
    late_days: int
    early_leave_days: int

    @property
    def late_percent(self) -> float:
        return 100.0 * self.late_days / self.total_days if self.total_days else 0.0

    @property
    def early_leave_percent(self) -> float:
        return 100.0 * self.early_leave_days / self.total_days if self.total_days else 0.0


class AttendanceClassifier:
    def __init__(
        self,
        *,
        tz: Optional[tzinfo] = None,
        workday_start: time = WORKDAY_START,
        workday_end_hour: int = WORKDAY_END_HOUR,
        risk_percent: float = RISK_THRESHOLD_PERCENT,
        late_percent: float = LATE_THRESHOLD_PERCENT,
    ):
        self._tz = tz
        self._workday_start = workday_start
        self._workday_end_hour = workday_end_hour
        self._risk_percent = risk_percent
        self._late_percent = late_percent

    def tally(self, window: EmployeeAttendanceWindow) -> WindowTally:
        """Count days, not events: a day with several late arrivals (or early
        leaves) counts once, so both percentages stay within 0-100.
        """
        # sorted() is stable: events sharing a timestamp keep their input order.
        events = sorted(
            ((to_local(e.time, self._tz), e.direction) for e in window.events),
            key=lambda item: item[0],
        )

        total_days = 0
        late_days: set[date] = set()
        early_days: set[date] = set()
        last_date: Optional[date] = None

        for moment, direction in events:
            day = moment.date()
            if day != last_date:
                total_days += 1
                last_date = day

            if direction == Direction.IN and is_late_arrival(moment, start=self._workday_start):
                late_days.add(day)
            elif direction == Direction.OUT and is_early_leave(moment, end_hour=self._workday_end_hour):
                early_days.add(day)

        return WindowTally(total_days=total_days, late_days=len(late_days), early_leave_days=len(early_days))

    def bucket_for(self, late_percent: float, early_leave_percent: float) -> ClassificationBucket:
        # Risk is checked first so an employee lands in exactly one bucket.
        if late_percent >= self._risk_percent or early_leave_percent >= self._risk_percent:
            return ClassificationBucket.RISK
        if late_percent >= self._late_percent or early_leave_percent >= self._late_percent:
            return ClassificationBucket.LATE
        return ClassificationBucket.DISCIPLINED

    def assess(self, window: EmployeeAttendanceWindow) -> EmployeeAssessment:
        tally = self.tally(window)
        late_percent = tally.late_percent
        early_leave_percent = tally.early_leave_percent
        return EmployeeAssessment(
            employee_id=window.employee_id,
            employee_name=window.employee_name,
            department_name=window.department_name,
            late_percent=late_percent,
            early_leave_percent=early_leave_percent,
            bucket=self.bucket_for(late_percent, early_leave_percent),
        )

    def classify(self, windows: Iterable[EmployeeAttendanceWindow]) -> AttendanceAnalysis:
        analysis = AttendanceAnalysis()
        for window in windows:
            assessment = self.assess(window)
            analysis.bucket(assessment.bucket).append(assessment)
        return analysis
