from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional

from ..attendance.model import AttendanceEvent
from ..core.enums import ClassificationBucket


@dataclass(frozen=True)
class EmployeeAttendanceWindow:
    """All events of one employee inside the queried date range (derived, never stored)."""

    employee_id: int
    employee_name: str
    department_name: Optional[str]
    events: tuple[AttendanceEvent, ...] = ()


@dataclass(frozen=True)
class EmployeeAssessment:
    employee_id: int
    employee_name: str
    department_name: Optional[str]
    late_percent: float
    early_leave_percent: float
    bucket: ClassificationBucket


@dataclass(frozen=True)
class AttendanceAnalysis:
    """Three disjoint buckets that together hold every analysed employee exactly once."""

    disciplined: list[EmployeeAssessment] = field(default_factory=list)
    late: list[EmployeeAssessment] = field(default_factory=list)
    risk: list[EmployeeAssessment] = field(default_factory=list)

    def bucket(self, bucket: ClassificationBucket) -> list[EmployeeAssessment]:
        return {
            ClassificationBucket.DISCIPLINED: self.disciplined,
            ClassificationBucket.LATE: self.late,
            ClassificationBucket.RISK: self.risk,
        }[bucket]

    def all(self) -> list[EmployeeAssessment]:
        return [*self.disciplined, *self.late, *self.risk]


@dataclass(frozen=True)
class SpecificRecommendation:
    employee_name: str
    recommendation: str


@dataclass(frozen=True)
class Recommendations:
    general: str
    specific: list[SpecificRecommendation] = field(default_factory=list)


@dataclass(frozen=True)
class AnalyticsReport:
    windows: list[EmployeeAttendanceWindow]
    analysis: AttendanceAnalysis
    recommendations: Recommendations
