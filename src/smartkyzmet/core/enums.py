from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    """User role stored in `users.role`."""

    ADMIN = "admin"
    MANAGER = "manager"


class Direction(str, Enum):
    """Scan direction: arrival or departure."""

    IN = "in"
    OUT = "out"


class TaskStatus(str, Enum):
    TODO = "todo"
    IN_PROGRESS = "in_progress"
    DONE = "done"


class ClassificationBucket(str, Enum):
    """Attendance discipline bucket; one per employee per analysis run."""

    DISCIPLINED = "disciplined"
    LATE = "late"
    RISK = "risk"


class ReportType(str, Enum):
    ATTENDANCE = "attendance"
    EMPLOYEE = "employee"
    DEPARTMENT = "department"
