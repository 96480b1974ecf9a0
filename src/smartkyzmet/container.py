from __future__ import annotations

from dataclasses import dataclass
from datetime import tzinfo
from pathlib import Path
from typing import Optional

from .analytics.classifier import AttendanceClassifier
from .analytics.client import AnalyticsClient, HttpAnalyticsClient
from .analytics.service import AnalyticsService
from .attendance.mysql_attendance_repository import MySQLAttendanceRepository
from .attendance.repository import AttendanceRepository
from .attendance.service import AttendanceService
from .dashboard.service import DashboardService
from .database.connection import DBConfig, DatabaseConnection
from .departments.mysql_department_repository import MySQLDepartmentRepository
from .departments.repository import DepartmentRepository
from .departments.service import DepartmentService
from .employees.mysql_employee_repository import MySQLEmployeeRepository
from .employees.photos import PhotoStorage
from .employees.repository import EmployeeRepository
from .employees.service import EmployeeService
from .reports.service import ReportService
from .tasks.mysql_task_repository import MySQLTaskRepository
from .tasks.repository import TaskRepository
from .tasks.service import TaskService
from .users.mysql_user_repository import MySQLUserRepository
from .users.repository import UserRepository
from .users.service import AuthService, UserService


@dataclass(frozen=True)
class Container:
    departments_repo: DepartmentRepository
    employees_repo: EmployeeRepository
    attendance_repo: AttendanceRepository
    users_repo: UserRepository
    tasks_repo: TaskRepository
    photos: PhotoStorage

    department_service: DepartmentService
    employee_service: EmployeeService
    attendance_service: AttendanceService
    analytics_service: AnalyticsService
    auth_service: AuthService
    user_service: UserService
    task_service: TaskService
    report_service: ReportService
    dashboard_service: DashboardService


def assemble_container(
    *,
    departments_repo: DepartmentRepository,
    employees_repo: EmployeeRepository,
    attendance_repo: AttendanceRepository,
    users_repo: UserRepository,
    tasks_repo: TaskRepository,
    photos: PhotoStorage,
    tz: Optional[tzinfo] = None,
    analytics_client: Optional[AnalyticsClient] = None,
) -> Container:
    """Wire services on top of the given repositories (MySQL or in-memory fakes)."""

    department_service = DepartmentService(departments_repo)
    employee_service = EmployeeService(employees_repo, departments_repo, photos=photos)
    attendance_service = AttendanceService(attendance_repo, employees_repo, departments_repo, tz=tz)
    analytics_service = AnalyticsService(
        attendance_repo,
        classifier=AttendanceClassifier(tz=tz),
        client=analytics_client,
    )

    return Container(
        departments_repo=departments_repo,
        employees_repo=employees_repo,
        attendance_repo=attendance_repo,
        users_repo=users_repo,
        tasks_repo=tasks_repo,
        photos=photos,
        department_service=department_service,
        employee_service=employee_service,
        attendance_service=attendance_service,
        analytics_service=analytics_service,
        auth_service=AuthService(users_repo),
        user_service=UserService(users_repo),
        task_service=TaskService(tasks_repo),
        report_service=ReportService(attendance_repo, employees_repo, departments_repo),
        dashboard_service=DashboardService(employee_service, department_service, attendance_service),
    )


def build_container(
    *,
    db_config: dict,
    tz: Optional[tzinfo] = None,
    analytics_url: str = "http://localhost:5000",
    analytics_timeout: float = 5.0,
    upload_folder: str | Path = "uploads",
) -> Container:
    conn = DatabaseConnection.get_instance(DBConfig.from_dict(db_config))

    return assemble_container(
        departments_repo=MySQLDepartmentRepository(conn),
        employees_repo=MySQLEmployeeRepository(conn),
        attendance_repo=MySQLAttendanceRepository(conn),
        users_repo=MySQLUserRepository(conn),
        tasks_repo=MySQLTaskRepository(conn),
        photos=PhotoStorage(upload_folder),
        tz=tz,
        analytics_client=HttpAnalyticsClient(analytics_url, timeout=analytics_timeout),
    )
