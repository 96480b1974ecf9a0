from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import datetime
from typing import Any, Optional

import pytest
from werkzeug.security import generate_password_hash

from smartkyzmet.analytics.classifier import is_late_arrival
from smartkyzmet.attendance.model import AttendanceEvent, AttendanceLogRow, DepartmentAttendanceStats, LogFilter
from smartkyzmet.container import assemble_container
from smartkyzmet.core.enums import Direction, Role
from smartkyzmet.departments.model import Department
from smartkyzmet.employees.model import Employee
from smartkyzmet.employees.photos import PhotoStorage
from smartkyzmet.main import create_app
from smartkyzmet.tasks.model import Task, TaskFilter
from smartkyzmet.users.model import User

FAST_HASH = "pbkdf2:sha256:1000"


@dataclass
class FakeDb:
    departments: dict[int, Department] = field(default_factory=dict)
    employees: dict[int, Employee] = field(default_factory=dict)
    logs: list[AttendanceEvent] = field(default_factory=list)
    users: dict[int, User] = field(default_factory=dict)
    tasks: dict[int, Task] = field(default_factory=dict)
    next_id: int = 1

    def new_id(self) -> int:
        value = self.next_id
        self.next_id += 1
        return value


class FakeDepartmentRepo:
    def __init__(self, db: FakeDb):
        self._db = db

    def list_all(self):
        return sorted(self._db.departments.values(), key=lambda d: d.name)

    def list_with_employee_count(self):
        return [replace(d, employee_count=self.count_employees(d.department_id)) for d in self.list_all()]

    def get_by_id(self, department_id):
        return self._db.departments.get(int(department_id))

    def create(self, *, name):
        department_id = self._db.new_id()
        self._db.departments[department_id] = Department(department_id=department_id, name=name)
        return department_id

    def update(self, *, department_id, name):
        self._db.departments[department_id] = replace(self._db.departments[department_id], name=name)
        return True

    def delete(self, department_id):
        return self._db.departments.pop(int(department_id), None) is not None

    def count(self):
        return len(self._db.departments)

    def count_employees(self, department_id):
        return sum(1 for e in self._db.employees.values() if e.department_id == int(department_id))


class FakeEmployeeRepo:
    def __init__(self, db: FakeDb):
        self._db = db

    def _joined(self, e: Employee) -> Employee:
        department = self._db.departments.get(e.department_id) if e.department_id else None
        return replace(e, department_name=department.name if department else None)

    def list_all(self):
        return [self._joined(e) for e in sorted(self._db.employees.values(), key=lambda e: e.name)]

    def list_by_department(self, department_id):
        return [e for e in self.list_all() if e.department_id == int(department_id)]

    def get_by_id(self, employee_id):
        e = self._db.employees.get(int(employee_id))
        return self._joined(e) if e else None

    def get_by_qr_code(self, qr_code):
        for e in self._db.employees.values():
            if e.qr_code == qr_code:
                return self._joined(e)
        return None

    def qr_code_exists(self, qr_code):
        return any(e.qr_code == qr_code for e in self._db.employees.values())

    def create(self, *, name, department_id, qr_code, photo=None):
        employee_id = self._db.new_id()
        self._db.employees[employee_id] = Employee(
            employee_id=employee_id, name=name, department_id=department_id, qr_code=qr_code, photo=photo
        )
        return employee_id

    def update(self, *, employee_id, name, department_id, photo=None):
        current = self._db.employees[employee_id]
        self._db.employees[employee_id] = replace(
            current, name=name, department_id=department_id, photo=photo or current.photo
        )
        return True

    def delete(self, employee_id):
        self._db.logs = [e for e in self._db.logs if e.employee_id != int(employee_id)]
        return self._db.employees.pop(int(employee_id), None) is not None

    def count(self):
        return len(self._db.employees)


class FakeAttendanceRepo:
    def __init__(self, db: FakeDb):
        self._db = db

    def log_event(self, *, employee_id, time, direction):
        log_id = self._db.new_id()
        self._db.logs.append(AttendanceEvent(employee_id=employee_id, time=time, direction=direction, log_id=log_id))
        return log_id

    def get_last_event(self, employee_id):
        events = [e for e in self._db.logs if e.employee_id == employee_id]
        if not events:
            return None
        return max(events, key=lambda e: (e.time, e.log_id))

    def list_logs(self, filters: LogFilter, *, newest_first=True, limit=None):
        rows = []
        for e in self._db.logs:
            employee = self._db.employees.get(e.employee_id)
            if employee is None:
                continue
            if filters.employee_id is not None and e.employee_id != filters.employee_id:
                continue
            if filters.department_id is not None and employee.department_id != filters.department_id:
                continue
            if filters.date_from is not None and e.time.date() < filters.date_from:
                continue
            if filters.date_to is not None and e.time.date() > filters.date_to:
                continue
            department = self._db.departments.get(employee.department_id)
            rows.append(
                AttendanceLogRow(
                    log_id=e.log_id,
                    employee_id=e.employee_id,
                    employee_name=employee.name,
                    department_id=employee.department_id,
                    department_name=department.name if department else None,
                    time=e.time,
                    direction=e.direction,
                )
            )
        rows.sort(key=lambda r: (r.time, r.log_id), reverse=newest_first)
        return rows[:limit] if limit is not None else rows

    def department_statistics(self, *, date_from, date_to):
        out = []
        for d in sorted(self._db.departments.values(), key=lambda d: d.name):
            rows = self.list_logs(LogFilter(date_from=date_from, date_to=date_to, department_id=d.department_id))
            out.append(
                DepartmentAttendanceStats(
                    department_id=d.department_id,
                    name=d.name,
                    employee_count=len({r.employee_id for r in rows}),
                    attendance_count=len(rows),
                    late_count=sum(1 for r in rows if r.direction == Direction.IN and is_late_arrival(r.time)),
                )
            )
        return out


class FakeUserRepo:
    def __init__(self, db: FakeDb):
        self._db = db

    def get_by_id(self, user_id):
        return self._db.users.get(int(user_id))

    def get_by_username(self, username):
        for u in self._db.users.values():
            if u.username == username:
                return u
        return None

    def list_all(self):
        return sorted(self._db.users.values(), key=lambda u: u.username)

    def create_user(self, *, username, password_hash, role, employee_id=None):
        user_id = self._db.new_id()
        self._db.users[user_id] = User(
            user_id=user_id, username=username, password_hash=password_hash, role=role, employee_id=employee_id
        )
        return user_id

    def update_password(self, user_id, *, password_hash):
        self._db.users[user_id] = replace(self._db.users[user_id], password_hash=password_hash)
        return True


class FakeTaskRepo:
    def __init__(self, db: FakeDb):
        self._db = db

    def _joined(self, t: Task) -> Task:
        assignee = self._db.employees.get(t.assigned_to) if t.assigned_to else None
        author = self._db.users.get(t.created_by) if t.created_by else None
        return replace(
            t,
            assigned_to_name=assignee.name if assignee else None,
            created_by_name=author.username if author else None,
        )

    def list_tasks(self, filters: TaskFilter):
        out = []
        for t in self._db.tasks.values():
            if filters.status is not None and t.status != filters.status:
                continue
            if filters.assigned_to is not None and t.assigned_to != filters.assigned_to:
                continue
            if filters.created_by is not None and t.created_by != filters.created_by:
                continue
            out.append(self._joined(t))
        return out

    def get_by_id(self, task_id):
        t = self._db.tasks.get(int(task_id))
        return self._joined(t) if t else None

    def create(self, *, title, description, status, assigned_to, created_by, deadline):
        task_id = self._db.new_id()
        self._db.tasks[task_id] = Task(
            task_id=task_id,
            title=title,
            description=description,
            status=status,
            assigned_to=assigned_to,
            created_by=created_by,
            deadline=deadline,
        )
        return task_id

    def update(self, *, task_id, title, description, assigned_to, deadline):
        self._db.tasks[task_id] = replace(
            self._db.tasks[task_id], title=title, description=description, assigned_to=assigned_to, deadline=deadline
        )
        return True

    def update_status(self, task_id, status):
        self._db.tasks[task_id] = replace(self._db.tasks[task_id], status=status)
        return True

    def delete(self, task_id):
        return self._db.tasks.pop(int(task_id), None) is not None


class FakeAnalyticsClient:
    def __init__(self, payload: Optional[dict[str, Any]] = None):
        self.payload = payload if payload is not None else {"summary": "ok"}
        self.calls: list = []

    def analyze(self, windows):
        self.calls.append(list(windows))
        return dict(self.payload)


@pytest.fixture
def fixed_now() -> datetime:
    return datetime(2024, 3, 12, 8, 55, 0)


@pytest.fixture
def db() -> FakeDb:
    """Two departments, three employees and an admin account."""

    db = FakeDb()
    it = FakeDepartmentRepo(db).create(name="IT")
    acc = FakeDepartmentRepo(db).create(name="Accounting")
    employees = FakeEmployeeRepo(db)
    employees.create(name="Aigerim", department_id=it, qr_code="EMPAIGERIM")
    employees.create(name="Bolat", department_id=it, qr_code="EMPBOLAT")
    employees.create(name="Dana", department_id=acc, qr_code="EMPDANA")
    FakeUserRepo(db).create_user(
        username="admin",
        password_hash=generate_password_hash("admin123", method=FAST_HASH),
        role=Role.ADMIN,
    )
    return db


@pytest.fixture
def analytics_client() -> FakeAnalyticsClient:
    return FakeAnalyticsClient()


@pytest.fixture
def container(db, tmp_path, analytics_client):
    return assemble_container(
        departments_repo=FakeDepartmentRepo(db),
        employees_repo=FakeEmployeeRepo(db),
        attendance_repo=FakeAttendanceRepo(db),
        users_repo=FakeUserRepo(db),
        tasks_repo=FakeTaskRepo(db),
        photos=PhotoStorage(tmp_path / "uploads"),
        analytics_client=analytics_client,
    )


@pytest.fixture
def app(container):
    return create_app(container=container, settings_module="config.testing")


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def logged_in(client):
    resp = client.post("/login", data={"username": "admin", "password": "admin123"})
    assert resp.status_code == 302
    return client


@pytest.fixture
def employee_ids(db) -> dict[str, int]:
    return {e.name: e.employee_id for e in db.employees.values()}


@pytest.fixture
def department_ids(db) -> dict[str, int]:
    return {d.name: d.department_id for d in db.departments.values()}
