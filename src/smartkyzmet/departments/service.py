from __future__ import annotations

from typing import Sequence

from ..common.validators import require_non_empty
from ..core.exceptions import NotFoundError, ValidationError
from .model import Department
from .repository import DepartmentRepository


class DepartmentService:
    def __init__(self, departments: DepartmentRepository):
        self._departments = departments

    def list_departments(self) -> Sequence[Department]:
        """Departments ordered by name (for filters and select boxes)."""
        return self._departments.list_all()

    def list_with_employee_count(self) -> Sequence[Department]:
        return self._departments.list_with_employee_count()

    def get_department(self, department_id: int) -> Department:
        department = self._departments.get_by_id(int(department_id))
        if not department:
            raise NotFoundError("Department not found")
        return department

    def create_department(self, *, name: str) -> int:
        name = require_non_empty(name)
        return self._departments.create(name=name)

    def update_department(self, *, department_id: int, name: str) -> None:
        self.get_department(department_id)
        name = require_non_empty(name)
        self._departments.update(department_id=int(department_id), name=name)

    def delete_department(self, department_id: int) -> None:
        if self._departments.count_employees(int(department_id)) > 0:
            raise ValidationError("Cannot delete a department that still has employees")
        self._departments.delete(int(department_id))

    def count(self) -> int:
        return self._departments.count()
