from __future__ import annotations

from typing import Optional, Sequence

from werkzeug.datastructures import FileStorage

from ..common.validators import require_non_empty, require_positive_id
from ..core.exceptions import NotFoundError, ValidationError
from ..departments.repository import DepartmentRepository
from .model import Employee
from .photos import PhotoStorage
from .qr import generate_unique_qr_token
from .repository import EmployeeRepository


class EmployeeService:
    """Use cases: manage employees and their QR identity."""

    def __init__(
        self,
        employees: EmployeeRepository,
        departments: DepartmentRepository,
        *,
        photos: Optional[PhotoStorage] = None,
    ):
        self._employees = employees
        self._departments = departments
        self._photos = photos

    def list_employees(self, *, department_id: Optional[int] = None) -> Sequence[Employee]:
        if department_id:
            return self._employees.list_by_department(int(department_id))
        return self._employees.list_all()

    def get_employee(self, employee_id: int) -> Employee:
        employee = self._employees.get_by_id(int(employee_id))
        if not employee:
            raise NotFoundError("Employee not found")
        return employee

    def _validate(self, name: str, department_id) -> tuple[str, int]:
        name = require_non_empty(name)
        department_id = require_positive_id(department_id)
        if not self._departments.get_by_id(department_id):
            raise ValidationError("Department not found")
        return name, department_id

    def _save_photo(self, photo_file: Optional[FileStorage]) -> Optional[str]:
        if self._photos is None:
            return None
        return self._photos.save(photo_file)

    def create_employee(self, *, name: str, department_id, photo_file: Optional[FileStorage] = None) -> int:
        name, department_id = self._validate(name, department_id)
        qr_code = generate_unique_qr_token(self._employees.qr_code_exists)
        return self._employees.create(
            name=name,
            department_id=department_id,
            qr_code=qr_code,
            photo=self._save_photo(photo_file),
        )

    def update_employee(
        self,
        *,
        employee_id: int,
        name: str,
        department_id,
        photo_file: Optional[FileStorage] = None,
    ) -> None:
        self.get_employee(employee_id)
        name, department_id = self._validate(name, department_id)
        self._employees.update(
            employee_id=int(employee_id),
            name=name,
            department_id=department_id,
            photo=self._save_photo(photo_file),
        )

    def delete_employee(self, employee_id: int) -> None:
        self._employees.delete(int(employee_id))

    def count(self) -> int:
        return self._employees.count()
