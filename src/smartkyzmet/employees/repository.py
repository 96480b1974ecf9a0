from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import Employee


class EmployeeRepository(Protocol):
    def list_all(self) -> Sequence[Employee]:
        raise NotImplementedError

    def list_by_department(self, department_id: int) -> Sequence[Employee]:
        raise NotImplementedError

    def get_by_id(self, employee_id: int) -> Optional[Employee]:
        raise NotImplementedError

    def get_by_qr_code(self, qr_code: str) -> Optional[Employee]:
        raise NotImplementedError

    def qr_code_exists(self, qr_code: str) -> bool:
        raise NotImplementedError

    def create(self, *, name: str, department_id: int, qr_code: str, photo: Optional[str] = None) -> int:
        raise NotImplementedError

    def update(
        self,
        *,
        employee_id: int,
        name: str,
        department_id: int,
        photo: Optional[str] = None,
    ) -> bool:
        """Update name/department; `photo=None` keeps the stored photo."""

        raise NotImplementedError

    def delete(self, employee_id: int) -> bool:
        raise NotImplementedError

    def count(self) -> int:
        raise NotImplementedError
