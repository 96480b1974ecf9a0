from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ..core.enums import Role


@dataclass(frozen=True)
class User:
    """Domain entity: an application account (admin or manager).

    Note: Plain data object, no DB access here.
    """

    user_id: int
    username: str
    password_hash: str
    role: Role
    employee_id: Optional[int] = None


@dataclass(frozen=True)
class SessionUser:
    """What we keep in the server-side session after login."""

    user_id: int
    username: str
    role: Role
    employee_id: Optional[int] = None

    @property
    def is_admin(self) -> bool:
        return self.role == Role.ADMIN

    def to_dict(self) -> dict:
        return {
            "user_id": self.user_id,
            "username": self.username,
            "role": self.role.value,
            "employee_id": self.employee_id,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "SessionUser":
        return cls(
            user_id=int(data["user_id"]),
            username=str(data["username"]),
            role=Role(data["role"]),
            employee_id=data.get("employee_id"),
        )
