from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional


@dataclass(frozen=True)
class Employee:
    """Domain entity: an employee identified at the door by an opaque QR token."""

    employee_id: int
    name: str
    department_id: Optional[int]
    qr_code: str
    photo: Optional[str] = None
    created_at: Optional[datetime] = None
    department_name: Optional[str] = None
