from __future__ import annotations

from datetime import date
from typing import Optional

from ..core.exceptions import ValidationError
from .datetime_utils import parse_iso_date

REQUIRED_FIELDS_MESSAGE = "Fill in all required fields"


def require_non_empty(value: Optional[str], message: str = REQUIRED_FIELDS_MESSAGE) -> str:
    if not value or not value.strip():
        raise ValidationError(message)
    return value.strip()


def require_min_length(value: Optional[str], field_name: str, min_len: int) -> str:
    if value is None or len(value) < min_len:
        raise ValidationError(f"{field_name} must be at least {min_len} characters")
    return value


def require_positive_id(value, message: str = REQUIRED_FIELDS_MESSAGE) -> int:
    parsed = optional_id(value)
    if parsed is None:
        raise ValidationError(message)
    return parsed


def optional_id(value) -> Optional[int]:
    """Form/query ids: blank or non-positive means "not set"."""
    try:
        parsed = int(value or 0)
    except (TypeError, ValueError):
        return None
    return parsed if parsed > 0 else None


def optional_date(value: Optional[str], field_name: str) -> Optional[date]:
    if not value or not value.strip():
        return None
    try:
        return parse_iso_date(value.strip())
    except ValueError:
        raise ValidationError(f"{field_name} must be a date in YYYY-MM-DD format")
