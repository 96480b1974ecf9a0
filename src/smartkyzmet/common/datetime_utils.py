from __future__ import annotations

from datetime import date, datetime, tzinfo
from typing import Optional

import pytz


def parse_iso_date(value: str) -> date:
    """Parse YYYY-MM-DD string into date."""
    return datetime.strptime(value, "%Y-%m-%d").date()


def get_timezone(name: str) -> tzinfo:
    return pytz.timezone(name)


def to_local(value: datetime, tz: Optional[tzinfo] = None) -> datetime:
    """Return the naive local wall-clock time for `value`.

    Naive datetimes are taken as already local (MySQL DATETIME columns);
    aware ones are converted to `tz` first.
    """
    if value.tzinfo is None or tz is None:
        return value.replace(tzinfo=None)
    return value.astimezone(tz).replace(tzinfo=None)


def now_local(tz: Optional[tzinfo] = None) -> datetime:
    """Current local time as a naive datetime.

    Note: Wrapped so tests can patch/mock easier.
    """
    if tz is None:
        return datetime.now()
    return datetime.now(pytz.utc).astimezone(tz).replace(tzinfo=None)


def month_start(today: date) -> date:
    return today.replace(day=1)
