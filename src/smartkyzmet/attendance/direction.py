"""Check-in/check-out direction resolution.

Per employee and day there are two states, awaiting-in and awaiting-out. The state
is never stored: it is inferred from the employee's most recent event and reset
implicitly when the calendar date changes.
"""

from __future__ import annotations

from datetime import datetime, tzinfo
from typing import Optional

from ..common.datetime_utils import to_local
from ..core.enums import Direction
from .model import AttendanceEvent


def resolve_direction(
    last_event: Optional[AttendanceEvent],
    now: datetime,
    *,
    tz: Optional[tzinfo] = None,
) -> Direction:
    """Return the direction of the scan happening at `now`.

    `out` only when the latest event is an `in` dated today; anything else
    (no event, an `out`, or an event from an earlier day) starts a new `in`.
    """

    if last_event is None or last_event.direction != Direction.IN:
        return Direction.IN
    if to_local(last_event.time, tz).date() != to_local(now, tz).date():
        return Direction.IN
    return Direction.OUT
