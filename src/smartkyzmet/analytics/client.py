from __future__ import annotations

import logging
from typing import Any, Protocol, Sequence

import requests

from ..core.constants import ANALYTICS_UNAVAILABLE
from .model import EmployeeAttendanceWindow

logger = logging.getLogger(__name__)


def serialize_windows(windows: Sequence[EmployeeAttendanceWindow]) -> list[dict[str, Any]]:
    return [
        {
            "employee_id": w.employee_id,
            "employee_name": w.employee_name,
            "department_name": w.department_name,
            "logs": [
                {"time": e.time.strftime("%Y-%m-%d %H:%M:%S"), "type": e.direction.value}
                for e in w.events
            ],
        }
        for w in windows
    ]


class AnalyticsClient(Protocol):
    def analyze(self, windows: Sequence[EmployeeAttendanceWindow]) -> dict[str, Any]:
        raise NotImplementedError


class HttpAnalyticsClient(AnalyticsClient):
    """Client for the optional external analysis service.

    Never raises for transport or payload problems: the caller gets
    `{"error": "analysis unavailable"}` instead. No retries.
    """

    def __init__(self, base_url: str, *, timeout: float = 5.0, session: requests.Session | None = None):
        self._url = base_url.rstrip("/") + "/analyze_attendance"
        self._timeout = float(timeout)
        self._session = session or requests.Session()

    def analyze(self, windows: Sequence[EmployeeAttendanceWindow]) -> dict[str, Any]:
        try:
            resp = self._session.post(self._url, json=serialize_windows(windows), timeout=self._timeout)
            resp.raise_for_status()
            payload = resp.json()
        except requests.RequestException as e:
            logger.warning("Analytics service unreachable at %s: %s", self._url, e)
            return dict(ANALYTICS_UNAVAILABLE)
        except ValueError:
            logger.warning("Analytics service returned invalid JSON")
            return dict(ANALYTICS_UNAVAILABLE)

        if not isinstance(payload, dict):
            logger.warning("Analytics service returned %s instead of an object", type(payload).__name__)
            return dict(ANALYTICS_UNAVAILABLE)
        return payload
