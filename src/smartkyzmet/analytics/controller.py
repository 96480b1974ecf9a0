from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Any, Optional, Sequence

from flask import redirect, url_for

from ..common.datetime_utils import month_start
from ..common.validators import optional_id
from ..container import Container
from ..departments.model import Department
from ..employees.model import Employee
from ..routing import RouteRegistry
from ..web.context import RequestContext
from ..web.forms import read_date_range
from ..web.views import PageView, render_view
from .model import AnalyticsReport

RESULT_SESSION_KEY = "analytics_result"


@dataclass(frozen=True, kw_only=True)
class AnalyticsView(PageView):
    report: AnalyticsReport
    departments: Sequence[Department]
    employees: Sequence[Employee]
    date_from: date
    date_to: date
    department_id: Optional[int] = None
    employee_id: Optional[int] = None


@dataclass(frozen=True, kw_only=True)
class AnalyticsResultsView(PageView):
    payload: dict[str, Any]
    error: Optional[str] = None


def register(registry: RouteRegistry, container: Container) -> None:
    @registry.action("analytics", "index", "/analytics")
    def index(ctx: RequestContext):
        today = container.attendance_service.now().date()
        date_from, date_to = read_date_range(ctx, ctx.request.args, default_from=month_start(today), default_to=today)
        department_id = optional_id(ctx.arg("department_id"))
        employee_id = optional_id(ctx.arg("employee_id"))
        view = AnalyticsView(
            user=ctx.user,
            title="Attendance analytics",
            active_page="analytics",
            report=container.analytics_service.analyze(
                date_from=date_from, date_to=date_to, department_id=department_id, employee_id=employee_id
            ),
            departments=container.department_service.list_departments(),
            employees=container.employee_service.list_employees(),
            date_from=date_from,
            date_to=date_to,
            department_id=department_id,
            employee_id=employee_id,
        )
        return render_view("analytics/index.html", view)

    @registry.action("analytics", "analyze", "/analytics/analyze", methods=("POST",))
    def analyze(ctx: RequestContext):
        today = container.attendance_service.now().date()
        date_from, date_to = read_date_range(ctx, ctx.request.form, default_from=month_start(today), default_to=today)
        payload = container.analytics_service.analyze_remote(
            date_from=date_from,
            date_to=date_to,
            department_id=optional_id(ctx.form("department_id")),
            employee_id=optional_id(ctx.form("employee_id")),
        )
        ctx.stash(RESULT_SESSION_KEY, payload)
        return redirect(url_for("analytics_results"))

    @registry.action("analytics", "results", "/analytics/results")
    def results(ctx: RequestContext):
        payload = ctx.peek(RESULT_SESSION_KEY)
        if not payload:
            return redirect(url_for("analytics_index"))

        error = payload.get("error") if isinstance(payload, dict) else None
        view = AnalyticsResultsView(
            user=ctx.user,
            title="Analysis results",
            active_page="analytics",
            payload={k: v for k, v in payload.items() if k != "error"},
            error=str(error) if error else None,
        )
        return render_view("analytics/results.html", view)
