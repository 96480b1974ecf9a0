from __future__ import annotations

from dataclasses import dataclass
from datetime import date, timedelta
from typing import Optional, Sequence

from flask import redirect, url_for

from ..common.datetime_utils import month_start
from ..common.validators import optional_id
from ..container import Container
from ..core.constants import DEFAULT_LOG_DAYS
from ..core.exceptions import NotFoundError, ValidationError
from ..departments.model import Department
from ..employees.model import Employee
from ..routing import RouteRegistry
from ..web.context import RequestContext
from ..web.forms import read_date_range
from ..web.views import PageView, render_view
from .model import AttendanceLogRow, DepartmentAttendanceStats, LogFilter
from .service import ScanResult


@dataclass(frozen=True, kw_only=True)
class AttendanceLogView(PageView):
    logs: Sequence[AttendanceLogRow]
    employees: Sequence[Employee]
    departments: Sequence[Department]
    filters: LogFilter


@dataclass(frozen=True, kw_only=True)
class ScanView(PageView):
    result: Optional[ScanResult] = None


@dataclass(frozen=True, kw_only=True)
class StatisticsView(PageView):
    stats: Sequence[DepartmentAttendanceStats]
    date_from: date
    date_to: date


def register(registry: RouteRegistry, container: Container) -> None:
    @registry.action("attendance", "index", "/attendance")
    def index(ctx: RequestContext):
        today = container.attendance_service.now().date()
        date_from, date_to = read_date_range(
            ctx, ctx.request.args, default_from=today - timedelta(days=DEFAULT_LOG_DAYS), default_to=today
        )
        filters = LogFilter(
            date_from=date_from,
            date_to=date_to,
            employee_id=optional_id(ctx.arg("employee_id")),
            department_id=optional_id(ctx.arg("department_id")),
        )
        view = AttendanceLogView(
            user=ctx.user,
            title="Attendance log",
            active_page="attendance",
            logs=container.attendance_service.list_logs(filters),
            employees=container.employee_service.list_employees(),
            departments=container.department_service.list_departments(),
            filters=filters,
        )
        return render_view("attendance/index.html", view)

    # The scan kiosk works without a signed-in user.
    @registry.action("attendance", "scan", "/attendance/scan", login_required=False)
    def scan(ctx: RequestContext):
        return render_view("attendance/scan.html", ScanView(user=ctx.user, title="Scan QR code", active_page="scan"))

    @registry.action("attendance", "process", "/attendance/scan", methods=("POST",), login_required=False)
    def process(ctx: RequestContext):
        image = ctx.file("image")
        try:
            if image is not None and image.filename:
                result = container.attendance_service.scan_image(image.stream)
            else:
                result = container.attendance_service.scan(ctx.form("qr_code"))
        except (ValidationError, NotFoundError) as e:
            ctx.flash(str(e), "danger")
            return redirect(url_for("attendance_scan"))

        view = ScanView(user=ctx.user, title="Scan recorded", active_page="scan", result=result)
        return render_view("attendance/success.html", view)

    @registry.action("attendance", "statistics", "/attendance/statistics")
    def statistics(ctx: RequestContext):
        today = container.attendance_service.now().date()
        date_from, date_to = read_date_range(ctx, ctx.request.args, default_from=month_start(today), default_to=today)
        view = StatisticsView(
            user=ctx.user,
            title="Attendance statistics",
            active_page="statistics",
            stats=container.attendance_service.department_statistics(date_from=date_from, date_to=date_to),
            date_from=date_from,
            date_to=date_to,
        )
        return render_view("attendance/statistics.html", view)
