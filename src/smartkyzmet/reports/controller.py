from __future__ import annotations

import io
import logging
from dataclasses import dataclass
from datetime import date
from typing import Sequence

from flask import redirect, send_file, url_for

from ..common.datetime_utils import month_start
from ..common.validators import optional_id
from ..container import Container
from ..core.enums import ReportType
from ..core.exceptions import ValidationError
from ..departments.model import Department
from ..routing import RouteRegistry
from ..web.context import RequestContext
from ..web.forms import read_date_range
from ..web.views import PageView, render_view
from .exporter import XLSX_MIMETYPE, export_xlsx
from .service import parse_report_type

logger = logging.getLogger(__name__)


@dataclass(frozen=True, kw_only=True)
class ReportFormView(PageView):
    departments: Sequence[Department]
    report_types: Sequence[ReportType]
    date_from: date
    date_to: date


def register(registry: RouteRegistry, container: Container) -> None:
    @registry.action("reports", "index", "/reports")
    def index(ctx: RequestContext):
        today = container.attendance_service.now().date()
        view = ReportFormView(
            user=ctx.user,
            title="Reports",
            active_page="reports",
            departments=container.department_service.list_departments(),
            report_types=list(ReportType),
            date_from=month_start(today),
            date_to=today,
        )
        return render_view("reports/index.html", view)

    @registry.action("reports", "generate", "/reports/generate", methods=("POST",))
    def generate(ctx: RequestContext):
        try:
            report_type = parse_report_type(ctx.form("report_type"))
        except ValidationError as e:
            ctx.flash(str(e), "warning")
            return redirect(url_for("reports_index"))

        today = container.attendance_service.now().date()
        date_from, date_to = read_date_range(ctx, ctx.request.form, default_from=month_start(today), default_to=today)

        report = container.report_service.generate(
            report_type,
            date_from=date_from,
            date_to=date_to,
            department_id=optional_id(ctx.form("department_id")),
        )
        logger.info("Generated %s report with %d rows", report_type.value, len(report.rows))
        return send_file(
            io.BytesIO(export_xlsx(report)),
            mimetype=XLSX_MIMETYPE,
            as_attachment=True,
            download_name=report.filename,
        )
