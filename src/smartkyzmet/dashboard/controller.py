from __future__ import annotations

from dataclasses import dataclass

from ..container import Container
from ..routing import RouteRegistry
from ..web.context import RequestContext
from ..web.views import PageView, render_view
from .service import DashboardSummary


@dataclass(frozen=True, kw_only=True)
class DashboardView(PageView):
    summary: DashboardSummary


def register(registry: RouteRegistry, container: Container) -> None:
    @registry.action("dashboard", "index", "/")
    def index(ctx: RequestContext):
        view = DashboardView(
            user=ctx.user,
            title="Dashboard",
            active_page="dashboard",
            summary=container.dashboard_service.summary(),
        )
        return render_view("dashboard/index.html", view)
