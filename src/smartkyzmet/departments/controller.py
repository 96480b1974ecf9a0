from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Sequence

from flask import redirect, url_for

from ..container import Container
from ..core.exceptions import NotFoundError, ValidationError
from ..routing import RouteRegistry
from ..web.context import RequestContext
from ..web.views import PageView, render_view
from .model import Department


@dataclass(frozen=True, kw_only=True)
class DepartmentListView(PageView):
    departments: Sequence[Department]


@dataclass(frozen=True, kw_only=True)
class DepartmentFormView(PageView):
    name: str = ""
    department: Optional[Department] = None
    error: Optional[str] = None


def register(registry: RouteRegistry, container: Container) -> None:
    def form_view(ctx: RequestContext, *, name: str = "", department=None, error=None) -> DepartmentFormView:
        return DepartmentFormView(
            user=ctx.user,
            title="Edit department" if department else "New department",
            active_page="departments",
            name=name,
            department=department,
            error=error,
        )

    @registry.action("departments", "index", "/departments")
    def index(ctx: RequestContext):
        view = DepartmentListView(
            user=ctx.user,
            title="Departments",
            active_page="departments",
            departments=container.department_service.list_with_employee_count(),
        )
        return render_view("departments/index.html", view)

    @registry.action("departments", "create", "/departments/create", methods=("GET", "POST"))
    def create(ctx: RequestContext):
        if ctx.method == "POST":
            name = ctx.form("name")
            try:
                container.department_service.create_department(name=name)
            except ValidationError as e:
                return render_view("departments/form.html", form_view(ctx, name=name, error=str(e)))
            ctx.flash("Department created.", "success")
            return redirect(url_for("departments_index"))

        return render_view("departments/form.html", form_view(ctx))

    @registry.action("departments", "edit", "/departments/<int:department_id>/edit", methods=("GET", "POST"))
    def edit(ctx: RequestContext, department_id: int):
        try:
            department = container.department_service.get_department(department_id)
        except NotFoundError:
            return redirect(url_for("departments_index"))

        if ctx.method == "POST":
            name = ctx.form("name")
            try:
                container.department_service.update_department(department_id=department_id, name=name)
            except NotFoundError:
                return redirect(url_for("departments_index"))
            except ValidationError as e:
                return render_view(
                    "departments/form.html", form_view(ctx, name=name, department=department, error=str(e))
                )
            ctx.flash("Department updated.", "success")
            return redirect(url_for("departments_index"))

        return render_view("departments/form.html", form_view(ctx, name=department.name, department=department))

    @registry.action("departments", "delete", "/departments/<int:department_id>/delete", methods=("POST",))
    def delete(ctx: RequestContext, department_id: int):
        try:
            container.department_service.delete_department(department_id)
        except ValidationError as e:
            ctx.flash(str(e), "danger")
        else:
            ctx.flash("Department deleted.", "success")
        return redirect(url_for("departments_index"))
