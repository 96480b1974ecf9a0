from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Sequence

from flask import Response, abort, redirect, send_from_directory, url_for

from ..common.validators import optional_id
from ..container import Container
from ..core.exceptions import NotFoundError, ValidationError
from ..departments.model import Department
from ..routing import RouteRegistry
from ..web.context import RequestContext
from ..web.views import PageView, render_view
from .model import Employee
from .qr import render_qr_png


@dataclass(frozen=True)
class EmployeeForm:
    name: str = ""
    department_id: Optional[int] = None


@dataclass(frozen=True, kw_only=True)
class EmployeeListView(PageView):
    employees: Sequence[Employee]
    departments: Sequence[Department]
    department_id: Optional[int] = None


@dataclass(frozen=True, kw_only=True)
class EmployeeFormView(PageView):
    form: EmployeeForm
    departments: Sequence[Department]
    employee: Optional[Employee] = None
    error: Optional[str] = None


@dataclass(frozen=True, kw_only=True)
class EmployeeDetailView(PageView):
    employee: Employee


def register(registry: RouteRegistry, container: Container) -> None:
    def form_view(ctx: RequestContext, form: EmployeeForm, *, employee=None, error=None) -> EmployeeFormView:
        return EmployeeFormView(
            user=ctx.user,
            title="Edit employee" if employee else "New employee",
            active_page="employees",
            form=form,
            departments=container.department_service.list_departments(),
            employee=employee,
            error=error,
        )

    def submitted_form(ctx: RequestContext) -> EmployeeForm:
        return EmployeeForm(name=ctx.form("name").strip(), department_id=optional_id(ctx.form("department_id")))

    def detail(ctx: RequestContext, employee_id: int, template: str, title: str):
        try:
            employee = container.employee_service.get_employee(employee_id)
        except NotFoundError:
            return redirect(url_for("employees_index"))
        view = EmployeeDetailView(user=ctx.user, title=title, active_page="employees", employee=employee)
        return render_view(template, view)

    @registry.action("employees", "index", "/employees")
    def index(ctx: RequestContext):
        department_id = optional_id(ctx.arg("department_id"))
        view = EmployeeListView(
            user=ctx.user,
            title="Employees",
            active_page="employees",
            employees=container.employee_service.list_employees(department_id=department_id),
            departments=container.department_service.list_departments(),
            department_id=department_id,
        )
        return render_view("employees/index.html", view)

    @registry.action("employees", "create", "/employees/create", methods=("GET", "POST"))
    def create(ctx: RequestContext):
        if ctx.method == "POST":
            form = submitted_form(ctx)
            try:
                employee_id = container.employee_service.create_employee(
                    name=form.name,
                    department_id=form.department_id,
                    photo_file=ctx.file("photo"),
                )
            except ValidationError as e:
                return render_view("employees/form.html", form_view(ctx, form, error=str(e)))
            ctx.flash("Employee created.", "success")
            return redirect(url_for("employees_view", employee_id=employee_id))

        return render_view("employees/form.html", form_view(ctx, EmployeeForm()))

    @registry.action("employees", "view", "/employees/<int:employee_id>")
    def view(ctx: RequestContext, employee_id: int):
        return detail(ctx, employee_id, "employees/view.html", "Employee")

    @registry.action("employees", "edit", "/employees/<int:employee_id>/edit", methods=("GET", "POST"))
    def edit(ctx: RequestContext, employee_id: int):
        try:
            employee = container.employee_service.get_employee(employee_id)
        except NotFoundError:
            return redirect(url_for("employees_index"))

        if ctx.method == "POST":
            form = submitted_form(ctx)
            try:
                container.employee_service.update_employee(
                    employee_id=employee_id,
                    name=form.name,
                    department_id=form.department_id,
                    photo_file=ctx.file("photo"),
                )
            except NotFoundError:
                return redirect(url_for("employees_index"))
            except ValidationError as e:
                return render_view("employees/form.html", form_view(ctx, form, employee=employee, error=str(e)))
            ctx.flash("Employee updated.", "success")
            return redirect(url_for("employees_view", employee_id=employee_id))

        form = EmployeeForm(name=employee.name, department_id=employee.department_id)
        return render_view("employees/form.html", form_view(ctx, form, employee=employee))

    @registry.action("employees", "delete", "/employees/<int:employee_id>/delete", methods=("POST",))
    def delete(ctx: RequestContext, employee_id: int):
        container.employee_service.delete_employee(employee_id)
        ctx.flash("Employee deleted.", "success")
        return redirect(url_for("employees_index"))

    @registry.action("employees", "photo", "/uploads/<path:filename>")
    def photo(ctx: RequestContext, filename: str):
        return send_from_directory(container.photos.upload_dir.resolve(), filename)

    @registry.action("qr", "view", "/qr/view/<int:employee_id>")
    def qr_view(ctx: RequestContext, employee_id: int):
        return detail(ctx, employee_id, "qr/view.html", "QR code")

    @registry.action("qr", "print", "/qr/print/<int:employee_id>")
    def qr_print(ctx: RequestContext, employee_id: int):
        return detail(ctx, employee_id, "qr/print.html", "Print QR code")

    @registry.action("qr", "image", "/qr/image")
    def qr_image(ctx: RequestContext):
        data = ctx.arg("data").strip()
        if not data:
            abort(400)
        return Response(render_qr_png(data), mimetype="image/png")
