from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Optional, Sequence

from flask import abort, redirect, url_for

from ..common.validators import optional_id
from ..container import Container
from ..core.enums import Role
from ..core.exceptions import AuthenticationError, NotFoundError, ValidationError
from ..employees.model import Employee
from ..routing import RouteRegistry
from ..web.context import RequestContext
from ..web.views import PageView, render_view
from .model import User


@dataclass(frozen=True, kw_only=True)
class LoginView(PageView):
    username: str = ""
    error: Optional[str] = None


@dataclass(frozen=True, kw_only=True)
class ChangePasswordView(PageView):
    error: Optional[str] = None


@dataclass(frozen=True, kw_only=True)
class UsersView(PageView):
    users: Sequence[User]


@dataclass(frozen=True, kw_only=True)
class UserFormView(PageView):
    employees: Sequence[Employee]
    roles: Sequence[Role] = tuple(Role)
    username: str = ""
    role: Role = Role.MANAGER
    employee_id: Optional[int] = None
    error: Optional[str] = None


def parse_role(value: Optional[str]) -> Role:
    try:
        return Role(value or Role.MANAGER.value)
    except ValueError:
        raise ValidationError("Unknown role") from None


def register(registry: RouteRegistry, container: Container) -> None:
    @registry.action("auth", "login", "/login", methods=("GET", "POST"), login_required=False)
    def login(ctx: RequestContext):
        if ctx.is_authenticated:
            return redirect(url_for("dashboard_index"))

        if ctx.method == "POST":
            username = ctx.form("username")
            try:
                user = container.auth_service.authenticate(username, ctx.form("password"))
            except AuthenticationError as e:
                return render_view("auth/login.html", LoginView(title="Sign in", username=username, error=str(e)))

            ctx.login(user)
            return redirect(url_for("dashboard_index"))

        return render_view("auth/login.html", LoginView(title="Sign in"))

    @registry.action("auth", "logout", "/logout", login_required=False)
    def logout(ctx: RequestContext):
        ctx.logout()
        ctx.flash("You have signed out.", "info")
        return redirect(url_for("auth_login"))

    @registry.action("auth", "change_password", "/account/password", methods=("GET", "POST"))
    def change_password(ctx: RequestContext):
        view = ChangePasswordView(user=ctx.user, title="Change password", active_page="account")

        if ctx.method == "POST":
            try:
                container.user_service.change_password(
                    user_id=ctx.user.user_id,
                    current_password=ctx.form("current_password"),
                    new_password=ctx.form("new_password"),
                    confirm_password=ctx.form("confirm_password"),
                )
            except NotFoundError:
                ctx.logout()
                return redirect(url_for("auth_login"))
            except ValidationError as e:
                return render_view(
                    "auth/change_password.html",
                    ChangePasswordView(user=ctx.user, title=view.title, active_page=view.active_page, error=str(e)),
                )

            ctx.flash("Password changed.", "success")
            return redirect(url_for("dashboard_index"))

        return render_view("auth/change_password.html", view)

    @registry.action("users", "index", "/users")
    def index(ctx: RequestContext):
        if not ctx.user.is_admin:
            abort(403)
        view = UsersView(
            user=ctx.user, title="Users", active_page="users", users=container.user_service.list_users()
        )
        return render_view("users/index.html", view)

    @registry.action("users", "create", "/users/create", methods=("GET", "POST"))
    def create(ctx: RequestContext):
        if not ctx.user.is_admin:
            abort(403)
        view = UserFormView(
            user=ctx.user, title="New user", active_page="users", employees=container.employee_service.list_employees()
        )

        if ctx.method == "POST":
            username = ctx.form("username")
            employee_id = optional_id(ctx.form("employee_id"))
            role = Role.MANAGER
            try:
                role = parse_role(ctx.form("role"))
                container.user_service.create_user(
                    username=username,
                    password=ctx.form("password"),
                    role=role,
                    employee_id=employee_id,
                )
            except ValidationError as e:
                return render_view(
                    "users/form.html",
                    replace(view, username=username, role=role, employee_id=employee_id, error=str(e)),
                )

            ctx.flash(f"User {username.strip()} created.", "success")
            return redirect(url_for("users_index"))

        return render_view("users/form.html", view)
