from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional, Sequence

from flask import redirect, url_for

from ..common.validators import optional_id
from ..container import Container
from ..core.exceptions import NotFoundError, ValidationError
from ..employees.model import Employee
from ..routing import RouteRegistry
from ..users.model import User
from ..web.context import RequestContext
from ..web.views import PageView, render_view
from .model import Task, TaskBoard

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TaskForm:
    title: str = ""
    description: str = ""
    assigned_to: Optional[int] = None
    deadline: str = ""


@dataclass(frozen=True, kw_only=True)
class TaskBoardView(PageView):
    board: TaskBoard
    employees: Sequence[Employee]
    users: Sequence[User]
    assigned_to: Optional[int] = None
    created_by: Optional[int] = None


@dataclass(frozen=True, kw_only=True)
class TaskFormView(PageView):
    form: TaskForm
    employees: Sequence[Employee]
    task: Optional[Task] = None
    error: Optional[str] = None


def register(registry: RouteRegistry, container: Container) -> None:
    def form_view(ctx: RequestContext, form: TaskForm, *, task=None, error=None) -> TaskFormView:
        return TaskFormView(
            user=ctx.user,
            title="Edit task" if task else "New task",
            active_page="tasks",
            form=form,
            employees=container.employee_service.list_employees(),
            task=task,
            error=error,
        )

    def submitted_form(ctx: RequestContext) -> TaskForm:
        return TaskForm(
            title=ctx.form("title").strip(),
            description=ctx.form("description"),
            assigned_to=optional_id(ctx.form("assigned_to")),
            deadline=ctx.form("deadline").strip(),
        )

    @registry.action("tasks", "index", "/tasks")
    def index(ctx: RequestContext):
        assigned_to = optional_id(ctx.arg("assigned_to"))
        created_by = optional_id(ctx.arg("created_by"))
        view = TaskBoardView(
            user=ctx.user,
            title="Tasks",
            active_page="tasks",
            board=container.task_service.board(assigned_to=assigned_to, created_by=created_by),
            employees=container.employee_service.list_employees(),
            users=container.user_service.list_users(),
            assigned_to=assigned_to,
            created_by=created_by,
        )
        return render_view("tasks/index.html", view)

    @registry.action("tasks", "create", "/tasks/create", methods=("GET", "POST"))
    def create(ctx: RequestContext):
        if ctx.method == "POST":
            form = submitted_form(ctx)
            try:
                container.task_service.create_task(
                    title=form.title,
                    description=form.description,
                    assigned_to=form.assigned_to,
                    deadline=form.deadline,
                    created_by=ctx.user.user_id,
                )
            except ValidationError as e:
                return render_view("tasks/form.html", form_view(ctx, form, error=str(e)))
            ctx.flash("Task created.", "success")
            return redirect(url_for("tasks_index"))

        return render_view("tasks/form.html", form_view(ctx, TaskForm()))

    @registry.action("tasks", "edit", "/tasks/<int:task_id>/edit", methods=("GET", "POST"))
    def edit(ctx: RequestContext, task_id: int):
        try:
            task = container.task_service.get_task(task_id)
        except NotFoundError:
            return redirect(url_for("tasks_index"))

        if ctx.method == "POST":
            form = submitted_form(ctx)
            try:
                container.task_service.update_task(
                    task_id=task_id,
                    title=form.title,
                    description=form.description,
                    assigned_to=form.assigned_to,
                    deadline=form.deadline,
                )
            except NotFoundError:
                return redirect(url_for("tasks_index"))
            except ValidationError as e:
                return render_view("tasks/form.html", form_view(ctx, form, task=task, error=str(e)))
            ctx.flash("Task updated.", "success")
            return redirect(url_for("tasks_index"))

        form = TaskForm(
            title=task.title,
            description=task.description,
            assigned_to=task.assigned_to,
            deadline=task.deadline.strftime("%Y-%m-%d") if task.deadline else "",
        )
        return render_view("tasks/form.html", form_view(ctx, form, task=task))

    @registry.action("tasks", "status", "/tasks/<int:task_id>/status", methods=("POST",))
    def change_status(ctx: RequestContext, task_id: int):
        try:
            container.task_service.change_status(task_id=task_id, status=ctx.form("status"))
        except (NotFoundError, ValidationError) as e:
            logger.info("Ignored status change for task %s: %s", task_id, e)
        return redirect(url_for("tasks_index"))

    @registry.action("tasks", "delete", "/tasks/<int:task_id>/delete", methods=("POST",))
    def delete(ctx: RequestContext, task_id: int):
        container.task_service.delete_task(task_id)
        ctx.flash("Task deleted.", "success")
        return redirect(url_for("tasks_index"))
