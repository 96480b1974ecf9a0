from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from flask import render_template

from ..users.model import SessionUser


@dataclass(frozen=True, kw_only=True)
class PageView:
    """Base of every page model; templates only see `view`."""

    user: Optional[SessionUser] = None
    active_page: str = ""
    title: str = ""


def render_view(template: str, view: PageView, status: int = 200):
    return render_template(template, view=view), status
