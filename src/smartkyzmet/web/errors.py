from __future__ import annotations

import logging
import traceback
from dataclasses import dataclass
from typing import Optional

from flask import Flask, session
from werkzeug.exceptions import HTTPException

from .context import load_session_user
from .views import PageView, render_view

logger = logging.getLogger(__name__)


@dataclass(frozen=True, kw_only=True)
class ErrorView(PageView):
    code: int
    message: str
    detail: Optional[str] = None


def _error_page(code: int, title: str, message: str, detail: Optional[str] = None):
    view = ErrorView(
        user=load_session_user(session),
        title=title,
        code=code,
        message=message,
        detail=detail,
    )
    return render_view("errors/error.html", view, code)


def register_error_handlers(app: Flask) -> None:
    @app.errorhandler(403)
    def forbidden(_e):
        return _error_page(403, "Access denied", "You do not have permission to open this page.")

    @app.errorhandler(404)
    def not_found(_e):
        return _error_page(404, "Page not found", "The page you requested does not exist.")

    @app.errorhandler(Exception)
    def internal_error(e: Exception):
        if isinstance(e, HTTPException):
            return e

        logger.exception("Unhandled error")
        if app.config.get("DEBUG"):
            return _error_page(500, "Server error", str(e) or type(e).__name__, traceback.format_exc())
        return _error_page(500, "Server error", "Something went wrong. Please try again later.")
