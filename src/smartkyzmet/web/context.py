from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional

from flask import Request, current_app
from flask import flash as flask_flash
from flask.sessions import SessionMixin

from ..users.model import SessionUser

USER_SESSION_KEY = "user"


def load_session_user(session: SessionMixin) -> Optional[SessionUser]:
    data = session.get(USER_SESSION_KEY)
    if not data:
        return None
    try:
        return SessionUser.from_dict(data)
    except (KeyError, TypeError, ValueError):
        return None


@dataclass(frozen=True)
class RequestContext:
    """Everything a handler may touch for the current request.

    Handlers receive this object instead of reaching for Flask's request/session
    globals.
    """

    request: Request
    session: SessionMixin
    user: Optional[SessionUser] = None

    @property
    def is_authenticated(self) -> bool:
        return self.user is not None

    @property
    def method(self) -> str:
        return self.request.method

    def form(self, name: str, default: str = "") -> str:
        return self.request.form.get(name, default)

    def arg(self, name: str, default: str = "") -> str:
        return self.request.args.get(name, default)

    def file(self, name: str):
        return self.request.files.get(name)

    def flash(self, message: str, category: str = "info") -> None:
        flask_flash(message, category)

    def login(self, user: SessionUser) -> None:
        """Store `user` and move the session to a fresh id."""
        self.session.clear()
        self.session[USER_SESSION_KEY] = user.to_dict()
        current_app.session_interface.regenerate(self.session)

    def logout(self) -> None:
        current_app.session_interface.regenerate(self.session)
        self.session.clear()

    def stash(self, key: str, value: Any) -> None:
        """Keep a JSON-serialisable value for a later request."""
        self.session[key] = value

    def peek(self, key: str, default: Any = None) -> Any:
        return self.session.get(key, default)

    def pop(self, key: str, default: Any = None) -> Any:
        return self.session.pop(key, default)
