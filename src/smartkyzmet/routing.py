"""Explicit route table.

Controllers declare `(resource, action)` handlers on a `RouteRegistry`; the
registry validates the whole table once at startup and then installs it on the
Flask app. Handlers receive a `RequestContext` as their first argument.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from functools import wraps
from typing import Any, Callable, Iterable, Optional

from flask import Flask, redirect, request, session, url_for
from werkzeug.routing import Map, Rule

from .core.exceptions import ConfigurationError
from .web.context import RequestContext, load_session_user

logger = logging.getLogger(__name__)

ALLOWED_METHODS = frozenset({"GET", "POST"})
LOGIN_ROUTE = ("auth", "login")


def endpoint_name(resource: str, action: str) -> str:
    return f"{resource}_{action}"


@dataclass(frozen=True)
class Route:
    resource: str
    action: str
    rule: str
    handler: Callable[..., Any]
    methods: tuple[str, ...] = ("GET",)
    login_required: bool = True

    @property
    def key(self) -> tuple[str, str]:
        return (self.resource, self.action)

    @property
    def endpoint(self) -> str:
        return endpoint_name(self.resource, self.action)


class RouteRegistry:
    def __init__(self, *, required: Iterable[tuple[str, str]] = ()):
        self._routes: list[Route] = []
        self._required = tuple(required)

    def action(
        self,
        resource: str,
        action: str,
        rule: str,
        *,
        methods: Iterable[str] = ("GET",),
        login_required: bool = True,
    ):
        def decorator(handler: Callable[..., Any]) -> Callable[..., Any]:
            self.add(
                Route(
                    resource=resource,
                    action=action,
                    rule=rule,
                    handler=handler,
                    methods=tuple(m.upper() for m in methods),
                    login_required=login_required,
                )
            )
            return handler

        return decorator

    def add(self, route: Route) -> None:
        self._routes.append(route)

    @property
    def routes(self) -> tuple[Route, ...]:
        return tuple(self._routes)

    def get(self, resource: str, action: str) -> Optional[Route]:
        for r in self._routes:
            if r.key == (resource, action):
                return r
        return None

    def validate(self) -> None:
        """Raise ConfigurationError listing every problem in the table."""

        problems: list[str] = []
        seen_keys: set[tuple[str, str]] = set()
        seen_rules: set[tuple[str, str]] = set()

        for r in self._routes:
            if r.key in seen_keys:
                problems.append(f"duplicate handler for {r.resource}.{r.action}")
            seen_keys.add(r.key)

            if not r.methods:
                problems.append(f"{r.endpoint}: no HTTP methods")
            bad = sorted(set(r.methods) - ALLOWED_METHODS)
            if bad:
                problems.append(f"{r.endpoint}: unsupported methods {', '.join(bad)}")

            for m in r.methods:
                if (r.rule, m) in seen_rules:
                    problems.append(f"{r.endpoint}: {m} {r.rule} is already routed")
                seen_rules.add((r.rule, m))

            if not callable(r.handler):
                problems.append(f"{r.endpoint}: handler is not callable")

            try:
                Map([Rule(r.rule, endpoint=r.endpoint)]).bind("localhost")
            except ValueError as e:
                problems.append(f"{r.endpoint}: invalid rule {r.rule!r} ({e})")

        for key in (LOGIN_ROUTE, *self._required):
            if key not in seen_keys:
                problems.append(f"missing required route {key[0]}.{key[1]}")

        if problems:
            raise ConfigurationError("Invalid route table: " + "; ".join(problems))

    def install(self, app: Flask) -> None:
        self.validate()
        for r in self._routes:
            app.add_url_rule(r.rule, endpoint=r.endpoint, view_func=_wrap(r), methods=list(r.methods))
        logger.debug("Installed %d routes", len(self._routes))


def _wrap(route: Route) -> Callable[..., Any]:
    @wraps(route.handler)
    def view(**kwargs):
        ctx = RequestContext(request=request, session=session, user=load_session_user(session))
        if route.login_required and not ctx.is_authenticated:
            ctx.flash("Please sign in to continue", "warning")
            return redirect(url_for(endpoint_name(*LOGIN_ROUTE)))
        return route.handler(ctx, **kwargs)

    return view
