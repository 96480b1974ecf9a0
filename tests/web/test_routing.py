from __future__ import annotations

import pytest
from flask import Flask

from smartkyzmet.core.exceptions import ConfigurationError
from smartkyzmet.main import REQUIRED_ROUTES, build_routes
from smartkyzmet.routing import Route, RouteRegistry, endpoint_name


def handler(ctx):
    return "ok"


def registry_with_login() -> RouteRegistry:
    registry = RouteRegistry()
    registry.add(Route("auth", "login", "/login", handler, methods=("GET", "POST"), login_required=False))
    return registry


def test_endpoint_name():
    assert endpoint_name("employees", "view") == "employees_view"


def test_valid_table_installs(container):
    app = Flask(__name__)
    app.secret_key = "x"

    build_routes(container).install(app)

    endpoints = {rule.endpoint for rule in app.url_map.iter_rules()}
    assert {endpoint_name(*key) for key in REQUIRED_ROUTES} <= endpoints


def test_duplicate_handler_is_rejected():
    registry = registry_with_login()
    registry.add(Route("employees", "index", "/employees", handler))
    registry.add(Route("employees", "index", "/staff", handler))

    with pytest.raises(ConfigurationError, match="duplicate handler"):
        registry.validate()


def test_same_rule_and_method_twice_is_rejected():
    registry = registry_with_login()
    registry.add(Route("employees", "index", "/employees", handler))
    registry.add(Route("employees", "list", "/employees", handler))

    with pytest.raises(ConfigurationError, match="already routed"):
        registry.validate()


def test_same_rule_with_different_methods_is_allowed():
    registry = registry_with_login()
    registry.add(Route("attendance", "scan", "/attendance/scan", handler))
    registry.add(Route("attendance", "process", "/attendance/scan", handler, methods=("POST",)))

    registry.validate()


def test_unsupported_method_is_rejected():
    registry = registry_with_login()
    registry.add(Route("employees", "purge", "/employees", handler, methods=("DELETE",)))

    with pytest.raises(ConfigurationError, match="unsupported methods DELETE"):
        registry.validate()


def test_malformed_rule_is_rejected():
    registry = registry_with_login()
    registry.add(Route("employees", "index", "employees", handler))

    with pytest.raises(ConfigurationError, match="invalid rule"):
        registry.validate()


def test_missing_login_route_is_rejected():
    registry = RouteRegistry()
    registry.add(Route("employees", "index", "/employees", handler))

    with pytest.raises(ConfigurationError, match="missing required route auth.login"):
        registry.validate()


def test_missing_required_route_is_rejected():
    registry = RouteRegistry(required=[("dashboard", "index")])
    registry.add(Route("auth", "login", "/login", handler, login_required=False))

    with pytest.raises(ConfigurationError, match="dashboard.index"):
        registry.validate()


def test_problems_are_reported_together():
    registry = RouteRegistry()
    registry.add(Route("a", "b", "/x", handler, methods=("PUT",)))

    with pytest.raises(ConfigurationError) as exc:
        registry.validate()

    message = str(exc.value)
    assert "unsupported methods PUT" in message
    assert "missing required route auth.login" in message


def test_decorator_registers_route():
    registry = RouteRegistry()

    @registry.action("tasks", "status", "/tasks/<int:task_id>/status", methods=("post",))
    def status(ctx, task_id):
        return "ok"

    route = registry.get("tasks", "status")
    assert route.handler is status
    assert route.methods == ("POST",)
    assert route.login_required is True
