from __future__ import annotations

import importlib
import logging
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from flask import Flask
from jinja2 import StrictUndefined

from config import get_settings_module

from .analytics.controller import register as register_analytics
from .attendance.controller import register as register_attendance
from .common.datetime_utils import get_timezone
from .container import Container, build_container
from .dashboard.controller import register as register_dashboard
from .database.bootstrap import apply_schema, apply_seed_sql, ensure_demo_users, list_tables
from .departments.controller import register as register_departments
from .employees.controller import register as register_employees
from .reports.controller import register as register_reports
from .routing import RouteRegistry
from .tasks.controller import register as register_tasks
from .users.controller import register as register_users
from .web.errors import register_error_handlers
from .web.sessions import init_sessions, session_settings

logger = logging.getLogger(__name__)

REPO_ROOT = Path(__file__).resolve().parents[2]

REQUIRED_ROUTES = (
    ("auth", "login"),
    ("auth", "logout"),
    ("dashboard", "index"),
    ("attendance", "scan"),
    ("attendance", "process"),
)


def configure_logging(level: str, *, debug: bool = False) -> None:
    logging.basicConfig(
        level=logging.DEBUG if debug else getattr(logging, str(level).upper(), logging.INFO),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )


def build_routes(container: Container) -> RouteRegistry:
    registry = RouteRegistry(required=REQUIRED_ROUTES)
    register_users(registry, container)
    register_dashboard(registry, container)
    register_employees(registry, container)
    register_departments(registry, container)
    register_tasks(registry, container)
    register_attendance(registry, container)
    register_analytics(registry, container)
    register_reports(registry, container)
    return registry


def create_app(*, container: Optional[Container] = None, settings_module: Optional[str] = None) -> Flask:
    load_dotenv(override=False)
    app = Flask(__name__)

    settings_module = settings_module or get_settings_module()
    settings = importlib.import_module(settings_module)
    app.secret_key = getattr(settings, "SECRET_KEY")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))
    app.jinja_env.undefined = StrictUndefined

    configure_logging(getattr(settings, "LOG_LEVEL", "INFO"), debug=app.config["DEBUG"])

    db_config = getattr(settings, "DB_CONFIG")
    logger.info(
        "Starting with settings=%s db=%s@%s:%s/%s",
        settings_module,
        db_config.get("user"),
        db_config.get("host"),
        db_config.get("port", 3306),
        db_config.get("database"),
    )

    if container is None:
        if bool(getattr(settings, "AUTO_INIT_DB", False)):
            apply_schema(db_config, schema_path=REPO_ROOT / "database" / "schema.sql")
            logger.info("Schema ready (tables=%d)", len(list_tables(db_config)))
        if bool(getattr(settings, "AUTO_SEED_DB", False)):
            apply_seed_sql(db_config, seed_path=REPO_ROOT / "database" / "seed.sql")
            ensure_demo_users(db_config)
            logger.info("Demo seed ready")

        container = build_container(
            db_config=db_config,
            tz=get_timezone(getattr(settings, "TIMEZONE", "UTC")),
            analytics_url=getattr(settings, "ANALYTICS_SERVICE_URL", "http://localhost:5000"),
            analytics_timeout=float(getattr(settings, "ANALYTICS_TIMEOUT", 5.0)),
            upload_folder=getattr(settings, "UPLOAD_FOLDER", "uploads"),
        )

    init_sessions(
        app,
        session_settings(
            getattr(settings, "SESSION_BACKEND", "mysql"),
            lifetime_seconds=int(getattr(settings, "SESSION_LIFETIME_SECONDS", 3600)),
            db_config=db_config,
        ),
    )

    build_routes(container).install(app)
    register_error_handlers(app)

    return app
