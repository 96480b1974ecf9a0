"""Server-side sessions (Flask-Session).

The cookie only carries the session id. With `SESSION_BACKEND=mysql` the data
lives in the `sessions` table (Flask-SQLAlchemy model owned by Flask-Session);
`memory` keeps it in a cachelib `SimpleCache` for tests and local runs.
"""

from __future__ import annotations

import logging
from datetime import timedelta
from typing import Any, Optional

from cachelib import SimpleCache
from flask import Flask
from flask_session import Session
from flask_sqlalchemy import SQLAlchemy
from sqlalchemy.engine import URL

from ..core.exceptions import ConfigurationError

logger = logging.getLogger(__name__)

SESSION_KEY_PREFIX = "session:"
SESSION_TABLE = "sessions"

# Memory backend: past this many entries the cache prunes, expired ones first.
MEMORY_SESSION_THRESHOLD = 500
# MySQL backend: expired rows are deleted about once every N requests.
CLEANUP_EVERY_N_REQUESTS = 100


def build_session_cache(threshold: int = MEMORY_SESSION_THRESHOLD) -> SimpleCache:
    return SimpleCache(threshold=threshold)


def mysql_url(db_config: dict) -> str:
    url = URL.create(
        "mysql+mysqlconnector",
        username=str(db_config.get("user", "root")),
        password=str(db_config.get("password", "")),
        host=str(db_config.get("host", "localhost")),
        port=int(db_config.get("port", 3306)),
        database=str(db_config.get("database", "smartkyzmet")),
        query={"charset": "utf8mb4"},
    )
    return url.render_as_string(hide_password=False)


def session_settings(
    backend: str,
    *,
    lifetime_seconds: int = 3600,
    db_config: Optional[dict] = None,
) -> dict[str, Any]:
    """Flask-Session config for `SESSION_BACKEND` (`mysql` or `memory`)."""

    settings: dict[str, Any] = {
        "SESSION_PERMANENT": True,
        "PERMANENT_SESSION_LIFETIME": timedelta(seconds=int(lifetime_seconds)),
        "SESSION_REFRESH_EACH_REQUEST": True,
        "SESSION_KEY_PREFIX": SESSION_KEY_PREFIX,
        "SESSION_COOKIE_HTTPONLY": True,
        "SESSION_COOKIE_SAMESITE": "Lax",
    }

    backend = (backend or "").strip().lower()
    if backend == "memory":
        settings.update(SESSION_TYPE="cachelib", SESSION_CACHELIB=build_session_cache())
        return settings
    if backend == "mysql":
        if not db_config:
            raise ConfigurationError("SESSION_BACKEND=mysql needs DB_CONFIG")
        settings.update(
            SESSION_TYPE="sqlalchemy",
            SQLALCHEMY_DATABASE_URI=mysql_url(db_config),
            SESSION_SQLALCHEMY_TABLE=SESSION_TABLE,
            SESSION_CLEANUP_N_REQUESTS=CLEANUP_EVERY_N_REQUESTS,
        )
        return settings
    raise ConfigurationError(f"Unknown SESSION_BACKEND: {backend!r}")


def init_sessions(app: Flask, settings: dict[str, Any]) -> Session:
    app.config.update(settings)
    if settings["SESSION_TYPE"] == "sqlalchemy":
        app.config["SESSION_SQLALCHEMY"] = SQLAlchemy(app)
    logger.info("Server-side sessions: %s", settings["SESSION_TYPE"])
    return Session(app)
