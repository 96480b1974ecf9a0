from __future__ import annotations

import logging
import re
from contextlib import closing
from pathlib import Path
from typing import Iterable, Iterator

from werkzeug.security import generate_password_hash

from ..core.enums import Role
from .connection import DatabaseConnection, DBConfig

logger = logging.getLogger(__name__)

DEMO_USERS = (
    # username, password, role, employee qr_code
    ("admin", "admin123", Role.ADMIN, "EMPDEMO0000000001"),
    ("manager", "manager123", Role.MANAGER, "EMPDEMO0000000002"),
)


def _strip_create_db_and_use(sql: str) -> str:
    # Keep schema.sql compatible regardless of DB name.
    sql = re.sub(r"(?im)^\s*CREATE\s+DATABASE\b.*?;\s*$", "", sql)
    sql = re.sub(r"(?im)^\s*USE\b.*?;\s*$", "", sql)
    return sql


def _iter_sql_statements(sql: str) -> Iterator[str]:
    # Minimal SQL splitter for schema/seed files (';' inside quotes is kept).
    buf: list[str] = []
    quote: str | None = None
    escape = False

    for ch in sql:
        if escape:
            escape = False
        elif ch == "\\":
            escape = True
        elif quote:
            if ch == quote:
                quote = None
        elif ch in ("'", '"'):
            quote = ch
        elif ch == ";":
            stmt = "".join(buf).strip()
            buf.clear()
            if stmt:
                yield stmt
            continue
        buf.append(ch)

    tail = "".join(buf).strip()
    if tail:
        yield tail


def _exec_sql(conn_factory: DatabaseConnection, statements: Iterable[str]) -> None:
    with closing(conn_factory.connect()) as conn:
        cur = conn.cursor()
        for stmt in statements:
            cur.execute(stmt)
        conn.commit()


def ensure_database_exists(db_config: dict) -> None:
    config = DBConfig.from_dict(db_config)
    with closing(DatabaseConnection(config).connect(with_database=False)) as conn:
        cur = conn.cursor()
        cur.execute(
            f"CREATE DATABASE IF NOT EXISTS `{config.database}` CHARACTER SET utf8mb4 COLLATE utf8mb4_unicode_ci"
        )
        conn.commit()


def apply_schema(db_config: dict, *, schema_path: str | Path) -> None:
    ensure_database_exists(db_config)
    sql = _strip_create_db_and_use(Path(schema_path).read_text(encoding="utf-8"))
    _exec_sql(DatabaseConnection(DBConfig.from_dict(db_config)), _iter_sql_statements(sql))
    logger.info("Applied schema %s", schema_path)


def apply_seed_sql(db_config: dict, *, seed_path: str | Path) -> None:
    sql = _strip_create_db_and_use(Path(seed_path).read_text(encoding="utf-8"))
    _exec_sql(DatabaseConnection(DBConfig.from_dict(db_config)), _iter_sql_statements(sql))
    logger.info("Applied seed %s", seed_path)


def ensure_demo_users(db_config: dict) -> None:
    """Create or reset the demo accounts (passwords are hashed here, not in seed.sql)."""

    conn_factory = DatabaseConnection(DBConfig.from_dict(db_config))
    with closing(conn_factory.connect()) as conn:
        cur = conn.cursor(dictionary=True)
        for username, password, role, qr_code in DEMO_USERS:
            cur.execute("SELECT id FROM employees WHERE qr_code=%s", (qr_code,))
            employee = cur.fetchone()
            employee_id = int(employee["id"]) if employee else None
            password_hash = generate_password_hash(password)

            cur.execute("SELECT id FROM users WHERE username=%s", (username,))
            if cur.fetchone():
                cur.execute(
                    "UPDATE users SET password_hash=%s, role=%s, employee_id=%s, updated_at=NOW() WHERE username=%s",
                    (password_hash, role.value, employee_id, username),
                )
            else:
                cur.execute(
                    "INSERT INTO users (username, password_hash, role, employee_id) VALUES (%s, %s, %s, %s)",
                    (username, password_hash, role.value, employee_id),
                )
        conn.commit()


def list_tables(db_config: dict) -> list[str]:
    conn_factory = DatabaseConnection(DBConfig.from_dict(db_config))
    with closing(conn_factory.connect()) as conn:
        cur = conn.cursor()
        cur.execute("SHOW TABLES")
        return [row[0] for row in cur.fetchall()]
