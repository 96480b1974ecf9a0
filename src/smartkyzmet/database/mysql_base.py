from __future__ import annotations

from contextlib import contextmanager
from datetime import date, datetime
from typing import Any, Dict, List, Optional, Sequence, Tuple

from .connection import DatabaseConnection


@contextmanager
def db_cursor(conn_factory: DatabaseConnection, *, dictionary: bool = True):
    conn = conn_factory.connect()
    try:
        cur = conn.cursor(dictionary=dictionary)
        try:
            yield conn, cur
            conn.commit()
        finally:
            cur.close()
    except Exception:
        conn.rollback()
        raise
    finally:
        conn.close()


def fetchone(cur) -> Optional[Dict[str, Any]]:
    row = cur.fetchone()
    return row if row else None


def fetchall(cur) -> List[Dict[str, Any]]:
    rows = cur.fetchall()
    return list(rows or [])


def build_where(clauses: Sequence[Tuple[str, Any]]) -> Tuple[str, List[Any]]:
    """Join `(sql, param)` pairs into a WHERE body, skipping params that are None.

    Returns ("1=1", []) when nothing applies, so callers can always write
    `WHERE {where}`.
    """

    parts: list[str] = []
    params: list[Any] = []
    for sql, param in clauses:
        if param is None:
            continue
        parts.append(sql)
        params.append(param)
    return (" AND ".join(parts) if parts else "1=1"), params


def as_date(value: Any) -> Optional[date]:
    """Normalize DATE values (mysql-connector may return date, datetime or str)."""

    if value is None:
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        return datetime.strptime(value.strip()[:10], "%Y-%m-%d").date()
    raise TypeError(f"Unsupported MySQL DATE value type: {type(value)!r}")


def as_datetime(value: Any) -> Optional[datetime]:
    """Normalize DATETIME values across connector implementations."""

    if value is None:
        return None
    if isinstance(value, datetime):
        return value
    if isinstance(value, date):
        return datetime.combine(value, datetime.min.time())
    if isinstance(value, str):
        text = value.strip()
        fmt = "%Y-%m-%d %H:%M:%S" if len(text) > 10 else "%Y-%m-%d"
        return datetime.strptime(text[:19], fmt)
    raise TypeError(f"Unsupported MySQL DATETIME value type: {type(value)!r}")
