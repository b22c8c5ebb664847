from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import Iterator

import mysql.connector

from ..common.retry import retry_call
from .connection import DBConfig, is_transient_db_error

logger = logging.getLogger(__name__)

HRMS_TABLES = (
    "attendance_records",
    "leave_requests",
    "leave_policies",
    "leave_balances",
    "salary_configs",
    "salaries",
)

_QUOTES = {"'", '"', "`"}


def db_config_from_dict(db_config: dict) -> DBConfig:
    return DBConfig(
        host=str(db_config.get("host", "localhost")),
        port=int(db_config.get("port", 3306)),
        user=str(db_config.get("user", "root")),
        password=str(db_config.get("password", "")),
        database=str(db_config.get("database", "hrms_db")),
    )


def _without_database_selection(sql: str) -> str:
    # schema.sql names a database for manual use; the configured one wins here.
    return re.sub(r"(?im)^\s*(CREATE\s+DATABASE|USE)\b[^;]*;\s*$", "", sql)


def split_statements(sql: str) -> Iterator[str]:
    """Split a schema script on ``;``, ignoring ``--`` comments and quoted text."""
    stmt: list[str] = []
    quote = None
    i = 0
    while i < len(sql):
        ch = sql[i]
        if quote:
            stmt.append(ch)
            if ch == "\\" and i + 1 < len(sql):
                stmt.append(sql[i + 1])
                i += 1
            elif ch == quote:
                quote = None
        elif ch in _QUOTES:
            quote = ch
            stmt.append(ch)
        elif sql.startswith("--", i):
            end = sql.find("\n", i)
            i = len(sql) if end < 0 else end
            continue
        elif ch == ";":
            text = "".join(stmt).strip()
            if text:
                yield text
            stmt = []
        else:
            stmt.append(ch)
        i += 1

    text = "".join(stmt).strip()
    if text:
        yield text


def _open(config: DBConfig, *, with_database: bool = True):
    kwargs = {
        "host": config.host,
        "port": config.port,
        "user": config.user,
        "password": config.password,
        "use_pure": True,
    }
    if with_database:
        kwargs["database"] = config.database
    return retry_call(
        lambda: mysql.connector.connect(**kwargs),
        is_transient=is_transient_db_error,
        max_attempts=config.retry_attempts,
        timeout=config.retry_timeout,
    )


def ensure_database_exists(db_config: dict) -> None:
    config = db_config_from_dict(db_config)
    conn = _open(config, with_database=False)
    try:
        cur = conn.cursor()
        cur.execute(
            f"CREATE DATABASE IF NOT EXISTS `{config.database}` CHARACTER SET utf8mb4 COLLATE utf8mb4_unicode_ci"
        )
        conn.commit()
    finally:
        conn.close()


def apply_schema(db_config: dict, *, schema_path: str | Path) -> None:
    """Create the database and every table of ``schema_path`` (idempotent DDL)."""
    ensure_database_exists(db_config)
    sql = _without_database_selection(Path(schema_path).read_text(encoding="utf-8"))

    conn = _open(db_config_from_dict(db_config))
    try:
        cur = conn.cursor()
        count = 0
        for stmt in split_statements(sql):
            cur.execute(stmt)
            count += 1
        conn.commit()
        logger.info("Applied %d schema statements from %s", count, schema_path)
    finally:
        conn.close()


def list_tables(db_config: dict) -> list[str]:
    conn = _open(db_config_from_dict(db_config))
    try:
        cur = conn.cursor()
        cur.execute("SHOW TABLES")
        return [row[0] for row in cur.fetchall()]
    finally:
        conn.close()


def missing_tables(db_config: dict) -> list[str]:
    present = set(list_tables(db_config))
    return [t for t in HRMS_TABLES if t not in present]
