from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable

import mysql.connector
from werkzeug.security import generate_password_hash

from ..core.constants import MIN_ADMIN_PASSWORD_LENGTH

logger = logging.getLogger(__name__)

# (table, column, column definition) added after the first schema release.
ADDITIVE_COLUMNS: tuple[tuple[str, str, str], ...] = (
    ("employees", "daily_wage", "DECIMAL(12, 2) NOT NULL DEFAULT 0"),
    ("attendance_records", "wage_amount", "DECIMAL(12, 2) NOT NULL DEFAULT 0"),
    ("attendance_records", "source_token", "VARCHAR(64) NULL"),
    ("dispatch_records", "redeemed_by", "INT NULL"),
)

# (table, index name, DDL). One dispatch row per calendar day.
ADDITIVE_INDEXES: tuple[tuple[str, str, str], ...] = (
    ("dispatch_records", "ux_dispatch_records_date", "CREATE UNIQUE INDEX ux_dispatch_records_date ON dispatch_records (dispatch_date)"),
    ("attendance_records", "idx_attendance_records_source_token", "CREATE INDEX idx_attendance_records_source_token ON attendance_records (source_token)"),
)

COMMON_PASSWORDS = {"changeme", "password", "admin", "12345678", "administrator"}


@dataclass(frozen=True)
class DBTarget:
    host: str
    port: int
    user: str
    password: str
    database: str


def _as_target(db_config: dict) -> DBTarget:
    return DBTarget(
        host=str(db_config.get("host", "localhost")),
        port=int(db_config.get("port", 3306)),
        user=str(db_config.get("user", "root")),
        password=str(db_config.get("password", "")),
        database=str(db_config.get("database", "employee_tracker")),
    )


def _connect(target: DBTarget, *, with_database: bool = True):
    kwargs = dict(host=target.host, port=target.port, user=target.user, password=target.password, use_pure=True)
    if with_database:
        kwargs["database"] = target.database
    return mysql.connector.connect(**kwargs)


def _strip_create_db_and_use(sql: str) -> str:
    # Keep schema.sql compatible regardless of DB name.
    sql = re.sub(r"(?im)^\s*CREATE\s+DATABASE\b.*?;\s*$", "", sql)
    sql = re.sub(r"(?im)^\s*USE\b.*?;\s*$", "", sql)
    return sql


def _strip_comments(sql: str) -> str:
    return re.sub(r"(?m)^\s*--.*$", "", sql)


def _iter_sql_statements(sql: str) -> Iterable[str]:
    # Minimal SQL splitter for schema files (handles ';' inside quotes).
    buf: list[str] = []
    in_single = False
    in_double = False
    escape = False

    for ch in sql:
        if escape:
            buf.append(ch)
            escape = False
            continue

        if ch == "\\":
            buf.append(ch)
            escape = True
            continue

        if ch == "'" and not in_double:
            in_single = not in_single
            buf.append(ch)
            continue

        if ch == '"' and not in_single:
            in_double = not in_double
            buf.append(ch)
            continue

        if ch == ";" and not in_single and not in_double:
            stmt = "".join(buf).strip()
            buf.clear()
            if stmt:
                yield stmt
            continue

        buf.append(ch)

    tail = "".join(buf).strip()
    if tail:
        yield tail


def _exec_sql(cur, sql: str) -> None:
    for stmt in _iter_sql_statements(sql):
        cur.execute(stmt)


def ensure_database_exists(db_config: dict) -> None:
    target = _as_target(db_config)
    conn = _connect(target, with_database=False)
    try:
        cur = conn.cursor()
        cur.execute(
            f"CREATE DATABASE IF NOT EXISTS `{target.database}` CHARACTER SET utf8mb4 COLLATE utf8mb4_unicode_ci;"
        )
        conn.commit()
    finally:
        conn.close()


def apply_schema(db_config: dict, *, schema_path: str | Path) -> None:
    target = _as_target(db_config)
    ensure_database_exists(db_config)

    schema_path = Path(schema_path)
    sql = _strip_create_db_and_use(_strip_comments(schema_path.read_text(encoding="utf-8")))

    conn = _connect(target)
    try:
        cur = conn.cursor()
        _exec_sql(cur, sql)
        conn.commit()
    finally:
        conn.close()


def _column_exists(cur, database: str, table: str, column: str) -> bool:
    cur.execute(
        """
        SELECT COUNT(*) FROM information_schema.COLUMNS
        WHERE TABLE_SCHEMA=%s AND TABLE_NAME=%s AND COLUMN_NAME=%s
        """,
        (database, table, column),
    )
    return int(cur.fetchone()[0]) > 0


def _index_exists(cur, database: str, table: str, index_name: str) -> bool:
    cur.execute(
        """
        SELECT COUNT(*) FROM information_schema.STATISTICS
        WHERE TABLE_SCHEMA=%s AND TABLE_NAME=%s AND INDEX_NAME=%s
        """,
        (database, table, index_name),
    )
    return int(cur.fetchone()[0]) > 0


def apply_migrations(db_config: dict) -> list[str]:
    """Add missing columns/indexes. Returns the DDL statements that ran."""

    target = _as_target(db_config)
    applied: list[str] = []
    conn = _connect(target)
    try:
        cur = conn.cursor()
        for table, column, definition in ADDITIVE_COLUMNS:
            if not _column_exists(cur, target.database, table, column):
                ddl = f"ALTER TABLE `{table}` ADD COLUMN `{column}` {definition}"
                cur.execute(ddl)
                applied.append(ddl)
        for table, index_name, ddl in ADDITIVE_INDEXES:
            if not _index_exists(cur, target.database, table, index_name):
                cur.execute(ddl)
                applied.append(ddl)
        conn.commit()
    finally:
        conn.close()

    for ddl in applied:
        logger.info("migration applied: %s", ddl)
    return applied


def admin_password_problems(username: str, password: str) -> list[str]:
    problems: list[str] = []
    if len(password) < MIN_ADMIN_PASSWORD_LENGTH:
        problems.append(f"Password must be at least {MIN_ADMIN_PASSWORD_LENGTH} characters")
    if password.lower() in COMMON_PASSWORDS:
        problems.append("Password cannot be a common default value")
    if password.lower() == username.lower():
        problems.append("Password cannot be the same as username")
    return problems


def ensure_admin_user(db_config: dict, *, username: str | None, password: str | None, strict: bool) -> bool:
    """Create the bootstrap admin when configured and missing.

    Returns True when a user row was inserted. With ``strict`` (production)
    a weak password aborts startup instead of logging a warning.
    """

    if not username or not password:
        if strict:
            logger.warning("No admin credentials configured. Set ADMIN_USERNAME and ADMIN_PASSWORD.")
        return False

    problems = admin_password_problems(username, password)
    if problems and strict:
        for p in problems:
            logger.error("admin password rejected: %s", p)
        raise RuntimeError("Insecure admin password configuration")
    for p in problems:
        logger.warning("admin password is weak (allowed outside production): %s", p)

    target = _as_target(db_config)
    conn = _connect(target)
    try:
        cur = conn.cursor()
        cur.execute("SELECT id FROM users WHERE username=%s", (username,))
        if cur.fetchone():
            return False
        cur.execute(
            "INSERT INTO users (username, password_hash) VALUES (%s, %s)",
            (username, generate_password_hash(password)),
        )
        conn.commit()
    finally:
        conn.close()

    logger.info("admin user created")
    return True


def list_tables(db_config: dict) -> list[str]:
    target = _as_target(db_config)
    conn = _connect(target)
    try:
        cur = conn.cursor()
        cur.execute("SHOW TABLES")
        return [row[0] for row in cur.fetchall()]
    finally:
        conn.close()
