from __future__ import annotations

from pathlib import Path

from src.employee_tracker.employee_tracker.database.bootstrap import (
    ADDITIVE_INDEXES,
    _iter_sql_statements,
    _strip_comments,
    _strip_create_db_and_use,
    admin_password_problems,
)


def test_weak_admin_passwords():
    assert admin_password_problems("admin", "a-long-enough-secret") == []
    assert "Password must be at least 12 characters" in admin_password_problems("admin", "short")
    assert "Password cannot be a common default value" in admin_password_problems("root", "password")
    assert "Password cannot be the same as username" in admin_password_problems("administrator1", "Administrator1")


def test_schema_splitter_handles_quotes_and_strips_database_lines():
    sql = """
    -- comment
    CREATE DATABASE IF NOT EXISTS whatever;
    USE whatever;
    CREATE TABLE a (note VARCHAR(10) DEFAULT 'x;y');
    CREATE TABLE b (id INT)
    """
    statements = list(_iter_sql_statements(_strip_create_db_and_use(_strip_comments(sql))))

    assert statements == ["CREATE TABLE a (note VARCHAR(10) DEFAULT 'x;y')", "CREATE TABLE b (id INT)"]


def test_one_dispatch_per_day_index_is_migrated():
    names = {name for _, name, _ in ADDITIVE_INDEXES}
    assert "ux_dispatch_records_date" in names


def test_fresh_schema_declares_one_dispatch_per_day():
    sql = (Path(__file__).resolve().parents[2] / "database" / "schema.sql").read_text(encoding="utf-8")
    statements = list(_iter_sql_statements(_strip_create_db_and_use(_strip_comments(sql))))
    [dispatch_table] = [s for s in statements if "CREATE TABLE IF NOT EXISTS dispatch_records" in s]

    assert "UNIQUE KEY ux_dispatch_records_date (dispatch_date)" in dispatch_table
