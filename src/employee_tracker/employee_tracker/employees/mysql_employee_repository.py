from __future__ import annotations

from decimal import Decimal
from typing import Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import Employee
from .repository import EmployeeRepository

_COLUMNS = "id, first_name, last_name, daily_wage, active"


def row_to_employee(r: dict) -> Employee:
    return Employee(
        employee_id=int(r["id"]),
        first_name=r["first_name"],
        last_name=r["last_name"],
        daily_wage=Decimal(r.get("daily_wage") or 0),
        active=bool(r.get("active", True)),
    )


class MySQLEmployeeRepository(EmployeeRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, employee_id: int) -> Optional[Employee]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM employees WHERE id=%s", (int(employee_id),))
            r = fetchone(cur)
            return row_to_employee(r) if r else None

    def list_all(self) -> Sequence[Employee]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM employees ORDER BY active DESC, first_name ASC, last_name ASC")
            return [row_to_employee(r) for r in fetchall(cur)]

    def list_active(self) -> Sequence[Employee]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM employees WHERE active=1 ORDER BY first_name ASC, last_name ASC")
            return [row_to_employee(r) for r in fetchall(cur)]

    def count_active(self) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT COUNT(*) AS n FROM employees WHERE active=1")
            return int(fetchone(cur)["n"])

    def create(self, *, first_name: str, last_name: str, daily_wage: Decimal) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "INSERT INTO employees(first_name, last_name, daily_wage, active) VALUES(%s,%s,%s,1)",
                (first_name, last_name, daily_wage),
            )
            return int(cur.lastrowid)

    def update(self, *, employee_id: int, first_name: str, last_name: str, daily_wage: Decimal, active: bool) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE employees
                SET first_name=%s, last_name=%s, daily_wage=%s, active=%s
                WHERE id=%s
                """,
                (first_name, last_name, daily_wage, 1 if active else 0, int(employee_id)),
            )
            # rowcount is 0 when nothing changed, so re-check existence.
            if cur.rowcount > 0:
                return True
            cur.execute("SELECT 1 FROM employees WHERE id=%s", (int(employee_id),))
            return fetchone(cur) is not None

    def set_active(self, employee_id: int, *, active: bool) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("UPDATE employees SET active=%s WHERE id=%s", (1 if active else 0, int(employee_id)))
            if cur.rowcount > 0:
                return True
            cur.execute("SELECT 1 FROM employees WHERE id=%s", (int(employee_id),))
            return fetchone(cur) is not None
