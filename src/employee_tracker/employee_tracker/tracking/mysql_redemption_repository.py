from __future__ import annotations

from contextlib import contextmanager
from datetime import date
from decimal import Decimal
from typing import Iterator, Optional

from ..attendance.mysql_attendance_repository import row_to_record
from ..database.connection import DatabaseConnection
from ..database.mysql_base import fetchone
from ..employees.model import Employee
from ..employees.mysql_employee_repository import row_to_employee
from .model import LockedDispatch
from .repository import RedemptionRepository, RedemptionTransaction


class MySQLRedemptionTransaction(RedemptionTransaction):
    def __init__(self, conn, cur):
        self._conn = conn
        self._cur = cur
        self.rolled_back = False

    def lock_dispatch_by_token(self, token: str) -> Optional[LockedDispatch]:
        self._cur.execute(
            """
            SELECT id, dispatch_date, token, used, redeemed_by
            FROM dispatch_records
            WHERE token=%s
            FOR UPDATE
            """,
            (token,),
        )
        r = fetchone(self._cur)
        if not r:
            return None
        return LockedDispatch(
            dispatch_id=int(r["id"]),
            dispatch_date=r["dispatch_date"],
            token=r["token"],
            used=bool(r["used"]),
            redeemed_by=int(r["redeemed_by"]) if r.get("redeemed_by") is not None else None,
        )

    def get_employee(self, employee_id: int) -> Optional[Employee]:
        self._cur.execute(
            "SELECT id, first_name, last_name, daily_wage, active FROM employees WHERE id=%s",
            (int(employee_id),),
        )
        r = fetchone(self._cur)
        return row_to_employee(r) if r else None

    def find_attendance(self, employee_id: int, work_date: date):
        self._cur.execute(
            """
            SELECT id, employee_id, work_date, wage_amount, recorded_at, source_token
            FROM attendance_records
            WHERE employee_id=%s AND work_date=%s
            LIMIT 1
            """,
            (int(employee_id), work_date),
        )
        r = fetchone(self._cur)
        return row_to_record(r) if r else None

    def insert_attendance(self, *, employee_id: int, work_date: date, wage_amount: Decimal, source_token: str) -> int:
        self._cur.execute(
            """
            INSERT INTO attendance_records(employee_id, work_date, wage_amount, recorded_at, source_token)
            VALUES(%s, %s, %s, NOW(), %s)
            """,
            (int(employee_id), work_date, wage_amount, source_token),
        )
        return int(self._cur.lastrowid)

    def mark_used(self, dispatch_id: int, *, redeemed_by: int) -> None:
        self._cur.execute(
            "UPDATE dispatch_records SET used=1, redeemed_by=%s WHERE id=%s",
            (int(redeemed_by), int(dispatch_id)),
        )

    def rollback(self) -> None:
        self._conn.rollback()
        self.rolled_back = True


class MySQLRedemptionRepository(RedemptionRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    @contextmanager
    def transaction(self) -> Iterator[MySQLRedemptionTransaction]:
        conn = self._conn_factory.connect()
        try:
            cur = conn.cursor(dictionary=True)
            try:
                tx = MySQLRedemptionTransaction(conn, cur)
                yield tx
                if not tx.rolled_back:
                    conn.commit()
            finally:
                cur.close()
        except Exception:
            conn.rollback()
            raise
        finally:
            conn.close()
