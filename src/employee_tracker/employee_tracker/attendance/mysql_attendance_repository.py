from __future__ import annotations

from datetime import date
from decimal import Decimal
from typing import Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import AttendanceListRow, AttendanceRecord, DeletedRecord, RecordFilters
from .repository import AttendanceRepository

_LIST_SELECT = """
    SELECT
        ar.id, ar.employee_id, ar.work_date, ar.wage_amount, ar.recorded_at, ar.source_token,
        e.first_name, e.last_name
    FROM attendance_records ar
    JOIN employees e ON e.id = ar.employee_id
"""


def _to_list_row(r: dict) -> AttendanceListRow:
    return AttendanceListRow(
        attendance_id=int(r["id"]),
        employee_id=int(r["employee_id"]),
        employee_name=f"{r['first_name']} {r['last_name']}".strip(),
        work_date=r["work_date"],
        wage_amount=Decimal(r.get("wage_amount") or 0),
        recorded_at=r.get("recorded_at"),
        from_link=bool(r.get("source_token")),
    )


def row_to_record(r: dict) -> AttendanceRecord:
    return AttendanceRecord(
        attendance_id=int(r["id"]),
        employee_id=int(r["employee_id"]),
        work_date=r["work_date"],
        wage_amount=Decimal(r.get("wage_amount") or 0),
        recorded_at=r.get("recorded_at"),
        source_token=r.get("source_token"),
    )


class MySQLAttendanceRepository(AttendanceRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_rows(self, filters: RecordFilters) -> Sequence[AttendanceListRow]:
        clauses = ["1=1"]
        params: list[object] = []

        if filters.employee_id is not None:
            clauses.append("ar.employee_id=%s")
            params.append(int(filters.employee_id))
        if filters.start_date is not None:
            clauses.append("ar.work_date >= %s")
            params.append(filters.start_date)
        if filters.end_date is not None:
            clauses.append("ar.work_date <= %s")
            params.append(filters.end_date)

        where = " AND ".join(clauses)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                {_LIST_SELECT}
                WHERE {where}
                ORDER BY ar.work_date DESC, ar.recorded_at DESC
                """,
                tuple(params),
            )
            return [_to_list_row(r) for r in fetchall(cur)]

    def list_recent(self, limit: int) -> Sequence[AttendanceListRow]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                {_LIST_SELECT}
                ORDER BY ar.work_date DESC, ar.recorded_at DESC
                LIMIT %s
                """,
                (int(limit),),
            )
            return [_to_list_row(r) for r in fetchall(cur)]

    def count_since(self, start_date: date) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT COUNT(*) AS n FROM attendance_records WHERE work_date >= %s", (start_date,))
            return int(fetchone(cur)["n"])

    def delete_record(self, attendance_id: int) -> Optional[DeletedRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT id, employee_id, work_date, wage_amount, recorded_at, source_token
                FROM attendance_records
                WHERE id=%s
                """,
                (int(attendance_id),),
            )
            r = fetchone(cur)
            if not r:
                return None
            record = row_to_record(r)

            # The record is read unlocked to find its token; the dispatch row is
            # locked before the record is deleted, as redemption locks it before inserting.
            dispatch = None
            if record.source_token:
                cur.execute(
                    "SELECT id FROM dispatch_records WHERE token=%s FOR UPDATE",
                    (record.source_token,),
                )
                dispatch = fetchone(cur)

            cur.execute("DELETE FROM attendance_records WHERE id=%s", (record.attendance_id,))
            if cur.rowcount == 0:
                return None

            if not dispatch:
                return DeletedRecord(record=record, dispatch_reset=False)

            cur.execute(
                """
                SELECT employee_id FROM attendance_records
                WHERE source_token=%s
                ORDER BY recorded_at DESC, id DESC
                LIMIT 1
                """,
                (record.source_token,),
            )
            remaining = fetchone(cur)
            if remaining:
                cur.execute(
                    "UPDATE dispatch_records SET used=1, redeemed_by=%s WHERE id=%s",
                    (int(remaining["employee_id"]), int(dispatch["id"])),
                )
            else:
                cur.execute(
                    "UPDATE dispatch_records SET used=0, redeemed_by=NULL WHERE id=%s",
                    (int(dispatch["id"]),),
                )
            return DeletedRecord(record=record, dispatch_reset=remaining is None)
