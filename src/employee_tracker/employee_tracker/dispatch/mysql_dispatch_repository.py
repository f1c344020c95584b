from __future__ import annotations

from contextlib import contextmanager
from datetime import date
from typing import Iterator, Optional

from mysql.connector import errors as mysql_errors

from ..core.exceptions import DuplicateDispatchError
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchone, is_duplicate_key
from .model import DispatchRecord
from .repository import DispatchRepository, DispatchTransaction


def row_to_dispatch(r: dict) -> DispatchRecord:
    return DispatchRecord(
        dispatch_id=int(r["id"]),
        dispatch_date=r["dispatch_date"],
        token=r["token"],
        used=bool(r.get("used")),
        redeemed_by=int(r["redeemed_by"]) if r.get("redeemed_by") is not None else None,
        created_at=r.get("created_at"),
    )


class MySQLDispatchTransaction(DispatchTransaction):
    def __init__(self, cur):
        self._cur = cur

    def insert(self, *, dispatch_date: date, token: str) -> int:
        try:
            self._cur.execute(
                "INSERT INTO dispatch_records(dispatch_date, token, used) VALUES(%s, %s, 0)",
                (dispatch_date, token),
            )
        except mysql_errors.IntegrityError as e:
            if is_duplicate_key(e):
                raise DuplicateDispatchError(f"dispatch for {dispatch_date.isoformat()} already exists") from e
            raise
        return int(self._cur.lastrowid)


class MySQLDispatchRepository(DispatchRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_for_date(self, dispatch_date: date) -> Optional[DispatchRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT id, dispatch_date, token, used, redeemed_by, created_at
                FROM dispatch_records
                WHERE dispatch_date=%s
                """,
                (dispatch_date,),
            )
            r = fetchone(cur)
            return row_to_dispatch(r) if r else None

    @contextmanager
    def transaction(self) -> Iterator[MySQLDispatchTransaction]:
        with db_cursor(self._conn_factory) as (_, cur):
            yield MySQLDispatchTransaction(cur)
