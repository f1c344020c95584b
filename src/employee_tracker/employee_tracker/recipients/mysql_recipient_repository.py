from __future__ import annotations

from typing import Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import Recipient
from .repository import RecipientRepository


def _to_recipient(r: dict) -> Recipient:
    return Recipient(recipient_id=int(r["id"]), email=r["email"], active=bool(r["active"]))


class MySQLRecipientRepository(RecipientRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, recipient_id: int) -> Optional[Recipient]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT id, email, active FROM recipients WHERE id=%s", (int(recipient_id),))
            r = fetchone(cur)
            return _to_recipient(r) if r else None

    def get_by_email(self, email: str) -> Optional[Recipient]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT id, email, active FROM recipients WHERE email=%s", (email,))
            r = fetchone(cur)
            return _to_recipient(r) if r else None

    def list_all(self) -> Sequence[Recipient]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT id, email, active FROM recipients ORDER BY active DESC, email ASC")
            return [_to_recipient(r) for r in fetchall(cur)]

    def list_active_emails(self) -> Sequence[str]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT email FROM recipients WHERE active=1 ORDER BY email ASC")
            return [r["email"] for r in fetchall(cur)]

    def count_active(self) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT COUNT(*) AS n FROM recipients WHERE active=1")
            return int(fetchone(cur)["n"])

    def create(self, email: str) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("INSERT INTO recipients(email, active) VALUES(%s, 1)", (email,))
            return int(cur.lastrowid)

    def set_active(self, recipient_id: int, *, active: bool) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("UPDATE recipients SET active=%s WHERE id=%s", (1 if active else 0, int(recipient_id)))
            if cur.rowcount > 0:
                return True
            cur.execute("SELECT 1 FROM recipients WHERE id=%s", (int(recipient_id),))
            return fetchone(cur) is not None

    def delete_by_id(self, recipient_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM recipients WHERE id=%s", (int(recipient_id),))
            return cur.rowcount > 0
