from __future__ import annotations

from datetime import date

import pytest
from mysql.connector import errorcode
from mysql.connector import errors as mysql_errors

from src.employee_tracker.employee_tracker.core.exceptions import DuplicateDispatchError
from src.employee_tracker.employee_tracker.dispatch.mysql_dispatch_repository import MySQLDispatchTransaction

DAY = date(2024, 6, 1)
TOKEN = "123e4567-e89b-42d3-a456-426614174000"


class StubCursor:
    def __init__(self, error=None, lastrowid=7):
        self.error = error
        self.lastrowid = lastrowid
        self.executed = []

    def execute(self, sql, params=None):
        self.executed.append((sql, params))
        if self.error is not None:
            raise self.error


def test_insert_returns_new_row_id():
    cur = StubCursor(lastrowid=42)

    assert MySQLDispatchTransaction(cur).insert(dispatch_date=DAY, token=TOKEN) == 42
    assert cur.executed[0][1] == (DAY, TOKEN)


def test_duplicate_date_becomes_duplicate_dispatch_error():
    dup = mysql_errors.IntegrityError(msg="Duplicate entry '2024-06-01'", errno=errorcode.ER_DUP_ENTRY)
    cur = StubCursor(error=dup)

    with pytest.raises(DuplicateDispatchError) as excinfo:
        MySQLDispatchTransaction(cur).insert(dispatch_date=DAY, token=TOKEN)

    assert excinfo.value.__cause__ is dup


def test_other_integrity_errors_propagate_unchanged():
    fk = mysql_errors.IntegrityError(msg="Cannot add or update a child row", errno=errorcode.ER_NO_REFERENCED_ROW_2)
    cur = StubCursor(error=fk)

    with pytest.raises(mysql_errors.IntegrityError) as excinfo:
        MySQLDispatchTransaction(cur).insert(dispatch_date=DAY, token=TOKEN)

    assert excinfo.value is fk
    assert not isinstance(excinfo.value, DuplicateDispatchError)
