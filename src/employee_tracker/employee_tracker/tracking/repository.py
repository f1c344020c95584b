from __future__ import annotations

from datetime import date
from decimal import Decimal
from typing import ContextManager, Optional, Protocol

from ..attendance.model import AttendanceRecord
from ..employees.model import Employee
from .model import LockedDispatch


class RedemptionTransaction(Protocol):
    """Operations available inside one redemption transaction.

    Leaving the context without an exception commits. ``rollback()`` ends
    the transaction early without writing anything.
    """

    def lock_dispatch_by_token(self, token: str) -> Optional[LockedDispatch]:
        raise NotImplementedError

    def get_employee(self, employee_id: int) -> Optional[Employee]:
        raise NotImplementedError

    def find_attendance(self, employee_id: int, work_date: date) -> Optional[AttendanceRecord]:
        raise NotImplementedError

    def insert_attendance(self, *, employee_id: int, work_date: date, wage_amount: Decimal, source_token: str) -> int:
        raise NotImplementedError

    def mark_used(self, dispatch_id: int, *, redeemed_by: int) -> None:
        raise NotImplementedError

    def rollback(self) -> None:
        raise NotImplementedError


class RedemptionRepository(Protocol):
    def transaction(self) -> ContextManager[RedemptionTransaction]:
        raise NotImplementedError
