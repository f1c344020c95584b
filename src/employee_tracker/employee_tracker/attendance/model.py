from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal
from typing import Optional


@dataclass(frozen=True)
class AttendanceRecord:
    """Domain entity: one credited work day.

    ``wage_amount`` is the employee's wage when the day was recorded, not a
    live reference to the employee row.
    """

    attendance_id: int
    employee_id: int
    work_date: date
    wage_amount: Decimal
    recorded_at: Optional[datetime] = None
    source_token: Optional[str] = None


@dataclass(frozen=True)
class AttendanceListRow:
    """Read-model for the records page and dashboard."""

    attendance_id: int
    employee_id: int
    employee_name: str
    work_date: date
    wage_amount: Decimal
    recorded_at: Optional[datetime]
    from_link: bool


@dataclass(frozen=True)
class RecordFilters:
    employee_id: Optional[int] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None


@dataclass(frozen=True)
class DeletedRecord:
    """What a delete removed and whether a dispatch row was reset."""

    record: AttendanceRecord
    dispatch_reset: bool
