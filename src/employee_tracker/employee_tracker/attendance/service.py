from __future__ import annotations

import logging
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Optional, Sequence

from ..common.validators import parse_optional_date, require_positive_id
from ..core.exceptions import NotFoundError, ValidationError
from .model import AttendanceListRow, DeletedRecord, RecordFilters
from .repository import AttendanceRepository

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RecordsPage:
    rows: Sequence[AttendanceListRow]
    filters: RecordFilters
    error: Optional[str] = None
    total_wages: Decimal = field(default_factory=lambda: Decimal("0.00"))


class AttendanceService:
    def __init__(self, attendance: AttendanceRepository):
        self._attendance = attendance

    @staticmethod
    def parse_filters(*, employee_id: str | None, start_date: str | None, end_date: str | None) -> RecordFilters:
        emp = require_positive_id(employee_id, "employee selection") if (employee_id or "").strip() else None
        start = parse_optional_date(start_date, "start date")
        end = parse_optional_date(end_date, "end date")
        if start and end and start > end:
            raise ValidationError("Start date cannot be after end date")
        return RecordFilters(employee_id=emp, start_date=start, end_date=end)

    def list_records(self, *, employee_id: str | None = None, start_date: str | None = None, end_date: str | None = None) -> RecordsPage:
        """Filtered records; an invalid filter is reported and ignored."""

        error = None
        try:
            filters = self.parse_filters(employee_id=employee_id, start_date=start_date, end_date=end_date)
        except ValidationError as e:
            error = str(e)
            filters = RecordFilters()

        rows = self._attendance.list_rows(filters)
        total = sum((r.wage_amount for r in rows), Decimal("0.00"))
        return RecordsPage(rows=rows, filters=filters, error=error, total_wages=total)

    def delete_record(self, attendance_id) -> DeletedRecord:
        attendance_id = require_positive_id(attendance_id, "record ID")
        deleted = self._attendance.delete_record(attendance_id)
        if not deleted:
            raise NotFoundError("Record not found. It may have already been deleted.")
        logger.info(
            "attendance record deleted id=%s employee=%s date=%s dispatch_reset=%s",
            deleted.record.attendance_id,
            deleted.record.employee_id,
            deleted.record.work_date,
            deleted.dispatch_reset,
        )
        return deleted
