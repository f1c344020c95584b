from __future__ import annotations

from datetime import date
from typing import Optional, Protocol, Sequence

from .model import AttendanceListRow, DeletedRecord, RecordFilters


class AttendanceRepository(Protocol):
    def list_rows(self, filters: RecordFilters) -> Sequence[AttendanceListRow]:
        raise NotImplementedError

    def list_recent(self, limit: int) -> Sequence[AttendanceListRow]:
        raise NotImplementedError

    def count_since(self, start_date: date) -> int:
        raise NotImplementedError

    def delete_record(self, attendance_id: int) -> Optional[DeletedRecord]:
        """Delete one record; reset its dispatch row in the same transaction.

        When other records redeemed from the same token remain, the dispatch
        row points at the most recent of them instead of being reset.
        """

        raise NotImplementedError
