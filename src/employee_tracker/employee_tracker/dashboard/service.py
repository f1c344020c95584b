from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Sequence

from ..attendance.model import AttendanceListRow
from ..attendance.repository import AttendanceRepository
from ..common.datetime_utils import first_of_month
from ..core.constants import DEFAULT_RECENT_RECORDS
from ..employees.repository import EmployeeRepository
from ..recipients.repository import RecipientRepository


@dataclass(frozen=True)
class DashboardOverview:
    active_employees: int
    records_this_month: int
    active_recipients: int
    recent_records: Sequence[AttendanceListRow]


class DashboardService:
    def __init__(
        self,
        *,
        employees: EmployeeRepository,
        attendance: AttendanceRepository,
        recipients: RecipientRepository,
        recent_limit: int = DEFAULT_RECENT_RECORDS,
    ):
        self._employees = employees
        self._attendance = attendance
        self._recipients = recipients
        self._recent_limit = recent_limit

    def overview(self, today: date) -> DashboardOverview:
        return DashboardOverview(
            active_employees=self._employees.count_active(),
            records_this_month=self._attendance.count_since(first_of_month(today)),
            active_recipients=self._recipients.count_active(),
            recent_records=self._attendance.list_recent(self._recent_limit),
        )
