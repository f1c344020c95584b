from __future__ import annotations

from decimal import Decimal
from typing import Optional, Protocol, Sequence

from .model import Employee


class EmployeeRepository(Protocol):
    def get_by_id(self, employee_id: int) -> Optional[Employee]:
        raise NotImplementedError

    def list_all(self) -> Sequence[Employee]:
        """Active first, then by first name."""

        raise NotImplementedError

    def list_active(self) -> Sequence[Employee]:
        raise NotImplementedError

    def count_active(self) -> int:
        raise NotImplementedError

    def create(self, *, first_name: str, last_name: str, daily_wage: Decimal) -> int:
        raise NotImplementedError

    def update(self, *, employee_id: int, first_name: str, last_name: str, daily_wage: Decimal, active: bool) -> bool:
        raise NotImplementedError

    def set_active(self, employee_id: int, *, active: bool) -> bool:
        raise NotImplementedError
