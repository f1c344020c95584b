from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal


@dataclass(frozen=True)
class Employee:
    """Domain entity: an employee who can be credited with a work day."""

    employee_id: int
    first_name: str
    last_name: str
    daily_wage: Decimal
    active: bool = True

    @property
    def name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()
