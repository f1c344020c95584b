from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Optional


@dataclass(frozen=True)
class LockedDispatch:
    """Dispatch row as seen under the redemption row lock."""

    dispatch_id: int
    dispatch_date: date
    token: str
    used: bool
    redeemed_by: Optional[int]


@dataclass(frozen=True)
class RedemptionResult:
    employee_id: int
    employee_name: str
    work_date: date
    wage_amount: Decimal
    already_recorded: bool = False
