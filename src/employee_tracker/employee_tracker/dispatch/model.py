from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional

from ..core.enums import DispatchOutcome, DispatchState


@dataclass(frozen=True)
class DispatchRecord:
    """Domain entity: the one notification sent for a calendar day."""

    dispatch_id: int
    dispatch_date: date
    token: str
    used: bool = False
    redeemed_by: Optional[int] = None
    created_at: Optional[datetime] = None

    @property
    def state(self) -> DispatchState:
        return DispatchState.REDEEMED if self.used else DispatchState.PENDING


@dataclass(frozen=True)
class DispatchResult:
    sent: bool
    outcome: DispatchOutcome
    detail: str

    @property
    def retriable(self) -> bool:
        return self.outcome.retriable
