from __future__ import annotations

from enum import Enum


class DispatchOutcome(str, Enum):
    """Result kinds of one daily dispatch attempt."""

    SENT = "SENT"
    ALREADY_SENT = "ALREADY_SENT"
    NO_EMPLOYEES = "NO_EMPLOYEES"
    NO_RECIPIENTS = "NO_RECIPIENTS"
    NOT_CONFIGURED = "NOT_CONFIGURED"
    MAIL_FAILED = "MAIL_FAILED"
    ERROR = "ERROR"

    @property
    def retriable(self) -> bool:
        return self in {DispatchOutcome.MAIL_FAILED, DispatchOutcome.ERROR}


class DispatchState(str, Enum):
    """Lifecycle of a dispatch token row."""

    PENDING = "PENDING"
    REDEEMED = "REDEEMED"


class RedemptionFailure(str, Enum):
    """Why a tracking link was refused."""

    INVALID_LINK_FORMAT = "INVALID_LINK_FORMAT"
    INVALID_REFERENCE = "INVALID_REFERENCE"
    LINK_NOT_FOUND = "LINK_NOT_FOUND"
    EMPLOYEE_NOT_FOUND = "EMPLOYEE_NOT_FOUND"
    EMPLOYEE_INACTIVE = "EMPLOYEE_INACTIVE"
    RATE_LIMITED = "RATE_LIMITED"
    UNEXPECTED = "UNEXPECTED"
