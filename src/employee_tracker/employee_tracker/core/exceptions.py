from __future__ import annotations

from .enums import RedemptionFailure


class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""


class AuthenticationError(DomainError):
    """Raised when login credentials are invalid."""


class NotFoundError(DomainError):
    """Raised when an addressed row does not exist (or no longer exists)."""


class RateLimitedError(DomainError):
    """Raised when a client address exceeded its attempt budget."""

    def __init__(self, message: str, *, retry_after_seconds: int = 0):
        super().__init__(message)
        self.retry_after_seconds = int(retry_after_seconds)


class DuplicateDispatchError(DomainError):
    """Raised when today's dispatch row already exists (unique key hit)."""


class MailDeliveryError(DomainError):
    """Raised when the mail relay rejected or could not be reached."""


_REDEMPTION_MESSAGES = {
    RedemptionFailure.INVALID_LINK_FORMAT: "This link is not valid. Please use the link exactly as it appears in the email.",
    RedemptionFailure.INVALID_REFERENCE: "This link is not valid. Please use the link exactly as it appears in the email.",
    RedemptionFailure.LINK_NOT_FOUND: "Invalid or expired link",
    RedemptionFailure.EMPLOYEE_NOT_FOUND: "Employee not found",
    RedemptionFailure.EMPLOYEE_INACTIVE: "This employee is no longer active",
    RedemptionFailure.RATE_LIMITED: "Too many attempts. Please wait a few minutes and try again.",
    RedemptionFailure.UNEXPECTED: "An error occurred. Please try again.",
}


class RedemptionError(DomainError):
    """Terminal failure of a tracking-link redemption.

    The message is safe to show to the public: it never contains tokens,
    ids or driver detail.
    """

    def __init__(self, reason: RedemptionFailure):
        super().__init__(_REDEMPTION_MESSAGES[reason])
        self.reason = reason
