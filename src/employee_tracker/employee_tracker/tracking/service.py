from __future__ import annotations

import logging

from ..common.rate_limit import AttemptLimiter
from ..core.enums import RedemptionFailure
from ..core.exceptions import RedemptionError
from ..core.logging_setup import short_token
from .employee_ref import EmployeeRefSigner, is_token_shaped, parse_employee_ref
from .model import RedemptionResult
from .repository import RedemptionRepository

logger = logging.getLogger(__name__)


class RedemptionService:
    """Use case: an employee clicks the tracking link from today's email.

    PENDING -> REDEEMED on the first successful redemption of a token.
    A second click by the same employee is an idempotent success; a click
    by another employee records their own day and takes over
    ``redeemed_by``. The dispatch row lock serializes all of them.
    """

    def __init__(self, repo: RedemptionRepository, signer: EmployeeRefSigner, limiter: AttemptLimiter):
        self._repo = repo
        self._signer = signer
        self._limiter = limiter

    def redeem(self, token: str, employee_ref: str, client_ip: str = "unknown") -> RedemptionResult:
        if not self._limiter.hit(client_ip).allowed:
            logger.info("tracking rate limited ip=%s", client_ip)
            raise RedemptionError(RedemptionFailure.RATE_LIMITED)

        ref = parse_employee_ref(employee_ref)
        if not is_token_shaped(token) or ref is None:
            logger.info("tracking link malformed ip=%s", client_ip)
            raise RedemptionError(RedemptionFailure.INVALID_LINK_FORMAT)

        try:
            employee_id = self._signer.verify(ref, token)
        except RedemptionError:
            logger.info("tracking ref rejected token=%s ip=%s", short_token(token), client_ip)
            raise

        try:
            return self._redeem_locked(token, employee_id)
        except RedemptionError as e:
            logger.info("tracking refused token=%s reason=%s", short_token(token), e.reason.value)
            raise
        except Exception:
            logger.exception("tracking failed token=%s employee_id=%s", short_token(token), employee_id)
            raise RedemptionError(RedemptionFailure.UNEXPECTED)

    def _redeem_locked(self, token: str, employee_id: int) -> RedemptionResult:
        with self._repo.transaction() as tx:
            dispatch = tx.lock_dispatch_by_token(token)
            if dispatch is None:
                raise RedemptionError(RedemptionFailure.LINK_NOT_FOUND)

            employee = tx.get_employee(employee_id)
            if employee is None:
                raise RedemptionError(RedemptionFailure.EMPLOYEE_NOT_FOUND)
            if not employee.active:
                raise RedemptionError(RedemptionFailure.EMPLOYEE_INACTIVE)

            existing = tx.find_attendance(employee.employee_id, dispatch.dispatch_date)
            if existing is not None:
                tx.rollback()
                return RedemptionResult(
                    employee_id=employee.employee_id,
                    employee_name=employee.name,
                    work_date=existing.work_date,
                    wage_amount=existing.wage_amount,
                    already_recorded=True,
                )

            tx.insert_attendance(
                employee_id=employee.employee_id,
                work_date=dispatch.dispatch_date,
                wage_amount=employee.daily_wage,
                source_token=token,
            )
            tx.mark_used(dispatch.dispatch_id, redeemed_by=employee.employee_id)

        logger.info("attendance recorded employee_id=%s date=%s", employee.employee_id, dispatch.dispatch_date)
        return RedemptionResult(
            employee_id=employee.employee_id,
            employee_name=employee.name,
            work_date=dispatch.dispatch_date,
            wage_amount=employee.daily_wage,
        )
