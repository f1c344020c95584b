from __future__ import annotations

import logging
import uuid
from datetime import date
from typing import Callable, Optional

from ..common.datetime_utils import today_in
from ..core.constants import DEFAULT_TIMEZONE
from ..core.enums import DispatchOutcome
from ..core.exceptions import DuplicateDispatchError, MailDeliveryError
from ..core.logging_setup import short_token
from ..employees.repository import EmployeeRepository
from ..recipients.repository import RecipientRepository
from .content import DailyEmailBuilder
from .mailer import SmtpMailer
from .model import DispatchResult
from .repository import DispatchRepository

logger = logging.getLogger(__name__)


class DispatchService:
    """Use case: send today's attendance email at most once.

    The dispatch row is inserted inside a transaction that only commits
    after the mail relay accepted the message. A failed send leaves no row,
    so a retry starts from scratch. Concurrent runs collide on the unique
    ``dispatch_date`` index and all but one end as ALREADY_SENT.
    """

    def __init__(
        self,
        *,
        dispatches: DispatchRepository,
        employees: EmployeeRepository,
        recipients: RecipientRepository,
        mailer: SmtpMailer,
        builder: DailyEmailBuilder,
        timezone: str = DEFAULT_TIMEZONE,
        token_factory: Callable[[], str] = lambda: str(uuid.uuid4()),
    ):
        self._dispatches = dispatches
        self._employees = employees
        self._recipients = recipients
        self._mailer = mailer
        self._builder = builder
        self._timezone = timezone
        self._token_factory = token_factory

    def send_daily(self, today: Optional[date] = None) -> DispatchResult:
        today = today or today_in(self._timezone)
        try:
            return self._send(today)
        except Exception:
            logger.exception("dispatch failed unexpectedly date=%s", today.isoformat())
            return DispatchResult(False, DispatchOutcome.ERROR, "An unexpected error occurred while sending the email")

    def _send(self, today: date) -> DispatchResult:
        if self._dispatches.get_for_date(today) is not None:
            logger.info("dispatch skipped: already sent date=%s", today.isoformat())
            return DispatchResult(False, DispatchOutcome.ALREADY_SENT, "Email already sent today")

        employees = self._employees.list_active()
        if not employees:
            logger.info("dispatch skipped: no active employees")
            return DispatchResult(False, DispatchOutcome.NO_EMPLOYEES, "No active employees")

        recipients = self._recipients.list_active_emails()
        if not recipients:
            logger.info("dispatch skipped: no active recipients")
            return DispatchResult(False, DispatchOutcome.NO_RECIPIENTS, "No active recipients")

        if not self._mailer.configured:
            logger.warning("dispatch skipped: mail is not configured (MAIL_API_KEY / MAIL_FROM)")
            return DispatchResult(False, DispatchOutcome.NOT_CONFIGURED, "Email service not configured")

        token = self._token_factory()
        try:
            with self._dispatches.transaction() as tx:
                tx.insert(dispatch_date=today, token=token)
                message = self._builder.build(
                    work_date=today,
                    token=token,
                    employees=employees,
                    recipients=recipients,
                )
                self._mailer.send(message)
        except DuplicateDispatchError:
            logger.info("dispatch skipped: another run already sent date=%s", today.isoformat())
            return DispatchResult(False, DispatchOutcome.ALREADY_SENT, "Email already sent today")
        except MailDeliveryError as e:
            logger.warning("dispatch mail failed date=%s: %s", today.isoformat(), e)
            return DispatchResult(False, DispatchOutcome.MAIL_FAILED, str(e))

        logger.info(
            "dispatch sent date=%s token=%s recipients=%s employees=%s",
            today.isoformat(),
            short_token(token),
            len(recipients),
            len(employees),
        )
        return DispatchResult(True, DispatchOutcome.SENT, f"Email sent to {len(recipients)} recipient(s)")
