from __future__ import annotations

import logging
from datetime import datetime, timedelta
from typing import Callable, Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from apscheduler.schedulers.background import BackgroundScheduler
from apscheduler.triggers.cron import CronTrigger

from ..core.constants import (
    DEFAULT_DISPATCH_MAX_ATTEMPTS,
    DEFAULT_DISPATCH_RETRY_DELAY_SEC,
    DEFAULT_SCHEDULE_CRON,
    DEFAULT_TIMEZONE,
)
from .model import DispatchResult
from .service import DispatchService

logger = logging.getLogger(__name__)

DAILY_JOB_ID = "daily-dispatch"
RETRY_JOB_ID = "daily-dispatch-retry"


def resolve_timezone(name: Optional[str]) -> str:
    try:
        ZoneInfo(name or DEFAULT_TIMEZONE)
        return name or DEFAULT_TIMEZONE
    except (ZoneInfoNotFoundError, ValueError):
        logger.error("invalid timezone %r, using %s", name, DEFAULT_TIMEZONE)
        return DEFAULT_TIMEZONE


def build_cron_trigger(expr: Optional[str], timezone: str) -> CronTrigger:
    """5-field crontab; an invalid expression falls back to the default."""

    try:
        return CronTrigger.from_crontab(expr or DEFAULT_SCHEDULE_CRON, timezone=timezone)
    except ValueError:
        logger.error("invalid cron expression %r, using default %s", expr, DEFAULT_SCHEDULE_CRON)
        return CronTrigger.from_crontab(DEFAULT_SCHEDULE_CRON, timezone=timezone)


class DispatchScheduler:
    """Cron-driven daily dispatch with delayed one-shot retries.

    A retriable result (mail failure or unexpected error) schedules another
    attempt ``retry_delay_sec`` later, up to ``max_attempts`` in total.
    Every attempt re-runs the whole insert-then-send transaction.
    """

    def __init__(
        self,
        service: DispatchService,
        *,
        cron: str = DEFAULT_SCHEDULE_CRON,
        timezone: str = DEFAULT_TIMEZONE,
        max_attempts: int = DEFAULT_DISPATCH_MAX_ATTEMPTS,
        retry_delay_sec: int = DEFAULT_DISPATCH_RETRY_DELAY_SEC,
        scheduler=None,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        self._service = service
        self._timezone = resolve_timezone(timezone)
        self._cron = cron
        self._max_attempts = max(1, int(max_attempts))
        self._retry_delay = timedelta(seconds=int(retry_delay_sec))
        self._scheduler = scheduler if scheduler is not None else BackgroundScheduler(timezone=self._timezone)
        self._clock = clock or (lambda: datetime.now(ZoneInfo(self._timezone)))

    @property
    def scheduler(self):
        return self._scheduler

    def run_attempt(self, attempt: int = 1) -> DispatchResult:
        logger.info("daily dispatch attempt %s/%s", attempt, self._max_attempts)
        result = self._service.send_daily()

        if result.sent:
            logger.info("daily dispatch done: %s", result.detail)
            return result
        if not result.retriable:
            logger.info("daily dispatch not sent (%s): %s", result.outcome.value, result.detail)
            return result

        if attempt < self._max_attempts:
            run_date = self._clock() + self._retry_delay
            self._scheduler.add_job(
                self.run_attempt,
                trigger="date",
                run_date=run_date,
                args=[attempt + 1],
                id=RETRY_JOB_ID,
                replace_existing=True,
            )
            logger.warning(
                "daily dispatch failed (%s), retry %s/%s at %s",
                result.outcome.value,
                attempt + 1,
                self._max_attempts,
                run_date.isoformat(),
            )
        else:
            logger.error("daily dispatch gave up after %s attempts: %s", attempt, result.detail)
        return result

    def start(self) -> None:
        trigger = build_cron_trigger(self._cron, self._timezone)
        self._scheduler.add_job(
            self.run_attempt,
            trigger=trigger,
            args=[1],
            id=DAILY_JOB_ID,
            replace_existing=True,
            coalesce=True,
            max_instances=1,
        )
        self._scheduler.start()
        logger.info("scheduler started: daily dispatch at %r (%s)", self._cron, self._timezone)

    def shutdown(self) -> None:
        if getattr(self._scheduler, "running", False):
            self._scheduler.shutdown(wait=False)
