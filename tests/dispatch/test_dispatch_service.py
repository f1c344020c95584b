from __future__ import annotations

import threading
from datetime import date

import pytest

from src.employee_tracker.employee_tracker.core.enums import DispatchOutcome
from src.employee_tracker.employee_tracker.dispatch.model import DispatchResult
from src.employee_tracker.employee_tracker.dispatch.service import DispatchService

DAY = date(2024, 6, 1)


@pytest.fixture
def staffed(db):
    db.add_employee("Alice", "Martin")
    db.add_employee("Bob", "Stone")
    db.add_recipient("owner@acme.org")
    return db


def test_sends_once_and_persists_dispatch(staffed, mailer, dispatch_service):
    result = dispatch_service.send_daily(DAY)

    assert result == DispatchResult(True, DispatchOutcome.SENT, "Email sent to 1 recipient(s)")
    assert not result.retriable
    assert len(mailer.sent) == 1
    dispatch = staffed.dispatch_for_date(DAY)
    assert dispatch is not None
    assert not dispatch.used
    assert dispatch.token in mailer.sent[0].text


def test_second_run_same_day_is_already_sent_without_mail(staffed, mailer, dispatch_service):
    dispatch_service.send_daily(DAY)
    again = dispatch_service.send_daily(DAY)

    assert not again.sent
    assert again.outcome is DispatchOutcome.ALREADY_SENT
    assert "already sent" in again.detail
    assert not again.retriable
    assert len(mailer.sent) == 1
    assert len(staffed.dispatches) == 1


@pytest.mark.parametrize(
    "seed, outcome",
    [
        ("no_employees", DispatchOutcome.NO_EMPLOYEES),
        ("no_recipients", DispatchOutcome.NO_RECIPIENTS),
    ],
)
def test_preconditions_short_circuit_without_side_effects(db, mailer, dispatch_service, seed, outcome):
    if seed == "no_employees":
        db.add_employee("Gone", "Person", active=False)
        db.add_recipient("owner@acme.org")
    else:
        db.add_employee("Alice", "Martin")
        db.add_recipient("old@acme.org", active=False)

    result = dispatch_service.send_daily(DAY)

    assert result.outcome is outcome
    assert not result.sent
    assert not result.retriable
    assert mailer.attempts == 0
    assert db.dispatches == []


def test_not_configured_mailer_is_not_retriable(staffed, mailer, dispatch_service):
    mailer.configured = False

    result = dispatch_service.send_daily(DAY)

    assert result.outcome is DispatchOutcome.NOT_CONFIGURED
    assert not result.retriable
    assert mailer.attempts == 0
    assert staffed.dispatches == []


def test_existing_dispatch_wins_over_other_preconditions(db, mailer, dispatch_service):
    db.add_dispatch(DAY, "123e4567-e89b-42d3-a456-426614174000")
    mailer.configured = False

    result = dispatch_service.send_daily(DAY)

    assert result.outcome is DispatchOutcome.ALREADY_SENT


def test_mail_failure_rolls_back_dispatch_row(staffed, mailer, dispatch_service):
    mailer.failures = 1

    failed = dispatch_service.send_daily(DAY)

    assert failed.outcome is DispatchOutcome.MAIL_FAILED
    assert failed.retriable
    assert staffed.dispatches == []

    retried = dispatch_service.send_daily(DAY)
    assert retried.sent
    assert len(staffed.dispatches) == 1
    assert len(mailer.sent) == 1


def test_unexpected_error_is_retriable(staffed, mailer, builder):
    class BrokenRepo:
        def get_for_date(self, _day):
            raise ConnectionError("Lost connection to MySQL server")

    service = DispatchService(
        dispatches=BrokenRepo(),
        employees=None,
        recipients=None,
        mailer=mailer,
        builder=builder,
    )
    result = service.send_daily(DAY)

    assert result.outcome is DispatchOutcome.ERROR
    assert result.retriable
    assert "MySQL" not in result.detail


def test_concurrent_runs_send_exactly_once(staffed, mailer, dispatch_service):
    n = 8
    barrier = threading.Barrier(n)
    results = []
    lock = threading.Lock()

    def run():
        barrier.wait()
        r = dispatch_service.send_daily(DAY)
        with lock:
            results.append(r)

    threads = [threading.Thread(target=run) for _ in range(n)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert sum(1 for r in results if r.sent) == 1
    assert all(r.outcome is DispatchOutcome.ALREADY_SENT for r in results if not r.sent)
    assert len(staffed.dispatches) == 1
    assert len(mailer.sent) == 1


def test_uses_configured_timezone_for_today(staffed, mailer, dispatch_service, monkeypatch):
    from src.employee_tracker.employee_tracker.dispatch import service as service_module

    seen = []
    monkeypatch.setattr(service_module, "today_in", lambda tz: seen.append(tz) or DAY)

    dispatch_service.send_daily()

    assert seen == ["America/New_York"]
    assert staffed.dispatch_for_date(DAY) is not None
