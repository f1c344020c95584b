from __future__ import annotations

import threading
from collections import defaultdict
from contextlib import contextmanager
from dataclasses import replace
from datetime import date, datetime, timedelta
from decimal import Decimal
from pathlib import Path

import pytest

from src.employee_tracker.employee_tracker.attendance.model import (
    AttendanceListRow,
    AttendanceRecord,
    DeletedRecord,
)
from src.employee_tracker.employee_tracker.common.rate_limit import AttemptLimiter
from src.employee_tracker.employee_tracker.core.exceptions import DuplicateDispatchError, MailDeliveryError
from src.employee_tracker.employee_tracker.dispatch.content import DailyEmailBuilder
from src.employee_tracker.employee_tracker.dispatch.model import DispatchRecord
from src.employee_tracker.employee_tracker.dispatch.service import DispatchService
from src.employee_tracker.employee_tracker.employees.model import Employee
from src.employee_tracker.employee_tracker.recipients.model import Recipient
from src.employee_tracker.employee_tracker.tracking.employee_ref import EmployeeRefSigner
from src.employee_tracker.employee_tracker.tracking.model import LockedDispatch
from src.employee_tracker.employee_tracker.tracking.service import RedemptionService

REPO_ROOT = Path(__file__).resolve().parents[1]
TEMPLATE_DIR = REPO_ROOT / "templates"


class InMemoryDatabase:
    """Just enough of the MySQL behaviour for the services.

    * ``FOR UPDATE`` on a dispatch row is a per-token lock held until the
      transaction ends.
    * The unique ``dispatch_date`` index is a per-date lock: a second
      inserter waits for the first transaction, then sees the duplicate.
    """

    def __init__(self):
        self._mutex = threading.RLock()
        self._row_locks: dict[str, threading.Lock] = defaultdict(threading.Lock)
        self._date_locks: dict[date, threading.Lock] = defaultdict(threading.Lock)
        self._next_id = 1
        self._clock = datetime(2024, 6, 1, 9, 0, 0)

        self.employees: dict[int, Employee] = {}
        self.recipients: dict[int, Recipient] = {}
        self.dispatches: list[DispatchRecord] = []
        self.records: list[AttendanceRecord] = []
        self.redeem_commits: list[int] = []

    def _new_id(self) -> int:
        with self._mutex:
            i = self._next_id
            self._next_id += 1
            return i

    def _tick(self) -> datetime:
        with self._mutex:
            self._clock += timedelta(seconds=1)
            return self._clock

    def row_lock(self, token: str) -> threading.Lock:
        with self._mutex:
            return self._row_locks[token]

    def date_lock(self, day: date) -> threading.Lock:
        with self._mutex:
            return self._date_locks[day]

    # seeding helpers
    def add_employee(self, first: str, last: str, wage="100.00", active: bool = True) -> Employee:
        e = Employee(self._new_id(), first, last, Decimal(wage), active)
        self.employees[e.employee_id] = e
        return e

    def add_recipient(self, email: str, active: bool = True) -> Recipient:
        r = Recipient(self._new_id(), email, active)
        self.recipients[r.recipient_id] = r
        return r

    def add_dispatch(self, day: date, token: str) -> DispatchRecord:
        d = DispatchRecord(self._new_id(), day, token)
        self.dispatches.append(d)
        return d

    def dispatch_by_token(self, token: str):
        with self._mutex:
            return next((d for d in self.dispatches if d.token == token), None)

    def dispatch_for_date(self, day: date):
        with self._mutex:
            return next((d for d in self.dispatches if d.dispatch_date == day), None)

    def set_dispatch(self, updated: DispatchRecord) -> None:
        with self._mutex:
            self.dispatches = [updated if d.dispatch_id == updated.dispatch_id else d for d in self.dispatches]


class FakeEmployeeRepo:
    def __init__(self, db: InMemoryDatabase):
        self.db = db

    def get_by_id(self, employee_id):
        return self.db.employees.get(int(employee_id))

    def list_all(self):
        return sorted(self.db.employees.values(), key=lambda e: (not e.active, e.first_name, e.last_name))

    def list_active(self):
        return [e for e in self.list_all() if e.active]

    def count_active(self):
        return len(self.list_active())

    def create(self, *, first_name, last_name, daily_wage):
        return self.db.add_employee(first_name, last_name, daily_wage).employee_id

    def update(self, *, employee_id, first_name, last_name, daily_wage, active):
        if employee_id not in self.db.employees:
            return False
        self.db.employees[employee_id] = Employee(employee_id, first_name, last_name, daily_wage, active)
        return True

    def set_active(self, employee_id, *, active):
        e = self.db.employees.get(employee_id)
        if not e:
            return False
        self.db.employees[employee_id] = replace(e, active=active)
        return True


class FakeRecipientRepo:
    def __init__(self, db: InMemoryDatabase):
        self.db = db

    def get_by_id(self, recipient_id):
        return self.db.recipients.get(int(recipient_id))

    def get_by_email(self, email):
        return next((r for r in self.db.recipients.values() if r.email == email), None)

    def list_all(self):
        return sorted(self.db.recipients.values(), key=lambda r: (not r.active, r.email))

    def list_active_emails(self):
        return [r.email for r in self.list_all() if r.active]

    def count_active(self):
        return len(self.list_active_emails())

    def create(self, email):
        return self.db.add_recipient(email).recipient_id

    def set_active(self, recipient_id, *, active):
        r = self.db.recipients.get(recipient_id)
        if not r:
            return False
        self.db.recipients[recipient_id] = replace(r, active=active)
        return True

    def delete_by_id(self, recipient_id):
        return self.db.recipients.pop(recipient_id, None) is not None


class FakeDispatchTx:
    def __init__(self, db: InMemoryDatabase):
        self.db = db
        self.held: list[threading.Lock] = []
        self.staged: list[DispatchRecord] = []

    def insert(self, *, dispatch_date, token):
        lock = self.db.date_lock(dispatch_date)
        lock.acquire()
        self.held.append(lock)
        if self.db.dispatch_for_date(dispatch_date) or self.db.dispatch_by_token(token):
            raise DuplicateDispatchError(f"dispatch for {dispatch_date} already exists")
        record = DispatchRecord(self.db._new_id(), dispatch_date, token)
        self.staged.append(record)
        return record.dispatch_id


class FakeDispatchRepo:
    def __init__(self, db: InMemoryDatabase):
        self.db = db

    def get_for_date(self, dispatch_date):
        return self.db.dispatch_for_date(dispatch_date)

    @contextmanager
    def transaction(self):
        tx = FakeDispatchTx(self.db)
        try:
            yield tx
            with self.db._mutex:
                self.db.dispatches.extend(tx.staged)
        finally:
            for lock in tx.held:
                lock.release()


class FakeRedemptionTx:
    def __init__(self, db: InMemoryDatabase):
        self.db = db
        self.held: list[threading.Lock] = []
        self.new_records: list[dict] = []
        self.marks: list[tuple[int, int]] = []
        self.rolled_back = False

    def lock_dispatch_by_token(self, token):
        if self.db.dispatch_by_token(token) is None:
            return None
        lock = self.db.row_lock(token)
        lock.acquire()
        self.held.append(lock)
        d = self.db.dispatch_by_token(token)
        if d is None:
            return None
        return LockedDispatch(d.dispatch_id, d.dispatch_date, d.token, d.used, d.redeemed_by)

    def get_employee(self, employee_id):
        return self.db.employees.get(int(employee_id))

    def find_attendance(self, employee_id, work_date):
        with self.db._mutex:
            return next(
                (r for r in self.db.records if r.employee_id == employee_id and r.work_date == work_date),
                None,
            )

    def insert_attendance(self, *, employee_id, work_date, wage_amount, source_token):
        self.new_records.append(
            dict(employee_id=employee_id, work_date=work_date, wage_amount=wage_amount, source_token=source_token)
        )
        return 0

    def mark_used(self, dispatch_id, *, redeemed_by):
        self.marks.append((dispatch_id, redeemed_by))

    def rollback(self):
        self.new_records.clear()
        self.marks.clear()
        self.rolled_back = True

    def commit(self):
        db = self.db
        with db._mutex:
            for r in self.new_records:
                db.records.append(AttendanceRecord(db._new_id(), recorded_at=db._tick(), **r))
            for dispatch_id, employee_id in self.marks:
                d = next(d for d in db.dispatches if d.dispatch_id == dispatch_id)
                db.set_dispatch(replace(d, used=True, redeemed_by=employee_id))
                db.redeem_commits.append(employee_id)


class FakeRedemptionRepo:
    def __init__(self, db: InMemoryDatabase):
        self.db = db

    @contextmanager
    def transaction(self):
        tx = FakeRedemptionTx(self.db)
        try:
            yield tx
            if not tx.rolled_back:
                tx.commit()
        finally:
            for lock in tx.held:
                lock.release()


class FakeAttendanceRepo:
    def __init__(self, db: InMemoryDatabase):
        self.db = db

    def _row(self, r: AttendanceRecord) -> AttendanceListRow:
        e = self.db.employees[r.employee_id]
        return AttendanceListRow(r.attendance_id, r.employee_id, e.name, r.work_date, r.wage_amount, r.recorded_at, bool(r.source_token))

    def list_rows(self, filters):
        rows = [
            r
            for r in self.db.records
            if (filters.employee_id is None or r.employee_id == filters.employee_id)
            and (filters.start_date is None or r.work_date >= filters.start_date)
            and (filters.end_date is None or r.work_date <= filters.end_date)
        ]
        rows.sort(key=lambda r: (r.work_date, r.recorded_at), reverse=True)
        return [self._row(r) for r in rows]

    def list_recent(self, limit):
        rows = sorted(self.db.records, key=lambda r: (r.work_date, r.recorded_at), reverse=True)
        return [self._row(r) for r in rows[:limit]]

    def count_since(self, start_date):
        return sum(1 for r in self.db.records if r.work_date >= start_date)

    def delete_record(self, attendance_id):
        db = self.db
        record = next((r for r in db.records if r.attendance_id == attendance_id), None)
        if record is None:
            return None
        lock = db.row_lock(record.source_token) if record.source_token else None
        if lock:
            lock.acquire()
        try:
            with db._mutex:
                db.records = [r for r in db.records if r.attendance_id != attendance_id]
                dispatch = db.dispatch_by_token(record.source_token) if record.source_token else None
                if not dispatch:
                    return DeletedRecord(record, False)
                remaining = sorted(
                    (r for r in db.records if r.source_token == record.source_token),
                    key=lambda r: (r.recorded_at, r.attendance_id),
                )
                if remaining:
                    db.set_dispatch(replace(dispatch, used=True, redeemed_by=remaining[-1].employee_id))
                else:
                    db.set_dispatch(replace(dispatch, used=False, redeemed_by=None))
                return DeletedRecord(record, not remaining)
        finally:
            if lock:
                lock.release()


class FakeMailer:
    def __init__(self, *, configured: bool = True, failures: int = 0):
        self.configured = configured
        self.failures = failures
        self.sent = []
        self.attempts = 0
        self._lock = threading.Lock()

    def send(self, message):
        with self._lock:
            self.attempts += 1
            if self.failures > 0:
                self.failures -= 1
                raise MailDeliveryError("Mail relay failed: SMTPServerDisconnected")
            self.sent.append(message)


@pytest.fixture
def db():
    return InMemoryDatabase()


@pytest.fixture
def signer():
    return EmployeeRefSigner("test-secret")


@pytest.fixture
def mailer():
    return FakeMailer()


@pytest.fixture
def builder(signer):
    return DailyEmailBuilder(template_dir=TEMPLATE_DIR, app_url="https://tracker.example.org/", signer=signer)


@pytest.fixture
def dispatch_service(db, mailer, builder):
    return DispatchService(
        dispatches=FakeDispatchRepo(db),
        employees=FakeEmployeeRepo(db),
        recipients=FakeRecipientRepo(db),
        mailer=mailer,
        builder=builder,
        timezone="America/New_York",
    )


@pytest.fixture
def redemption_service(db, signer):
    limiter = AttemptLimiter(max_attempts=1000, window_seconds=900)
    return RedemptionService(FakeRedemptionRepo(db), signer, limiter)


@pytest.fixture
def redemption_repo(db):
    return FakeRedemptionRepo(db)


@pytest.fixture
def attendance_repo(db):
    return FakeAttendanceRepo(db)


@pytest.fixture
def employee_repo(db):
    return FakeEmployeeRepo(db)


@pytest.fixture
def recipient_repo(db):
    return FakeRecipientRepo(db)
