from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from .attendance.mysql_attendance_repository import MySQLAttendanceRepository
from .attendance.service import AttendanceService
from .common.rate_limit import AttemptLimiter
from .core import constants
from .dashboard.service import DashboardService
from .database.connection import DBConfig, DatabaseConnection
from .dispatch.content import DailyEmailBuilder
from .dispatch.mailer import MailSettings, SmtpMailer
from .dispatch.mysql_dispatch_repository import MySQLDispatchRepository
from .dispatch.scheduler import DispatchScheduler, resolve_timezone
from .dispatch.service import DispatchService
from .employees.mysql_employee_repository import MySQLEmployeeRepository
from .employees.service import EmployeeService
from .recipients.mysql_recipient_repository import MySQLRecipientRepository
from .recipients.service import RecipientService
from .tracking.employee_ref import EmployeeRefSigner
from .tracking.mysql_redemption_repository import MySQLRedemptionRepository
from .tracking.service import RedemptionService
from .users.mysql_user_repository import MySQLUserRepository
from .users.service import AuthService

TEMPLATE_DIR = Path(__file__).resolve().parents[3] / "templates"


@dataclass(frozen=True)
class Container:
    conn: DatabaseConnection

    users_repo: MySQLUserRepository
    employees_repo: MySQLEmployeeRepository
    recipients_repo: MySQLRecipientRepository
    attendance_repo: MySQLAttendanceRepository
    dispatch_repo: MySQLDispatchRepository
    redemption_repo: MySQLRedemptionRepository

    auth_service: AuthService
    employee_service: EmployeeService
    recipient_service: RecipientService
    attendance_service: AttendanceService
    dashboard_service: DashboardService
    dispatch_service: DispatchService
    redemption_service: RedemptionService
    dispatch_scheduler: DispatchScheduler

    timezone: str


def _setting(settings, name: str, default=None):
    value = getattr(settings, name, None) if settings is not None else None
    return default if value is None else value


def build_container(*, db_config: dict, settings: Optional[object] = None) -> Container:
    config = DBConfig(
        host=str(db_config["host"]),
        port=int(db_config.get("port", 3306)),
        user=str(db_config["user"]),
        password=str(db_config["password"]),
        database=str(db_config["database"]),
        pool_size=int(db_config.get("pool_size", 5)),
    )
    conn = DatabaseConnection.get_instance(config)

    users_repo = MySQLUserRepository(conn)
    employees_repo = MySQLEmployeeRepository(conn)
    recipients_repo = MySQLRecipientRepository(conn)
    attendance_repo = MySQLAttendanceRepository(conn)
    dispatch_repo = MySQLDispatchRepository(conn)
    redemption_repo = MySQLRedemptionRepository(conn)

    timezone = resolve_timezone(_setting(settings, "TIMEZONE", constants.DEFAULT_TIMEZONE))
    secret = _setting(settings, "TRACKING_SECRET") or _setting(settings, "SECRET_KEY", "change-me-employee-tracker")
    signer = EmployeeRefSigner(secret, accept_legacy=bool(_setting(settings, "TRACKING_ACCEPT_LEGACY_REFS", False)))

    login_limiter = AttemptLimiter(
        max_attempts=int(_setting(settings, "LOGIN_MAX_ATTEMPTS", constants.DEFAULT_LOGIN_MAX_ATTEMPTS)),
        window_seconds=int(_setting(settings, "LOGIN_LOCKOUT_SEC", constants.DEFAULT_LOGIN_LOCKOUT_SEC)),
    )
    tracking_limiter = AttemptLimiter(
        max_attempts=int(_setting(settings, "TRACKING_RATE_LIMIT", constants.DEFAULT_TRACKING_RATE_LIMIT)),
        window_seconds=int(_setting(settings, "TRACKING_RATE_WINDOW_SEC", constants.DEFAULT_TRACKING_RATE_WINDOW_SEC)),
    )

    mailer = SmtpMailer(
        MailSettings(
            server=_setting(settings, "MAIL_SERVER", "smtp.sendgrid.net"),
            port=int(_setting(settings, "MAIL_PORT", 587)),
            username=_setting(settings, "MAIL_USERNAME", "apikey"),
            api_key=_setting(settings, "MAIL_API_KEY"),
            sender=_setting(settings, "MAIL_FROM"),
            use_tls=bool(_setting(settings, "MAIL_USE_TLS", True)),
            timeout=float(_setting(settings, "MAIL_TIMEOUT", 30)),
        )
    )
    builder = DailyEmailBuilder(
        template_dir=TEMPLATE_DIR,
        app_url=_setting(settings, "APP_URL", "http://localhost:5000"),
        signer=signer,
    )

    auth_service = AuthService(users_repo, login_limiter)
    employee_service = EmployeeService(employees_repo)
    recipient_service = RecipientService(recipients_repo)
    attendance_service = AttendanceService(attendance_repo)
    dashboard_service = DashboardService(
        employees=employees_repo,
        attendance=attendance_repo,
        recipients=recipients_repo,
    )
    dispatch_service = DispatchService(
        dispatches=dispatch_repo,
        employees=employees_repo,
        recipients=recipients_repo,
        mailer=mailer,
        builder=builder,
        timezone=timezone,
    )
    redemption_service = RedemptionService(redemption_repo, signer, tracking_limiter)
    dispatch_scheduler = DispatchScheduler(
        dispatch_service,
        cron=_setting(settings, "EMAIL_SCHEDULE_TIME", constants.DEFAULT_SCHEDULE_CRON),
        timezone=timezone,
        max_attempts=int(_setting(settings, "DISPATCH_MAX_ATTEMPTS", constants.DEFAULT_DISPATCH_MAX_ATTEMPTS)),
        retry_delay_sec=int(_setting(settings, "DISPATCH_RETRY_DELAY_SEC", constants.DEFAULT_DISPATCH_RETRY_DELAY_SEC)),
    )

    return Container(
        conn=conn,
        users_repo=users_repo,
        employees_repo=employees_repo,
        recipients_repo=recipients_repo,
        attendance_repo=attendance_repo,
        dispatch_repo=dispatch_repo,
        redemption_repo=redemption_repo,
        auth_service=auth_service,
        employee_service=employee_service,
        recipient_service=recipient_service,
        attendance_service=attendance_service,
        dashboard_service=dashboard_service,
        dispatch_service=dispatch_service,
        redemption_service=redemption_service,
        dispatch_scheduler=dispatch_scheduler,
        timezone=timezone,
    )
