import os


def _flag(name: str, default: str) -> bool:
    return os.environ.get(name, default).strip().lower() in {"1", "true", "yes", "on"}


class Config:
    SECRET_KEY = os.environ.get("SECRET_KEY") or "change-me-employee-tracker"

    # Database
    DB_USER = os.environ.get("DB_USER", "root")
    DB_PASSWORD = os.environ.get("DB_PASSWORD", "")
    DB_HOST = os.environ.get("DB_HOST", "localhost")
    DB_PORT = int(os.environ.get("DB_PORT", "3306"))
    DB_NAME = os.environ.get("DB_NAME", "employee_tracker")
    DB_POOL_SIZE = int(os.environ.get("DB_POOL_SIZE", "5"))

    AUTO_INIT_DB = _flag("AUTO_INIT_DB", "0")

    # Links in the daily email point here
    APP_URL = os.environ.get("APP_URL", "http://localhost:5000")

    # SMTP relay (SendGrid: username "apikey", password = API key)
    MAIL_SERVER = os.environ.get("MAIL_SERVER", "smtp.sendgrid.net")
    MAIL_PORT = int(os.environ.get("MAIL_PORT", "587"))
    MAIL_USERNAME = os.environ.get("MAIL_USERNAME", "apikey")
    MAIL_API_KEY = os.environ.get("MAIL_API_KEY") or None
    MAIL_FROM = os.environ.get("MAIL_FROM") or None
    MAIL_USE_TLS = _flag("MAIL_USE_TLS", "1")
    MAIL_TIMEOUT = float(os.environ.get("MAIL_TIMEOUT", "30"))

    # Daily dispatch
    EMAIL_SCHEDULE_TIME = os.environ.get("EMAIL_SCHEDULE_TIME", "0 8 * * *")
    TIMEZONE = os.environ.get("TIMEZONE", "America/New_York")
    SCHEDULER_ENABLED = _flag("SCHEDULER_ENABLED", "1")
    DISPATCH_MAX_ATTEMPTS = int(os.environ.get("DISPATCH_MAX_ATTEMPTS", "3"))
    DISPATCH_RETRY_DELAY_SEC = int(os.environ.get("DISPATCH_RETRY_DELAY_SEC", "300"))

    # Public tracking endpoint
    TRACKING_SECRET = os.environ.get("TRACKING_SECRET") or None
    TRACKING_ACCEPT_LEGACY_REFS = _flag("TRACKING_ACCEPT_LEGACY_REFS", "0")
    TRACKING_RATE_LIMIT = int(os.environ.get("TRACKING_RATE_LIMIT", "30"))
    TRACKING_RATE_WINDOW_SEC = int(os.environ.get("TRACKING_RATE_WINDOW_SEC", "900"))

    # Admin login
    LOGIN_MAX_ATTEMPTS = int(os.environ.get("LOGIN_MAX_ATTEMPTS", "5"))
    LOGIN_LOCKOUT_SEC = int(os.environ.get("LOGIN_LOCKOUT_SEC", "900"))
    ADMIN_USERNAME = os.environ.get("ADMIN_USERNAME") or None
    ADMIN_PASSWORD = os.environ.get("ADMIN_PASSWORD") or None
    SESSION_DAYS = int(os.environ.get("SESSION_DAYS", "7"))

    LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO")


SECRET_KEY = Config.SECRET_KEY
DB_CONFIG = {
    "host": Config.DB_HOST,
    "port": Config.DB_PORT,
    "user": Config.DB_USER,
    "password": Config.DB_PASSWORD,
    "database": Config.DB_NAME,
    "pool_size": Config.DB_POOL_SIZE,
}

DEBUG = _flag("DEBUG", "0")
TESTING = False
STRICT_ADMIN_PASSWORD = False

AUTO_INIT_DB = Config.AUTO_INIT_DB

APP_URL = Config.APP_URL

MAIL_SERVER = Config.MAIL_SERVER
MAIL_PORT = Config.MAIL_PORT
MAIL_USERNAME = Config.MAIL_USERNAME
MAIL_API_KEY = Config.MAIL_API_KEY
MAIL_FROM = Config.MAIL_FROM
MAIL_USE_TLS = Config.MAIL_USE_TLS
MAIL_TIMEOUT = Config.MAIL_TIMEOUT

EMAIL_SCHEDULE_TIME = Config.EMAIL_SCHEDULE_TIME
TIMEZONE = Config.TIMEZONE
SCHEDULER_ENABLED = Config.SCHEDULER_ENABLED
DISPATCH_MAX_ATTEMPTS = Config.DISPATCH_MAX_ATTEMPTS
DISPATCH_RETRY_DELAY_SEC = Config.DISPATCH_RETRY_DELAY_SEC

TRACKING_SECRET = Config.TRACKING_SECRET
TRACKING_ACCEPT_LEGACY_REFS = Config.TRACKING_ACCEPT_LEGACY_REFS
TRACKING_RATE_LIMIT = Config.TRACKING_RATE_LIMIT
TRACKING_RATE_WINDOW_SEC = Config.TRACKING_RATE_WINDOW_SEC

LOGIN_MAX_ATTEMPTS = Config.LOGIN_MAX_ATTEMPTS
LOGIN_LOCKOUT_SEC = Config.LOGIN_LOCKOUT_SEC
ADMIN_USERNAME = Config.ADMIN_USERNAME
ADMIN_PASSWORD = Config.ADMIN_PASSWORD
SESSION_DAYS = Config.SESSION_DAYS

LOG_LEVEL = Config.LOG_LEVEL
