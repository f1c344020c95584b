"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

DEFAULT_SESSION_DAYS = 7
DEFAULT_RECENT_RECORDS = 5

DEFAULT_SCHEDULE_CRON = "0 8 * * *"
DEFAULT_TIMEZONE = "America/New_York"
DEFAULT_DISPATCH_MAX_ATTEMPTS = 3
DEFAULT_DISPATCH_RETRY_DELAY_SEC = 5 * 60

DEFAULT_LOGIN_MAX_ATTEMPTS = 5
DEFAULT_LOGIN_LOCKOUT_SEC = 15 * 60
DEFAULT_TRACKING_RATE_LIMIT = 30
DEFAULT_TRACKING_RATE_WINDOW_SEC = 15 * 60

MAX_NAME_LENGTH = 100
MAX_USERNAME_LENGTH = 255
MAX_EMAIL_LENGTH = 254
MAX_DAILY_WAGE = "9999999999.99"
MIN_ADMIN_PASSWORD_LENGTH = 12

# Hex characters of the HMAC kept in a signed employee reference.
EMPLOYEE_REF_SIGNATURE_CHARS = 32
