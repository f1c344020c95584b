from .config import *  # noqa: F401,F403

SECRET_KEY = "test-secret"

DEBUG = False
TESTING = True

AUTO_INIT_DB = False
SCHEDULER_ENABLED = False

MAIL_API_KEY = None
MAIL_FROM = None

LOG_LEVEL = "WARNING"
