import os

from .config import *  # noqa: F401,F403
from .config import _flag

SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret-key")

DEBUG = True

# If enabled, app applies schema.sql and migrations on startup (idempotent)
AUTO_INIT_DB = _flag("AUTO_INIT_DB", "1")

LOG_LEVEL = os.getenv("LOG_LEVEL", "DEBUG")

# Plain employee-id links from older emails are accepted locally
TRACKING_ACCEPT_LEGACY_REFS = _flag("TRACKING_ACCEPT_LEGACY_REFS", "1")
