import os

from .config import *  # noqa: F401,F403

SECRET_KEY = os.getenv("SECRET_KEY", "please-set-SECRET_KEY")

DEBUG = False

# Weak ADMIN_PASSWORD aborts startup
STRICT_ADMIN_PASSWORD = True
