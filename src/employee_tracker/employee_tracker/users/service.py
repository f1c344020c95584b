from __future__ import annotations

import logging
from dataclasses import dataclass

from werkzeug.security import check_password_hash

from ..common.rate_limit import AttemptLimiter
from ..core.constants import MAX_USERNAME_LENGTH
from ..core.exceptions import AuthenticationError, RateLimitedError
from .repository import UserRepository

logger = logging.getLogger(__name__)

_INVALID_CREDENTIALS = "Invalid username or password"


@dataclass(frozen=True)
class SessionUser:
    """What we store into the Flask session after login."""

    user_id: int
    username: str


class AuthService:
    """Use case: authenticate an administrator (login)."""

    def __init__(self, users: UserRepository, limiter: AttemptLimiter):
        self._users = users
        self._limiter = limiter

    def authenticate(self, username: str, password: str, client_ip: str = "unknown") -> SessionUser:
        decision = self._limiter.check(client_ip)
        if not decision.allowed:
            logger.warning("login locked out ip=%s", client_ip)
            raise RateLimitedError(
                f"Too many failed login attempts. Try again in {decision.retry_after_minutes} minute(s).",
                retry_after_seconds=decision.retry_after_seconds,
            )

        name = (username or "").strip()
        if not name or len(name) > MAX_USERNAME_LENGTH or not password:
            self._limiter.hit(client_ip)
            raise AuthenticationError(_INVALID_CREDENTIALS)

        user = self._users.get_by_username(name)
        try:
            ok = bool(user) and check_password_hash(user.password_hash, password)
        except ValueError:
            # placeholder or corrupted hash
            ok = False

        if not ok:
            self._limiter.hit(client_ip)
            logger.info("login failed ip=%s", client_ip)
            raise AuthenticationError(_INVALID_CREDENTIALS)

        self._limiter.reset(client_ip)
        logger.info("login ok user_id=%s", user.user_id)
        return SessionUser(user_id=user.user_id, username=user.username)
