from __future__ import annotations

import logging

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"

_PACKAGE_LOGGER = __name__.rsplit(".", 2)[0]


def configure_logging(level: str | int = "INFO") -> logging.Logger:
    """Attach one stream handler to the package logger.

    Safe to call more than once (app factory in tests): the handler is only
    added the first time.
    """

    logger = logging.getLogger(_PACKAGE_LOGGER)
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.INFO
    logger.setLevel(level)

    if not any(getattr(h, "_employee_tracker", False) for h in logger.handlers):
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        handler._employee_tracker = True  # type: ignore[attr-defined]
        logger.addHandler(handler)
    return logger


def short_token(token: str | None) -> str:
    """First 8 characters of a token, for log lines."""
    if not token:
        return "-"
    return f"{token[:8]}…"
