from __future__ import annotations

from datetime import date, datetime
from zoneinfo import ZoneInfo


def parse_iso_date(value: str) -> date:
    """Parse YYYY-MM-DD string into date."""
    return datetime.strptime(value, "%Y-%m-%d").date()


def now_local(tz_name: str | None = None) -> datetime:
    """Current time, in ``tz_name`` when given.

    Note: Wrapped so tests can patch/mocked easier.
    """
    if tz_name:
        return datetime.now(ZoneInfo(tz_name))
    return datetime.now()


def today_in(tz_name: str | None = None) -> date:
    return now_local(tz_name).date()


def first_of_month(day: date) -> date:
    return day.replace(day=1)


def format_long_date(day: date) -> str:
    """e.g. 'Saturday, June 1, 2024'."""
    return f"{day:%A}, {day:%B} {day.day}, {day.year}"
