from __future__ import annotations

import re
from datetime import date
from decimal import Decimal, InvalidOperation
from typing import Optional

from email_validator import EmailNotValidError, validate_email

from ..core.constants import MAX_DAILY_WAGE, MAX_EMAIL_LENGTH, MAX_NAME_LENGTH
from ..core.exceptions import ValidationError
from .datetime_utils import parse_iso_date

# Letters (incl. Latin-1 accents), spaces, apostrophes and hyphens.
NAME_PATTERN = re.compile(r"^[a-zA-ZÀ-ÿ\s'-]+$")
ISO_DATE_PATTERN = re.compile(r"^\d{4}-\d{2}-\d{2}$")


def require_non_empty(value: str, field_name: str) -> str:
    if not value or not value.strip():
        raise ValidationError(f"{field_name} is required")
    return value.strip()


def require_name(value: str, field_name: str) -> str:
    name = require_non_empty(value or "", field_name)
    if len(name) > MAX_NAME_LENGTH:
        raise ValidationError(f"{field_name} must be {MAX_NAME_LENGTH} characters or less")
    if not NAME_PATTERN.match(name):
        raise ValidationError(f"{field_name} contains invalid characters")
    return name


def require_positive_id(value, field_name: str = "ID") -> int:
    try:
        num = int(str(value).strip())
    except (TypeError, ValueError):
        raise ValidationError(f"Invalid {field_name}")
    if num <= 0:
        raise ValidationError(f"Invalid {field_name}")
    return num


def parse_wage(value) -> Decimal:
    """Non-negative money amount with at most two decimal places."""

    raw = "0" if value is None or str(value).strip() == "" else str(value).strip()
    try:
        amount = Decimal(raw)
    except InvalidOperation:
        raise ValidationError("Daily wage must be a number")
    if not amount.is_finite():
        raise ValidationError("Daily wage must be a number")
    if amount < 0:
        raise ValidationError("Daily wage cannot be negative")
    if amount > Decimal(MAX_DAILY_WAGE):
        raise ValidationError("Daily wage is too large")
    if amount.as_tuple().exponent < -2:
        raise ValidationError("Daily wage can have at most 2 decimal places")
    return amount.quantize(Decimal("0.01"))


def parse_optional_date(value: Optional[str], field_name: str) -> Optional[date]:
    v = (value or "").strip()
    if not v:
        return None
    if not ISO_DATE_PATTERN.match(v):
        raise ValidationError(f"Invalid {field_name} format")
    try:
        return parse_iso_date(v)
    except ValueError:
        raise ValidationError(f"Invalid {field_name} format")


def normalize_email(value: str) -> str:
    raw = (value or "").strip()
    if not raw or len(raw) > MAX_EMAIL_LENGTH:
        raise ValidationError("Please enter a valid email address (e.g., name@example.com)")
    try:
        result = validate_email(raw, check_deliverability=False)
    except EmailNotValidError:
        raise ValidationError("Please enter a valid email address (e.g., name@example.com)")
    return result.normalized.lower()
