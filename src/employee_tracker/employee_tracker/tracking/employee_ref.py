"""Employee references embedded in tracking links.

A reference names the employee a link was minted for. Two variants exist:

* ``SignedEmployeeRef``: ``base64url("<id>:<hmac>")`` without padding, where
  ``hmac`` is the first 32 hex characters of
  ``HMAC-SHA256(secret, "<token>:<id>")``. Binds the employee to one token.
* ``LegacyEmployeeRef``: a bare positive integer, as sent by older emails.
  Only honoured when legacy refs are explicitly enabled.

Parsing is a pure shape check. Verification is separate and never falls
back from one variant to the other.
"""

from __future__ import annotations

import base64
import binascii
import hashlib
import hmac
import re
from dataclasses import dataclass
from typing import Optional, Union

from ..core.constants import EMPLOYEE_REF_SIGNATURE_CHARS
from ..core.enums import RedemptionFailure
from ..core.exceptions import RedemptionError

TOKEN_PATTERN = re.compile(r"^[0-9a-fA-F]{8}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{12}$")
_LEGACY_PATTERN = re.compile(r"^[1-9][0-9]{0,9}$")
_SIGNED_PATTERN = re.compile(r"^[A-Za-z0-9_-]{4,128}$")
_PAYLOAD_PATTERN = re.compile(r"^([1-9][0-9]{0,9}):([0-9a-f]{%d})$" % EMPLOYEE_REF_SIGNATURE_CHARS)


@dataclass(frozen=True)
class LegacyEmployeeRef:
    employee_id: int


@dataclass(frozen=True)
class SignedEmployeeRef:
    employee_id: int
    signature: str


EmployeeRef = Union[LegacyEmployeeRef, SignedEmployeeRef]


def is_token_shaped(token: str) -> bool:
    return bool(token) and bool(TOKEN_PATTERN.match(token))


def _b64decode(raw: str) -> Optional[str]:
    padded = raw + "=" * (-len(raw) % 4)
    try:
        return base64.urlsafe_b64decode(padded.encode("ascii")).decode("ascii")
    except (binascii.Error, UnicodeDecodeError, ValueError):
        return None


def parse_employee_ref(raw: str) -> Optional[EmployeeRef]:
    """Return the decoded variant, or None when the string has neither shape."""

    if not raw:
        return None
    if _LEGACY_PATTERN.match(raw):
        return LegacyEmployeeRef(int(raw))
    if not _SIGNED_PATTERN.match(raw):
        return None
    payload = _b64decode(raw)
    if payload is None:
        return None
    m = _PAYLOAD_PATTERN.match(payload)
    if not m:
        return None
    return SignedEmployeeRef(employee_id=int(m.group(1)), signature=m.group(2))


class EmployeeRefSigner:
    def __init__(self, secret: str, *, accept_legacy: bool = False):
        if not secret:
            raise ValueError("tracking secret must not be empty")
        self._key = secret.encode("utf-8")
        self._accept_legacy = bool(accept_legacy)

    def _signature(self, token: str, employee_id: int) -> str:
        digest = hmac.new(self._key, f"{token}:{employee_id}".encode("utf-8"), hashlib.sha256).hexdigest()
        return digest[:EMPLOYEE_REF_SIGNATURE_CHARS]

    def sign(self, token: str, employee_id: int) -> str:
        payload = f"{int(employee_id)}:{self._signature(token, int(employee_id))}"
        return base64.urlsafe_b64encode(payload.encode("ascii")).decode("ascii").rstrip("=")

    def verify(self, ref: EmployeeRef, token: str) -> int:
        """Return the employee id the ref is valid for, or raise INVALID_REFERENCE."""

        if isinstance(ref, SignedEmployeeRef):
            expected = self._signature(token, ref.employee_id)
            if hmac.compare_digest(expected, ref.signature):
                return ref.employee_id
            raise RedemptionError(RedemptionFailure.INVALID_REFERENCE)
        if isinstance(ref, LegacyEmployeeRef) and self._accept_legacy:
            return ref.employee_id
        raise RedemptionError(RedemptionFailure.INVALID_REFERENCE)
