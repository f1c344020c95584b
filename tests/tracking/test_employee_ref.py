from __future__ import annotations

import base64

import pytest

from src.employee_tracker.employee_tracker.core.enums import RedemptionFailure
from src.employee_tracker.employee_tracker.core.exceptions import RedemptionError
from src.employee_tracker.employee_tracker.tracking.employee_ref import (
    EmployeeRefSigner,
    LegacyEmployeeRef,
    SignedEmployeeRef,
    is_token_shaped,
    parse_employee_ref,
)

TOKEN = "123e4567-e89b-42d3-a456-426614174000"
OTHER_TOKEN = "9b2f0c1e-5d3a-4c7b-8e6f-0a1b2c3d4e5f"


def _b64(payload: str) -> str:
    return base64.urlsafe_b64encode(payload.encode("ascii")).decode("ascii").rstrip("=")


def test_signed_ref_round_trips_and_has_no_padding():
    signer = EmployeeRefSigner("secret")
    ref = signer.sign(TOKEN, 42)

    assert "=" not in ref
    parsed = parse_employee_ref(ref)
    assert isinstance(parsed, SignedEmployeeRef)
    assert parsed.employee_id == 42
    assert len(parsed.signature) == 32
    assert signer.verify(parsed, TOKEN) == 42


def test_signature_is_bound_to_token():
    signer = EmployeeRefSigner("secret")
    parsed = parse_employee_ref(signer.sign(TOKEN, 7))

    with pytest.raises(RedemptionError) as ei:
        signer.verify(parsed, OTHER_TOKEN)
    assert ei.value.reason is RedemptionFailure.INVALID_REFERENCE


def test_swapped_employee_id_is_rejected():
    signer = EmployeeRefSigner("secret")
    signature = parse_employee_ref(signer.sign(TOKEN, 1)).signature
    forged = parse_employee_ref(_b64(f"2:{signature}"))

    assert isinstance(forged, SignedEmployeeRef)
    with pytest.raises(RedemptionError) as ei:
        signer.verify(forged, TOKEN)
    assert ei.value.reason is RedemptionFailure.INVALID_REFERENCE


def test_different_secret_does_not_verify():
    parsed = parse_employee_ref(EmployeeRefSigner("one").sign(TOKEN, 3))
    with pytest.raises(RedemptionError):
        EmployeeRefSigner("two").verify(parsed, TOKEN)


def test_legacy_ref_needs_opt_in():
    parsed = parse_employee_ref("15")
    assert parsed == LegacyEmployeeRef(15)

    with pytest.raises(RedemptionError) as ei:
        EmployeeRefSigner("secret").verify(parsed, TOKEN)
    assert ei.value.reason is RedemptionFailure.INVALID_REFERENCE

    assert EmployeeRefSigner("secret", accept_legacy=True).verify(parsed, TOKEN) == 15


@pytest.mark.parametrize("raw", ["", "0", "-1", "abc", "abcd", "a b", "12345678901", _b64("x:y"), _b64("1:ABC")])
def test_malformed_refs_do_not_parse(raw):
    assert parse_employee_ref(raw) is None


def test_token_shape():
    assert is_token_shaped(TOKEN)
    assert not is_token_shaped("not-a-token")
    assert not is_token_shaped(TOKEN + "0")
    assert not is_token_shaped("")


def test_empty_secret_is_refused():
    with pytest.raises(ValueError):
        EmployeeRefSigner("")
