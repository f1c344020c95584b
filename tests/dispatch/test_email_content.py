from __future__ import annotations

from datetime import date
from decimal import Decimal

from src.employee_tracker.employee_tracker.employees.model import Employee
from src.employee_tracker.employee_tracker.tracking.employee_ref import parse_employee_ref

TOKEN = "123e4567-e89b-42d3-a456-426614174000"


def test_builds_subject_and_signed_links(builder, signer):
    employees = [Employee(1, "Alice", "Martin", Decimal("100")), Employee(2, "Zoë", "O'Neil", Decimal("90"))]

    msg = builder.build(work_date=date(2024, 6, 1), token=TOKEN, employees=employees, recipients=["a@acme.org"])

    assert msg.subject == "Work Attendance - Saturday, June 1, 2024"
    assert list(msg.recipients) == ["a@acme.org"]
    for e in employees:
        url = f"https://tracker.example.org/track/{TOKEN}/{signer.sign(TOKEN, e.employee_id)}"
        assert url in msg.text
        assert url in msg.html
    assert "Alice Martin" in msg.text
    assert "O&#39;Neil" in msg.html
    assert "Who worked today?" in msg.html


def test_link_ref_decodes_to_employee(builder, signer):
    url = builder.link_for(TOKEN, 7)
    ref = url.rsplit("/", 1)[1]

    assert signer.verify(parse_employee_ref(ref), TOKEN) == 7
