from __future__ import annotations

import logging
from typing import Sequence

from ..common.validators import parse_wage, require_name, require_positive_id
from ..core.exceptions import NotFoundError
from .model import Employee
from .repository import EmployeeRepository

logger = logging.getLogger(__name__)


class EmployeeService:
    """Use case: manage the employee roster (admin)."""

    def __init__(self, employees: EmployeeRepository):
        self._employees = employees

    def list_employees(self) -> Sequence[Employee]:
        return self._employees.list_all()

    def list_active(self) -> Sequence[Employee]:
        return self._employees.list_active()

    def get_employee(self, employee_id) -> Employee:
        employee_id = require_positive_id(employee_id, "employee ID")
        employee = self._employees.get_by_id(employee_id)
        if not employee:
            raise NotFoundError("Employee not found. They may have been deleted.")
        return employee

    def create_employee(self, *, first_name: str, last_name: str, daily_wage="0") -> int:
        first = require_name(first_name, "First name")
        last = require_name(last_name, "Last name")
        wage = parse_wage(daily_wage)

        employee_id = self._employees.create(first_name=first, last_name=last, daily_wage=wage)
        logger.info("employee created id=%s", employee_id)
        return employee_id

    def update_employee(self, *, employee_id, first_name: str, last_name: str, daily_wage, active: bool) -> None:
        employee_id = require_positive_id(employee_id, "employee ID")
        first = require_name(first_name, "First name")
        last = require_name(last_name, "Last name")
        wage = parse_wage(daily_wage)

        if not self._employees.update(
            employee_id=employee_id,
            first_name=first,
            last_name=last,
            daily_wage=wage,
            active=bool(active),
        ):
            raise NotFoundError("Employee not found. They may have been deleted.")

    def deactivate_employee(self, employee_id) -> Employee:
        employee = self.get_employee(employee_id)
        if not self._employees.set_active(employee.employee_id, active=False):
            raise NotFoundError("Employee not found.")
        logger.info("employee deactivated id=%s", employee.employee_id)
        return employee
