from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date
from decimal import Decimal, InvalidOperation
from typing import Any, Optional, Sequence

from werkzeug.security import check_password_hash, generate_password_hash

from ..common.validators import (
    require_min_length,
    require_mobile,
    require_non_empty,
    require_person_name,
    require_weekdays,
)
from ..core.constants import EMPLOYEE_ID_COUNTER, EMPLOYEE_ID_PREFIX
from ..core.enums import Role, StaffType
from ..core.exceptions import AuthenticationError, ConflictError, NotFoundError, ValidationError
from .model import Employee
from .repository import EmployeeRepository

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SessionEmployee:
    """What we store into the Flask session after login."""

    employee_id: str
    name: str
    role: Role


class AuthService:
    """Use case: authenticate an employee (login)."""

    def __init__(self, employees: EmployeeRepository):
        self._employees = employees

    def authenticate(self, login: str, password: str) -> SessionEmployee:
        login = (login or "").strip()
        employee = self._employees.get_by_id(login) or self._employees.get_by_email(login)
        if not employee or not employee.is_active:
            raise AuthenticationError("Invalid credentials")

        try:
            ok = check_password_hash(employee.password_hash, password or "")
        except ValueError:
            # e.g. placeholder or corrupted hashes
            ok = False

        if not ok:
            raise AuthenticationError("Invalid credentials")

        return SessionEmployee(employee_id=employee.employee_id, name=employee.name, role=employee.role)


class EmployeeService:
    """Use case: manage employee accounts and week-off schedules."""

    def __init__(self, employees: EmployeeRepository):
        self._employees = employees

    def get(self, employee_id: str) -> Employee:
        employee = self._employees.get_by_id(employee_id)
        if not employee:
            raise NotFoundError("Employee not found")
        return employee

    def register_employee(
        self,
        *,
        name: str,
        email: str,
        password: str,
        mobile: str,
        base_salary: Any,
        total_working_days: Optional[int] = None,
        staff_type: str = StaffType.REGULAR.value,
        role: str = Role.EMPLOYEE.value,
        profile_pic: Optional[str] = None,
        joined_on: Optional[date] = None,
    ) -> str:
        name = require_person_name(name)
        email = require_non_empty(email, "Email").lower()
        mobile = require_mobile(require_non_empty(mobile, "Mobile"))
        require_min_length(password, "Password", 6)

        try:
            salary = Decimal(str(base_salary))
        except (InvalidOperation, TypeError):
            raise ValidationError("Salary is invalid")
        if salary < 0:
            raise ValidationError("Salary is invalid")

        try:
            role_value = Role(role)
            staff_value = StaffType(staff_type)
        except ValueError:
            raise ValidationError("Invalid role or staff type")

        if self._employees.exists_with_contact(email=email, mobile=mobile):
            raise ConflictError("User already exists")

        number = self._employees.next_sequence(EMPLOYEE_ID_COUNTER)
        employee_id = f"{EMPLOYEE_ID_PREFIX}{number:05d}"

        self._employees.create_employee(
            employee_id=employee_id,
            name=name,
            email=email,
            mobile=mobile,
            password_hash=generate_password_hash(password),
            role=role_value,
            staff_type=staff_value,
            base_salary=salary,
            total_working_days=int(total_working_days) if total_working_days else None,
            profile_pic=profile_pic,
            joined_on=joined_on or date.today(),
        )
        logger.info("Registered employee %s", employee_id)
        return employee_id

    def update_weekoff(self, employee_id: str, weekoff_days: Sequence[str]) -> tuple[str, ...]:
        days = require_weekdays(weekoff_days)
        self.get(employee_id)
        self._employees.update_weekoff(employee_id, weekoff_days=days)
        return days

    def get_weekoff(self, employee_id: str) -> tuple[str, ...]:
        return self.get(employee_id).weekoff_days
