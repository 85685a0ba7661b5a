from __future__ import annotations

from datetime import date, time
from decimal import Decimal
from typing import Optional, Protocol, Sequence

from ..core.enums import Role, StaffType
from .model import Employee


class EmployeeRepository(Protocol):
    """Repository interface for employees.

    Services depend on this protocol, never on a concrete database.
    """

    def get_by_id(self, employee_id: str) -> Optional[Employee]:
        raise NotImplementedError

    def get_by_email(self, email: str) -> Optional[Employee]:
        raise NotImplementedError

    def exists_with_contact(self, *, email: str, mobile: Optional[str]) -> bool:
        raise NotImplementedError

    def list_active(self) -> Sequence[Employee]:
        raise NotImplementedError

    def next_sequence(self, counter_name: str) -> int:
        """Atomically increment and return a named counter."""

        raise NotImplementedError

    def create_employee(
        self,
        *,
        employee_id: str,
        name: str,
        email: str,
        mobile: Optional[str],
        password_hash: str,
        role: Role,
        staff_type: StaffType,
        base_salary: Decimal,
        total_working_days: Optional[int],
        profile_pic: Optional[str],
        joined_on: date,
    ) -> None:
        raise NotImplementedError

    def update_shift_snapshot(self, employee_id: str, *, shift_name: str, shift_start: time, shift_end: time) -> bool:
        raise NotImplementedError

    def update_weekoff(self, employee_id: str, *, weekoff_days: Sequence[str]) -> bool:
        raise NotImplementedError
