from __future__ import annotations

from dataclasses import dataclass
from datetime import date, time
from decimal import Decimal
from typing import Optional

from ..core.constants import WEEKDAYS
from ..core.enums import Role, StaffType


@dataclass(frozen=True)
class Employee:
    """Domain entity: employee account.

    ``shift_name``/``shift_start``/``shift_end`` are a snapshot of the most
    recently assigned shift. They are refreshed on every assignment and may lag
    behind if a shift definition is edited afterwards.
    """

    employee_id: str
    name: str
    email: str
    password_hash: str
    role: Role
    base_salary: Decimal
    joined_on: date
    total_working_days: Optional[int] = None
    weekoff_days: tuple[str, ...] = ()
    staff_type: StaffType = StaffType.REGULAR
    mobile: Optional[str] = None
    profile_pic: Optional[str] = None
    shift_name: Optional[str] = None
    shift_start: Optional[time] = None
    shift_end: Optional[time] = None
    is_active: bool = True

    def is_weekoff(self, day: date) -> bool:
        return WEEKDAYS[day.weekday()] in self.weekoff_days
