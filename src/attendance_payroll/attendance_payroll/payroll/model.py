from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import Optional


@dataclass(frozen=True)
class SalaryRecord:
    """One payroll run for one employee and one day. Append-only."""

    employee_id: str
    month: int
    year: int
    day: int
    gross_salary: Decimal
    net_salary: Decimal
    base_salary: Decimal
    overtime_pay: Decimal
    undertime_deduction: Decimal
    total_hours_worked: Decimal
    total_overtime_hours: Decimal
    total_undertime_hours: Decimal
    total_pf: Decimal
    total_esic: Decimal
    created_at: datetime
    salary_id: Optional[int] = None


@dataclass(frozen=True)
class MonthlySalary:
    """Sum of the daily salary records of a month."""

    employee_id: str
    month: int
    year: int
    days: int
    gross_salary: Decimal
    net_salary: Decimal
    overtime_pay: Decimal
    undertime_deduction: Decimal
    total_pf: Decimal
    total_esic: Decimal
