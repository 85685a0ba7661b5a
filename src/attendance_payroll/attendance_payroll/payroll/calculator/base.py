from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from decimal import Decimal
from typing import Optional


@dataclass(frozen=True)
class PayFigures:
    """Unrounded results of one day's payroll."""

    daily_salary: Decimal
    hourly_rate: Decimal
    overtime_pay: Decimal
    undertime_deduction: Decimal
    gross_salary: Decimal
    employer_pf: Decimal
    employee_pf: Decimal
    employer_esic: Decimal
    employee_esic: Decimal
    net_salary: Decimal


class PayrollCalculator(ABC):
    """Calculator interface (Strategy Pattern for payroll)."""

    @abstractmethod
    def compute(
        self,
        *,
        base_salary: Decimal,
        total_working_days: Optional[int],
        working_hours: Decimal,
        overtime_hours: Decimal,
        undertime_hours: Decimal,
    ) -> PayFigures:
        raise NotImplementedError
