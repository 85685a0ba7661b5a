from __future__ import annotations

import logging
from decimal import Decimal
from typing import Optional

from ...core.constants import EMPLOYEE_ESIC_RATE, EMPLOYEE_PF_RATE, EMPLOYER_ESIC_RATE, EMPLOYER_PF_RATE
from .base import PayFigures, PayrollCalculator

logger = logging.getLogger(__name__)

ZERO = Decimal("0")


class StandardPayrollCalculator(PayrollCalculator):
    """Daily pay plus overtime minus undertime, with PF and ESIC withheld.

    daily  = base / working days
    hourly = daily / shift hours
    gross  = daily + hourly * overtime - hourly * undertime
    net    = gross - employee PF - employee ESIC
    """

    @staticmethod
    def daily_salary(base_salary: Decimal, total_working_days: Optional[int]) -> Decimal:
        if not total_working_days or total_working_days <= 0:
            logger.warning("Invalid total working days (%s); daily salary is 0", total_working_days)
            return ZERO
        return Decimal(base_salary) / Decimal(total_working_days)

    @staticmethod
    def hourly_rate(daily_salary: Decimal, working_hours: Decimal) -> Decimal:
        if not working_hours or working_hours <= 0:
            logger.warning("Invalid working hours (%s); hourly rate is 0", working_hours)
            return ZERO
        return daily_salary / working_hours

    def compute(
        self,
        *,
        base_salary: Decimal,
        total_working_days: Optional[int],
        working_hours: Decimal,
        overtime_hours: Decimal,
        undertime_hours: Decimal,
    ) -> PayFigures:
        daily = self.daily_salary(base_salary, total_working_days)
        hourly = self.hourly_rate(daily, working_hours)
        overtime_pay = hourly * overtime_hours
        undertime_deduction = hourly * undertime_hours
        gross = daily + overtime_pay - undertime_deduction

        employee_pf = gross * EMPLOYEE_PF_RATE
        employee_esic = gross * EMPLOYEE_ESIC_RATE
        return PayFigures(
            daily_salary=daily,
            hourly_rate=hourly,
            overtime_pay=overtime_pay,
            undertime_deduction=undertime_deduction,
            gross_salary=gross,
            employer_pf=gross * EMPLOYER_PF_RATE,
            employee_pf=employee_pf,
            employer_esic=gross * EMPLOYER_ESIC_RATE,
            employee_esic=employee_esic,
            net_salary=gross - employee_pf - employee_esic,
        )
