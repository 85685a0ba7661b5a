from __future__ import annotations

import calendar
import logging
from dataclasses import dataclass, replace
from datetime import date, timedelta
from decimal import ROUND_HALF_UP, Decimal
from typing import Optional, Sequence

from ..attendance.repository import AttendanceRepository
from ..common.clock import Clock, SystemClock
from ..common.datetime_utils import duration_hours, shift_duration
from ..core.enums import PAYABLE_STATUSES
from ..core.exceptions import NotFoundError, ValidationError
from ..employees.model import Employee
from ..employees.repository import EmployeeRepository
from .calculator.base import PayrollCalculator
from .calculator.standard_calculator import StandardPayrollCalculator
from .model import MonthlySalary, SalaryRecord
from .repository import SalaryRepository

logger = logging.getLogger(__name__)

CENT = Decimal("0.01")


def money(value: Decimal) -> Decimal:
    return Decimal(value).quantize(CENT, rounding=ROUND_HALF_UP)


@dataclass(frozen=True)
class CycleEnd:
    employee: Employee
    end_date: date


class PayrollEngine:
    """Daily salary accrual from the day's attendance records."""

    def __init__(
        self,
        employees: EmployeeRepository,
        attendance: AttendanceRepository,
        salaries: SalaryRepository,
        *,
        calculator: Optional[PayrollCalculator] = None,
        clock: Optional[Clock] = None,
    ):
        self._employees = employees
        self._attendance = attendance
        self._salaries = salaries
        self._calculator = calculator or StandardPayrollCalculator()
        self._clock = clock or SystemClock()

    def run_for_employee(self, employee_id: str, *, month: int, year: int, day: int) -> SalaryRecord:
        try:
            run_date = date(int(year), int(month), int(day))
        except (TypeError, ValueError):
            raise ValidationError("Invalid payroll date")

        employee = self._employees.get_by_id(employee_id)
        if not employee:
            raise NotFoundError("Employee not found")

        working_hours = Decimal("0")
        if employee.shift_start and employee.shift_end:
            working_hours = duration_hours(shift_duration(employee.shift_start, employee.shift_end))

        worked = overtime = undertime = timedelta(0)
        for r in self._attendance.list_for_employee(employee_id, start=run_date, end=run_date):
            if r.status not in PAYABLE_STATUSES:
                continue
            worked += r.hours_worked or timedelta(0)
            overtime += r.overtime_hours or timedelta(0)
            undertime += r.undertime_hours or timedelta(0)

        figures = self._calculator.compute(
            base_salary=employee.base_salary,
            total_working_days=employee.total_working_days,
            working_hours=working_hours,
            overtime_hours=duration_hours(overtime),
            undertime_hours=duration_hours(undertime),
        )

        record = SalaryRecord(
            employee_id=employee_id,
            month=run_date.month,
            year=run_date.year,
            day=run_date.day,
            gross_salary=money(figures.gross_salary),
            net_salary=money(figures.net_salary),
            base_salary=money(employee.base_salary),
            overtime_pay=money(figures.overtime_pay),
            undertime_deduction=money(figures.undertime_deduction),
            total_hours_worked=money(duration_hours(worked)),
            total_overtime_hours=money(duration_hours(overtime)),
            total_undertime_hours=money(duration_hours(undertime)),
            total_pf=money(figures.employer_pf + figures.employee_pf),
            total_esic=money(figures.employer_esic + figures.employee_esic),
            created_at=self._clock.now(),
        )
        salary_id = self._salaries.add(record)
        logger.info("Salary for %s on %s: gross=%s net=%s", employee_id, run_date, record.gross_salary, record.net_salary)
        return replace(record, salary_id=salary_id)

    def run_for_all(self, run_date: Optional[date] = None) -> int:
        """Payroll for every active employee. One failure does not stop the rest."""
        run_date = run_date or self._clock.now().date()
        done = 0
        for employee in self._employees.list_active():
            try:
                self.run_for_employee(employee.employee_id, month=run_date.month, year=run_date.year, day=run_date.day)
                done += 1
            except Exception:
                logger.exception("Payroll failed for %s on %s", employee.employee_id, run_date)
        logger.info("Payroll run for %s: %d employee(s)", run_date, done)
        return done

    def salary_for_month(self, employee_id: str, month, year) -> MonthlySalary:
        try:
            month_i, year_i = int(month), int(year)
        except (TypeError, ValueError):
            raise ValidationError("Invalid month or year")
        if not 1 <= month_i <= 12:
            raise ValidationError("Invalid month or year")

        records = self._salaries.list_for_month(employee_id, month_i, year_i)
        if not records:
            raise NotFoundError("Salary details not found")

        def total(field: str) -> Decimal:
            return money(sum((getattr(r, field) for r in records), Decimal("0")))

        return MonthlySalary(
            employee_id=employee_id,
            month=month_i,
            year=year_i,
            days=len({r.day for r in records}),
            gross_salary=total("gross_salary"),
            net_salary=total("net_salary"),
            overtime_pay=total("overtime_pay"),
            undertime_deduction=total("undertime_deduction"),
            total_pf=total("total_pf"),
            total_esic=total("total_esic"),
        )

    def employees_with_cycle_end(self, end_date: date) -> Sequence[CycleEnd]:
        """Employees whose monthly pay cycle ends on ``end_date``.

        The cycle ends on the joining day-of-month, clamped to the last day of
        shorter months.
        """
        last_day = calendar.monthrange(end_date.year, end_date.month)[1]
        matches = []
        for employee in self._employees.list_active():
            cycle_end = end_date.replace(day=min(employee.joined_on.day, last_day))
            if cycle_end == end_date:
                matches.append(CycleEnd(employee=employee, end_date=cycle_end))
        if not matches:
            raise NotFoundError("No employees found with salary ending on this date")
        return matches
