from __future__ import annotations

from dataclasses import replace
from datetime import date, datetime, time, timedelta
from decimal import Decimal

import pytest

from src.attendance_payroll.attendance_payroll.attendance.model import AttendanceRecord
from src.attendance_payroll.attendance_payroll.core.enums import AttendanceStatus
from src.attendance_payroll.attendance_payroll.core.exceptions import NotFoundError, ValidationError
from tests.fakes import make_employee


def _worked_day(attendance, employee_id, day, *, overtime=timedelta(0), undertime=timedelta(0), status=AttendanceStatus.PRESENT, shift_id=1):
    attendance.seed(
        AttendanceRecord(
            attendance_id=len(attendance.all()) + 1,
            employee_id=employee_id,
            employee_name="Worker",
            work_date=day,
            shift_id=shift_id,
            shift_name="General",
            status=status,
            check_in_time=datetime.combine(day, time(9, 0)),
            check_out_time=datetime.combine(day, time(18, 0)) + overtime - undertime,
            location="Office",
            hours_worked=timedelta(hours=9) + overtime - undertime,
            overtime_hours=overtime,
            undertime_hours=undertime,
        )
    )


@pytest.fixture
def worker(employees):
    e = make_employee("Ats00010", name="Kiran Das", shift=(time(9, 0), time(18, 0)), joined_on=date(2024, 1, 31))
    employees.add(e)
    return e


def test_daily_run_with_two_hours_overtime(payroll, attendance, salaries, worker):
    _worked_day(attendance, worker.employee_id, date(2025, 1, 6), overtime=timedelta(hours=2))

    record = payroll.run_for_employee(worker.employee_id, month=1, year=2025, day=6)

    assert record.gross_salary == Decimal("1222.22")
    assert record.net_salary == Decimal("1066.39")
    assert record.overtime_pay == Decimal("222.22")
    assert record.undertime_deduction == Decimal("0.00")
    assert record.total_hours_worked == Decimal("11.00")
    assert record.total_overtime_hours == Decimal("2.00")
    assert record.total_pf == Decimal("299.44")
    assert record.total_esic == Decimal("48.89")
    assert record.salary_id == 1
    assert salaries.records[0].gross_salary == record.gross_salary


def test_day_without_payable_record_earns_daily_salary(payroll, attendance, worker):
    _worked_day(attendance, worker.employee_id, date(2025, 1, 6), status=AttendanceStatus.ABSENT)

    record = payroll.run_for_employee(worker.employee_id, month=1, year=2025, day=6)

    assert record.gross_salary == Decimal("1000.00")
    assert record.total_hours_worked == Decimal("0.00")


def test_hours_from_all_payable_records_of_the_day_are_summed(payroll, attendance, worker):
    _worked_day(attendance, worker.employee_id, date(2025, 1, 6), overtime=timedelta(hours=1))
    _worked_day(attendance, worker.employee_id, date(2025, 1, 6), overtime=timedelta(hours=1), shift_id=2)

    record = payroll.run_for_employee(worker.employee_id, month=1, year=2025, day=6)

    assert record.total_overtime_hours == Decimal("2.00")
    assert record.gross_salary == Decimal("1222.22")


def test_employee_without_shift_snapshot_gets_no_overtime_pay(payroll, attendance):
    _worked_day(attendance, "Ats00001", date(2025, 1, 6), overtime=timedelta(hours=2))

    record = payroll.run_for_employee("Ats00001", month=1, year=2025, day=6)

    assert record.overtime_pay == Decimal("0.00")
    assert record.gross_salary == Decimal("1000.00")


def test_unknown_employee_and_bad_date(payroll):
    with pytest.raises(NotFoundError):
        payroll.run_for_employee("Ats09999", month=1, year=2025, day=6)
    with pytest.raises(ValidationError):
        payroll.run_for_employee("Ats00001", month=2, year=2025, day=30)


def test_runs_are_append_only(payroll, salaries, worker):
    payroll.run_for_employee(worker.employee_id, month=1, year=2025, day=6)
    payroll.run_for_employee(worker.employee_id, month=1, year=2025, day=6)

    assert len(salaries.records) == 2


def test_run_for_all_isolates_failures(payroll, salaries, employees):
    employees.add(replace(make_employee("Ats00011", name="Broken"), base_salary="not-a-number"))

    done = payroll.run_for_all(date(2025, 1, 6))

    assert done == 2
    assert {r.employee_id for r in salaries.records} == {"Ats00001", "Ats00002"}


def test_salary_for_month_sums_daily_records(payroll, attendance, worker):
    _worked_day(attendance, worker.employee_id, date(2025, 1, 6), overtime=timedelta(hours=2))
    payroll.run_for_employee(worker.employee_id, month=1, year=2025, day=6)
    payroll.run_for_employee(worker.employee_id, month=1, year=2025, day=7)

    summary = payroll.salary_for_month(worker.employee_id, "1", "2025")

    assert summary.days == 2
    assert summary.gross_salary == Decimal("2222.22")
    assert summary.net_salary == Decimal("1066.39") + Decimal("872.50")


def test_salary_for_month_errors(payroll, worker):
    with pytest.raises(NotFoundError):
        payroll.salary_for_month(worker.employee_id, 1, 2025)
    with pytest.raises(ValidationError):
        payroll.salary_for_month(worker.employee_id, 13, 2025)
    with pytest.raises(ValidationError):
        payroll.salary_for_month(worker.employee_id, "jan", 2025)


def test_cycle_end_follows_joining_day(payroll, worker):
    matches = payroll.employees_with_cycle_end(date(2025, 1, 15))

    assert {m.employee.employee_id for m in matches} == {"Ats00001", "Ats00002"}


def test_cycle_end_is_clamped_to_month_end(payroll, worker):
    matches = payroll.employees_with_cycle_end(date(2025, 2, 28))

    assert [m.employee.employee_id for m in matches] == [worker.employee_id]
    assert matches[0].end_date == date(2025, 2, 28)


def test_no_cycle_end_on_date_is_not_found(payroll, worker):
    with pytest.raises(NotFoundError):
        payroll.employees_with_cycle_end(date(2025, 1, 20))
