from __future__ import annotations

from datetime import datetime

import pytest

from src.attendance_payroll.attendance_payroll.attendance.service import AttendanceReconciler
from src.attendance_payroll.attendance_payroll.payroll.service import PayrollEngine
from src.attendance_payroll.attendance_payroll.shifts.service import ShiftAssignmentValidator, ShiftCatalog
from tests.fakes import (
    EVENING,
    GENERAL,
    NIGHT,
    FakeGeocoder,
    FixedClock,
    InMemoryAssignments,
    InMemoryAttendance,
    InMemoryEmployees,
    InMemorySalaries,
    InMemoryShifts,
    make_employee,
)


@pytest.fixture
def clock():
    # Monday
    return FixedClock(datetime(2025, 1, 6, 8, 0))


@pytest.fixture
def employees():
    return InMemoryEmployees(make_employee("Ats00001"), make_employee("Ats00002", name="Ravi Kumar"))


@pytest.fixture
def shifts():
    return InMemoryShifts(GENERAL, NIGHT, EVENING)


@pytest.fixture
def assignments():
    return InMemoryAssignments()


@pytest.fixture
def attendance():
    return InMemoryAttendance()


@pytest.fixture
def salaries():
    return InMemorySalaries()


@pytest.fixture
def geocoder():
    return FakeGeocoder()


@pytest.fixture
def catalog(shifts, assignments):
    return ShiftCatalog(shifts, assignments)


@pytest.fixture
def validator(shifts, assignments, employees, clock):
    return ShiftAssignmentValidator(shifts, assignments, employees, clock=clock)


@pytest.fixture
def reconciler(attendance, employees, catalog, geocoder, clock):
    return AttendanceReconciler(attendance, employees, catalog, geocoder=geocoder, clock=clock)


@pytest.fixture
def payroll(employees, attendance, salaries, clock):
    return PayrollEngine(employees, attendance, salaries, clock=clock)
