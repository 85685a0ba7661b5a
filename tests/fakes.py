"""In-memory implementations of the repository protocols, shared by the tests."""
from __future__ import annotations

from dataclasses import replace
from datetime import date, datetime, time, timedelta
from decimal import Decimal
from typing import Optional, Sequence

from werkzeug.security import generate_password_hash

from src.attendance_payroll.attendance_payroll.attendance.model import AttendanceRecord
from src.attendance_payroll.attendance_payroll.common.cache import InMemoryTTLCache
from src.attendance_payroll.attendance_payroll.container import Container, assemble
from src.attendance_payroll.attendance_payroll.core.enums import AttendanceStatus, Role, StaffType
from src.attendance_payroll.attendance_payroll.core.exceptions import ConflictError, UpstreamError
from src.attendance_payroll.attendance_payroll.employees.model import Employee
from src.attendance_payroll.attendance_payroll.payroll.model import SalaryRecord
from src.attendance_payroll.attendance_payroll.shifts.model import ShiftAssignment, ShiftDefinition


class FixedClock:
    def __init__(self, now: datetime):
        self.current = now

    def now(self) -> datetime:
        return self.current

    def advance(self, **kwargs) -> None:
        self.current += timedelta(**kwargs)


def make_employee(
    employee_id: str = "Ats00001",
    *,
    name: str = "Asha Rao",
    role: Role = Role.EMPLOYEE,
    base_salary: str = "30000",
    total_working_days: Optional[int] = 30,
    weekoff_days: tuple[str, ...] = (),
    joined_on: date = date(2024, 1, 15),
    shift: Optional[tuple[time, time]] = None,
    profile_pic: Optional[str] = None,
    password: str = "secret123",
) -> Employee:
    return Employee(
        employee_id=employee_id,
        name=name,
        email=f"{employee_id.lower()}@example.com",
        password_hash=generate_password_hash(password),
        role=role,
        base_salary=Decimal(base_salary),
        joined_on=joined_on,
        total_working_days=total_working_days,
        weekoff_days=weekoff_days,
        staff_type=StaffType.REGULAR,
        mobile="9876543210",
        profile_pic=profile_pic,
        shift_name="General" if shift else None,
        shift_start=shift[0] if shift else None,
        shift_end=shift[1] if shift else None,
    )


class InMemoryEmployees:
    def __init__(self, *employees: Employee):
        self.by_id: dict[str, Employee] = {e.employee_id: e for e in employees}
        self.counters: dict[str, int] = {}

    def add(self, employee: Employee) -> None:
        self.by_id[employee.employee_id] = employee

    def get_by_id(self, employee_id: str) -> Optional[Employee]:
        return self.by_id.get(employee_id)

    def get_by_email(self, email: str) -> Optional[Employee]:
        return next((e for e in self.by_id.values() if e.email == email), None)

    def exists_with_contact(self, *, email: str, mobile: Optional[str]) -> bool:
        return any(e.email == email or (mobile and e.mobile == mobile) for e in self.by_id.values())

    def list_active(self) -> Sequence[Employee]:
        return [e for e in self.by_id.values() if e.is_active]

    def next_sequence(self, counter_name: str) -> int:
        self.counters[counter_name] = self.counters.get(counter_name, 0) + 1
        return self.counters[counter_name]

    def create_employee(self, *, employee_id: str, **fields) -> None:
        self.by_id[employee_id] = Employee(employee_id=employee_id, **fields)

    def update_shift_snapshot(self, employee_id: str, *, shift_name: str, shift_start: time, shift_end: time) -> bool:
        e = self.by_id.get(employee_id)
        if not e:
            return False
        self.by_id[employee_id] = replace(e, shift_name=shift_name, shift_start=shift_start, shift_end=shift_end)
        return True

    def update_weekoff(self, employee_id: str, *, weekoff_days: Sequence[str]) -> bool:
        e = self.by_id.get(employee_id)
        if not e:
            return False
        self.by_id[employee_id] = replace(e, weekoff_days=tuple(weekoff_days))
        return True


class InMemoryShifts:
    def __init__(self, *shifts: ShiftDefinition):
        self.by_id: dict[int, ShiftDefinition] = {s.shift_id: s for s in shifts}

    def list_all(self) -> Sequence[ShiftDefinition]:
        return list(self.by_id.values())

    def get_by_id(self, shift_id: int) -> Optional[ShiftDefinition]:
        return self.by_id.get(shift_id)

    def create_shift(self, *, shift_name: str, start_time: time, end_time: time, description: Optional[str] = None) -> int:
        shift_id = max(self.by_id, default=0) + 1
        self.by_id[shift_id] = ShiftDefinition(shift_id, shift_name, start_time, end_time, description)
        return shift_id


class InMemoryAssignments:
    def __init__(self):
        self.items: list[ShiftAssignment] = []

    def list_all(self) -> Sequence[ShiftAssignment]:
        return list(self.items)

    def list_for_employee(self, employee_id: str) -> Sequence[ShiftAssignment]:
        return [a for a in self.items if a.employee_id == employee_id]

    def list_active_on(self, day: date) -> Sequence[ShiftAssignment]:
        return [a for a in self.items if a.is_active_on(day)]

    def find_overlapping(self, *, employee_id, shift_id, shift_name, from_date, to_date) -> Optional[ShiftAssignment]:
        for a in self.items:
            if a.employee_id != employee_id:
                continue
            if a.shift_id != shift_id and a.shift_name != shift_name:
                continue
            if a.overlaps(from_date, to_date):
                return a
        return None

    def create_assignment(self, **fields) -> int:
        assignment_id = len(self.items) + 1
        self.items.append(ShiftAssignment(assignment_id=assignment_id, **fields))
        return assignment_id

    def delete_expired(self, *, before: date) -> int:
        keep = [a for a in self.items if a.to_date >= before]
        removed = len(self.items) - len(keep)
        self.items = keep
        return removed


class InMemoryAttendance:
    """Enforces the (employee, date, shift) unique key like the schema does."""

    def __init__(self):
        self.by_key: dict[tuple[str, date, int], AttendanceRecord] = {}
        self._id = 0
        self.fail_for: set[str] = set()

    def _insert(self, record_fields: dict) -> int:
        key = (record_fields["employee_id"], record_fields["work_date"], int(record_fields["shift_id"]))
        if record_fields["employee_id"] in self.fail_for:
            raise RuntimeError("storage down")
        if key in self.by_key:
            raise ConflictError("Record already exists", status_code=409)
        self._id += 1
        self.by_key[key] = AttendanceRecord(attendance_id=self._id, **record_fields)
        return self._id

    def get(self, employee_id: str, work_date: date, shift_id: int) -> Optional[AttendanceRecord]:
        return self.by_key.get((employee_id, work_date, int(shift_id)))

    def all(self) -> list[AttendanceRecord]:
        return list(self.by_key.values())

    def list_for_employee(self, employee_id: str, *, start=None, end=None) -> Sequence[AttendanceRecord]:
        out = [
            r
            for r in self.by_key.values()
            if r.employee_id == employee_id
            and (start is None or r.work_date >= start)
            and (end is None or r.work_date <= end)
        ]
        return sorted(out, key=lambda r: (r.work_date, r.shift_id), reverse=True)

    def list_for_date(self, work_date: date) -> Sequence[AttendanceRecord]:
        return [r for r in self.by_key.values() if r.work_date == work_date]

    def create_checkin(self, *, employee_id, employee_name, work_date, shift_id, shift_name, check_in_time, location) -> int:
        return self._insert(
            dict(
                employee_id=employee_id,
                employee_name=employee_name,
                work_date=work_date,
                shift_id=shift_id,
                shift_name=shift_name,
                status=AttendanceStatus.CHECKED_IN,
                check_in_time=check_in_time,
                location=location,
            )
        )

    def create_marker(self, *, employee_id, employee_name, work_date, shift_id, shift_name, status, location) -> int:
        return self._insert(
            dict(
                employee_id=employee_id,
                employee_name=employee_name,
                work_date=work_date,
                shift_id=shift_id,
                shift_name=shift_name,
                status=status,
                location=location,
                hours_worked=timedelta(0),
                overtime_hours=timedelta(0),
                undertime_hours=timedelta(0),
            )
        )

    def update_checkout(self, *, attendance_id, check_out_time, status, hours_worked, overtime_hours, undertime_hours) -> bool:
        for key, r in self.by_key.items():
            if r.attendance_id == attendance_id and r.is_open:
                if r.employee_id in self.fail_for:
                    raise RuntimeError("storage down")
                self.by_key[key] = replace(
                    r,
                    check_out_time=check_out_time,
                    status=status,
                    hours_worked=hours_worked,
                    overtime_hours=overtime_hours,
                    undertime_hours=undertime_hours,
                )
                return True
        return False

    def seed(self, record: AttendanceRecord) -> None:
        self.by_key[(record.employee_id, record.work_date, record.shift_id)] = record
        self._id = max(self._id, record.attendance_id)


class InMemorySalaries:
    def __init__(self):
        self.records: list[SalaryRecord] = []

    def add(self, record: SalaryRecord) -> int:
        self.records.append(record)
        return len(self.records)

    def list_for_month(self, employee_id: str, month: int, year: int) -> Sequence[SalaryRecord]:
        return [r for r in self.records if r.employee_id == employee_id and r.month == month and r.year == year]


class InMemoryJobLocks:
    def __init__(self):
        self.claims: dict[tuple[str, str], str] = {}

    def claim(self, job_name: str, period_key: str, *, worker: str, claimed_at: datetime) -> bool:
        if (job_name, period_key) in self.claims:
            return False
        self.claims[(job_name, period_key)] = worker
        return True


class FakeGeocoder:
    def __init__(self, label: Optional[str] = "MG Road, Bengaluru", error: Optional[Exception] = None):
        self.label = label
        self.error = error
        self.calls = 0

    def reverse(self, latitude: float, longitude: float) -> Optional[str]:
        self.calls += 1
        if self.error:
            raise self.error
        return self.label


class FakeFaceMatcher:
    """Images are identified by name; the embedding is a 1-element vector keyed on the person."""

    def __init__(self, people: Optional[dict[str, str]] = None, *, broken: bool = False):
        self.people = people or {}
        self.broken = broken
        self.embedded: list[str] = []

    def embed(self, image_ref: str):
        self.embedded.append(image_ref)
        if self.broken:
            raise UpstreamError("engine offline")
        person = self.people.get(image_ref)
        return [float(len(person)), float(sum(map(ord, person)))] if person else None

    def same_person(self, reference, candidate) -> bool:
        return list(reference) == list(candidate)


def build_fake_container(
    *,
    clock: FixedClock,
    employees: Optional[InMemoryEmployees] = None,
    shifts: Optional[InMemoryShifts] = None,
    assignments: Optional[InMemoryAssignments] = None,
    attendance: Optional[InMemoryAttendance] = None,
    salaries: Optional[InMemorySalaries] = None,
    geocoder: Optional[FakeGeocoder] = None,
    face_matcher: Optional[FakeFaceMatcher] = None,
) -> Container:
    return assemble(
        settings={"SCHEDULER_ENABLED": False, "TIMEZONE": None},
        clock=clock,
        employees_repo=employees or InMemoryEmployees(),
        shifts_repo=shifts or InMemoryShifts(),
        assignments_repo=assignments or InMemoryAssignments(),
        attendance_repo=attendance or InMemoryAttendance(),
        salaries_repo=salaries or InMemorySalaries(),
        job_locks=InMemoryJobLocks(),
        face_cache=InMemoryTTLCache(now=clock.now),
        face_matcher=face_matcher or FakeFaceMatcher(),
        geocoder=geocoder or FakeGeocoder(),
    )


GENERAL = ShiftDefinition(1, "General", time(9, 0), time(17, 0), "Day shift")
NIGHT = ShiftDefinition(2, "Night", time(22, 0), time(6, 0), "Crosses midnight")
EVENING = ShiftDefinition(3, "Evening", time(18, 0), time(21, 0))


def add_assignment(
    assignments: InMemoryAssignments,
    employee_id: str,
    shift: ShiftDefinition,
    from_date: date,
    to_date: date,
) -> ShiftAssignment:
    assignments.create_assignment(
        employee_id=employee_id,
        shift_id=shift.shift_id,
        shift_name=shift.shift_name,
        shift_start=shift.start_time,
        shift_end=shift.end_time,
        from_date=from_date,
        to_date=to_date,
        assigned_at=datetime(2024, 12, 1, 10, 0),
    )
    return assignments.items[-1]
