from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from datetime import date, datetime, timedelta
from typing import Any, Dict, Optional, Sequence, Tuple

from ..common.clock import Clock, SystemClock
from ..common.datetime_utils import parse_iso_date, shift_duration
from ..common.validators import require_coordinates, require_non_empty, require_positive_int
from ..core.constants import ABSENT_LOCATION, NO_SHIFT_ID
from ..core.enums import AttendanceStatus, PunchType
from ..core.exceptions import ConflictError, NotFoundError, ValidationError
from ..employees.model import Employee
from ..employees.repository import EmployeeRepository
from ..shifts.model import ShiftAssignment
from ..shifts.service import ShiftCatalog
from .factory import CheckoutStrategyFactory
from .geocoding import Geocoder, resolve_location_label
from .model import AttendanceRecord
from .repository import AttendanceRepository

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ShiftStatus:
    """Answer of ``current_shift_status``: the ongoing shift or the next one today."""

    is_current: bool
    assignment: ShiftAssignment
    work_date: date
    checked_in: bool


@dataclass(frozen=True)
class SweepCounts:
    absent: int = 0
    weekoff: int = 0


class AttendanceReconciler:
    """Check-in / check-out reconciliation against assigned shifts.

    Per (employee, date, shift) a record moves ``Checked-In -> P | U``; the
    absent sweep creates ``A`` for shifts that ended without a check-in and a
    single day-level ``Weekoff`` record on the employee's weekly off days.
    """

    def __init__(
        self,
        attendance: AttendanceRepository,
        employees: EmployeeRepository,
        catalog: ShiftCatalog,
        *,
        geocoder: Optional[Geocoder] = None,
        clock: Optional[Clock] = None,
        strategy_factory: Optional[CheckoutStrategyFactory] = None,
    ):
        self._attendance = attendance
        self._employees = employees
        self._catalog = catalog
        self._geocoder = geocoder
        self._clock = clock or SystemClock()
        self._factory = strategy_factory or CheckoutStrategyFactory()

    # ---- lookups

    def _require_employee(self, employee_id: str) -> Employee:
        employee = self._employees.get_by_id(employee_id)
        if not employee:
            raise NotFoundError("Employee not found")
        return employee

    def _candidate_dates(self, ts: datetime) -> Tuple[date, date]:
        # A shift that started yesterday may still be running today.
        return ts.date(), ts.date() - timedelta(days=1)

    def _find_checkin_shift(self, employee_id: str, shift_name: str, shift_id: Optional[int], ts: datetime) -> Tuple[ShiftAssignment, date]:
        for work_date in self._candidate_dates(ts):
            for a in self._catalog.active_assignments(employee_id, work_date):
                if a.shift_name != shift_name:
                    continue
                if shift_id is not None and a.shift_id != shift_id:
                    continue
                start, end = a.window(work_date)
                if start <= ts <= end:
                    return a, work_date
        raise NotFoundError("No valid shift found for the provided shift name and current time.")

    def _shift_length(self, employee_id: str, shift_id: int, work_date: date) -> timedelta:
        for a in self._catalog.active_assignments(employee_id, work_date):
            if a.shift_id == shift_id:
                return a.duration
        shift = self._catalog.get_shift(shift_id)
        if shift:
            return shift_duration(shift.start_time, shift.end_time)
        raise NotFoundError("Shift not found")

    # ---- commands

    def check_in(
        self,
        employee_id: str,
        *,
        shift_name: str,
        location: Any,
        timestamp: Optional[datetime] = None,
        shift_id: Optional[int] = None,
    ) -> AttendanceRecord:
        latitude, longitude = require_coordinates(location)
        shift_name = require_non_empty(shift_name, "Shift name")
        ts = timestamp or self._clock.now()

        employee = self._require_employee(employee_id)
        assignment, work_date = self._find_checkin_shift(employee_id, shift_name, shift_id, ts)

        existing = self._attendance.get(employee_id, work_date, assignment.shift_id)
        if existing:
            if existing.check_in_time:
                raise ConflictError("Check-In already marked for this shift.")
            raise ConflictError(f"Attendance already marked as {existing.status.value} for this shift.")

        label = resolve_location_label(self._geocoder, latitude, longitude)
        attendance_id = self._attendance.create_checkin(
            employee_id=employee_id,
            employee_name=employee.name,
            work_date=work_date,
            shift_id=assignment.shift_id,
            shift_name=assignment.shift_name,
            check_in_time=ts,
            location=label,
        )
        logger.info("Check-in %s shift %s on %s at %s", employee_id, assignment.shift_id, work_date, ts)
        return AttendanceRecord(
            attendance_id=attendance_id,
            employee_id=employee_id,
            employee_name=employee.name,
            work_date=work_date,
            shift_id=assignment.shift_id,
            shift_name=assignment.shift_name,
            status=AttendanceStatus.CHECKED_IN,
            check_in_time=ts,
            location=label,
        )

    def check_out(
        self,
        employee_id: str,
        *,
        shift_id: int,
        work_date: date,
        timestamp: Optional[datetime] = None,
    ) -> AttendanceRecord:
        ts = timestamp or self._clock.now()
        record = self._attendance.get(employee_id, work_date, shift_id)
        if not record or not record.check_in_time:
            raise ValidationError("Check-In not found for this shift.")
        if record.check_out_time:
            raise ConflictError("Check-Out already marked for this shift.")
        if ts < record.check_in_time:
            raise ValidationError("Check-Out time cannot be before Check-In time.")

        shift_length = self._shift_length(employee_id, shift_id, work_date)
        return self._close(record, ts, shift_length)

    def _close(self, record: AttendanceRecord, check_out_time: datetime, shift_length: timedelta) -> AttendanceRecord:
        decision = self._factory.decide(worked=check_out_time - record.check_in_time, shift_length=shift_length)
        updated = self._attendance.update_checkout(
            attendance_id=record.attendance_id,
            check_out_time=check_out_time,
            status=decision.status,
            hours_worked=decision.hours_worked,
            overtime_hours=decision.overtime,
            undertime_hours=decision.undertime,
        )
        if not updated:
            raise ConflictError("Check-Out already marked for this shift.")

        logger.info(
            "Check-out %s shift %s on %s: %s worked=%s",
            record.employee_id,
            record.shift_id,
            record.work_date,
            decision.status.value,
            decision.hours_worked,
        )
        return replace(
            record,
            check_out_time=check_out_time,
            status=decision.status,
            hours_worked=decision.hours_worked,
            overtime_hours=decision.overtime,
            undertime_hours=decision.undertime,
        )

    def mark_attendance(
        self,
        employee_id: str,
        *,
        punch_type: str,
        location: Any,
        timestamp: Optional[datetime] = None,
        shift_name: Optional[str] = None,
        shift_id: Any = None,
    ) -> AttendanceRecord:
        """Dispatch a punch from the client to check-in or check-out."""
        require_coordinates(location)
        try:
            punch = PunchType(punch_type)
        except ValueError:
            raise ValidationError("Invalid attendance type.")

        ts = timestamp or self._clock.now()
        if punch is PunchType.CHECK_IN:
            return self.check_in(
                employee_id,
                shift_name=shift_name,
                location=location,
                timestamp=ts,
                shift_id=require_positive_int(shift_id, "Shift ID") if shift_id not in (None, "") else None,
            )

        sid = require_positive_int(shift_id, "Shift ID")
        for work_date in self._candidate_dates(ts):
            record = self._attendance.get(employee_id, work_date, sid)
            if record and record.is_open:
                return self.check_out(employee_id, shift_id=sid, work_date=work_date, timestamp=ts)
        return self.check_out(employee_id, shift_id=sid, work_date=ts.date(), timestamp=ts)

    # ---- sweeps

    def auto_checkout_sweep(self, now: Optional[datetime] = None) -> int:
        """Close open records whose shift window has ended, at the window end."""
        now = now or self._clock.now()
        closed = 0
        for work_date in (now.date() - timedelta(days=1), now.date()):
            for a in self._catalog.all_active_assignments(work_date):
                _, end = a.window(work_date)
                if end > now:
                    continue
                try:
                    record = self._attendance.get(a.employee_id, work_date, a.shift_id)
                    if not record or not record.is_open:
                        continue
                    self._close(record, max(end, record.check_in_time), a.duration)
                    closed += 1
                except ConflictError:
                    logger.debug("Record %s/%s/%s already closed", a.employee_id, work_date, a.shift_id)
                except Exception:
                    logger.exception("Auto check-out failed for %s shift %s on %s", a.employee_id, a.shift_id, work_date)

        logger.info("Auto check-out sweep at %s closed %d record(s)", now, closed)
        return closed

    def _insert_marker(
        self,
        employee: Employee,
        *,
        work_date: date,
        shift_id: int,
        shift_name: Optional[str],
        status: AttendanceStatus,
    ) -> bool:
        try:
            self._attendance.create_marker(
                employee_id=employee.employee_id,
                employee_name=employee.name,
                work_date=work_date,
                shift_id=shift_id,
                shift_name=shift_name,
                status=status,
                location=ABSENT_LOCATION,
            )
        except ConflictError:
            # another worker got there first
            return False
        return True

    def absent_sweep(self, now: Optional[datetime] = None, *, work_date: Optional[date] = None) -> SweepCounts:
        """Mark ended shifts without a check-in as absent, and weekly off days as Weekoff.

        Existing records are never overwritten.
        """
        now = now or self._clock.now()
        day = work_date or now.date()
        absent = 0
        weekoff = 0

        for employee in self._employees.list_active():
            try:
                if employee.is_weekoff(day):
                    if self._attendance.get(employee.employee_id, day, NO_SHIFT_ID) is None:
                        if self._insert_marker(
                            employee,
                            work_date=day,
                            shift_id=NO_SHIFT_ID,
                            shift_name=None,
                            status=AttendanceStatus.WEEKOFF,
                        ):
                            weekoff += 1
                    continue

                for a in self._catalog.active_assignments(employee.employee_id, day):
                    _, end = a.window(day)
                    if end > now:
                        continue
                    if self._attendance.get(employee.employee_id, day, a.shift_id) is not None:
                        continue
                    if self._insert_marker(
                        employee,
                        work_date=day,
                        shift_id=a.shift_id,
                        shift_name=a.shift_name,
                        status=AttendanceStatus.ABSENT,
                    ):
                        absent += 1
            except Exception:
                logger.exception("Absent sweep failed for %s on %s", employee.employee_id, day)

        logger.info("Absent sweep for %s: %d absent, %d weekoff", day, absent, weekoff)
        return SweepCounts(absent=absent, weekoff=weekoff)

    # ---- queries

    def current_shift_status(self, employee_id: str, timestamp: Optional[datetime] = None) -> ShiftStatus:
        ts = timestamp or self._clock.now()
        self._require_employee(employee_id)

        windows = []
        for work_date in self._candidate_dates(ts):
            for a in self._catalog.active_assignments(employee_id, work_date):
                start, end = a.window(work_date)
                windows.append((start, end, a, work_date))
        if not windows:
            raise NotFoundError("No shifts assigned to this employee.")

        for start, end, a, work_date in windows:
            if start <= ts <= end:
                record = self._attendance.get(employee_id, work_date, a.shift_id)
                return ShiftStatus(
                    is_current=True,
                    assignment=a,
                    work_date=work_date,
                    checked_in=bool(record and record.is_open),
                )

        upcoming = sorted((w for w in windows if w[0] > ts and w[3] == ts.date()), key=lambda w: w[0])
        if upcoming:
            _, _, a, work_date = upcoming[0]
            return ShiftStatus(is_current=False, assignment=a, work_date=work_date, checked_in=False)
        raise NotFoundError("No ongoing or upcoming shifts found.")

    def active_today(self, employee_id: str, now: Optional[datetime] = None) -> list[AttendanceRecord]:
        """Open records of today whose shift has not ended yet."""
        now = now or self._clock.now()
        ends: Dict[int, datetime] = {
            a.shift_id: a.window(now.date())[1] for a in self._catalog.active_assignments(employee_id, now.date())
        }
        out = []
        for r in self._attendance.list_for_employee(employee_id, start=now.date(), end=now.date()):
            if not r.is_open:
                continue
            end = ends.get(r.shift_id)
            if end is None or end > now:
                out.append(r)
        return out

    def history(self, employee_id: str, now: Optional[datetime] = None, *, days: int = 7) -> Sequence[AttendanceRecord]:
        now = now or self._clock.now()
        start = now.date() - timedelta(days=days - 1)
        return self._attendance.list_for_employee(employee_id, start=start, end=now.date())

    def monthly(self, employee_id: str, month: str) -> Sequence[AttendanceRecord]:
        """Records for ``month`` given as ``YYYY-MM``."""
        try:
            first = datetime.strptime(str(month or "").strip(), "%Y-%m").date()
        except ValueError:
            raise ValidationError("Invalid month format. Use YYYY-MM")
        next_month = (first.replace(day=28) + timedelta(days=4)).replace(day=1)

        records = self._attendance.list_for_employee(employee_id, start=first, end=next_month - timedelta(days=1))
        if not records:
            raise NotFoundError("No attendance records found for the specified month")
        return records

    def report_for_date(self, day: Any) -> Sequence[AttendanceRecord]:
        if not day:
            raise ValidationError("Date is required")
        work_date = day if isinstance(day, date) else parse_iso_date(day)
        records = self._attendance.list_for_date(work_date)
        if not records:
            raise NotFoundError("No attendance records found for the given date")
        return records

    def records_for_employee(self, employee_id: str) -> Sequence[AttendanceRecord]:
        if not employee_id:
            raise ValidationError("Employee ID is required")
        records = self._attendance.list_for_employee(employee_id)
        if not records:
            raise NotFoundError("No attendance records found")
        return records
