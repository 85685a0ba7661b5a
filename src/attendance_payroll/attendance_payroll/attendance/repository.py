from __future__ import annotations

from datetime import date, datetime, timedelta
from typing import Optional, Protocol, Sequence

from ..core.enums import AttendanceStatus
from .model import AttendanceRecord


class AttendanceRepository(Protocol):
    """Attendance ledger.

    Implementations must reject a second row for the same
    (employee_id, work_date, shift_id) at the storage level by raising
    ``ConflictError``.
    """

    def get(self, employee_id: str, work_date: date, shift_id: int) -> Optional[AttendanceRecord]:
        raise NotImplementedError

    def list_for_employee(
        self,
        employee_id: str,
        *,
        start: Optional[date] = None,
        end: Optional[date] = None,
    ) -> Sequence[AttendanceRecord]:
        raise NotImplementedError

    def list_for_date(self, work_date: date) -> Sequence[AttendanceRecord]:
        raise NotImplementedError

    def create_checkin(
        self,
        *,
        employee_id: str,
        employee_name: str,
        work_date: date,
        shift_id: int,
        shift_name: str,
        check_in_time: datetime,
        location: str,
    ) -> int:
        raise NotImplementedError

    def create_marker(
        self,
        *,
        employee_id: str,
        employee_name: str,
        work_date: date,
        shift_id: int,
        shift_name: Optional[str],
        status: AttendanceStatus,
        location: str,
    ) -> int:
        """Insert a record without punches (Absent / Weekoff)."""

        raise NotImplementedError

    def update_checkout(
        self,
        *,
        attendance_id: int,
        check_out_time: datetime,
        status: AttendanceStatus,
        hours_worked: timedelta,
        overtime_hours: timedelta,
        undertime_hours: timedelta,
    ) -> bool:
        """Close an open record. Returns False when it was already checked out."""

        raise NotImplementedError
