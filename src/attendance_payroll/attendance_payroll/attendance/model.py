from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, timedelta
from typing import Optional

from ..core.enums import AttendanceStatus


@dataclass(frozen=True)
class AttendanceRecord:
    """Domain entity: one attendance entry, unique per (employee, date, shift)."""

    attendance_id: int
    employee_id: str
    employee_name: str
    work_date: date
    shift_id: int
    shift_name: Optional[str]
    status: AttendanceStatus
    check_in_time: Optional[datetime] = None
    check_out_time: Optional[datetime] = None
    location: Optional[str] = None
    hours_worked: Optional[timedelta] = None
    overtime_hours: Optional[timedelta] = None
    undertime_hours: Optional[timedelta] = None

    @property
    def is_open(self) -> bool:
        return self.check_in_time is not None and self.check_out_time is None
