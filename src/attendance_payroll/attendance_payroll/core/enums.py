from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    """Caller role used for authorization."""

    ADMIN = "admin"
    EMPLOYEE = "employee"


class StaffType(str, Enum):
    REGULAR = "regular"
    FIELD = "field"


class AttendanceStatus(str, Enum):
    """Attendance status values as stored in the database."""

    CHECKED_IN = "Checked-In"
    PRESENT = "P"
    ABSENT = "A"
    WEEKOFF = "Weekoff"
    UNDERTIME = "U"


class PunchType(str, Enum):
    CHECK_IN = "Check-In"
    CHECK_OUT = "Check-Out"


# Statuses that count as a worked (payable) day.
PAYABLE_STATUSES = (AttendanceStatus.PRESENT, AttendanceStatus.UNDERTIME, AttendanceStatus.WEEKOFF)
