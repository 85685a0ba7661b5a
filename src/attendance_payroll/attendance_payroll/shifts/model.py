from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, time, timedelta
from typing import Optional, Tuple

from ..common.datetime_utils import shift_duration, shift_window


@dataclass(frozen=True)
class ShiftDefinition:
    """Domain entity: a named working window (time of day)."""

    shift_id: int
    shift_name: str
    start_time: time
    end_time: time
    description: Optional[str] = None


@dataclass(frozen=True)
class ShiftAssignment:
    """Dated binding of an employee to a shift.

    ``shift_name``/``shift_start``/``shift_end`` are copied from the shift at
    assignment time; ``from_date``/``to_date`` are both inclusive.
    """

    assignment_id: int
    employee_id: str
    shift_id: int
    shift_name: str
    shift_start: time
    shift_end: time
    from_date: date
    to_date: date
    assigned_at: datetime
    description: Optional[str] = None

    def overlaps(self, from_date: date, to_date: date) -> bool:
        # Closed intervals: touching boundaries count as overlap.
        return self.from_date <= to_date and from_date <= self.to_date

    def is_active_on(self, day: date) -> bool:
        return self.from_date <= day <= self.to_date

    def window(self, work_date: date) -> Tuple[datetime, datetime]:
        return shift_window(work_date, self.shift_start, self.shift_end)

    @property
    def duration(self) -> timedelta:
        return shift_duration(self.shift_start, self.shift_end)
