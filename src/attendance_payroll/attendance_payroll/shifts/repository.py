from __future__ import annotations

from datetime import date, datetime, time
from typing import Optional, Protocol, Sequence

from .model import ShiftAssignment, ShiftDefinition


class ShiftRepository(Protocol):
    def list_all(self) -> Sequence[ShiftDefinition]:
        raise NotImplementedError

    def get_by_id(self, shift_id: int) -> Optional[ShiftDefinition]:
        raise NotImplementedError

    def create_shift(self, *, shift_name: str, start_time: time, end_time: time, description: Optional[str] = None) -> int:
        raise NotImplementedError


class AssignmentRepository(Protocol):
    def list_all(self) -> Sequence[ShiftAssignment]:
        raise NotImplementedError

    def list_for_employee(self, employee_id: str) -> Sequence[ShiftAssignment]:
        raise NotImplementedError

    def list_active_on(self, day: date) -> Sequence[ShiftAssignment]:
        raise NotImplementedError

    def find_overlapping(
        self,
        *,
        employee_id: str,
        shift_id: int,
        shift_name: str,
        from_date: date,
        to_date: date,
    ) -> Optional[ShiftAssignment]:
        """First assignment of the same employee and same shift id or name whose window intersects."""

        raise NotImplementedError

    def create_assignment(
        self,
        *,
        employee_id: str,
        shift_id: int,
        shift_name: str,
        shift_start: time,
        shift_end: time,
        from_date: date,
        to_date: date,
        assigned_at: datetime,
        description: Optional[str] = None,
    ) -> int:
        raise NotImplementedError

    def delete_expired(self, *, before: date) -> int:
        """Delete assignments whose ``to_date`` is before ``before``; returns the count."""

        raise NotImplementedError
