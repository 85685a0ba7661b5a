from __future__ import annotations

import logging
from datetime import date, datetime, timedelta
from typing import Optional, Sequence

from ..common.clock import Clock, SystemClock
from ..common.datetime_utils import parse_time_of_day
from ..common.validators import require_non_empty
from ..core.exceptions import ConflictError, NotFoundError, ValidationError
from ..employees.repository import EmployeeRepository
from .model import ShiftAssignment, ShiftDefinition
from .repository import AssignmentRepository, ShiftRepository

logger = logging.getLogger(__name__)


class ShiftCatalog:
    """Shift definitions and the dated assignments that bind employees to them."""

    def __init__(self, shifts: ShiftRepository, assignments: AssignmentRepository):
        self._shifts = shifts
        self._assignments = assignments

    def register_shift(self, *, shift_name: str, shift_start, shift_end, description: Optional[str] = None) -> ShiftDefinition:
        shift_name = require_non_empty(shift_name, "Shift name")
        start = parse_time_of_day(require_non_empty(shift_start, "Shift start"))
        end = parse_time_of_day(require_non_empty(shift_end, "Shift end"))
        if start == end:
            raise ValidationError("Shift start and end must differ")

        description = description.strip() if description else None
        shift_id = self._shifts.create_shift(shift_name=shift_name, start_time=start, end_time=end, description=description)
        return ShiftDefinition(shift_id=shift_id, shift_name=shift_name, start_time=start, end_time=end, description=description)

    def list_shifts(self) -> Sequence[ShiftDefinition]:
        return self._shifts.list_all()

    def get_shift(self, shift_id: int) -> Optional[ShiftDefinition]:
        return self._shifts.get_by_id(shift_id)

    def list_assignments(self) -> Sequence[ShiftAssignment]:
        return self._assignments.list_all()

    def assignments_for_employee(self, employee_id: str) -> Sequence[ShiftAssignment]:
        return self._assignments.list_for_employee(employee_id)

    def active_assignments(self, employee_id: str, on_date: date) -> list[ShiftAssignment]:
        return [a for a in self._assignments.list_for_employee(employee_id) if a.is_active_on(on_date)]

    def all_active_assignments(self, on_date: date) -> Sequence[ShiftAssignment]:
        return self._assignments.list_active_on(on_date)

    def purge_expired(self, today: date) -> int:
        """Delete assignments whose last window has ended.

        An assignment that ended yesterday is kept: a night shift started on
        its last day still runs into today and has to be checked out or
        marked absent.
        """
        cutoff = today - timedelta(days=1)
        removed = self._assignments.delete_expired(before=cutoff)
        if removed:
            logger.info("Removed %d expired shift assignments (before %s)", removed, cutoff)
        return removed


class ShiftAssignmentValidator:
    """Use case: assign a shift to an employee for a date range.

    Two windows of the same employee overlap when ``a.from <= b.to`` and
    ``b.from <= a.to``; the check covers assignments with the same shift id
    or the same shift name. Different shifts may run concurrently.
    """

    def __init__(
        self,
        shifts: ShiftRepository,
        assignments: AssignmentRepository,
        employees: EmployeeRepository,
        *,
        clock: Optional[Clock] = None,
    ):
        self._shifts = shifts
        self._assignments = assignments
        self._employees = employees
        self._clock = clock or SystemClock()

    def validate_and_assign(
        self,
        *,
        employee_id: str,
        shift_id: int,
        shift_name: str,
        from_date: date,
        to_date: date,
        description: Optional[str] = None,
    ) -> ShiftAssignment:
        if not employee_id or not shift_id or not shift_name or not from_date or not to_date:
            raise ValidationError("Employee ID, Shift ID, shiftName, fromDate, and toDate are required")

        employee = self._employees.get_by_id(employee_id)
        if not employee:
            raise NotFoundError("Employee not found")
        shift = self._shifts.get_by_id(int(shift_id))
        if not shift:
            raise NotFoundError("Shift not found")

        if to_date < from_date:
            raise ValidationError('"toDate" must be greater than or equal to "fromDate"')

        clash = self._assignments.find_overlapping(
            employee_id=employee_id,
            shift_id=shift.shift_id,
            shift_name=shift_name,
            from_date=from_date,
            to_date=to_date,
        )
        if clash:
            raise ConflictError("Shift assignment overlaps with an existing shift for this employee")

        self._employees.update_shift_snapshot(
            employee_id,
            shift_name=shift_name,
            shift_start=shift.start_time,
            shift_end=shift.end_time,
        )

        assigned_at: datetime = self._clock.now()
        assignment_id = self._assignments.create_assignment(
            employee_id=employee_id,
            shift_id=shift.shift_id,
            shift_name=shift_name,
            shift_start=shift.start_time,
            shift_end=shift.end_time,
            from_date=from_date,
            to_date=to_date,
            assigned_at=assigned_at,
            description=description,
        )
        logger.info(
            "Assigned shift %s (%s) to %s for %s..%s",
            shift.shift_id,
            shift_name,
            employee_id,
            from_date,
            to_date,
        )
        return ShiftAssignment(
            assignment_id=assignment_id,
            employee_id=employee_id,
            shift_id=shift.shift_id,
            shift_name=shift_name,
            shift_start=shift.start_time,
            shift_end=shift.end_time,
            from_date=from_date,
            to_date=to_date,
            assigned_at=assigned_at,
            description=description,
        )
