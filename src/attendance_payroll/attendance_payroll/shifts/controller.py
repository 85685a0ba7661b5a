from __future__ import annotations

from flask import Flask

from ..common.auth import admin_required, login_required, require_self_or_admin
from ..common.datetime_utils import format_time_of_day, parse_iso_date
from ..common.http import ok, request_json
from ..common.validators import require_positive_int
from ..container import Container
from ..core.exceptions import NotFoundError, ValidationError
from .model import ShiftAssignment, ShiftDefinition


def shift_to_dict(s: ShiftDefinition) -> dict:
    return {
        "shiftId": s.shift_id,
        "shiftName": s.shift_name,
        "shiftStart": format_time_of_day(s.start_time),
        "shiftEnd": format_time_of_day(s.end_time),
        "description": s.description,
    }


def assignment_to_dict(a: ShiftAssignment) -> dict:
    return {
        "assignmentId": a.assignment_id,
        "employeeId": a.employee_id,
        "shiftId": a.shift_id,
        "shiftName": a.shift_name,
        "shiftStart": format_time_of_day(a.shift_start),
        "shiftEnd": format_time_of_day(a.shift_end),
        "fromDate": a.from_date.isoformat(),
        "toDate": a.to_date.isoformat(),
        "assignedDate": a.assigned_at.isoformat(),
        "description": a.description,
    }


def register(app: Flask, container: Container) -> None:
    @app.route("/register-shift", methods=["POST"], endpoint="register_shift")
    @admin_required
    def register_shift():
        data = request_json()
        shift = container.shift_catalog.register_shift(
            shift_name=data.get("shiftName"),
            shift_start=data.get("shiftStart"),
            shift_end=data.get("shiftEnd"),
            description=data.get("description"),
        )
        return ok(message="Shift created successfully", status=201, shift=shift_to_dict(shift))

    @app.route("/all-shifts", methods=["GET"], endpoint="all_shifts")
    @login_required
    def all_shifts():
        return ok([shift_to_dict(s) for s in container.shift_catalog.list_shifts()])

    @app.route("/assign-shift", methods=["POST"], endpoint="assign_shift")
    @admin_required
    def assign_shift():
        data = request_json()
        if not data.get("fromDate") or not data.get("toDate"):
            raise ValidationError("Employee ID, Shift ID, shiftName, fromDate, and toDate are required")

        assignment = container.assignment_validator.validate_and_assign(
            employee_id=str(data.get("employeeId") or ""),
            shift_id=require_positive_int(data.get("shiftId"), "Shift ID"),
            shift_name=str(data.get("shiftName") or "").strip(),
            from_date=parse_iso_date(data["fromDate"]),
            to_date=parse_iso_date(data["toDate"]),
            description=data.get("description"),
        )
        return ok(message="Shift assigned successfully", status=201, assignment=assignment_to_dict(assignment))

    @app.route("/shift-assignments", methods=["GET"], endpoint="shift_assignments")
    @admin_required
    def shift_assignments():
        return ok([assignment_to_dict(a) for a in container.shift_catalog.list_assignments()])

    @app.route("/employee-shift/<employee_id>", methods=["GET"], endpoint="employee_shift")
    @login_required
    def employee_shift(employee_id: str):
        require_self_or_admin(employee_id)
        assignments = container.shift_catalog.assignments_for_employee(employee_id)
        if not assignments:
            raise NotFoundError("No shifts found for this employee")
        return ok([assignment_to_dict(a) for a in assignments])
