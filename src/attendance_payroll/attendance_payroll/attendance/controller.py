from __future__ import annotations

from typing import Optional

from flask import Flask, request

from ..common.auth import admin_required, current_employee_id, is_admin, login_required
from ..common.datetime_utils import format_duration, format_time_of_day, parse_timestamp
from ..common.http import ok, request_json
from ..container import Container
from .model import AttendanceRecord
from .service import ShiftStatus


def record_to_dict(r: AttendanceRecord) -> dict:
    return {
        "attendanceId": r.attendance_id,
        "employeeId": r.employee_id,
        "employeeName": r.employee_name,
        "date": r.work_date.isoformat(),
        "shiftId": r.shift_id,
        "shiftName": r.shift_name,
        "checkInTime": r.check_in_time.isoformat() if r.check_in_time else None,
        "checkOutTime": r.check_out_time.isoformat() if r.check_out_time else None,
        "location": r.location,
        "status": r.status.value,
        "hoursWorked": format_duration(r.hours_worked),
        "overtimeHours": format_duration(r.overtime_hours),
        "undertimeHours": format_duration(r.undertime_hours),
    }


def shift_status_to_dict(s: ShiftStatus) -> dict:
    a = s.assignment
    return {
        "shiftId": a.shift_id,
        "shiftName": a.shift_name,
        "shiftStart": format_time_of_day(a.shift_start),
        "shiftEnd": format_time_of_day(a.shift_end),
        "date": s.work_date.isoformat(),
        "status": "Checked-In" if s.checked_in else "Not Checked-In",
    }


def _target_employee_id(requested: Optional[str]) -> str:
    # admins may look at anyone; everybody else only at themselves
    if requested and is_admin():
        return str(requested)
    return current_employee_id()


def register(app: Flask, container: Container) -> None:
    def _timestamp(data: dict):
        raw = data.get("timestamp")
        if not raw:
            return container.clock.now()
        return parse_timestamp(raw, tz=container.timezone)

    @app.route("/markAttendance", methods=["POST"], endpoint="mark_attendance")
    @login_required
    def mark_attendance():
        data = request_json()
        record = container.attendance_service.mark_attendance(
            current_employee_id(),
            punch_type=data.get("type"),
            location=data.get("location"),
            timestamp=_timestamp(data),
            shift_name=data.get("shiftName"),
            shift_id=data.get("shiftId"),
        )
        return ok(record_to_dict(record), message=f"{data.get('type')} marked successfully")

    @app.route("/getCurrentShiftStatus", methods=["POST"], endpoint="current_shift_status")
    @login_required
    def current_shift_status():
        data = request_json()
        status = container.attendance_service.current_shift_status(current_employee_id(), _timestamp(data))
        if status.is_current:
            return ok(message="Current shift found.", currentShift=shift_status_to_dict(status))
        return ok(message="Next shift found.", nextShift=shift_status_to_dict(status))

    @app.route("/verifyFace", methods=["POST"], endpoint="verify_face")
    @login_required
    def verify_face():
        data = request_json()
        employee_id = _target_employee_id(data.get("employeeId"))
        container.face_service.verify(employee_id, data.get("capturedImage"))
        return ok(message="Face verified successfully")

    @app.route("/attendance", methods=["GET"], endpoint="active_attendance")
    @login_required
    def active_attendance():
        records = container.attendance_service.active_today(current_employee_id())
        return ok([record_to_dict(r) for r in records])

    @app.route("/weekly-attendance", methods=["GET"], endpoint="weekly_attendance")
    @login_required
    def weekly_attendance():
        employee_id = _target_employee_id(request.args.get("employeeId"))
        records = container.attendance_service.history(employee_id)
        return ok([record_to_dict(r) for r in records])

    @app.route("/monthly-attendance", methods=["GET"], endpoint="monthly_attendance")
    @login_required
    def monthly_attendance():
        employee_id = _target_employee_id(request.args.get("employeeId"))
        records = container.attendance_service.monthly(employee_id, request.args.get("month", ""))
        return ok([record_to_dict(r) for r in records])

    @app.route("/attendance/report", methods=["GET"], endpoint="attendance_report")
    @admin_required
    def attendance_report():
        records = container.attendance_service.report_for_date(request.args.get("date"))
        return ok([record_to_dict(r) for r in records])

    @app.route("/salary/attendance", methods=["GET"], endpoint="salary_attendance")
    @admin_required
    def salary_attendance():
        records = container.attendance_service.records_for_employee(request.args.get("employeeId", ""))
        return ok([record_to_dict(r) for r in records])
