from __future__ import annotations

from flask import Flask, session

from ..common.auth import admin_required, login_required, require_self_or_admin
from ..common.datetime_utils import parse_iso_date
from ..common.http import ok, request_json
from ..container import Container


def register(app: Flask, container: Container) -> None:
    @app.route("/login", methods=["POST"], endpoint="login")
    def login():
        data = request_json()
        s_employee = container.auth_service.authenticate(
            str(data.get("employeeId") or data.get("email") or ""),
            str(data.get("password") or ""),
        )
        session.clear()
        session["employee_id"] = s_employee.employee_id
        session["name"] = s_employee.name
        session["role"] = s_employee.role.value
        return ok(
            {"employeeId": s_employee.employee_id, "name": s_employee.name, "role": s_employee.role.value},
            message="Login successful",
        )

    @app.route("/logout", methods=["POST"], endpoint="logout")
    def logout():
        session.clear()
        return ok(message="Logged out")

    @app.route("/register-employee", methods=["POST"], endpoint="register_employee")
    @admin_required
    def register_employee():
        data = request_json()
        joined_on = parse_iso_date(data["joinedOn"]) if data.get("joinedOn") else None
        employee_id = container.employee_service.register_employee(
            name=data.get("name"),
            email=data.get("email"),
            password=data.get("password"),
            mobile=data.get("mobile"),
            base_salary=data.get("salary"),
            total_working_days=data.get("totalWorkingDays"),
            staff_type=data.get("staffType") or "regular",
            role=data.get("role") or "employee",
            profile_pic=data.get("profilePic"),
            joined_on=joined_on,
        )
        return ok({"employeeId": employee_id}, message="Employee registered successfully", status=201)

    @app.route("/update-weekoff/<employee_id>", methods=["PUT"], endpoint="update_weekoff")
    @admin_required
    def update_weekoff(employee_id: str):
        days = container.employee_service.update_weekoff(employee_id, request_json().get("weekoffDays"))
        return ok(message="Weekoff schedule updated successfully", weekoffSchedule=list(days))

    @app.route("/weekoff-schedule/<employee_id>", methods=["GET"], endpoint="weekoff_schedule")
    @login_required
    def weekoff_schedule(employee_id: str):
        require_self_or_admin(employee_id)
        return ok(weekoffSchedule=list(container.employee_service.get_weekoff(employee_id)))
