from __future__ import annotations

from flask import Flask, request

from ..common.auth import admin_required, login_required, require_self_or_admin
from ..common.datetime_utils import parse_iso_date
from ..common.http import ok
from ..container import Container
from ..core.exceptions import ValidationError
from .model import MonthlySalary
from .service import CycleEnd


def monthly_salary_to_dict(s: MonthlySalary) -> dict:
    return {
        "employeeId": s.employee_id,
        "month": s.month,
        "year": s.year,
        "days": s.days,
        "grossSalary": str(s.gross_salary),
        "netSalary": str(s.net_salary),
        "overtimePay": str(s.overtime_pay),
        "undertimeDeduction": str(s.undertime_deduction),
        "totalPF": str(s.total_pf),
        "totalESIC": str(s.total_esic),
    }


def cycle_end_to_dict(c: CycleEnd) -> dict:
    e = c.employee
    return {
        "employeeId": e.employee_id,
        "name": e.name,
        "profilePic": e.profile_pic or "",
        "endDate": c.end_date.isoformat(),
        "joinedOn": e.joined_on.isoformat(),
        "salary": str(e.base_salary),
        "shiftName": e.shift_name,
    }


def register(app: Flask, container: Container) -> None:
    @app.route("/salary/<employee_id>/<month>/<year>", methods=["GET"], endpoint="salary_for_month")
    @login_required
    def salary_for_month(employee_id: str, month: str, year: str):
        require_self_or_admin(employee_id)
        summary = container.payroll_engine.salary_for_month(employee_id, month, year)
        return ok(monthly_salary_to_dict(summary))

    @app.route("/salary/employees", methods=["GET"], endpoint="salary_cycle_employees")
    @admin_required
    def salary_cycle_employees():
        raw = request.args.get("endDate")
        if not raw:
            raise ValidationError("End date is required")
        matches = container.payroll_engine.employees_with_cycle_end(parse_iso_date(raw))
        return ok([cycle_end_to_dict(c) for c in matches])
