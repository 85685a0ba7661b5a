from __future__ import annotations

from decimal import Decimal
from typing import Any, Dict, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall
from .model import SalaryRecord
from .repository import SalaryRepository

_COLUMNS = (
    "employee_id",
    "month",
    "year",
    "day",
    "gross_salary",
    "net_salary",
    "base_salary",
    "overtime_pay",
    "undertime_deduction",
    "total_hours_worked",
    "total_overtime_hours",
    "total_undertime_hours",
    "total_pf",
    "total_esic",
    "created_at",
)


def _to_record(r: Dict[str, Any]) -> SalaryRecord:
    return SalaryRecord(
        salary_id=int(r["salary_id"]),
        employee_id=r["employee_id"],
        month=int(r["month"]),
        year=int(r["year"]),
        day=int(r["day"]),
        gross_salary=Decimal(r["gross_salary"]),
        net_salary=Decimal(r["net_salary"]),
        base_salary=Decimal(r["base_salary"]),
        overtime_pay=Decimal(r["overtime_pay"]),
        undertime_deduction=Decimal(r["undertime_deduction"]),
        total_hours_worked=Decimal(r["total_hours_worked"]),
        total_overtime_hours=Decimal(r["total_overtime_hours"]),
        total_undertime_hours=Decimal(r["total_undertime_hours"]),
        total_pf=Decimal(r["total_pf"]),
        total_esic=Decimal(r["total_esic"]),
        created_at=r["created_at"],
    )


class MySQLSalaryRepository(SalaryRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def add(self, record: SalaryRecord) -> int:
        placeholders = ",".join(["%s"] * len(_COLUMNS))
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"INSERT INTO salary_records ({', '.join(_COLUMNS)}) VALUES ({placeholders})",
                tuple(getattr(record, c) for c in _COLUMNS),
            )
            return int(cur.lastrowid)

    def list_for_month(self, employee_id: str, month: int, year: int) -> Sequence[SalaryRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT salary_id, {', '.join(_COLUMNS)}
                FROM salary_records
                WHERE employee_id=%s AND month=%s AND year=%s
                ORDER BY day, salary_id
                """,
                (employee_id, int(month), int(year)),
            )
            return [_to_record(r) for r in fetchall(cur)]
