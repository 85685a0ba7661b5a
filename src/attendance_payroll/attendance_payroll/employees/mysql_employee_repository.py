from __future__ import annotations

from datetime import date, time
from decimal import Decimal
from typing import Any, Dict, Optional, Sequence

from ..core.enums import Role, StaffType
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, normalize_mysql_time
from .model import Employee
from .repository import EmployeeRepository

_COLUMNS = """
    employee_id, name, email, mobile, password_hash, role, staff_type, base_salary,
    total_working_days, weekoff_days, profile_pic, joined_on,
    shift_name, shift_start, shift_end, is_active
"""


def _to_employee(r: Dict[str, Any]) -> Employee:
    weekoff = r.get("weekoff_days") or ""
    return Employee(
        employee_id=r["employee_id"],
        name=r["name"],
        email=r["email"],
        mobile=r.get("mobile"),
        password_hash=r["password_hash"],
        role=Role(r["role"]),
        staff_type=StaffType(r.get("staff_type") or StaffType.REGULAR.value),
        base_salary=Decimal(str(r.get("base_salary") or 0)),
        total_working_days=r.get("total_working_days"),
        weekoff_days=tuple(d for d in weekoff.split(",") if d),
        profile_pic=r.get("profile_pic"),
        joined_on=r["joined_on"],
        shift_name=r.get("shift_name"),
        shift_start=normalize_mysql_time(r.get("shift_start")),
        shift_end=normalize_mysql_time(r.get("shift_end")),
        is_active=bool(r.get("is_active", True)),
    )


class MySQLEmployeeRepository(EmployeeRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, employee_id: str) -> Optional[Employee]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM employees WHERE employee_id=%s", (employee_id,))
            row = fetchone(cur)
            return _to_employee(row) if row else None

    def get_by_email(self, email: str) -> Optional[Employee]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM employees WHERE email=%s", (email,))
            row = fetchone(cur)
            return _to_employee(row) if row else None

    def exists_with_contact(self, *, email: str, mobile: Optional[str]) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "SELECT 1 AS found FROM employees WHERE email=%s OR (mobile IS NOT NULL AND mobile=%s) LIMIT 1",
                (email, mobile),
            )
            return fetchone(cur) is not None

    def list_active(self) -> Sequence[Employee]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM employees WHERE is_active=1 ORDER BY employee_id")
            return [_to_employee(r) for r in fetchall(cur)]

    def next_sequence(self, counter_name: str) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO counters (counter_name, counter_value) VALUES (%s, LAST_INSERT_ID(1))
                ON DUPLICATE KEY UPDATE counter_value = LAST_INSERT_ID(counter_value + 1)
                """,
                (counter_name,),
            )
            cur.execute("SELECT LAST_INSERT_ID() AS value")
            return int(fetchone(cur)["value"])

    def create_employee(
        self,
        *,
        employee_id: str,
        name: str,
        email: str,
        mobile: Optional[str],
        password_hash: str,
        role: Role,
        staff_type: StaffType,
        base_salary: Decimal,
        total_working_days: Optional[int],
        profile_pic: Optional[str],
        joined_on: date,
    ) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO employees (
                    employee_id, name, email, mobile, password_hash, role, staff_type,
                    base_salary, total_working_days, profile_pic, joined_on
                )
                VALUES (%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s)
                """,
                (
                    employee_id,
                    name,
                    email,
                    mobile,
                    password_hash,
                    role.value,
                    staff_type.value,
                    base_salary,
                    total_working_days,
                    profile_pic,
                    joined_on,
                ),
            )

    def update_shift_snapshot(self, employee_id: str, *, shift_name: str, shift_start: time, shift_end: time) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE employees SET shift_name=%s, shift_start=%s, shift_end=%s WHERE employee_id=%s",
                (shift_name, shift_start, shift_end, employee_id),
            )
            return cur.rowcount > 0

    def update_weekoff(self, employee_id: str, *, weekoff_days: Sequence[str]) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE employees SET weekoff_days=%s WHERE employee_id=%s",
                (",".join(weekoff_days), employee_id),
            )
            return cur.rowcount > 0
