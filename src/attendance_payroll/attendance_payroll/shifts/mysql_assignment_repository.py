from __future__ import annotations

from datetime import date, datetime, time
from typing import Any, Dict, Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, normalize_mysql_time
from .model import ShiftAssignment
from .repository import AssignmentRepository

_SELECT = """
    SELECT assignment_id, employee_id, shift_id, shift_name, shift_start, shift_end,
           from_date, to_date, assigned_at, description
    FROM shift_assignments
"""


def _to_assignment(r: Dict[str, Any]) -> ShiftAssignment:
    return ShiftAssignment(
        assignment_id=int(r["assignment_id"]),
        employee_id=r["employee_id"],
        shift_id=int(r["shift_id"]),
        shift_name=r["shift_name"],
        shift_start=normalize_mysql_time(r["shift_start"]),
        shift_end=normalize_mysql_time(r["shift_end"]),
        from_date=r["from_date"],
        to_date=r["to_date"],
        assigned_at=r["assigned_at"],
        description=r.get("description"),
    )


class MySQLAssignmentRepository(AssignmentRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_all(self) -> Sequence[ShiftAssignment]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(_SELECT + " ORDER BY employee_id, from_date")
            return [_to_assignment(r) for r in fetchall(cur)]

    def list_for_employee(self, employee_id: str) -> Sequence[ShiftAssignment]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(_SELECT + " WHERE employee_id=%s ORDER BY from_date", (employee_id,))
            return [_to_assignment(r) for r in fetchall(cur)]

    def list_active_on(self, day: date) -> Sequence[ShiftAssignment]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                _SELECT + " WHERE from_date <= %s AND to_date >= %s ORDER BY employee_id, shift_start",
                (day, day),
            )
            return [_to_assignment(r) for r in fetchall(cur)]

    def find_overlapping(
        self,
        *,
        employee_id: str,
        shift_id: int,
        shift_name: str,
        from_date: date,
        to_date: date,
    ) -> Optional[ShiftAssignment]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                _SELECT
                + """
                WHERE employee_id=%s
                  AND (shift_id=%s OR shift_name=%s)
                  AND from_date <= %s AND to_date >= %s
                LIMIT 1
                """,
                (employee_id, shift_id, shift_name, to_date, from_date),
            )
            r = fetchone(cur)
            return _to_assignment(r) if r else None

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
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO shift_assignments (
                    employee_id, shift_id, shift_name, shift_start, shift_end,
                    from_date, to_date, assigned_at, description
                )
                VALUES (%s,%s,%s,%s,%s,%s,%s,%s,%s)
                """,
                (employee_id, shift_id, shift_name, shift_start, shift_end, from_date, to_date, assigned_at, description),
            )
            return int(cur.lastrowid)

    def delete_expired(self, *, before: date) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM shift_assignments WHERE to_date < %s", (before,))
            return int(cur.rowcount)
