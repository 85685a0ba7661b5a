from __future__ import annotations

from datetime import date, datetime, timedelta
from typing import Any, Dict, Optional, Sequence

from ..core.enums import AttendanceStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, duration_to_seconds, fetchall, fetchone, seconds_to_duration
from .model import AttendanceRecord
from .repository import AttendanceRepository

_SELECT = """
    SELECT attendance_id, employee_id, employee_name, work_date, shift_id, shift_name,
           check_in_time, check_out_time, location, status,
           worked_seconds, overtime_seconds, undertime_seconds
    FROM attendance_records
"""


def _to_record(r: Dict[str, Any]) -> AttendanceRecord:
    return AttendanceRecord(
        attendance_id=int(r["attendance_id"]),
        employee_id=r["employee_id"],
        employee_name=r["employee_name"],
        work_date=r["work_date"],
        shift_id=int(r["shift_id"]),
        shift_name=r.get("shift_name"),
        status=AttendanceStatus(r["status"]),
        check_in_time=r.get("check_in_time"),
        check_out_time=r.get("check_out_time"),
        location=r.get("location"),
        hours_worked=seconds_to_duration(r.get("worked_seconds")),
        overtime_hours=seconds_to_duration(r.get("overtime_seconds")),
        undertime_hours=seconds_to_duration(r.get("undertime_seconds")),
    )


class MySQLAttendanceRepository(AttendanceRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get(self, employee_id: str, work_date: date, shift_id: int) -> Optional[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                _SELECT + " WHERE employee_id=%s AND work_date=%s AND shift_id=%s",
                (employee_id, work_date, int(shift_id)),
            )
            r = fetchone(cur)
            return _to_record(r) if r else None

    def list_for_employee(
        self,
        employee_id: str,
        *,
        start: Optional[date] = None,
        end: Optional[date] = None,
    ) -> Sequence[AttendanceRecord]:
        clauses = ["employee_id=%s"]
        params: list[object] = [employee_id]
        if start is not None:
            clauses.append("work_date >= %s")
            params.append(start)
        if end is not None:
            clauses.append("work_date <= %s")
            params.append(end)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                _SELECT + f" WHERE {' AND '.join(clauses)} ORDER BY work_date DESC, shift_id",
                tuple(params),
            )
            return [_to_record(r) for r in fetchall(cur)]

    def list_for_date(self, work_date: date) -> Sequence[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(_SELECT + " WHERE work_date=%s ORDER BY employee_id, shift_id", (work_date,))
            return [_to_record(r) for r in fetchall(cur)]

    def create_checkin(
        self,
        *,
        employee_id: str,
        employee_name: str,
        work_date: date,
        shift_id: int,
        shift_name: str,
        check_in_time: datetime,
        location: str,
    ) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO attendance_records (
                    employee_id, employee_name, work_date, shift_id, shift_name,
                    check_in_time, location, status
                )
                VALUES (%s,%s,%s,%s,%s,%s,%s,%s)
                """,
                (
                    employee_id,
                    employee_name,
                    work_date,
                    int(shift_id),
                    shift_name,
                    check_in_time,
                    location,
                    AttendanceStatus.CHECKED_IN.value,
                ),
            )
            return int(cur.lastrowid)

    def create_marker(
        self,
        *,
        employee_id: str,
        employee_name: str,
        work_date: date,
        shift_id: int,
        shift_name: Optional[str],
        status: AttendanceStatus,
        location: str,
    ) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO attendance_records (
                    employee_id, employee_name, work_date, shift_id, shift_name, location, status,
                    worked_seconds, overtime_seconds, undertime_seconds
                )
                VALUES (%s,%s,%s,%s,%s,%s,%s,0,0,0)
                """,
                (employee_id, employee_name, work_date, int(shift_id), shift_name, location, status.value),
            )
            return int(cur.lastrowid)

    def update_checkout(
        self,
        *,
        attendance_id: int,
        check_out_time: datetime,
        status: AttendanceStatus,
        hours_worked: timedelta,
        overtime_hours: timedelta,
        undertime_hours: timedelta,
    ) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE attendance_records
                SET check_out_time=%s, status=%s,
                    worked_seconds=%s, overtime_seconds=%s, undertime_seconds=%s
                WHERE attendance_id=%s AND check_in_time IS NOT NULL AND check_out_time IS NULL
                """,
                (
                    check_out_time,
                    status.value,
                    duration_to_seconds(hours_worked),
                    duration_to_seconds(overtime_hours),
                    duration_to_seconds(undertime_hours),
                    int(attendance_id),
                ),
            )
            return cur.rowcount > 0
