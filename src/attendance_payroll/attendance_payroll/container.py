from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping, Optional

from .attendance.face import DeepFaceMatcher, FaceMatcher, FaceVerificationService
from .attendance.factory import CheckoutStrategyFactory
from .attendance.geocoding import Geocoder, NominatimGeocoder
from .attendance.mysql_attendance_repository import MySQLAttendanceRepository
from .attendance.repository import AttendanceRepository
from .attendance.service import AttendanceReconciler
from .common.cache import KeyedCache
from .common.clock import Clock, SystemClock
from .core.constants import DEFAULT_FACE_CACHE_TTL_SECONDS
from .database.connection import DBConfig, DatabaseConnection
from .database.mysql_cache import MySQLKeyValueCache
from .employees.mysql_employee_repository import MySQLEmployeeRepository
from .employees.repository import EmployeeRepository
from .employees.service import AuthService, EmployeeService
from .payroll.mysql_salary_repository import MySQLSalaryRepository
from .payroll.repository import SalaryRepository
from .payroll.service import PayrollEngine
from .scheduling.jobs import SweepScheduler
from .scheduling.lock import JobLockRepository, MySQLJobLockRepository
from .shifts.mysql_assignment_repository import MySQLAssignmentRepository
from .shifts.mysql_shift_repository import MySQLShiftRepository
from .shifts.repository import AssignmentRepository, ShiftRepository
from .shifts.service import ShiftAssignmentValidator, ShiftCatalog


@dataclass(frozen=True)
class Container:
    clock: Clock
    timezone: Optional[str]

    employees_repo: EmployeeRepository
    shifts_repo: ShiftRepository
    assignments_repo: AssignmentRepository
    attendance_repo: AttendanceRepository
    salaries_repo: SalaryRepository

    auth_service: AuthService
    employee_service: EmployeeService
    shift_catalog: ShiftCatalog
    assignment_validator: ShiftAssignmentValidator
    attendance_service: AttendanceReconciler
    face_service: FaceVerificationService
    payroll_engine: PayrollEngine
    scheduler: SweepScheduler


def assemble(
    *,
    settings: Mapping[str, Any],
    clock: Clock,
    employees_repo: EmployeeRepository,
    shifts_repo: ShiftRepository,
    assignments_repo: AssignmentRepository,
    attendance_repo: AttendanceRepository,
    salaries_repo: SalaryRepository,
    job_locks: JobLockRepository,
    face_cache: KeyedCache,
    face_matcher: FaceMatcher,
    geocoder: Optional[Geocoder],
) -> Container:
    """Wire services on top of the given repositories and collaborators."""
    shift_catalog = ShiftCatalog(shifts_repo, assignments_repo)
    attendance_service = AttendanceReconciler(
        attendance_repo,
        employees_repo,
        shift_catalog,
        geocoder=geocoder,
        clock=clock,
        strategy_factory=CheckoutStrategyFactory(),
    )
    payroll_engine = PayrollEngine(employees_repo, attendance_repo, salaries_repo, clock=clock)

    return Container(
        clock=clock,
        timezone=settings.get("TIMEZONE"),
        employees_repo=employees_repo,
        shifts_repo=shifts_repo,
        assignments_repo=assignments_repo,
        attendance_repo=attendance_repo,
        salaries_repo=salaries_repo,
        auth_service=AuthService(employees_repo),
        employee_service=EmployeeService(employees_repo),
        shift_catalog=shift_catalog,
        assignment_validator=ShiftAssignmentValidator(shifts_repo, assignments_repo, employees_repo, clock=clock),
        attendance_service=attendance_service,
        face_service=FaceVerificationService(
            employees_repo,
            face_matcher,
            face_cache,
            ttl_seconds=int(settings.get("FACE_CACHE_TTL_SECONDS", DEFAULT_FACE_CACHE_TTL_SECONDS)),
        ),
        payroll_engine=payroll_engine,
        scheduler=SweepScheduler(
            attendance=attendance_service,
            payroll=payroll_engine,
            catalog=shift_catalog,
            locks=job_locks,
            clock=clock,
            settings=settings,
        ),
    )


def build_container(*, db_config: dict, settings: Mapping[str, Any]) -> Container:
    conn = DatabaseConnection.get_instance(DBConfig.from_dict(db_config))
    geocoder_kwargs = {
        k: v
        for k, v in (
            ("url", settings.get("GEOCODER_URL")),
            ("timeout_seconds", settings.get("GEOCODER_TIMEOUT_SECONDS")),
            ("user_agent", settings.get("GEOCODER_USER_AGENT")),
        )
        if v
    }
    matcher_kwargs = {}
    if settings.get("FACE_MATCH_THRESHOLD"):
        matcher_kwargs["threshold"] = float(settings["FACE_MATCH_THRESHOLD"])

    return assemble(
        settings=settings,
        clock=SystemClock(settings.get("TIMEZONE")),
        employees_repo=MySQLEmployeeRepository(conn),
        shifts_repo=MySQLShiftRepository(conn),
        assignments_repo=MySQLAssignmentRepository(conn),
        attendance_repo=MySQLAttendanceRepository(conn),
        salaries_repo=MySQLSalaryRepository(conn),
        job_locks=MySQLJobLockRepository(conn),
        face_cache=MySQLKeyValueCache(conn, namespace="face"),
        face_matcher=DeepFaceMatcher(**matcher_kwargs),
        geocoder=NominatimGeocoder(**geocoder_kwargs),
    )
