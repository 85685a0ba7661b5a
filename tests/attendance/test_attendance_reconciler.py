from __future__ import annotations

from datetime import date, datetime, timedelta

import pytest
import requests

from src.attendance_payroll.attendance_payroll.common.datetime_utils import format_duration
from src.attendance_payroll.attendance_payroll.core.enums import AttendanceStatus
from src.attendance_payroll.attendance_payroll.core.exceptions import ConflictError, NotFoundError, ValidationError
from tests.fakes import GENERAL, NIGHT, add_assignment

LOCATION = {"latitude": 12.9716, "longitude": 77.5946}
MONDAY = date(2025, 1, 6)


@pytest.fixture
def general(assignments):
    return add_assignment(assignments, "Ats00001", GENERAL, date(2025, 1, 1), date(2025, 1, 31))


def _punch(reconciler, kind, at, *, shift=GENERAL, employee_id="Ats00001", location=LOCATION):
    return reconciler.mark_attendance(
        employee_id,
        punch_type=kind,
        location=location,
        timestamp=at,
        shift_name=shift.shift_name,
        shift_id=shift.shift_id,
    )


def test_overtime_day_is_present(reconciler, general, attendance):
    _punch(reconciler, "Check-In", datetime(2025, 1, 6, 9, 5))
    record = _punch(reconciler, "Check-Out", datetime(2025, 1, 6, 19, 30))

    assert record.status == AttendanceStatus.PRESENT
    assert format_duration(record.hours_worked) == "10:25:00"
    assert format_duration(record.overtime_hours) == "02:25:00"
    assert format_duration(record.undertime_hours) == "00:00:00"
    assert attendance.get("Ats00001", MONDAY, GENERAL.shift_id) == record


def test_short_day_is_undertime(reconciler, general):
    _punch(reconciler, "Check-In", datetime(2025, 1, 6, 9, 30))
    record = _punch(reconciler, "Check-Out", datetime(2025, 1, 6, 16, 0))

    assert record.status == AttendanceStatus.UNDERTIME
    assert format_duration(record.hours_worked) == "06:30:00"
    assert format_duration(record.undertime_hours) == "01:30:00"
    assert format_duration(record.overtime_hours) == "00:00:00"


def test_exactly_full_shift_is_present(reconciler, general):
    _punch(reconciler, "Check-In", datetime(2025, 1, 6, 9, 0))
    record = _punch(reconciler, "Check-Out", datetime(2025, 1, 6, 17, 0))

    assert record.status == AttendanceStatus.PRESENT
    assert record.hours_worked == timedelta(hours=8)
    assert record.overtime_hours == timedelta(0)


def test_hours_worked_is_checkout_minus_checkin(reconciler, general):
    check_in = datetime(2025, 1, 6, 9, 1, 17)
    check_out = datetime(2025, 1, 6, 17, 44, 3)
    _punch(reconciler, "Check-In", check_in)
    record = _punch(reconciler, "Check-Out", check_out)

    assert record.hours_worked == check_out - check_in


def test_check_in_records_geocoded_location(reconciler, general, geocoder):
    record = _punch(reconciler, "Check-In", datetime(2025, 1, 6, 9, 2))

    assert record.status == AttendanceStatus.CHECKED_IN
    assert record.location == "MG Road, Bengaluru"
    assert record.work_date == MONDAY
    assert geocoder.calls == 1


def test_geocoder_failure_falls_back_to_unknown_location(reconciler, general, geocoder):
    geocoder.error = requests.Timeout("slow")

    record = _punch(reconciler, "Check-In", datetime(2025, 1, 6, 9, 2))

    assert record.location == "Unknown Location"


def test_duplicate_check_in_is_a_conflict(reconciler, general, attendance):
    _punch(reconciler, "Check-In", datetime(2025, 1, 6, 9, 2))

    with pytest.raises(ConflictError) as exc:
        _punch(reconciler, "Check-In", datetime(2025, 1, 6, 9, 10))
    assert exc.value.status_code == 400
    assert len(attendance.all()) == 1


@pytest.mark.parametrize(
    "location",
    [None, {}, {"latitude": "12.9", "longitude": 77.5}, {"latitude": True, "longitude": 77.5}, {"latitude": 12.9}],
)
def test_malformed_location_is_rejected_before_any_write(reconciler, general, attendance, geocoder, location):
    with pytest.raises(ValidationError):
        _punch(reconciler, "Check-In", datetime(2025, 1, 6, 9, 2), location=location)

    assert attendance.all() == []
    assert geocoder.calls == 0


def test_check_in_outside_any_shift_window_is_not_found(reconciler, general):
    with pytest.raises(NotFoundError):
        _punch(reconciler, "Check-In", datetime(2025, 1, 6, 8, 30))


def test_check_in_for_unassigned_shift_is_not_found(reconciler, general):
    with pytest.raises(NotFoundError):
        _punch(reconciler, "Check-In", datetime(2025, 1, 6, 23, 0), shift=NIGHT)


def test_check_in_for_unknown_employee_is_not_found(reconciler, general):
    with pytest.raises(NotFoundError):
        _punch(reconciler, "Check-In", datetime(2025, 1, 6, 9, 5), employee_id="Ats09999")


def test_check_out_without_check_in_is_rejected(reconciler, general):
    with pytest.raises(ValidationError):
        _punch(reconciler, "Check-Out", datetime(2025, 1, 6, 17, 0))


def test_second_check_out_is_a_conflict(reconciler, general):
    _punch(reconciler, "Check-In", datetime(2025, 1, 6, 9, 0))
    _punch(reconciler, "Check-Out", datetime(2025, 1, 6, 17, 0))

    with pytest.raises(ConflictError):
        _punch(reconciler, "Check-Out", datetime(2025, 1, 6, 17, 5))


def test_unknown_punch_type_is_rejected(reconciler, general):
    with pytest.raises(ValidationError):
        _punch(reconciler, "Break", datetime(2025, 1, 6, 12, 0))


def test_night_shift_check_out_lands_on_the_start_date(reconciler, assignments):
    add_assignment(assignments, "Ats00001", NIGHT, date(2025, 1, 1), date(2025, 1, 31))

    checked_in = _punch(reconciler, "Check-In", datetime(2025, 1, 6, 22, 0), shift=NIGHT)
    record = _punch(reconciler, "Check-Out", datetime(2025, 1, 7, 6, 30), shift=NIGHT)

    assert checked_in.work_date == MONDAY
    assert record.work_date == MONDAY
    assert record.status == AttendanceStatus.PRESENT
    assert record.overtime_hours == timedelta(minutes=30)


def test_check_in_after_midnight_belongs_to_previous_days_night_shift(reconciler, assignments):
    add_assignment(assignments, "Ats00001", NIGHT, date(2025, 1, 1), date(2025, 1, 31))

    record = _punch(reconciler, "Check-In", datetime(2025, 1, 7, 0, 15), shift=NIGHT)

    assert record.work_date == MONDAY


def test_absent_record_blocks_later_check_in(reconciler, general, attendance, clock):
    reconciler.absent_sweep(datetime(2025, 1, 6, 17, 0))

    with pytest.raises(ConflictError):
        _punch(reconciler, "Check-In", datetime(2025, 1, 6, 17, 0))
    assert attendance.get("Ats00001", MONDAY, GENERAL.shift_id).status == AttendanceStatus.ABSENT


def test_current_shift_status_reports_ongoing_shift(reconciler, general):
    before = reconciler.current_shift_status("Ats00001", datetime(2025, 1, 6, 10, 0))
    _punch(reconciler, "Check-In", datetime(2025, 1, 6, 10, 0))
    after = reconciler.current_shift_status("Ats00001", datetime(2025, 1, 6, 10, 5))

    assert before.is_current and not before.checked_in
    assert after.is_current and after.checked_in
    assert after.assignment.shift_id == GENERAL.shift_id


def test_current_shift_status_reports_next_shift_later_today(reconciler, general):
    status = reconciler.current_shift_status("Ats00001", datetime(2025, 1, 6, 7, 0))

    assert not status.is_current
    assert status.assignment.shift_name == "General"


def test_current_shift_status_without_assignments_is_not_found(reconciler):
    with pytest.raises(NotFoundError):
        reconciler.current_shift_status("Ats00002", datetime(2025, 1, 6, 10, 0))


def test_current_shift_status_after_last_shift_is_not_found(reconciler, general):
    with pytest.raises(NotFoundError):
        reconciler.current_shift_status("Ats00001", datetime(2025, 1, 6, 20, 0))


def test_active_today_lists_only_open_records_of_running_shifts(reconciler, general):
    _punch(reconciler, "Check-In", datetime(2025, 1, 6, 9, 0))

    assert len(reconciler.active_today("Ats00001", datetime(2025, 1, 6, 12, 0))) == 1
    assert reconciler.active_today("Ats00001", datetime(2025, 1, 6, 17, 30)) == []


def test_monthly_projection(reconciler, general):
    _punch(reconciler, "Check-In", datetime(2025, 1, 6, 9, 0))

    assert len(reconciler.monthly("Ats00001", "2025-01")) == 1
    with pytest.raises(NotFoundError):
        reconciler.monthly("Ats00001", "2025-02")
    with pytest.raises(ValidationError):
        reconciler.monthly("Ats00001", "January")


def test_history_covers_the_last_seven_days(reconciler, general):
    _punch(reconciler, "Check-In", datetime(2025, 1, 6, 9, 0))

    assert len(reconciler.history("Ats00001", datetime(2025, 1, 12, 9, 0))) == 1
    assert reconciler.history("Ats00001", datetime(2025, 1, 13, 9, 0)) == []


def test_report_for_date(reconciler, general):
    _punch(reconciler, "Check-In", datetime(2025, 1, 6, 9, 0))

    assert [r.employee_id for r in reconciler.report_for_date("2025-01-06")] == ["Ats00001"]
    with pytest.raises(ValidationError):
        reconciler.report_for_date("")
    with pytest.raises(NotFoundError):
        reconciler.report_for_date("2025-01-07")
