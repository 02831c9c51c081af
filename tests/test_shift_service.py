from datetime import datetime, timedelta

import pytest

from app.services import shift_service
from app.services.shift_service import ShiftError, SHIFT_ACTIVE, SHIFT_COMPLETED

MONDAY_9AM = datetime(2026, 1, 5, 9, 0)


def test_clock_in_and_out_records_hours(db_session, employee):
    shift = shift_service.clock_in(db_session, employee, at=MONDAY_9AM)
    assert shift.status == SHIFT_ACTIVE
    assert shift.business_id == employee.business_id

    closed = shift_service.clock_out(db_session, employee, notes="closed register", at=MONDAY_9AM + timedelta(hours=8, minutes=30))
    assert closed.id == shift.id
    assert closed.status == SHIFT_COMPLETED
    assert closed.duration == 8.5
    assert closed.notes == "closed register"
    assert shift_service.get_active_shift(db_session, employee) is None


def test_cannot_clock_in_twice(db_session, employee):
    shift_service.clock_in(db_session, employee, at=MONDAY_9AM)
    with pytest.raises(ShiftError, match="already clocked in"):
        shift_service.clock_in(db_session, employee)


def test_cannot_clock_out_without_shift(db_session, employee):
    with pytest.raises(ShiftError, match="not clocked in"):
        shift_service.clock_out(db_session, employee)


def test_clock_out_before_clock_in_rejected(db_session, employee):
    shift_service.clock_in(db_session, employee, at=MONDAY_9AM)
    with pytest.raises(ShiftError):
        shift_service.clock_out(db_session, employee, at=MONDAY_9AM - timedelta(minutes=1))


def test_suspended_employee_cannot_clock_in(db_session, employee):
    employee.status = "SUSPENDED"
    db_session.commit()
    with pytest.raises(ShiftError, match="suspended"):
        shift_service.clock_in(db_session, employee)


def test_list_shifts_by_period(db_session, employee):
    for days_ago in (20, 3, 0):
        start = MONDAY_9AM - timedelta(days=days_ago)
        shift_service.clock_in(db_session, employee, at=start)
        shift_service.clock_out(db_session, employee, at=start + timedelta(hours=4))

    now = MONDAY_9AM + timedelta(hours=12)
    week = shift_service.list_shifts(db_session, employee, "week", now=now)
    month = shift_service.list_shifts(db_session, employee, "month", now=now)
    assert len(week) == 2
    assert len(month) == 3
    assert week[0].clock_in > week[1].clock_in

    with pytest.raises(ShiftError):
        shift_service.list_shifts(db_session, employee, "decade")


def test_performance_metrics(db_session, employee):
    shift_service.clock_in(db_session, employee, at=MONDAY_9AM)
    shift_service.clock_out(db_session, employee, at=MONDAY_9AM + timedelta(hours=6))
    shift_service.clock_in(db_session, employee, at=MONDAY_9AM + timedelta(days=1))
    shift_service.clock_out(db_session, employee, at=MONDAY_9AM + timedelta(days=1, hours=3))

    shifts = shift_service.list_shifts(db_session, employee, "week", now=MONDAY_9AM + timedelta(days=2))
    assert shift_service.performance_metrics(shifts) == {
        "totalHours": 9.0,
        "averageHoursPerShift": 4.5,
        "totalShifts": 2,
        "completedShifts": 2,
    }
    assert shift_service.performance_metrics([])["averageHoursPerShift"] == 0


def test_role_templates():
    assert all(shift_service.default_permissions("ADMIN").values())
    manager = shift_service.default_permissions("MANAGER")
    assert manager["viewReports"] and not manager["manageEmployees"]

    staff = shift_service.resolve_permissions("STAFF", {"viewReports": True, "bogus": True})
    assert staff["viewReports"] is True
    assert staff["manageSettings"] is False
    assert "bogus" not in staff
