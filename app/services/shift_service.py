"""
Employee shifts and role permissions.

An employee has at most one ACTIVE shift. Clocking out closes it and stores
the worked hours in `duration`, rounded to two decimals.
"""
import logging
from datetime import datetime, timedelta
from typing import Dict, List, Optional

from sqlalchemy.orm import Session

from app.models.employee_shifts import EmployeeShift
from app.models.employees import Employee

logger = logging.getLogger(__name__)

SHIFT_ACTIVE = "ACTIVE"
SHIFT_COMPLETED = "COMPLETED"

PERMISSION_FLAGS = (
    "manageEmployees",
    "manageCustomers",
    "manageProducts",
    "manageOrders",
    "viewReports",
    "processTransactions",
    "manageSettings",
)

ROLE_PERMISSION_TEMPLATES: Dict[str, Dict[str, bool]] = {
    "ADMIN": {flag: True for flag in PERMISSION_FLAGS},
    "MANAGER": {
        "manageEmployees": False,
        "manageCustomers": True,
        "manageProducts": True,
        "manageOrders": True,
        "viewReports": True,
        "processTransactions": True,
        "manageSettings": False,
    },
    "STAFF": {
        "manageEmployees": False,
        "manageCustomers": False,
        "manageProducts": False,
        "manageOrders": True,
        "viewReports": False,
        "processTransactions": True,
        "manageSettings": False,
    },
}

PERIODS = {
    "day": timedelta(days=1),
    "week": timedelta(weeks=1),
    "month": timedelta(days=30),
    "year": timedelta(days=365),
}


class ShiftError(Exception):
    pass


def default_permissions(role: str) -> Dict[str, bool]:
    return dict(ROLE_PERMISSION_TEMPLATES.get(role, ROLE_PERMISSION_TEMPLATES["STAFF"]))


def resolve_permissions(role: str, permissions: Optional[dict]) -> Dict[str, bool]:
    """Role template overlaid with any explicit flags; unknown keys are dropped"""
    resolved = default_permissions(role)
    for flag, value in (permissions or {}).items():
        if flag in resolved:
            resolved[flag] = bool(value)
    return resolved


def get_active_shift(db: Session, employee: Employee) -> Optional[EmployeeShift]:
    return db.query(EmployeeShift).filter(
        EmployeeShift.employee_id == employee.id,
        EmployeeShift.status == SHIFT_ACTIVE
    ).first()


def clock_in(db: Session, employee: Employee, notes: Optional[str] = None, at: Optional[datetime] = None) -> EmployeeShift:
    if employee.status != "ACTIVE":
        raise ShiftError(f"{employee.full_name} is {employee.status.lower()} and cannot clock in")
    if get_active_shift(db, employee):
        raise ShiftError(f"{employee.full_name} is already clocked in")

    shift = EmployeeShift(
        employee_id=employee.id,
        business_id=employee.business_id,
        clock_in=at or datetime.now(),
        status=SHIFT_ACTIVE,
        notes=notes,
    )
    db.add(shift)
    db.commit()
    db.refresh(shift)
    logger.info(f"{employee.full_name} clocked in (shift {shift.id})")
    return shift


def shift_hours(clock_in_at: datetime, clock_out_at: datetime) -> float:
    return round((clock_out_at - clock_in_at).total_seconds() / 3600, 2)


def clock_out(db: Session, employee: Employee, notes: Optional[str] = None, at: Optional[datetime] = None) -> EmployeeShift:
    shift = get_active_shift(db, employee)
    if not shift:
        raise ShiftError(f"{employee.full_name} is not clocked in")

    clock_out_at = at or datetime.now()
    if clock_out_at < shift.clock_in:
        raise ShiftError("Clock-out time cannot be before clock-in time")

    shift.clock_out = clock_out_at
    shift.duration = shift_hours(shift.clock_in, clock_out_at)
    shift.status = SHIFT_COMPLETED
    if notes:
        shift.notes = notes
    db.commit()
    db.refresh(shift)
    logger.info(f"{employee.full_name} clocked out after {shift.duration} hours")
    return shift


def list_shifts(db: Session, employee: Employee, period: str = "week", now: Optional[datetime] = None) -> List[EmployeeShift]:
    """Shifts that started within the period, newest first"""
    if period not in PERIODS:
        raise ShiftError(f"Unknown period '{period}'. Use one of: {', '.join(PERIODS)}")
    start = (now or datetime.now()) - PERIODS[period]
    return db.query(EmployeeShift).filter(
        EmployeeShift.employee_id == employee.id,
        EmployeeShift.business_id == employee.business_id,
        EmployeeShift.clock_in >= start
    ).order_by(EmployeeShift.clock_in.desc()).all()


def performance_metrics(shifts: List[EmployeeShift]) -> dict:
    total_hours = 0.0
    completed = 0
    for shift in shifts:
        if shift.duration:
            total_hours += shift.duration
        elif shift.clock_in and shift.clock_out:
            total_hours += (shift.clock_out - shift.clock_in).total_seconds() / 3600
        if shift.status == SHIFT_COMPLETED:
            completed += 1

    return {
        "totalHours": round(total_hours, 2),
        "averageHoursPerShift": round(total_hours / len(shifts), 2) if shifts else 0,
        "totalShifts": len(shifts),
        "completedShifts": completed,
    }
