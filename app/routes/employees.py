import logging
from typing import List, Optional
from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from app.database import get_db
from app.models.employees import Employee
from app.models.user import User
from app.schemas.employees import (
    EmployeeCreate,
    EmployeeUpdate,
    EmployeeResponse,
    PinVerifyRequest,
    PinAvailabilityResponse,
    ShiftAction,
    ShiftResponse,
    EmployeePerformanceResponse,
)
from app.core.dependencies import get_current_user, get_owned_business
from app.core.errors import database_error, not_found, conflict
from app.services import shift_service
from app.services.shift_service import ShiftError, resolve_permissions
from app.utils.validators import validate_pin

router = APIRouter(tags=["employees"])
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


def find_employee_by_pin(db: Session, business_id: str, pin_code: str, exclude_id: Optional[str] = None) -> Optional[Employee]:
    query = db.query(Employee).filter(
        Employee.business_id == business_id,
        Employee.pin_code == pin_code
    )
    if exclude_id:
        query = query.filter(Employee.id != exclude_id)
    return query.first()


def get_owned_employee(db: Session, employee_id: str, current_user: User) -> Employee:
    employee = db.query(Employee).filter(Employee.id == employee_id).first()
    if not employee:
        raise not_found("Employee", employee_id)
    get_owned_business(db, employee.business_id, current_user)
    return employee


def _pin_taken():
    return conflict(
        "This PIN is already used by another employee",
        field="pin_code",
        suggestion="Choose a different 4-digit PIN"
    )


@router.get("", response_model=List[EmployeeResponse])
async def list_employees(
    business_id: str,
    status_filter: Optional[str] = Query(None, alias="status"),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    get_owned_business(db, business_id, current_user)
    try:
        query = db.query(Employee).filter(Employee.business_id == business_id)
        if status_filter:
            query = query.filter(Employee.status == status_filter.upper())
        employees = query.order_by(Employee.last_name, Employee.first_name).all()
        logger.info(f"Retrieved {len(employees)} employees for business {business_id}")
        return employees
    except Exception as e:
        raise database_error(e, "listing employees", "employee")


@router.get("/pin-availability", response_model=PinAvailabilityResponse)
async def check_pin_availability(
    business_id: str,
    pin_code: str,
    exclude_id: Optional[str] = None,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    get_owned_business(db, business_id, current_user)
    try:
        validate_pin(pin_code)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    return {
        "pin_code": pin_code,
        "available": find_employee_by_pin(db, business_id, pin_code, exclude_id) is None,
    }


@router.post("/verify-pin", response_model=EmployeeResponse)
async def verify_pin(
    request: PinVerifyRequest,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """Identify the employee at the counter by PIN"""
    get_owned_business(db, request.business_id, current_user)
    employee = find_employee_by_pin(db, request.business_id, request.pin_code)
    if not employee:
        logger.warning(f"Invalid PIN attempt for business {request.business_id}")
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid PIN")
    if employee.status != "ACTIVE":
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail=f"Employee account is {employee.status.lower()}"
        )
    logger.info(f"PIN verified for employee {employee.full_name}")
    return employee


@router.get("/{employee_id}", response_model=EmployeeResponse)
async def get_employee(
    employee_id: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    return get_owned_employee(db, employee_id, current_user)


@router.post("", response_model=EmployeeResponse, status_code=status.HTTP_201_CREATED)
async def create_employee(
    employee_data: EmployeeCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    get_owned_business(db, employee_data.business_id, current_user)

    if find_employee_by_pin(db, employee_data.business_id, employee_data.pin_code):
        raise _pin_taken()

    try:
        data = employee_data.model_dump(exclude={"permissions"})
        explicit = employee_data.permissions.model_dump(exclude_unset=True) if employee_data.permissions else None
        employee = Employee(**data, permissions=resolve_permissions(employee_data.role, explicit))
        db.add(employee)
        db.commit()
        db.refresh(employee)

        logger.info(f"Employee created: {employee.full_name} (ID: {employee.id}, role: {employee.role})")
        return employee
    except Exception as e:
        db.rollback()
        raise database_error(e, "creating employee", "employee")


@router.put("/{employee_id}", response_model=EmployeeResponse)
async def update_employee(
    employee_id: str,
    employee_data: EmployeeUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    employee = get_owned_employee(db, employee_id, current_user)
    update_data = employee_data.model_dump(exclude_unset=True, exclude={"permissions"})

    new_pin = update_data.get("pin_code")
    if new_pin and new_pin != employee.pin_code:
        if find_employee_by_pin(db, employee.business_id, new_pin, exclude_id=employee.id):
            raise _pin_taken()

    try:
        role_changed = "role" in update_data and update_data["role"] != employee.role
        for field, value in update_data.items():
            setattr(employee, field, value)

        # A role change resets permissions to the role template; sent flags apply on top
        if employee_data.permissions is not None:
            current = {} if role_changed else (employee.permissions or {})
            employee.permissions = resolve_permissions(
                employee.role,
                {**current, **employee_data.permissions.model_dump(exclude_unset=True)}
            )
        elif role_changed:
            employee.permissions = resolve_permissions(employee.role, None)

        db.commit()
        db.refresh(employee)

        logger.info(f"Employee updated: {employee.full_name} (ID: {employee.id})")
        return employee
    except Exception as e:
        db.rollback()
        raise database_error(e, "updating employee", "employee")


@router.delete("/{employee_id}", status_code=status.HTTP_200_OK)
async def delete_employee(
    employee_id: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    employee = get_owned_employee(db, employee_id, current_user)
    try:
        db.delete(employee)
        db.commit()
        logger.info(f"Employee deleted: {employee_id}")
        return {"message": f"Employee '{employee.full_name}' deleted successfully", "id": employee_id}
    except Exception as e:
        db.rollback()
        raise database_error(e, "deleting employee", "employee")


@router.post("/{employee_id}/clock-in", response_model=ShiftResponse, status_code=status.HTTP_201_CREATED)
async def clock_in(
    employee_id: str,
    action: Optional[ShiftAction] = None,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    employee = get_owned_employee(db, employee_id, current_user)
    try:
        return shift_service.clock_in(db, employee, notes=action.notes if action else None)
    except ShiftError as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e))
    except Exception as e:
        db.rollback()
        raise database_error(e, "clocking in", "shift")


@router.post("/{employee_id}/clock-out", response_model=ShiftResponse)
async def clock_out(
    employee_id: str,
    action: Optional[ShiftAction] = None,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    employee = get_owned_employee(db, employee_id, current_user)
    try:
        return shift_service.clock_out(db, employee, notes=action.notes if action else None)
    except ShiftError as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e))
    except Exception as e:
        db.rollback()
        raise database_error(e, "clocking out", "shift")


@router.get("/{employee_id}/shifts", response_model=List[ShiftResponse])
async def list_shifts(
    employee_id: str,
    period: str = Query("week", pattern="^(day|week|month|year)$"),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    employee = get_owned_employee(db, employee_id, current_user)
    return shift_service.list_shifts(db, employee, period)


@router.get("/{employee_id}/performance", response_model=EmployeePerformanceResponse)
async def get_performance(
    employee_id: str,
    period: str = Query("week", pattern="^(day|week|month|year)$"),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    employee = get_owned_employee(db, employee_id, current_user)
    shifts = shift_service.list_shifts(db, employee, period)
    return {
        "employee_id": employee.id,
        "period": period,
        "metrics": shift_service.performance_metrics(shifts),
        "active_shift": shift_service.get_active_shift(db, employee),
        "shifts": shifts,
    }
