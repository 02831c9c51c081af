import logging
from datetime import date
from typing import List, Optional
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy import or_
from sqlalchemy.orm import Session

from app.database import get_db
from app.models.customers import Customer
from app.models.user import User
from app.schemas.customers import (
    CustomerCreate,
    CustomerUpdate,
    CustomerResponse,
    CustomerPaginatedResponse,
    PhoneAvailabilityResponse,
)
from app.core.dependencies import get_current_user, get_owned_business
from app.core.errors import database_error, not_found, conflict
from app.utils.validators import normalize_phone_number

router = APIRouter(tags=["customers"])
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


def find_customer_by_phone(db: Session, business_id: str, phone_number: str, exclude_id: Optional[str] = None) -> Optional[Customer]:
    query = db.query(Customer).filter(
        Customer.business_id == business_id,
        Customer.phone_number == normalize_phone_number(phone_number)
    )
    if exclude_id:
        query = query.filter(Customer.id != exclude_id)
    return query.first()


def get_owned_customer(db: Session, customer_id: str, current_user: User) -> Customer:
    customer = db.query(Customer).filter(Customer.id == customer_id).first()
    if not customer:
        raise not_found("Customer", customer_id)
    get_owned_business(db, customer.business_id, current_user)
    return customer


def _duplicate_phone(phone_number: str):
    return conflict(
        f"A customer with phone number {phone_number} already exists",
        field="phone_number",
        suggestion="Search for the existing customer instead of creating a new one"
    )


@router.get("", response_model=CustomerPaginatedResponse)
async def list_customers(
    business_id: str,
    page: int = Query(1, ge=1),
    page_size: int = Query(50, ge=1, le=200),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    get_owned_business(db, business_id, current_user)
    try:
        query = db.query(Customer).filter(Customer.business_id == business_id)
        total = query.count()
        customers = query.order_by(Customer.last_name, Customer.first_name) \
            .offset((page - 1) * page_size).limit(page_size).all()
        logger.info(f"Retrieved {len(customers)} of {total} customers for business {business_id}")
        return {"items": customers, "total": total, "page": page, "page_size": page_size}
    except Exception as e:
        raise database_error(e, "listing customers", "customer")


@router.get("/search", response_model=List[CustomerResponse])
async def search_customers(
    business_id: str,
    q: str = Query(..., min_length=1, description="Name, email or phone fragment"),
    limit: int = Query(20, ge=1, le=100),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """Predictive search used by the counter while typing"""
    get_owned_business(db, business_id, current_user)
    term = q.strip()
    pattern = f"%{term}%"
    conditions = [
        Customer.first_name.ilike(pattern),
        Customer.last_name.ilike(pattern),
        Customer.email.ilike(pattern),
    ]
    digits = normalize_phone_number(term)
    if digits:
        conditions.append(Customer.phone_number.like(f"%{digits}%"))

    try:
        return db.query(Customer).filter(
            Customer.business_id == business_id,
            or_(*conditions)
        ).order_by(Customer.last_name, Customer.first_name).limit(limit).all()
    except Exception as e:
        raise database_error(e, "searching customers", "customer")


@router.get("/phone-availability", response_model=PhoneAvailabilityResponse)
async def check_phone_availability(
    business_id: str,
    phone_number: str,
    exclude_id: Optional[str] = None,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    get_owned_business(db, business_id, current_user)
    existing = find_customer_by_phone(db, business_id, phone_number, exclude_id)
    return {
        "phone_number": normalize_phone_number(phone_number),
        "available": existing is None,
        "customer_id": existing.id if existing else None,
    }


@router.get("/{customer_id}", response_model=CustomerResponse)
async def get_customer(
    customer_id: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    return get_owned_customer(db, customer_id, current_user)


@router.post("", response_model=CustomerResponse, status_code=status.HTTP_201_CREATED)
async def create_customer(
    customer_data: CustomerCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    get_owned_business(db, customer_data.business_id, current_user)

    # Phone numbers identify customers at the counter; check before writing anything
    if find_customer_by_phone(db, customer_data.business_id, customer_data.phone_number):
        raise _duplicate_phone(customer_data.phone_number)

    try:
        data = customer_data.model_dump()
        data["join_date"] = data.get("join_date") or date.today()
        customer = Customer(**data, user_id=current_user.id)
        db.add(customer)
        db.commit()
        db.refresh(customer)

        logger.info(f"Customer created: {customer.full_name} (ID: {customer.id})")
        return customer
    except Exception as e:
        db.rollback()
        raise database_error(e, "creating customer", "customer")


@router.put("/{customer_id}", response_model=CustomerResponse)
async def update_customer(
    customer_id: str,
    customer_data: CustomerUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    customer = get_owned_customer(db, customer_id, current_user)
    update_data = customer_data.model_dump(exclude_unset=True)

    if update_data.get("phone_number") and update_data["phone_number"] != customer.phone_number:
        if find_customer_by_phone(db, customer.business_id, update_data["phone_number"], exclude_id=customer.id):
            raise _duplicate_phone(update_data["phone_number"])

    try:
        for field, value in update_data.items():
            setattr(customer, field, value)
        db.commit()
        db.refresh(customer)

        logger.info(f"Customer updated: {customer.full_name} (ID: {customer.id})")
        return customer
    except Exception as e:
        db.rollback()
        raise database_error(e, "updating customer", "customer")


@router.delete("/{customer_id}", status_code=status.HTTP_200_OK)
async def delete_customer(
    customer_id: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    customer = get_owned_customer(db, customer_id, current_user)
    try:
        db.delete(customer)
        db.commit()
        logger.info(f"Customer deleted: {customer_id}")
        return {"message": f"Customer '{customer.full_name}' deleted successfully", "id": customer_id}
    except Exception as e:
        db.rollback()
        raise database_error(e, "deleting customer", "customer")
