import logging
from typing import List, Optional
from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy import or_
from sqlalchemy.orm import Session

from app.database import get_db
from app.models.customers import Customer
from app.models.orders import Order, OrderItem
from app.models.user import User
from app.schemas.orders import (
    OrderCreate,
    OrderUpdate,
    OrderResponse,
    OrderItemResponse,
    OrderStatusUpdate,
    NextStatusesResponse,
)
from app.core.dependencies import get_current_user, get_owned_business
from app.core.errors import database_error, not_found
from app.services import checkout_service
from app.services.checkout_service import CheckoutLine, CheckoutNotFoundError, InvalidCartError
from app.services.order_workflow import (
    OrderStatus,
    InvalidOrderTransitionError,
    next_statuses,
    validate_transition,
    format_status,
)

router = APIRouter(tags=["orders"])
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


def get_owned_order(db: Session, order_id: str, current_user: User) -> Order:
    order = db.query(Order).filter(Order.id == order_id).first()
    if not order:
        raise not_found("Order", order_id)
    get_owned_business(db, order.business_id, current_user)
    return order


@router.get("", response_model=List[OrderResponse])
async def list_orders(
    business_id: str,
    status_filter: Optional[OrderStatus] = Query(None, alias="status"),
    customer_id: Optional[str] = None,
    search: Optional[str] = Query(None, description="Order number or customer name"),
    limit: int = Query(100, ge=1, le=500),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    get_owned_business(db, business_id, current_user)
    try:
        query = db.query(Order).filter(Order.business_id == business_id)
        if status_filter:
            query = query.filter(Order.status == status_filter.value)
        if customer_id:
            query = query.filter(Order.customer_id == customer_id)
        if search:
            pattern = f"%{search.strip()}%"
            query = query.filter(or_(
                Order.order_number.ilike(pattern),
                Order.first_name.ilike(pattern),
                Order.last_name.ilike(pattern),
            ))
        orders = query.order_by(Order.priority.desc(), Order.order_date.desc()).limit(limit).all()
        logger.info(f"Retrieved {len(orders)} orders for business {business_id}")
        return orders
    except Exception as e:
        raise database_error(e, "listing orders", "order")


@router.get("/customer/{customer_id}", response_model=List[OrderResponse])
async def list_customer_orders(
    customer_id: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    customer = db.query(Customer).filter(Customer.id == customer_id).first()
    if not customer:
        raise not_found("Customer", customer_id)
    get_owned_business(db, customer.business_id, current_user)
    return db.query(Order).filter(Order.customer_id == customer_id).order_by(Order.order_date.desc()).all()


@router.get("/{order_id}", response_model=OrderResponse)
async def get_order(
    order_id: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    return get_owned_order(db, order_id, current_user)


@router.get("/{order_id}/items", response_model=List[OrderItemResponse])
async def get_order_items(
    order_id: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    order = get_owned_order(db, order_id, current_user)
    return db.query(OrderItem).filter(OrderItem.order_id == order.id).all()


@router.post("", response_model=OrderResponse, status_code=status.HTTP_201_CREATED)
async def create_order(
    order_data: OrderCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """Drop-off order paid at pickup; totals are computed from catalog prices"""
    get_owned_business(db, order_data.business_id, current_user)
    try:
        return checkout_service.create_order(
            db,
            business_id=order_data.business_id,
            customer_id=order_data.customer_id,
            employee_id=order_data.employee_id,
            lines=[CheckoutLine(**line.model_dump()) for line in order_data.items],
            due_date=order_data.due_date,
            notes=order_data.notes,
            priority=order_data.priority,
        )
    except CheckoutNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    except InvalidCartError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except Exception as e:
        raise database_error(e, "creating order", "order")


@router.put("/{order_id}", response_model=OrderResponse)
async def update_order(
    order_id: str,
    order_data: OrderUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    order = get_owned_order(db, order_id, current_user)
    try:
        for field, value in order_data.model_dump(exclude_unset=True).items():
            setattr(order, field, value)
        db.commit()
        db.refresh(order)
        logger.info(f"Order updated: {order.order_number}")
        return order
    except Exception as e:
        db.rollback()
        raise database_error(e, "updating order", "order")


@router.get("/{order_id}/next-statuses", response_model=NextStatusesResponse)
async def get_next_statuses(
    order_id: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """Statuses the order may move to; empty once the order is finished"""
    order = get_owned_order(db, order_id, current_user)
    return {
        "order_id": order.id,
        "current_status": order.status,
        "next_statuses": [
            {"value": s, "label": format_status(s)} for s in next_statuses(order.status)
        ],
    }


@router.patch("/{order_id}/status", response_model=OrderResponse)
async def update_order_status(
    order_id: str,
    status_update: OrderStatusUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """
    Move an order to its next status.

    Raises:
        HTTPException 409: the transition is not allowed from the current status
    """
    order = get_owned_order(db, order_id, current_user)
    previous = order.status
    try:
        target = validate_transition(order=order, target_status=status_update.status)
    except InvalidOrderTransitionError as e:
        logger.warning(str(e))
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail={
                "error": "InvalidTransitionError",
                "message": str(e),
                "type": "invalid_status_transition",
                "allowed": [s.value for s in next_statuses(previous)],
            }
        )

    try:
        order.status = target.value
        for item in order.items:
            item.status = target.value
        db.commit()
        db.refresh(order)
        logger.info(f"Order {order.order_number} moved from {previous} to {order.status}")
        return order
    except Exception as e:
        db.rollback()
        raise database_error(e, "updating order status", "order")


@router.delete("/{order_id}", status_code=status.HTTP_200_OK)
async def delete_order(
    order_id: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    order = get_owned_order(db, order_id, current_user)
    try:
        db.delete(order)
        db.commit()
        logger.info(f"Order deleted: {order.order_number}")
        return {"message": f"Order '{order.order_number}' deleted successfully", "id": order_id}
    except Exception as e:
        db.rollback()
        raise database_error(e, "deleting order", "order")
