"""
CHECKOUT

Turns a counter cart into a paid order:

    cart lines -> catalog prices -> totals -> payment -> Order + OrderItems + Transaction + TransactionItems

Hard rules:
- Prices come from the catalog rows, never from the request.
- Payment runs before anything is written. A declined payment writes nothing.
- All rows are committed together or rolled back together.
"""
import logging
import random
import time
from dataclasses import dataclass
from datetime import date, datetime
from typing import List, Optional

from sqlalchemy.orm import Session

from app.models.customers import Customer
from app.models.employees import Employee
from app.models.items import Item
from app.models.orders import Order, OrderItem
from app.models.transactions import Transaction, TransactionItem
from app.services.cart import Cart, CartItem
from app.services.order_workflow import OrderStatus
from app.services.payment_service import MockPaymentGateway, PaymentError, PaymentResult

logger = logging.getLogger(__name__)

TRANSACTION_COMPLETED = "Completed"
PAYMENT_PAID = "Paid"


class CheckoutError(Exception):
    """Base checkout exception"""


class InvalidCartError(CheckoutError):
    """The cart cannot be turned into order lines"""


class EmptyCartError(InvalidCartError):
    pass


class ConflictingLinesError(InvalidCartError):
    pass


class CheckoutNotFoundError(CheckoutError):
    pass


@dataclass
class CheckoutLine:
    item_id: str
    quantity: int = 1
    starch: str = "NONE"
    press_only: bool = False
    notes: Optional[str] = None


@dataclass
class CheckoutResult:
    order: Order
    transaction: Transaction
    payment: PaymentResult
    cart: Cart


def generate_order_number() -> str:
    """ORD-<last 6 digits of epoch ms>-<4 random digits>"""
    millis = str(int(time.time() * 1000))
    return f"ORD-{millis[-6:]}-{random.randint(0, 9999):04d}"


def generate_transaction_number(business_id: str) -> str:
    """TXN-<last 4 chars of the business id>-<epoch ms>"""
    return f"TXN-{str(business_id)[-4:]}-{int(time.time() * 1000)}"


def build_cart(db: Session, business_id: str, lines: List[CheckoutLine], tip=0) -> Cart:
    """
    Build a Cart from catalog rows of one business.

    Raises:
        EmptyCartError: no lines, or every line has quantity <= 0
        ConflictingLinesError: the same item is sent twice with different starch or press-only options
        CheckoutNotFoundError: an item id is not in this business's catalog
    """
    item_ids = {line.item_id for line in lines}
    items = {}
    if item_ids:
        rows = db.query(Item).filter(Item.business_id == business_id, Item.id.in_(item_ids)).all()
        items = {row.id: row for row in rows}

    missing = item_ids - set(items)
    if missing:
        raise CheckoutNotFoundError(f"Items not found: {', '.join(sorted(missing))}")

    cart = Cart()
    for line in lines:
        if line.quantity <= 0:
            continue
        row = items[line.item_id]
        existing = next((c for c in cart.items if c.id == row.id), None)
        # One cart line per catalog item, so repeats must agree on options
        if existing and (existing.starch, existing.press_only) != (line.starch, line.press_only):
            raise ConflictingLinesError(
                f"{row.name} appears more than once with different starch or press-only options"
            )
        cart = cart.add_item(CartItem(
            id=row.id,
            name=row.name,
            price=row.price,
            item_type=row.item_type,
            category_id=row.category_id,
            starch=line.starch,
            press_only=line.press_only,
        ))
        cart = cart.update_quantity(row.id, (existing.quantity if existing else 0) + line.quantity)

    if cart.is_empty:
        raise EmptyCartError("Cart is empty")
    return cart.with_tip(tip)


def _load_parties(db: Session, business_id: str, customer_id: str, employee_id: Optional[str]):
    customer = db.query(Customer).filter(
        Customer.id == customer_id,
        Customer.business_id == business_id
    ).first()
    if not customer:
        raise CheckoutNotFoundError(f"Customer with ID {customer_id} not found")

    employee = None
    if employee_id:
        employee = db.query(Employee).filter(
            Employee.id == employee_id,
            Employee.business_id == business_id
        ).first()
        if not employee:
            raise CheckoutNotFoundError(f"Employee with ID {employee_id} not found")
    return customer, employee


def _new_order(
    cart: Cart,
    lines: List[CheckoutLine],
    customer: Customer,
    employee: Optional[Employee],
    business_id: str,
    order_date: datetime,
    due_date: Optional[datetime],
    notes: Optional[str],
    priority: int = 0,
    payment: Optional[PaymentResult] = None,
) -> Order:
    notes_by_item = {}
    for line in lines:
        if line.notes and line.notes not in notes_by_item.get(line.item_id, []):
            notes_by_item.setdefault(line.item_id, []).append(line.notes)
    order = Order(
        order_number=generate_order_number(),
        order_date=order_date,
        due_date=due_date,
        status=OrderStatus.CREATED.value,
        notes=notes,
        subtotal=float(cart.subtotal),
        tax=float(cart.tax),
        tip=float(cart.tip),
        total=float(cart.total),
        payment_method=payment.method if payment else None,
        amount_tendered=float(payment.amount_tendered) if payment and payment.amount_tendered is not None else None,
        change=float(payment.change) if payment and payment.change is not None else None,
        priority=priority,
        first_name=customer.first_name,
        last_name=customer.last_name,
        customer_id=customer.id,
        business_id=business_id,
        employee_id=employee.id if employee else None,
    )
    for line in cart.items:
        order.items.append(OrderItem(
            item_id=line.id,
            name=line.name,
            item_type=line.item_type,
            price_at_order=float(line.price),
            quantity=line.quantity,
            status=OrderStatus.CREATED.value,
            starch=line.starch,
            press_only=line.press_only,
            notes="; ".join(notes_by_item[line.id]) if line.id in notes_by_item else None,
        ))
    return order


def create_order(
    db: Session,
    *,
    business_id: str,
    customer_id: str,
    lines: List[CheckoutLine],
    employee_id: Optional[str] = None,
    due_date: Optional[datetime] = None,
    notes: Optional[str] = None,
    priority: int = 0,
) -> Order:
    """Record a drop-off order without taking payment"""
    customer, employee = _load_parties(db, business_id, customer_id, employee_id)
    cart = build_cart(db, business_id, lines)

    try:
        order = _new_order(cart, lines, customer, employee, business_id, datetime.now(), due_date, notes, priority)
        db.add(order)
        customer.last_active_date = date.today()
        db.commit()
        db.refresh(order)
    except Exception:
        db.rollback()
        raise

    logger.info(f"Order {order.order_number} created for customer {customer.id}, total {cart.total}")
    return order


def checkout(
    db: Session,
    gateway: MockPaymentGateway,
    *,
    business_id: str,
    customer_id: str,
    lines: List[CheckoutLine],
    payment_method: str,
    tip=0,
    amount_tendered=None,
    employee_id: Optional[str] = None,
    due_date: Optional[datetime] = None,
    notes: Optional[str] = None,
    customer_preferences: Optional[str] = None,
) -> CheckoutResult:
    """
    Take payment for a cart and persist the order and its transaction.

    Raises:
        CheckoutError: empty cart or unknown customer/employee/item
        PaymentError: invalid amount or a declined payment
    """
    customer, employee = _load_parties(db, business_id, customer_id, employee_id)
    cart = build_cart(db, business_id, lines, tip=tip)

    payment = gateway.process(payment_method, cart.total, amount_tendered=amount_tendered)
    if not payment.success:
        raise PaymentError(payment.error or "Payment failed")

    now = datetime.now()
    try:
        order = _new_order(cart, lines, customer, employee, business_id, now, due_date, notes, payment=payment)
        db.add(order)
        db.flush()

        transaction = Transaction(
            transaction_number=generate_transaction_number(business_id),
            transaction_date=now,
            status=TRANSACTION_COMPLETED,
            subtotal=float(cart.subtotal),
            tax=float(cart.tax),
            tip=float(cart.tip),
            total=float(cart.total),
            payment_method=payment.method,
            payment_status=PAYMENT_PAID,
            external_transaction_id=payment.nonce or payment.transaction_id,
            notes=notes,
            customer_id=customer.id,
            business_id=business_id,
            employee_id=employee.id if employee else None,
            order_id=order.id,
            pickup_date=due_date,
            customer_preferences=customer_preferences,
        )
        for line in cart.items:
            transaction.items.append(TransactionItem(
                item_id=line.id,
                quantity=line.quantity,
                price_at_transaction=float(line.price),
            ))
        db.add(transaction)

        customer.last_active_date = date.today()
        db.commit()
        db.refresh(order)
        db.refresh(transaction)
    except Exception:
        db.rollback()
        logger.error(f"Checkout failed after payment {payment.transaction_id} for business {business_id}", exc_info=True)
        raise

    logger.info(
        f"Checkout complete: order {order.order_number}, transaction {transaction.transaction_number}, "
        f"total {cart.total} via {payment.method}"
    )
    return CheckoutResult(order=order, transaction=transaction, payment=payment, cart=cart)
