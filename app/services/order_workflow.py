"""
ORDER STATUS WORKFLOW

The only allowed status transitions for an Order.

    CREATED -> PROCESSING -> READY -> COMPLETED
                                   \-> DELIVERY_SCHEDULED -> OUT_FOR_DELIVERY -> DELIVERED
    any non-terminal status -> CANCELLED

COMPLETED, DELIVERED and CANCELLED are terminal. FAILED has no exits either.
No database writes happen here; routes call validate_transition and then
persist the new status.
"""
from enum import Enum
from typing import Dict, FrozenSet, List


class OrderStatus(str, Enum):
    CREATED = "CREATED"
    PROCESSING = "PROCESSING"
    READY = "READY"
    COMPLETED = "COMPLETED"
    CANCELLED = "CANCELLED"
    DELIVERY_SCHEDULED = "DELIVERY_SCHEDULED"
    OUT_FOR_DELIVERY = "OUT_FOR_DELIVERY"
    DELIVERED = "DELIVERED"
    FAILED = "FAILED"


class OrderWorkflowError(Exception):
    pass


class InvalidOrderTransitionError(OrderWorkflowError):
    pass


TERMINAL_STATUSES: FrozenSet[OrderStatus] = frozenset({
    OrderStatus.COMPLETED,
    OrderStatus.DELIVERED,
    OrderStatus.CANCELLED,
})

# Ordered: the first entry is the "happy path" next step
ALLOWED_TRANSITIONS: Dict[OrderStatus, List[OrderStatus]] = {
    OrderStatus.CREATED: [OrderStatus.PROCESSING, OrderStatus.CANCELLED],
    OrderStatus.PROCESSING: [OrderStatus.READY, OrderStatus.CANCELLED],
    OrderStatus.READY: [OrderStatus.COMPLETED, OrderStatus.DELIVERY_SCHEDULED, OrderStatus.CANCELLED],
    OrderStatus.DELIVERY_SCHEDULED: [OrderStatus.OUT_FOR_DELIVERY, OrderStatus.CANCELLED],
    OrderStatus.OUT_FOR_DELIVERY: [OrderStatus.DELIVERED, OrderStatus.CANCELLED],
}


def _coerce(status) -> OrderStatus:
    return status if isinstance(status, OrderStatus) else OrderStatus(status)


def next_statuses(current_status) -> List[OrderStatus]:
    """Statuses an order may move to next; empty for terminal, FAILED or unknown statuses"""
    try:
        status = _coerce(current_status)
    except ValueError:
        return []
    if status in TERMINAL_STATUSES:
        return []
    return list(ALLOWED_TRANSITIONS.get(status, []))


def can_transition(*, from_status, to_status) -> bool:
    try:
        target = _coerce(to_status)
    except ValueError:
        return False
    return target in next_statuses(from_status)


def validate_transition(*, order, target_status) -> OrderStatus:
    """
    Check that order may move to target_status.

    Returns:
        the target as an OrderStatus

    Raises:
        InvalidOrderTransitionError: the move is not in ALLOWED_TRANSITIONS
    """
    if not can_transition(from_status=order.status, to_status=target_status):
        raise InvalidOrderTransitionError(
            f"Order {getattr(order, 'order_number', None) or order.id} cannot transition from "
            f"'{order.status}' to '{target_status}'"
        )
    return _coerce(target_status)


def format_status(status) -> str:
    """DELIVERY_SCHEDULED -> 'Delivery Scheduled'"""
    value = status.value if isinstance(status, OrderStatus) else str(status)
    return " ".join(word.capitalize() for word in value.replace("_", " ").lower().split(" "))
