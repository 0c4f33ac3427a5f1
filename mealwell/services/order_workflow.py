"""
Order status state machine

Status values form a closed set. Every status change goes through
``ensure_transition`` so that an order can only move along the
fulfillment sequence or be cancelled before preparation starts.
"""

from enum import Enum
from typing import Dict, FrozenSet, Optional


class OrderStatus(str, Enum):
    PENDING = "pending"
    CONFIRMED = "confirmed"
    PREPARING = "preparing"
    READY = "ready"
    OUT_FOR_DELIVERY = "out_for_delivery"
    DELIVERED = "delivered"
    CANCELLED = "cancelled"


class PaymentStatus(str, Enum):
    PENDING = "pending"
    PAID = "paid"
    FAILED = "failed"
    REFUNDED = "refunded"


class MealType(str, Enum):
    BREAKFAST = "breakfast"
    LUNCH = "lunch"
    DINNER = "dinner"
    SNACK = "snack"


TRANSITIONS: Dict[OrderStatus, FrozenSet[OrderStatus]] = {
    OrderStatus.PENDING: frozenset({OrderStatus.CONFIRMED, OrderStatus.CANCELLED}),
    OrderStatus.CONFIRMED: frozenset({OrderStatus.PREPARING, OrderStatus.CANCELLED}),
    OrderStatus.PREPARING: frozenset({OrderStatus.READY}),
    OrderStatus.READY: frozenset({OrderStatus.OUT_FOR_DELIVERY}),
    OrderStatus.OUT_FOR_DELIVERY: frozenset({OrderStatus.DELIVERED}),
    OrderStatus.DELIVERED: frozenset(),
    OrderStatus.CANCELLED: frozenset(),
}

TERMINAL_STATUSES: FrozenSet[OrderStatus] = frozenset(
    status for status, targets in TRANSITIONS.items() if not targets
)

# Statuses a chef may request through the status endpoint
FULFILLMENT_STATUSES: FrozenSet[OrderStatus] = frozenset({
    OrderStatus.CONFIRMED,
    OrderStatus.PREPARING,
    OrderStatus.READY,
    OrderStatus.OUT_FOR_DELIVERY,
    OrderStatus.DELIVERED,
})

# Order column stamped when a status is first reached
TIMESTAMP_FIELDS: Dict[OrderStatus, str] = {
    OrderStatus.CONFIRMED: "confirmed_at",
    OrderStatus.PREPARING: "preparing_at",
    OrderStatus.READY: "ready_at",
    OrderStatus.OUT_FOR_DELIVERY: "out_for_delivery_at",
    OrderStatus.DELIVERED: "delivered_at",
}


class InvalidTransitionError(ValueError):
    """Raised when a requested status change is not in the transition table"""

    def __init__(self, current: OrderStatus, requested: OrderStatus):
        self.current = current
        self.requested = requested
        super().__init__(
            f"Cannot change order status from '{current.value}' to '{requested.value}'"
        )


def can_transition(current: OrderStatus, requested: OrderStatus) -> bool:
    return OrderStatus(requested) in TRANSITIONS[OrderStatus(current)]


def ensure_transition(current: OrderStatus, requested: OrderStatus) -> None:
    current = OrderStatus(current)
    requested = OrderStatus(requested)
    if not can_transition(current, requested):
        raise InvalidTransitionError(current, requested)


def can_cancel(current: OrderStatus) -> bool:
    """Cancellation is only possible before the chef starts preparing"""
    return can_transition(current, OrderStatus.CANCELLED)


def timestamp_field(status: OrderStatus) -> Optional[str]:
    return TIMESTAMP_FIELDS.get(OrderStatus(status))
