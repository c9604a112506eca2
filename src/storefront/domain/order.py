from enum import Enum
from typing import Dict, FrozenSet


class OrderStatus(str, Enum):
    """Order status enumeration"""
    PENDING = "pending"
    CONFIRMED = "confirmed"
    SHIPPED = "shipped"
    DELIVERED = "delivered"
    CANCELLED = "cancelled"


class PaymentMethod(str, Enum):
    CARD = "card"
    UPI = "upi"
    CASH_ON_DELIVERY = "cash_on_delivery"


PAYMENT_METHODS = frozenset(m.value for m in PaymentMethod)

# Forward-only lifecycle; delivered and cancelled are terminal.
ORDER_TRANSITIONS: Dict[OrderStatus, FrozenSet[OrderStatus]] = {
    OrderStatus.PENDING: frozenset({OrderStatus.CONFIRMED, OrderStatus.CANCELLED}),
    OrderStatus.CONFIRMED: frozenset({OrderStatus.SHIPPED, OrderStatus.CANCELLED}),
    OrderStatus.SHIPPED: frozenset({OrderStatus.DELIVERED, OrderStatus.CANCELLED}),
    OrderStatus.DELIVERED: frozenset(),
    OrderStatus.CANCELLED: frozenset(),
}


def can_transition(current: OrderStatus, target: OrderStatus) -> bool:
    return target in ORDER_TRANSITIONS[current]


def initial_status(requires_manual_confirmation: bool) -> OrderStatus:
    """Status a freshly written order starts in."""
    if requires_manual_confirmation:
        return OrderStatus.PENDING
    return OrderStatus.CONFIRMED
