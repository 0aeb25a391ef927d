# shop_service/order_status.py
"""
Order status state machine.

``TRANSITIONS`` maps the current status of an order to the statuses it may
move to and the side effect the move carries. A pair that is missing from
the table is an illegal transition.
"""
import enum

from shop_service.db.models import OrderStatus


class StatusEffect(str, enum.Enum):
    NONE = "none"
    RESTORE_STOCK = "restore_stock"


class IllegalStatusTransition(ValueError):
    def __init__(self, current: OrderStatus, target: OrderStatus, message: str):
        super().__init__(message)
        self.current = current
        self.target = target


_NONE = StatusEffect.NONE
_RESTORE = StatusEffect.RESTORE_STOCK

TRANSITIONS = {
    OrderStatus.PENDING: {
        OrderStatus.PENDING: _NONE,
        OrderStatus.PROCESSING: _NONE,
        OrderStatus.PAID: _NONE,
        OrderStatus.SHIPPED: _NONE,
        OrderStatus.DELIVERED: _NONE,
        OrderStatus.CANCELLED: _RESTORE,
    },
    OrderStatus.PROCESSING: {
        OrderStatus.PROCESSING: _NONE,
        OrderStatus.PAID: _NONE,
        OrderStatus.SHIPPED: _NONE,
        OrderStatus.DELIVERED: _NONE,
        OrderStatus.CANCELLED: _RESTORE,
    },
    OrderStatus.PAID: {
        OrderStatus.PAID: _NONE,
        OrderStatus.SHIPPED: _NONE,
        OrderStatus.DELIVERED: _NONE,
        OrderStatus.CANCELLED: _RESTORE,
    },
    OrderStatus.SHIPPED: {
        OrderStatus.SHIPPED: _NONE,
        OrderStatus.DELIVERED: _NONE,
        OrderStatus.CANCELLED: _RESTORE,
    },
    # Terminal
    OrderStatus.DELIVERED: {},
    # Stock was already given back, cancelling again changes nothing
    OrderStatus.CANCELLED: {
        OrderStatus.CANCELLED: _NONE,
    },
}


def resolve_transition(current: OrderStatus, target: OrderStatus) -> StatusEffect:
    """Returns the side effect of moving from ``current`` to ``target``."""
    allowed = TRANSITIONS[current]
    if target in allowed:
        return allowed[target]
    if current == OrderStatus.DELIVERED:
        message = "Delivered orders cannot change status"
    elif current == OrderStatus.CANCELLED:
        message = "Cancelled orders cannot be reopened"
    else:
        message = f"Order status cannot go from {current.value} to {target.value}"
    raise IllegalStatusTransition(current, target, message)
