"""
Storefront Orders Store - Order Status State Machine
====================================================
pending -> confirmed -> shipped -> delivered, or cancelled from any
non-terminal state. Checkout creates orders directly in confirmed.

The access layer admits every administrator status update. Transition
discipline is opt-in through STOREFRONT_ENFORCE_ORDER_TRANSITIONS.
"""

from __future__ import annotations

from django.conf import settings

from core.orders_store.models import OrderStatus
from core.storefront.errors import InvalidOrderStatus, InvalidOrderTransition

VALID_STATUSES = frozenset(OrderStatus.values)
TERMINAL_STATUSES = frozenset({OrderStatus.DELIVERED.value, OrderStatus.CANCELLED.value})

_FORWARD_SEQUENCE = (
    OrderStatus.PENDING.value,
    OrderStatus.CONFIRMED.value,
    OrderStatus.SHIPPED.value,
    OrderStatus.DELIVERED.value,
)


def validate_status(status) -> str:
    if not isinstance(status, str) or status.strip().lower() not in VALID_STATUSES:
        raise InvalidOrderStatus(status)
    return status.strip().lower()


def is_allowed_transition(current: str, requested: str) -> bool:
    if current == requested:
        return True
    if current in TERMINAL_STATUSES:
        return False
    if requested == OrderStatus.CANCELLED.value:
        return True
    return _FORWARD_SEQUENCE.index(requested) > _FORWARD_SEQUENCE.index(current)


def transitions_enforced() -> bool:
    return bool(getattr(settings, "STOREFRONT_ENFORCE_ORDER_TRANSITIONS", False))


def check_transition(current: str, requested: str) -> str:
    """
    Validate a requested status change and return the normalized status.

    Unknown statuses always fail. Ordering is only checked when
    transitions are enforced.
    """
    normalized = validate_status(requested)
    if transitions_enforced() and not is_allowed_transition(current, normalized):
        raise InvalidOrderTransition(current, normalized)
    return normalized
