from __future__ import annotations

import pytest

from core.orders_store.status import (
    VALID_STATUSES,
    check_transition,
    is_allowed_transition,
    validate_status,
)
from core.storefront.errors import InvalidOrderStatus, InvalidOrderTransition


def test_known_statuses():
    assert VALID_STATUSES == {"pending", "confirmed", "shipped", "delivered", "cancelled"}


@pytest.mark.parametrize("raw,expected", [("shipped", "shipped"), (" Delivered ", "delivered")])
def test_validate_status_normalizes(raw, expected):
    assert validate_status(raw) == expected


@pytest.mark.parametrize("raw", ["refunded", "", None, 3])
def test_validate_status_rejects_unknown(raw):
    with pytest.raises(InvalidOrderStatus):
        validate_status(raw)


@pytest.mark.parametrize(
    "current,requested,allowed",
    [
        ("pending", "confirmed", True),
        ("confirmed", "delivered", True),
        ("confirmed", "cancelled", True),
        ("shipped", "confirmed", False),
        ("delivered", "cancelled", False),
        ("cancelled", "pending", False),
        ("shipped", "shipped", True),
    ],
)
def test_forward_only_lifecycle(current, requested, allowed):
    assert is_allowed_transition(current, requested) is allowed


def test_transitions_lenient_by_default(settings):
    settings.STOREFRONT_ENFORCE_ORDER_TRANSITIONS = False
    assert check_transition("delivered", "pending") == "pending"


def test_transitions_enforced_when_configured(settings):
    settings.STOREFRONT_ENFORCE_ORDER_TRANSITIONS = True
    assert check_transition("confirmed", "delivered") == "delivered"
    with pytest.raises(InvalidOrderTransition):
        check_transition("delivered", "pending")


def test_unknown_status_rejected_even_when_lenient(settings):
    settings.STOREFRONT_ENFORCE_ORDER_TRANSITIONS = False
    with pytest.raises(InvalidOrderStatus):
        check_transition("confirmed", "lost")
