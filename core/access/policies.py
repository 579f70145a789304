"""
Storefront Access - Storefront Policy Set
=========================================
Every row-level rule of the storefront, one AccessPolicy each.

Administrator predicates all go through PolicyContext.caller_is_admin(),
which is the single role resolution path.
"""

from __future__ import annotations

from typing import Any

from core.access.block_gate import BLOCK_GATE_POLICY
from core.access.constants import (
    OP_ALL,
    OP_INSERT,
    OP_SELECT,
    OP_UPDATE,
    POLICY_RESTRICTIVE,
    RESOURCE_BOOKS,
    RESOURCE_CART_ITEMS,
    RESOURCE_CATEGORIES,
    RESOURCE_ORDER_ITEMS,
    RESOURCE_ORDERS,
    RESOURCE_PROFILES,
    RESOURCE_REVIEWS,
)
from core.access.models import AccessPolicy, PolicyContext, row_value
from core.access.registry import PolicyRegistry

PRIVILEGED_PROFILE_FIELDS = ("role", "is_blocked")


# ══════════════════════════════════════════════════════════════
# PREDICATES
# ══════════════════════════════════════════════════════════════

def anyone(context: PolicyContext, row: Any) -> bool:
    return True


def caller_is_admin(context: PolicyContext, row: Any) -> bool:
    return context.caller_is_admin()


def caller_is_profile(context: PolicyContext, row: Any) -> bool:
    return context.caller_is(row_value(row, "pk"))


def caller_is_owner(context: PolicyContext, row: Any) -> bool:
    return context.caller_is(row_value(row, "owner_id"))


def caller_owns_parent_order(context: PolicyContext, row: Any) -> bool:
    order = row_value(row, "order")
    return context.caller_is(row_value(order, "owner_id"))


def owner_unchanged(context: PolicyContext, row: Any) -> bool:
    previous = context.previous
    if previous is None:
        return False
    return str(row_value(row, "owner_id")) == str(row_value(previous, "owner_id"))


def privileged_fields_unchanged(context: PolicyContext, row: Any) -> bool:
    """Self-updates may touch contact fields only."""
    if context.caller_is_admin():
        return True
    previous = context.previous
    if previous is None:
        return False
    return all(
        row_value(row, field) == row_value(previous, field)
        for field in PRIVILEGED_PROFILE_FIELDS
    )


# ══════════════════════════════════════════════════════════════
# POLICIES
# ══════════════════════════════════════════════════════════════

PROFILE_POLICIES = (
    AccessPolicy(
        name="Users can view their own profile",
        resource=RESOURCE_PROFILES,
        operations=(OP_SELECT,),
        using=caller_is_profile,
    ),
    AccessPolicy(
        name="Users can update their own profile",
        resource=RESOURCE_PROFILES,
        operations=(OP_UPDATE,),
        using=caller_is_profile,
    ),
    AccessPolicy(
        name="Admins can view all profiles",
        resource=RESOURCE_PROFILES,
        operations=(OP_SELECT,),
        using=caller_is_admin,
    ),
    AccessPolicy(
        name="Admins can update all profiles",
        resource=RESOURCE_PROFILES,
        operations=(OP_UPDATE,),
        using=caller_is_admin,
    ),
    BLOCK_GATE_POLICY,
    AccessPolicy(
        name="Only admins change role or blocked status",
        resource=RESOURCE_PROFILES,
        operations=(OP_UPDATE,),
        check=privileged_fields_unchanged,
        kind=POLICY_RESTRICTIVE,
    ),
)

CATEGORY_POLICIES = (
    AccessPolicy(
        name="Anyone can view categories",
        resource=RESOURCE_CATEGORIES,
        operations=(OP_SELECT,),
        using=anyone,
    ),
    AccessPolicy(
        name="Admins can manage categories",
        resource=RESOURCE_CATEGORIES,
        operations=(OP_ALL,),
        using=caller_is_admin,
    ),
)

BOOK_POLICIES = (
    AccessPolicy(
        name="Anyone can view books",
        resource=RESOURCE_BOOKS,
        operations=(OP_SELECT,),
        using=anyone,
    ),
    AccessPolicy(
        name="Admins can manage books",
        resource=RESOURCE_BOOKS,
        operations=(OP_ALL,),
        using=caller_is_admin,
    ),
)

CART_POLICIES = (
    AccessPolicy(
        name="Users can manage their own cart",
        resource=RESOURCE_CART_ITEMS,
        operations=(OP_ALL,),
        using=caller_is_owner,
    ),
)

ORDER_POLICIES = (
    AccessPolicy(
        name="Users can view their own orders",
        resource=RESOURCE_ORDERS,
        operations=(OP_SELECT,),
        using=caller_is_owner,
    ),
    AccessPolicy(
        name="Users can create their own orders",
        resource=RESOURCE_ORDERS,
        operations=(OP_INSERT,),
        check=caller_is_owner,
    ),
    AccessPolicy(
        name="Admins can view all orders",
        resource=RESOURCE_ORDERS,
        operations=(OP_SELECT,),
        using=caller_is_admin,
    ),
    AccessPolicy(
        name="Admins can update orders",
        resource=RESOURCE_ORDERS,
        operations=(OP_UPDATE,),
        using=caller_is_admin,
    ),
    AccessPolicy(
        name="Order ownership is fixed at creation",
        resource=RESOURCE_ORDERS,
        operations=(OP_UPDATE,),
        check=owner_unchanged,
        kind=POLICY_RESTRICTIVE,
    ),
)

ORDER_ITEM_POLICIES = (
    AccessPolicy(
        name="Users can view their own order items",
        resource=RESOURCE_ORDER_ITEMS,
        operations=(OP_SELECT,),
        using=caller_owns_parent_order,
    ),
    AccessPolicy(
        name="Users can create order items for their orders",
        resource=RESOURCE_ORDER_ITEMS,
        operations=(OP_INSERT,),
        check=caller_owns_parent_order,
    ),
    AccessPolicy(
        name="Admins can view all order items",
        resource=RESOURCE_ORDER_ITEMS,
        operations=(OP_SELECT,),
        using=caller_is_admin,
    ),
)

REVIEW_POLICIES = (
    AccessPolicy(
        name="Anyone can view reviews",
        resource=RESOURCE_REVIEWS,
        operations=(OP_SELECT,),
        using=anyone,
    ),
    AccessPolicy(
        name="Users can manage their own reviews",
        resource=RESOURCE_REVIEWS,
        operations=(OP_ALL,),
        using=caller_is_owner,
    ),
)

STOREFRONT_POLICIES = (
    PROFILE_POLICIES
    + CATEGORY_POLICIES
    + BOOK_POLICIES
    + CART_POLICIES
    + ORDER_POLICIES
    + ORDER_ITEM_POLICIES
    + REVIEW_POLICIES
)


def build_storefront_registry(*, lock: bool = True) -> PolicyRegistry:
    registry = PolicyRegistry()
    registry.register_policies(STOREFRONT_POLICIES)
    if lock:
        registry.lock()
    return registry
