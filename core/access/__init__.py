"""
Storefront Access - Public API
==============================
"""

from core.access.caller import CallerContext
from core.access.constants import (
    OP_ALL,
    OP_DELETE,
    OP_INSERT,
    OP_SELECT,
    OP_UPDATE,
    POLICY_PERMISSIVE,
    POLICY_RESTRICTIVE,
    RESOURCE_BOOKS,
    RESOURCE_CART_ITEMS,
    RESOURCE_CATEGORIES,
    RESOURCE_ORDER_ITEMS,
    RESOURCE_ORDERS,
    RESOURCE_PROFILES,
    RESOURCE_REVIEWS,
)
from core.access.engine import AccessPolicyEngine
from core.access.exceptions import (
    AccessDenied,
    AccessPolicyError,
    DuplicatePolicyError,
    RegistryLockedError,
    UnknownResourceError,
)
from core.access.models import AccessDecision, AccessPolicy, PolicyContext
from core.access.registry import PolicyRegistry


def __getattr__(name: str):
    # Gateway pieces import Django's app registry; load them lazily.
    if name in {"AccessGateway", "ProtectedTable"}:
        from core.access import gateway

        return getattr(gateway, name)
    if name in {"build_access_engine", "get_default_gateway"}:
        from core.access import bootstrap

        return getattr(bootstrap, name)
    raise AttributeError(f"module '{__name__}' has no attribute '{name}'")


__all__ = [
    "OP_ALL",
    "OP_SELECT",
    "OP_INSERT",
    "OP_UPDATE",
    "OP_DELETE",
    "POLICY_PERMISSIVE",
    "POLICY_RESTRICTIVE",
    "RESOURCE_PROFILES",
    "RESOURCE_CATEGORIES",
    "RESOURCE_BOOKS",
    "RESOURCE_CART_ITEMS",
    "RESOURCE_ORDERS",
    "RESOURCE_ORDER_ITEMS",
    "RESOURCE_REVIEWS",
    "CallerContext",
    "AccessPolicy",
    "AccessDecision",
    "PolicyContext",
    "PolicyRegistry",
    "AccessPolicyEngine",
    "AccessDenied",
    "AccessPolicyError",
    "DuplicatePolicyError",
    "RegistryLockedError",
    "UnknownResourceError",
    "AccessGateway",
    "ProtectedTable",
    "build_access_engine",
    "get_default_gateway",
]
