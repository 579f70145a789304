"""
Storefront Access - Block Gate
==============================
Restrictive predicate on the principal registry.

A blocked row stays reachable through two branches that the block flag
never closes: the principal's own identity and the administrator
override. A blocked principal cannot be locked out of their own row,
and an administrator can always unblock.

The gate covers the registry resource only. Catalog, cart, order and
review access is unaffected by the block flag.
"""

from __future__ import annotations

from typing import Any

from core.access.constants import OP_ALL, POLICY_RESTRICTIVE, RESOURCE_PROFILES
from core.access.models import AccessPolicy, PolicyContext, row_value

BLOCK_GATE_POLICY_NAME = "Blocked users cannot access data"


def blocked_principal_gate(context: PolicyContext, row: Any) -> bool:
    if not row_value(row, "is_blocked", False):
        return True
    if context.caller_is(row_value(row, "pk")):
        return True
    return context.caller_is_admin()


BLOCK_GATE_POLICY = AccessPolicy(
    name=BLOCK_GATE_POLICY_NAME,
    resource=RESOURCE_PROFILES,
    operations=(OP_ALL,),
    using=blocked_principal_gate,
    kind=POLICY_RESTRICTIVE,
)
