"""
Storefront Access - Policy Evaluation Engine
============================================
Pure, synchronous, FAIL-CLOSED row-level access evaluation.

Admission rule for an operation on a resource:
    at least one PERMISSIVE policy admits
    AND every RESTRICTIVE policy admits

No applicable policy → deny. A predicate that raises counts as a
non-admitting predicate.

The AccessPolicyEngine does NOT:
- Read or write storage (callers supply rows)
- Cache role state across evaluations
- Reveal which policy failed
"""

from __future__ import annotations

import logging
from typing import Any, Iterable, List, Optional

from core.access.caller import CallerContext
from core.access.constants import (
    OP_INSERT,
    OP_UPDATE,
    POLICY_PERMISSIVE,
    POLICY_RESTRICTIVE,
    VALID_OPERATIONS,
)
from core.access.exceptions import AccessDenied
from core.access.models import AccessDecision, AccessPolicy, PolicyContext, Predicate
from core.access.registry import PolicyRegistry
from core.identity.resolver import RoleResolver

logger = logging.getLogger("storefront.access")


class AccessPolicyEngine:
    """
    Row-level policy evaluation over a locked PolicyRegistry.

    GUARANTEE: evaluate() NEVER raises.

    Usage:
        engine = AccessPolicyEngine(registry=registry, resolver=DbRoleResolver())
        decision = engine.evaluate(caller, "orders", "select", row=order)
        engine.enforce(caller, "orders", "insert", new_row=candidate)
    """

    def __init__(self, registry: PolicyRegistry, resolver: RoleResolver):
        self._registry = registry
        self._resolver = resolver

    @property
    def registry(self) -> PolicyRegistry:
        return self._registry

    @property
    def resolver(self) -> RoleResolver:
        return self._resolver

    def evaluate(
        self,
        caller: CallerContext,
        resource: str,
        operation: str,
        row: Any = None,
        new_row: Any = None,
        context: Optional[PolicyContext] = None,
    ) -> AccessDecision:
        """
        Evaluate every policy applicable to (resource, operation).

        Args:
            caller:    Identity tag of the request.
            resource:  Resource name (e.g. 'orders').
            operation: select | insert | update | delete.
            row:       Existing row (select, update, delete).
            new_row:   Candidate row (insert, update).
            context:   Reusable PolicyContext for batch evaluation.
        """
        if not isinstance(caller, CallerContext) or operation not in VALID_OPERATIONS:
            return self._deny(resource, operation, "invalid request")

        policies = self._registry.get_policies(resource, operation)
        if context is None:
            context = PolicyContext(caller, self._resolver)

        admitted_by: Optional[str] = None
        for policy in policies:
            if policy.kind != POLICY_PERMISSIVE:
                continue
            if self._policy_admits(policy, context, operation, row, new_row):
                admitted_by = policy.name
                break

        if admitted_by is None:
            return self._deny(resource, operation, "no permissive policy admitted")

        for policy in policies:
            if policy.kind != POLICY_RESTRICTIVE:
                continue
            if not self._policy_admits(policy, context, operation, row, new_row):
                return self._deny(
                    resource, operation, f"restrictive policy '{policy.name}'"
                )

        logger.debug(
            f"ADMIT {operation} on {resource} for {caller.principal_id or 'anonymous'} "
            f"via '{admitted_by}'"
        )
        return AccessDecision(
            allowed=True,
            resource=resource,
            operation=operation,
            policy_name=admitted_by,
        )

    def enforce(
        self,
        caller: CallerContext,
        resource: str,
        operation: str,
        row: Any = None,
        new_row: Any = None,
    ) -> AccessDecision:
        """Evaluate and raise AccessDenied when the operation is not admitted."""
        decision = self.evaluate(caller, resource, operation, row=row, new_row=new_row)
        if not decision.allowed:
            raise AccessDenied(resource, operation)
        return decision

    def filter_visible(
        self,
        caller: CallerContext,
        resource: str,
        operation: str,
        rows: Iterable[Any],
    ) -> List[Any]:
        """Rows the caller may access, in input order."""
        context = PolicyContext(caller, self._resolver)
        return [
            row
            for row in rows
            if self.evaluate(caller, resource, operation, row=row, context=context).allowed
        ]

    # ══════════════════════════════════════════════════════════
    # INTERNALS
    # ══════════════════════════════════════════════════════════

    def _policy_admits(
        self,
        policy: AccessPolicy,
        context: PolicyContext,
        operation: str,
        row: Any,
        new_row: Any,
    ) -> bool:
        if operation == OP_INSERT:
            return self._run(policy, policy.check_expression, context, new_row)

        if operation == OP_UPDATE:
            if policy.using is not None and not self._run(policy, policy.using, context, row):
                return False
            return self._run(
                policy,
                policy.check_expression,
                context.with_previous(row),
                new_row,
            )

        if policy.using is None:
            # check-only policies constrain new rows, never existing ones.
            return False
        return self._run(policy, policy.using, context, row)

    @staticmethod
    def _run(
        policy: AccessPolicy,
        predicate: Optional[Predicate],
        context: PolicyContext,
        row: Any,
    ) -> bool:
        if predicate is None:
            return False
        try:
            return bool(predicate(context, row))
        except Exception as exc:
            logger.error(
                f"Policy '{policy.name}' on {policy.resource} raised "
                f"{type(exc).__name__}: {exc}, treated as not admitted"
            )
            return False

    @staticmethod
    def _deny(resource: str, operation: str, reason: str) -> AccessDecision:
        logger.debug(f"DENY {operation} on {resource}: {reason}")
        return AccessDecision(
            allowed=False,
            resource=resource,
            operation=operation,
        )
