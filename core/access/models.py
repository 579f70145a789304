"""
Storefront Access - Policy and Decision Models
==============================================
AccessPolicy: one named predicate pair bound to a resource.
PolicyContext: per-evaluation view of the caller for predicates.
AccessDecision: outcome of evaluating every applicable policy.

Expression semantics follow row-level security:
    select / delete → `using` against the existing row
    insert          → `check` against the new row (falls back to `using`)
    update          → `using` against the existing row AND
                      `check` against the new row (falls back to `using`)
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Mapping, Optional

from core.access.caller import CallerContext
from core.access.constants import (
    OP_ALL,
    POLICY_PERMISSIVE,
    VALID_POLICY_KINDS,
    VALID_POLICY_OPERATIONS,
    VALID_RESOURCES,
)
from core.identity.resolver import RoleResolver, is_admin

_MISSING = object()


def row_value(row: Any, field_name: str, default: Any = None) -> Any:
    """Read a column from a model instance, plain object or mapping."""
    if row is None:
        return default
    if isinstance(row, Mapping):
        return row.get(field_name, default)
    value = getattr(row, field_name, _MISSING)
    if value is _MISSING:
        return default
    return value


class PolicyContext:
    """
    Caller view handed to predicates.

    The caller's role is resolved at most once per evaluation, always
    through the role resolver, never through the policy engine.
    """

    def __init__(
        self,
        caller: CallerContext,
        resolver: RoleResolver,
        previous: Any = None,
    ):
        self.caller = caller
        self.previous = previous
        self._resolver = resolver
        self._is_admin: Optional[bool] = None

    def caller_is(self, principal_id: Any) -> bool:
        return self.caller.is_principal(principal_id)

    def caller_is_admin(self) -> bool:
        if self._is_admin is None:
            self._is_admin = is_admin(self._resolver, self.caller.principal_id)
        return self._is_admin

    def with_previous(self, previous: Any) -> "PolicyContext":
        derived = PolicyContext(self.caller, self._resolver, previous=previous)
        derived._is_admin = self._is_admin
        return derived


Predicate = Callable[[PolicyContext, Any], bool]


@dataclass(frozen=True)
class AccessPolicy:
    name: str
    resource: str
    operations: tuple[str, ...]
    using: Optional[Predicate] = None
    check: Optional[Predicate] = None
    kind: str = POLICY_PERMISSIVE

    def __post_init__(self):
        if not self.name or not isinstance(self.name, str):
            raise ValueError("name must be a non-empty string.")

        if self.resource not in VALID_RESOURCES:
            raise ValueError(
                f"resource '{self.resource}' not valid. "
                f"Must be one of: {sorted(VALID_RESOURCES)}"
            )

        if not isinstance(self.operations, tuple) or not self.operations:
            raise ValueError("operations must be a non-empty tuple.")

        for operation in self.operations:
            if operation not in VALID_POLICY_OPERATIONS:
                raise ValueError(
                    f"operation '{operation}' not valid. "
                    f"Must be one of: {sorted(VALID_POLICY_OPERATIONS)}"
                )

        if self.kind not in VALID_POLICY_KINDS:
            raise ValueError(
                f"kind '{self.kind}' not valid. "
                f"Must be one of: {sorted(VALID_POLICY_KINDS)}"
            )

        if self.using is None and self.check is None:
            raise ValueError("policy must declare a using or check predicate.")

        for predicate in (self.using, self.check):
            if predicate is not None and not callable(predicate):
                raise ValueError("predicates must be callable.")

        object.__setattr__(
            self, "operations", tuple(sorted(set(self.operations)))
        )

    def applies_to(self, operation: str) -> bool:
        return OP_ALL in self.operations or operation in self.operations

    @property
    def check_expression(self) -> Optional[Predicate]:
        return self.check if self.check is not None else self.using


@dataclass(frozen=True)
class AccessDecision:
    """
    Result of an access check.

    policy_name records the admitting permissive policy for audit logs.
    It is never surfaced to callers on denial.
    """

    allowed: bool
    resource: str
    operation: str
    policy_name: Optional[str] = None
