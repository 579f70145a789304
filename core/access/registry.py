"""
Storefront Access - Policy Registry
===================================
Central registry of access policies, indexed by resource and operation.

Responsibilities:
- Register policy instances
- Enforce unique policy name per resource
- Expand `all` policies onto every operation
- Lock after bootstrap

Policies for one (resource, operation) pair are returned in name order
so evaluation is deterministic.
"""

from __future__ import annotations

import logging
from threading import Lock
from typing import Dict, List, Tuple

from core.access.constants import VALID_OPERATIONS
from core.access.exceptions import DuplicatePolicyError, RegistryLockedError
from core.access.models import AccessPolicy

logger = logging.getLogger("storefront.access")


class PolicyRegistry:
    """
    Registry of access policies.

    Thread-safe. Lock-after-bootstrap.

    Usage:
        registry = PolicyRegistry()
        registry.register_policy(BLOCK_GATE_POLICY)
        registry.lock()

        policies = registry.get_policies("profiles", "select")
    """

    def __init__(self):
        self._policies: Dict[Tuple[str, str], AccessPolicy] = {}
        self._operation_index: Dict[Tuple[str, str], List[AccessPolicy]] = {}
        self._locked: bool = False
        self._lock = Lock()

    def register_policy(self, policy: AccessPolicy) -> None:
        if not isinstance(policy, AccessPolicy):
            raise TypeError(
                f"Expected AccessPolicy instance, got {type(policy).__name__}."
            )

        key = (policy.resource, policy.name)

        with self._lock:
            if self._locked:
                raise RegistryLockedError()

            if key in self._policies:
                raise DuplicatePolicyError(policy.resource, policy.name)

            self._policies[key] = policy

            for operation in VALID_OPERATIONS:
                if not policy.applies_to(operation):
                    continue
                index_key = (policy.resource, operation)
                if index_key not in self._operation_index:
                    self._operation_index[index_key] = []
                self._operation_index[index_key].append(policy)

            logger.info(
                f"Policy registered: '{policy.name}' on {policy.resource} "
                f"[{policy.kind}] operations={policy.operations}"
            )

    def register_policies(self, policies) -> None:
        for policy in policies:
            self.register_policy(policy)

    def lock(self) -> None:
        with self._lock:
            if not self._locked:
                self._locked = True
                logger.info(
                    f"Access Policy Registry LOCKED: {len(self._policies)} policies"
                )

    @property
    def is_locked(self) -> bool:
        with self._lock:
            return self._locked

    def get_policies(self, resource: str, operation: str) -> Tuple[AccessPolicy, ...]:
        """
        Policies applicable to an operation on a resource, sorted by name.

        Unknown resource or operation → empty tuple (the engine denies).
        """
        with self._lock:
            policies = self._operation_index.get((resource, operation), [])
            return tuple(sorted(policies, key=lambda p: p.name))

    def get_policy(self, resource: str, name: str) -> AccessPolicy | None:
        with self._lock:
            return self._policies.get((resource, name))

    def resources(self) -> Tuple[str, ...]:
        with self._lock:
            return tuple(sorted({resource for resource, _ in self._policies}))

    def policy_count(self) -> int:
        with self._lock:
            return len(self._policies)
