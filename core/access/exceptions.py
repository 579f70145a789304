"""
Storefront Access - Exceptions
==============================
AccessDenied is the only error a caller sees for a failed predicate.
It names the resource and operation, never the policy that failed.
"""

from __future__ import annotations

from core.access.constants import PERMISSION_DENIED


class AccessPolicyError(Exception):
    """Base error for access policy operations."""
    pass


class AccessDenied(AccessPolicyError):
    """No applicable policy admitted the operation."""

    code = PERMISSION_DENIED

    def __init__(self, resource: str, operation: str):
        self.resource = resource
        self.operation = operation
        super().__init__(
            f"permission denied for {operation} on {resource}"
        )


class DuplicatePolicyError(AccessPolicyError):
    """Policy with the same name already registered for the resource."""

    def __init__(self, resource: str, name: str):
        self.resource = resource
        self.name = name
        super().__init__(
            f"Policy '{name}' is already registered on '{resource}'."
        )


class RegistryLockedError(AccessPolicyError):
    """Policy registry is locked; no modifications allowed."""

    def __init__(self):
        super().__init__(
            "Access Policy Registry is locked after bootstrap. "
            "No dynamic policy registration allowed."
        )


class UnknownResourceError(AccessPolicyError):
    """Resource has no storage binding."""

    def __init__(self, resource: str):
        self.resource = resource
        super().__init__(f"Resource '{resource}' is not bound to a model.")
