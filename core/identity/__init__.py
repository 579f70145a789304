"""
Storefront Identity - Public API
================================
Role constants and the role resolver.
"""

from core.identity.resolver import (
    DbRoleResolver,
    InMemoryRoleResolver,
    RoleResolver,
    is_admin,
    resolve_role,
)
from core.identity.roles import (
    DEFAULT_ROLE,
    ROLE_ADMIN,
    ROLE_CUSTOMER,
    VALID_ROLES,
)

__all__ = [
    "ROLE_ADMIN",
    "ROLE_CUSTOMER",
    "DEFAULT_ROLE",
    "VALID_ROLES",
    "RoleResolver",
    "InMemoryRoleResolver",
    "DbRoleResolver",
    "is_admin",
    "resolve_role",
]
