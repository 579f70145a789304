"""
Storefront Identity - Role Resolver
===================================
The single role-resolution path used by every administrator predicate.

DbRoleResolver reads the principal registry through the plain ORM manager.
It never routes through the access policy engine: evaluating "is this
caller an admin" on the registry must not re-enter the registry's own
policies.
"""

from __future__ import annotations

from typing import Any, Iterable, Mapping, Optional, Protocol

from core.identity.roles import ROLE_ADMIN, VALID_ROLES


def _normalize_principal_id(principal_id: Any) -> Optional[str]:
    if principal_id is None or isinstance(principal_id, bool):
        return None
    normalized = str(principal_id).strip()
    return normalized or None


class RoleResolver(Protocol):
    def resolve_role(self, principal_id: Any) -> Optional[str]:
        ...


class InMemoryRoleResolver:
    """
    Deterministic in-memory resolver used for bootstrap/tests.
    """

    def __init__(self, roles: Mapping[Any, str] | Iterable[tuple[Any, str]] | None = None):
        self._roles: dict[str, str] = {}
        items = roles.items() if isinstance(roles, Mapping) else (roles or ())
        for principal_id, role in items:
            self.set_role(principal_id, role)

    def set_role(self, principal_id: Any, role: str) -> None:
        key = _normalize_principal_id(principal_id)
        if key is None:
            raise ValueError("principal_id must be a non-empty value.")
        if role not in VALID_ROLES:
            raise ValueError(
                f"role '{role}' not valid. Must be one of: {sorted(VALID_ROLES)}"
            )
        self._roles[key] = role

    def forget(self, principal_id: Any) -> None:
        key = _normalize_principal_id(principal_id)
        if key is not None:
            self._roles.pop(key, None)

    def resolve_role(self, principal_id: Any) -> Optional[str]:
        key = _normalize_principal_id(principal_id)
        if key is None:
            return None
        return self._roles.get(key)


class DbRoleResolver:
    def resolve_role(self, principal_id: Any) -> Optional[str]:
        key = _normalize_principal_id(principal_id)
        if key is None:
            return None

        from core.identity_store.models import Principal

        try:
            return (
                Principal.objects.filter(pk=key)
                .values_list("role", flat=True)
                .first()
            )
        except (TypeError, ValueError):
            # Malformed identifiers cannot own a registry row.
            return None


def is_admin(resolver: RoleResolver, principal_id: Any) -> bool:
    """Absent principals are never admins."""
    if _normalize_principal_id(principal_id) is None:
        return False
    return resolver.resolve_role(principal_id) == ROLE_ADMIN


_default_resolver: RoleResolver = DbRoleResolver()


def resolve_role(principal_id: Any) -> Optional[str]:
    """Resolve a principal's role from the registry, or None when absent."""
    return _default_resolver.resolve_role(principal_id)
