"""
Storefront Identity - Role Constants
====================================
Principal roles are registry-owned. Only administrators change them.
"""

ROLE_CUSTOMER = "customer"
ROLE_ADMIN = "admin"

DEFAULT_ROLE = ROLE_CUSTOMER

VALID_ROLES = frozenset(
    {ROLE_CUSTOMER, ROLE_ADMIN}
)
