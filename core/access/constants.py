"""
Storefront Access - Operation, Policy Kind and Resource Constants
=================================================================
"""

# ── Operations ────────────────────────────────────────────────
OP_SELECT = "select"
OP_INSERT = "insert"
OP_UPDATE = "update"
OP_DELETE = "delete"
OP_ALL = "all"

VALID_OPERATIONS = frozenset(
    {OP_SELECT, OP_INSERT, OP_UPDATE, OP_DELETE}
)
VALID_POLICY_OPERATIONS = VALID_OPERATIONS | {OP_ALL}

# ── Policy kinds ──────────────────────────────────────────────
# Permissive policies are ORed; restrictive policies are ANDed on top.
POLICY_PERMISSIVE = "permissive"
POLICY_RESTRICTIVE = "restrictive"

VALID_POLICY_KINDS = frozenset(
    {POLICY_PERMISSIVE, POLICY_RESTRICTIVE}
)

# ── Resources ─────────────────────────────────────────────────
RESOURCE_PROFILES = "profiles"
RESOURCE_CATEGORIES = "categories"
RESOURCE_BOOKS = "books"
RESOURCE_CART_ITEMS = "cart_items"
RESOURCE_ORDERS = "orders"
RESOURCE_ORDER_ITEMS = "order_items"
RESOURCE_REVIEWS = "reviews"

VALID_RESOURCES = frozenset(
    {
        RESOURCE_PROFILES,
        RESOURCE_CATEGORIES,
        RESOURCE_BOOKS,
        RESOURCE_CART_ITEMS,
        RESOURCE_ORDERS,
        RESOURCE_ORDER_ITEMS,
        RESOURCE_REVIEWS,
    }
)

PERMISSION_DENIED = "PERMISSION_DENIED"
