"""
Storefront Workflows - Service Layer
====================================
The create/read/update/delete calls the storefront UI performs, each
routed through a ProtectedTable on behalf of the caller. Nothing here
decides authorization: the access policy engine does.

The one privileged write is the denormalized book rating refresh after
a review change, which mirrors a database-side aggregate.
"""

from __future__ import annotations

import logging
from decimal import Decimal, InvalidOperation
from typing import Any, Optional

from django.db import IntegrityError, transaction
from django.db.models import Avg, Count

from core.access.bootstrap import get_default_gateway
from core.access.caller import CallerContext
from core.access.constants import (
    OP_INSERT,
    RESOURCE_BOOKS,
    RESOURCE_CART_ITEMS,
    RESOURCE_CATEGORIES,
    RESOURCE_ORDER_ITEMS,
    RESOURCE_ORDERS,
    RESOURCE_PROFILES,
    RESOURCE_REVIEWS,
)
from core.access.exceptions import AccessDenied
from core.access.gateway import AccessGateway, ProtectedTable
from core.identity.roles import VALID_ROLES
from core.identity_store.service import serialize_principal
from core.orders_store.models import OrderStatus
from core.orders_store.status import check_transition
from core.storefront.errors import (
    DuplicateReview,
    EmptyCart,
    InvalidQuantity,
    InvalidRating,
    InvalidRole,
    InvalidShippingAddress,
)
from core.storefront.serializers import (
    serialize_book,
    serialize_cart_item,
    serialize_category,
    serialize_order,
    serialize_order_item,
    serialize_review,
)

logger = logging.getLogger("storefront.orders")

PROFILE_CONTACT_FIELDS = frozenset({"full_name", "phone", "address"})
CATEGORY_WRITABLE_FIELDS = frozenset({"name", "description"})
BOOK_WRITABLE_FIELDS = frozenset(
    {
        "title",
        "author",
        "isbn",
        "description",
        "price",
        "original_price",
        "category_id",
        "image_url",
        "stock_quantity",
        "is_featured",
    }
)


def _table(resource: str, caller: CallerContext, gateway: Optional[AccessGateway]) -> ProtectedTable:
    return (gateway or get_default_gateway()).table(resource, caller)


def _writable(values: dict[str, Any], allowed: frozenset[str], *, resource: str) -> dict[str, Any]:
    unknown = sorted(set(values) - allowed)
    if unknown:
        raise ValueError(f"Fields {unknown} cannot be written on {resource}.")
    return dict(values)


def _money(value: Any, field_name: str) -> Decimal:
    try:
        amount = Decimal(str(value))
    except InvalidOperation:
        raise ValueError(f"{field_name} must be a decimal amount.") from None
    if not amount.is_finite():
        raise ValueError(f"{field_name} must be a decimal amount.")
    return amount


def _positive_int(value: Any) -> int:
    if isinstance(value, bool) or not isinstance(value, int) or value < 1:
        raise InvalidQuantity(value)
    return value


# ══════════════════════════════════════════════════════════════
# CATALOG
# ══════════════════════════════════════════════════════════════

def list_categories(caller: CallerContext, *, gateway: Optional[AccessGateway] = None) -> list[dict[str, Any]]:
    categories = _table(RESOURCE_CATEGORIES, caller, gateway)
    return [serialize_category(category) for category in categories.list()]


def create_category(
    caller: CallerContext,
    *,
    name: str,
    description: Optional[str] = None,
    gateway: Optional[AccessGateway] = None,
) -> dict[str, Any]:
    if not isinstance(name, str) or not name.strip():
        raise ValueError("name must be a non-empty string.")
    categories = _table(RESOURCE_CATEGORIES, caller, gateway)
    category = categories.insert(name=name.strip(), description=description)
    return serialize_category(category)


def update_category(
    caller: CallerContext,
    category_id: Any,
    *,
    gateway: Optional[AccessGateway] = None,
    **changes,
) -> dict[str, Any]:
    changes = _writable(changes, CATEGORY_WRITABLE_FIELDS, resource=RESOURCE_CATEGORIES)
    categories = _table(RESOURCE_CATEGORIES, caller, gateway)
    return serialize_category(categories.update(category_id, **changes))


def delete_category(caller: CallerContext, category_id: Any, *, gateway: Optional[AccessGateway] = None) -> None:
    _table(RESOURCE_CATEGORIES, caller, gateway).delete(category_id)


def list_books(
    caller: CallerContext,
    *,
    category_id: Any = None,
    featured: Optional[bool] = None,
    search: Optional[str] = None,
    gateway: Optional[AccessGateway] = None,
) -> list[dict[str, Any]]:
    filters: dict[str, Any] = {}
    if category_id is not None:
        filters["category_id"] = category_id
    if featured is not None:
        filters["is_featured"] = bool(featured)

    books = _table(RESOURCE_BOOKS, caller, gateway)
    rows = books.list(**filters)
    if search:
        needle = search.strip().lower()
        rows = [
            book
            for book in rows
            if needle in book.title.lower() or needle in book.author.lower()
        ]
    return [serialize_book(book) for book in rows]


def get_book(caller: CallerContext, book_id: Any, *, gateway: Optional[AccessGateway] = None) -> dict[str, Any]:
    return serialize_book(_table(RESOURCE_BOOKS, caller, gateway).get(book_id))


def create_book(caller: CallerContext, *, gateway: Optional[AccessGateway] = None, **values) -> dict[str, Any]:
    values = _writable(values, BOOK_WRITABLE_FIELDS, resource=RESOURCE_BOOKS)
    for required in ("title", "author", "price"):
        if values.get(required) in (None, ""):
            raise ValueError(f"{required} is required.")
    values["price"] = _money(values["price"], "price")
    if values.get("original_price") is not None:
        values["original_price"] = _money(values["original_price"], "original_price")
    book = _table(RESOURCE_BOOKS, caller, gateway).insert(**values)
    return serialize_book(book)


def update_book(
    caller: CallerContext,
    book_id: Any,
    *,
    gateway: Optional[AccessGateway] = None,
    **changes,
) -> dict[str, Any]:
    changes = _writable(changes, BOOK_WRITABLE_FIELDS, resource=RESOURCE_BOOKS)
    for money_field in ("price", "original_price"):
        if changes.get(money_field) is not None:
            changes[money_field] = _money(changes[money_field], money_field)
    return serialize_book(_table(RESOURCE_BOOKS, caller, gateway).update(book_id, **changes))


def delete_book(caller: CallerContext, book_id: Any, *, gateway: Optional[AccessGateway] = None) -> None:
    _table(RESOURCE_BOOKS, caller, gateway).delete(book_id)


# ══════════════════════════════════════════════════════════════
# CART
# ══════════════════════════════════════════════════════════════

def list_cart(caller: CallerContext, *, gateway: Optional[AccessGateway] = None) -> dict[str, Any]:
    cart = _table(RESOURCE_CART_ITEMS, caller, gateway)
    items = cart.list(owner_id=caller.principal_id, related=("book",))
    total = sum((item.book.price * item.quantity for item in items), Decimal("0"))
    return {
        "items": [serialize_cart_item(item) for item in items],
        "total": str(total.quantize(Decimal("0.01"))),
    }


def add_to_cart(
    caller: CallerContext,
    book_id: Any,
    quantity: int = 1,
    *,
    gateway: Optional[AccessGateway] = None,
) -> dict[str, Any]:
    quantity = _positive_int(quantity)
    book = _table(RESOURCE_BOOKS, caller, gateway).get(book_id)
    cart = _table(RESOURCE_CART_ITEMS, caller, gateway)

    with transaction.atomic():
        existing = cart.list(owner_id=caller.principal_id, book_id=book.pk, related=("book",))
        if existing:
            item = cart.update(existing[0].pk, quantity=existing[0].quantity + quantity)
        else:
            item = cart.insert(owner_id=caller.principal_id, book_id=book.pk, quantity=quantity)
    return serialize_cart_item(item)


def set_cart_quantity(
    caller: CallerContext,
    cart_item_id: Any,
    quantity: int,
    *,
    gateway: Optional[AccessGateway] = None,
) -> Optional[dict[str, Any]]:
    """Quantity of zero or less removes the line."""
    if isinstance(quantity, bool) or not isinstance(quantity, int):
        raise InvalidQuantity(quantity)
    cart = _table(RESOURCE_CART_ITEMS, caller, gateway)
    if quantity <= 0:
        cart.delete(cart_item_id)
        return None
    return serialize_cart_item(cart.update(cart_item_id, quantity=quantity))


def remove_from_cart(caller: CallerContext, cart_item_id: Any, *, gateway: Optional[AccessGateway] = None) -> None:
    _table(RESOURCE_CART_ITEMS, caller, gateway).delete(cart_item_id)


# ══════════════════════════════════════════════════════════════
# CHECKOUT & ORDERS
# ══════════════════════════════════════════════════════════════

def place_order(
    caller: CallerContext,
    shipping_address: Optional[str],
    *,
    gateway: Optional[AccessGateway] = None,
) -> dict[str, Any]:
    """
    Turn the caller's cart into a confirmed order.

    Order row, line items and cart clearing commit together or not at all.
    """
    if caller.is_anonymous:
        raise AccessDenied(RESOURCE_ORDERS, OP_INSERT)

    address = (shipping_address or "").strip()
    if not address:
        raise InvalidShippingAddress()

    cart = _table(RESOURCE_CART_ITEMS, caller, gateway)
    orders = _table(RESOURCE_ORDERS, caller, gateway)
    order_items = _table(RESOURCE_ORDER_ITEMS, caller, gateway)

    with transaction.atomic():
        lines = cart.list(owner_id=caller.principal_id, related=("book",))
        if not lines:
            raise EmptyCart()

        total = sum((line.book.price * line.quantity for line in lines), Decimal("0"))
        order = orders.insert(
            owner_id=caller.principal_id,
            total_amount=total,
            shipping_address=address,
            status=OrderStatus.CONFIRMED.value,
        )
        items = [
            order_items.insert(
                order_id=order.pk,
                book_id=line.book_id,
                quantity=line.quantity,
                price=line.book.price,
            )
            for line in lines
        ]
        for line in lines:
            cart.delete(line.pk)

    logger.info(
        f"Order {order.pk} placed by {caller.principal_id}, "
        f"{len(items)} line(s), total {total}"
    )
    return serialize_order(order, items)


def list_orders(caller: CallerContext, *, gateway: Optional[AccessGateway] = None) -> list[dict[str, Any]]:
    orders = _table(RESOURCE_ORDERS, caller, gateway)
    order_items = _table(RESOURCE_ORDER_ITEMS, caller, gateway)
    return [
        serialize_order(order, order_items.list(order_id=order.pk, related=("order",)))
        for order in orders.list()
    ]


def get_order(caller: CallerContext, order_id: Any, *, gateway: Optional[AccessGateway] = None) -> dict[str, Any]:
    order = _table(RESOURCE_ORDERS, caller, gateway).get(order_id)
    items = _table(RESOURCE_ORDER_ITEMS, caller, gateway).list(order_id=order.pk, related=("order",))
    return serialize_order(order, items)


def list_order_items(
    caller: CallerContext,
    order_id: Any,
    *,
    gateway: Optional[AccessGateway] = None,
) -> list[dict[str, Any]]:
    """Items of one order. A hidden order is a denial, not an empty list."""
    order = _table(RESOURCE_ORDERS, caller, gateway).get(order_id)
    order_items = _table(RESOURCE_ORDER_ITEMS, caller, gateway)
    items = order_items.list(order_id=order.pk, related=("order",))
    return [serialize_order_item(item) for item in items]


def update_order_status(
    caller: CallerContext,
    order_id: Any,
    status: str,
    *,
    gateway: Optional[AccessGateway] = None,
) -> dict[str, Any]:
    orders = _table(RESOURCE_ORDERS, caller, gateway)
    with transaction.atomic():
        current = orders.get(order_id)
        orders.admit_update(current, status=status)
        requested = check_transition(current.status, status)
        order = orders.update(order_id, status=requested)

    logger.info(
        f"Order {order.pk} status {current.status} -> {requested} "
        f"by {caller.principal_id}"
    )
    return serialize_order(order)


# ══════════════════════════════════════════════════════════════
# REVIEWS
# ══════════════════════════════════════════════════════════════

def _validate_rating(rating: Any) -> int:
    if isinstance(rating, bool) or not isinstance(rating, int) or not 1 <= rating <= 5:
        raise InvalidRating(rating)
    return rating


def _refresh_book_rating(book_id: Any) -> None:
    from core.catalog_store.models import Book, Review

    aggregate = Review.objects.filter(book_id=book_id).aggregate(
        average=Avg("rating"),
        count=Count("id"),
    )
    average = aggregate["average"] or 0
    Book.objects.filter(pk=book_id).update(
        rating=Decimal(str(average)).quantize(Decimal("0.1")),
        review_count=aggregate["count"],
    )


def list_reviews(caller: CallerContext, book_id: Any, *, gateway: Optional[AccessGateway] = None) -> list[dict[str, Any]]:
    reviews = _table(RESOURCE_REVIEWS, caller, gateway)
    return [serialize_review(review) for review in reviews.list(book_id=book_id)]


def submit_review(
    caller: CallerContext,
    book_id: Any,
    rating: int,
    comment: Optional[str] = None,
    *,
    gateway: Optional[AccessGateway] = None,
) -> dict[str, Any]:
    rating = _validate_rating(rating)
    book = _table(RESOURCE_BOOKS, caller, gateway).get(book_id)
    reviews = _table(RESOURCE_REVIEWS, caller, gateway)

    if caller.principal_id is not None and reviews.exists(
        owner_id=caller.principal_id, book_id=book.pk
    ):
        raise DuplicateReview(book.pk)

    cleaned_comment = (comment or "").strip() or None
    try:
        with transaction.atomic():
            review = reviews.insert(
                owner_id=caller.principal_id,
                book_id=book.pk,
                rating=rating,
                comment=cleaned_comment,
            )
            _refresh_book_rating(book.pk)
    except IntegrityError as exc:
        raise DuplicateReview(book.pk) from exc
    return serialize_review(review)


def update_review(
    caller: CallerContext,
    review_id: Any,
    *,
    rating: Optional[int] = None,
    comment: Optional[str] = None,
    gateway: Optional[AccessGateway] = None,
) -> dict[str, Any]:
    changes: dict[str, Any] = {}
    if rating is not None:
        changes["rating"] = _validate_rating(rating)
    if comment is not None:
        changes["comment"] = comment.strip() or None
    reviews = _table(RESOURCE_REVIEWS, caller, gateway)
    with transaction.atomic():
        review = reviews.update(review_id, **changes)
        _refresh_book_rating(review.book_id)
    return serialize_review(review)


def delete_review(caller: CallerContext, review_id: Any, *, gateway: Optional[AccessGateway] = None) -> None:
    reviews = _table(RESOURCE_REVIEWS, caller, gateway)
    with transaction.atomic():
        review = reviews.get(review_id)
        reviews.delete(review_id)
        _refresh_book_rating(review.book_id)


# ══════════════════════════════════════════════════════════════
# PROFILE & ADMINISTRATION
# ══════════════════════════════════════════════════════════════

def get_profile(caller: CallerContext, *, gateway: Optional[AccessGateway] = None) -> dict[str, Any]:
    profiles = _table(RESOURCE_PROFILES, caller, gateway)
    return serialize_principal(profiles.get(caller.principal_id))


def update_profile(caller: CallerContext, *, gateway: Optional[AccessGateway] = None, **changes) -> dict[str, Any]:
    changes = _writable(changes, PROFILE_CONTACT_FIELDS, resource=RESOURCE_PROFILES)
    cleaned = {name: ("" if value is None else str(value).strip()) for name, value in changes.items()}
    profiles = _table(RESOURCE_PROFILES, caller, gateway)
    return serialize_principal(profiles.update(caller.principal_id, **cleaned))


def list_principals(
    caller: CallerContext,
    *,
    search: Optional[str] = None,
    gateway: Optional[AccessGateway] = None,
) -> list[dict[str, Any]]:
    profiles = _table(RESOURCE_PROFILES, caller, gateway)
    rows = profiles.list(order_by=("-created_at",))
    if search:
        needle = search.strip().lower()
        rows = [
            row
            for row in rows
            if needle in row.email.lower() or needle in row.full_name.lower()
        ]
    return [serialize_principal(row) for row in rows]


def set_principal_blocked(
    caller: CallerContext,
    principal_id: Any,
    blocked: bool,
    *,
    gateway: Optional[AccessGateway] = None,
) -> dict[str, Any]:
    if not isinstance(blocked, bool):
        raise ValueError("blocked must be a boolean.")
    profiles = _table(RESOURCE_PROFILES, caller, gateway)
    return serialize_principal(profiles.update(principal_id, is_blocked=blocked))


def set_principal_role(
    caller: CallerContext,
    principal_id: Any,
    role: str,
    *,
    gateway: Optional[AccessGateway] = None,
) -> dict[str, Any]:
    if role not in VALID_ROLES:
        raise InvalidRole(role)
    profiles = _table(RESOURCE_PROFILES, caller, gateway)
    return serialize_principal(profiles.update(principal_id, role=role))
