"""
Storefront HTTP API - Framework-Agnostic Handlers
=================================================
Pure handler functions over contracts and injected dependencies.

Every handler takes the acting CallerContext, a request contract (or a
path id) and HttpApiDependencies, and returns a response payload dict.
Failures raised by the storefront workflows are mapped to error payloads;
handlers never raise for a denial.
"""

from __future__ import annotations

import uuid
from typing import Any, Callable

from core.access.caller import CallerContext
from core.http_api.contracts import (
    BookListRequest,
    BookWriteHttpRequest,
    CartItemAddHttpRequest,
    CartItemQuantityHttpRequest,
    CategoryWriteHttpRequest,
    CheckoutHttpRequest,
    OrderStatusHttpRequest,
    PrincipalBlockHttpRequest,
    PrincipalRoleHttpRequest,
    ProfileUpdateHttpRequest,
    ReviewSubmitHttpRequest,
)
from core.http_api.dependencies import HttpApiDependencies
from core.http_api.errors import exception_response, success_response
from core.storefront import service


def _run(operation: Callable[[], Any]) -> dict[str, Any]:
    try:
        return success_response(operation())
    except Exception as exc:
        return exception_response(exc)


def _items(rows: list[dict[str, Any]]) -> dict[str, Any]:
    return {"items": rows, "count": len(rows)}


# ══════════════════════════════════════════════════════════════
# CATALOG
# ══════════════════════════════════════════════════════════════

def list_categories(caller: CallerContext, dependencies: HttpApiDependencies) -> dict[str, Any]:
    return _run(
        lambda: _items(service.list_categories(caller, gateway=dependencies.gateway))
    )


def post_category(
    caller: CallerContext,
    request: CategoryWriteHttpRequest,
    dependencies: HttpApiDependencies,
) -> dict[str, Any]:
    return _run(
        lambda: service.create_category(
            caller,
            name=request.name,
            description=request.description,
            gateway=dependencies.gateway,
        )
    )


def patch_category(
    caller: CallerContext,
    category_id: uuid.UUID,
    request: CategoryWriteHttpRequest,
    dependencies: HttpApiDependencies,
) -> dict[str, Any]:
    return _run(
        lambda: service.update_category(
            caller, category_id, gateway=dependencies.gateway, **request.changes()
        )
    )


def delete_category(
    caller: CallerContext,
    category_id: uuid.UUID,
    dependencies: HttpApiDependencies,
) -> dict[str, Any]:
    def operation():
        service.delete_category(caller, category_id, gateway=dependencies.gateway)
        return {"deleted": str(category_id)}

    return _run(operation)


def list_books(
    caller: CallerContext,
    request: BookListRequest,
    dependencies: HttpApiDependencies,
) -> dict[str, Any]:
    return _run(
        lambda: _items(
            service.list_books(
                caller,
                category_id=request.category_id,
                featured=request.featured,
                search=request.search,
                gateway=dependencies.gateway,
            )
        )
    )


def get_book(caller: CallerContext, book_id: uuid.UUID, dependencies: HttpApiDependencies) -> dict[str, Any]:
    return _run(lambda: service.get_book(caller, book_id, gateway=dependencies.gateway))


def post_book(
    caller: CallerContext,
    request: BookWriteHttpRequest,
    dependencies: HttpApiDependencies,
) -> dict[str, Any]:
    return _run(
        lambda: service.create_book(caller, gateway=dependencies.gateway, **request.values)
    )


def patch_book(
    caller: CallerContext,
    book_id: uuid.UUID,
    request: BookWriteHttpRequest,
    dependencies: HttpApiDependencies,
) -> dict[str, Any]:
    return _run(
        lambda: service.update_book(
            caller, book_id, gateway=dependencies.gateway, **request.values
        )
    )


def delete_book(caller: CallerContext, book_id: uuid.UUID, dependencies: HttpApiDependencies) -> dict[str, Any]:
    def operation():
        service.delete_book(caller, book_id, gateway=dependencies.gateway)
        return {"deleted": str(book_id)}

    return _run(operation)


# ══════════════════════════════════════════════════════════════
# REVIEWS
# ══════════════════════════════════════════════════════════════

def list_reviews(caller: CallerContext, book_id: uuid.UUID, dependencies: HttpApiDependencies) -> dict[str, Any]:
    return _run(
        lambda: _items(service.list_reviews(caller, book_id, gateway=dependencies.gateway))
    )


def post_review(
    caller: CallerContext,
    request: ReviewSubmitHttpRequest,
    dependencies: HttpApiDependencies,
) -> dict[str, Any]:
    return _run(
        lambda: service.submit_review(
            caller,
            request.book_id,
            request.rating,
            request.comment,
            gateway=dependencies.gateway,
        )
    )


def delete_review(caller: CallerContext, review_id: uuid.UUID, dependencies: HttpApiDependencies) -> dict[str, Any]:
    def operation():
        service.delete_review(caller, review_id, gateway=dependencies.gateway)
        return {"deleted": str(review_id)}

    return _run(operation)


# ══════════════════════════════════════════════════════════════
# CART & ORDERS
# ══════════════════════════════════════════════════════════════

def get_cart(caller: CallerContext, dependencies: HttpApiDependencies) -> dict[str, Any]:
    return _run(lambda: service.list_cart(caller, gateway=dependencies.gateway))


def post_cart_item(
    caller: CallerContext,
    request: CartItemAddHttpRequest,
    dependencies: HttpApiDependencies,
) -> dict[str, Any]:
    return _run(
        lambda: service.add_to_cart(
            caller, request.book_id, request.quantity, gateway=dependencies.gateway
        )
    )


def patch_cart_item(
    caller: CallerContext,
    request: CartItemQuantityHttpRequest,
    dependencies: HttpApiDependencies,
) -> dict[str, Any]:
    def operation():
        item = service.set_cart_quantity(
            caller,
            request.cart_item_id,
            request.quantity,
            gateway=dependencies.gateway,
        )
        return item if item is not None else {"deleted": str(request.cart_item_id)}

    return _run(operation)


def delete_cart_item(caller: CallerContext, cart_item_id: uuid.UUID, dependencies: HttpApiDependencies) -> dict[str, Any]:
    def operation():
        service.remove_from_cart(caller, cart_item_id, gateway=dependencies.gateway)
        return {"deleted": str(cart_item_id)}

    return _run(operation)


def post_checkout(
    caller: CallerContext,
    request: CheckoutHttpRequest,
    dependencies: HttpApiDependencies,
) -> dict[str, Any]:
    return _run(
        lambda: service.place_order(
            caller, request.shipping_address, gateway=dependencies.gateway
        )
    )


def list_orders(caller: CallerContext, dependencies: HttpApiDependencies) -> dict[str, Any]:
    return _run(lambda: _items(service.list_orders(caller, gateway=dependencies.gateway)))


def get_order(caller: CallerContext, order_id: uuid.UUID, dependencies: HttpApiDependencies) -> dict[str, Any]:
    return _run(lambda: service.get_order(caller, order_id, gateway=dependencies.gateway))


def list_order_items(caller: CallerContext, order_id: uuid.UUID, dependencies: HttpApiDependencies) -> dict[str, Any]:
    return _run(
        lambda: _items(
            service.list_order_items(caller, order_id, gateway=dependencies.gateway)
        )
    )


def post_order_status(
    caller: CallerContext,
    request: OrderStatusHttpRequest,
    dependencies: HttpApiDependencies,
) -> dict[str, Any]:
    return _run(
        lambda: service.update_order_status(
            caller, request.order_id, request.status, gateway=dependencies.gateway
        )
    )


# ══════════════════════════════════════════════════════════════
# PROFILE & ADMINISTRATION
# ══════════════════════════════════════════════════════════════

def get_profile(caller: CallerContext, dependencies: HttpApiDependencies) -> dict[str, Any]:
    return _run(lambda: service.get_profile(caller, gateway=dependencies.gateway))


def patch_profile(
    caller: CallerContext,
    request: ProfileUpdateHttpRequest,
    dependencies: HttpApiDependencies,
) -> dict[str, Any]:
    return _run(
        lambda: service.update_profile(
            caller, gateway=dependencies.gateway, **request.changes()
        )
    )


def list_principals(
    caller: CallerContext,
    dependencies: HttpApiDependencies,
    search: str | None = None,
) -> dict[str, Any]:
    return _run(
        lambda: _items(
            service.list_principals(caller, search=search, gateway=dependencies.gateway)
        )
    )


def post_principal_block(
    caller: CallerContext,
    request: PrincipalBlockHttpRequest,
    dependencies: HttpApiDependencies,
) -> dict[str, Any]:
    return _run(
        lambda: service.set_principal_blocked(
            caller,
            request.principal_id,
            request.blocked,
            gateway=dependencies.gateway,
        )
    )


def post_principal_role(
    caller: CallerContext,
    request: PrincipalRoleHttpRequest,
    dependencies: HttpApiDependencies,
) -> dict[str, Any]:
    return _run(
        lambda: service.set_principal_role(
            caller,
            request.principal_id,
            request.role,
            gateway=dependencies.gateway,
        )
    )
