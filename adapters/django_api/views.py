"""
Storefront Django Adapter Views
===============================
Pass-through HTTP views over core/http_api handlers.
"""

from __future__ import annotations

import json
import uuid
from typing import Any

from django.http import HttpRequest, JsonResponse
from django.views.decorators.csrf import csrf_exempt

from adapters.django_api.wiring import build_dependencies, caller_from_request
from core.http_api import handlers
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
from core.http_api.errors import (
    INVALID_REQUEST,
    METHOD_NOT_ALLOWED,
    error_response,
    http_status_for,
)


def _json_error(code: str, message: str, status: int = 400) -> JsonResponse:
    return JsonResponse(
        error_response(code=code, message=message, details={}),
        status=status,
    )


def _respond(payload: dict[str, Any]) -> JsonResponse:
    return JsonResponse(payload, status=http_status_for(payload))


def _method_not_allowed() -> JsonResponse:
    return _json_error(
        METHOD_NOT_ALLOWED,
        "Method not allowed for this endpoint.",
        status=405,
    )


def _parse_uuid(value: Any, field_name: str) -> uuid.UUID:
    try:
        return uuid.UUID(str(value))
    except (TypeError, ValueError, AttributeError) as exc:
        raise ValueError(f"{field_name} must be a valid UUID.") from exc


def _parse_optional_uuid(value: Any, field_name: str) -> uuid.UUID | None:
    if value is None or value == "":
        return None
    return _parse_uuid(value, field_name)


def _parse_optional_bool(value: Any, field_name: str) -> bool | None:
    if value is None or value == "":
        return None
    lowered = str(value).strip().lower()
    if lowered in {"1", "true", "yes"}:
        return True
    if lowered in {"0", "false", "no"}:
        return False
    raise ValueError(f"{field_name} must be a boolean.")


def _parse_json_body(request: HttpRequest) -> dict[str, Any]:
    if not request.body:
        return {}
    try:
        parsed = json.loads(request.body.decode("utf-8"))
    except (UnicodeDecodeError, json.JSONDecodeError) as exc:
        raise ValueError("Request body must be valid JSON.") from exc
    if not isinstance(parsed, dict):
        raise ValueError("Request body must be a JSON object.")
    return parsed


def _dispatch(request: HttpRequest, call) -> JsonResponse:
    """
    Build the handler call from the request, then respond.

    `call(body)` parses the contract and returns a `(caller, dependencies)`
    closure that invokes the handler. Contract errors become INVALID_REQUEST.
    """
    caller = caller_from_request(request)
    try:
        body = _parse_json_body(request) if request.method in {"POST", "PATCH"} else {}
        bound = call(body)
    except KeyError as exc:
        return _json_error(INVALID_REQUEST, f"{exc.args[0]} is required.")
    except ValueError as exc:
        return _json_error(INVALID_REQUEST, str(exc))
    return _respond(bound(caller, build_dependencies()))


# ══════════════════════════════════════════════════════════════
# CATALOG
# ══════════════════════════════════════════════════════════════

@csrf_exempt
def categories_view(request: HttpRequest) -> JsonResponse:
    if request.method == "GET":
        return _dispatch(request, lambda body: handlers.list_categories)
    if request.method == "POST":
        def call(body):
            contract = CategoryWriteHttpRequest(
                name=body["name"],
                description=body.get("description"),
            )
            return lambda caller, deps: handlers.post_category(caller, contract, deps)

        return _dispatch(request, call)
    return _method_not_allowed()


@csrf_exempt
def category_detail_view(request: HttpRequest, category_id: uuid.UUID) -> JsonResponse:
    if request.method == "PATCH":
        def call(body):
            contract = CategoryWriteHttpRequest(
                name=body.get("name"),
                description=body.get("description"),
            )
            return lambda caller, deps: handlers.patch_category(
                caller, category_id, contract, deps
            )

        return _dispatch(request, call)
    if request.method == "DELETE":
        return _dispatch(
            request,
            lambda body: lambda caller, deps: handlers.delete_category(caller, category_id, deps),
        )
    return _method_not_allowed()


@csrf_exempt
def books_view(request: HttpRequest) -> JsonResponse:
    if request.method == "GET":
        def call(body):
            contract = BookListRequest(
                category_id=_parse_optional_uuid(request.GET.get("category_id"), "category_id"),
                featured=_parse_optional_bool(request.GET.get("featured"), "featured"),
                search=request.GET.get("search") or None,
            )
            return lambda caller, deps: handlers.list_books(caller, contract, deps)

        return _dispatch(request, call)
    if request.method == "POST":
        def call(body):
            contract = BookWriteHttpRequest(values=body)
            return lambda caller, deps: handlers.post_book(caller, contract, deps)

        return _dispatch(request, call)
    return _method_not_allowed()


@csrf_exempt
def book_detail_view(request: HttpRequest, book_id: uuid.UUID) -> JsonResponse:
    if request.method == "GET":
        return _dispatch(
            request,
            lambda body: lambda caller, deps: handlers.get_book(caller, book_id, deps),
        )
    if request.method == "PATCH":
        def call(body):
            contract = BookWriteHttpRequest(values=body)
            return lambda caller, deps: handlers.patch_book(caller, book_id, contract, deps)

        return _dispatch(request, call)
    if request.method == "DELETE":
        return _dispatch(
            request,
            lambda body: lambda caller, deps: handlers.delete_book(caller, book_id, deps),
        )
    return _method_not_allowed()


# ══════════════════════════════════════════════════════════════
# REVIEWS
# ══════════════════════════════════════════════════════════════

@csrf_exempt
def book_reviews_view(request: HttpRequest, book_id: uuid.UUID) -> JsonResponse:
    if request.method == "GET":
        return _dispatch(
            request,
            lambda body: lambda caller, deps: handlers.list_reviews(caller, book_id, deps),
        )
    if request.method == "POST":
        def call(body):
            contract = ReviewSubmitHttpRequest(
                book_id=book_id,
                rating=body["rating"],
                comment=body.get("comment"),
            )
            return lambda caller, deps: handlers.post_review(caller, contract, deps)

        return _dispatch(request, call)
    return _method_not_allowed()


@csrf_exempt
def review_detail_view(request: HttpRequest, review_id: uuid.UUID) -> JsonResponse:
    if request.method != "DELETE":
        return _method_not_allowed()
    return _dispatch(
        request,
        lambda body: lambda caller, deps: handlers.delete_review(caller, review_id, deps),
    )


# ══════════════════════════════════════════════════════════════
# CART & ORDERS
# ══════════════════════════════════════════════════════════════

@csrf_exempt
def cart_view(request: HttpRequest) -> JsonResponse:
    if request.method == "GET":
        return _dispatch(request, lambda body: handlers.get_cart)
    if request.method == "POST":
        def call(body):
            contract = CartItemAddHttpRequest(
                book_id=_parse_uuid(body["book_id"], "book_id"),
                quantity=body.get("quantity", 1),
            )
            return lambda caller, deps: handlers.post_cart_item(caller, contract, deps)

        return _dispatch(request, call)
    return _method_not_allowed()


@csrf_exempt
def cart_item_view(request: HttpRequest, cart_item_id: uuid.UUID) -> JsonResponse:
    if request.method == "PATCH":
        def call(body):
            contract = CartItemQuantityHttpRequest(
                cart_item_id=cart_item_id,
                quantity=body["quantity"],
            )
            return lambda caller, deps: handlers.patch_cart_item(caller, contract, deps)

        return _dispatch(request, call)
    if request.method == "DELETE":
        return _dispatch(
            request,
            lambda body: lambda caller, deps: handlers.delete_cart_item(caller, cart_item_id, deps),
        )
    return _method_not_allowed()


@csrf_exempt
def orders_view(request: HttpRequest) -> JsonResponse:
    if request.method == "GET":
        return _dispatch(request, lambda body: handlers.list_orders)
    if request.method == "POST":
        def call(body):
            contract = CheckoutHttpRequest(shipping_address=body["shipping_address"])
            return lambda caller, deps: handlers.post_checkout(caller, contract, deps)

        return _dispatch(request, call)
    return _method_not_allowed()


@csrf_exempt
def order_detail_view(request: HttpRequest, order_id: uuid.UUID) -> JsonResponse:
    if request.method != "GET":
        return _method_not_allowed()
    return _dispatch(
        request,
        lambda body: lambda caller, deps: handlers.get_order(caller, order_id, deps),
    )


@csrf_exempt
def order_items_view(request: HttpRequest, order_id: uuid.UUID) -> JsonResponse:
    if request.method != "GET":
        return _method_not_allowed()
    return _dispatch(
        request,
        lambda body: lambda caller, deps: handlers.list_order_items(caller, order_id, deps),
    )


@csrf_exempt
def order_status_view(request: HttpRequest, order_id: uuid.UUID) -> JsonResponse:
    if request.method != "POST":
        return _method_not_allowed()

    def call(body):
        contract = OrderStatusHttpRequest(order_id=order_id, status=body["status"])
        return lambda caller, deps: handlers.post_order_status(caller, contract, deps)

    return _dispatch(request, call)


# ══════════════════════════════════════════════════════════════
# PROFILE & ADMINISTRATION
# ══════════════════════════════════════════════════════════════

@csrf_exempt
def profile_view(request: HttpRequest) -> JsonResponse:
    if request.method == "GET":
        return _dispatch(request, lambda body: handlers.get_profile)
    if request.method == "PATCH":
        def call(body):
            unknown = sorted(set(body) - {"full_name", "phone", "address"})
            if unknown:
                raise ValueError(f"Fields {unknown} cannot be written on profiles.")
            contract = ProfileUpdateHttpRequest(**body)
            return lambda caller, deps: handlers.patch_profile(caller, contract, deps)

        return _dispatch(request, call)
    return _method_not_allowed()


@csrf_exempt
def principals_view(request: HttpRequest) -> JsonResponse:
    if request.method != "GET":
        return _method_not_allowed()
    search = request.GET.get("search") or None
    return _dispatch(
        request,
        lambda body: lambda caller, deps: handlers.list_principals(caller, deps, search=search),
    )


@csrf_exempt
def principal_block_view(request: HttpRequest, principal_id: str) -> JsonResponse:
    if request.method != "POST":
        return _method_not_allowed()

    def call(body):
        contract = PrincipalBlockHttpRequest(
            principal_id=principal_id,
            blocked=body["blocked"],
        )
        return lambda caller, deps: handlers.post_principal_block(caller, contract, deps)

    return _dispatch(request, call)


@csrf_exempt
def principal_role_view(request: HttpRequest, principal_id: str) -> JsonResponse:
    if request.method != "POST":
        return _method_not_allowed()

    def call(body):
        contract = PrincipalRoleHttpRequest(principal_id=principal_id, role=body["role"])
        return lambda caller, deps: handlers.post_principal_role(caller, contract, deps)

    return _dispatch(request, call)
