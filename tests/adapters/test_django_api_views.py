from __future__ import annotations

import json
import uuid
from decimal import Decimal

import pytest
from django.contrib.auth import get_user_model

from adapters.django_api.wiring import bootstrap_configured_admin
from core.catalog_store.models import Book
from core.identity_store.models import Principal
from core.orders_store.models import Order

pytestmark = pytest.mark.django_db(transaction=True)


def _identity(username: str, *, role: str = "customer"):
    user = get_user_model().objects.create_user(
        username=username,
        email=f"{username}@example.com",
        password="secret-pass-123",
    )
    Principal.objects.filter(pk=user.pk).update(role=role)
    return user


def _post(client, url: str, body: dict, method: str = "post"):
    return getattr(client, method)(
        url,
        data=json.dumps(body),
        content_type="application/json",
    )


@pytest.fixture
def book():
    return Book.objects.create(title="Dune", author="Frank Herbert", price=Decimal("12.50"))


@pytest.fixture
def alice_client(client):
    client.force_login(_identity("alice"))
    return client


def test_anonymous_reads_catalog(client, book):
    response = client.get("/v1/books", {"search": "dune"})
    assert response.status_code == 200
    payload = response.json()
    assert payload["ok"] is True
    assert [item["id"] for item in payload["data"]["items"]] == [str(book.pk)]

    response = client.get(f"/v1/books/{book.pk}")
    assert response.status_code == 200
    assert response.json()["data"]["price"] == "12.50"


def test_anonymous_profile_read_is_permission_denied(client):
    response = client.get("/v1/profile")
    assert response.status_code == 403
    error = response.json()["error"]
    assert error["code"] == "PERMISSION_DENIED"
    assert error["details"] == {"resource": "profiles", "operation": "select"}


def test_checkout_flow(alice_client, book):
    response = _post(alice_client, "/v1/cart", {"book_id": str(book.pk), "quantity": 2})
    assert response.status_code == 200
    assert response.json()["data"]["quantity"] == 2

    response = _post(alice_client, "/v1/orders", {"shipping_address": "1 Main Street"})
    assert response.status_code == 200
    order = response.json()["data"]
    assert order["status"] == "confirmed"
    assert order["total_amount"] == "25.00"

    response = alice_client.get(f"/v1/orders/{order['id']}/items")
    assert response.status_code == 200
    assert response.json()["data"]["count"] == 1


def test_empty_cart_checkout_is_bad_request(alice_client):
    response = _post(alice_client, "/v1/orders", {"shipping_address": "1 Main Street"})
    assert response.status_code == 400
    assert response.json()["error"]["code"] == "EMPTY_CART"


def test_customer_cannot_change_order_status(client, book):
    alice = _identity("alice")
    client.force_login(alice)
    _post(client, "/v1/cart", {"book_id": str(book.pk)})
    order_id = _post(client, "/v1/orders", {"shipping_address": "1 Main Street"}).json()["data"]["id"]

    response = _post(client, f"/v1/orders/{order_id}/status", {"status": "delivered"})
    assert response.status_code == 403

    client.force_login(_identity("boss", role="admin"))
    response = _post(client, f"/v1/orders/{order_id}/status", {"status": "delivered"})
    assert response.status_code == 200
    assert Order.objects.get(pk=order_id).status == "delivered"


def test_profile_patch_rejects_role_field(alice_client):
    response = _post(alice_client, "/v1/profile", {"role": "admin"}, method="patch")
    assert response.status_code == 400
    assert response.json()["error"]["code"] == "INVALID_REQUEST"

    response = _post(alice_client, "/v1/profile", {"phone": "555-0100"}, method="patch")
    assert response.status_code == 200
    assert response.json()["data"]["phone"] == "555-0100"
    assert response.json()["data"]["role"] == "customer"


def test_duplicate_review_is_conflict(alice_client, book):
    url = f"/v1/books/{book.pk}/reviews"
    assert _post(alice_client, url, {"rating": 5}).status_code == 200

    response = _post(alice_client, url, {"rating": 4})
    assert response.status_code == 409
    assert response.json()["error"]["code"] == "DUPLICATE_REVIEW"


def test_duplicate_category_is_storage_conflict(client):
    client.force_login(_identity("boss", role="admin"))
    assert _post(client, "/v1/categories", {"name": "Poetry"}).status_code == 200

    response = _post(client, "/v1/categories", {"name": "Poetry"})
    assert response.status_code == 409
    assert response.json()["error"]["code"] == "CONFLICT"


def test_admin_blocks_principal(client):
    alice = _identity("alice")
    client.force_login(_identity("boss", role="admin"))

    response = _post(client, f"/v1/admin/principals/{alice.pk}/block", {"blocked": True})
    assert response.status_code == 200
    assert Principal.objects.get(pk=alice.pk).is_blocked is True

    response = _post(client, f"/v1/admin/principals/{alice.pk}/role", {"role": "owner"})
    assert response.status_code == 400
    assert response.json()["error"]["code"] == "INVALID_ROLE"


def test_malformed_requests(alice_client):
    response = alice_client.post("/v1/cart", data="not json", content_type="application/json")
    assert response.status_code == 400
    assert response.json()["error"]["code"] == "INVALID_REQUEST"

    response = _post(alice_client, "/v1/cart", {"quantity": 1})
    assert response.status_code == 400
    assert response.json()["error"]["message"] == "book_id is required."

    response = alice_client.get(f"/v1/orders/{uuid.uuid4()}")
    assert response.status_code == 403


def test_method_not_allowed(client):
    response = client.put("/v1/books")
    assert response.status_code == 405
    assert response.json()["error"]["code"] == "METHOD_NOT_ALLOWED"


def test_bootstrap_configured_admin(settings):
    settings.STOREFRONT_ADMIN_EMAIL = ""
    assert bootstrap_configured_admin() is None

    settings.STOREFRONT_ADMIN_EMAIL = "owner@example.com"
    principal = bootstrap_configured_admin(password="pw-123456")
    assert principal["role"] == "admin"
    assert Principal.objects.filter(email="owner@example.com").count() == 1


@pytest.mark.parametrize(
    "values",
    [
        {"price": "abc"},
        {"category_id": "not-a-uuid"},
        {"is_featured": "maybe"},
    ],
)
def test_book_write_with_bad_values_is_bad_request(client, book, values):
    client.force_login(_identity("boss", role="admin"))

    response = _post(client, "/v1/books", {"title": "Emma", "author": "Jane Austen", "price": "7.25", **values})
    assert response.status_code == 400
    assert response.json()["error"]["code"] == "INVALID_REQUEST"

    response = _post(client, f"/v1/books/{book.pk}", values, method="patch")
    assert response.status_code == 400
    assert response.json()["error"]["code"] == "INVALID_REQUEST"
    assert not Book.objects.filter(title="Emma").exists()
