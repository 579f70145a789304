"""
Storefront HTTP API - Contracts
===============================
Framework-agnostic request/response DTOs for storefront endpoints.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from typing import Any, Optional


def _require_uuid(value, field_name: str) -> None:
    if not isinstance(value, uuid.UUID):
        raise ValueError(f"{field_name} must be UUID.")


def _require_int(value, field_name: str) -> None:
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValueError(f"{field_name} must be an integer.")


@dataclass(frozen=True)
class BookListRequest:
    category_id: Optional[uuid.UUID] = None
    featured: Optional[bool] = None
    search: Optional[str] = None

    def __post_init__(self):
        if self.category_id is not None:
            _require_uuid(self.category_id, "category_id")
        if self.featured is not None and not isinstance(self.featured, bool):
            raise ValueError("featured must be a boolean or None.")
        if self.search is not None and not isinstance(self.search, str):
            raise ValueError("search must be a string or None.")


@dataclass(frozen=True)
class CategoryWriteHttpRequest:
    name: Optional[str] = None
    description: Optional[str] = None

    def __post_init__(self):
        if self.name is not None and (not isinstance(self.name, str) or not self.name.strip()):
            raise ValueError("name must be a non-empty string.")

    def changes(self) -> dict[str, Any]:
        return {
            key: value
            for key, value in (("name", self.name), ("description", self.description))
            if value is not None
        }


@dataclass(frozen=True)
class BookWriteHttpRequest:
    values: dict[str, Any] = field(default_factory=dict)

    def __post_init__(self):
        if not isinstance(self.values, dict):
            raise ValueError("values must be an object.")
        if not self.values:
            raise ValueError("values must not be empty.")


@dataclass(frozen=True)
class CartItemAddHttpRequest:
    book_id: uuid.UUID
    quantity: int = 1

    def __post_init__(self):
        _require_uuid(self.book_id, "book_id")
        _require_int(self.quantity, "quantity")


@dataclass(frozen=True)
class CartItemQuantityHttpRequest:
    cart_item_id: uuid.UUID
    quantity: int

    def __post_init__(self):
        _require_uuid(self.cart_item_id, "cart_item_id")
        _require_int(self.quantity, "quantity")


@dataclass(frozen=True)
class CheckoutHttpRequest:
    shipping_address: str

    def __post_init__(self):
        if not isinstance(self.shipping_address, str):
            raise ValueError("shipping_address must be a string.")


@dataclass(frozen=True)
class OrderStatusHttpRequest:
    order_id: uuid.UUID
    status: str

    def __post_init__(self):
        _require_uuid(self.order_id, "order_id")
        if not self.status or not isinstance(self.status, str):
            raise ValueError("status must be a non-empty string.")


@dataclass(frozen=True)
class ReviewSubmitHttpRequest:
    book_id: uuid.UUID
    rating: int
    comment: Optional[str] = None

    def __post_init__(self):
        _require_uuid(self.book_id, "book_id")
        _require_int(self.rating, "rating")
        if self.comment is not None and not isinstance(self.comment, str):
            raise ValueError("comment must be a string or None.")


@dataclass(frozen=True)
class ProfileUpdateHttpRequest:
    full_name: Optional[str] = None
    phone: Optional[str] = None
    address: Optional[str] = None

    def __post_init__(self):
        for name in ("full_name", "phone", "address"):
            value = getattr(self, name)
            if value is not None and not isinstance(value, str):
                raise ValueError(f"{name} must be a string or None.")

    def changes(self) -> dict[str, str]:
        return {
            name: getattr(self, name)
            for name in ("full_name", "phone", "address")
            if getattr(self, name) is not None
        }


@dataclass(frozen=True)
class PrincipalBlockHttpRequest:
    principal_id: str
    blocked: bool

    def __post_init__(self):
        if not self.principal_id or not isinstance(self.principal_id, str):
            raise ValueError("principal_id must be a non-empty string.")
        if not isinstance(self.blocked, bool):
            raise ValueError("blocked must be a boolean.")


@dataclass(frozen=True)
class PrincipalRoleHttpRequest:
    principal_id: str
    role: str

    def __post_init__(self):
        if not self.principal_id or not isinstance(self.principal_id, str):
            raise ValueError("principal_id must be a non-empty string.")
        if not self.role or not isinstance(self.role, str):
            raise ValueError("role must be a non-empty string.")


@dataclass(frozen=True)
class HttpApiErrorBody:
    code: str
    message: str
    details: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        return {
            "code": self.code,
            "message": self.message,
            "details": dict(self.details),
        }


@dataclass(frozen=True)
class HttpApiResponse:
    ok: bool
    data: Any = None
    error: Optional[HttpApiErrorBody] = None

    def to_dict(self) -> dict[str, Any]:
        if self.ok:
            return {"ok": True, "data": self.data}
        if self.error is None:
            raise ValueError("error must be set when ok is False.")
        return {"ok": False, "error": self.error.to_dict()}
