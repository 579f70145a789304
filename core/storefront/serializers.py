"""
Storefront Workflows - Row Serialization
========================================
JSON-safe dict views of storefront rows. Money stays decimal-exact as strings.
"""

from __future__ import annotations

from decimal import Decimal
from typing import Any, Iterable, Optional


def _money(value: Optional[Decimal]) -> Optional[str]:
    if value is None:
        return None
    return str(Decimal(value).quantize(Decimal("0.01")))


def _timestamp(value) -> Optional[str]:
    return value.isoformat() if value is not None else None


def _optional_id(value: Any) -> Optional[str]:
    return str(value) if value is not None else None


def serialize_category(category) -> dict[str, Any]:
    return {
        "id": str(category.id),
        "name": category.name,
        "description": category.description,
        "created_at": _timestamp(category.created_at),
    }


def serialize_book(book) -> dict[str, Any]:
    return {
        "id": str(book.id),
        "title": book.title,
        "author": book.author,
        "isbn": book.isbn,
        "description": book.description,
        "price": _money(book.price),
        "original_price": _money(book.original_price),
        "category_id": _optional_id(book.category_id),
        "image_url": book.image_url,
        "stock_quantity": book.stock_quantity,
        "rating": str(book.rating) if book.rating is not None else None,
        "review_count": book.review_count,
        "is_featured": book.is_featured,
        "created_at": _timestamp(book.created_at),
        "updated_at": _timestamp(book.updated_at),
    }


def serialize_cart_item(item) -> dict[str, Any]:
    return {
        "id": str(item.id),
        "book_id": str(item.book_id),
        "title": item.book.title,
        "unit_price": _money(item.book.price),
        "quantity": item.quantity,
        "subtotal": _money(item.book.price * item.quantity),
    }


def serialize_order_item(item) -> dict[str, Any]:
    return {
        "id": str(item.id),
        "order_id": str(item.order_id),
        "book_id": str(item.book_id),
        "quantity": item.quantity,
        "price": _money(item.price),
    }


def serialize_order(order, items: Optional[Iterable[Any]] = None) -> dict[str, Any]:
    payload = {
        "id": str(order.id),
        "owner_id": str(order.owner_id),
        "total_amount": _money(order.total_amount),
        "status": order.status,
        "shipping_address": order.shipping_address,
        "created_at": _timestamp(order.created_at),
        "updated_at": _timestamp(order.updated_at),
    }
    if items is not None:
        payload["items"] = [serialize_order_item(item) for item in items]
    return payload


def serialize_review(review) -> dict[str, Any]:
    return {
        "id": str(review.id),
        "owner_id": str(review.owner_id),
        "book_id": str(review.book_id),
        "rating": review.rating,
        "comment": review.comment,
        "created_at": _timestamp(review.created_at),
    }
