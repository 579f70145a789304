"""
Storefront Orders Store - Relational Order State
================================================
Orders are owned by the principal that placed them. Ownership is fixed
at insert time; there is no path that rewrites it.
"""

from __future__ import annotations

import uuid

from django.db import models


class OrderStatus(models.TextChoices):
    PENDING = "pending", "Pending"
    CONFIRMED = "confirmed", "Confirmed"
    SHIPPED = "shipped", "Shipped"
    DELIVERED = "delivered", "Delivered"
    CANCELLED = "cancelled", "Cancelled"


class Order(models.Model):
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    owner = models.ForeignKey(
        "core_identity_store.Principal",
        on_delete=models.CASCADE,
        related_name="orders",
        db_column="user_id",
    )
    total_amount = models.DecimalField(max_digits=10, decimal_places=2)
    status = models.CharField(
        max_length=20,
        choices=OrderStatus.choices,
        default=OrderStatus.PENDING,
    )
    shipping_address = models.TextField()
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = "storefront_orders"
        ordering = ["-created_at", "id"]
        indexes = [
            models.Index(fields=["owner", "status"], name="idx_order_owner_status"),
        ]

    def __str__(self) -> str:
        return f"{self.id} ({self.owner_id}, {self.status})"


class OrderItem(models.Model):
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    order = models.ForeignKey(
        Order,
        on_delete=models.CASCADE,
        related_name="items",
    )
    book = models.ForeignKey(
        "core_catalog_store.Book",
        on_delete=models.PROTECT,
        related_name="order_items",
    )
    quantity = models.IntegerField()
    price = models.DecimalField(max_digits=10, decimal_places=2)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = "storefront_order_items"
        ordering = ["created_at", "id"]

    def __str__(self) -> str:
        return f"{self.order_id}:{self.book_id}x{self.quantity}"
