"""
Storefront Identity Store - Principal Registry
==============================================
One registry row per external identity. Rows are materialized by the
registration hook and removed only by cascading identity deletion.
"""

from __future__ import annotations

from django.conf import settings
from django.db import models


class PrincipalRole(models.TextChoices):
    CUSTOMER = "customer", "Customer"
    ADMIN = "admin", "Admin"


CONTACT_FIELDS = ("email", "full_name", "phone", "address")
PRIVILEGED_FIELDS = ("role", "is_blocked")


class Principal(models.Model):
    user = models.OneToOneField(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        primary_key=True,
        related_name="principal",
        db_column="id",
    )
    email = models.CharField(max_length=255)
    full_name = models.CharField(max_length=255, blank=True, default="")
    phone = models.CharField(max_length=64, blank=True, default="")
    address = models.TextField(blank=True, default="")
    role = models.CharField(
        max_length=20,
        choices=PrincipalRole.choices,
        default=PrincipalRole.CUSTOMER,
    )
    is_blocked = models.BooleanField(default=False)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = "storefront_profiles"
        ordering = ["created_at", "user_id"]
        indexes = [
            models.Index(fields=["role"], name="idx_profile_role"),
        ]

    @property
    def principal_id(self) -> str:
        return str(self.user_id)

    def __str__(self) -> str:
        return f"{self.user_id} ({self.email}, {self.role})"
