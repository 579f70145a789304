"""
Storefront Orders Store - App Configuration
===========================================
Orders and order line items.
"""

from django.apps import AppConfig


class CoreOrdersStoreConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "core.orders_store"
    label = "core_orders_store"
    verbose_name = "Storefront Orders Store"
