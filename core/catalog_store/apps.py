"""
Storefront Catalog Store - App Configuration
============================================
Categories, books, reviews and cart items.
"""

from django.apps import AppConfig


class CoreCatalogStoreConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "core.catalog_store"
    label = "core_catalog_store"
    verbose_name = "Storefront Catalog Store"
