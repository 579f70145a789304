"""
Storefront Identity Store - App Configuration
=============================================
Principal registry and the registration hook wiring.
"""

from django.apps import AppConfig


class CoreIdentityStoreConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "core.identity_store"
    label = "core_identity_store"
    verbose_name = "Storefront Principal Registry"

    def ready(self) -> None:
        from core.identity_store import signals

        signals.connect_registration_hook()
