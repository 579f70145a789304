"""
Storefront Identity Store - Registration Hook
=============================================
Fires once per external identity creation and materializes the
matching registry row with the default role.
"""

from __future__ import annotations

from django.conf import settings
from django.db.models.signals import post_save

from core.identity_store.service import materialize_principal

REGISTRATION_HOOK_UID = "storefront.identity.registration_hook"


def _identity_full_name(identity) -> str:
    getter = getattr(identity, "get_full_name", None)
    if getter is None:
        return ""
    return getter() or ""


def on_identity_created(sender, instance, created: bool, raw: bool = False, **kwargs) -> None:
    # Fixture loading replays rows; the registry row travels with them.
    if not created or raw:
        return

    materialize_principal(
        user_id=instance.pk,
        email=getattr(instance, "email", ""),
        full_name=_identity_full_name(instance),
    )


def connect_registration_hook() -> None:
    post_save.connect(
        on_identity_created,
        sender=settings.AUTH_USER_MODEL,
        dispatch_uid=REGISTRATION_HOOK_UID,
    )
