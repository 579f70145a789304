"""
Storefront Identity Store - Privileged Service Layer
====================================================
Registry writes that must run outside the access policy engine:
principal materialization on identity creation and admin bootstrap.
"""

from __future__ import annotations

import logging
from typing import Any

from django.contrib.auth import get_user_model
from django.db import transaction

from core.identity.roles import DEFAULT_ROLE, ROLE_ADMIN
from core.identity_store.models import Principal

logger = logging.getLogger("storefront.identity")

DEFAULT_ADMIN_FULL_NAME = "Admin User"


def _clean_string(value: Any, *, field_name: str) -> str:
    if not isinstance(value, str):
        raise ValueError(f"{field_name} must be a non-empty string.")
    cleaned = value.strip()
    if not cleaned:
        raise ValueError(f"{field_name} must be a non-empty string.")
    return cleaned


def _clean_optional_string(value: Any, *, default: str = "") -> str:
    if value is None:
        return default
    cleaned = str(value).strip()
    return cleaned or default


def serialize_principal(principal: Principal) -> dict[str, Any]:
    return {
        "id": principal.principal_id,
        "email": principal.email,
        "full_name": principal.full_name,
        "phone": principal.phone,
        "address": principal.address,
        "role": principal.role,
        "is_blocked": principal.is_blocked,
        "created_at": principal.created_at.isoformat() if principal.created_at else None,
        "updated_at": principal.updated_at.isoformat() if principal.updated_at else None,
    }


def materialize_principal(
    *,
    user_id: Any,
    email: str | None,
    full_name: str | None = None,
) -> bool:
    """
    Insert the registry row for a newly created identity.

    Conflict-ignore insert keyed on the identity: a replayed or duplicate
    firing leaves the existing row untouched. Returns True when this call
    created the row.
    """
    if user_id is None:
        raise ValueError("user_id is required.")

    existed = Principal.objects.filter(pk=user_id).exists()
    Principal.objects.bulk_create(
        [
            Principal(
                user_id=user_id,
                email=_clean_optional_string(email),
                full_name=_clean_optional_string(full_name),
                role=DEFAULT_ROLE,
                is_blocked=False,
            )
        ],
        ignore_conflicts=True,
    )

    if existed:
        logger.debug(f"Registry row for identity {user_id} already present")
        return False

    logger.info(f"Registry row materialized for identity {user_id}")
    return True


def bootstrap_admin_principal(
    *,
    email: str,
    full_name: str = DEFAULT_ADMIN_FULL_NAME,
    password: str | None = None,
) -> dict[str, Any]:
    """
    Ensure an administrator identity and registry row exist.

    Idempotent: repeated calls converge on one identity with role admin.
    """
    cleaned_email = _clean_string(email, field_name="email").lower()
    cleaned_full_name = _clean_optional_string(full_name, default=DEFAULT_ADMIN_FULL_NAME)
    user_model = get_user_model()

    with transaction.atomic():
        user = user_model.objects.filter(email__iexact=cleaned_email).order_by("pk").first()
        if user is None:
            user = user_model(username=cleaned_email, email=cleaned_email)
            if password:
                user.set_password(password)
            else:
                user.set_unusable_password()
            user.save()

        # The hook normally ran on user creation; repeat it for identities
        # created before the registry existed.
        materialize_principal(
            user_id=user.pk,
            email=cleaned_email,
            full_name=cleaned_full_name,
        )
        Principal.objects.filter(pk=user.pk).update(
            role=ROLE_ADMIN,
            full_name=cleaned_full_name,
        )
        principal = Principal.objects.get(pk=user.pk)

    logger.info(f"Admin principal ensured for identity {user.pk}")
    return serialize_principal(principal)
