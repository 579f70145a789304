"""
Storefront Access - Protected Table Gateway
===========================================
ORM access for one resource on behalf of one caller. Every read and
write passes through the AccessPolicyEngine first.

- list():   rows the caller may select (owner-scoped query, then row-level filtering)
- get():    one row, or AccessDenied when missing or not selectable
- insert(): admitted against the candidate row, then saved
- update(): admitted against old and new row, then saved
- delete(): admitted against the existing row, then deleted

Writes run inside transaction.atomic(); a denied write leaves no trace.
Values the columns cannot hold raise ValueError.
"""

from __future__ import annotations

import copy
from decimal import InvalidOperation
from typing import Any

from django.apps import apps
from django.core.exceptions import FieldDoesNotExist, ValidationError
from django.db import transaction

from core.access.caller import CallerContext
from core.access.constants import (
    OP_DELETE,
    OP_INSERT,
    OP_SELECT,
    OP_UPDATE,
    RESOURCE_BOOKS,
    RESOURCE_CART_ITEMS,
    RESOURCE_CATEGORIES,
    RESOURCE_ORDER_ITEMS,
    RESOURCE_ORDERS,
    RESOURCE_PROFILES,
    RESOURCE_REVIEWS,
)
from core.access.engine import AccessPolicyEngine
from core.access.exceptions import AccessDenied, UnknownResourceError
from core.identity.resolver import is_admin

RESOURCE_MODELS = {
    RESOURCE_PROFILES: "core_identity_store.Principal",
    RESOURCE_CATEGORIES: "core_catalog_store.Category",
    RESOURCE_BOOKS: "core_catalog_store.Book",
    RESOURCE_CART_ITEMS: "core_catalog_store.CartItem",
    RESOURCE_REVIEWS: "core_catalog_store.Review",
    RESOURCE_ORDERS: "core_orders_store.Order",
    RESOURCE_ORDER_ITEMS: "core_orders_store.OrderItem",
}

# Non-admin callers select only their own rows of these resources. The
# queryset is narrowed to that owner first; the engine still checks each row.
SELECT_OWNER_SCOPES = {
    RESOURCE_PROFILES: "pk",
    RESOURCE_CART_ITEMS: "owner_id",
    RESOURCE_ORDERS: "owner_id",
    RESOURCE_ORDER_ITEMS: "order__owner_id",
}


def resolve_model(resource: str):
    model_path = RESOURCE_MODELS.get(resource)
    if model_path is None:
        raise UnknownResourceError(resource)
    return apps.get_model(model_path)


class ProtectedTable:
    def __init__(
        self,
        engine: AccessPolicyEngine,
        resource: str,
        caller: CallerContext,
    ):
        if not isinstance(caller, CallerContext):
            raise ValueError("caller must be CallerContext.")
        self._engine = engine
        self._resource = resource
        self._caller = caller
        self._model = resolve_model(resource)

    @property
    def resource(self) -> str:
        return self._resource

    @property
    def caller(self) -> CallerContext:
        return self._caller

    def _queryset(self):
        return self._model._default_manager.all()

    def _validate_fields(self, values: dict[str, Any]) -> None:
        for name in values:
            try:
                field = self._model._meta.get_field(name)
            except FieldDoesNotExist:
                if name.endswith("_id") and self._is_foreign_key(name[:-3]):
                    continue
                raise ValueError(
                    f"'{name}' is not a field of {self._resource}."
                ) from None
            if field.primary_key:
                raise ValueError(f"'{name}' cannot be written on {self._resource}.")

    def _is_foreign_key(self, name: str) -> bool:
        try:
            return self._model._meta.get_field(name).is_relation
        except FieldDoesNotExist:
            return False

    def _fetch(self, queryset, pk: Any):
        try:
            return queryset.filter(pk=pk).first()
        except (TypeError, ValueError, ValidationError):
            return None

    def _scoped(self, queryset):
        owner_field = SELECT_OWNER_SCOPES.get(self._resource)
        if owner_field is None or is_admin(self._engine.resolver, self._caller.principal_id):
            return queryset
        if self._caller.is_anonymous:
            return queryset.none()
        try:
            return queryset.filter(**{owner_field: self._caller.principal_id})
        except (TypeError, ValueError, ValidationError):
            return queryset.none()

    def _save(self, candidate, **kwargs) -> None:
        try:
            candidate.save(**kwargs)
        except ValidationError as exc:
            raise ValueError("; ".join(exc.messages)) from exc
        except InvalidOperation as exc:
            raise ValueError(f"A numeric value is out of range for {self._resource}.") from exc

    # ══════════════════════════════════════════════════════════
    # READS
    # ══════════════════════════════════════════════════════════

    def list(self, *, related: tuple[str, ...] = (), order_by: tuple[str, ...] = (), **filters) -> list:
        rows = self._scoped(self._queryset()).filter(**filters)
        if related:
            rows = rows.select_related(*related)
        if order_by:
            rows = rows.order_by(*order_by)
        return self._engine.filter_visible(self._caller, self._resource, OP_SELECT, rows)

    def get(self, pk: Any):
        row = self._fetch(self._queryset(), pk)
        if row is None:
            raise AccessDenied(self._resource, OP_SELECT)
        self._engine.enforce(self._caller, self._resource, OP_SELECT, row=row)
        return row

    def exists(self, **filters) -> bool:
        return bool(self.list(**filters))

    # ══════════════════════════════════════════════════════════
    # WRITES
    # ══════════════════════════════════════════════════════════

    def insert(self, **values):
        self._validate_fields(values)
        candidate = self._model(**values)
        with transaction.atomic():
            self._engine.enforce(
                self._caller, self._resource, OP_INSERT, new_row=candidate
            )
            self._save(candidate, force_insert=True)
        return candidate

    def update(self, pk: Any, **changes):
        if not changes:
            raise ValueError("update requires at least one change.")
        self._validate_fields(changes)
        with transaction.atomic():
            current = self._fetch(self._queryset().select_for_update(), pk)
            if current is None:
                raise AccessDenied(self._resource, OP_UPDATE)
            candidate = self.admit_update(current, **changes)
            self._save(candidate)
        return candidate

    def admit_update(self, current, **changes):
        """
        Enforce an update of `current` without saving it.

        Returns the candidate row carrying `changes`. Callers that must
        authorize before validating a value use this directly.
        """
        self._validate_fields(changes)
        candidate = copy.copy(current)
        for name, value in changes.items():
            setattr(candidate, name, value)
        self._engine.enforce(
            self._caller,
            self._resource,
            OP_UPDATE,
            row=current,
            new_row=candidate,
        )
        return candidate

    def delete(self, pk: Any) -> None:
        with transaction.atomic():
            current = self._fetch(self._queryset().select_for_update(), pk)
            if current is None:
                raise AccessDenied(self._resource, OP_DELETE)
            self._engine.enforce(self._caller, self._resource, OP_DELETE, row=current)
            current.delete()


class AccessGateway:
    """Hands out ProtectedTable instances bound to one engine."""

    def __init__(self, engine: AccessPolicyEngine):
        self._engine = engine

    @property
    def engine(self) -> AccessPolicyEngine:
        return self._engine

    def table(self, resource: str, caller: CallerContext) -> ProtectedTable:
        return ProtectedTable(self._engine, resource, caller)
