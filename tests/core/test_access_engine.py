"""
Storefront Access Policy Engine: Behavior Tests
================================================
Pure evaluation tests: no database, an in-memory role resolver and
plain row objects.

Covers:
1. Registry contracts (duplicates, lock, operation index)
2. Permissive OR / restrictive AND combination
3. Fail-closed evaluation (predicate exceptions deny, evaluate never raises)
4. Storefront policy table per resource
5. Block gate and the self-update column guard
"""

from __future__ import annotations

from types import SimpleNamespace

import pytest

from core.access.block_gate import BLOCK_GATE_POLICY, BLOCK_GATE_POLICY_NAME
from core.access.caller import CallerContext
from core.access.constants import (
    OP_ALL,
    OP_DELETE,
    OP_INSERT,
    OP_SELECT,
    OP_UPDATE,
    POLICY_RESTRICTIVE,
    RESOURCE_BOOKS,
    RESOURCE_CART_ITEMS,
    RESOURCE_CATEGORIES,
    RESOURCE_ORDER_ITEMS,
    RESOURCE_ORDERS,
    RESOURCE_PROFILES,
    RESOURCE_REVIEWS,
)
from core.access.engine import AccessPolicyEngine
from core.access.exceptions import (
    AccessDenied,
    DuplicatePolicyError,
    RegistryLockedError,
)
from core.access.models import AccessPolicy, PolicyContext
from core.access.policies import STOREFRONT_POLICIES, build_storefront_registry
from core.access.registry import PolicyRegistry
from core.identity.resolver import InMemoryRoleResolver


ADMIN_ID = "admin-1"
ALICE_ID = "alice"
BOB_ID = "bob"

ADMIN = CallerContext.for_principal(ADMIN_ID)
ALICE = CallerContext.for_principal(ALICE_ID)
BOB = CallerContext.for_principal(BOB_ID)
ANONYMOUS = CallerContext.anonymous()
UNREGISTERED = CallerContext.for_principal("ghost")


def _profile(principal_id: str, *, role: str = "customer", blocked: bool = False, phone: str = ""):
    return SimpleNamespace(pk=principal_id, role=role, is_blocked=blocked, phone=phone)


def _order(owner_id: str, status: str = "confirmed"):
    return SimpleNamespace(owner_id=owner_id, status=status)


def _order_item(owner_id: str):
    return SimpleNamespace(order=_order(owner_id), quantity=1)


def _changed(row, **changes):
    return SimpleNamespace(**{**vars(row), **changes})


@pytest.fixture
def resolver():
    return InMemoryRoleResolver(
        {ADMIN_ID: "admin", ALICE_ID: "customer", BOB_ID: "customer"}
    )


@pytest.fixture
def engine(resolver):
    return AccessPolicyEngine(registry=build_storefront_registry(), resolver=resolver)


def _allowed(engine, caller, resource, operation, row=None, new_row=None) -> bool:
    return engine.evaluate(caller, resource, operation, row=row, new_row=new_row).allowed


# ══════════════════════════════════════════════════════════════
# REGISTRY
# ══════════════════════════════════════════════════════════════

class TestPolicyRegistry:

    def test_duplicate_name_on_same_resource_rejected(self):
        registry = PolicyRegistry()
        registry.register_policy(BLOCK_GATE_POLICY)
        with pytest.raises(DuplicatePolicyError):
            registry.register_policy(BLOCK_GATE_POLICY)

    def test_same_name_on_other_resource_allowed(self):
        registry = PolicyRegistry()
        for resource in (RESOURCE_BOOKS, RESOURCE_CATEGORIES):
            registry.register_policy(
                AccessPolicy(
                    name="Anyone can view",
                    resource=resource,
                    operations=(OP_SELECT,),
                    using=lambda context, row: True,
                )
            )
        assert registry.policy_count() == 2

    def test_locked_registry_rejects_registration(self):
        registry = build_storefront_registry(lock=True)
        assert registry.is_locked
        with pytest.raises(RegistryLockedError):
            registry.register_policy(
                AccessPolicy(
                    name="Late policy",
                    resource=RESOURCE_BOOKS,
                    operations=(OP_SELECT,),
                    using=lambda context, row: True,
                )
            )

    def test_non_policy_rejected(self):
        with pytest.raises(TypeError):
            PolicyRegistry().register_policy(object())

    def test_all_expands_to_every_operation(self):
        registry = PolicyRegistry()
        registry.register_policy(BLOCK_GATE_POLICY)
        for operation in (OP_SELECT, OP_INSERT, OP_UPDATE, OP_DELETE):
            names = [p.name for p in registry.get_policies(RESOURCE_PROFILES, operation)]
            assert names == [BLOCK_GATE_POLICY_NAME]

    def test_policies_returned_sorted_by_name(self):
        registry = build_storefront_registry()
        names = [p.name for p in registry.get_policies(RESOURCE_ORDERS, OP_SELECT)]
        assert names == sorted(names)

    def test_unknown_resource_has_no_policies(self):
        assert build_storefront_registry().get_policies("wishlists", OP_SELECT) == ()

    def test_storefront_registry_covers_every_resource(self):
        registry = build_storefront_registry()
        assert registry.policy_count() == len(STOREFRONT_POLICIES)
        assert set(registry.resources()) == {
            RESOURCE_PROFILES,
            RESOURCE_CATEGORIES,
            RESOURCE_BOOKS,
            RESOURCE_CART_ITEMS,
            RESOURCE_ORDERS,
            RESOURCE_ORDER_ITEMS,
            RESOURCE_REVIEWS,
        }


class TestPolicyContract:

    def test_policy_without_predicate_rejected(self):
        with pytest.raises(ValueError):
            AccessPolicy(name="Empty", resource=RESOURCE_BOOKS, operations=(OP_SELECT,))

    def test_unknown_operation_rejected(self):
        with pytest.raises(ValueError):
            AccessPolicy(
                name="Bad op",
                resource=RESOURCE_BOOKS,
                operations=("truncate",),
                using=lambda context, row: True,
            )

    def test_unknown_resource_rejected(self):
        with pytest.raises(ValueError):
            AccessPolicy(
                name="Bad resource",
                resource="wishlists",
                operations=(OP_SELECT,),
                using=lambda context, row: True,
            )

    def test_check_expression_falls_back_to_using(self):
        using = lambda context, row: True  # noqa: E731
        policy = AccessPolicy(
            name="Fallback",
            resource=RESOURCE_BOOKS,
            operations=(OP_ALL,),
            using=using,
        )
        assert policy.check_expression is using


# ══════════════════════════════════════════════════════════════
# COMBINATION & FAIL-CLOSED
# ══════════════════════════════════════════════════════════════

class TestCombination:

    def _engine(self, resolver, *policies):
        registry = PolicyRegistry()
        registry.register_policies(policies)
        registry.lock()
        return AccessPolicyEngine(registry=registry, resolver=resolver)

    def test_no_applicable_policy_denies(self, resolver):
        engine = self._engine(resolver)
        assert not _allowed(engine, ADMIN, RESOURCE_BOOKS, OP_SELECT, row=SimpleNamespace())

    def test_any_permissive_policy_admits(self, resolver):
        engine = self._engine(
            resolver,
            AccessPolicy(
                name="Never",
                resource=RESOURCE_BOOKS,
                operations=(OP_SELECT,),
                using=lambda context, row: False,
            ),
            AccessPolicy(
                name="Always",
                resource=RESOURCE_BOOKS,
                operations=(OP_SELECT,),
                using=lambda context, row: True,
            ),
        )
        decision = engine.evaluate(ALICE, RESOURCE_BOOKS, OP_SELECT, row=SimpleNamespace())
        assert decision.allowed
        assert decision.policy_name == "Always"

    def test_restrictive_policy_vetoes(self, resolver):
        engine = self._engine(
            resolver,
            AccessPolicy(
                name="Always",
                resource=RESOURCE_BOOKS,
                operations=(OP_SELECT,),
                using=lambda context, row: True,
            ),
            AccessPolicy(
                name="Veto",
                resource=RESOURCE_BOOKS,
                operations=(OP_SELECT,),
                using=lambda context, row: False,
                kind=POLICY_RESTRICTIVE,
            ),
        )
        assert not _allowed(engine, ALICE, RESOURCE_BOOKS, OP_SELECT, row=SimpleNamespace())

    def test_restrictive_alone_never_admits(self, resolver):
        engine = self._engine(
            resolver,
            AccessPolicy(
                name="Gate",
                resource=RESOURCE_BOOKS,
                operations=(OP_SELECT,),
                using=lambda context, row: True,
                kind=POLICY_RESTRICTIVE,
            ),
        )
        assert not _allowed(engine, ALICE, RESOURCE_BOOKS, OP_SELECT, row=SimpleNamespace())

    def test_raising_predicate_denies_without_raising(self, resolver):
        def explode(context, row):
            raise RuntimeError("storage unavailable")

        engine = self._engine(
            resolver,
            AccessPolicy(
                name="Explodes",
                resource=RESOURCE_BOOKS,
                operations=(OP_SELECT,),
                using=explode,
            ),
        )
        assert not _allowed(engine, ALICE, RESOURCE_BOOKS, OP_SELECT, row=SimpleNamespace())

    def test_check_only_policy_does_not_admit_reads(self, resolver):
        engine = self._engine(
            resolver,
            AccessPolicy(
                name="Insert only",
                resource=RESOURCE_BOOKS,
                operations=(OP_ALL,),
                check=lambda context, row: True,
            ),
        )
        assert not _allowed(engine, ALICE, RESOURCE_BOOKS, OP_SELECT, row=SimpleNamespace())
        assert _allowed(engine, ALICE, RESOURCE_BOOKS, OP_INSERT, new_row=SimpleNamespace())

    def test_invalid_caller_or_operation_denies(self, engine):
        assert not _allowed(engine, "alice", RESOURCE_BOOKS, OP_SELECT, row=SimpleNamespace())
        assert not _allowed(engine, ALICE, RESOURCE_BOOKS, "truncate", row=SimpleNamespace())
        assert not _allowed(engine, ALICE, RESOURCE_BOOKS, OP_ALL, row=SimpleNamespace())

    def test_enforce_raises_access_denied_without_policy_name(self, engine):
        with pytest.raises(AccessDenied) as exc_info:
            engine.enforce(BOB, RESOURCE_ORDERS, OP_SELECT, row=_order(ALICE_ID))
        assert exc_info.value.resource == RESOURCE_ORDERS
        assert exc_info.value.operation == OP_SELECT
        assert "Users can" not in str(exc_info.value)

    def test_filter_visible_keeps_input_order(self, engine):
        rows = [_order(ALICE_ID, "shipped"), _order(BOB_ID), _order(ALICE_ID, "pending")]
        visible = engine.filter_visible(ALICE, RESOURCE_ORDERS, OP_SELECT, rows)
        assert [row.status for row in visible] == ["shipped", "pending"]

    def test_role_resolved_once_per_evaluation(self, resolver):
        calls = []

        class CountingResolver:
            def resolve_role(self, principal_id):
                calls.append(principal_id)
                return resolver.resolve_role(principal_id)

        context = PolicyContext(ALICE, CountingResolver())
        context.caller_is_admin()
        context.with_previous(None).caller_is_admin()
        assert calls == [ALICE_ID]


# ══════════════════════════════════════════════════════════════
# STOREFRONT POLICY TABLE
# ══════════════════════════════════════════════════════════════

class TestProfilePolicies:

    def test_principal_reads_and_updates_own_row(self, engine):
        row = _profile(ALICE_ID)
        assert _allowed(engine, ALICE, RESOURCE_PROFILES, OP_SELECT, row=row)
        assert _allowed(
            engine, ALICE, RESOURCE_PROFILES, OP_UPDATE,
            row=row, new_row=_changed(row, phone="555-0100"),
        )

    def test_principal_cannot_read_other_row(self, engine):
        assert not _allowed(engine, BOB, RESOURCE_PROFILES, OP_SELECT, row=_profile(ALICE_ID))

    def test_admin_reads_every_row(self, engine):
        assert _allowed(engine, ADMIN, RESOURCE_PROFILES, OP_SELECT, row=_profile(ALICE_ID))

    def test_anonymous_and_unregistered_cannot_read_registry(self, engine):
        row = _profile(ALICE_ID)
        assert not _allowed(engine, ANONYMOUS, RESOURCE_PROFILES, OP_SELECT, row=row)
        assert not _allowed(engine, UNREGISTERED, RESOURCE_PROFILES, OP_SELECT, row=row)

    def test_self_update_cannot_escalate_role(self, engine):
        row = _profile(ALICE_ID)
        assert not _allowed(
            engine, ALICE, RESOURCE_PROFILES, OP_UPDATE,
            row=row, new_row=_changed(row, role="admin"),
        )

    def test_self_update_cannot_unblock(self, engine):
        row = _profile(ALICE_ID, blocked=True)
        assert not _allowed(
            engine, ALICE, RESOURCE_PROFILES, OP_UPDATE,
            row=row, new_row=_changed(row, is_blocked=False),
        )

    def test_admin_changes_role_and_blocked_flag(self, engine):
        row = _profile(ALICE_ID)
        assert _allowed(
            engine, ADMIN, RESOURCE_PROFILES, OP_UPDATE,
            row=row, new_row=_changed(row, role="admin", is_blocked=True),
        )

    def test_profiles_cannot_be_inserted_or_deleted_by_callers(self, engine):
        row = _profile(ALICE_ID)
        assert not _allowed(engine, ALICE, RESOURCE_PROFILES, OP_INSERT, new_row=row)
        assert not _allowed(engine, ALICE, RESOURCE_PROFILES, OP_DELETE, row=row)
        assert not _allowed(engine, ADMIN, RESOURCE_PROFILES, OP_DELETE, row=row)


class TestBlockGate:

    def test_blocked_principal_keeps_self_access(self, engine):
        row = _profile(ALICE_ID, blocked=True)
        assert _allowed(engine, ALICE, RESOURCE_PROFILES, OP_SELECT, row=row)
        assert _allowed(
            engine, ALICE, RESOURCE_PROFILES, OP_UPDATE,
            row=row, new_row=_changed(row, phone="555-0199"),
        )

    def test_blocked_principal_cannot_read_other_rows(self, engine, resolver):
        assert not _allowed(engine, ALICE, RESOURCE_PROFILES, OP_SELECT, row=_profile(BOB_ID))
        assert not _allowed(
            engine, ALICE, RESOURCE_PROFILES, OP_SELECT, row=_profile(BOB_ID, blocked=True)
        )

    def test_admin_manages_blocked_rows(self, engine):
        row = _profile(ALICE_ID, blocked=True)
        assert _allowed(engine, ADMIN, RESOURCE_PROFILES, OP_SELECT, row=row)
        assert _allowed(
            engine, ADMIN, RESOURCE_PROFILES, OP_UPDATE,
            row=row, new_row=_changed(row, is_blocked=False),
        )

    def test_gate_does_not_touch_public_resources(self, engine):
        book = SimpleNamespace(title="Dune")
        assert _allowed(engine, ALICE, RESOURCE_BOOKS, OP_SELECT, row=book)
        assert _allowed(engine, ANONYMOUS, RESOURCE_CATEGORIES, OP_SELECT, row=SimpleNamespace())


class TestCatalogPolicies:

    @pytest.mark.parametrize("resource", [RESOURCE_CATEGORIES, RESOURCE_BOOKS])
    def test_anyone_reads(self, engine, resource):
        for caller in (ANONYMOUS, ALICE, ADMIN, UNREGISTERED):
            assert _allowed(engine, caller, resource, OP_SELECT, row=SimpleNamespace())

    @pytest.mark.parametrize("resource", [RESOURCE_CATEGORIES, RESOURCE_BOOKS])
    def test_only_admin_writes(self, engine, resource):
        row = SimpleNamespace(name="Fiction")
        for caller in (ANONYMOUS, ALICE, UNREGISTERED):
            assert not _allowed(engine, caller, resource, OP_INSERT, new_row=row)
            assert not _allowed(engine, caller, resource, OP_UPDATE, row=row, new_row=row)
            assert not _allowed(engine, caller, resource, OP_DELETE, row=row)
        assert _allowed(engine, ADMIN, resource, OP_INSERT, new_row=row)
        assert _allowed(engine, ADMIN, resource, OP_UPDATE, row=row, new_row=row)
        assert _allowed(engine, ADMIN, resource, OP_DELETE, row=row)


class TestOrderPolicies:

    def test_owner_inserts_own_order_only(self, engine):
        assert _allowed(engine, ALICE, RESOURCE_ORDERS, OP_INSERT, new_row=_order(ALICE_ID))
        assert not _allowed(engine, ALICE, RESOURCE_ORDERS, OP_INSERT, new_row=_order(BOB_ID))
        assert not _allowed(engine, ANONYMOUS, RESOURCE_ORDERS, OP_INSERT, new_row=_order(ALICE_ID))

    def test_other_principal_cannot_read_order(self, engine):
        order = _order(ALICE_ID)
        assert _allowed(engine, ALICE, RESOURCE_ORDERS, OP_SELECT, row=order)
        assert not _allowed(engine, BOB, RESOURCE_ORDERS, OP_SELECT, row=order)
        assert _allowed(engine, ADMIN, RESOURCE_ORDERS, OP_SELECT, row=order)

    def test_only_admin_updates_status(self, engine):
        order = _order(ALICE_ID, "confirmed")
        delivered = _changed(order, status="delivered")
        assert _allowed(engine, ADMIN, RESOURCE_ORDERS, OP_UPDATE, row=order, new_row=delivered)
        assert not _allowed(engine, ALICE, RESOURCE_ORDERS, OP_UPDATE, row=order, new_row=delivered)

    def test_admin_cannot_reassign_owner(self, engine):
        order = _order(ALICE_ID)
        assert not _allowed(
            engine, ADMIN, RESOURCE_ORDERS, OP_UPDATE,
            row=order, new_row=_changed(order, owner_id=BOB_ID),
        )

    def test_orders_are_never_deleted(self, engine):
        assert not _allowed(engine, ADMIN, RESOURCE_ORDERS, OP_DELETE, row=_order(ALICE_ID))
        assert not _allowed(engine, ALICE, RESOURCE_ORDERS, OP_DELETE, row=_order(ALICE_ID))


class TestOrderItemPolicies:

    def test_insert_requires_parent_order_ownership(self, engine):
        assert _allowed(engine, ALICE, RESOURCE_ORDER_ITEMS, OP_INSERT, new_row=_order_item(ALICE_ID))
        assert not _allowed(engine, BOB, RESOURCE_ORDER_ITEMS, OP_INSERT, new_row=_order_item(ALICE_ID))

    def test_reading_other_principal_items_denied_unless_admin(self, engine):
        item = _order_item(ALICE_ID)
        assert _allowed(engine, ALICE, RESOURCE_ORDER_ITEMS, OP_SELECT, row=item)
        assert not _allowed(engine, BOB, RESOURCE_ORDER_ITEMS, OP_SELECT, row=item)
        assert _allowed(engine, ADMIN, RESOURCE_ORDER_ITEMS, OP_SELECT, row=item)

    def test_items_are_immutable(self, engine):
        item = _order_item(ALICE_ID)
        assert not _allowed(engine, ALICE, RESOURCE_ORDER_ITEMS, OP_UPDATE, row=item, new_row=item)
        assert not _allowed(engine, ADMIN, RESOURCE_ORDER_ITEMS, OP_DELETE, row=item)


class TestOwnedResources:

    def test_cart_rows_belong_to_their_owner(self, engine):
        line = SimpleNamespace(owner_id=ALICE_ID, quantity=2)
        assert _allowed(engine, ALICE, RESOURCE_CART_ITEMS, OP_SELECT, row=line)
        assert _allowed(engine, ALICE, RESOURCE_CART_ITEMS, OP_INSERT, new_row=line)
        assert not _allowed(engine, BOB, RESOURCE_CART_ITEMS, OP_SELECT, row=line)
        assert not _allowed(engine, ADMIN, RESOURCE_CART_ITEMS, OP_SELECT, row=line)

    def test_cart_line_cannot_be_handed_to_someone_else(self, engine):
        line = SimpleNamespace(owner_id=ALICE_ID, quantity=2)
        moved = _changed(line, owner_id=BOB_ID)
        assert not _allowed(engine, ALICE, RESOURCE_CART_ITEMS, OP_UPDATE, row=line, new_row=moved)

    def test_reviews_public_but_owner_managed(self, engine):
        review = SimpleNamespace(owner_id=ALICE_ID, rating=4)
        assert _allowed(engine, ANONYMOUS, RESOURCE_REVIEWS, OP_SELECT, row=review)
        assert _allowed(engine, ALICE, RESOURCE_REVIEWS, OP_DELETE, row=review)
        assert not _allowed(engine, BOB, RESOURCE_REVIEWS, OP_DELETE, row=review)
        assert not _allowed(engine, BOB, RESOURCE_REVIEWS, OP_INSERT, new_row=review)
