"""
Storefront Access - Engine Bootstrap
====================================
Builds the locked storefront registry and the process-wide gateway.
"""

from __future__ import annotations

import threading

from core.access.engine import AccessPolicyEngine
from core.access.gateway import AccessGateway
from core.access.policies import build_storefront_registry
from core.identity.resolver import DbRoleResolver, RoleResolver

_GATEWAY_LOCK = threading.Lock()
_GATEWAY: AccessGateway | None = None


def build_access_engine(resolver: RoleResolver | None = None) -> AccessPolicyEngine:
    return AccessPolicyEngine(
        registry=build_storefront_registry(lock=True),
        resolver=resolver or DbRoleResolver(),
    )


def get_default_gateway() -> AccessGateway:
    global _GATEWAY
    if _GATEWAY is not None:
        return _GATEWAY

    with _GATEWAY_LOCK:
        if _GATEWAY is None:
            _GATEWAY = AccessGateway(build_access_engine())
        return _GATEWAY
