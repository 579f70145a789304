"""
Storefront Django Adapter Wiring
================================
Constructs HttpApiDependencies and the request caller for live runs.

This module is adapter-only glue:
- the gateway is the process-wide one from core.access
- caller identity comes from the Django session user
"""

from __future__ import annotations

import logging
import threading
from typing import Any, Optional

from django.conf import settings
from django.http import HttpRequest

from core.access.bootstrap import get_default_gateway
from core.access.caller import CallerContext
from core.http_api.dependencies import HttpApiDependencies
from core.identity_store.service import bootstrap_admin_principal

logger = logging.getLogger("storefront.identity")

_DEPENDENCIES_LOCK = threading.Lock()
_DEPENDENCIES: HttpApiDependencies | None = None


def _create_dependencies() -> HttpApiDependencies:
    return HttpApiDependencies(gateway=get_default_gateway())


def build_dependencies() -> HttpApiDependencies:
    """
    Lazy singleton wiring for adapter runtime.
    """
    global _DEPENDENCIES
    with _DEPENDENCIES_LOCK:
        if _DEPENDENCIES is None:
            _DEPENDENCIES = _create_dependencies()
        return _DEPENDENCIES


def caller_from_request(request: HttpRequest) -> CallerContext:
    user = getattr(request, "user", None)
    if user is None or not user.is_authenticated:
        return CallerContext.anonymous()
    return CallerContext.for_principal(str(user.pk))


def bootstrap_configured_admin(password: Optional[str] = None) -> Optional[dict[str, Any]]:
    """
    Ensure the admin principal named by STOREFRONT_ADMIN_EMAIL exists.

    Returns None when no admin email is configured.
    """
    email = getattr(settings, "STOREFRONT_ADMIN_EMAIL", "") or ""
    if not email.strip():
        logger.info("STOREFRONT_ADMIN_EMAIL not set; skipping admin bootstrap")
        return None
    return bootstrap_admin_principal(email=email.strip(), password=password)
