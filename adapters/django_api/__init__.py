"""
Storefront Django HTTP adapter.
Thin framework glue over core/http_api handlers.
"""

from adapters.django_api.wiring import (
    bootstrap_configured_admin,
    build_dependencies,
    caller_from_request,
)

__all__ = [
    "bootstrap_configured_admin",
    "build_dependencies",
    "caller_from_request",
]
