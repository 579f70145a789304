"""
Storefront HTTP API - Error Mapping
===================================
Stable transport error mapping for access denials and workflow failures.
"""

from __future__ import annotations

import logging
from typing import Any, Optional

from django.db import IntegrityError

from core.access.exceptions import AccessDenied
from core.http_api.contracts import HttpApiErrorBody, HttpApiResponse
from core.storefront.errors import DuplicateReview, StorefrontError

logger = logging.getLogger("storefront.access")

INVALID_REQUEST = "INVALID_REQUEST"
CONFLICT = "CONFLICT"
METHOD_NOT_ALLOWED = "METHOD_NOT_ALLOWED"
PERMISSION_DENIED = AccessDenied.code

HTTP_STATUS_BY_CODE = {
    PERMISSION_DENIED: 403,
    CONFLICT: 409,
    DuplicateReview.code: 409,
    METHOD_NOT_ALLOWED: 405,
}


def error_response(
    *,
    code: str,
    message: str,
    details: Optional[dict[str, Any]] = None,
) -> dict[str, Any]:
    return HttpApiResponse(
        ok=False,
        error=HttpApiErrorBody(
            code=code,
            message=message,
            details=details or {},
        ),
    ).to_dict()


def success_response(data: Any) -> dict[str, Any]:
    return HttpApiResponse(ok=True, data=data).to_dict()


def access_denied_response(exc: AccessDenied) -> dict[str, Any]:
    return error_response(
        code=exc.code,
        message=str(exc),
        details={"resource": exc.resource, "operation": exc.operation},
    )


def exception_response(exc: Exception) -> dict[str, Any]:
    """
    Map a failure raised by a storefront workflow to an error payload.

    Anything not listed here is a programming error and propagates.
    """
    if isinstance(exc, AccessDenied):
        return access_denied_response(exc)
    if isinstance(exc, StorefrontError):
        return error_response(code=exc.code, message=exc.message)
    if isinstance(exc, IntegrityError):
        logger.info(f"Storage constraint rejected write: {exc}")
        return error_response(
            code=CONFLICT,
            message="The write conflicts with existing data.",
            details={"error_type": type(exc).__name__},
        )
    if isinstance(exc, KeyError):
        return error_response(code=INVALID_REQUEST, message=f"{exc.args[0]} is required.")
    if isinstance(exc, ValueError):
        return error_response(code=INVALID_REQUEST, message=str(exc))
    raise exc


def http_status_for(payload: dict[str, Any]) -> int:
    if payload.get("ok"):
        return 200
    code = payload.get("error", {}).get("code")
    return HTTP_STATUS_BY_CODE.get(code, 400)
