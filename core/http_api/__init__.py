"""
Storefront HTTP API - Public API
================================
"""

from core.http_api.contracts import (
    BookListRequest,
    BookWriteHttpRequest,
    CartItemAddHttpRequest,
    CartItemQuantityHttpRequest,
    CategoryWriteHttpRequest,
    CheckoutHttpRequest,
    HttpApiErrorBody,
    HttpApiResponse,
    OrderStatusHttpRequest,
    PrincipalBlockHttpRequest,
    PrincipalRoleHttpRequest,
    ProfileUpdateHttpRequest,
    ReviewSubmitHttpRequest,
)
from core.http_api.dependencies import HttpApiDependencies
from core.http_api.errors import (
    access_denied_response,
    error_response,
    exception_response,
    http_status_for,
    success_response,
)

__all__ = [
    "BookListRequest",
    "BookWriteHttpRequest",
    "CartItemAddHttpRequest",
    "CartItemQuantityHttpRequest",
    "CategoryWriteHttpRequest",
    "CheckoutHttpRequest",
    "OrderStatusHttpRequest",
    "PrincipalBlockHttpRequest",
    "PrincipalRoleHttpRequest",
    "ProfileUpdateHttpRequest",
    "ReviewSubmitHttpRequest",
    "HttpApiErrorBody",
    "HttpApiResponse",
    "HttpApiDependencies",
    "error_response",
    "success_response",
    "access_denied_response",
    "exception_response",
    "http_status_for",
]
