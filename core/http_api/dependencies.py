"""
Storefront HTTP API - Dependencies
==================================
Injected collaborators for handler wiring.
"""

from __future__ import annotations

from dataclasses import dataclass

from core.access.gateway import AccessGateway


@dataclass(frozen=True)
class HttpApiDependencies:
    gateway: AccessGateway

    def __post_init__(self):
        if not isinstance(self.gateway, AccessGateway):
            raise ValueError("gateway must be AccessGateway.")
