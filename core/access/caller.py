"""
Storefront Access - CallerContext
=================================
Immutable identity tag carried by every data-access request.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional


@dataclass(frozen=True)
class CallerContext:
    """
    Authenticated identity of the caller, or None for anonymous callers.

    Role and blocked state are deliberately absent: the access layer
    derives them itself at evaluation time.
    """

    principal_id: Optional[str] = None

    def __post_init__(self):
        if self.principal_id is None:
            return
        if isinstance(self.principal_id, bool):
            raise ValueError("principal_id must be a string, integer or None.")
        normalized = str(self.principal_id).strip()
        object.__setattr__(self, "principal_id", normalized or None)

    @classmethod
    def anonymous(cls) -> "CallerContext":
        return cls(principal_id=None)

    @classmethod
    def for_principal(cls, principal_id: Any) -> "CallerContext":
        caller = cls(principal_id=principal_id)
        if caller.is_anonymous:
            raise ValueError("principal_id must be a non-empty value.")
        return caller

    @property
    def is_anonymous(self) -> bool:
        return self.principal_id is None

    def is_principal(self, principal_id: Any) -> bool:
        if self.principal_id is None or principal_id is None:
            return False
        return self.principal_id == str(principal_id).strip()
