"""Legal Services Corporation grantee adapter."""

from __future__ import annotations

from .client import LscGranteeClient, LscSourceError
from .schema import LscGranteePayload, grantee_entries, parse_grantees

__all__ = [
    "LscGranteeClient",
    "LscGranteePayload",
    "LscSourceError",
    "grantee_entries",
    "parse_grantees",
]
