"""Category checkers: one reconciliation pass per stored collection."""

from __future__ import annotations

from .consulates import check_consulates
from .detention import check_detention_facilities
from .legal_aid import check_legal_aid

__all__ = ["check_consulates", "check_detention_facilities", "check_legal_aid"]
