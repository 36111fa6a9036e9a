"""Errors the checkers expect from their sources."""

from __future__ import annotations


class SourceError(RuntimeError):
    """An external source was unreachable or returned something unusable.

    Adapters raise subclasses of this for exceptional conditions only; expected
    outcomes such as a dead website or an empty search are return values.
    """

    def __init__(self, message: str, *, source: str) -> None:
        super().__init__(message)
        self.source = source
