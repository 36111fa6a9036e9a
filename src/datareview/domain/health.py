"""Per-run bookkeeping of which external sources answered usably."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

log = logging.getLogger(__name__)


@dataclass(slots=True)
class SourceHealth:
    """Tracks one source across a run.

    A source is unavailable when its one-off list fetch failed, or when it was
    called per record and every call failed.
    """

    name: str
    attempts: int = 0
    failures: int = 0
    fetch_failed: bool = False

    def record_success(self) -> None:
        self.attempts += 1

    def record_failure(self) -> None:
        self.attempts += 1
        self.failures += 1

    @property
    def available(self) -> bool:
        if self.fetch_failed:
            return False
        return self.attempts == 0 or self.failures < self.attempts


@dataclass(slots=True)
class RunLedger:
    """Error strings and source health for one checker run."""

    sources: dict[str, SourceHealth] = field(default_factory=dict)
    errors: list[str] = field(default_factory=list)

    def source(self, name: str) -> SourceHealth:
        if name not in self.sources:
            self.sources[name] = SourceHealth(name=name)
        return self.sources[name]

    def source_unavailable(self, name: str, exc: Exception) -> None:
        self.source(name).fetch_failed = True
        message = f"{name} source unavailable: {exc}"
        self.errors.append(message)
        log.warning(message)

    def record_error(self, name: str, subject: str, exc: Exception) -> None:
        self.source(name).record_failure()
        message = f"{name} error for {subject}: {exc}"
        self.errors.append(message)
        log.warning(message)

    def record_unexpected(self, subject: str, exc: Exception) -> None:
        """Record a failure no source adapter anticipated; availability is unaffected."""

        message = f"Unexpected error checking {subject}: {type(exc).__name__}: {exc}"
        self.errors.append(message)
        log.warning(message, exc_info=exc)

    def finalize(self) -> bool:
        """Summarize sources that failed on every call; return overall availability."""

        for health in self.sources.values():
            if not health.fetch_failed and health.attempts and not health.available:
                message = f"{health.name} unavailable: all {health.attempts} lookups failed"
                self.errors.append(message)
                log.warning(message)
        return all(health.available for health in self.sources.values())
