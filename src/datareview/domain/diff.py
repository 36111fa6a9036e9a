"""Shared vocabulary for the quarterly data review: findings, reports, comparisons.

A :class:`CategoryReport` is the only artifact a checker run produces. It is
written once to ``{category}-diff.json`` and read back by the report generator,
so its JSON shape (camelCase keys) is the integration contract between the two.
"""

from __future__ import annotations

import logging
import re
from collections import Counter
from datetime import UTC, datetime
from enum import StrEnum
from typing import TYPE_CHECKING, Self

from pydantic import BaseModel, ConfigDict, model_validator
from pydantic.alias_generators import to_camel

if TYPE_CHECKING:
    from collections.abc import Iterable
    from pathlib import Path

log = logging.getLogger(__name__)

_NON_DIGIT = re.compile(r"\D")
_ADDRESS_NOISE = re.compile(r"[.,#]")


class ChangeType(StrEnum):
    PHONE_CHANGED = "phone_changed"
    ADDRESS_CHANGED = "address_changed"
    WEBSITE_DOWN = "website_down"
    NOT_FOUND_ON_SOURCE = "not_found_on_source"
    NEW_ON_SOURCE = "new_on_source"
    CAPACITY_CHANGED = "capacity_changed"
    MANUAL_REQUIRED = "manual_required"
    INACTIVE_REACTIVATE = "inactive_reactivate"


class Severity(StrEnum):
    CRITICAL = "critical"
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class Category(StrEnum):
    DETENTION_FACILITIES = "detention-facilities"
    CONSULATES = "consulates"
    LEGAL_AID = "legal-aid"


AUTOMATED_CHANGE_TYPES = frozenset(
    {ChangeType.PHONE_CHANGED, ChangeType.ADDRESS_CHANGED, ChangeType.CAPACITY_CHANGED}
)


class DiffModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
        extra="ignore",
    )


class Finding(DiffModel):
    """One detected fact about one stored record."""

    id: str
    name: str
    change_type: ChangeType
    stored_value: str | None = None
    source_value: str | None = None
    verify_url: str | None = None
    notes: str | None = None
    severity: Severity


class DiffStats(DiffModel):
    checked: int
    automated_changes: int
    new_on_source: int
    not_found_on_source: int
    manual_only: int

    @classmethod
    def from_findings(cls, checked: int, findings: Iterable[Finding]) -> DiffStats:
        counts = Counter(finding.change_type for finding in findings)
        return cls(
            checked=checked,
            automated_changes=sum(counts[change] for change in AUTOMATED_CHANGE_TYPES),
            new_on_source=counts[ChangeType.NEW_ON_SOURCE],
            not_found_on_source=counts[ChangeType.NOT_FOUND_ON_SOURCE],
            manual_only=counts[ChangeType.MANUAL_REQUIRED],
        )


class CategoryReport(DiffModel):
    """Complete output of one checker run."""

    category: Category
    generated_at: datetime
    stats: DiffStats
    items: tuple[Finding, ...]
    source_available: bool
    errors: tuple[str, ...] = ()

    @model_validator(mode="after")
    def _stats_match_items(self) -> Self:
        expected = DiffStats.from_findings(self.stats.checked, self.items)
        if expected != self.stats:
            raise ValueError(
                f"{self.category} stats {self.stats.model_dump()} do not match "
                f"findings {expected.model_dump()}"
            )
        return self

    @classmethod
    def build(
        cls,
        *,
        category: Category,
        checked: int,
        findings: Iterable[Finding],
        source_available: bool,
        errors: Iterable[str] = (),
        generated_at: datetime | None = None,
    ) -> CategoryReport:
        items = tuple(findings)
        return cls(
            category=category,
            generated_at=generated_at or datetime.now(UTC),
            stats=DiffStats.from_findings(checked, items),
            items=items,
            source_available=source_available,
            errors=tuple(errors),
        )

    @property
    def automated_items(self) -> list[Finding]:
        return [item for item in self.items if item.change_type is not ChangeType.MANUAL_REQUIRED]

    @property
    def manual_items(self) -> list[Finding]:
        return [item for item in self.items if item.change_type is ChangeType.MANUAL_REQUIRED]


def normalize_phone(phone: str | None) -> str:
    """Strip every non-digit character."""
    return _NON_DIGIT.sub("", phone or "")


def phones_match(a: str | None, b: str | None) -> bool:
    """Loose phone equality tolerating a leading ``1`` country code.

    Blank input (or input without digits) never matches anything, so missing
    data can not masquerade as a confirmed phone.
    """

    na = normalize_phone(a)
    nb = normalize_phone(b)
    if not na or not nb:
        return False
    if na == nb:
        return True
    if len(na) == 11 and na.startswith("1") and na[1:] == nb:
        return True
    return len(nb) == 11 and nb.startswith("1") and nb[1:] == na


def addresses_loosely_match(a: str | None, b: str | None) -> bool:
    """True when the street number of ``a`` appears somewhere in ``b``."""

    def _normalize(value: str) -> str:
        return " ".join(_ADDRESS_NOISE.sub(" ", value.lower()).split())

    na = _normalize(a or "")
    nb = _normalize(b or "")
    if not na or not nb:
        return False
    street_number = na.split(" ")[0]
    return street_number in nb.split(" ")


def write_diff(report: CategoryReport, path: Path) -> Path:
    """Serialize ``report`` to ``path``, replacing any previous run's file.

    Errors are not caught: a report that can not be written fails the run.
    """

    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(
        report.model_dump_json(by_alias=True, exclude_none=True, indent=2) + "\n",
        encoding="utf-8",
    )

    stats = report.stats
    log.info("%s diff written to %s", report.category, path)
    log.info(
        "checked=%s changes=%s new=%s missing=%s manual=%s",
        stats.checked,
        stats.automated_changes,
        stats.new_on_source,
        stats.not_found_on_source,
        stats.manual_only,
    )
    if report.errors:
        log.warning("%s source errors recorded", len(report.errors))
        for error in report.errors:
            log.warning("  %s", error)
    return path


def read_diff_file(path: Path) -> CategoryReport:
    """Parse and validate a report file; raises on missing or invalid files."""
    return CategoryReport.model_validate_json(path.read_text(encoding="utf-8"))
