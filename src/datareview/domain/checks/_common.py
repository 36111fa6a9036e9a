"""Finding constructors shared by the category checkers."""

from __future__ import annotations

from typing import TYPE_CHECKING

from datareview.domain.diff import (
    ChangeType,
    Finding,
    Severity,
    addresses_loosely_match,
    phones_match,
)

if TYPE_CHECKING:
    from collections.abc import MutableSequence, Sequence

    from datareview.domain.sources import WebsiteStatus


def website_finding(
    *,
    id: str,  # noqa: A002
    name: str,
    url: str,
    status: WebsiteStatus,
    notes: str,
) -> Finding:
    return Finding(
        id=id,
        name=name,
        change_type=ChangeType.WEBSITE_DOWN,
        stored_value=url,
        source_value=status.describe(),
        verify_url=url,
        severity=Severity.HIGH,
        notes=notes,
    )


def phone_mismatch(
    *,
    id: str,  # noqa: A002
    name: str,
    stored: str | None,
    candidates: Sequence[str],
    verify_url: str,
    severity: Severity,
    source_label: str,
) -> Finding | None:
    """``phone_changed`` when ``stored`` matches none of ``candidates``.

    The first candidate is suggested; every candidate is listed so the
    reviewer picks the authoritative one.
    """

    if not candidates or any(phones_match(stored, candidate) for candidate in candidates):
        return None
    notes = f"Stored phone not found on {source_label}. Candidates found: {', '.join(candidates)}."
    return Finding(
        id=id,
        name=name,
        change_type=ChangeType.PHONE_CHANGED,
        stored_value=stored,
        source_value=candidates[0],
        verify_url=verify_url,
        severity=severity,
        notes=notes,
    )


def keep(findings: MutableSequence[Finding], *candidates: Finding | None) -> None:
    """Append every candidate that is an actual finding."""
    findings.extend(candidate for candidate in candidates if candidate is not None)


def street_number_note(stored_address: str, geocoded: str | None) -> str:
    if addresses_loosely_match(stored_address, geocoded):
        return "The geocoder result still carries the stored street number; the city label may just differ."
    return "The geocoder result does not carry the stored street number."
