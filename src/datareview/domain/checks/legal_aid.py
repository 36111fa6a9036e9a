"""Legal aid checker against the EOIR provider PDF, LSC grantees and org websites.

The geocoder is not consulted: OSM coverage of small nonprofits is too sparse
and would bury reviewers in false positives.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from datareview.domain.diff import Category, CategoryReport, ChangeType, Finding, Severity
from datareview.domain.errors import SourceError
from datareview.domain.health import RunLedger
from datareview.domain.normalization import match_provider_segments, normalize_org_name, slugify

from ._common import keep, phone_mismatch, website_finding

if TYPE_CHECKING:
    from collections.abc import Mapping, Sequence
    from datetime import datetime

    from datareview.domain.ports import GranteeSource, ProviderListSource, WebsiteProbe
    from datareview.domain.records import LegalAidOrganization
    from datareview.domain.sources import Grantee

log = logging.getLogger(__name__)

PROVIDER_LIST = "EOIR provider list"
GRANTEES = "LSC grantee list"
EOIR_DATA_SOURCE = "EOIR"


async def check_legal_aid(
    organizations: Sequence[LegalAidOrganization],
    *,
    web: WebsiteProbe,
    provider_list: ProviderListSource,
    grantees: GranteeSource,
    provider_list_url: str,
    grantee_url: str,
    match_threshold: float = 0.6,
    borderline_margin: float = 0.15,
    generated_at: datetime | None = None,
) -> CategoryReport:
    ledger = RunLedger()

    log.info("Fetching EOIR provider list")
    segments: set[str] | None = None
    try:
        segments = await provider_list.fetch_provider_segments()
    except SourceError as exc:
        ledger.source_unavailable(PROVIDER_LIST, exc)
    else:
        ledger.source(PROVIDER_LIST).record_success()
        log.info("EOIR PDF: extracted %d text segments", len(segments))

    log.info("Fetching LSC grantee data")
    by_name: dict[str, Grantee] = {}
    try:
        for grantee in await grantees.fetch_grantees():
            by_name.setdefault(normalize_org_name(grantee.name), grantee)
    except SourceError as exc:
        ledger.source_unavailable(GRANTEES, exc)
    else:
        ledger.source(GRANTEES).record_success()
        log.info("LSC: %d grantees loaded", len(by_name))

    matched: set[str] = set()
    findings: list[Finding] = []
    log.info("Checking %d stored organizations", len(organizations))
    for org in organizations:
        log.info("Checking: %s (%s, %s)", org.name, org.city, org.state)
        key = normalize_org_name(org.name)
        grantee = by_name.get(key)
        if grantee is not None:
            matched.add(key)
        try:
            keep(findings, await _check_website(org, web))
            keep(findings, _check_phone(org, grantee, grantee_url))
            keep(
                findings,
                _check_provider_list(
                    org,
                    segments,
                    provider_list_url,
                    threshold=match_threshold,
                    borderline_margin=borderline_margin,
                ),
            )
            keep(findings, _unverified_phone(org, grantee))
        except Exception as exc:  # noqa: BLE001
            ledger.record_unexpected(org.name, exc)

    findings.extend(_new_grantees(by_name, matched, grantee_url))

    source_available = ledger.finalize()
    return CategoryReport.build(
        category=Category.LEGAL_AID,
        checked=len(organizations),
        findings=findings,
        source_available=source_available,
        errors=ledger.errors,
        generated_at=generated_at,
    )


async def _check_website(org: LegalAidOrganization, web: WebsiteProbe) -> Finding | None:
    if not org.website:
        return None
    status = await web.check_website(org.website)
    if status.ok:
        return None
    return website_finding(
        id=org.id,
        name=org.name,
        url=org.website,
        status=status,
        notes="Organization website not responding. May indicate closure or URL change.",
    )


def _check_phone(
    org: LegalAidOrganization,
    grantee: Grantee | None,
    grantee_url: str,
) -> Finding | None:
    if grantee is None or not grantee.phone or not org.phone:
        return None
    return phone_mismatch(
        id=org.id,
        name=org.name,
        stored=org.phone,
        candidates=[grantee.phone],
        verify_url=grantee.website or grantee_url,
        severity=Severity.HIGH,
        source_label="LSC grantee data",
    )


def _check_provider_list(
    org: LegalAidOrganization,
    segments: set[str] | None,
    provider_list_url: str,
    *,
    threshold: float,
    borderline_margin: float,
) -> Finding | None:
    if segments is None or (org.data_source or "").upper() != EOIR_DATA_SOURCE:
        return None
    result = match_provider_segments(
        org.name,
        segments,
        threshold=threshold,
        borderline_margin=borderline_margin,
    )
    if result.matched:
        return None
    return Finding(
        id=org.id,
        name=org.name,
        change_type=ChangeType.NOT_FOUND_ON_SOURCE,
        verify_url=provider_list_url,
        severity=Severity.MEDIUM,
        notes=(
            "Stored as EOIR-sourced but name not found in current EOIR PDF. May have been "
            "removed, renamed, or the PDF format may have changed. Verify manually."
        ),
    )


def _unverified_phone(org: LegalAidOrganization, grantee: Grantee | None) -> Finding | None:
    if grantee is not None and grantee.phone:
        return None
    if org.phone:
        notes = "No automated source lists this organization's phone. Call to confirm it is current."
    else:
        notes = "No phone stored and no automated source lists one. Find the intake line on the organization's website."
    return Finding(
        id=f"{org.id}-phone",
        name=org.name,
        change_type=ChangeType.MANUAL_REQUIRED,
        stored_value=org.phone,
        verify_url=org.website,
        severity=Severity.MEDIUM if org.phone else Severity.HIGH,
        notes=notes,
    )


def _new_grantees(
    by_name: Mapping[str, Grantee],
    matched: set[str],
    grantee_url: str,
) -> list[Finding]:
    findings: list[Finding] = []
    for key, grantee in by_name.items():
        if key in matched or not grantee.state:
            continue
        findings.append(
            Finding(
                id=f"new-lsc-{slugify(grantee.name)}",
                name=grantee.name,
                change_type=ChangeType.NEW_ON_SOURCE,
                verify_url=grantee.website or grantee_url,
                severity=Severity.LOW,
                notes=(
                    f"LSC grantee not in stored data. Location: {grantee.city or '?'}, "
                    f"{grantee.state}. Phone: {grantee.phone or 'not listed'}."
                ),
            )
        )
    return findings
