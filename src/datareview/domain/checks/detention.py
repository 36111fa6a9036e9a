"""Detention facility checker against the ICE facility list and the geocoder."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from datareview.domain.diff import Category, CategoryReport, ChangeType, Finding, Severity
from datareview.domain.errors import SourceError
from datareview.domain.health import RunLedger
from datareview.domain.normalization import normalize_org_name, slugify

from ._common import keep, phone_mismatch, street_number_note

if TYPE_CHECKING:
    from collections.abc import Sequence
    from datetime import datetime

    from datareview.domain.ports import FacilityListSource, Geocoder, Pacer
    from datareview.domain.records import DetentionFacility
    from datareview.domain.sources import FacilityListing

log = logging.getLogger(__name__)

FACILITY_LIST = "ICE facility list"
GEOCODER = "Nominatim"


async def check_detention_facilities(
    facilities: Sequence[DetentionFacility],
    *,
    facility_list: FacilityListSource,
    geocoder: Geocoder,
    pacer: Pacer,
    list_url: str,
    generated_at: datetime | None = None,
) -> CategoryReport:
    ledger = RunLedger()
    ledger.source(GEOCODER)
    listings = await _load_listings(facility_list, ledger)
    list_available = ledger.source(FACILITY_LIST).available

    by_name: dict[str, FacilityListing] = {}
    for row in listings:
        by_name.setdefault(normalize_org_name(row.name), row)

    findings: list[Finding] = []
    for facility in facilities:
        log.info("Checking: %s (%s, %s)", facility.name, facility.city, facility.state)
        listing = by_name.get(normalize_org_name(facility.name))
        try:
            keep(findings, _check_phone(facility, listing, list_url))
            keep(findings, await _check_geocode(facility, geocoder, pacer, ledger))
            keep(findings, _check_listed(facility, listing, list_available, list_url))
            keep(findings, _visitation(facility))
        except Exception as exc:  # noqa: BLE001
            ledger.record_unexpected(facility.name, exc)

    if list_available:
        findings.extend(_new_on_list(facilities, listings, list_url))

    source_available = ledger.finalize()
    return CategoryReport.build(
        category=Category.DETENTION_FACILITIES,
        checked=len(facilities),
        findings=findings,
        source_available=source_available,
        errors=ledger.errors,
        generated_at=generated_at,
    )


async def _load_listings(source: FacilityListSource, ledger: RunLedger) -> list[FacilityListing]:
    health = ledger.source(FACILITY_LIST)
    try:
        listings = await source.fetch_facilities()
    except SourceError as exc:
        ledger.source_unavailable(FACILITY_LIST, exc)
        return []
    if not listings:
        ledger.source_unavailable(
            FACILITY_LIST,
            SourceError("page returned no facility rows; the layout may have changed", source="ice"),
        )
        return []
    health.record_success()
    log.info("ICE page: found %d facility rows", len(listings))
    return listings


def _check_phone(
    facility: DetentionFacility,
    listing: FacilityListing | None,
    list_url: str,
) -> Finding | None:
    if listing is None or not listing.phone:
        return None
    return phone_mismatch(
        id=facility.id,
        name=facility.name,
        stored=facility.phone,
        candidates=[listing.phone],
        verify_url=list_url,
        severity=Severity.HIGH,
        source_label="the ICE facility list",
    )


async def _check_geocode(
    facility: DetentionFacility,
    geocoder: Geocoder,
    pacer: Pacer,
    ledger: RunLedger,
) -> Finding | None:
    await pacer.nominatim()
    try:
        match = await geocoder.check_with_nominatim(facility.name, facility.city, facility.state)
    except SourceError as exc:
        ledger.record_error(GEOCODER, facility.name, exc)
        return None
    ledger.source(GEOCODER).record_success()

    if not match.found:
        # Government facilities are often missing from OSM; ICE decides existence.
        log.info("  %s not on OpenStreetMap; relying on the ICE list", facility.name)
        return None
    if match.city_match is False:
        return Finding(
            id=facility.id,
            name=facility.name,
            change_type=ChangeType.ADDRESS_CHANGED,
            stored_value=f"{facility.address}, {facility.city}, {facility.state} {facility.zip_code}",
            source_value=match.display_name,
            verify_url=f"tel:{facility.phone}",
            severity=Severity.MEDIUM,
            notes=(
                f"Geocoder places this facility outside {facility.city}. Confirm the address by phone. "
                + street_number_note(facility.address, match.display_name)
            ),
        )
    return None


def _check_listed(
    facility: DetentionFacility,
    listing: FacilityListing | None,
    list_available: bool,
    list_url: str,
) -> Finding | None:
    if not list_available or listing is not None:
        return None
    return Finding(
        id=facility.id,
        name=facility.name,
        change_type=ChangeType.NOT_FOUND_ON_SOURCE,
        verify_url=list_url,
        severity=Severity.HIGH,
        notes="Not found on ICE facility list. Possible closure or rename.",
    )


def _visitation(facility: DetentionFacility) -> Finding:
    if facility.visitation_info is not None:
        notes = "Verify current visitation hours by calling the facility."
    else:
        notes = (
            "No visitation info stored. Call facility to confirm whether visitation "
            "is available and at what hours."
        )
    return Finding(
        id=facility.id,
        name=facility.name,
        change_type=ChangeType.MANUAL_REQUIRED,
        stored_value=facility.visitation_info.en if facility.visitation_info else None,
        verify_url=f"tel:{facility.phone}",
        severity=Severity.MEDIUM if facility.visitation_info else Severity.HIGH,
        notes=notes,
    )


def _new_on_list(
    facilities: Sequence[DetentionFacility],
    listings: Sequence[FacilityListing],
    list_url: str,
) -> list[Finding]:
    stored = {normalize_org_name(facility.name) for facility in facilities}
    seen: set[str] = set()
    findings: list[Finding] = []
    for row in listings:
        key = normalize_org_name(row.name)
        if key in stored or key in seen:
            continue
        seen.add(key)
        findings.append(
            Finding(
                id=f"new-{slugify(row.name)}",
                name=row.name,
                change_type=ChangeType.NEW_ON_SOURCE,
                verify_url=list_url,
                severity=Severity.MEDIUM,
                notes=(
                    f"Found on ICE.gov but not in our data. Location: {row.city}, {row.state}. "
                    f"Phone: {row.phone or 'not listed'}."
                ),
            )
        )
    return findings
