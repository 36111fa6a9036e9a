"""Consulate checker: official websites plus the geocoder.

Emergency lines have no automated source of truth and are always queued for
manual verification.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from datareview.domain.diff import (
    Category,
    CategoryReport,
    ChangeType,
    Finding,
    Severity,
    phones_match,
)
from datareview.domain.errors import SourceError
from datareview.domain.health import RunLedger

from ._common import keep, phone_mismatch, street_number_note, website_finding

if TYPE_CHECKING:
    from collections.abc import Sequence
    from datetime import datetime

    from datareview.domain.ports import Geocoder, Pacer, WebsiteProbe
    from datareview.domain.records import Consulate

log = logging.getLogger(__name__)

GEOCODER = "Nominatim"


async def check_consulates(
    consulates: Sequence[Consulate],
    *,
    web: WebsiteProbe,
    geocoder: Geocoder,
    pacer: Pacer,
    generated_at: datetime | None = None,
) -> CategoryReport:
    findings: list[Finding] = []
    ledger = RunLedger()
    ledger.source(GEOCODER)

    log.info("Checking %d consulates", len(consulates))
    for consulate in consulates:
        log.info("Checking: %s (%s)", consulate.country, consulate.main_consulate.city)
        try:
            await _check_consulate(
                consulate, findings, web=web, geocoder=geocoder, pacer=pacer, ledger=ledger
            )
        except Exception as exc:  # noqa: BLE001
            ledger.record_unexpected(consulate.country, exc)

    source_available = ledger.finalize()
    return CategoryReport.build(
        category=Category.CONSULATES,
        checked=len(consulates),
        findings=findings,
        source_available=source_available,
        errors=ledger.errors,
        generated_at=generated_at,
    )


async def _check_consulate(
    consulate: Consulate,
    findings: list[Finding],
    *,
    web: WebsiteProbe,
    geocoder: Geocoder,
    pacer: Pacer,
    ledger: RunLedger,
) -> None:
    keep(findings, await _check_website(consulate, web))
    keep(findings, *await _check_phones(consulate, web, pacer))
    keep(findings, await _check_geocode(consulate, geocoder, pacer, ledger))
    keep(findings, _emergency_line(consulate))


def _display_name(consulate: Consulate) -> str:
    return f"{consulate.country} Consulate ({consulate.main_consulate.city})"


async def _check_website(consulate: Consulate, web: WebsiteProbe) -> Finding | None:
    status = await web.check_website(consulate.website)
    if status.ok:
        return None
    return website_finding(
        id=consulate.id,
        name=f"{consulate.country} Consulate",
        url=consulate.website,
        status=status,
        notes="Consulate website is not responding. Verify the URL is current and update if redirected.",
    )


async def _check_phones(
    consulate: Consulate,
    web: WebsiteProbe,
    pacer: Pacer,
) -> list[Finding | None]:
    """Consulate phone, then the national main line when it is a different number."""

    stored = consulate.main_consulate.phone
    await pacer.scrape()
    scraped = await web.scrape_website_phones(consulate.website)
    if not scraped:
        # Regex scraping can not see JS-rendered pages; no match proves nothing.
        return [
            Finding(
                id=f"{consulate.id}-phone",
                name=_display_name(consulate),
                change_type=ChangeType.MANUAL_REQUIRED,
                stored_value=stored,
                verify_url=consulate.website,
                severity=Severity.MEDIUM,
                notes="No phone number could be read from the official website. Verify the main consulate phone manually.",
            )
        ]

    found = [
        phone_mismatch(
            id=consulate.id,
            name=_display_name(consulate),
            stored=stored,
            candidates=scraped,
            verify_url=consulate.website,
            severity=Severity.CRITICAL,
            source_label="the official website",
        )
    ]
    if consulate.main_phone and not phones_match(consulate.main_phone, stored):
        found.append(
            phone_mismatch(
                id=f"{consulate.id}-main",
                name=f"{consulate.country} — Main Phone",
                stored=consulate.main_phone,
                candidates=scraped,
                verify_url=consulate.website,
                severity=Severity.HIGH,
                source_label="the official website (national/main line)",
            )
        )
    return found


async def _check_geocode(
    consulate: Consulate,
    geocoder: Geocoder,
    pacer: Pacer,
    ledger: RunLedger,
) -> Finding | None:
    office = consulate.main_consulate
    city, state = office.city_and_state
    await pacer.nominatim()
    try:
        match = await geocoder.check_with_nominatim(f"{consulate.country} Consulate", city, state)
    except SourceError as exc:
        ledger.record_error(GEOCODER, consulate.country, exc)
        return None
    ledger.source(GEOCODER).record_success()

    if not match.found:
        return Finding(
            id=consulate.id,
            name=_display_name(consulate),
            change_type=ChangeType.NOT_FOUND_ON_SOURCE,
            stored_value=office.address,
            verify_url=consulate.website,
            severity=Severity.MEDIUM,
            notes="Not found on OpenStreetMap near the stored city. OSM coverage is incomplete; confirm the office still operates at this address.",
        )
    if match.city_match is False:
        return Finding(
            id=consulate.id,
            name=_display_name(consulate),
            change_type=ChangeType.ADDRESS_CHANGED,
            stored_value=office.address,
            source_value=match.display_name,
            verify_url=consulate.website,
            severity=Severity.MEDIUM,
            notes=(
                f"Geocoder places this consulate outside {city}. The office may have moved. "
                + street_number_note(office.address, match.display_name)
            ),
        )
    return None


def _emergency_line(consulate: Consulate) -> Finding:
    phone = consulate.emergency_phone
    if phone:
        notes = f"Verify emergency/after-hours number on official website: {consulate.website}"
    else:
        notes = f"No emergency phone stored. Check official website for an after-hours line: {consulate.website}"
    return Finding(
        id=f"{consulate.id}-emergency",
        name=f"{consulate.country} — Emergency Line",
        change_type=ChangeType.MANUAL_REQUIRED,
        stored_value=phone or "(not set)",
        verify_url=consulate.website,
        severity=Severity.MEDIUM if phone else Severity.HIGH,
        notes=notes,
    )
