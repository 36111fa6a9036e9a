"""Reusable fakes and record factories for checker tests."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import UTC, datetime
from typing import TYPE_CHECKING

from datareview.domain.records import (
    Consulate,
    ConsulateOffice,
    DetentionFacility,
    FacilityType,
    LegalAidOrganization,
    VisitationInfo,
)
from datareview.domain.sources import FacilityListing, GeocodeMatch, Grantee, WebsiteStatus

if TYPE_CHECKING:
    from collections.abc import Mapping, Sequence

FIXED_NOW = datetime(2026, 1, 15, 12, 0, tzinfo=UTC)
ICE_URL = "https://ice.example/facilities"
EOIR_URL = "https://eoir.example/providers"
LSC_URL = "https://lsc.example/grantees"


def make_consulate(**overrides: object) -> Consulate:
    consulate = Consulate(
        country="Mexico",
        country_es="México",
        main_phone="1-877-639-4835",
        emergency_phone="1-520-623-7874",
        website="https://consulmex.example/",
        main_consulate=ConsulateOffice(
            city="Los Angeles, CA",
            address="2401 W 6th St, Los Angeles, CA 90057",
            phone="(213) 351-6800",
        ),
    )
    return replace(consulate, **overrides)  # type: ignore[arg-type]


def make_facility(**overrides: object) -> DetentionFacility:
    facility = DetentionFacility(
        id="az-eloy",
        name="Eloy Detention Center",
        type=FacilityType.CDF,
        address="1705 E Hanna Rd",
        city="Eloy",
        state="AZ",
        zip_code="85131",
        phone="(520) 464-8600",
        field_office="Phoenix",
        average_capacity=1500,
        visitation_info=VisitationInfo(en="Visitation hours vary."),
    )
    return replace(facility, **overrides)  # type: ignore[arg-type]


def make_organization(**overrides: object) -> LegalAidOrganization:
    organization = LegalAidOrganization(
        name="Northwest Immigrant Rights Project",
        city="Seattle",
        state="WA",
        phone="(206) 587-4009",
        website="https://nwirp.example",
        data_source="EOIR",
    )
    return replace(organization, **overrides)  # type: ignore[arg-type]


@dataclass
class FakeWebProbe:
    statuses: Mapping[str, WebsiteStatus] = field(default_factory=dict)
    phones: Mapping[str, Sequence[str]] = field(default_factory=dict)
    checked: list[str] = field(default_factory=list)
    scraped: list[str] = field(default_factory=list)
    error: Exception | None = None

    async def check_website(self, url: str) -> WebsiteStatus:
        self.checked.append(url)
        if self.error is not None:
            raise self.error
        return self.statuses.get(url, WebsiteStatus(ok=True, status=200))

    async def scrape_website_phones(self, url: str) -> list[str]:
        self.scraped.append(url)
        return list(self.phones.get(url, ()))


@dataclass
class FakeGeocoder:
    result: GeocodeMatch = field(
        default_factory=lambda: GeocodeMatch(found=True, display_name="Somewhere", city_match=True)
    )
    error: Exception | None = None
    calls: list[tuple[str, str, str]] = field(default_factory=list)

    async def check_with_nominatim(self, name: str, city: str, state: str) -> GeocodeMatch:
        self.calls.append((name, city, state))
        if self.error is not None:
            raise self.error
        return self.result


@dataclass
class FakeFacilityList:
    rows: list[FacilityListing] = field(default_factory=list)
    error: Exception | None = None

    async def fetch_facilities(self) -> list[FacilityListing]:
        if self.error is not None:
            raise self.error
        return list(self.rows)


@dataclass
class FakeProviderList:
    segments: set[str] = field(default_factory=set)
    error: Exception | None = None

    async def fetch_provider_segments(self) -> set[str]:
        if self.error is not None:
            raise self.error
        return set(self.segments)


@dataclass
class FakeGrantees:
    grantees: list[Grantee] = field(default_factory=list)
    error: Exception | None = None

    async def fetch_grantees(self) -> list[Grantee]:
        if self.error is not None:
            raise self.error
        return list(self.grantees)


@dataclass
class RecordingPacer:
    """Pacer that records its calls instead of sleeping."""

    nominatim_calls: int = 0
    scrape_calls: int = 0

    async def nominatim(self) -> None:
        self.nominatim_calls += 1

    async def scrape(self) -> None:
        self.scrape_calls += 1
