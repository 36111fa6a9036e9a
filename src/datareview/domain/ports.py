"""Ports the category checkers depend on."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from .sources import FacilityListing, GeocodeMatch, Grantee, WebsiteStatus


@runtime_checkable
class WebsiteProbe(Protocol):
    """Liveness and phone scraping for arbitrary organization websites.

    Neither method raises: failures come back as ``ok=False`` or ``[]``.
    """

    async def check_website(self, url: str) -> WebsiteStatus: ...

    async def scrape_website_phones(self, url: str) -> list[str]: ...


@runtime_checkable
class Geocoder(Protocol):
    async def check_with_nominatim(self, name: str, city: str, state: str) -> GeocodeMatch: ...


class FacilityListSource(Protocol):
    async def fetch_facilities(self) -> list[FacilityListing]: ...


class ProviderListSource(Protocol):
    async def fetch_provider_segments(self) -> set[str]: ...


class GranteeSource(Protocol):
    async def fetch_grantees(self) -> list[Grantee]: ...


class Pacer(Protocol):
    """Politeness delays awaited before calls to rate-limited sources."""

    async def nominatim(self) -> None: ...

    async def scrape(self) -> None: ...
