"""Typed rows produced by the source adapters.

These exist only for the duration of one run; nothing here is persisted except
through the findings it contributes to.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class WebsiteStatus:
    ok: bool
    status: int

    def describe(self) -> str:
        return "HTTP timeout/unreachable" if self.status == 0 else f"HTTP {self.status}"


@dataclass(frozen=True, slots=True)
class GeocodeMatch:
    found: bool
    display_name: str | None = None
    lat: str | None = None
    lon: str | None = None
    city_match: bool | None = None


@dataclass(frozen=True, slots=True)
class FacilityListing:
    """One row of the ICE detention facility table."""

    name: str
    city: str
    state: str
    phone: str | None = None


@dataclass(frozen=True, slots=True)
class Grantee:
    """One LSC grantee record."""

    name: str
    state: str
    city: str | None = None
    phone: str | None = None
    website: str | None = None


@dataclass(frozen=True, slots=True)
class ProviderMatch:
    matched: bool
    ratio: float
    borderline: bool
