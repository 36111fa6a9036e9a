"""Stored reference records (read-only inputs to the checkers)."""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum

from .normalization import slugify


class FacilityType(StrEnum):
    IGSA = "IGSA"  # Intergovernmental Service Agreement
    CDF = "CDF"  # Contract Detention Facility
    USMS = "USMS"  # US Marshals
    SPC = "SPC"  # Service Processing Center
    FRC = "FRC"  # Family Residential Center


@dataclass(frozen=True, slots=True)
class ConsulateOffice:
    city: str
    address: str
    phone: str

    @property
    def city_and_state(self) -> tuple[str, str]:
        """Split ``"Los Angeles, CA"`` into its city and state parts."""
        city, _, state = self.city.rpartition(",")
        if not city:
            return self.city.strip(), ""
        return city.strip(), state.strip()


@dataclass(frozen=True, slots=True)
class Consulate:
    country: str
    main_phone: str
    website: str
    main_consulate: ConsulateOffice
    country_es: str | None = None
    emergency_phone: str | None = None
    email: str | None = None

    @property
    def id(self) -> str:
        return slugify(self.country)


@dataclass(frozen=True, slots=True)
class VisitationInfo:
    en: str
    es: str | None = None


@dataclass(frozen=True, slots=True)
class DetentionFacility:
    id: str
    name: str
    type: FacilityType
    address: str
    city: str
    state: str
    zip_code: str
    phone: str
    field_office: str
    average_capacity: int | None = None
    detainee_phone: str | None = None
    fax: str | None = None
    visitation_info: VisitationInfo | None = None


@dataclass(frozen=True, slots=True)
class LegalAidOrganization:
    name: str
    city: str
    state: str
    phone: str | None = None
    website: str | None = None
    data_source: str | None = None

    @property
    def id(self) -> str:
        return slugify(self.name)
