"""Pydantic models for the Nominatim ``/search`` JSON response."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, RootModel


class NominatimBaseModel(BaseModel):
    model_config = ConfigDict(extra="ignore")


class NominatimAddress(NominatimBaseModel):
    city: str | None = None
    town: str | None = None
    village: str | None = None
    state: str | None = None
    iso_code: str | None = Field(default=None, alias="ISO3166-2-lvl4")

    @property
    def locality(self) -> str:
        return self.city or self.town or self.village or ""


class NominatimPlace(NominatimBaseModel):
    display_name: str
    lat: str
    lon: str
    address: NominatimAddress = Field(default_factory=NominatimAddress)

    def in_state(self, state: str) -> bool:
        wanted = state.upper()
        if not wanted:
            return False
        if wanted in self.display_name.upper():
            return True
        if self.address.state and wanted in self.address.state.upper():
            return True
        # ISO3166-2-lvl4 is "US-CA" for California.
        return bool(self.address.iso_code) and self.address.iso_code.upper() == f"US-{wanted}"

    def in_city(self, city: str) -> bool:
        wanted = city.lower()
        return wanted in self.display_name.lower() or wanted in self.address.locality.lower()


class NominatimSearchResponse(RootModel[list[NominatimPlace]]):
    pass
