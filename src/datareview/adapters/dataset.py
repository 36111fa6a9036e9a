"""Reference dataset loader.

The dataset is three camelCase JSON arrays. By default the copy bundled with
the package is read; ``DATAREVIEW_DATASET_DIR`` points the checkers at a
checkout of the live dataset instead.
"""

from __future__ import annotations

from importlib import resources
from logging import getLogger
from typing import TYPE_CHECKING

from pydantic import BaseModel, ConfigDict, TypeAdapter, ValidationError
from pydantic.alias_generators import to_camel

from datareview.domain.records import (
    Consulate,
    ConsulateOffice,
    DetentionFacility,
    FacilityType,
    LegalAidOrganization,
    VisitationInfo,
)

if TYPE_CHECKING:
    from importlib.resources.abc import Traversable
    from pathlib import Path

log = getLogger(__name__)

CONSULATES_FILE = "consulates.json"
DETENTION_FILE = "detention-facilities.json"
LEGAL_AID_FILE = "legal-aid-organizations.json"


class DatasetError(RuntimeError):
    """Raised when a dataset file is missing or does not match its schema."""


class DatasetModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")


class ConsulateOfficeRow(DatasetModel):
    city: str
    address: str
    phone: str


class ConsulateRow(DatasetModel):
    country: str
    country_es: str | None = None
    main_phone: str
    emergency_phone: str | None = None
    website: str
    email: str | None = None
    main_consulate: ConsulateOfficeRow

    def to_record(self) -> Consulate:
        office = self.main_consulate
        return Consulate(
            country=self.country,
            main_phone=self.main_phone,
            website=self.website,
            main_consulate=ConsulateOffice(city=office.city, address=office.address, phone=office.phone),
            country_es=self.country_es,
            emergency_phone=self.emergency_phone,
            email=self.email,
        )


class VisitationRow(DatasetModel):
    en: str
    es: str | None = None


class DetentionFacilityRow(DatasetModel):
    id: str
    name: str
    type: FacilityType
    address: str
    city: str
    state: str
    zip_code: str
    phone: str
    detainee_phone: str | None = None
    fax: str | None = None
    field_office: str
    average_capacity: int | None = None
    visitation_info: VisitationRow | None = None

    def to_record(self) -> DetentionFacility:
        visitation = (
            VisitationInfo(en=self.visitation_info.en, es=self.visitation_info.es)
            if self.visitation_info
            else None
        )
        return DetentionFacility(
            id=self.id,
            name=self.name,
            type=self.type,
            address=self.address,
            city=self.city,
            state=self.state,
            zip_code=self.zip_code,
            phone=self.phone,
            field_office=self.field_office,
            average_capacity=self.average_capacity,
            detainee_phone=self.detainee_phone,
            fax=self.fax,
            visitation_info=visitation,
        )


class LegalAidRow(DatasetModel):
    name: str
    city: str
    state: str
    phone: str | None = None
    website: str | None = None
    data_source: str | None = None

    def to_record(self) -> LegalAidOrganization:
        return LegalAidOrganization(
            name=self.name,
            city=self.city,
            state=self.state,
            phone=self.phone or None,
            website=self.website or None,
            data_source=self.data_source,
        )


_CONSULATES = TypeAdapter(list[ConsulateRow])
_FACILITIES = TypeAdapter(list[DetentionFacilityRow])
_LEGAL_AID = TypeAdapter(list[LegalAidRow])


class ReferenceDataset:
    """Read-only view over one dataset directory."""

    def __init__(self, directory: Path | None = None) -> None:
        self._root: Traversable | Path = (
            directory if directory is not None else resources.files("datareview") / "data"
        )

    def _read(self, filename: str) -> bytes:
        path = self._root / filename
        try:
            return path.read_bytes()
        except OSError as exc:
            raise DatasetError(f"Cannot read dataset file {path}: {exc}") from exc

    def consulates(self) -> list[Consulate]:
        rows = self._validate(_CONSULATES, CONSULATES_FILE)
        return [row.to_record() for row in rows]

    def detention_facilities(self) -> list[DetentionFacility]:
        rows = self._validate(_FACILITIES, DETENTION_FILE)
        return [row.to_record() for row in rows]

    def legal_aid_organizations(self) -> list[LegalAidOrganization]:
        rows = self._validate(_LEGAL_AID, LEGAL_AID_FILE)
        return [row.to_record() for row in rows]

    def _validate[RowT](self, adapter: TypeAdapter[list[RowT]], filename: str) -> list[RowT]:
        try:
            rows = adapter.validate_json(self._read(filename))
        except ValidationError as exc:
            raise DatasetError(f"Dataset file {filename} is invalid: {exc}") from exc
        log.info("Loaded %d records from %s", len(rows), filename)
        return rows
