from __future__ import annotations

import json
from typing import TYPE_CHECKING

import pytest

from datareview.adapters.dataset import DatasetError, ReferenceDataset
from datareview.domain.records import FacilityType

if TYPE_CHECKING:
    from pathlib import Path


def test_bundled_dataset_loads_every_category() -> None:
    dataset = ReferenceDataset()

    consulates = dataset.consulates()
    facilities = dataset.detention_facilities()
    organizations = dataset.legal_aid_organizations()

    assert consulates
    assert facilities
    assert organizations
    assert len({consulate.id for consulate in consulates}) == len(consulates)
    assert len({facility.id for facility in facilities}) == len(facilities)


def test_bundled_consulate_fields_are_translated() -> None:
    mexico = next(c for c in ReferenceDataset().consulates() if c.country == "Mexico")

    assert mexico.id == "mexico"
    assert mexico.main_consulate.city_and_state == ("Los Angeles", "CA")
    assert mexico.main_consulate.phone == "(213) 351-6800"
    assert mexico.emergency_phone


def test_custom_directory_is_read(tmp_path: Path) -> None:
    (tmp_path / "detention-facilities.json").write_text(
        json.dumps(
            [
                {
                    "id": "tx-example",
                    "name": "Example Processing Center",
                    "type": "SPC",
                    "address": "1 Main St",
                    "city": "Example",
                    "state": "TX",
                    "zipCode": "75001",
                    "phone": "(555) 010-0000",
                    "fieldOffice": "Dallas",
                    "visitationInfo": {"en": "Weekends", "es": "Fines de semana"},
                }
            ]
        ),
        encoding="utf-8",
    )

    [facility] = ReferenceDataset(tmp_path).detention_facilities()

    assert facility.type is FacilityType.SPC
    assert facility.zip_code == "75001"
    assert facility.average_capacity is None
    assert facility.visitation_info is not None
    assert facility.visitation_info.es == "Fines de semana"


def test_missing_file_raises_dataset_error(tmp_path: Path) -> None:
    with pytest.raises(DatasetError, match="Cannot read"):
        ReferenceDataset(tmp_path).consulates()


def test_invalid_file_raises_dataset_error(tmp_path: Path) -> None:
    (tmp_path / "legal-aid-organizations.json").write_text('[{"city": "Nowhere"}]', encoding="utf-8")

    with pytest.raises(DatasetError, match="invalid"):
        ReferenceDataset(tmp_path).legal_aid_organizations()
