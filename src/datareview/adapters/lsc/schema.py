"""Pydantic models for the LSC grantee finder payload.

The endpoint has served both a bare array and ``{"grantees": [...]}``, and
field names differ between releases (``organization_name`` and
``state_abbreviation`` in older payloads).
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, model_validator

from datareview.domain.sources import Grantee

_FIELD_FALLBACKS = {
    "name": ("name", "organization_name"),
    "state": ("state", "state_abbreviation"),
    "city": ("city",),
    "phone": ("phone",),
    "website": ("website",),
}


def _first_present(entry: dict[str, Any], keys: tuple[str, ...]) -> str | None:
    for key in keys:
        value = entry.get(key)
        if value is None or isinstance(value, (dict, list)):
            continue
        text = str(value).strip()
        if text:
            return text
    return None


class LscGranteePayload(BaseModel):
    model_config = ConfigDict(extra="ignore", frozen=True)

    name: str = ""
    state: str = ""
    city: str | None = None
    phone: str | None = None
    website: str | None = None

    @model_validator(mode="before")
    @classmethod
    def _coalesce_fields(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data
        values = {field: _first_present(data, keys) for field, keys in _FIELD_FALLBACKS.items()}
        values["name"] = values["name"] or ""
        values["state"] = values["state"] or ""
        return values

    def to_grantee(self) -> Grantee:
        return Grantee(
            name=self.name,
            state=self.state,
            city=self.city,
            phone=self.phone,
            website=self.website,
        )


def grantee_entries(payload: object) -> list[dict[str, Any]]:
    """Object entries from either payload shape; anything else yields nothing."""

    if isinstance(payload, list):
        items: list[object] = payload
    elif isinstance(payload, dict):
        wrapped = payload.get("grantees")
        items = wrapped if isinstance(wrapped, list) else []
    else:
        items = []
    return [item for item in items if isinstance(item, dict)]


def parse_grantees(payload: object) -> list[Grantee]:
    grantees: list[Grantee] = []
    for entry in grantee_entries(payload):
        record = LscGranteePayload.model_validate(entry)
        if record.name:
            grantees.append(record.to_grantee())
    return grantees
