"""Nominatim geocoder adapter."""

from __future__ import annotations

from .client import NominatimAPIError, NominatimClient
from .schema import NominatimPlace, NominatimSearchResponse

__all__ = [
    "NominatimAPIError",
    "NominatimClient",
    "NominatimPlace",
    "NominatimSearchResponse",
]
