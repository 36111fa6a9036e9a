"""OpenStreetMap Nominatim existence probe.

Usage policy (https://operations.osmfoundation.org/policies/nominatim/): at
most one request per second and an identifying User-Agent. The client's
resilience config carries both, so every call site shares one token bucket.
"""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING

import httpx
from pydantic import ValidationError

from datareview.domain.errors import SourceError
from datareview.domain.sources import GeocodeMatch

from .schema import NominatimSearchResponse

if TYPE_CHECKING:
    from datareview.adapters.http_resilience import ResilientClient

log = getLogger(__name__)

SEARCH_PATH = "/search"
RESULT_LIMIT = 3


class NominatimAPIError(SourceError):
    """Raised when Nominatim fails or answers with something other than search results."""

    def __init__(self, message: str) -> None:
        super().__init__(message, source="nominatim")


class NominatimClient:
    def __init__(self, client: ResilientClient) -> None:
        self._client = client

    async def check_with_nominatim(self, name: str, city: str, state: str) -> GeocodeMatch:
        """Search for ``name`` near ``city, state``.

        ``found=False`` is a soft signal: government facilities and small
        nonprofits are often missing from OSM.
        """

        params = {
            "q": f"{name}, {city}, {state}, USA",
            "format": "json",
            "limit": str(RESULT_LIMIT),
            "addressdetails": "1",
            "countrycodes": "us",
        }
        try:
            response = await self._client.get(SEARCH_PATH, params=params)
        except httpx.HTTPError as exc:
            raise NominatimAPIError(f"Nominatim request failed: {exc}") from exc
        if not response.is_success:
            raise NominatimAPIError(f"Nominatim HTTP {response.status_code}")

        try:
            places = NominatimSearchResponse.model_validate_json(response.content).root
        except ValidationError as exc:
            raise NominatimAPIError("Unexpected Nominatim response payload") from exc

        if not places:
            log.debug("  no Nominatim hit for %r", params["q"])
            return GeocodeMatch(found=False)

        best = next((place for place in places if place.in_state(state)), places[0])
        return GeocodeMatch(
            found=True,
            display_name=best.display_name,
            lat=best.lat,
            lon=best.lon,
            city_match=best.in_city(city),
        )
