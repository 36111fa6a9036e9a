"""ICE public detention facility list (an HTML table on ice.gov)."""

from __future__ import annotations

import re
from typing import TYPE_CHECKING

import httpx
from bs4 import BeautifulSoup

from datareview.config.sources import ICE_FACILITIES_URL
from datareview.domain.errors import SourceError
from datareview.domain.sources import FacilityListing

if TYPE_CHECKING:
    from .http_resilience import ResilientClient

_WHITESPACE_RE = re.compile(r"\s+")


class IceSourceError(SourceError):
    def __init__(self, message: str) -> None:
        super().__init__(message, source="ice")


def parse_facility_table(html: str) -> list[FacilityListing]:
    """Every table row with at least three cells and a non-empty first cell.

    Columns are read positionally as name, city, state and an optional phone;
    whitespace inside the phone cell is removed.
    """

    soup = BeautifulSoup(html, "html.parser")
    rows: list[FacilityListing] = []
    for table in soup.find_all("table"):
        for tr in table.find_all("tr"):
            cells = [td.get_text().strip() for td in tr.find_all("td")]
            if len(cells) < 3 or not cells[0]:
                continue
            phone = _WHITESPACE_RE.sub("", cells[3]) if len(cells) > 3 else ""
            rows.append(
                FacilityListing(
                    name=cells[0],
                    city=cells[1],
                    state=cells[2],
                    phone=phone or None,
                )
            )
    return rows


class IceFacilityList:
    def __init__(self, client: ResilientClient, url: str = ICE_FACILITIES_URL) -> None:
        self._client = client
        self.url = url

    async def fetch_facilities(self) -> list[FacilityListing]:
        try:
            response = await self._client.get(self.url)
        except httpx.HTTPError as exc:
            raise IceSourceError(f"ICE page request failed: {exc}") from exc
        if not response.is_success:
            raise IceSourceError(f"ICE page returned HTTP {response.status_code}")

        return parse_facility_table(response.text)
