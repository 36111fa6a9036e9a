"""LSC grantee finder client."""

from __future__ import annotations

from typing import TYPE_CHECKING

import httpx

from datareview.config.sources import LSC_GRANTEES_URL
from datareview.domain.errors import SourceError

from .schema import parse_grantees

if TYPE_CHECKING:
    from datareview.adapters.http_resilience import ResilientClient
    from datareview.domain.sources import Grantee


class LscSourceError(SourceError):
    def __init__(self, message: str) -> None:
        super().__init__(message, source="lsc")


class LscGranteeClient:
    def __init__(self, client: ResilientClient, url: str = LSC_GRANTEES_URL) -> None:
        self._client = client
        self.url = url

    async def fetch_grantees(self) -> list[Grantee]:
        try:
            response = await self._client.get(self.url)
        except httpx.HTTPError as exc:
            raise LscSourceError(f"LSC API request failed: {exc}") from exc
        if not response.is_success:
            raise LscSourceError(f"LSC API HTTP {response.status_code}")

        try:
            payload = response.json()
        except ValueError as exc:
            # JSONDecodeError and UnicodeDecodeError both derive from ValueError.
            raise LscSourceError("LSC API returned invalid JSON") from exc

        return parse_grantees(payload)
