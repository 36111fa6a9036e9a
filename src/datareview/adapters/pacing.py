"""Politeness delays required by the sources' usage policies."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass

from datareview.config.sources import NOMINATIM_DELAY_SECONDS, SCRAPE_DELAY_SECONDS


async def nominatim_delay(seconds: float = NOMINATIM_DELAY_SECONDS) -> None:
    """Await before every geocoder call (public instance allows 1 request/second)."""
    await asyncio.sleep(seconds)


async def scrape_delay(seconds: float = SCRAPE_DELAY_SECONDS) -> None:
    await asyncio.sleep(seconds)


@dataclass(frozen=True, slots=True)
class Pacing:
    nominatim_seconds: float = NOMINATIM_DELAY_SECONDS
    scrape_seconds: float = SCRAPE_DELAY_SECONDS

    async def nominatim(self) -> None:
        await nominatim_delay(self.nominatim_seconds)

    async def scrape(self) -> None:
        await scrape_delay(self.scrape_seconds)
