from __future__ import annotations

import asyncio

import pytest

from datareview.adapters import pacing
from datareview.adapters.pacing import Pacing


def test_pacing_sleeps_for_configured_delays(monkeypatch: pytest.MonkeyPatch) -> None:
    slept: list[float] = []

    async def fake_sleep(seconds: float) -> None:
        slept.append(seconds)

    monkeypatch.setattr(pacing.asyncio, "sleep", fake_sleep)
    pacer = Pacing(nominatim_seconds=1.1, scrape_seconds=0.5)

    async def exercise() -> None:
        await pacer.nominatim()
        await pacer.scrape()
        await pacing.nominatim_delay()

    asyncio.run(exercise())

    assert slept == [1.1, 0.5, 1.1]
