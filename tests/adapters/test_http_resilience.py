from __future__ import annotations

import asyncio

import httpx

from datareview.adapters.http_resilience import ResilientClient
from datareview.config import NO_RETRY, RateLimit, ResilienceConfig, RetryPolicy


def test_retry_transport_retries_server_errors() -> None:
    statuses = iter([503, 200])

    def handler(_request: httpx.Request) -> httpx.Response:
        return httpx.Response(next(statuses))

    config = ResilienceConfig(
        name="list",
        retry=RetryPolicy(total=2, backoff_factor=0.0, backoff_jitter=0.0),
    )

    async def fetch() -> int:
        async with ResilientClient(config, transport=httpx.MockTransport(handler)) as client:
            response = await client.get("https://list.example/page")
            return response.status_code

    assert asyncio.run(fetch()) == 200


def test_no_retry_returns_first_response() -> None:
    calls: list[str] = []

    def handler(request: httpx.Request) -> httpx.Response:
        calls.append(request.method)
        return httpx.Response(503)

    config = ResilienceConfig(name="probe", retry=NO_RETRY)

    async def fetch() -> int:
        async with ResilientClient(config, transport=httpx.MockTransport(handler)) as client:
            response = await client.head("https://site.example")
            return response.status_code

    assert asyncio.run(fetch()) == 503
    assert calls == ["HEAD"]


def test_default_headers_and_base_url_are_applied() -> None:
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json=[])

    config = ResilienceConfig(
        name="nominatim",
        base_url="https://geo.example",
        retry=NO_RETRY,
        ratelimit=RateLimit(max_calls=5, per_seconds=1.0),
        default_headers={"User-Agent": "DataReview/1.0 (test)"},
    )

    async def fetch() -> None:
        async with ResilientClient(config, transport=httpx.MockTransport(handler)) as client:
            await client.get("/search", params={"q": "x"})

    asyncio.run(fetch())

    assert str(seen[0].url) == "https://geo.example/search?q=x"
    assert seen[0].headers["User-Agent"] == "DataReview/1.0 (test)"
