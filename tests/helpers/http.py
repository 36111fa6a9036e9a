"""Resilient clients wired to ``httpx.MockTransport`` handlers."""

from __future__ import annotations

from typing import TYPE_CHECKING

import httpx

from datareview.adapters.http_resilience import ResilientClient
from datareview.config import NO_RETRY, ResilienceConfig

if TYPE_CHECKING:
    from collections.abc import Callable


def mock_client(
    handler: Callable[[httpx.Request], httpx.Response],
    *,
    base_url: str | None = None,
) -> ResilientClient:
    config = ResilienceConfig(name="test", base_url=base_url, retry=NO_RETRY)
    return ResilientClient(config, transport=httpx.MockTransport(handler))


def routes(pages: dict[str, httpx.Response]) -> Callable[[httpx.Request], httpx.Response]:
    """Handler answering by full URL, ignoring a trailing slash; anything unknown is a 404."""

    normalized = {url.rstrip("/"): response for url, response in pages.items()}

    def handler(request: httpx.Request) -> httpx.Response:
        return normalized.get(str(request.url).rstrip("/"), httpx.Response(404))

    return handler
