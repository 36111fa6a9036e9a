"""Organization website probes: liveness check and best-effort phone scraping."""

from __future__ import annotations

import re
from logging import getLogger
from typing import TYPE_CHECKING

import httpx
from bs4 import BeautifulSoup

from datareview.domain.sources import WebsiteStatus

if TYPE_CHECKING:
    from .http_resilience import ResilientClient

log = getLogger(__name__)

CONTACT_PATHS = (
    "",
    "/contact",
    "/contacto",
    "/contact-us",
    "/en/contact",
    "/en/contact-us",
    "/about/contact",
)

# (213) 351-6800 | 213-351-6800 | 213.351.6800; bare separators must be
# consistent punctuation so zip codes and other digit runs do not match.
_US_PHONE_RE = re.compile(
    r"\((\d{3})\)\s*(\d{3})[-.\s](\d{4})"
    r"|(?<!\d)(\d{3})[.-](\d{3})[.-](\d{4})(?!\d)"
)

# Servers that refuse HEAD answer with one of these; retry the probe as GET.
_HEAD_UNSUPPORTED = frozenset({405, 501})

_PROBE_ERRORS = (httpx.HTTPError, httpx.InvalidURL)


def page_text(html: str) -> str:
    soup = BeautifulSoup(html, "html.parser")
    for tag in soup(["script", "style", "noscript"]):
        tag.decompose()
    return " ".join(soup.get_text(" ").split())


def extract_us_phones(html: str) -> list[str]:
    """US phone numbers on a page as ``(ddd) ddd-dddd``, in order of first appearance."""

    found: dict[str, None] = {}
    for match in _US_PHONE_RE.finditer(page_text(html)):
        groups = match.groups()
        area, exchange, line = groups[0:3] if groups[0] else groups[3:6]
        found.setdefault(f"({area}) {exchange}-{line}", None)
    return list(found)


class WebProbe:
    """Website liveness and phone scraping over two run-scoped clients.

    Both operations swallow every transport failure: a checker calls them once
    per stored record and one flaky site must not abort the run.
    """

    def __init__(self, *, website_client: ResilientClient, scrape_client: ResilientClient) -> None:
        self._website = website_client
        self._scrape = scrape_client

    async def check_website(self, url: str) -> WebsiteStatus:
        try:
            response = await self._website.head(url)
            if response.status_code in _HEAD_UNSUPPORTED:
                response = await self._website.get(url)
        except _PROBE_ERRORS as exc:
            log.info("  website unreachable: %s (%s)", url, type(exc).__name__)
            return WebsiteStatus(ok=False, status=0)
        return WebsiteStatus(ok=response.is_success, status=response.status_code)

    async def scrape_website_phones(self, url: str) -> list[str]:
        """Phones from the first candidate contact page that lists any.

        Pages rendered by JavaScript yield nothing here, so an empty result
        means "verify manually", never "the stored phone is wrong".
        """

        base = url.rstrip("/")
        for path in CONTACT_PATHS:
            try:
                response = await self._scrape.get(base + path)
            except _PROBE_ERRORS:
                continue
            if not response.is_success:
                continue
            phones = extract_us_phones(response.text)
            if phones:
                log.info("  %d phone(s) found at %s", len(phones), base + path)
                return phones
        return []
