"""EOIR free legal services provider list.

The justice.gov landing page links a PDF; the provider names are recovered as
raw text lines from it. PDF layouts shift between releases, so nothing here
tries to reconstruct table columns.
"""

from __future__ import annotations

import asyncio
import re
from io import BytesIO
from logging import getLogger
from typing import TYPE_CHECKING
from urllib.parse import urljoin

import httpx
import pdfplumber
from pdfplumber.utils.exceptions import PdfminerException

from datareview.config.sources import EOIR_PROVIDERS_URL
from datareview.domain.errors import SourceError

if TYPE_CHECKING:
    from .http_resilience import ResilientClient

log = getLogger(__name__)

MIN_SEGMENT_LENGTH = 4

_PDF_LINK_RE = re.compile(r'href="([^"]+\.pdf)"', re.IGNORECASE)


class EoirSourceError(SourceError):
    def __init__(self, message: str) -> None:
        super().__init__(message, source="eoir")


def find_pdf_link(html: str, base_url: str = EOIR_PROVIDERS_URL) -> str | None:
    """Absolute URL of the first PDF linked from the page, if any."""

    match = _PDF_LINK_RE.search(html)
    if match is None:
        return None
    return urljoin(base_url, match.group(1))


def extract_pdf_text(content: bytes) -> str:
    with pdfplumber.open(BytesIO(content)) as pdf:
        return "\n".join(page.extract_text() or "" for page in pdf.pages)


def text_segments(text: str) -> set[str]:
    """Lowercased, trimmed lines long enough to carry an organization name."""

    segments: set[str] = set()
    for line in text.splitlines():
        stripped = line.strip()
        if len(stripped) >= MIN_SEGMENT_LENGTH:
            segments.add(stripped.lower())
    return segments


class EoirProviderList:
    def __init__(self, client: ResilientClient, page_url: str = EOIR_PROVIDERS_URL) -> None:
        self._client = client
        self.page_url = page_url

    async def fetch_provider_segments(self) -> set[str]:
        page = await self._get(self.page_url, label="EOIR page")
        pdf_url = find_pdf_link(page.text, self.page_url)
        if pdf_url is None:
            raise EoirSourceError("No PDF link found on EOIR page")
        log.info("  EOIR PDF found: %s", pdf_url)

        document = await self._get(pdf_url, label="EOIR PDF")
        try:
            text = await asyncio.to_thread(extract_pdf_text, document.content)
        except PdfminerException as exc:
            raise EoirSourceError(f"EOIR PDF could not be parsed: {exc}") from exc

        return text_segments(text)

    async def _get(self, url: str, *, label: str) -> httpx.Response:
        try:
            response = await self._client.get(url)
        except httpx.HTTPError as exc:
            raise EoirSourceError(f"{label} request failed: {exc}") from exc
        if not response.is_success:
            raise EoirSourceError(f"{label} HTTP {response.status_code}")
        return response
