"""Application orchestration entry points."""

from __future__ import annotations

from contextlib import AsyncExitStack
from datetime import UTC, datetime
from logging import getLogger
from typing import TYPE_CHECKING

from pydantic import ValidationError

from datareview.adapters.dataset import ReferenceDataset
from datareview.adapters.eoir import EoirProviderList
from datareview.adapters.github import create_issue
from datareview.adapters.http_resilience import ResilientClient
from datareview.adapters.ice import IceFacilityList
from datareview.adapters.lsc import LscGranteeClient
from datareview.adapters.nominatim import NominatimClient
from datareview.adapters.pacing import Pacing
from datareview.adapters.web import WebProbe
from datareview.config import get_review_settings
from datareview.config.sources import (
    EOIR_PROVIDERS_URL,
    ICE_FACILITIES_URL,
    LSC_GRANTEES_URL,
    get_eoir_config,
    get_ice_config,
    get_lsc_config,
    get_nominatim_config,
    get_scrape_config,
    get_website_config,
)
from datareview.domain.checks import check_consulates, check_detention_facilities, check_legal_aid
from datareview.domain.diff import Category, read_diff_file, write_diff
from datareview.domain.report import build_issue_body, issue_title

if TYPE_CHECKING:
    from pathlib import Path

    import httpx

    from datareview.config import ResilienceConfig, ReviewSettings
    from datareview.domain.diff import CategoryReport
    from datareview.domain.ports import (
        FacilityListSource,
        Geocoder,
        GranteeSource,
        Pacer,
        ProviderListSource,
        WebsiteProbe,
    )

log = getLogger(__name__)


class NoReportsError(RuntimeError):
    """Raised when the report generator finds no checker output to merge."""


async def _open(stack: AsyncExitStack, config: ResilienceConfig) -> ResilientClient:
    return await stack.enter_async_context(ResilientClient(config))


async def _web_probe(stack: AsyncExitStack) -> WebProbe:
    return WebProbe(
        website_client=await _open(stack, get_website_config()),
        scrape_client=await _open(stack, get_scrape_config()),
    )


def _pacing(settings: ReviewSettings) -> Pacing:
    return Pacing(
        nominatim_seconds=settings.nominatim_delay_seconds,
        scrape_seconds=settings.scrape_delay_seconds,
    )


def _finish(report: CategoryReport, settings: ReviewSettings) -> CategoryReport:
    write_diff(report, settings.diff_path(report.category))
    return report


async def run_consulate_check(
    *,
    settings: ReviewSettings | None = None,
    dataset: ReferenceDataset | None = None,
    web: WebsiteProbe | None = None,
    geocoder: Geocoder | None = None,
    pacer: Pacer | None = None,
) -> CategoryReport:
    """Check every stored consulate and write ``consulates-diff.json``."""

    settings = settings or get_review_settings()
    consulates = (dataset or ReferenceDataset(settings.dataset_dir)).consulates()
    log.info("Starting consulate check: records=%s", len(consulates))

    async with AsyncExitStack() as stack:
        report = await check_consulates(
            consulates,
            web=web or await _web_probe(stack),
            geocoder=geocoder or NominatimClient(await _open(stack, get_nominatim_config())),
            pacer=pacer or _pacing(settings),
        )
    return _finish(report, settings)


async def run_detention_check(
    *,
    settings: ReviewSettings | None = None,
    dataset: ReferenceDataset | None = None,
    facility_list: FacilityListSource | None = None,
    geocoder: Geocoder | None = None,
    pacer: Pacer | None = None,
) -> CategoryReport:
    """Check every stored detention facility and write ``detention-facilities-diff.json``."""

    settings = settings or get_review_settings()
    facilities = (dataset or ReferenceDataset(settings.dataset_dir)).detention_facilities()
    log.info("Starting detention facility check: records=%s", len(facilities))

    async with AsyncExitStack() as stack:
        report = await check_detention_facilities(
            facilities,
            facility_list=facility_list or IceFacilityList(await _open(stack, get_ice_config())),
            geocoder=geocoder or NominatimClient(await _open(stack, get_nominatim_config())),
            pacer=pacer or _pacing(settings),
            list_url=ICE_FACILITIES_URL,
        )
    return _finish(report, settings)


async def run_legal_aid_check(
    *,
    settings: ReviewSettings | None = None,
    dataset: ReferenceDataset | None = None,
    web: WebsiteProbe | None = None,
    provider_list: ProviderListSource | None = None,
    grantees: GranteeSource | None = None,
) -> CategoryReport:
    """Check every stored legal aid organization and write ``legal-aid-diff.json``."""

    settings = settings or get_review_settings()
    organizations = (dataset or ReferenceDataset(settings.dataset_dir)).legal_aid_organizations()
    log.info(
        "Starting legal aid check: records=%s, eoir_threshold=%s",
        len(organizations),
        settings.eoir_match_threshold,
    )

    async with AsyncExitStack() as stack:
        report = await check_legal_aid(
            organizations,
            web=web or await _web_probe(stack),
            provider_list=provider_list or EoirProviderList(await _open(stack, get_eoir_config())),
            grantees=grantees or LscGranteeClient(await _open(stack, get_lsc_config())),
            provider_list_url=EOIR_PROVIDERS_URL,
            grantee_url=LSC_GRANTEES_URL,
            match_threshold=settings.eoir_match_threshold,
            borderline_margin=settings.eoir_borderline_margin,
        )
    return _finish(report, settings)


def read_diff(category: Category, output_dir: Path) -> CategoryReport | None:
    """Load one checker's report; a missing or unreadable file means it did not run."""

    path = output_dir / f"{category}-diff.json"
    if not path.exists():
        log.info("No diff file at %s (checker may not have run)", path)
        return None
    try:
        return read_diff_file(path)
    except (OSError, ValidationError) as exc:
        log.warning("Ignoring unreadable diff file %s: %s", path, exc)
        return None


async def generate_report(
    *,
    settings: ReviewSettings | None = None,
    now: datetime | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> str | None:
    """Merge the checker reports into one issue and deliver it.

    Returns the created issue URL, or ``None`` when the body was printed instead.
    """

    settings = settings or get_review_settings()
    now = now or datetime.now(UTC)
    log.info("Reading diff files from %s", settings.output_dir)
    detention = read_diff(Category.DETENTION_FACILITIES, settings.output_dir)
    consulates = read_diff(Category.CONSULATES, settings.output_dir)
    legal_aid = read_diff(Category.LEGAL_AID, settings.output_dir)

    if detention is None and consulates is None and legal_aid is None:
        raise NoReportsError("No diff files found. Did the checker jobs run?")

    body = build_issue_body(detention, consulates, legal_aid, now=now)
    return await create_issue(issue_title(now), body, transport=transport)
