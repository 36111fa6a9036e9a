"""Endpoints and HTTP policies for every external source the checkers consult."""

from __future__ import annotations

from .env import optional_env
from .http_resilience import NO_RETRY, CacheConfig, RateLimit, ResilienceConfig, RetryPolicy

ICE_FACILITIES_URL = "https://www.ice.gov/detain/detention-facilities"
EOIR_PROVIDERS_URL = "https://www.justice.gov/eoir/list-of-free-legal-services-providers"
LSC_GRANTEES_URL = "https://lsc-granteefinder.lsc.gov/api/grantees"
NOMINATIM_BASE_URL = "https://nominatim.openstreetmap.org"
GITHUB_API_URL = "https://api.github.com"

WEBSITE_TIMEOUT_SECONDS = 10.0
SCRAPE_TIMEOUT_SECONDS = 15.0
NOMINATIM_TIMEOUT_SECONDS = 15.0
LIST_PAGE_TIMEOUT_SECONDS = 30.0
PDF_TIMEOUT_SECONDS = 60.0

# Nominatim usage policy: at most one request per second from the public instance.
NOMINATIM_DELAY_SECONDS = 1.1
SCRAPE_DELAY_SECONDS = 0.5

_BASE_USER_AGENT = "DataReview/1.0 (quarterly-data-review; non-commercial)"


def user_agent() -> str:
    """Identifying User-Agent; Nominatim requires contact details in it."""

    override = optional_env("DATAREVIEW_USER_AGENT")
    if override:
        return override
    contact = optional_env("DATAREVIEW_CONTACT")
    if contact:
        return f"DataReview/1.0 ({contact}; quarterly-data-review; non-commercial)"
    return _BASE_USER_AGENT


def _headers(**extra: str) -> dict[str, str]:
    return {"User-Agent": user_agent(), **extra}


def get_website_config() -> ResilienceConfig:
    return ResilienceConfig(
        name="website",
        timeout_seconds=WEBSITE_TIMEOUT_SECONDS,
        retry=NO_RETRY,
        default_headers=_headers(),
    )


def get_scrape_config() -> ResilienceConfig:
    # Several consulates share one ministry site, so contact pages repeat within a run.
    return ResilienceConfig(
        name="scrape",
        timeout_seconds=SCRAPE_TIMEOUT_SECONDS,
        retry=NO_RETRY,
        cache=CacheConfig(enabled=True, backend="memory"),
        default_headers=_headers(Accept="text/html"),
    )


def get_nominatim_config() -> ResilienceConfig:
    return ResilienceConfig(
        name="nominatim",
        base_url=NOMINATIM_BASE_URL,
        timeout_seconds=NOMINATIM_TIMEOUT_SECONDS,
        retry=NO_RETRY,
        ratelimit=RateLimit(max_calls=1, per_seconds=NOMINATIM_DELAY_SECONDS),
        default_headers=_headers(Accept="application/json"),
    )


def get_ice_config() -> ResilienceConfig:
    return ResilienceConfig(
        name="ice",
        timeout_seconds=LIST_PAGE_TIMEOUT_SECONDS,
        retry=RetryPolicy(total=2),
        default_headers=_headers(Accept="text/html"),
    )


def get_eoir_config() -> ResilienceConfig:
    return ResilienceConfig(
        name="eoir",
        timeout_seconds=PDF_TIMEOUT_SECONDS,
        retry=RetryPolicy(total=2),
        default_headers=_headers(),
    )


def get_lsc_config() -> ResilienceConfig:
    return ResilienceConfig(
        name="lsc",
        timeout_seconds=LIST_PAGE_TIMEOUT_SECONDS,
        retry=RetryPolicy(total=2),
        default_headers=_headers(Accept="application/json"),
    )


def get_github_resilience() -> ResilienceConfig:
    return ResilienceConfig(
        name="github",
        base_url=GITHUB_API_URL,
        timeout_seconds=LIST_PAGE_TIMEOUT_SECONDS,
        retry=NO_RETRY,
        default_headers={
            "Accept": "application/vnd.github+json",
            "X-GitHub-Api-Version": "2022-11-28",
            "User-Agent": user_agent(),
        },
    )
