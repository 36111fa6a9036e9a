"""GitHub issue delivery for the quarterly report.

Delivery never fails the run: without credentials, or when the API refuses the
request, the issue body is printed to stdout so it can be pasted by hand.
"""

# ruff: noqa: T201

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING

import httpx
from pydantic import BaseModel, ConfigDict, ValidationError

from datareview.config import ConfigurationError, get_github_config

from .http_resilience import ResilientClient

if TYPE_CHECKING:
    from datareview.config import GitHubConfig

log = getLogger(__name__)

FALLBACK_BANNER = "\n─── ISSUE BODY (copy-paste manually) ───\n"


class GitHubAPIError(RuntimeError):
    """Raised when the issues endpoint rejects the request."""

    def __init__(self, status_code: int, detail: str) -> None:
        super().__init__(f"GitHub API error {status_code}: {detail}")
        self.status_code = status_code


class CreatedIssue(BaseModel):
    model_config = ConfigDict(extra="ignore")

    html_url: str
    number: int


async def post_issue(
    title: str,
    body: str,
    *,
    config: GitHubConfig,
    transport: httpx.AsyncBaseTransport | None = None,
) -> CreatedIssue:
    payload = {"title": title, "body": body, "labels": list(config.labels)}
    async with ResilientClient(config.resilience, transport=transport) as client:
        response = await client.post(
            config.issues_path,
            json=payload,
            headers={"Authorization": f"Bearer {config.token}"},
        )
    if not response.is_success:
        raise GitHubAPIError(response.status_code, response.text)
    try:
        return CreatedIssue.model_validate_json(response.content)
    except ValidationError as exc:
        raise GitHubAPIError(response.status_code, "unexpected response payload") from exc


async def create_issue(
    title: str,
    body: str,
    *,
    config: GitHubConfig | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> str | None:
    """Open the review issue and return its URL, or print the body and return ``None``."""

    try:
        effective_config = config or get_github_config()
        log.info('Creating GitHub Issue: "%s"', title)
        issue = await post_issue(title, body, config=effective_config, transport=transport)
    except (ConfigurationError, GitHubAPIError, httpx.HTTPError) as exc:
        log.warning("Could not create GitHub Issue: %s", exc)
        print(FALLBACK_BANNER)
        print(body)
        return None

    log.info("Issue created: %s", issue.html_url)
    return issue.html_url
