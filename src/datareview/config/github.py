"""GitHub issue delivery configuration."""

from __future__ import annotations

from dataclasses import dataclass, field

from .env import require_env_vars
from .errors import ConfigurationError
from .http_resilience import ResilienceConfig
from .sources import get_github_resilience

ISSUE_LABELS = ("data-review",)


@dataclass(frozen=True, slots=True)
class GitHubConfig:
    token: str
    owner: str
    repo: str
    labels: tuple[str, ...] = ISSUE_LABELS
    resilience: ResilienceConfig = field(default_factory=get_github_resilience)

    @property
    def issues_path(self) -> str:
        return f"/repos/{self.owner}/{self.repo}/issues"


def get_github_config() -> GitHubConfig:
    values = require_env_vars(("GITHUB_TOKEN", "GITHUB_REPOSITORY"))
    slug = values["GITHUB_REPOSITORY"]
    owner, _, repo = slug.partition("/")
    if not owner or not repo or "/" in repo:
        raise ConfigurationError(f"GITHUB_REPOSITORY must look like 'owner/repo', got {slug!r}")
    return GitHubConfig(token=values["GITHUB_TOKEN"], owner=owner, repo=repo)
