"""Application configuration helpers."""

from __future__ import annotations

from .env import float_env, optional_env, require_env_vars
from .errors import ConfigurationError, MissingConfigurationError
from .github import GitHubConfig, get_github_config
from .http_resilience import NO_RETRY, CacheConfig, RateLimit, ResilienceConfig, RetryPolicy
from .logging import configure_logging
from .review import ReviewSettings, get_review_settings

__all__ = [
    "NO_RETRY",
    "CacheConfig",
    "ConfigurationError",
    "GitHubConfig",
    "MissingConfigurationError",
    "RateLimit",
    "ResilienceConfig",
    "RetryPolicy",
    "ReviewSettings",
    "configure_logging",
    "float_env",
    "get_github_config",
    "get_review_settings",
    "optional_env",
    "require_env_vars",
]
