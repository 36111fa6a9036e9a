"""Errors raised while reading run settings from the environment."""

from __future__ import annotations


class ConfigurationError(RuntimeError):
    """A setting is present but unusable (bad number, malformed repository slug)."""


class MissingConfigurationError(ConfigurationError):
    """A required variable such as ``GITHUB_TOKEN`` is unset or blank."""
