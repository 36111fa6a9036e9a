"""Run settings shared by the checkers and the report generator."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Final

from .env import float_env, optional_env
from .errors import ConfigurationError
from .sources import NOMINATIM_DELAY_SECONDS, SCRAPE_DELAY_SECONDS

DEFAULT_OUTPUT_DIR: Final[str] = "output"
DEFAULT_EOIR_MATCH_THRESHOLD: Final[float] = 0.6
DEFAULT_BORDERLINE_MARGIN: Final[float] = 0.15


@dataclass(frozen=True, slots=True)
class ReviewSettings:
    output_dir: Path
    dataset_dir: Path | None = None
    eoir_match_threshold: float = DEFAULT_EOIR_MATCH_THRESHOLD
    eoir_borderline_margin: float = DEFAULT_BORDERLINE_MARGIN
    nominatim_delay_seconds: float = NOMINATIM_DELAY_SECONDS
    scrape_delay_seconds: float = SCRAPE_DELAY_SECONDS

    def diff_path(self, category: str) -> Path:
        return self.output_dir / f"{category}-diff.json"


def get_review_settings() -> ReviewSettings:
    output_dir = Path(optional_env("DATAREVIEW_OUTPUT_DIR") or DEFAULT_OUTPUT_DIR)
    dataset_env = optional_env("DATAREVIEW_DATASET_DIR")
    threshold = float_env("DATAREVIEW_EOIR_MATCH_THRESHOLD", DEFAULT_EOIR_MATCH_THRESHOLD)
    if not 0.0 < threshold <= 1.0:
        raise ConfigurationError(
            f"DATAREVIEW_EOIR_MATCH_THRESHOLD must be in (0, 1], got {threshold}"
        )
    return ReviewSettings(
        output_dir=output_dir.expanduser(),
        dataset_dir=Path(dataset_env).expanduser() if dataset_env else None,
        eoir_match_threshold=threshold,
        nominatim_delay_seconds=float_env("DATAREVIEW_NOMINATIM_DELAY", NOMINATIM_DELAY_SECONDS),
        scrape_delay_seconds=float_env("DATAREVIEW_SCRAPE_DELAY", SCRAPE_DELAY_SECONDS),
    )
