from __future__ import annotations

import json
from pathlib import Path

import pytest

from datareview.domain.diff import CategoryReport

CONFIG_ENV_VARS = (
    "DATAREVIEW_OUTPUT_DIR",
    "DATAREVIEW_DATASET_DIR",
    "DATAREVIEW_EOIR_MATCH_THRESHOLD",
    "DATAREVIEW_NOMINATIM_DELAY",
    "DATAREVIEW_SCRAPE_DELAY",
    "DATAREVIEW_USER_AGENT",
    "DATAREVIEW_CONTACT",
    "GITHUB_TOKEN",
    "GITHUB_REPOSITORY",
)


@pytest.fixture(autouse=True)
def _isolated_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in CONFIG_ENV_VARS:
        monkeypatch.delenv(name, raising=False)


@pytest.fixture(scope="session")
def sample_consulate_report() -> CategoryReport:
    path = Path(__file__).resolve().parent / "data" / "consulates-diff.json"
    return CategoryReport.model_validate(json.loads(path.read_text(encoding="utf-8")))
