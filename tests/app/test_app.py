from __future__ import annotations

import asyncio
import json
from typing import TYPE_CHECKING

import httpx
import pytest

from datareview import app
from datareview.config import ReviewSettings
from datareview.domain.diff import Category, CategoryReport, ChangeType, Finding, Severity, write_diff
from datareview.domain.sources import FacilityListing
from tests.helpers.review import (
    FIXED_NOW,
    FakeFacilityList,
    FakeGeocoder,
    FakeGrantees,
    FakeProviderList,
    FakeWebProbe,
    RecordingPacer,
)

if TYPE_CHECKING:
    from pathlib import Path


@pytest.fixture
def settings(tmp_path: Path) -> ReviewSettings:
    return ReviewSettings(
        output_dir=tmp_path / "output",
        nominatim_delay_seconds=0.0,
        scrape_delay_seconds=0.0,
    )


def test_consulate_run_writes_diff_file(settings: ReviewSettings) -> None:
    report = asyncio.run(
        app.run_consulate_check(
            settings=settings,
            web=FakeWebProbe(),
            geocoder=FakeGeocoder(),
            pacer=RecordingPacer(),
        )
    )

    path = settings.output_dir / "consulates-diff.json"
    payload = json.loads(path.read_text(encoding="utf-8"))
    assert payload["category"] == "consulates"
    assert payload["stats"]["checked"] == report.stats.checked > 0
    assert payload["sourceAvailable"] is True


def test_detention_run_writes_diff_file(settings: ReviewSettings) -> None:
    rows = [FacilityListing(name="Example Detention Center", city="Springfield", state="IL")]

    report = asyncio.run(
        app.run_detention_check(
            settings=settings,
            facility_list=FakeFacilityList(rows=rows),
            geocoder=FakeGeocoder(),
            pacer=RecordingPacer(),
        )
    )

    assert (settings.output_dir / "detention-facilities-diff.json").exists()
    assert report.stats.new_on_source == 1


def test_legal_aid_run_uses_configured_threshold(tmp_path: Path) -> None:
    settings = ReviewSettings(output_dir=tmp_path, eoir_match_threshold=1.0)

    report = asyncio.run(
        app.run_legal_aid_check(
            settings=settings,
            web=FakeWebProbe(),
            provider_list=FakeProviderList(segments={"northwest immigrant rights"}),
            grantees=FakeGrantees(),
        )
    )

    flagged = {item.name for item in report.items if item.change_type is ChangeType.NOT_FOUND_ON_SOURCE}
    assert "Northwest Immigrant Rights Project" in flagged
    assert (tmp_path / "legal-aid-diff.json").exists()


def test_read_diff_treats_missing_and_invalid_files_as_absent(tmp_path: Path) -> None:
    (tmp_path / "legal-aid-diff.json").write_text("{not json", encoding="utf-8")

    assert app.read_diff(Category.CONSULATES, tmp_path) is None
    assert app.read_diff(Category.LEGAL_AID, tmp_path) is None


def test_generate_report_without_any_diff_fails(settings: ReviewSettings) -> None:
    with pytest.raises(app.NoReportsError):
        asyncio.run(app.generate_report(settings=settings, now=FIXED_NOW))


def test_generate_report_with_missing_checkers_prints_body(
    settings: ReviewSettings,
    monkeypatch: pytest.MonkeyPatch,
    capsys: pytest.CaptureFixture[str],
) -> None:
    monkeypatch.delenv("GITHUB_TOKEN", raising=False)
    monkeypatch.delenv("GITHUB_REPOSITORY", raising=False)
    report = CategoryReport.build(
        category=Category.CONSULATES,
        checked=1,
        findings=[
            Finding(
                id="mexico",
                name="Mexico Consulate",
                change_type=ChangeType.PHONE_CHANGED,
                stored_value="(213) 351-6800",
                source_value="(213) 351-6900",
                severity=Severity.CRITICAL,
            )
        ],
        source_available=True,
        generated_at=FIXED_NOW,
    )
    write_diff(report, settings.diff_path(Category.CONSULATES))

    result = asyncio.run(app.generate_report(settings=settings, now=FIXED_NOW))

    assert result is None
    out = capsys.readouterr().out
    assert "(checker did not run)" in out
    assert "🚨 **Mexico Consulate**" in out


def test_generate_report_posts_issue(settings: ReviewSettings, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("GITHUB_TOKEN", "secret")
    monkeypatch.setenv("GITHUB_REPOSITORY", "example/repo")
    write_diff(
        CategoryReport.build(
            category=Category.LEGAL_AID,
            checked=0,
            findings=[],
            source_available=True,
            generated_at=FIXED_NOW,
        ),
        settings.diff_path(Category.LEGAL_AID),
    )
    titles: list[str] = []

    def handler(request: httpx.Request) -> httpx.Response:
        titles.append(json.loads(request.content)["title"])
        return httpx.Response(201, json={"html_url": "https://github.com/example/repo/issues/1", "number": 1})

    result = asyncio.run(
        app.generate_report(settings=settings, now=FIXED_NOW, transport=httpx.MockTransport(handler))
    )

    assert result == "https://github.com/example/repo/issues/1"
    assert titles == ["Data Review: Q1 2026 — Quarterly Contact Info Verification"]
