from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING

from datareview.domain.checks import check_legal_aid
from datareview.domain.diff import ChangeType, Severity
from datareview.domain.errors import SourceError
from datareview.domain.sources import Grantee, WebsiteStatus
from tests.helpers.review import (
    EOIR_URL,
    FIXED_NOW,
    LSC_URL,
    FakeGrantees,
    FakeProviderList,
    FakeWebProbe,
    make_organization,
)

if TYPE_CHECKING:
    from collections.abc import Sequence

    from datareview.domain.diff import CategoryReport
    from datareview.domain.records import LegalAidOrganization

PROVIDER_SEGMENTS = {
    "northwest immigrant rights project",
    "615 second avenue, suite 400 seattle, wa 98104",
}


def _run(
    organizations: Sequence[LegalAidOrganization],
    *,
    web: FakeWebProbe | None = None,
    provider_list: FakeProviderList | None = None,
    grantees: FakeGrantees | None = None,
) -> CategoryReport:
    return asyncio.run(
        check_legal_aid(
            organizations,
            web=web or FakeWebProbe(),
            provider_list=provider_list or FakeProviderList(segments=PROVIDER_SEGMENTS),
            grantees=grantees or FakeGrantees(),
            provider_list_url=EOIR_URL,
            grantee_url=LSC_URL,
            generated_at=FIXED_NOW,
        )
    )


def test_eoir_listed_organization_is_not_flagged() -> None:
    report = _run([make_organization()])

    assert report.stats.not_found_on_source == 0
    assert report.source_available is True


def test_eoir_sourced_organization_missing_from_pdf() -> None:
    organization = make_organization(name="Rocky Mountain Immigrant Advocacy Network")

    report = _run([organization])

    missing = [item for item in report.items if item.change_type is ChangeType.NOT_FOUND_ON_SOURCE]
    assert [item.id for item in missing] == ["rocky-mountain-immigrant-advocacy-networ"]
    assert missing[0].severity is Severity.MEDIUM
    assert missing[0].verify_url == EOIR_URL


def test_non_eoir_organization_skips_provider_list() -> None:
    organization = make_organization(name="Legal Aid Chicago", data_source="LSC")

    report = _run([organization])

    assert report.stats.not_found_on_source == 0


def test_lsc_phone_difference_is_high_severity() -> None:
    grantee = Grantee(
        name="Northwest Immigrant Rights Project, Inc.",
        state="WA",
        city="Seattle",
        phone="(206) 587-0000",
    )

    report = _run([make_organization()], grantees=FakeGrantees(grantees=[grantee]))

    change = next(item for item in report.items if item.change_type is ChangeType.PHONE_CHANGED)
    assert change.severity is Severity.HIGH
    assert change.source_value == "(206) 587-0000"
    assert change.verify_url == LSC_URL
    assert report.stats.new_on_source == 0
    assert not [item for item in report.manual_items if item.id.endswith("-phone")]


def test_unmatched_grantee_with_state_is_new_on_source() -> None:
    grantees = [
        Grantee(name="Legal Aid of Nebraska", state="NE", city="Omaha"),
        Grantee(name="Stateless Grantee", state=""),
    ]

    report = _run([], grantees=FakeGrantees(grantees=grantees))

    new = [item for item in report.items if item.change_type is ChangeType.NEW_ON_SOURCE]
    assert [item.id for item in new] == ["new-lsc-legal-aid-of-nebraska"]
    assert new[0].severity is Severity.LOW


def test_phone_without_automated_source_needs_manual_check() -> None:
    report = _run([make_organization(), make_organization(name="RAICES", phone=None)])

    severities = {item.id: item.severity for item in report.manual_items}
    assert severities == {
        "northwest-immigrant-rights-project-phone": Severity.MEDIUM,
        "raices-phone": Severity.HIGH,
    }


def test_website_down_uses_status_code() -> None:
    organization = make_organization()
    web = FakeWebProbe(statuses={"https://nwirp.example": WebsiteStatus(ok=False, status=404)})

    report = _run([organization, make_organization(name="No Site", website=None)], web=web)

    down = [item for item in report.items if item.change_type is ChangeType.WEBSITE_DOWN]
    assert len(down) == 1
    assert down[0].source_value == "HTTP 404"
    assert web.checked == ["https://nwirp.example"]


def test_both_sources_failing_keeps_run_going() -> None:
    report = _run(
        [make_organization()],
        provider_list=FakeProviderList(error=SourceError("No PDF link found", source="eoir")),
        grantees=FakeGrantees(error=SourceError("LSC API HTTP 500", source="lsc")),
    )

    assert report.source_available is False
    assert report.errors == (
        "EOIR provider list source unavailable: No PDF link found",
        "LSC grantee list source unavailable: LSC API HTTP 500",
    )
    assert report.stats.not_found_on_source == 0
    assert report.stats.manual_only == 1


def test_unexpected_website_failure_is_recorded_per_organization() -> None:
    web = FakeWebProbe(error=ValueError("unexpected payload shape"))
    organizations = [make_organization(), make_organization(name="RAICES", website="https://raices.example")]

    report = _run(organizations, web=web)

    assert web.checked == ["https://nwirp.example", "https://raices.example"]
    assert report.errors == (
        "Unexpected error checking Northwest Immigrant Rights Project: ValueError: unexpected payload shape",
        "Unexpected error checking RAICES: ValueError: unexpected payload shape",
    )
    assert report.items == ()
    assert report.source_available is True
