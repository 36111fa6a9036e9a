"""Markdown rendering of the combined quarterly review issue."""

from __future__ import annotations

from datetime import UTC, datetime
from email.utils import format_datetime
from typing import TYPE_CHECKING

from .diff import Category, ChangeType, Severity

if TYPE_CHECKING:
    from .diff import CategoryReport

SEVERITY_MARKERS: dict[Severity, str] = {
    Severity.CRITICAL: "🚨",
    Severity.HIGH: "⚠️",
    Severity.MEDIUM: "📋",
    Severity.LOW: "💡",
}

CHANGE_TYPE_LABELS: dict[ChangeType, str] = {
    ChangeType.PHONE_CHANGED: "Phone Changed",
    ChangeType.ADDRESS_CHANGED: "Address Changed",
    ChangeType.WEBSITE_DOWN: "Website Down",
    ChangeType.NOT_FOUND_ON_SOURCE: "Not Found on Source",
    ChangeType.NEW_ON_SOURCE: "New on Source",
    ChangeType.CAPACITY_CHANGED: "Capacity Changed",
    ChangeType.MANUAL_REQUIRED: "Manual Verification Required",
    ChangeType.INACTIVE_REACTIVATE: "Possibly Inactive",
}

CATEGORY_TITLES: dict[Category, str] = {
    Category.DETENTION_FACILITIES: "ICE Detention Facilities",
    Category.CONSULATES: "Consulates",
    Category.LEGAL_AID: "Legal Aid Organizations",
}

DATASET_FILES = (
    "detention-facilities.json",
    "consulates.json",
    "legal-aid-organizations.json",
)


def get_quarter(now: datetime) -> str:
    return f"Q{(now.month - 1) // 3 + 1} {now.year}"


def issue_title(now: datetime) -> str:
    return f"Data Review: {get_quarter(now)} — Quarterly Contact Info Verification"


def render_diff_section(report: CategoryReport) -> str:
    stats = report.stats
    lines = [f"## {CATEGORY_TITLES[report.category]}", ""]

    if not report.source_available:
        lines += [
            "> ⚠️ **An external source was unavailable.** Findings below may be incomplete.",
            "",
        ]
    if report.errors:
        lines.append("> **Checker errors:**")
        lines += [f"> - {error}" for error in report.errors]
        lines.append("")

    lines += [
        f"**Checked:** {stats.checked} | **Changes:** {stats.automated_changes} | "
        f"**New:** {stats.new_on_source} | **Not found:** {stats.not_found_on_source} | "
        f"**Manual only:** {stats.manual_only}",
        "",
    ]

    automated = report.automated_items
    if not automated:
        lines += ["### ✅ No Automated Changes Detected", ""]
    else:
        lines += ["### Automated Findings", ""]
        for item in automated:
            marker = SEVERITY_MARKERS[item.severity]
            lines.append(f"- [ ] {marker} **{item.name}** — {CHANGE_TYPE_LABELS[item.change_type]}")
            if item.stored_value:
                lines.append(f"  - Stored: `{item.stored_value}`")
            if item.source_value:
                lines.append(f"  - Source: `{item.source_value}`")
            if item.notes:
                lines.append(f"  - Notes: {item.notes}")
            if item.verify_url and not item.verify_url.startswith("tel:"):
                lines.append(f"  - Verify: [source link]({item.verify_url})")
            lines.append("")

    manual = report.manual_items
    if manual:
        lines += [
            "### Manual Verification Required",
            "*(These items have no automated source — each requires a direct check or phone call)*",
            "",
        ]
        for item in manual:
            entry = f"- [ ] **{item.name}**"
            if item.stored_value and item.stored_value != "(not set)":
                entry += f" — stored: `{item.stored_value}`"
            lines.append(entry)
            if item.notes:
                lines.append(f"  - {item.notes}")
            lines.append("")

    return "\n".join(lines) + "\n"


def _summary_table(reports: list[tuple[str, CategoryReport | None]]) -> list[str]:
    lines = [
        "| Category | Checked | Changes | New | Not Found | Manual-Only |",
        "|----------|---------|---------|-----|-----------|-------------|",
    ]
    totals = [0, 0, 0, 0]
    for label, report in reports:
        if report is None:
            lines.append(f"| {label} | — | — | — | — | — (checker did not run) |")
            continue
        stats = report.stats
        counts = (
            stats.automated_changes,
            stats.new_on_source,
            stats.not_found_on_source,
            stats.manual_only,
        )
        totals = [total + count for total, count in zip(totals, counts, strict=True)]
        lines.append(f"| {label} | {stats.checked} | " + " | ".join(map(str, counts)) + " |")
    lines.append("| **Total** | — | " + " | ".join(f"**{total}**" for total in totals) + " |")
    return lines


def build_issue_body(
    detention: CategoryReport | None,
    consulates: CategoryReport | None,
    legal_aid: CategoryReport | None,
    *,
    now: datetime | None = None,
) -> str:
    now = now or datetime.now(UTC)
    ordered = [
        (CATEGORY_TITLES[Category.DETENTION_FACILITIES], detention),
        (CATEGORY_TITLES[Category.CONSULATES], consulates),
        (CATEGORY_TITLES[Category.LEGAL_AID], legal_aid),
    ]

    lines = [
        f"# Quarterly Data Review — {get_quarter(now)}",
        "",
        f"*Generated automatically on {format_datetime(now.astimezone(UTC), usegmt=True)}.*",
        "",
        "---",
        "",
        "## Summary",
        "",
        *_summary_table(ordered),
        "",
        "---",
        "",
    ]
    body = "\n".join(lines) + "\n"

    for _, report in ordered:
        if report is not None:
            body += render_diff_section(report) + "---\n\n"

    dataset_files = ", ".join(f"`{name}`" for name in DATASET_FILES)
    body += "\n".join(
        [
            "## Review Checklist",
            "",
            "Before closing this issue, confirm:",
            "",
            "- [ ] All automated findings above have been reviewed and actioned or commented on",
            "- [ ] All manual verification items above have been completed",
            f"- [ ] Dataset files updated: {dataset_files}",
            "- [ ] PR opened, reviewed, and merged",
            "",
            "---",
            "",
            "*This issue was created by the quarterly data review job. Next run: in approximately 90 days.*",
            "",
        ]
    )
    return body
