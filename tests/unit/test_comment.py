from __future__ import annotations

from trivy_decorator.comment import render_comment, render_summary, render_table
from trivy_decorator.commenter import is_bot_comment
from trivy_decorator.constants import SCAN_HEADER
from trivy_decorator.formatting import escape_table_cell, summary_emoji
from trivy_decorator.models import Counts, ScanResults, Vulnerability


def _vuln(severity: str, vid: str, package: str = "pkg") -> Vulnerability:
    return Vulnerability(
        target="image",
        type="debian",
        id=vid,
        package=package,
        installed_version="1.0",
        fixed_version="1.1",
        severity=severity,
        title="",
    )


def test_comment_starts_with_scan_header() -> None:
    body = render_comment(ScanResults(), 20)

    assert body.startswith(f"## {SCAN_HEADER}\n\n")
    assert is_bot_comment({"user": {"type": "Bot"}, "body": body})


def test_summary_without_findings() -> None:
    assert render_summary(Counts()) == "✅ **No vulnerabilities found**\n\n"


def test_summary_lists_only_present_severities() -> None:
    summary = render_summary(Counts(critical=2, medium=1))
    assert summary == "🔴 **2 🔴 CRITICAL, 1 🟡 MEDIUM** (3 total)\n\n"


def test_summary_emoji_follows_highest_severity() -> None:
    assert summary_emoji(Counts(high=1, low=4)) == "🟠"
    assert summary_emoji(Counts(low=1)) == "🟡"
    assert summary_emoji(Counts()) == "✅"


def test_table_sorted_by_severity_and_stable() -> None:
    vulns = [
        _vuln("LOW", "L1"),
        _vuln("CRITICAL", "C1"),
        _vuln("HIGH", "H1"),
        _vuln("CRITICAL", "C2"),
    ]
    table = render_table(vulns, 10)
    rows = [line for line in table.splitlines() if line.startswith("| ") and "Severity" not in line]
    ids = [row.split(" | ")[3] for row in rows]

    assert ids == ["C1", "C2", "H1", "L1"]
    assert "more*" not in table


def test_table_truncates_with_overflow_note() -> None:
    vulns = [_vuln("HIGH", f"H{i}") for i in range(5)]
    table = render_table(vulns, 2)

    assert table.count("| 🟠 HIGH |") == 2
    assert table.endswith("\n*... and 3 more*\n")


def test_table_empty_without_findings() -> None:
    assert render_table([], 10) == ""


def test_table_escapes_pipes() -> None:
    table = render_table([_vuln("LOW", "CVE-1", package="a|b")], 10)
    assert "a\\|b" in table
    assert escape_table_cell(None) == ""
