from __future__ import annotations

from typing import List

from .constants import SCAN_HEADER, SEVERITY_ORDER
from .formatting import escape_table_cell, format_int, severity_emoji, summary_emoji
from .models import Counts, ScanResults, Vulnerability

TABLE_HEADER = (
    "| Severity | Package | Type | Vulnerability | Installed | Fixed |\n"
    "|----------|---------|------|---------------|-----------|-------|\n"
)


def render_summary(counts: Counts) -> str:
    if counts.total == 0:
        return "✅ **No vulnerabilities found**\n\n"

    parts = []
    for count, severity in (
        (counts.critical, "CRITICAL"),
        (counts.high, "HIGH"),
        (counts.medium, "MEDIUM"),
        (counts.low, "LOW"),
    ):
        if count > 0:
            parts.append(f"{format_int(count)} {severity_emoji(severity)} {severity}")

    return f"{summary_emoji(counts)} **{', '.join(parts)}** ({format_int(counts.total)} total)\n\n"


def _row(vuln: Vulnerability) -> str:
    cells = [
        f"{severity_emoji(vuln.severity)} {vuln.severity}",
        escape_table_cell(vuln.package),
        escape_table_cell(vuln.type),
        escape_table_cell(vuln.id),
        escape_table_cell(vuln.installed_version),
        escape_table_cell(vuln.fixed_version),
    ]
    return "| " + " | ".join(cells) + " |\n"


def render_table(vulnerabilities: List[Vulnerability], max_rows: int) -> str:
    if not vulnerabilities:
        return ""

    # sorted() is stable, so report order is kept within a severity.
    ordered = sorted(vulnerabilities, key=lambda v: SEVERITY_ORDER.get(v.severity, 99))
    table = "### Vulnerability Details\n\n" + TABLE_HEADER
    table += "".join(_row(v) for v in ordered[:max_rows])

    remaining = len(vulnerabilities) - max_rows
    if remaining > 0:
        table += f"\n*... and {format_int(remaining)} more*\n"
    return table


def render_comment(results: ScanResults, max_rows: int) -> str:
    """Render the PR comment body. The header line doubles as the ownership marker."""
    header = f"## {SCAN_HEADER}\n\n"
    return header + render_summary(results.counts) + render_table(results.vulnerabilities, max_rows)
