from __future__ import annotations

from typing import Optional

from .models import Counts

SEVERITY_EMOJI = {
    "CRITICAL": "🔴",
    "HIGH": "🟠",
    "MEDIUM": "🟡",
    "LOW": "⚪",
}


def severity_emoji(severity: str) -> str:
    return SEVERITY_EMOJI.get(severity, "")


def summary_emoji(counts: Counts) -> str:
    """Emoji for the highest severity present."""
    if counts.critical > 0:
        return "🔴"
    if counts.high > 0:
        return "🟠"
    if counts.medium > 0 or counts.low > 0:
        return "🟡"
    return "✅"


def escape_table_cell(text: Optional[str]) -> str:
    """Escape pipes so cell content cannot break a markdown table row."""
    if text is None:
        return ""
    return str(text).replace("|", "\\|")


def format_int(value: int) -> str:
    try:
        return f"{int(value):,}"
    except (TypeError, ValueError):
        return "0"
