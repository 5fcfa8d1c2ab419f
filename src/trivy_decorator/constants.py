from __future__ import annotations

from enum import Enum


class Severity(str, Enum):
    """Severity levels reported by Trivy that the decorator understands."""

    CRITICAL = "CRITICAL"
    HIGH = "HIGH"
    MEDIUM = "MEDIUM"
    LOW = "LOW"


class ExitCode(int, Enum):
    """Process exit codes."""

    SUCCESS = 0
    ERROR = 1


# Stable substring used to recognise our own PR comment. Changing it orphans
# comments posted by earlier versions.
SCAN_HEADER = "🔒 Trivy Security Scan Report"
BOT_USER_TYPE = "Bot"

SEVERITY_ORDER = {
    Severity.CRITICAL.value: 0,
    Severity.HIGH.value: 1,
    Severity.MEDIUM.value: 2,
    Severity.LOW.value: 3,
}

DEFAULT_MAX_TABLE_ROWS = 20
DEFAULT_GITHUB_API_URL = "https://api.github.com"
