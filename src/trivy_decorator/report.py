from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict

from .constants import SEVERITY_ORDER, Severity
from .errors import ReportError
from .models import Counts, ScanResults, Vulnerability


def _text(value: Any, default: str = "") -> str:
    return str(value) if value else default


def _to_vulnerability(target: str, type_: str, raw: Dict[str, Any], severity: str) -> Vulnerability:
    return Vulnerability(
        target=target,
        type=type_,
        id=_text(raw.get("VulnerabilityID")),
        package=_text(raw.get("PkgName")),
        installed_version=_text(raw.get("InstalledVersion")),
        fixed_version=_text(raw.get("FixedVersion"), "N/A"),
        severity=severity,
        title=_text(raw.get("Title")),
    )


def _bump(counts: Counts, severity: str) -> None:
    if severity == Severity.CRITICAL.value:
        counts.critical += 1
    elif severity == Severity.HIGH.value:
        counts.high += 1
    elif severity == Severity.MEDIUM.value:
        counts.medium += 1
    elif severity == Severity.LOW.value:
        counts.low += 1


def parse_report(path: str | Path) -> ScanResults:
    """
    Parse a Trivy JSON report into a flat list of vulnerabilities.

    Findings with a severity outside CRITICAL/HIGH/MEDIUM/LOW (e.g. UNKNOWN)
    are dropped and not counted.
    """
    try:
        content = Path(path).read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise ReportError(f"Results file not found: {path}") from exc

    try:
        data = json.loads(content)
    except json.JSONDecodeError as exc:
        raise ReportError(f"Invalid JSON in results file: {exc}") from exc

    if not isinstance(data, dict) or not isinstance(data.get("Results"), list):
        raise ReportError("Invalid Trivy format: missing Results array")

    results = ScanResults()
    for result in data["Results"]:
        if not isinstance(result, dict):
            continue
        target = _text(result.get("Target"), "unknown")
        type_ = _text(result.get("Type"), "unknown")
        for raw in result.get("Vulnerabilities") or []:
            if not isinstance(raw, dict):
                continue
            severity = str(raw.get("Severity") or "").upper()
            if severity not in SEVERITY_ORDER:
                continue
            results.vulnerabilities.append(_to_vulnerability(target, type_, raw, severity))
            _bump(results.counts, severity)
    return results
