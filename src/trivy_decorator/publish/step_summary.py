from __future__ import annotations

from pathlib import Path
from typing import Optional


def write_step_summary(summary_path: Optional[str], body: str) -> None:
    """
    Write the rendered report to the GitHub Actions job summary.

    This is the only place the report shows up when no PR could be resolved.
    """
    if not summary_path:
        return

    with Path(summary_path).open("a", encoding="utf-8") as f:
        f.write(body)
        if not body.endswith("\n"):
            f.write("\n")
