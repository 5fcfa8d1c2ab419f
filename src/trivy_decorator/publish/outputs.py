from __future__ import annotations

from pathlib import Path
from typing import Optional

from ..models import Counts


def write_github_outputs(
    output_path: Optional[str],
    counts: Counts,
    pr_number: Optional[int],
    comment_posted: bool,
) -> None:
    """Append step outputs to the $GITHUB_OUTPUT file."""
    if not output_path:
        return

    with Path(output_path).open("a", encoding="utf-8") as f:
        f.write(f"total-vulnerabilities={counts.total}\n")
        f.write(f"critical-count={counts.critical}\n")
        f.write(f"high-count={counts.high}\n")
        f.write(f"medium-count={counts.medium}\n")
        f.write(f"low-count={counts.low}\n")
        f.write(f"pr-number={pr_number if pr_number is not None else ''}\n")
        f.write(f"comment-posted={'true' if comment_posted else 'false'}\n")
