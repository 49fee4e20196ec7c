"""
Batch report formatting
"""

import json
from pathlib import Path
from typing import List

from .runner import BatchResult, JobStatus

_MARKS = {
    JobStatus.SUCCESS: "✓",
    JobStatus.FAILED: "✗",
    JobStatus.SKIPPED: "-",
}


def format_summary(batch: BatchResult) -> str:
    """Human readable summary, one line per job plus diagnostics for failures."""
    lines: List[str] = []
    for result in batch.jobs:
        job = result.job
        line = f"  {_MARKS[result.status]} {job.name:<24} {job.byte_length:>8,} bytes  {result.status.value}"
        if result.status == JobStatus.FAILED and result.error is not None:
            kind = getattr(result.error, "kind", type(result.error).__name__)
            line += f" [{kind}]"
            if result.exit_code is not None:
                line += f" exit={result.exit_code}"
        lines.append(line)
        if result.status == JobStatus.FAILED:
            if result.error is not None:
                lines.append(f"      {result.error}")
            for diag in result.stderr.strip().splitlines()[-5:]:
                lines.append(f"      | {diag}")

    lines.append("")
    lines.append(
        f"Fixtures: {len(batch.succeeded)}/{len(batch.jobs)} generated"
        f" ({len(batch.failed)} failed, {len(batch.skipped)} skipped)"
    )
    return "\n".join(lines)


def write_report(batch: BatchResult, path: Path) -> None:
    """Write the batch result as JSON."""
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        json.dump(batch.to_dict(), f, indent=2)
        f.write("\n")
