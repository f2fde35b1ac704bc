"""
Run summary — per-suggestion log, applied/skipped counts, and the
machine-readable ``APPLIED_COUNT`` line.
"""

from __future__ import annotations

import json
import math
import os
from dataclasses import asdict, dataclass, field
from datetime import datetime, timezone

from .editing.patch_applier import AppliedEdit, ApplyResult

COUNT_KEY = "APPLIED_COUNT"


def count_line(applied: int) -> str:
    """Return the final line parsed by automation, e.g. ``APPLIED_COUNT=3``."""
    return f"{COUNT_KEY}={applied}"


@dataclass
class RunSummary:
    """Outcome of one run over a pull request's suggestions."""
    total: int = 0
    applied: int = 0
    skipped: int = 0
    entries: list[AppliedEdit] = field(default_factory=list)
    files_modified: list[str] = field(default_factory=list)
    pr: int | None = None
    repo: str = ""

    @classmethod
    def from_result(cls, total: int, result: ApplyResult, **extra) -> "RunSummary":
        return cls(
            total=total,
            applied=result.applied,
            skipped=result.skipped,
            entries=list(result.entries),
            files_modified=list(result.files_modified),
            **extra,
        )

    @property
    def success_rate(self) -> int:
        """Applied suggestions as a whole percentage of all suggestions."""
        if self.total <= 0:
            return 0
        # half rounds up, so 12.5% reports as 13%
        return math.floor(self.applied / self.total * 100 + 0.5)

    def to_dict(self) -> dict:
        return {
            "pr": self.pr,
            "repo": self.repo,
            "total": self.total,
            "applied": self.applied,
            "skipped": self.skipped,
            "success_rate": self.success_rate,
            "files_modified": list(self.files_modified),
            "suggestions": [asdict(e) for e in self.entries],
        }


def format_summary(summary: RunSummary) -> str:
    """Human-readable end-of-run summary."""
    lines = [
        "",
        "Summary:",
        f"   Successfully applied: {summary.applied} suggestions",
        f"   Skipped: {summary.skipped} suggestions",
        f"   Success rate: {summary.success_rate}%",
    ]
    skipped = [e for e in summary.entries if not e.applied]
    if skipped:
        lines.append("   Skipped suggestions:")
        for e in skipped:
            lines.append(
                f"     - {e.path}:{e.start_line}-{e.end_line} "
                f"(ID: {e.id}): {e.reason}")
    return "\n".join(lines)


def write_json_report(summary: RunSummary, path: str) -> str:
    """Write the summary as JSON to *path*. Returns the absolute path."""
    abs_path = os.path.abspath(path)
    parent = os.path.dirname(abs_path)
    if parent:
        os.makedirs(parent, exist_ok=True)

    payload = {"generated_at": datetime.now(timezone.utc).isoformat()}
    payload.update(summary.to_dict())
    with open(abs_path, "w", encoding="utf-8") as f:
        json.dump(payload, f, indent=2, default=str)
    return abs_path
