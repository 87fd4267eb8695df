from __future__ import annotations

import os
from dataclasses import dataclass
from datetime import datetime
from typing import List, Optional

from .config import ExtractionPolicy
from .model import ExtractionOutcome
from .orchestrator import ExtractionOrchestrator
from .reader import SkelCursor
from .report import Reporter


@dataclass
class SkelSummary:
    path: str
    file_size: int
    version: Optional[str]
    outcome: ExtractionOutcome


def _read_header_version(path: str) -> Optional[str]:
    # leading length-prefixed string; best-effort only
    with open(path, "rb") as f:
        head = f.read(64)
    return SkelCursor(head).read_string()


def summarize_skel(
    path: str,
    policy: ExtractionPolicy = ExtractionPolicy(),
    reporter: Optional[Reporter] = None,
) -> SkelSummary:
    orchestrator = ExtractionOrchestrator(policy, reporter=reporter)
    outcome = orchestrator.extract_file(path)
    return SkelSummary(
        path=path,
        file_size=os.path.getsize(path),
        # forced mode never parses the file
        version=None if policy.force_predefined else _read_header_version(path),
        outcome=outcome,
    )


def format_report(summary: SkelSummary) -> str:
    records = summary.outcome.records
    lines: List[str] = [
        f"Skeleton file: {summary.path}",
        f"Animation count: {len(records)}",
        "",
        "Animation list:",
    ]
    for idx, rec in enumerate(records, start=1):
        lines.append(f"{idx}. {rec.name} (Duration: {rec.duration:.2f} seconds)")
    return "\n".join(lines) + "\n"


def save_report(summary: SkelSummary, when: Optional[datetime] = None) -> str:
    """Write the report beside the input as <stem>_animations_<timestamp>.txt."""
    stamp = (when or datetime.now()).strftime("%Y%m%d_%H%M%S")
    directory = os.path.dirname(os.path.abspath(summary.path))
    stem = os.path.splitext(os.path.basename(summary.path))[0]
    out_path = os.path.join(directory, f"{stem}_animations_{stamp}.txt")
    with open(out_path, "w", encoding="utf-8") as f:
        f.write(format_report(summary))
    return out_path
