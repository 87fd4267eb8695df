"""libskel.orchestrator

Runs the extraction cascade for each file:

  structured (versioned) -> structured (generic) -> text -> raw strings
  -> predefined list (auto policy)

The cascade is a plain tuple of steps; the first step that returns records
wins. A step that raises SkelDecodeError and a step that returns nothing are
treated the same way: note it and move on. A versioned decode that walks
every section and finds a zero animation count ends the cascade early.
One bad file never stops a batch.
"""

from __future__ import annotations

import dataclasses
import os
from dataclasses import dataclass
from typing import Callable, Dict, Iterable, List, Optional, Sequence, Tuple

from .config import ExtractionPolicy
from .decoder import EmptyAnimationTable, decode_generic, decode_versioned
from .model import (
    AnimationRecord,
    BatchStats,
    ExtractionOutcome,
    StrategyAttempt,
    StrategyKind,
    sort_records,
)
from .predefined import KNOWLEDGE_BASE, KnowledgeBaseEntry, predefined_records
from .reader import SkelDecodeError
from .report import Reporter
from .scanners import scan_raw_strings, scan_text

StepFn = Callable[[bytes, Reporter], List[AnimationRecord]]


@dataclass(frozen=True)
class CascadeStep:
    label: str
    kind: StrategyKind
    run: StepFn


DEFAULT_CASCADE: Tuple[CascadeStep, ...] = (
    CascadeStep("structured-versioned", StrategyKind.STRUCTURED, decode_versioned),
    CascadeStep("structured-generic", StrategyKind.STRUCTURED, decode_generic),
    CascadeStep("text-pattern", StrategyKind.TEXT, lambda data, reporter: scan_text(data)),
    CascadeStep("raw-string", StrategyKind.RAW_SCAN, lambda data, reporter: scan_raw_strings(data)),
)

PREDEFINED_LABEL = "predefined"


def relative_path(path: str, root: str) -> str:
    rel = os.path.relpath(os.path.abspath(path), os.path.abspath(root))
    if rel.startswith(".."):
        rel = os.path.basename(path)
    return rel.replace(os.sep, "/")


def file_identifier(path: str, root: str) -> str:
    """Relative path with '/' separators and the extension stripped."""
    return os.path.splitext(relative_path(path, root))[0]


class ExtractionOrchestrator:
    def __init__(
        self,
        policy: ExtractionPolicy = ExtractionPolicy(),
        *,
        cascade: Sequence[CascadeStep] = DEFAULT_CASCADE,
        knowledge_base: Sequence[KnowledgeBaseEntry] = KNOWLEDGE_BASE,
        reporter: Optional[Reporter] = None,
    ):
        self.policy = policy
        self.cascade = tuple(cascade)
        self.knowledge_base = tuple(knowledge_base)
        self.reporter = reporter or Reporter(debug=policy.debug)
        self.stats = BatchStats()

    # -----------------------------
    # Single file
    # -----------------------------

    def _predefined(self, path: str, attempts: List[StrategyAttempt]) -> ExtractionOutcome:
        records = predefined_records(path, self.knowledge_base)
        attempts.append(StrategyAttempt(PREDEFINED_LABEL, StrategyKind.PREDEFINED, len(records)))
        self.reporter.debug(
            f"Using predefined list for {os.path.basename(path)}: {len(records)} animations"
        )
        return ExtractionOutcome(
            source_path=path,
            records=sort_records(records),
            strategy=StrategyKind.PREDEFINED,
            ok=bool(records),
            attempts=tuple(attempts),
        )

    def run_cascade(self, path: str, data: bytes) -> ExtractionOutcome:
        """Inspection strategies only; returns an empty outcome when none succeed."""
        attempts: List[StrategyAttempt] = []
        for step in self.cascade:
            try:
                records = step.run(data, self.reporter)
            except EmptyAnimationTable:
                attempts.append(StrategyAttempt(step.label, step.kind, 0))
                self.reporter.debug(f"{step.label}: skeleton declares no animations")
                break
            except SkelDecodeError as e:
                attempts.append(
                    StrategyAttempt(step.label, step.kind, 0, f"{type(e).__name__}: {e}")
                )
                self.reporter.debug(f"{step.label} failed: {type(e).__name__}: {e}")
                continue

            attempts.append(StrategyAttempt(step.label, step.kind, len(records)))
            if records:
                self.reporter.debug(f"{step.label} recovered {len(records)} animations")
                return ExtractionOutcome(
                    source_path=path,
                    records=sort_records(records),
                    strategy=step.kind,
                    ok=True,
                    attempts=tuple(attempts),
                )
            self.reporter.debug(f"{step.label} found nothing")
        return ExtractionOutcome(source_path=path, attempts=tuple(attempts))

    def extract_file(self, path: str) -> ExtractionOutcome:
        if self.policy.force_predefined:
            # bytes are never read in this mode
            return self._predefined(path, [])

        with open(path, "rb") as f:
            data = f.read()

        outcome = self.run_cascade(path, data)
        if outcome.ok or not self.policy.auto_predefined:
            return outcome
        self.reporter.debug("All parsing methods failed - using predefined animations based on filename")
        return self._predefined(path, list(outcome.attempts))

    # -----------------------------
    # Batch
    # -----------------------------

    def _count(self, ident: str, outcome: ExtractionOutcome) -> None:
        self.stats.attempted += 1
        if not outcome.ok:
            self.stats.failed += 1
            self.reporter.warn(f"No animations found in: {ident}")
            return
        self.stats.succeeded += 1
        if outcome.used_predefined:
            self.stats.predefined += 1
            self.reporter.success(f"Successfully processed (using predefined list): {ident}")
        else:
            self.reporter.success(f"Successfully processed: {ident}")

    def extract_batch(self, paths: Iterable[str], root: str) -> Dict[str, ExtractionOutcome]:
        """Run every file through the cascade; keys are sorted file identifiers."""
        results: Dict[str, ExtractionOutcome] = {}
        for path in paths:
            rel = relative_path(path, root)
            ident = os.path.splitext(rel)[0]
            if ident in results:
                # hero.skel and hero.SKEL share an identifier; first one wins
                self.reporter.warn(
                    f"Skipping {rel}: identifier {ident} already taken by {results[ident].source_path}"
                )
                continue
            try:
                outcome = self.extract_file(path)
            except OSError as e:
                self.reporter.warn(f"Couldn't process file {path}: {e}")
                outcome = ExtractionOutcome(source_path=path)
            outcome = dataclasses.replace(outcome, source_path=rel)
            self._count(ident, outcome)
            results[ident] = outcome

        s = self.stats
        self.reporter.info(
            f"Processing summary: {s.succeeded} successful ({s.predefined} using predefined lists), "
            f"{s.failed} failed"
        )
        return dict(sorted(results.items()))
