from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Iterable, Optional, Tuple


# -----------------------------
# Records produced by the extraction strategies
# -----------------------------

@dataclass(frozen=True)
class AnimationRecord:
    name: str
    duration: float = 1.0

    @property
    def is_loop(self) -> bool:
        return "loop" in self.name.lower()


class StrategyKind(Enum):
    STRUCTURED = "structured"
    TEXT = "text"
    RAW_SCAN = "raw-scan"
    PREDEFINED = "predefined"


@dataclass(frozen=True)
class StrategyAttempt:
    """One step of a file's cascade: what ran and what it produced."""

    label: str
    kind: StrategyKind
    count: int = 0
    error: Optional[str] = None


# -----------------------------
# Per-file result
#
# Created empty when a file's cascade starts, replaced wholesale by the first
# strategy that returns records, then frozen.
# -----------------------------

@dataclass(frozen=True)
class ExtractionOutcome:
    source_path: str
    records: Tuple[AnimationRecord, ...] = ()
    strategy: Optional[StrategyKind] = None
    ok: bool = False
    attempts: Tuple[StrategyAttempt, ...] = ()

    @property
    def used_predefined(self) -> bool:
        return self.strategy is StrategyKind.PREDEFINED

    @property
    def names(self) -> Tuple[str, ...]:
        return tuple(r.name for r in self.records)


def sort_records(records: Iterable[AnimationRecord]) -> Tuple[AnimationRecord, ...]:
    # stable, so duplicate names keep their decode order
    return tuple(sorted(records, key=lambda r: r.name))


@dataclass
class BatchStats:
    attempted: int = 0
    succeeded: int = 0
    predefined: int = 0
    failed: int = 0

    @property
    def parsed(self) -> int:
        return self.succeeded - self.predefined
