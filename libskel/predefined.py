"""libskel.predefined

Canned animation lists keyed by file name, used when nothing could be
recovered from a file's bytes (or when the operator forces it).

The table is ordered and the first match wins, so the narrower variants
(bigwin front, pot txt, fg compliment, scatter fx) sit before the entries
they specialize. Nothing here inspects file contents and none of it is
authoritative.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Callable, Sequence, Tuple

from .model import AnimationRecord

Match = Callable[[str, str], bool]


@dataclass(frozen=True)
class KnowledgeBaseEntry:
    label: str
    match: Match  # (lowercased file name, lowercased parent dir name) -> bool
    records: Tuple[AnimationRecord, ...]


def _anims(*pairs: Tuple[str, float]) -> Tuple[AnimationRecord, ...]:
    return tuple(AnimationRecord(name, duration) for name, duration in pairs)


_BIGWIN = (
    ("BigWin_Start", 2.0), ("BigWin_End", 1.0),
    ("MegaWin_Start", 2.5), ("MegaWin_End", 1.5),
    ("SuperWin_Start", 3.0), ("SuperWin_End", 1.8),
    ("LegendaryWin_Start", 3.5), ("LegendaryWin_End", 2.0),
)
_BIGWIN_TRACKS = (
    ("Track1_Coin_Start", 1.0), ("Track1_Coin_Loop", 2.0), ("Track1_Coin_End", 1.0),
    ("Track2_L", 1.5), ("Track2_M", 1.5), ("Track2_S", 1.5),
)
_POT_TXT = (("Track_Txt_End", 1.0), ("Track_Txt_Loop", 2.0), ("Track_Txt_Win", 1.5))
_START_LOOP_END = (("Start", 1.5), ("Loop", 2.0), ("End", 1.5))


def _is_pot(name: str, parent: str) -> bool:
    return "pot_" in name and "character" in parent


def _is_scatter(name: str, parent: str) -> bool:
    return "scatter" in name and ("jp" in name or "symbols" in parent)


KNOWLEDGE_BASE: Tuple[KnowledgeBaseEntry, ...] = (
    KnowledgeBaseEntry("background", lambda n, d: "bg" in n, _anims(("MG", 2.0), ("FG", 2.0), ("Idle", 2.0))),
    KnowledgeBaseEntry("bigwin-front", lambda n, d: "bigwin" in n and "front" in n, _anims(*_BIGWIN)),
    KnowledgeBaseEntry("bigwin", lambda n, d: "bigwin" in n, _anims(*_BIGWIN, *_BIGWIN_TRACKS)),
    KnowledgeBaseEntry("pot-txt", lambda n, d: _is_pot(n, d) and "txt" in n, _anims(*_POT_TXT)),
    KnowledgeBaseEntry(
        "pot",
        _is_pot,
        _anims(
            ("Hit", 0.5), ("Lv1", 2.0), ("Lv2", 2.0), ("Lv3", 2.0), ("Lv4", 2.0),
            ("NearWin", 1.5), ("Track_Golden", 1.8), *_POT_TXT,
            ("Turn_Gold", 1.2), ("Upgrade", 1.0), ("Win", 1.5), ("Win2", 1.8),
        ),
    ),
    KnowledgeBaseEntry(
        "jp-panel",
        lambda n, d: "jp_panel" in n,
        _anims(
            ("BetUp", 0.5), ("BetUp_Lock", 0.5), ("Idle", 2.0), ("Idle_Lock", 2.0),
            ("Lock", 0.6), ("UnLock", 0.6), ("Win", 1.5),
        ),
    ),
    KnowledgeBaseEntry("fx-click", lambda n, d: "fx_click" in n, _anims(("Hit", 0.3), ("Click", 0.3))),
    KnowledgeBaseEntry("extrabet", lambda n, d: "extrabet" in n, _anims(("Extrabet", 1.0), ("On", 1.0))),
    KnowledgeBaseEntry("omen", lambda n, d: "omen" in n, _anims(("Start", 2.0))),
    KnowledgeBaseEntry("randomwild", lambda n, d: "randomwild" in n, _anims(("Start", 2.0))),
    KnowledgeBaseEntry("declare", lambda n, d: "declare" in n, _anims(*_START_LOOP_END)),
    KnowledgeBaseEntry(
        "fg-compliment",
        lambda n, d: "compliment" in n and "fg_" in n,
        _anims(
            *_START_LOOP_END,
            ("Trace_1B", 1.0), ("Trace_1G", 1.0), ("Trace_1R", 1.0),
            ("Track_2BG", 1.5), ("Track_2BR", 1.5), ("Track_2RG", 1.5),
        ),
    ),
    KnowledgeBaseEntry("compliment", lambda n, d: "compliment" in n, _anims(*_START_LOOP_END)),
    KnowledgeBaseEntry(
        "scatter-fx",
        lambda n, d: _is_scatter(n, d) and "fx" in n,
        _anims(("Switch", 0.5), ("Win", 1.5)),
    ),
    KnowledgeBaseEntry(
        "scatter",
        _is_scatter,
        _anims(
            ("JP", 1.5), ("JP_Multiply", 1.5), ("JP_Multiply_Start", 1.0),
            ("Num", 1.0), ("Num_Start", 0.8),
        ),
    ),
    KnowledgeBaseEntry("respin", lambda n, d: "respin" in n, _anims(("End", 1.0), ("Hit", 0.8))),
    KnowledgeBaseEntry("nearwin", lambda n, d: "nearwin" in n, _anims(("Start", 1.0), ("Loop", 2.0), ("End", 1.0))),
    KnowledgeBaseEntry("fullreward", lambda n, d: "fullreward" in n, _anims(("Start", 2.5))),
    KnowledgeBaseEntry(
        "symbol",
        lambda n, d: "symbol_" in n and "symbols" in d,
        _anims(("Idle", 1.0), ("Win", 1.5), ("Frame", 1.2), ("FrameLoop", 1.0)),
    ),
    KnowledgeBaseEntry("reel", lambda n, d: "reel" in n, _anims(("Idle", 2.0))),
    KnowledgeBaseEntry("gameintro", lambda n, d: "gameintro" in n, _anims(("Start", 3.0))),
)

DEFAULT_RECORDS: Tuple[AnimationRecord, ...] = _anims(
    ("Idle", 1.0), ("Start", 1.0), ("Loop", 2.0), ("End", 1.0), ("Win", 1.5)
)


def match_entry(path: str, knowledge_base: Sequence[KnowledgeBaseEntry] = KNOWLEDGE_BASE) -> KnowledgeBaseEntry | None:
    filename = os.path.basename(path).lower()
    parent = os.path.basename(os.path.dirname(os.path.abspath(path))).lower()
    for entry in knowledge_base:
        if entry.match(filename, parent):
            return entry
    return None


def predefined_records(
    path: str, knowledge_base: Sequence[KnowledgeBaseEntry] = KNOWLEDGE_BASE
) -> Tuple[AnimationRecord, ...]:
    entry = match_entry(path, knowledge_base)
    return entry.records if entry else DEFAULT_RECORDS
