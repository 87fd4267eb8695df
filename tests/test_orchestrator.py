import io
import os

import pytest
from rich.console import Console

from libskel.config import ExtractionPolicy
from libskel.model import AnimationRecord, StrategyKind
from libskel.orchestrator import (
    DEFAULT_CASCADE,
    CascadeStep,
    ExtractionOrchestrator,
    file_identifier,
    relative_path,
)
from libskel.reader import NameDecodeFailure
from libskel.report import Reporter

from skelbytes import preamble, s32, versioned_file


def _quiet():
    return Reporter(console=Console(file=io.StringIO(), width=200))


def _write(path, data):
    os.makedirs(os.path.dirname(path), exist_ok=True)
    with open(path, "wb") as f:
        f.write(data)
    return str(path)


NO_ANIMATIONS = versioned_file([])
UNPARSABLE = b"\xff" * 16
JSON_NAME = b'"name": "idle_loop"'


def test_no_animations_without_auto_fallback(tmp_path):
    path = _write(os.path.join(tmp_path, "mystery.skel"), NO_ANIMATIONS)
    orch = ExtractionOrchestrator(ExtractionPolicy(auto_predefined=False), reporter=_quiet())
    oc = orch.extract_file(path)
    assert oc.records == ()
    assert not oc.ok
    assert oc.strategy is None
    assert [(a.label, a.count, a.error) for a in oc.attempts] == [("structured-versioned", 0, None)]


def test_no_animations_auto_fallback_default_list(tmp_path):
    path = _write(os.path.join(tmp_path, "mystery.skel"), NO_ANIMATIONS)
    oc = ExtractionOrchestrator(reporter=_quiet()).extract_file(path)
    assert oc.ok
    assert oc.strategy is StrategyKind.PREDEFINED
    assert oc.names == ("End", "Idle", "Loop", "Start", "Win")
    assert oc.attempts[-1].label == "predefined"


def test_empty_table_with_named_skin_and_hash_uses_predefined(tmp_path):
    # header strings must not be mistaken for animations by the scanners
    data = preamble(skin="default", hash_string="Xk3mPq9wZr") + s32(0) * 7 + s32(0)
    path = _write(os.path.join(tmp_path, "mystery.skel"), data)
    oc = ExtractionOrchestrator(reporter=_quiet()).extract_file(path)
    assert oc.used_predefined
    assert oc.names == ("End", "Idle", "Loop", "Start", "Win")
    assert [a.label for a in oc.attempts] == ["structured-versioned", "predefined"]


def test_unparsable_bigwin_front_uses_predefined(tmp_path):
    path = _write(os.path.join(tmp_path, "bigwin_front.skel"), UNPARSABLE)
    oc = ExtractionOrchestrator(reporter=_quiet()).extract_file(path)
    assert oc.used_predefined
    assert set(oc.names) == {
        "BigWin_Start", "BigWin_End", "MegaWin_Start", "MegaWin_End",
        "SuperWin_Start", "SuperWin_End", "LegendaryWin_Start", "LegendaryWin_End",
    }
    assert oc.names == tuple(sorted(oc.names))
    errors = [a.error for a in oc.attempts[:2]]
    assert all(e and e.startswith("NameDecodeFailure") for e in errors)


def test_text_pattern_after_structured_failures(tmp_path):
    path = _write(os.path.join(tmp_path, "hero.skel"), JSON_NAME)
    oc = ExtractionOrchestrator(reporter=_quiet()).extract_file(path)
    assert oc.strategy is StrategyKind.TEXT
    assert oc.records == (AnimationRecord("idle_loop", 1.0),)
    labels = [a.label for a in oc.attempts]
    assert labels == ["structured-versioned", "structured-generic", "text-pattern"]
    assert oc.attempts[0].error and oc.attempts[1].error


def test_cascade_order_is_fixed():
    calls = []

    def step(label, result):
        def run(data, reporter):
            calls.append(label)
            if result is None:
                raise NameDecodeFailure("bad")
            return result
        return CascadeStep(label, StrategyKind.STRUCTURED, run)

    cascade = (
        step("one", None),
        step("two", []),
        step("three", [AnimationRecord("walk")]),
        step("four", [AnimationRecord("never")]),
    )
    orch = ExtractionOrchestrator(cascade=cascade, reporter=_quiet())
    oc = orch.run_cascade("x.skel", b"")
    assert calls == ["one", "two", "three"]
    assert oc.names == ("walk",)
    assert [(a.label, a.count) for a in oc.attempts] == [("one", 0), ("two", 0), ("three", 1)]


def test_raw_scan_is_last_inspection_step():
    # bone count out of window with nothing to resynchronize onto
    data = preamble(skin="default") + s32(5000)
    oc = ExtractionOrchestrator(ExtractionPolicy(auto_predefined=False), reporter=_quiet()).run_cascade("x.skel", data)
    assert oc.strategy is StrategyKind.RAW_SCAN
    assert oc.names == ("default",)
    assert [a.label for a in oc.attempts] == [s.label for s in DEFAULT_CASCADE] == [
        "structured-versioned", "structured-generic", "text-pattern", "raw-string",
    ]
    assert oc.attempts[0].error.startswith("UnrecoverablePosition")


def test_short_buffer_still_reaches_scanners():
    oc = ExtractionOrchestrator(reporter=_quiet()).run_cascade("x.skel", b'"hit"')
    assert oc.strategy is StrategyKind.TEXT
    assert oc.names == ("hit",)
    assert oc.attempts[0].error.startswith("BufferUnderrun")


def test_forced_predefined_never_reads_the_file(tmp_path):
    def boom(data, reporter):
        raise AssertionError("inspection step ran")

    cascade = (CascadeStep("boom", StrategyKind.STRUCTURED, boom),)
    orch = ExtractionOrchestrator(
        ExtractionPolicy(force_predefined=True), cascade=cascade, reporter=_quiet()
    )
    oc = orch.extract_file(os.path.join(tmp_path, "missing", "bg_main.skel"))
    assert oc.used_predefined
    assert oc.names == ("FG", "Idle", "MG")
    assert [a.label for a in oc.attempts] == ["predefined"]


def test_extraction_is_idempotent(tmp_path):
    path = _write(os.path.join(tmp_path, "hero.skel"), versioned_file([("idle", 2.0), ("run", 0.5)], pad=2000))
    orch = ExtractionOrchestrator(reporter=_quiet())
    first = orch.extract_file(path)
    assert first.names == ("idle", "run")
    assert orch.extract_file(path) == first


def test_batch_stats_and_identifiers(tmp_path):
    root = str(tmp_path)
    paths = [
        _write(os.path.join(root, "a", "hero.skel"), JSON_NAME),
        _write(os.path.join(root, "bigwin_front.skel"), UNPARSABLE),
        _write(os.path.join(root, "mystery.skel"), UNPARSABLE),
    ]
    out = io.StringIO()
    orch = ExtractionOrchestrator(reporter=Reporter(console=Console(file=out, width=200)))
    results = orch.extract_batch(reversed(paths), root)

    assert list(results) == ["a/hero", "bigwin_front", "mystery"]
    assert results["a/hero"].source_path == "a/hero.skel"
    s = orch.stats
    assert (s.attempted, s.succeeded, s.predefined, s.failed, s.parsed) == (3, 3, 2, 0, 1)
    assert "Processing summary" in out.getvalue()


def test_batch_continues_past_unreadable_files(tmp_path):
    root = str(tmp_path)
    good = _write(os.path.join(root, "hero.skel"), JSON_NAME)
    missing = os.path.join(root, "gone.skel")
    empty = _write(os.path.join(root, "mystery.skel"), UNPARSABLE)
    orch = ExtractionOrchestrator(ExtractionPolicy(auto_predefined=False), reporter=_quiet())
    results = orch.extract_batch([missing, good, empty], root)

    assert results["hero"].ok
    assert not results["gone"].ok and results["gone"].records == ()
    assert not results["mystery"].ok
    assert (orch.stats.attempted, orch.stats.succeeded, orch.stats.failed) == (3, 1, 2)


def test_batch_skips_colliding_identifiers(tmp_path):
    root = str(tmp_path)
    first = _write(os.path.join(root, "hero.skel"), JSON_NAME)
    second = _write(os.path.join(root, "hero.SKEL"), versioned_file([("run", 0.5)]))
    out = io.StringIO()
    orch = ExtractionOrchestrator(reporter=Reporter(console=Console(file=out, width=200)))
    results = orch.extract_batch([first, second], root)

    assert list(results) == ["hero"]
    assert results["hero"].source_path == "hero.skel"
    assert results["hero"].names == ("idle_loop",)
    assert orch.stats.attempted == 1
    assert "Skipping hero.SKEL" in out.getvalue()


@pytest.mark.parametrize(
    "parts,expected",
    [
        (("a", "b.skel"), "a/b"),
        (("hero.skel",), "hero"),
        (("x", "y", "z.SKEL"), "x/y/z"),
    ],
)
def test_file_identifier(tmp_path, parts, expected):
    assert file_identifier(os.path.join(str(tmp_path), *parts), str(tmp_path)) == expected


def test_relative_path_outside_root_falls_back_to_basename(tmp_path):
    other = os.path.join(str(tmp_path), "elsewhere", "hero.skel")
    assert relative_path(other, os.path.join(str(tmp_path), "root")) == "hero.skel"
