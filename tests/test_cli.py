import glob
import os

from skelcli.main import build_parser, main

from skelbytes import versioned_file


def _skel(path, data):
    os.makedirs(os.path.dirname(path), exist_ok=True)
    with open(path, "wb") as f:
        f.write(data)
    return path


def test_parser_defaults():
    args = build_parser().parse_args(["extract", "assets"])
    assert args.ext == ".skel"
    assert not args.force_predefined and not args.no_auto_predefined and not args.debug


def test_extract_writes_output_lua(tmp_path):
    root = str(tmp_path)
    _skel(os.path.join(root, "char", "hero.skel"), versioned_file([("idle", 2.5)]))
    _skel(os.path.join(root, "bigwin_front.skel"), b"\xff" * 16)

    assert main(["extract", root]) == 0
    with open(os.path.join(root, "output.lua"), encoding="utf-8") as f:
        text = f.read()
    assert '["char/hero"] = {' in text
    assert 'name = "idle",' in text
    assert '["bigwin_front"] = {' in text
    assert "LEGENDARY_WIN_END = {" in text


def test_extract_custom_out_and_forced_predefined(tmp_path):
    root = os.path.join(str(tmp_path), "in")
    out = os.path.join(str(tmp_path), "build", "anims.lua")
    _skel(os.path.join(root, "hero.skel"), versioned_file([("idle", 2.5)]))

    assert main(["extract", root, "--out", out, "--force-predefined"]) == 0
    with open(out, encoding="utf-8") as f:
        text = f.read()
    assert 'name = "idle"' not in text
    assert 'name = "Idle",' in text
    assert 'name = "Win",' in text


def test_extract_without_fallback_skips_empty_entries(tmp_path):
    root = str(tmp_path)
    _skel(os.path.join(root, "mystery.skel"), b"\xff" * 16)
    assert main(["extract", root, "--no-auto-predefined"]) == 0
    with open(os.path.join(root, "output.lua"), encoding="utf-8") as f:
        text = f.read()
    assert "-- Contains data from 0 skeleton files" in text
    assert "mystery" not in text


def test_extract_invalid_directory(tmp_path, capsys):
    assert main(["extract", os.path.join(str(tmp_path), "nope")]) == 1
    assert "does not exist" in capsys.readouterr().out


def test_extract_empty_directory(tmp_path):
    assert main(["extract", str(tmp_path)]) == 0
    assert not os.path.exists(os.path.join(str(tmp_path), "output.lua"))


def test_summary_saves_report(tmp_path, capsys):
    path = _skel(os.path.join(str(tmp_path), "hero.skel"), versioned_file([("idle", 2.5)]))
    assert main(["summary", path, "--save-report"]) == 0
    reports = glob.glob(os.path.join(str(tmp_path), "hero_animations_*.txt"))
    assert len(reports) == 1
    assert "idle" in capsys.readouterr().out


def test_summary_missing_file(tmp_path):
    assert main(["summary", os.path.join(str(tmp_path), "gone.skel")]) == 2
