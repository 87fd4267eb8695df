"""libskel.writer

Lua config writer for extracted animation data.

Output layout:

  local SPINE_SETTING = {
      ["char/hero"] = {
          Path = "char/hero.skel",
          Animation = {
              BIG_WIN_END = {
                  name = "BigWin_End",
                  isLoop = false,
                  time = 1.00,
              },
          },
      },
  }
  return SPINE_SETTING

Entries are sorted by identifier and animations by name, and no timestamp is
written, so the same input always produces the same file. Animation keys that
normalize to the same identifier get a numeric suffix.
"""

from __future__ import annotations

import os
import re
from typing import List, Mapping, Set

from .model import ExtractionOutcome

TABLE_NAME = "SPINE_SETTING"

_NON_IDENT_RE = re.compile(r"[^0-9A-Za-z_]")


def to_snake_case_upper(name: str) -> str:
    """BigWin_End -> BIG_WIN_END, HTTPServer -> HTTP_SERVER."""
    out: List[str] = []
    last_upper = False
    for ch in name:
        if ch.isupper():
            if not last_upper and out and out[-1] != "_":
                out.append("_")
            out.append(ch)
            last_upper = True
        elif ch == "_":
            out.append("_")
            last_upper = False
        else:
            # end of an acronym run: split before its last capital
            if last_upper and len(out) > 1 and out[-2] != "_":
                out.insert(len(out) - 1, "_")
            out.append(ch.upper())
            last_upper = False
    return "".join(out)


def make_valid_lua_key(key: str) -> str:
    key = _NON_IDENT_RE.sub("_", key)
    if not key or key[0].isdigit():
        key = "_" + key
    return key


def _unique_key(key: str, seen: Set[str]) -> str:
    # Idle and idle both normalize to IDLE; later ones get IDLE_2, IDLE_3, ...
    if key not in seen:
        return key
    n = 2
    while f"{key}_{n}" in seen:
        n += 1
    return f"{key}_{n}"


def lua_string(s: str) -> str:
    s = s.replace("\\", "\\\\").replace('"', '\\"').replace("\n", "\\n")
    return f'"{s}"'


def render_lua(outcomes: Mapping[str, ExtractionOutcome]) -> str:
    entries = [(ident, oc) for ident, oc in sorted(outcomes.items()) if oc.records]

    lines: List[str] = [
        "-- Spine Animation List",
        f"-- Contains data from {len(entries)} skeleton files",
        "",
        f"local {TABLE_NAME} = {{",
    ]
    for ident, oc in entries:
        lines.append(f"    [{lua_string(ident)}] = {{")
        lines.append(f"        Path = {lua_string(oc.source_path)},")
        lines.append("        Animation = {")
        seen: Set[str] = set()
        for rec in oc.records:
            key = _unique_key(make_valid_lua_key(to_snake_case_upper(rec.name)), seen)
            seen.add(key)
            lines.append(f"            {key} = {{")
            lines.append(f"                name = {lua_string(rec.name)},")
            lines.append(f"                isLoop = {'true' if rec.is_loop else 'false'},")
            lines.append(f"                time = {rec.duration:.2f},")
            lines.append("            },")
        lines.append("        },")
        lines.append("    },")
    lines.append("}")
    lines.append("")
    lines.append(f"return {TABLE_NAME}")
    return "\n".join(lines) + "\n"


def write_lua(outcomes: Mapping[str, ExtractionOutcome], out_path: str) -> int:
    """Write the Lua table to ``out_path``; returns the number of entries written."""
    parent = os.path.dirname(os.path.abspath(out_path))
    os.makedirs(parent, exist_ok=True)
    with open(out_path, "w", encoding="utf-8", newline="\n") as f:
        f.write(render_lua(outcomes))
    return sum(1 for oc in outcomes.values() if oc.records)
