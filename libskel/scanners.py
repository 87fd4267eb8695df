"""libskel.scanners

Content-agnostic fallbacks. Both scanners are pure functions over the raw
bytes; they never assume a section layout and only return names (every
record gets the default 1.0s duration).
"""

from __future__ import annotations

import re
import struct
from typing import Iterable, List, Set

from .model import AnimationRecord
from .names import is_printable_ascii, is_valid_animation_name

DEFAULT_DURATION = 1.0
RAW_MAX_LENGTH = 100

COMMON_ANIMATION_NAMES = (
    "idle", "walk", "run", "attack", "jump", "death", "hit", "spawn",
    "start", "end", "loop", "stand", "fall", "crouch", "shoot", "aim",
    "reload", "hurt", "swim", "climb", "victory", "defeat",
)

# quoted value right after a name token: name="x", "name": "x", name: 'x'
_NAME_VALUE_RE = re.compile(r"""name["']?\s*[:=]?\s*(["'])(.*?)\1""")
_JSON_NAME_RE = re.compile(r'"name"\s*:\s*"([^"]+)"')
_MARKUP_NAME_RE = re.compile(r'name\s*=\s*"([^"]+)"')


def _records(names: Iterable[str]) -> List[AnimationRecord]:
    return [AnimationRecord(n, DEFAULT_DURATION) for n in sorted(names)]


# -----------------------------
# Text patterns
# -----------------------------

def names_from_keyword_lines(text: str) -> Set[str]:
    found: Set[str] = set()
    for line in text.split("\n"):
        keyword_line = "animation" in line and "name" in line
        if not keyword_line and '"animations"' not in line and "'animations'" not in line:
            continue
        m = _NAME_VALUE_RE.search(line)
        if m and is_valid_animation_name(m.group(2)):
            found.add(m.group(2))
    return found


def names_from_attributes(text: str) -> Set[str]:
    found: Set[str] = set()
    for rx in (_JSON_NAME_RE, _MARKUP_NAME_RE):
        for m in rx.finditer(text):
            if is_valid_animation_name(m.group(1)):
                found.add(m.group(1))
    return found


def names_from_dictionary(text: str) -> Set[str]:
    found: Set[str] = set()
    for name in COMMON_ANIMATION_NAMES:
        # bare words show up everywhere; only count quoted or name="..." uses
        rx = re.compile(rf"(\"{name}\"|'{name}'|name\s*=\s*\"{name}\")")
        if rx.search(text):
            found.add(name)
    return found


def scan_text(data: bytes) -> List[AnimationRecord]:
    text = data.decode("utf-8", errors="replace")
    names = names_from_keyword_lines(text)
    names |= names_from_attributes(text)
    names |= names_from_dictionary(text)
    return _records(names)


# -----------------------------
# Raw length-prefixed strings
# -----------------------------

def iter_raw_strings(data: bytes) -> Iterable[str]:
    # stride 1: strings aren't guaranteed to start on aligned offsets
    size = len(data)
    for i in range(size - 4):
        length = struct.unpack_from("<i", data, i)[0]
        if length <= 0 or length >= RAW_MAX_LENGTH or i + 4 + length > size:
            continue
        try:
            yield data[i + 4 : i + 4 + length - 1].decode("utf-8")
        except UnicodeDecodeError:
            continue


def scan_raw_strings(data: bytes) -> List[AnimationRecord]:
    names = {
        s for s in iter_raw_strings(data)
        if is_printable_ascii(s) and is_valid_animation_name(s)
    }
    return _records(names)
