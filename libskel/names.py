"""Name filter shared by every strategy that pulls names out of bytes or text."""

from __future__ import annotations

import re

MAX_NAME_LENGTH = 50

_UUID_RE = re.compile(r"[0-9a-f]{8}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{12}", re.IGNORECASE)
_NUMERIC_RE = re.compile(r"\d+")
# header version strings ("3.8.99") sit next to real names in every file
_VERSION_RE = re.compile(r"\d+(?:\.\d+)+")

RESERVED_WORDS = frozenset(("null", "undefined", "true", "false", "NaN", "Infinity"))


def has_control_chars(name: str) -> bool:
    return any(ord(ch) < 0x20 or ord(ch) == 0x7F for ch in name)


def is_printable_ascii(s: str) -> bool:
    return all(32 <= ord(ch) <= 126 for ch in s)


def is_valid_animation_name(name: str | None) -> bool:
    if not name or not name.strip() or len(name) > MAX_NAME_LENGTH:
        return False
    if has_control_chars(name):
        return False
    if _UUID_RE.fullmatch(name):
        return False
    if _NUMERIC_RE.fullmatch(name) or _VERSION_RE.fullmatch(name):
        return False
    return name not in RESERVED_WORDS
