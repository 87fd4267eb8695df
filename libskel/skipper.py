"""libskel.skipper

Walks the sections that precede the animation table so the cursor lands on
the animation count.

Versioned layout (3.8.x export), in file order:
  version string, hash flag (+ hash string), scale f32, default skin string
  bones, slots, IK constraints, path constraints, transform constraints,
  skins (+ attachments), events
  animation count  <- cursor ends here

Every section count is checked against a plausibility window; a count
outside it means we're misaligned (or the file is a different version) and
the walk is abandoned.

The fixed widths below are approximations of the layout and are lossy for
complex rigs (attachments are skipped by a capped byte count instead of
being parsed). Tune them against real samples, don't treat them as a
format reference.
"""

from __future__ import annotations

from typing import Optional, Tuple

from .reader import (
    BufferUnderrun,
    ImplausibleCount,
    NameDecodeFailure,
    SkelCursor,
    SkelDecodeError,
    UnrecoverablePosition,
)
from .report import Reporter

VERSIONED_TAG = "3.8.99"

# (min, max) inclusive
BONE_WINDOW = (0, 1000)
SLOT_WINDOW = (0, 1000)
SKIN_WINDOW = (0, 1000)
IK_WINDOW = (0, 100)
PATH_WINDOW = (0, 100)
TRANSFORM_WINDOW = (0, 100)
EVENT_WINDOW = (0, 100)
ATTACHMENT_WINDOW = (0, 10000)
ENTRY_WINDOW = (0, 1000)

# animation counts probed during resync / generic skip: 0 < n < 1000
PROBE_LOW = 0
PROBE_HIGH = 1000

BONE_TRANSFORM_BYTES = 20  # 5 floats
COLOR_BYTES = 4
IK_BYTES = 16
PATH_BYTES = 20
TRANSFORM_BYTES = 24
EVENT_BYTES = 16
ATTACHMENT_CAP = 200

GENERIC_PROBE_ROUNDS = 20
GENERIC_PROBE_STRIDE = 50


def read_count(cur: SkelCursor, section: str, window: Tuple[int, int]) -> int:
    n = cur.s32()
    if n < window[0] or n > window[1]:
        raise ImplausibleCount(section, n, window)
    return n


def _skip_optional_color(cur: SkelCursor) -> None:
    if cur.u8() != 0:
        cur.skip(COLOR_BYTES)


def read_preamble(cur: SkelCursor, *, versioned: bool) -> str:
    """Consume version/hash (and for the versioned layout scale + default skin)."""
    version = cur.read_string()
    if version is None:
        raise NameDecodeFailure("Could not read version string")
    if cur.remaining() < 4:
        raise BufferUnderrun("Unexpected end of buffer after version")

    if cur.u8() != 0 and cur.remaining() > 0:
        cur.skip_string()

    if versioned:
        if cur.remaining() >= 4:
            cur.f32()  # scale
        cur.skip_string()  # default skin
    return version


# -----------------------------
# Versioned walk
# -----------------------------

def _skip_bones(cur: SkelCursor) -> int:
    n = read_count(cur, "bone", BONE_WINDOW)
    for _ in range(n):
        cur.skip_string()
        cur.s32()  # parent index
        cur.skip(BONE_TRANSFORM_BYTES)
        _skip_optional_color(cur)
    return n


def _skip_slots(cur: SkelCursor) -> int:
    n = read_count(cur, "slot", SLOT_WINDOW)
    for _ in range(n):
        cur.skip_string()
        cur.s32()  # bone index
        _skip_optional_color(cur)
        _skip_optional_color(cur)  # dark color
        cur.u8()  # blend mode
    return n


def _skip_named_fixed(cur: SkelCursor, section: str, window: Tuple[int, int], width: int) -> int:
    n = read_count(cur, section, window)
    for _ in range(n):
        cur.skip_string()
        cur.skip(width)
    return n


def _skip_skins(cur: SkelCursor) -> int:
    n = read_count(cur, "skin", SKIN_WINDOW)
    for _ in range(n):
        cur.skip_string()
        attachments = read_count(cur, "attachment", ATTACHMENT_WINDOW)
        for _ in range(attachments):
            cur.s32()  # slot index
            entries = read_count(cur, "attachment entry", ENTRY_WINDOW)
            for _ in range(entries):
                cur.skip_string()  # placeholder name
                cur.skip_string()  # attachment name
                cur.u8()  # attachment type
                cur.skip_capped(ATTACHMENT_CAP)
    return n


def walk_versioned_sections(cur: SkelCursor, reporter: Optional[Reporter] = None) -> None:
    """Strict walk; any SkelDecodeError means the hypothesized layout is wrong."""
    counts = (
        ("bones", _skip_bones(cur)),
        ("slots", _skip_slots(cur)),
        ("ik", _skip_named_fixed(cur, "IK constraint", IK_WINDOW, IK_BYTES)),
        ("path", _skip_named_fixed(cur, "path constraint", PATH_WINDOW, PATH_BYTES)),
        ("transform", _skip_named_fixed(cur, "transform constraint", TRANSFORM_WINDOW, TRANSFORM_BYTES)),
        ("skins", _skip_skins(cur)),
        ("events", _skip_named_fixed(cur, "event", EVENT_WINDOW, EVENT_BYTES)),
    )
    if reporter:
        reporter.debug("section counts: " + " ".join(f"{k}={v}" for k, v in counts))


def resynchronize(cur: SkelCursor) -> int:
    """Scan forward for a plausible animation count and rewind onto it."""
    while cur.remaining() >= 4:
        value = cur.s32()
        if PROBE_LOW < value < PROBE_HIGH:
            cur.seek(cur.tell() - 4)
            return cur.tell()
    raise UnrecoverablePosition("Could not locate animations section")


def locate_versioned_animations(cur: SkelCursor, reporter: Optional[Reporter] = None) -> bool:
    """Position ``cur`` at the animation count.

    Returns True when the structural walk succeeded, False when the position
    came from resynchronization.
    """
    start = cur.tell()
    try:
        walk_versioned_sections(cur, reporter)
        return True
    except SkelDecodeError as e:
        if reporter:
            reporter.debug(f"structural walk from 0x{start:X} failed ({e}); resynchronizing at 0x{cur.tell():X}")
    ofs = resynchronize(cur)
    if reporter:
        reporter.debug(f"resynchronized at 0x{ofs:X}")
    return False


# -----------------------------
# Generic (coarse) skip
# -----------------------------

def locate_generic_animations(cur: SkelCursor) -> int:
    if cur.remaining() >= 4:
        cur.f32()  # scale
    if cur.remaining() > 0:
        cur.skip_string()  # default skin

    for _ in range(GENERIC_PROBE_ROUNDS):
        if cur.remaining() < 4:
            break
        value = cur.s32()
        if PROBE_LOW < value < PROBE_HIGH:
            cur.seek(cur.tell() - 4)
            return cur.tell()
        cur.skip_capped(GENERIC_PROBE_STRIDE)
    raise UnrecoverablePosition("No plausible animation count near the header")
