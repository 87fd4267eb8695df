"""libskel.decoder

Structured decode of the animation table.

Once the skipper has put the cursor on the animation count, both layouts
read the table the same way:

  int32 count
  count x (string name, f32 duration, <timeline payload>)

The timeline payload isn't parsed. It's skipped in coarse chunks, and when
the skip can't be completed the entries decoded so far are kept.
"""

from __future__ import annotations

import math
import struct
from typing import Callable, List, Optional

from .model import AnimationRecord
from .names import is_valid_animation_name
from .reader import BufferUnderrun, NameDecodeFailure, SkelCursor, SkelDecodeError
from .report import Reporter
from .skipper import (
    VERSIONED_TAG,
    locate_generic_animations,
    locate_versioned_animations,
    read_count,
    read_preamble,
)

MIN_FILE_SIZE = 8
ANIMATION_WINDOW = (0, 1000)
TIMELINE_WINDOW = (0, 1000)

VERSIONED_DURATION_CEILING = 300.0
GENERIC_DURATION_CEILING = 100.0
DEFAULT_DURATION = 1.0

TIMELINE_CAP = 200
VERSIONED_TAIL_CAP = 2000
GENERIC_TAIL_CAP = 500


class EmptyAnimationTable(Exception):
    """A complete structural walk landed on a zero animation count.

    Ends the cascade for the file; later strategies are not tried.
    """


def clamp_duration(value: float, ceiling: float) -> float:
    if math.isnan(value) or value < 0.0 or value > ceiling:
        return DEFAULT_DURATION
    return value


def skip_versioned_timelines(cur: SkelCursor) -> None:
    if cur.remaining() >= 4:
        slots = read_count(cur, "timeline slot", TIMELINE_WINDOW)
        for _ in range(slots):
            cur.s32()  # slot index
            timelines = read_count(cur, "timeline", TIMELINE_WINDOW)
            for _ in range(timelines):
                cur.u8()  # timeline type
                cur.skip_capped(TIMELINE_CAP)
    # remaining sections (bones, deform, draw order, events) in one chunk
    cur.skip_capped(VERSIONED_TAIL_CAP)


def skip_generic_timelines(cur: SkelCursor) -> None:
    cur.skip_capped(GENERIC_TAIL_CAP)


def read_animation_table(
    cur: SkelCursor,
    *,
    ceiling: float,
    skip_timelines: Callable[[SkelCursor], None],
    reporter: Optional[Reporter] = None,
) -> List[AnimationRecord]:
    count = read_count(cur, "animation", ANIMATION_WINDOW)
    if reporter:
        reporter.debug(f"Found {count} animations at 0x{cur.tell() - 4:X}")

    records: List[AnimationRecord] = []
    for i in range(count):
        if cur.remaining() == 0:
            raise BufferUnderrun(f"Unexpected end of buffer while reading animation {i}")
        name = cur.read_string()
        if name is None:
            raise NameDecodeFailure(f"Could not read animation name for animation {i} at 0x{cur.tell():X}")

        duration = DEFAULT_DURATION
        if cur.remaining() >= 4:
            raw = cur.f32()
            duration = clamp_duration(raw, ceiling)
            if reporter and duration != raw:
                reporter.debug(f"Suspicious duration for animation {name}: {raw}, using default")

        if is_valid_animation_name(name):
            records.append(AnimationRecord(name, duration))
        elif reporter:
            reporter.debug(f"Dropping implausible animation name {name!r}")

        try:
            skip_timelines(cur)
        except SkelDecodeError as e:
            if reporter:
                reporter.warn(f"Couldn't skip animation data for {name}: {e}")
            break
    return records


def decode_versioned(data: bytes, reporter: Optional[Reporter] = None) -> List[AnimationRecord]:
    """Decode using the version-tagged (3.8.99) layout, resynchronizing if the walk fails."""
    cur = SkelCursor(data)
    if cur.remaining() < MIN_FILE_SIZE:
        raise BufferUnderrun("File too short to be a valid skeleton")

    version = read_preamble(cur, versioned=True)
    if reporter:
        reporter.debug(f"File version: {version}")
        if version != VERSIONED_TAG:
            reporter.debug(f"Version is not {VERSIONED_TAG}, still trying the versioned layout")

    walked = locate_versioned_animations(cur, reporter)
    # a zero count after a full walk is the file's real answer
    if walked and cur.remaining() >= 4 and struct.unpack_from("<i", data, cur.tell())[0] == 0:
        raise EmptyAnimationTable("Skeleton declares no animations")
    return read_animation_table(
        cur,
        ceiling=VERSIONED_DURATION_CEILING,
        skip_timelines=skip_versioned_timelines,
        reporter=reporter,
    )


def decode_generic(data: bytes, reporter: Optional[Reporter] = None) -> List[AnimationRecord]:
    """Decode with the coarse layout: probe near the header for the animation count."""
    cur = SkelCursor(data)
    if cur.remaining() < MIN_FILE_SIZE:
        raise BufferUnderrun("File too short to be a valid skeleton")

    read_preamble(cur, versioned=False)
    locate_generic_animations(cur)
    return read_animation_table(
        cur,
        ceiling=GENERIC_DURATION_CEILING,
        skip_timelines=skip_generic_timelines,
        reporter=reporter,
    )
