"""libskel.reader

Bounds-checked little-endian cursor over a skeleton file's bytes.

Every structured strategy builds its own cursor over the same immutable
buffer, so a failed attempt never leaves state behind for the next one.

String fields in the .skel layout are stored as:
  int32 length   (byte count including the trailing terminator)
  length-1 bytes of UTF-8 text
  1 terminator byte
"""

from __future__ import annotations

import struct
from dataclasses import dataclass
from typing import Optional, Tuple

MAX_STRING_LENGTH = 10000
STRING_PROBE_BYTES = 20

# tab, LF, CR and NUL are tolerated inside the probe window
_PROBE_ALLOWED = frozenset((0x00, 0x09, 0x0A, 0x0D))


class SkelDecodeError(RuntimeError):
    pass


class BufferUnderrun(SkelDecodeError):
    pass


class ImplausibleCount(SkelDecodeError):
    def __init__(self, section: str, value: int, window: Tuple[int, int]):
        self.section = section
        self.value = value
        self.window = window
        super().__init__(f"Invalid {section} count: {value} (expected {window[0]}..{window[1]})")


class UnrecoverablePosition(SkelDecodeError):
    pass


class NameDecodeFailure(SkelDecodeError):
    pass


@dataclass
class SkelCursor:
    data: bytes
    ofs: int = 0

    def tell(self) -> int:
        return self.ofs

    def seek(self, ofs: int) -> None:
        if ofs < 0 or ofs > len(self.data):
            raise BufferUnderrun(f"Seek to {ofs} outside buffer of {len(self.data)} bytes")
        self.ofs = ofs

    def remaining(self) -> int:
        return len(self.data) - self.ofs

    def _require(self, n: int) -> None:
        if n > self.remaining():
            raise BufferUnderrun(f"Unexpected EOF at {self.ofs}, need {n}")

    def read(self, n: int) -> bytes:
        self._require(n)
        b = self.data[self.ofs : self.ofs + n]
        self.ofs += n
        return b

    def skip(self, n: int) -> None:
        self._require(n)
        self.ofs += n

    def skip_capped(self, n: int) -> int:
        """Skip up to ``n`` bytes, stopping at the end of the buffer."""
        step = min(n, self.remaining())
        self.ofs += step
        return step

    def u8(self) -> int:
        return self.read(1)[0]

    def s32(self) -> int:
        return struct.unpack("<i", self.read(4))[0]

    def f32(self) -> float:
        return struct.unpack("<f", self.read(4))[0]

    def read_string(self) -> Optional[str]:
        """Read a length-prefixed string, or return None and leave the cursor untouched."""
        start = self.ofs
        if self.remaining() < 4:
            return None
        length = self.s32()
        if length <= 0 or length > MAX_STRING_LENGTH or length > self.remaining() + 1:
            self.ofs = start
            return None

        # cheap "does this look like text" check before committing the read
        body = self.ofs
        for i in range(min(length - 1, STRING_PROBE_BYTES)):
            b = self.data[body + i]
            if b < 0x20 and b not in _PROBE_ALLOWED:
                self.ofs = start
                return None

        raw = self.data[body : body + length - 1]
        try:
            text = raw.decode("utf-8")
        except UnicodeDecodeError:
            self.ofs = start
            return None

        # the terminator may be missing when the string runs to end of buffer
        self.ofs = min(body + length, len(self.data))
        return text

    def skip_string(self) -> None:
        if self.remaining() < 4:
            return
        length = self.s32()
        if length <= 0:
            return
        if length > self.remaining():
            self.ofs = len(self.data)
            return
        self.ofs += length
