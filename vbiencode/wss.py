"""Widescreen Signalling (WSS) data generation for line 23 of 625-line video."""

from __future__ import annotations

from dataclasses import dataclass
from fractions import Fraction

#: Line on which WSS is carried.
WSS_LINE = 23

#: Number of bits in a complete WSS line (run-in, start code and 14 data bits).
BIT_COUNT = 137

#: Length of the packed WSS bit buffer in bytes.
VBI_BYTES = 18

#: Bit offset of the first data group (after the 29-bit run-in and 24-bit start code).
DATA_OFFSET = 29 + 24

AUTO_CODE = 0xFF

_HEADER = bytes((0xF8, 0xE3, 0x8E, 0x38, 0xF1, 0xE0, 0xF8))


@dataclass(frozen=True)
class WssMode:
    """A named aspect-ratio mode with its group 1 code and display aspects."""

    id: str
    code: int
    aspects: tuple[Fraction, ...]


_4_3 = Fraction(4, 3)
_16_9 = Fraction(16, 9)

MODES: tuple[WssMode, ...] = (
    WssMode("4:3", 0x08 | 0x00, (_4_3,)),
    WssMode("14:9-letterbox", 0x00 | 0x01, (_4_3,)),
    WssMode("14:9-top", 0x00 | 0x02, (_4_3,)),
    WssMode("16:9-letterbox", 0x08 | 0x03, (_4_3,)),
    WssMode("16:9-top", 0x00 | 0x04, (_4_3,)),
    WssMode("16:9+-letterbox", 0x08 | 0x05, (_4_3,)),
    WssMode("14:9-window", 0x08 | 0x06, (_4_3,)),
    WssMode("16:9", 0x00 | 0x07, (_16_9,)),
    WssMode("auto", AUTO_CODE, (_4_3, _16_9)),
)


def find_mode(name: str) -> WssMode:
    """Look up a WSS mode by name, ignoring case."""
    lowered = name.lower()
    for mode in MODES:
        if mode.id.lower() == lowered:
            return mode
    raise ValueError(f"wss: Unrecognised mode '{name}'.")


def group_bits(vbi: bytearray, code: int, offset: int, length: int) -> int:
    """Write `length` biphase-coded bits of `code` into `vbi`, MSB first.

    Each data bit becomes six line bits: three of its value followed by three
    of its inverse. Returns the bit offset following the last written bit.
    """
    code &= 0xFF
    for _ in range(length):
        for i in range(6):
            if i == 3:
                code ^= 1
            shift = 7 - (offset % 8)
            index = offset // 8
            vbi[index] = (vbi[index] & ~(1 << shift) & 0xFF) | ((code & 1) << shift)
            offset += 1
        code >>= 1
    return offset


class WssEncoder:
    """Builds the WSS bit stream for one mode."""

    def __init__(self, mode: str, active_width: int, active_lines: int) -> None:
        self.mode = find_mode(mode)
        self.code = self.mode.code
        # Threshold pixel aspect ratio for automatic 4:3 / 16:9 selection
        self.auto_threshold = Fraction(14, 9) / Fraction(active_width, active_lines)

        vbi = bytearray(VBI_BYTES)
        vbi[: len(_HEADER)] = _HEADER
        offset = group_bits(vbi, self.code, DATA_OFFSET, 4)  # Aspect ratio
        offset = group_bits(vbi, 0x00, offset, 4)  # Enhanced services
        offset = group_bits(vbi, 0x00, offset, 3)  # Subtitles
        group_bits(vbi, 0x00, offset, 3)  # Reserved
        self._vbi = vbi

    def frame_aspects(self) -> tuple[Fraction, ...]:
        """Display aspect ratios the video frame should be prepared for."""
        return self.mode.aspects

    def vbi_for(self, pixel_aspect_ratio: Fraction | float | None = None) -> bytes:
        """Return the packed WSS bits for a frame.

        In auto mode the aspect code is chosen from the source frame's pixel
        aspect ratio; otherwise the argument is ignored.
        """
        if self.code == AUTO_CODE:
            if pixel_aspect_ratio is None:
                raise ValueError("wss: auto mode needs the frame's pixel aspect ratio")
            code = 0x08 if pixel_aspect_ratio <= self.auto_threshold else 0x07
            group_bits(self._vbi, code, DATA_OFFSET, 4)
        return bytes(self._vbi)