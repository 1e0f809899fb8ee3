"""Vertical Interval Timecode (VITC) data generation."""

from __future__ import annotations

from enum import Enum

#: Number of bits in one VITC data line, including the CRC.
BIT_COUNT = 90

#: Size of the packed VITC buffer in bytes.
DATA_BYTES = 12


class Raster(Enum):
    """Supported video rasters, by line count."""

    R625 = 625
    R525 = 525


_FIELD_LINES = {
    Raster.R625: (19, 332),
    Raster.R525: (14, 277),
}

# Bit rate as a multiple of the line frequency. 625-line VITC is specified at
# Fh x 116, other specs use 115; both are within the ±2% tolerance.
_LINE_RATE_MULTIPLE = {
    Raster.R625: 116,
    Raster.R525: 115,
}


def pack_bits(data: bytearray, offset: int, bits: int, nbits: int) -> int:
    """Write the low `nbits` of `bits` into `data`, LSB first, starting at bit `offset`.

    Returns the bit offset following the last written bit.
    """
    for _ in range(nbits):
        mask = 1 << (offset & 7)
        if bits & 1:
            data[offset >> 3] |= mask
        else:
            data[offset >> 3] &= ~mask & 0xFF
        offset += 1
        bits >>= 1
    return offset


def _trunc_div(a: int, b: int) -> int:
    q = abs(a) // abs(b)
    return q if (a >= 0) == (b >= 0) else -q


class VitcEncoder:
    """Builds VITC data lines for a raster and frame rate."""

    def __init__(self, raster: Raster | int, frame_rate) -> None:
        try:
            self.raster = Raster(raster)
        except ValueError:
            raise ValueError("vitc: Unsupported video mode") from None

        self.field_lines = _FIELD_LINES[self.raster]
        self.line_rate_multiple = _LINE_RATE_MULTIPLE[self.raster]

        num, den = frame_rate.numerator, frame_rate.denominator
        if 0 < num <= 30 and den == 1:
            self.fps = num
            self.frame_drop = False
        elif num == 30000 and den == 1001:
            self.fps = 30
            self.frame_drop = True
        else:
            raise ValueError(f"vitc: Unsupported frame rate {num}/{den}")

    def lines(self) -> tuple[int, int, int, int]:
        """The four lines per frame that carry VITC."""
        first, second = self.field_lines
        return (first, first + 2, second, second + 2)

    def timecode(self, frame: int, second_field: bool) -> int:
        """The 32-bit BCD timecode word for a frame number and field."""
        fn = frame
        if self.frame_drop:
            # Skip frame numbers to keep 29.97 fps aligned with wall time
            fn += (fn // 17982) * 18
            fn += _trunc_div(fn % 18000 - 2, 1798) * 2

        field = 1 if second_field else 0

        tc = (fn % self.fps % 10) << 0
        tc |= (fn % self.fps // 10) << 4
        tc |= (1 if self.frame_drop else 0) << 6
        tc |= 0 << 7  # colour framing

        fn //= self.fps
        tc |= (fn % 10) << 8
        tc |= (fn // 10 % 6) << 12
        if self.raster is not Raster.R625:
            tc |= field << 15

        fn //= 60
        tc |= (fn % 10) << 16
        tc |= (fn // 10 % 6) << 20

        fn //= 60
        tc |= (fn % 24 % 10) << 24
        tc |= (fn % 24 // 10) << 28
        if self.raster is Raster.R625:
            tc |= field << 31

        return tc

    def encode(self, frame: int, line: int) -> bytes | None:
        """Packed VITC bits for `line` of `frame`, or None if the line carries none."""
        if line not in self.lines():
            return None

        timecode = self.timecode(frame, line >= self.field_lines[1])
        userdata = 0x00

        data = bytearray(DATA_BYTES)
        offset = 0
        for i in range(8):
            offset = pack_bits(data, offset, 0x01, 2)
            offset = pack_bits(data, offset, timecode >> (i * 4), 4)
            offset = pack_bits(data, offset, userdata >> (i * 4), 4)

        offset = pack_bits(data, offset, 0x01, 2)
        pack_bits(data, offset, 0, 8)

        crc = 0
        for byte in data[:11]:
            crc ^= byte
        crc = ((crc << 6) | (crc >> 2)) & 0xFF
        pack_bits(data, offset, crc, 8)

        return bytes(data)