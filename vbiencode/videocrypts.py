"""Videocrypt S VBI data generation.

The encoder emits the VBI packets that carry the Videocrypt S control
messages. The line-shuffling sequence is not part of this module.
"""

from __future__ import annotations

from dataclasses import dataclass, field

SAMPLE_RATE = 17734475
WIDTH = 1135
VBI_LEFT = 211
VBI_FIELD_1_START = 24
VBI_FIELD_2_START = 336
VBI_LINES_PER_FIELD = 4
VBI_LINES_PER_FRAME = VBI_LINES_PER_FIELD * 2
VBI_SAMPLES_PER_BIT = 22
VBI_BITS_PER_LINE = 40
VBI_BYTES_PER_LINE = VBI_BITS_PER_LINE // 8
PACKET_LENGTH = 32
DELAY_LINES = 125

#: Size of one encoded VBI frame in bytes.
VBI_FRAME_BYTES = VBI_BYTES_PER_LINE * VBI_LINES_PER_FRAME

# Header synchronisation sequence
SEQUENCE = bytes((0x81, 0x92, 0xA3, 0xB4, 0xC5, 0xD6, 0xE7, 0xF0))

# Hamming codes for each nibble value
HAMMING = bytes((
    0x15, 0x02, 0x49, 0x5E, 0x64, 0x73, 0x38, 0x2F,
    0xD0, 0xC7, 0x8C, 0x9B, 0xA1, 0xB6, 0xFD, 0xEA,
))

_INTERLEAVE_OFFSETS = (0, 6, 12, 20, 26, 32)


@dataclass(frozen=True)
class VcsBlock:
    """A group of eight control messages sent over 32 frames.

    Mode byte: 0x01 clear, 0x11 free access scrambled, 0x21 conditional
    access scrambled. The LSB of the channel byte enables audio inversion.
    """

    mode: int
    channel: int
    codeword: int = 0
    messages: tuple[bytes, ...] = field(
        default_factory=lambda: tuple(bytes(PACKET_LENGTH) for _ in range(8))
    )

    def __post_init__(self) -> None:
        padded = tuple(
            bytes(m).ljust(PACKET_LENGTH, b"\x00")[:PACKET_LENGTH] for m in self.messages
        )
        if len(padded) != 8:
            raise ValueError("a Videocrypt S block holds exactly eight messages")
        object.__setattr__(self, "messages", padded)


def _msgs(*rows: str) -> tuple[bytes, ...]:
    return tuple(bytes.fromhex(row) for row in rows)


FREE_ACCESS_BLOCKS: tuple[VcsBlock, ...] = (VcsBlock(0x11, 0x00, 0),)

# Sampled from a conditional-access broadcast
CONDITIONAL_BLOCKS: tuple[VcsBlock, ...] = (
    VcsBlock(0x21, 0x05, 0, _msgs(
        "E1 3A A9 00 01 00 40 CC 52 DD F7 87 88 89 8A 8B 8D 8F 90 91 92 93 94 95 96 97 98 C1 84 96 CD",
        "E1 3A 28 00 01 00 40 31 03 27 6C 3E 3F 41 42 43 44 45 47 48 49 4A 4B 4C 4D 4E 4F D3 00 C4 D2",
        "E1 3A A4 00 01 00 40 72 4D 83 F3 51 52 53 54 55 56 58 59 5A 5B 5C 5D 5E 5F 60 61 6B 76 AD 86",
        "E1 3A A5 00 01 00 40 04 81 FC F1 63 64 67 68 69 6A 6B 6C 6D 6E 6F 70 71 72 73 74 6B C7 C1 36",
        "F9 3A A1 25 07 20 20 02 4C 7A 8E CA 7D 00 00 00 00 00 00 00 00 00 00 00 00 00 00 80 97 39 DB",
        "F9 3A A1 25 07 20 20 02 4C 7A 8E CA 7D 00 00 00 00 00 00 00 00 00 00 00 00 00 00 80 97 39 DB",
        "E1 3A 3F 00 01 00 40 8E ED 2B A5 75 76 77 78 79 7A 7B 7C 7D 7E 7F 80 82 83 85 86 15 74 FD 97",
        "21 00 78 01 18 20 20 20 20 20 20 20 48 41 43 4B 54 56 20 20 20 20 20 20 20 05 05 05 05 95 37",
    )),
    VcsBlock(0x21, 0x05, 0, _msgs(
        "E1 3A AC 00 01 00 40 82 EE 46 F0 D4 D5 D7 D8 D9 DA DB DC DD DE E0 E1 E2 E3 E4 E6 88 FF F6 C6",
        "E1 3A AB 00 01 00 40 30 F9 0C 32 99 9A 9B 9C 9D 9E 9F A0 A1 A2 A3 A4 A5 A7 A8 A9 D9 89 48 B2",
        "E1 3A 33 00 01 00 40 B6 7D 8A A6 AA AB AC AD AE AF B0 B1 B2 C2 CC CC A8 AA AB AC 5E 95 C4 18",
        "E1 3A 2A 00 01 00 40 15 AB 58 B4 AD AE AF B0 B1 B6 B7 B8 B9 BA BB BC BE BF C0 C1 21 C4 B2 4F",
        "F9 3A A1 25 07 20 20 02 4C 72 B1 F3 59 00 00 00 00 00 00 00 00 00 00 00 00 00 00 40 50 D6 D2",
        "F9 3A A1 25 07 20 20 02 4C 72 B1 F3 59 00 00 00 00 00 00 00 00 00 00 00 00 00 00 40 50 D6 D2",
        "E1 3A B5 00 01 00 40 23 BE 75 E7 C2 C3 C4 C5 C7 C8 C9 CA CB CC CD CE D0 D1 D2 D3 E3 66 51 8D",
        "21 00 18 01 01 04 00 00 00 00 00 00 00 00 00 00 00 00 00 00 00 00 00 00 00 00 00 00 00 DD 4F",
    )),
    VcsBlock(0x21, 0x05, 0, _msgs(
        "E1 3A B0 00 01 00 40 49 BA 1D E4 2E 2F 30 31 32 33 35 36 37 38 39 0E 2B 2C 2D 2F 29 9F 54 60",
        "E1 3A 22 00 01 00 40 85 0C 99 B1 E7 E8 E9 EA EB EC ED EE EF F0 F1 F2 F3 F4 F6 F7 61 0E D5 0F",
        "E1 3A AB 00 01 00 40 30 F9 0C 34 F8 F9 FA FB FC FD FF 00 01 02 03 04 05 07 08 0A B9 E5 AB 61",
        "E1 3A A1 00 01 00 40 BC B2 1E F3 0B 0D 0E 0F 10 11 13 14 15 16 17 18 19 1A 1B 1C 00 98 89 9C",
        "F9 3A A1 25 07 20 20 02 4C C7 D3 1E 49 00 00 00 00 00 00 00 00 00 00 00 00 00 00 F9 85 B1 15",
        "F9 3A A1 25 07 20 20 02 4C C7 D3 1E 49 00 00 00 00 00 00 00 00 00 00 00 00 00 00 F9 85 B1 15",
        "E1 3A AB 00 01 00 40 30 F9 0C 37 1D 1E 1F 20 21 22 24 25 26 27 28 29 2A 2B 2C 2D 17 F5 93 CA",
        "21 00 00 00 00 00 00 00 00 00 00 00 00 00 00 00 00 00 00 00 00 00 00 00 00 00 00 00 00 20 2F",
    )),
)

_MODE_BLOCKS = {
    "free": FREE_ACCESS_BLOCKS,
    "conditional": CONDITIONAL_BLOCKS,
}


def reverse_bits(b: int) -> int:
    """Reverse the bit order of an 8-bit value."""
    b &= 0xFF
    b = (b & 0xF0) >> 4 | (b & 0x0F) << 4
    b = (b & 0xCC) >> 2 | (b & 0x33) << 2
    b = (b & 0xAA) >> 1 | (b & 0x55) << 1
    return b & 0xFF


def swap_nibbles(a: int) -> int:
    """Swap the high and low nibbles of a byte."""
    a &= 0xFF
    return ((a >> 4) | (a << 4)) & 0xFF


def interleave(frame: bytes | bytearray) -> bytes:
    """Apply the VBI frame interleaving to a 40-byte frame.

    Six overlapping 8-byte blocks are processed in turn: the first and last
    byte of each are bit-reversed, then the 8x8 bit matrix is transposed.
    """
    out = bytearray(frame)
    if len(out) < VBI_FRAME_BYTES:
        raise ValueError(f"interleave needs {VBI_FRAME_BYTES} bytes, got {len(out)}")

    for start in _INTERLEAVE_OFFSETS:
        block = out[start:start + 8]
        block[0] = reverse_bits(block[0])
        block[7] = reverse_bits(block[7])
        out[start:start + 8] = bytes(
            sum(((byte >> (7 - i)) & 1) << j for j, byte in enumerate(block))
            for i in range(8)
        )
    return bytes(out)


def encode_vbi(data: bytes, a: int, b: int) -> bytes:
    """Encode 16 security bytes with header bytes `a` and `b` into a 40-byte VBI frame."""
    data = bytes(data)
    if len(data) != 16:
        raise ValueError(f"encode_vbi needs 16 data bytes, got {len(data)}")

    raw = bytearray()
    for header, half in ((a & 0xFF, data[:8]), (b & 0xFF, data[8:])):
        raw.append(header)
        raw += half
        raw.append((header + sum(half)) & 0xFF)

    coded = bytearray()
    for byte in raw:
        coded.append(HAMMING[byte >> 4])
        coded.append(HAMMING[byte & 0x0F])

    return interleave(coded)


class VcsEncoder:
    """Generates the per-frame Videocrypt S VBI packets."""

    def __init__(self, mode: str) -> None:
        try:
            self.blocks = _MODE_BLOCKS[mode]
        except KeyError:
            raise ValueError(f"Unrecognised Videocrypt S mode '{mode}'.") from None
        self.mode = mode
        self.counter = 0
        self.block_num = 0
        self.message = bytes(PACKET_LENGTH)
        self.vbi = bytes(VBI_FRAME_BYTES)

    @property
    def block(self) -> VcsBlock:
        """The block currently being transmitted."""
        return self.blocks[self.block_num]

    def next_frame(self) -> bytes:
        """Build the VBI data for the next frame and advance the frame counter."""
        block = self.block
        counter = self.counter
        seq = SEQUENCE[(counter >> 2) & 0x07]

        if counter & 3 == 0:
            # The active message changes every fourth frame
            body = block.messages[(counter >> 2) & 7][:PACKET_LENGTH - 1]
            self.message = body + bytes(((-sum(body)) & 0xFF,))

        if counter & 2 == 0:
            self.vbi = encode_vbi(self.message[:16], seq, counter & 0xFF)
        else:
            self.vbi = encode_vbi(
                self.message[16:],
                swap_nibbles(seq),
                block.channel if counter & 0x08 else block.mode,
            )

        self.counter = (counter + 1) & 0xFF

        # Every 32 frames move on to the next block
        if self.counter & 0x1F == 0:
            self.block_num = (self.block_num + 1) % len(self.blocks)

        return self.vbi

    def line_data(self, line: int) -> bytes | None:
        """The VBI bytes carried on `line` of the current frame, or None."""
        if VBI_FIELD_1_START <= line < VBI_FIELD_1_START + VBI_LINES_PER_FIELD:
            index = line - VBI_FIELD_1_START
        elif VBI_FIELD_2_START <= line < VBI_FIELD_2_START + VBI_LINES_PER_FIELD:
            index = line - VBI_FIELD_2_START + VBI_LINES_PER_FIELD
        else:
            return None
        start = index * VBI_BYTES_PER_LINE
        return self.vbi[start:start + VBI_BYTES_PER_LINE]