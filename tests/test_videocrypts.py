import pytest

from vbiencode.videocrypts import (
    CONDITIONAL_BLOCKS,
    SEQUENCE,
    VcsBlock,
    VcsEncoder,
    encode_vbi,
    interleave,
    reverse_bits,
    swap_nibbles,
)


def test_reverse_bits_values():
    assert reverse_bits(0x01) == 0x80
    assert reverse_bits(0xF0) == 0x0F


def test_reverse_bits_is_involution():
    assert all(reverse_bits(reverse_bits(b)) == b for b in range(256))


def test_swap_nibbles_values_and_involution():
    assert swap_nibbles(0x81) == 0x18
    assert all(swap_nibbles(swap_nibbles(b)) == b for b in range(256))


def test_interleave_keeps_zero_and_ones():
    assert interleave(bytes(40)) == bytes(40)
    assert interleave(b"\xff" * 40) == b"\xff" * 40


def test_interleave_transposes_single_bit():
    frame = bytearray(40)
    frame[1] = 0x80
    result = interleave(frame)
    assert result[0] == 0x02
    assert result[1:] == bytes(39)


def test_interleave_rejects_short_frame():
    with pytest.raises(ValueError):
        interleave(bytes(10))


def test_encode_vbi_length_and_header_sensitivity():
    first = encode_vbi(bytes(16), 0x81, 0)
    second = encode_vbi(bytes(16), 0x92, 0)
    assert len(first) == 40
    assert len(second) == 40
    assert first != second


def test_encode_vbi_rejects_wrong_length():
    with pytest.raises(ValueError):
        encode_vbi(bytes(15), 0, 0)


def test_unknown_mode_raises():
    with pytest.raises(ValueError):
        VcsEncoder("bogus")


def test_free_mode_first_frames():
    enc = VcsEncoder("free")
    assert enc.next_frame() == encode_vbi(bytes(16), SEQUENCE[0], 0)
    assert enc.next_frame() == encode_vbi(bytes(16), SEQUENCE[0], 1)
    # Third frame carries the second half with the mode byte
    assert enc.next_frame() == encode_vbi(bytes(16), swap_nibbles(SEQUENCE[0]), 0x11)


def test_free_mode_channel_byte_on_later_frames():
    enc = VcsEncoder("free")
    frames = [enc.next_frame() for _ in range(11)]
    assert frames[10] == encode_vbi(bytes(16), swap_nibbles(SEQUENCE[2]), 0x00)


def test_message_checksum_sums_to_zero():
    enc = VcsEncoder("conditional")
    for _ in range(64):
        enc.next_frame()
        assert sum(enc.message) % 256 == 0
        assert len(enc.message) == 32


def test_message_taken_from_block():
    enc = VcsEncoder("conditional")
    enc.next_frame()
    assert enc.message[:31] == CONDITIONAL_BLOCKS[0].messages[0][:31]


def test_block_advances_every_32_frames():
    enc = VcsEncoder("conditional")
    for _ in range(31):
        enc.next_frame()
    assert enc.block_num == 0
    enc.next_frame()
    assert enc.block_num == 1
    for _ in range(64):
        enc.next_frame()
    assert enc.block_num == 0


def test_free_mode_single_block():
    enc = VcsEncoder("free")
    for _ in range(100):
        enc.next_frame()
    assert enc.block_num == 0
    assert enc.counter == 100


def test_counter_wraps_at_256():
    enc = VcsEncoder("free")
    for _ in range(256):
        enc.next_frame()
    assert enc.counter == 0


def test_line_data_covers_frame():
    enc = VcsEncoder("conditional")
    vbi = enc.next_frame()
    lines = [24, 25, 26, 27, 336, 337, 338, 339]
    joined = b"".join(enc.line_data(n) for n in lines)
    assert joined == vbi
    assert all(len(enc.line_data(n)) == 5 for n in lines)


def test_line_data_none_outside_vbi():
    enc = VcsEncoder("free")
    enc.next_frame()
    assert enc.line_data(23) is None
    assert enc.line_data(28) is None
    assert enc.line_data(340) is None


def test_block_pads_messages():
    block = VcsBlock(0x21, 0x05, 0, tuple(b"\x01" for _ in range(8)))
    assert all(len(m) == 32 for m in block.messages)
    assert block.messages[0][0] == 1


def test_block_requires_eight_messages():
    with pytest.raises(ValueError):
        VcsBlock(0x21, 0x05, 0, (b"",))