"""Unit tests for padding, block splitting and interleaving."""

import pytest

from qrforge.codewords import (
    add_error_correction,
    bits_to_bytes,
    build_codewords,
    codewords_to_bits,
    interleave,
    pad_codewords,
    split_blocks,
)
from qrforge.errors import CapacityError
from qrforge.segments import make_segments
from qrforge.tables import block_layout, num_raw_data_modules, total_codewords

HELLO_WORLD_1M_DATA = [32, 91, 11, 120, 209, 114, 220, 77, 67, 64,
                       236, 17, 236, 17, 236, 17]


def test_bits_to_bytes_zero_fills_last_byte():
    """A partial byte is completed with zeros."""
    assert bits_to_bytes([1, 0, 1]) == [0b10100000]
    assert bits_to_bytes([1] * 8) == [255]


def test_hello_world_padding():
    """Terminator, byte fill and 0xEC/0x11 pads reach 16 codewords."""
    bits = make_segments("HELLO WORLD", 1)[0].bits(1)
    assert pad_codewords(bits, 16) == HELLO_WORLD_1M_DATA


def test_terminator_shortened_near_capacity():
    """Only the bits left before capacity are used for the terminator."""
    bits = [1] * 126
    assert pad_codewords(bits, 16)[-1] == 0b11111100


def test_pad_over_capacity_raises():
    """More data bits than capacity is a capacity error."""
    with pytest.raises(CapacityError):
        pad_codewords([0] * 129, 16)


def test_split_blocks_short_first():
    """5-Q: two 15-codeword blocks then two 16-codeword blocks."""
    data = list(range(62))
    blocks = split_blocks(data, block_layout(5, 'Q'))
    assert [len(b) for b in blocks] == [15, 15, 16, 16]
    assert blocks[2][0] == 30
    assert sum(blocks, []) == data


def test_interleave_round_robin():
    """Codeword i of each block in turn; longer blocks finish last."""
    assert interleave([[1, 2], [3, 4], [5, 6, 7]]) == [1, 3, 5, 2, 4, 6, 7]


def test_single_block_is_data_then_ec():
    """Version 1 has one block, so no reordering happens."""
    final = add_error_correction(HELLO_WORLD_1M_DATA, 1, 'M')
    assert final == HELLO_WORLD_1M_DATA + [196, 35, 39, 119, 235, 215, 231, 226, 93, 23]


def test_multi_block_interleave_order():
    """Data codewords come first, round-robin across the four blocks."""
    data = list(range(62))
    final = add_error_correction(data, 5, 'Q')
    assert len(final) == total_codewords(5)
    assert final[:4] == [0, 15, 30, 46]
    # The extra codeword of the long blocks comes after all short blocks end
    assert final[60:62] == [45, 61]


def test_codewords_to_bits_fills_every_data_module():
    """Final bit count equals the free module count, remainder included."""
    for version in (1, 2, 7, 14, 40):
        codewords = build_codewords([], version, 'H')
        assert len(codewords) == total_codewords(version)
        assert len(codewords_to_bits(codewords, version)) == num_raw_data_modules(version)
