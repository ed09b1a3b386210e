"""Unit tests for function patterns, format/version information and placement."""

import pytest

from qrforge.errors import InternalConsistencyError
from qrforge.matrix import (
    QRMatrix,
    bch_encode,
    draw_format_bits,
    format_bits_to_list,
    format_positions,
    get_format_string,
    valid_format_strings,
    version_bits,
)


def test_format_strings_known_values():
    """Published format strings for L/mask 0, M/mask 0 and L/mask 4."""
    assert get_format_string('L', 0) == 0b111011111000100
    assert get_format_string('M', 0) == 0b101010000010010
    assert get_format_string('L', 4) == 0b110011000101111


def test_format_strings_are_distinct_and_far_apart():
    """All 32 codes differ pairwise in at least 7 bits."""
    codes = [code for code, _, _ in valid_format_strings()]
    assert len(set(codes)) == 32
    for i, a in enumerate(codes):
        for b in codes[i + 1:]:
            assert bin(a ^ b).count('1') >= 7


def test_bch_remainder_divides():
    """Encoded value has the data in the top 5 bits."""
    assert bch_encode(0b00101) >> 10 == 0b00101


def test_version_information_known_value():
    """Version 7 information is 000111110010010100."""
    assert version_bits(7) == 0b000111110010010100


def test_finder_separator_and_timing_version_1():
    """Spot-check the fixed patterns of a 21x21 symbol."""
    qr = QRMatrix(1)
    m = qr.matrix
    # Finder: dark border, light ring, dark core
    assert m[0][0] == 1 and m[0][6] == 1 and m[6][0] == 1
    assert m[1][1] == 0 and m[5][5] == 0
    assert m[3][3] == 1 and m[2][4] == 1
    assert m[0][20] == 1 and m[20][0] == 1
    # Separators
    assert all(m[7][c] == 0 for c in range(8))
    assert all(m[r][13] == 0 for r in range(8))
    # Timing row and column
    assert [m[6][c] for c in range(8, 13)] == [1, 0, 1, 0, 1]
    assert [m[r][6] for r in range(8, 13)] == [1, 0, 1, 0, 1]
    # Dark module
    assert m[13][8] == 1
    assert qr.is_function[13][8]


def test_alignment_pattern_version_2():
    """Single alignment pattern centred at (18, 18)."""
    qr = QRMatrix(2)
    m = qr.matrix
    assert m[18][18] == 1
    assert m[17][18] == 0 and m[19][19] == 0
    assert m[16][16] == 1 and m[20][20] == 1
    assert qr.is_function[16][20]


def test_version_information_drawn_in_both_corners():
    """Both 6x3 blocks carry the same 18 bits from version 7 up."""
    qr = QRMatrix(7)
    bits = version_bits(7)
    for i in range(18):
        bit = (bits >> i) & 1
        a, b = qr.size - 11 + i % 3, i // 3
        assert qr.matrix[b][a] == bit
        assert qr.matrix[a][b] == bit
        assert qr.is_function[b][a] and qr.is_function[a][b]


def test_no_version_information_below_7():
    """Version 6 leaves the version areas for data."""
    qr = QRMatrix(6)
    assert not qr.is_function[0][qr.size - 11]


def test_format_positions_are_reserved_and_disjoint():
    """Two copies of 15 cells, all reserved, none shared."""
    qr = QRMatrix(3)
    primary, secondary = format_positions(qr.size)
    assert len(primary) == len(secondary) == 15
    assert not set(primary) & set(secondary)
    for (r, c) in primary + secondary:
        assert qr.is_function[r][c]


def test_draw_format_bits_writes_both_copies():
    """Both copies read back to the same 15 bits."""
    qr = QRMatrix(1)
    modules = [[0] * qr.size for _ in range(qr.size)]
    draw_format_bits(modules, 'Q', 5)
    expected = format_bits_to_list(get_format_string('Q', 5))
    for positions in format_positions(qr.size):
        assert [modules[r][c] for (r, c) in positions] == expected


def test_data_positions_zigzag_start():
    """Placement starts bottom-right and moves up in column pairs."""
    positions = QRMatrix(1).data_positions()
    assert positions[:4] == [(20, 20), (20, 19), (19, 20), (19, 19)]
    assert all(c != 6 for (_, c) in positions)


def test_place_data_requires_exact_bit_count():
    """Too few or too many bits is an internal consistency error."""
    qr = QRMatrix(1)
    with pytest.raises(InternalConsistencyError):
        qr.place_data([0] * 207)
    with pytest.raises(InternalConsistencyError):
        qr.place_data([0] * 209)
    assert qr.place_data([1] * 208) == 208
    assert qr.matrix[20][20] == 1
