"""Round-trip tests through the grid reader."""

import pytest

from qrforge import DecodeError, decode, encode, read_grid
from qrforge.codewords import build_codewords, codewords_to_bits
from qrforge.masking import choose_best_mask
from qrforge.matrix import QRMatrix
from qrforge.segments import int_to_bits


@pytest.mark.parametrize("payload", [
    "0123456789",
    "HELLO WORLD",
    "Hello, World! (punctuation: ;'\"[]{}) #1?",
    "abc123456789012",
    "héllo wörld ✓",
    "",
])
def test_round_trip_every_mode(payload):
    """Decoding the encoded grid returns the original text."""
    assert decode(encode(payload, "M")) == payload


@pytest.mark.parametrize("level", ['L', 'M', 'Q', 'H'])
def test_round_trip_every_level(level):
    """Format information carries the level and mask."""
    grid = encode("https://example.com/path?x=1&y=2", level)
    symbol = read_grid(grid)
    assert symbol.ec_level == level
    assert symbol.mask == grid.mask
    assert symbol.version == grid.version
    assert symbol.text() == "https://example.com/path?x=1&y=2"


def test_round_trip_multi_block_with_version_information():
    """Versions with several blocks and version information decode."""
    payload = "Lorem ipsum dolor sit amet, 0123456789 " * 12
    grid = encode(payload, "Q")
    assert grid.version >= 7
    assert decode(grid) == payload


def test_round_trip_bytes_payload():
    """Arbitrary bytes come back unchanged."""
    data = bytes(range(256))
    assert read_grid(encode(data, "L")).data == data


def test_read_plain_rows():
    """Plain 0/1 rows are accepted as well as Grid objects."""
    grid = encode("ROWS", "L")
    assert decode(grid.to_list()) == "ROWS"


def test_flipped_data_module_fails_block_check():
    """A single damaged data module is detected."""
    grid = encode("DAMAGE", "L")
    rows = grid.to_list()
    r, c = QRMatrix(grid.version).data_positions()[0]
    rows[r][c] ^= 1
    with pytest.raises(DecodeError):
        read_grid(rows)


def test_format_bit_errors_corrected():
    """One flipped format bit in each copy is tolerated."""
    grid = encode("FORMAT", "H")
    rows = grid.to_list()
    rows[8][0] ^= 1
    rows[grid.side_length - 1][8] ^= 1
    assert decode(rows) == "FORMAT"


def test_wrong_size_rejected():
    """Only 4v+17 square grids are symbols."""
    with pytest.raises(DecodeError):
        read_grid([[0] * 22 for _ in range(22)])


def symbol_from_bits(bits, version=1, level='M'):
    qr = QRMatrix(version)
    qr.place_data(codewords_to_bits(build_codewords(bits, version, level), version))
    return choose_best_mask(qr, level).modules


@pytest.mark.parametrize("bits", [
    # alphanumeric pair value past 44 * 45 + 44
    int_to_bits(0b0010, 4) + int_to_bits(2, 9) + int_to_bits(2047, 11),
    # single alphanumeric character past 44
    int_to_bits(0b0010, 4) + int_to_bits(1, 9) + int_to_bits(50, 6),
    # three-digit numeric group above 999
    int_to_bits(0b0001, 4) + int_to_bits(3, 10) + int_to_bits(1000, 10),
])
def test_out_of_range_segment_values_rejected(bits):
    """Well-formed blocks carrying impossible character values fail to decode."""
    with pytest.raises(DecodeError):
        read_grid(symbol_from_bits(bits))
