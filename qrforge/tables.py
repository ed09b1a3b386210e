"""
Static tables for QR Code versions 1-40.

All values come from ISO/IEC 18004 and are looked up exactly; nothing here is
interpolated. The tables are built at import time and never mutated.

References:
- https://www.thonky.com/qr-code-tutorial/error-correction-table
- https://www.thonky.com/qr-code-tutorial/alignment-pattern-locations
"""

from typing import Dict, List, NamedTuple, Tuple

from .errors import InvalidInputError

MIN_VERSION = 1
MAX_VERSION = 40

# Ordered from least to most redundancy
EC_LEVELS = ('L', 'M', 'Q', 'H')

# Mode indicators (4-bit values)
MODE_NUMERIC = 0b0001
MODE_ALPHANUMERIC = 0b0010
MODE_BYTE = 0b0100
MODE_TERMINATOR = 0b0000

MODE_NAMES = {
    MODE_NUMERIC: 'numeric',
    MODE_ALPHANUMERIC: 'alphanumeric',
    MODE_BYTE: 'byte',
}


#==============================================================================
# ERROR CORRECTION BLOCK TABLES
#==============================================================================

# Index 0 is unused so that tables can be indexed by version directly.
ECC_CODEWORDS_PER_BLOCK: Dict[str, Tuple[int, ...]] = {
    'L': (-1, 7, 10, 15, 20, 26, 18, 20, 24, 30, 18, 20, 24, 26, 30, 22, 24, 28, 30, 28, 28,
          28, 28, 30, 30, 26, 28, 30, 30, 30, 30, 30, 30, 30, 30, 30, 30, 30, 30, 30, 30),
    'M': (-1, 10, 16, 26, 18, 24, 16, 18, 22, 22, 26, 30, 22, 22, 24, 24, 28, 28, 26, 26, 26,
          26, 28, 28, 28, 28, 28, 28, 28, 28, 28, 28, 28, 28, 28, 28, 28, 28, 28, 28, 28),
    'Q': (-1, 13, 22, 18, 26, 18, 24, 18, 22, 20, 24, 28, 26, 24, 20, 30, 24, 28, 28, 26, 30,
          28, 30, 30, 30, 30, 28, 30, 30, 30, 30, 30, 30, 30, 30, 30, 30, 30, 30, 30, 30),
    'H': (-1, 17, 28, 22, 16, 22, 28, 26, 26, 24, 28, 24, 28, 22, 24, 24, 30, 28, 28, 26, 28,
          30, 24, 30, 30, 30, 30, 30, 30, 30, 30, 30, 30, 30, 30, 30, 30, 30, 30, 30, 30),
}

NUM_ERROR_CORRECTION_BLOCKS: Dict[str, Tuple[int, ...]] = {
    'L': (-1, 1, 1, 1, 1, 1, 2, 2, 2, 2, 4, 4, 4, 4, 4, 6, 6, 6, 6, 7, 8,
          8, 9, 9, 10, 12, 12, 12, 13, 14, 15, 16, 17, 18, 19, 19, 20, 21, 22, 24, 25),
    'M': (-1, 1, 1, 1, 2, 2, 4, 4, 4, 5, 5, 5, 8, 9, 9, 10, 10, 11, 13, 14, 16,
          17, 17, 18, 20, 21, 23, 25, 26, 28, 29, 31, 33, 35, 37, 38, 40, 43, 45, 47, 49),
    'Q': (-1, 1, 1, 2, 2, 4, 4, 6, 6, 8, 8, 8, 10, 12, 16, 12, 17, 16, 18, 21, 20,
          23, 23, 25, 27, 29, 34, 34, 35, 38, 40, 43, 45, 48, 51, 53, 56, 59, 62, 65, 68),
    'H': (-1, 1, 1, 2, 4, 4, 4, 5, 6, 8, 8, 11, 11, 16, 16, 18, 16, 19, 21, 25, 25,
          25, 34, 30, 32, 35, 37, 40, 42, 45, 48, 51, 54, 57, 60, 63, 66, 70, 74, 77, 81),
}


#==============================================================================
# ALIGNMENT PATTERN CENTRES
#==============================================================================

ALIGNMENT_POSITIONS: Dict[int, List[int]] = {
    1: [],
    2: [6, 18],
    3: [6, 22],
    4: [6, 26],
    5: [6, 30],
    6: [6, 34],
    7: [6, 22, 38],
    8: [6, 24, 42],
    9: [6, 26, 46],
    10: [6, 28, 50],
    11: [6, 30, 54],
    12: [6, 32, 58],
    13: [6, 34, 62],
    14: [6, 26, 46, 66],
    15: [6, 26, 48, 70],
    16: [6, 26, 50, 74],
    17: [6, 30, 54, 78],
    18: [6, 30, 56, 82],
    19: [6, 30, 58, 86],
    20: [6, 34, 62, 90],
    21: [6, 28, 50, 72, 94],
    22: [6, 26, 50, 74, 98],
    23: [6, 30, 54, 78, 102],
    24: [6, 28, 54, 80, 106],
    25: [6, 32, 58, 84, 110],
    26: [6, 30, 58, 86, 114],
    27: [6, 34, 62, 90, 118],
    28: [6, 26, 50, 74, 98, 122],
    29: [6, 30, 54, 78, 102, 126],
    30: [6, 26, 52, 78, 104, 130],
    31: [6, 30, 56, 82, 108, 134],
    32: [6, 34, 60, 86, 112, 138],
    33: [6, 30, 58, 86, 114, 142],
    34: [6, 34, 62, 90, 118, 146],
    35: [6, 30, 54, 78, 102, 126, 150],
    36: [6, 24, 50, 76, 102, 128, 154],
    37: [6, 28, 54, 80, 106, 132, 158],
    38: [6, 32, 58, 84, 110, 136, 162],
    39: [6, 26, 54, 82, 110, 138, 166],
    40: [6, 30, 58, 86, 114, 142, 170],
}


#==============================================================================
# CAPACITY LOOKUPS
#==============================================================================

class BlockLayout(NamedTuple):
    """How the codewords of one (version, level) pair are split into blocks."""
    ec_per_block: int
    num_short_blocks: int
    num_long_blocks: int
    short_block_data: int

    @property
    def num_blocks(self) -> int:
        return self.num_short_blocks + self.num_long_blocks

    @property
    def long_block_data(self) -> int:
        return self.short_block_data + 1

    @property
    def data_codewords(self) -> int:
        return (self.num_short_blocks * self.short_block_data +
                self.num_long_blocks * self.long_block_data)


def normalize_ec_level(ec_level) -> str:
    """Return the canonical one-letter level or raise InvalidInputError."""
    if isinstance(ec_level, str) and ec_level.upper() in EC_LEVELS:
        return ec_level.upper()
    raise InvalidInputError(f"Invalid error correction level: {ec_level!r}")


def check_version(version: int) -> int:
    if not isinstance(version, int) or not MIN_VERSION <= version <= MAX_VERSION:
        raise InvalidInputError(
            f"Version must be an integer in {MIN_VERSION}..{MAX_VERSION}, got {version!r}")
    return version


def symbol_size(version: int) -> int:
    """Modules per side."""
    return 4 * version + 17


def num_raw_data_modules(version: int) -> int:
    """
    Count the modules left for data and EC codewords once every function
    pattern (finders, timing, alignment, format and version areas) is drawn.
    """
    check_version(version)
    result = (16 * version + 128) * version + 64
    if version >= 2:
        num_align = version // 7 + 2
        result -= (25 * num_align - 10) * num_align - 55
        if version >= 7:
            result -= 36
    return result


def total_codewords(version: int) -> int:
    return num_raw_data_modules(version) // 8


def remainder_bits(version: int) -> int:
    """Light modules left over after the last whole codeword."""
    return num_raw_data_modules(version) % 8


def block_layout(version: int, ec_level: str) -> BlockLayout:
    check_version(version)
    ec_level = normalize_ec_level(ec_level)
    num_blocks = NUM_ERROR_CORRECTION_BLOCKS[ec_level][version]
    ec_per_block = ECC_CODEWORDS_PER_BLOCK[ec_level][version]
    total = total_codewords(version)
    # Long blocks hold one extra data codeword and follow the short ones
    num_long = total % num_blocks
    short_block_len = total // num_blocks
    return BlockLayout(
        ec_per_block=ec_per_block,
        num_short_blocks=num_blocks - num_long,
        num_long_blocks=num_long,
        short_block_data=short_block_len - ec_per_block,
    )


def data_codewords(version: int, ec_level: str) -> int:
    """Number of 8-bit data codewords the symbol carries."""
    ec_level = normalize_ec_level(ec_level)
    ec_total = (ECC_CODEWORDS_PER_BLOCK[ec_level][version] *
                NUM_ERROR_CORRECTION_BLOCKS[ec_level][version])
    return total_codewords(version) - ec_total


def data_capacity_bits(version: int, ec_level: str) -> int:
    return data_codewords(version, ec_level) * 8


def character_count_bits(version: int, mode: int) -> int:
    """Get the number of bits for the character count indicator."""
    check_version(version)
    if version <= 9:
        table = {MODE_NUMERIC: 10, MODE_ALPHANUMERIC: 9, MODE_BYTE: 8}
    elif version <= 26:
        table = {MODE_NUMERIC: 12, MODE_ALPHANUMERIC: 11, MODE_BYTE: 16}
    else:
        table = {MODE_NUMERIC: 14, MODE_ALPHANUMERIC: 13, MODE_BYTE: 16}
    return table[mode]
