"""
QR code matrix construction: function patterns, format and version
information, and data module placement.

Coordinates are (row, col) throughout, with (0, 0) at the top-left.

References:
- https://www.thonky.com/qr-code-tutorial/module-placement-matrix
- https://www.thonky.com/qr-code-tutorial/format-version-information
"""

from typing import List, Optional, Sequence, Tuple

from .errors import InternalConsistencyError
from .tables import ALIGNMENT_POSITIONS, EC_LEVELS, check_version, symbol_size

Position = Tuple[int, int]
Modules = List[List[Optional[int]]]


#==============================================================================
# BCH CODES FOR FORMAT AND VERSION INFORMATION
#==============================================================================

# BCH generator polynomial: x^10 + x^8 + x^5 + x^4 + x^2 + x + 1
BCH_GENERATOR = 0b10100110111

# Format mask pattern
FORMAT_MASK = 0b101010000010010

# Golay generator for version information: x^12 + x^11 + x^10 + x^9 + x^8 + x^5 + x^2 + 1
VERSION_GENERATOR = 0b1111100100101

# Error correction level bits
EC_LEVEL_BITS = {
    'L': 0b01,
    'M': 0b00,
    'Q': 0b11,
    'H': 0b10
}


def bch_encode(data_5bits: int) -> int:
    """
    Encode 5 data bits using (15,5) BCH code.

    Args:
        data_5bits: 5-bit integer (EC level 2 bits + mask pattern 3 bits)

    Returns:
        15-bit encoded format information (before final XOR)
    """
    remainder = data_5bits << 10
    for i in range(14, 9, -1):
        if remainder & (1 << i):
            remainder ^= BCH_GENERATOR << (i - 10)
    return (data_5bits << 10) | remainder


def get_format_string(ec_level: str, mask_pattern: int) -> int:
    """Generate the complete 15-bit format string."""
    data_5bits = (EC_LEVEL_BITS[ec_level] << 3) | mask_pattern
    return bch_encode(data_5bits) ^ FORMAT_MASK


def format_bits_to_list(format_int: int) -> List[int]:
    """Convert 15-bit integer to list of bits, MSB first."""
    return [(format_int >> (14 - i)) & 1 for i in range(15)]


def valid_format_strings() -> List[Tuple[int, str, int]]:
    """All 32 (format string, level, mask) combinations."""
    return [(get_format_string(level, mask), level, mask)
            for level in EC_LEVELS for mask in range(8)]


def version_bits(version: int) -> int:
    """18-bit version information: 6 version bits + 12 Golay check bits."""
    remainder = version << 12
    for i in range(17, 11, -1):
        if remainder & (1 << i):
            remainder ^= VERSION_GENERATOR << (i - 12)
    return (version << 12) | remainder


def format_positions(size: int) -> Tuple[List[Position], List[Position]]:
    """
    Cells of the two format information copies, indexed by bit (MSB first).

    The first copy wraps around the top-left finder; the second is split
    between the bottom-left (bits 0-6) and top-right (bits 7-14) finders.
    """
    primary = [(8, i) for i in range(6)]
    primary += [(8, 7), (8, 8), (7, 8)]
    primary += [(5 - i, 8) for i in range(6)]

    secondary = [(size - 1 - i, 8) for i in range(7)]
    secondary += [(8, size - 8 + i) for i in range(8)]
    return primary, secondary


def draw_format_bits(modules: Modules, ec_level: str, mask: int) -> None:
    """Write both copies of the format information into a module grid."""
    bits = format_bits_to_list(get_format_string(ec_level, mask))
    for positions in format_positions(len(modules)):
        for bit, (row, col) in zip(bits, positions):
            modules[row][col] = bit


#==============================================================================
# QR CODE MATRIX CONSTRUCTION
#==============================================================================

class QRMatrix:
    """
    Module grid of one symbol during construction.

    ``matrix`` holds None for unassigned cells, 0 for light and 1 for dark;
    ``is_function`` marks cells reserved for function patterns and format or
    version information, which masking never touches.
    """

    def __init__(self, version: int):
        self.version = check_version(version)
        self.size = symbol_size(version)
        self.matrix: Modules = [[None] * self.size for _ in range(self.size)]
        self.is_function = [[False] * self.size for _ in range(self.size)]
        self._place_function_patterns()

    def _place_function_patterns(self):
        self._place_finder_patterns()
        self._place_timing_patterns()
        self._place_alignment_patterns()
        self._reserve_format_area()
        self._place_dark_module()
        if self.version >= 7:
            self._place_version_info()

    def _place_finder_patterns(self):
        """Three finders, each with its one-module light separator."""
        for (row, col) in [(0, 0), (0, self.size - 7), (self.size - 7, 0)]:
            for dr in range(-1, 8):
                for dc in range(-1, 8):
                    r, c = row + dr, col + dc
                    if not (0 <= r < self.size and 0 <= c < self.size):
                        continue
                    ring = max(abs(dr - 3), abs(dc - 3))
                    # ring 0-1 core, 2 light, 3 border, 4 separator
                    self._set_function(r, c, 1 if ring in (0, 1, 3) else 0)

    def _place_timing_patterns(self):
        """Alternating modules along row 6 and column 6, dark on even indices."""
        for i in range(8, self.size - 8):
            value = (i + 1) % 2
            self._set_function(6, i, value)
            self._set_function(i, 6, value)

    def _place_alignment_patterns(self):
        positions = ALIGNMENT_POSITIONS[self.version]
        for row in positions:
            for col in positions:
                if self._overlaps_finder(row, col):
                    continue
                for dr in range(-2, 3):
                    for dc in range(-2, 3):
                        value = 1 if max(abs(dr), abs(dc)) != 1 else 0
                        self._set_function(row + dr, col + dc, value)

    def _overlaps_finder(self, row: int, col: int) -> bool:
        last = self.size - 7
        return (row, col) in [(6, 6), (6, last), (last, 6)]

    def _reserve_format_area(self):
        """Reserve format cells; their values are written once a mask is chosen."""
        for positions in format_positions(self.size):
            for (row, col) in positions:
                self.is_function[row][col] = True

    def _place_dark_module(self):
        self._set_function(4 * self.version + 9, 8, 1)

    def _place_version_info(self):
        """Two 6x3 copies next to the top-right and bottom-left finders."""
        bits = version_bits(self.version)
        for i in range(18):
            bit = (bits >> i) & 1
            a = self.size - 11 + i % 3
            b = i // 3
            self._set_function(b, a, bit)
            self._set_function(a, b, bit)

    def _set_function(self, row: int, col: int, value: int):
        self.matrix[row][col] = value
        self.is_function[row][col] = True

    def data_positions(self) -> List[Position]:
        """
        Non-reserved cells in placement order: column pairs from the right,
        alternating upward and downward, right column of a pair first, with
        the vertical timing column skipped.
        """
        positions = []
        upward = True
        col = self.size - 1
        while col > 0:
            if col == 6:
                col -= 1
            rows = range(self.size - 1, -1, -1) if upward else range(self.size)
            for row in rows:
                for c in (col, col - 1):
                    if not self.is_function[row][c]:
                        positions.append((row, c))
            col -= 2
            upward = not upward
        return positions

    def place_data(self, data_bits: Sequence[int]) -> int:
        """
        Place data bits in zigzag order.

        Raises InternalConsistencyError unless the bit count equals the number
        of free modules exactly.
        """
        positions = self.data_positions()
        if len(data_bits) != len(positions):
            raise InternalConsistencyError(
                f"Version {self.version} has {len(positions)} data modules, "
                f"got {len(data_bits)} bits")
        for bit, (row, col) in zip(data_bits, positions):
            self.matrix[row][col] = bit
        return len(positions)
