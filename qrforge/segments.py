"""
Data encoding modes and payload segmentation.

A payload is split into contiguous segments, each packed in numeric,
alphanumeric or byte mode. The split is chosen to minimise the total bit
length for the character-count field widths of a given version.

References:
- https://www.thonky.com/qr-code-tutorial/data-encoding
- https://www.nayuki.io/page/optimal-text-segmentation-for-qr-codes
"""

from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence, Union

from .errors import InvalidInputError
from .tables import (
    MODE_ALPHANUMERIC,
    MODE_BYTE,
    MODE_NAMES,
    MODE_NUMERIC,
    character_count_bits,
)

Payload = Union[str, bytes]

ALPHANUMERIC_CHARSET = "0123456789ABCDEFGHIJKLMNOPQRSTUVWXYZ $%*+-./:"

# Alphanumeric character mapping
ALPHANUMERIC_TABLE: Dict[str, int] = {c: i for i, c in enumerate(ALPHANUMERIC_CHARSET)}

# Costs below are in sixths of a bit so that numeric (10 bits / 3 chars) and
# alphanumeric (11 bits / 2 chars) rates stay integral.
_NUMERIC_COST = 20
_ALPHANUMERIC_COST = 33
_BYTE_COST = 48


#==============================================================================
# BIT PACKING PER MODE
#==============================================================================

def int_to_bits(value: int, length: int) -> List[int]:
    """Convert integer to list of bits with specified length, MSB first."""
    return [(value >> (length - 1 - i)) & 1 for i in range(length)]


def is_numeric(text: str) -> bool:
    return all(c in '0123456789' for c in text)


def is_alphanumeric(text: str) -> bool:
    return all(c in ALPHANUMERIC_TABLE for c in text)


def encode_numeric(data: str) -> List[int]:
    """Three digits per 10 bits; a trailing pair takes 7 bits, a single 4."""
    bits = []
    for i in range(0, len(data), 3):
        group = data[i:i + 3]
        bits.extend(int_to_bits(int(group), 3 * len(group) + 1))
    return bits


def encode_alphanumeric(data: str) -> List[int]:
    """Two characters per 11 bits; a trailing character takes 6 bits."""
    bits = []
    i = 0
    while i + 2 <= len(data):
        value = 45 * ALPHANUMERIC_TABLE[data[i]] + ALPHANUMERIC_TABLE[data[i + 1]]
        bits.extend(int_to_bits(value, 11))
        i += 2
    if i < len(data):
        bits.extend(int_to_bits(ALPHANUMERIC_TABLE[data[i]], 6))
    return bits


def encode_byte(data: bytes) -> List[int]:
    bits = []
    for byte in data:
        bits.extend(int_to_bits(byte, 8))
    return bits


#==============================================================================
# SEGMENTS
#==============================================================================

@dataclass(frozen=True)
class Segment:
    """
    One run of the payload packed in a single mode.

    ``data`` holds the ASCII characters for numeric and alphanumeric segments
    and the raw bytes for byte segments; ``num_chars`` is what goes into the
    character count field (characters, or bytes in byte mode).
    """
    mode: int
    num_chars: int
    data: bytes

    @property
    def mode_name(self) -> str:
        return MODE_NAMES[self.mode]

    def data_bit_length(self) -> int:
        n = self.num_chars
        if self.mode == MODE_NUMERIC:
            return 10 * (n // 3) + (0, 4, 7)[n % 3]
        if self.mode == MODE_ALPHANUMERIC:
            return 11 * (n // 2) + 6 * (n % 2)
        return 8 * n

    def bit_length(self, version: int) -> int:
        """Mode indicator + count field + packed data."""
        return 4 + character_count_bits(version, self.mode) + self.data_bit_length()

    def fits(self, version: int) -> bool:
        """Whether num_chars can be written in this version's count field."""
        return self.num_chars < (1 << character_count_bits(version, self.mode))

    def data_bits(self) -> List[int]:
        if self.mode == MODE_NUMERIC:
            return encode_numeric(self.data.decode('ascii'))
        if self.mode == MODE_ALPHANUMERIC:
            return encode_alphanumeric(self.data.decode('ascii'))
        return encode_byte(self.data)

    def bits(self, version: int) -> List[int]:
        bits = int_to_bits(self.mode, 4)
        bits.extend(int_to_bits(self.num_chars, character_count_bits(version, self.mode)))
        bits.extend(self.data_bits())
        return bits


def total_bits(segments: Sequence[Segment], version: int) -> int:
    return sum(segment.bit_length(version) for segment in segments)


#==============================================================================
# MODE SELECTION
#==============================================================================

def payload_units(payload: Payload) -> List[bytes]:
    """
    Split a payload into the smallest units a segment boundary may fall
    between: one UTF-8 encoded character for text, one byte for bytes.
    """
    if isinstance(payload, (bytes, bytearray)):
        return [bytes((b,)) for b in payload]
    if not isinstance(payload, str):
        raise InvalidInputError(
            f"Payload must be str or bytes, got {type(payload).__name__}")
    units = []
    for i, c in enumerate(payload):
        try:
            units.append(c.encode('utf-8'))
        except UnicodeEncodeError as exc:
            raise InvalidInputError(
                f"Payload character at index {i} cannot be encoded as UTF-8") from exc
    return units


def _unit_modes(unit: bytes) -> List[int]:
    """Modes able to carry this unit, byte mode always included."""
    modes = [MODE_BYTE]
    if len(unit) == 1:
        char = chr(unit[0])
        if char in ALPHANUMERIC_TABLE:
            modes.append(MODE_ALPHANUMERIC)
        if char in '0123456789':
            modes.append(MODE_NUMERIC)
    return modes


def _unit_cost(mode: int, unit: bytes) -> int:
    if mode == MODE_NUMERIC:
        return _NUMERIC_COST
    if mode == MODE_ALPHANUMERIC:
        return _ALPHANUMERIC_COST
    return _BYTE_COST * len(unit)


def choose_modes(units: Sequence[bytes], version: int) -> List[int]:
    """
    Pick the mode of every unit so that the encoded length is minimal.

    Dynamic programming over "currently in mode m" states: extending a run
    costs the per-character rate, switching costs a whole new header
    (mode indicator + count field) after rounding the finished run up to a
    whole number of bits.
    """
    all_modes = (MODE_BYTE, MODE_ALPHANUMERIC, MODE_NUMERIC)
    header = {m: (4 + character_count_bits(version, m)) * 6 for m in all_modes}

    costs = dict(header)
    trace: List[Dict[int, int]] = []
    for unit in units:
        current = {}
        origin = {}
        for mode in _unit_modes(unit):
            current[mode] = costs[mode] + _unit_cost(mode, unit)
            origin[mode] = mode

        # Option to close the run here and open a new segment in another mode
        finished = dict(current)
        for to_mode in all_modes:
            for from_mode, cost in finished.items():
                switched = (cost + 5) // 6 * 6 + header[to_mode]
                if to_mode not in current or switched < current[to_mode]:
                    current[to_mode] = switched
                    origin[to_mode] = from_mode

        trace.append(origin)
        costs = current

    state = min(all_modes, key=lambda m: costs[m])
    modes = [0] * len(units)
    for i in range(len(units) - 1, -1, -1):
        state = trace[i][state]
        modes[i] = state
    return modes


def make_segments(payload: Payload, version: int) -> Optional[List[Segment]]:
    """
    Segment the payload optimally for the count-field widths of ``version``.

    Returns None when some segment holds more characters than its count field
    can express at this version.
    """
    units = payload_units(payload)
    modes = choose_modes(units, version)

    segments = []
    start = 0
    while start < len(units):
        mode = modes[start]
        end = start
        while end < len(units) and modes[end] == mode:
            end += 1
        data = b''.join(units[start:end])
        num_chars = len(data) if mode == MODE_BYTE else end - start
        segments.append(Segment(mode, num_chars, data))
        start = end

    if not all(segment.fits(version) for segment in segments):
        return None
    return segments
