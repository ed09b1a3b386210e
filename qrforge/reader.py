"""
Reads a clean module grid back into its payload.

This is the inverse of the encoder for undamaged symbols: format information
is BCH-corrected, but data blocks are only verified through their
Reed-Solomon syndromes, not repaired.
"""

from typing import List, NamedTuple, Sequence, Union

from .codewords import bits_to_bytes
from .encoder import Grid
from .errors import DecodeError
from .gf256 import rs_encoder
from .masking import MASK_PATTERNS
from .matrix import QRMatrix, format_positions, valid_format_strings
from .segments import ALPHANUMERIC_CHARSET
from .tables import (
    MODE_ALPHANUMERIC,
    MODE_BYTE,
    MODE_NUMERIC,
    MODE_TERMINATOR,
    block_layout,
    character_count_bits,
    total_codewords,
)


class DecodedSymbol(NamedTuple):
    version: int
    ec_level: str
    mask: int
    data: bytes

    def text(self) -> str:
        return self.data.decode('utf-8')


def _as_rows(grid) -> List[List[int]]:
    if isinstance(grid, Grid):
        size = grid.side_length
        return [[int(grid.is_dark(r, c)) for c in range(size)] for r in range(size)]
    return [[1 if cell else 0 for cell in row] for row in grid]


def read_format(rows: Sequence[Sequence[int]]):
    """
    Recover (ec_level, mask) from whichever format copy is closest to a
    valid code word; up to three bit errors are corrected.
    """
    best = None
    for positions in format_positions(len(rows)):
        value = 0
        for (r, c) in positions:
            value = (value << 1) | rows[r][c]
        for code, level, mask in valid_format_strings():
            distance = bin(code ^ value).count('1')
            if best is None or distance < best[0]:
                best = (distance, level, mask)
    if best[0] > 3:
        raise DecodeError("Format information is unreadable")
    return best[1], best[2]


def _read_codewords(rows, version: int, mask: int) -> List[int]:
    qr = QRMatrix(version)
    mask_func = MASK_PATTERNS[mask]
    bits = [rows[r][c] ^ int(mask_func(r, c)) for (r, c) in qr.data_positions()]
    return bits_to_bytes(bits[:total_codewords(version) * 8])


def _deinterleave(codewords: Sequence[int], version: int, ec_level: str) -> List[int]:
    """Rebuild the blocks, check every syndrome and return the data codewords."""
    layout = block_layout(version, ec_level)
    data_lengths = ([layout.short_block_data] * layout.num_short_blocks +
                    [layout.long_block_data] * layout.num_long_blocks)
    blocks = [[] for _ in data_lengths]

    k = 0
    for i in range(layout.long_block_data):
        for b, length in enumerate(data_lengths):
            if i < length:
                blocks[b].append(codewords[k])
                k += 1
    for _ in range(layout.ec_per_block):
        for block in blocks:
            block.append(codewords[k])
            k += 1

    data = []
    for b, (block, length) in enumerate(zip(blocks, data_lengths)):
        if any(rs_encoder.syndromes(block, layout.ec_per_block)):
            raise DecodeError(f"Block {b} fails its Reed-Solomon check")
        data.extend(block[:length])
    return data


class _BitReader:

    def __init__(self, data: Sequence[int]):
        self.bits = []
        for byte in data:
            self.bits.extend((byte >> (7 - i)) & 1 for i in range(8))
        self.pos = 0

    @property
    def remaining(self) -> int:
        return len(self.bits) - self.pos

    def read(self, n: int) -> int:
        if n > self.remaining:
            raise DecodeError("Segment runs past the end of the data codewords")
        value = 0
        for bit in self.bits[self.pos:self.pos + n]:
            value = (value << 1) | bit
        self.pos += n
        return value


def parse_segments(data: Sequence[int], version: int) -> bytes:
    """Concatenate the payload bytes of every segment up to the terminator."""
    reader = _BitReader(data)
    out = bytearray()
    while reader.remaining >= 4:
        mode = reader.read(4)
        if mode == MODE_TERMINATOR:
            break
        if mode not in (MODE_NUMERIC, MODE_ALPHANUMERIC, MODE_BYTE):
            raise DecodeError(f"Unsupported mode indicator {mode:04b}")
        count = reader.read(character_count_bits(version, mode))

        if mode == MODE_NUMERIC:
            while count > 0:
                digits = min(3, count)
                value = reader.read(3 * digits + 1)
                if value >= 10 ** digits:
                    raise DecodeError(f"Numeric group {value} is not {digits} digits")
                out += str(value).zfill(digits).encode('ascii')
                count -= digits
        elif mode == MODE_ALPHANUMERIC:
            while count >= 2:
                value = reader.read(11)
                if value >= 45 * 45:
                    raise DecodeError(f"Alphanumeric pair value {value} out of range")
                out += (ALPHANUMERIC_CHARSET[value // 45] +
                        ALPHANUMERIC_CHARSET[value % 45]).encode('ascii')
                count -= 2
            if count:
                value = reader.read(6)
                if value >= 45:
                    raise DecodeError(f"Alphanumeric value {value} out of range")
                out += ALPHANUMERIC_CHARSET[value].encode('ascii')
        else:
            out += bytes(reader.read(8) for _ in range(count))
    return bytes(out)


def read_grid(grid: Union[Grid, Sequence[Sequence[int]]]) -> DecodedSymbol:
    """Decode a Grid (or plain rows of 0/1) into its version, level, mask and bytes."""
    rows = _as_rows(grid)
    size = len(rows)
    if size < 21 or (size - 17) % 4 or any(len(row) != size for row in rows):
        raise DecodeError(f"{size} modules per side is not a QR Code symbol size")
    version = (size - 17) // 4
    if version > 40:
        raise DecodeError(f"Version {version} is not supported")

    ec_level, mask = read_format(rows)
    codewords = _read_codewords(rows, version, mask)
    data = _deinterleave(codewords, version, ec_level)
    return DecodedSymbol(version, ec_level, mask, parse_segments(data, version))


def decode(grid) -> str:
    """Decode a grid to text (UTF-8)."""
    try:
        return read_grid(grid).text()
    except UnicodeDecodeError as exc:
        raise DecodeError("Payload is not valid UTF-8") from exc
