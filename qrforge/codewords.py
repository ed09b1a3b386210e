"""
Codeword construction: padding the segment bit stream to the symbol's data
capacity, splitting it into blocks, appending Reed-Solomon codewords and
interleaving the blocks into the final codeword sequence.
"""

from typing import List, Sequence, Tuple

from .errors import CapacityError, InternalConsistencyError
from .gf256 import rs_encoder
from .segments import int_to_bits
from .tables import BlockLayout, block_layout, data_codewords, remainder_bits

# Pad codewords appended after the terminator (0b11101100, 0b00010001)
PAD_BYTES = (0xEC, 0x11)


def bits_to_bytes(bits: Sequence[int]) -> List[int]:
    """Convert list of bits to list of bytes, zero-filling the last byte."""
    bits = list(bits)
    while len(bits) % 8 != 0:
        bits.append(0)

    bytes_list = []
    for i in range(0, len(bits), 8):
        byte = 0
        for j in range(8):
            byte = (byte << 1) | bits[i + j]
        bytes_list.append(byte)
    return bytes_list


def pad_codewords(data_bits: Sequence[int], capacity_bytes: int) -> List[int]:
    """
    Terminate and pad a segment bit stream to exactly ``capacity_bytes``.

    Up to four zero bits of terminator are added (fewer when the stream is
    within four bits of capacity), then zero bits to the byte boundary, then
    the alternating pad bytes.
    """
    capacity_bits = capacity_bytes * 8
    if len(data_bits) > capacity_bits:
        raise CapacityError(
            f"{len(data_bits)} data bits exceed the {capacity_bits}-bit capacity")

    bits = list(data_bits)
    bits.extend([0] * min(4, capacity_bits - len(bits)))
    codewords = bits_to_bytes(bits)

    i = 0
    while len(codewords) < capacity_bytes:
        codewords.append(PAD_BYTES[i % 2])
        i += 1
    return codewords


def split_blocks(data: Sequence[int], layout: BlockLayout) -> List[List[int]]:
    """Split data codewords into blocks, short blocks first."""
    blocks = []
    k = 0
    for i in range(layout.num_blocks):
        length = layout.short_block_data if i < layout.num_short_blocks else layout.long_block_data
        blocks.append(list(data[k:k + length]))
        k += length
    return blocks


def interleave(blocks: Sequence[Sequence[int]]) -> List[int]:
    """Take codeword i of every block in turn, skipping blocks that are too short."""
    result = []
    longest = max((len(block) for block in blocks), default=0)
    for i in range(longest):
        for block in blocks:
            if i < len(block):
                result.append(block[i])
    return result


def compute_blocks(data: Sequence[int], version: int,
                   ec_level: str) -> Tuple[List[List[int]], List[List[int]]]:
    """Return (data blocks, EC blocks) for a full set of data codewords."""
    layout = block_layout(version, ec_level)
    if len(data) != layout.data_codewords:
        raise InternalConsistencyError(
            f"Expected {layout.data_codewords} data codewords, got {len(data)}")
    data_blocks = split_blocks(data, layout)
    ec_blocks = [rs_encoder.encode(block, layout.ec_per_block) for block in data_blocks]
    return data_blocks, ec_blocks


def add_error_correction(data: Sequence[int], version: int, ec_level: str) -> List[int]:
    """
    Append EC codewords per block and interleave: all data codewords
    round-robin first, then all EC codewords round-robin.
    """
    data_blocks, ec_blocks = compute_blocks(data, version, ec_level)
    return interleave(data_blocks) + interleave(ec_blocks)


def codewords_to_bits(codewords: Sequence[int], version: int) -> List[int]:
    """Bit-unpack the final codewords and append the light remainder bits."""
    bits = []
    for byte in codewords:
        bits.extend(int_to_bits(byte, 8))
    bits.extend([0] * remainder_bits(version))
    return bits


def build_codewords(data_bits: Sequence[int], version: int, ec_level: str) -> List[int]:
    """Segment bits -> padded data codewords -> interleaved final codewords."""
    data = pad_codewords(data_bits, data_codewords(version, ec_level))
    return add_error_correction(data, version, ec_level)
