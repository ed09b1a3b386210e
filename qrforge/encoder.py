"""
QR code symbol encoder.

Turns a text or byte payload and an error correction level into a finished
module grid:

    segment -> resolve version -> codewords + EC -> function patterns
    -> data placement -> 8 mask trials -> best mask -> format information

Every call builds its own working state; nothing is shared between calls
except the read-only tables.
"""

import logging
from concurrent.futures import Executor
from typing import Iterator, List, Optional, Sequence, Tuple

from . import config
from .codewords import build_codewords, codewords_to_bits
from .errors import CapacityError
from .masking import choose_best_mask
from .matrix import QRMatrix
from .segments import Payload, Segment, make_segments, total_bits
from .tables import (
    MAX_VERSION,
    MIN_VERSION,
    check_version,
    data_capacity_bits,
    normalize_ec_level,
)

logger = logging.getLogger(__name__)


class Grid:
    """
    Finished, immutable QR code symbol.

    ``is_dark(row, col)`` answers for ``0 <= row, col < side_length``; the
    version, level, mask and segments used are kept for inspection.
    """

    def __init__(self, modules: Sequence[Sequence[int]], version: int, ec_level: str,
                 mask: int, segments: Sequence[Segment] = ()):
        self._modules = tuple(tuple(bool(cell) for cell in row) for row in modules)
        self.version = version
        self.ec_level = ec_level
        self.mask = mask
        self.segments = tuple(segments)

    @property
    def side_length(self) -> int:
        return len(self._modules)

    def is_dark(self, row: int, col: int) -> bool:
        size = self.side_length
        if not (0 <= row < size and 0 <= col < size):
            raise IndexError(f"Module ({row}, {col}) outside a {size}x{size} symbol")
        return self._modules[row][col]

    def rows(self) -> Iterator[Tuple[bool, ...]]:
        return iter(self._modules)

    def to_list(self) -> List[List[int]]:
        """Plain 0/1 rows."""
        return [[int(cell) for cell in row] for row in self._modules]

    def __eq__(self, other):
        if not isinstance(other, Grid):
            return NotImplemented
        return self._modules == other._modules

    def __hash__(self):
        return hash(self._modules)

    def __repr__(self):
        return (f"Grid(version={self.version}, ec_level={self.ec_level!r}, "
                f"mask={self.mask}, side_length={self.side_length})")


def resolve_version(payload: Payload, ec_level: str,
                    min_version: int = MIN_VERSION,
                    max_version: int = MAX_VERSION) -> Tuple[int, List[Segment]]:
    """
    Find the smallest version in range whose data capacity holds the
    optimally segmented payload.

    Segmentation depends on the count-field widths, which change at versions
    10 and 27, so it is recomputed for each width group.
    """
    ec_level = normalize_ec_level(ec_level)
    cache = {}
    needed = None
    for version in range(min_version, max_version + 1):
        group = 0 if version <= 9 else 1 if version <= 26 else 2
        if group not in cache:
            cache[group] = make_segments(payload, version)
        segments = cache[group]
        if segments is None:
            continue
        needed = total_bits(segments, version)
        if needed <= data_capacity_bits(version, ec_level):
            return version, segments

    if needed is None:
        raise CapacityError(
            f"Payload has too many characters for versions {min_version}-{max_version}")
    raise CapacityError(
        f"Payload needs {needed} bits; version {max_version}-{ec_level} holds "
        f"{data_capacity_bits(max_version, ec_level)}")


class QRCodeGenerator:
    """QR code generator bound to one error correction level."""

    def __init__(self, ec_level: str = None, executor: Optional[Executor] = None):
        """
        Args:
            ec_level: 'L' (7%), 'M' (15%), 'Q' (25%), or 'H' (30%); defaults
                to the configured level
            executor: optional executor the eight mask trials are mapped on
        """
        if ec_level is None:
            ec_level = config.DEFAULT_EC_LEVEL
        self.ec_level = normalize_ec_level(ec_level)
        self.executor = executor

    def generate(self, data: Payload, version: int = None) -> Grid:
        """
        Generate a QR code for the given data.

        Args:
            data: str (UTF-8 in byte mode) or bytes to encode
            version: force a version (1-40) instead of the smallest that fits

        Returns:
            The finished Grid
        """
        if version is None:
            version, segments = resolve_version(data, self.ec_level)
        else:
            check_version(version)
            version, segments = resolve_version(data, self.ec_level, version, version)

        logger.debug("version %d-%s, segments: %s", version, self.ec_level,
                     ", ".join(f"{s.mode_name}[{s.num_chars}]" for s in segments))

        data_bits = []
        for segment in segments:
            data_bits.extend(segment.bits(version))

        codewords = build_codewords(data_bits, version, self.ec_level)
        logger.debug("%d data bits, %d codewords", len(data_bits), len(codewords))

        qr = QRMatrix(version)
        placed = qr.place_data(codewords_to_bits(codewords, version))
        logger.debug("placed %d bits in %dx%d matrix", placed, qr.size, qr.size)

        best = choose_best_mask(qr, self.ec_level, self.executor)
        logger.debug("applied mask pattern %d (penalty: %d)", best.mask, best.penalty)

        return Grid(best.modules, version, self.ec_level, best.mask, segments)


def encode(payload: Payload, ec_level: str = None, *,
           executor: Optional[Executor] = None) -> Grid:
    """Encode ``payload`` at ``ec_level`` into the smallest fitting symbol."""
    return QRCodeGenerator(ec_level, executor).generate(payload)
