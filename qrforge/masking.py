"""
Data masking and mask selection.

Each of the eight mask patterns is tried on the placed data, scored with the
four ISO/IEC 18004 penalty rules and the lowest score wins, lowest index on
ties.

References:
- https://www.thonky.com/qr-code-tutorial/data-masking
"""

import logging
from concurrent.futures import Executor
from functools import partial
from typing import Callable, List, NamedTuple, Optional, Sequence

from .matrix import Modules, QRMatrix, draw_format_bits

logger = logging.getLogger(__name__)

MASK_PATTERNS: List[Callable[[int, int], bool]] = [
    lambda r, c: (r + c) % 2 == 0,
    lambda r, c: r % 2 == 0,
    lambda r, c: c % 3 == 0,
    lambda r, c: (r + c) % 3 == 0,
    lambda r, c: (r // 2 + c // 3) % 2 == 0,
    lambda r, c: (r * c) % 2 + (r * c) % 3 == 0,
    lambda r, c: ((r * c) % 2 + (r * c) % 3) % 2 == 0,
    lambda r, c: ((r + c) % 2 + (r * c) % 3) % 2 == 0,
]

# Penalty weights N1..N4
PENALTY_N1 = 3
PENALTY_N2 = 3
PENALTY_N3 = 40
PENALTY_N4 = 10

FINDER_LIKE = (
    (1, 0, 1, 1, 1, 0, 1, 0, 0, 0, 0),
    (0, 0, 0, 0, 1, 0, 1, 1, 1, 0, 1),
)


class MaskTrial(NamedTuple):
    """Outcome of one mask: the finished modules and their penalty."""
    mask: int
    penalty: int
    modules: Modules


def apply_mask(matrix: Modules, is_function: Sequence[Sequence[bool]],
               mask_num: int) -> Modules:
    """Return a copy with the mask XORed into data modules only."""
    mask_func = MASK_PATTERNS[mask_num]
    result = [[0 if cell is None else cell for cell in row] for row in matrix]
    for r, row in enumerate(result):
        for c in range(len(row)):
            if not is_function[r][c] and mask_func(r, c):
                row[c] ^= 1
    return result


#==============================================================================
# PENALTY RULES
#==============================================================================

def calculate_penalty(modules: Modules) -> int:
    """Total penalty score for a masked matrix."""
    columns = [list(col) for col in zip(*modules)]
    return (_penalty_runs(modules, columns) +
            _penalty_boxes(modules) +
            _penalty_finder_like(modules, columns) +
            _penalty_balance(modules))


def _penalty_runs(rows: Modules, columns: Modules) -> int:
    """N1: each run of 5+ same-colour modules scores 3 plus one per extra module."""
    penalty = 0
    for line in rows + columns:
        run_length = 1
        for prev, curr in zip(line, line[1:]):
            if curr == prev:
                run_length += 1
                continue
            if run_length >= 5:
                penalty += PENALTY_N1 + (run_length - 5)
            run_length = 1
        if run_length >= 5:
            penalty += PENALTY_N1 + (run_length - 5)
    return penalty


def _penalty_boxes(modules: Modules) -> int:
    """N2: every 2x2 block of one colour, overlaps counted."""
    penalty = 0
    for upper, lower in zip(modules, modules[1:]):
        for c in range(len(upper) - 1):
            if upper[c] == upper[c + 1] == lower[c] == lower[c + 1]:
                penalty += PENALTY_N2
    return penalty


def _penalty_finder_like(rows: Modules, columns: Modules) -> int:
    """N3: 1:1:3:1:1 dark pattern with four light modules on either side."""
    penalty = 0
    for line in rows + columns:
        for c in range(len(line) - 10):
            if tuple(line[c:c + 11]) in FINDER_LIKE:
                penalty += PENALTY_N3
    return penalty


def _penalty_balance(modules: Modules) -> int:
    """N4: 10 points for every full 5% step the dark ratio is away from 50%."""
    dark_count = sum(sum(row) for row in modules)
    total = len(modules) ** 2
    percent = (dark_count * 100) // total

    prev_multiple = percent - (percent % 5)
    next_multiple = prev_multiple + 5
    return min(
        abs(prev_multiple - 50) // 5,
        abs(next_multiple - 50) // 5
    ) * PENALTY_N4


#==============================================================================
# MASK SELECTION
#==============================================================================

def evaluate_mask(qr: QRMatrix, ec_level: str, mask: int) -> MaskTrial:
    """Mask a copy of the placed data, write its format bits and score it."""
    modules = apply_mask(qr.matrix, qr.is_function, mask)
    draw_format_bits(modules, ec_level, mask)
    return MaskTrial(mask, calculate_penalty(modules), modules)


def choose_best_mask(qr: QRMatrix, ec_level: str,
                     executor: Optional[Executor] = None) -> MaskTrial:
    """
    Try all eight masks and keep the lowest penalty, lowest index on ties.

    The trials only read ``qr``, so they can be fanned out on an executor;
    the reduction does not depend on completion order.
    """
    trial = partial(evaluate_mask, qr, ec_level)
    if executor is None:
        trials = [trial(mask) for mask in range(len(MASK_PATTERNS))]
    else:
        trials = list(executor.map(trial, range(len(MASK_PATTERNS))))

    for t in trials:
        logger.debug("mask %d penalty %d", t.mask, t.penalty)
    return min(trials, key=lambda t: (t.penalty, t.mask))
