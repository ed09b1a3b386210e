"""Unit tests for mask application, penalty rules and mask selection."""

from concurrent.futures import Executor, ThreadPoolExecutor

import pytest

from qrforge.codewords import build_codewords, codewords_to_bits
from qrforge.masking import (
    MASK_PATTERNS,
    _penalty_balance,
    _penalty_boxes,
    _penalty_finder_like,
    _penalty_runs,
    apply_mask,
    calculate_penalty,
    choose_best_mask,
    evaluate_mask,
)
from qrforge.matrix import QRMatrix
from qrforge.segments import make_segments


def placed_matrix(text, version, level):
    bits = []
    for segment in make_segments(text, version):
        bits.extend(segment.bits(version))
    qr = QRMatrix(version)
    qr.place_data(codewords_to_bits(build_codewords(bits, version, level), version))
    return qr


def columns(modules):
    return [list(col) for col in zip(*modules)]


class ReversedExecutor(Executor):
    """Runs inline and hands results back last-first."""

    def map(self, fn, *iterables, timeout=None, chunksize=1):
        return reversed([fn(*args) for args in zip(*iterables)])


def test_mask_zero_formula():
    """Mask 0 flips cells where row + col is even."""
    assert MASK_PATTERNS[0](0, 0)
    assert not MASK_PATTERNS[0](0, 1)
    assert len(MASK_PATTERNS) == 8


def test_apply_mask_leaves_function_modules_alone():
    """Only non-reserved modules are flipped."""
    qr = placed_matrix("HELLO WORLD", 1, 'M')
    for mask in range(8):
        masked = apply_mask(qr.matrix, qr.is_function, mask)
        for r in range(qr.size):
            for c in range(qr.size):
                original = qr.matrix[r][c] or 0
                if qr.is_function[r][c]:
                    assert masked[r][c] == original
                else:
                    assert masked[r][c] == original ^ int(MASK_PATTERNS[mask](r, c))


def test_penalties_of_all_light_symbol():
    """21x21 all light: long runs, every 2x2 box, 0% dark."""
    modules = [[0] * 21 for _ in range(21)]
    assert _penalty_runs(modules, columns(modules)) == 42 * (3 + 16)
    assert _penalty_boxes(modules) == 20 * 20 * 3
    assert _penalty_finder_like(modules, columns(modules)) == 0
    assert _penalty_balance(modules) == 90
    assert calculate_penalty(modules) == 798 + 1200 + 90


def test_run_penalty_counts_each_run():
    """A run of 5 scores 3, a run of 7 scores 5."""
    row = [[1, 1, 1, 1, 1, 0, 1, 0, 0, 0, 0, 0, 0, 0]]
    assert _penalty_runs(row, []) == 3 + 5


def test_finder_like_pattern_both_orientations():
    """Dark-light-dark pattern with a light run on either side."""
    assert _penalty_finder_like([[1, 0, 1, 1, 1, 0, 1, 0, 0, 0, 0]], []) == 40
    assert _penalty_finder_like([[0, 0, 0, 0, 1, 0, 1, 1, 1, 0, 1]], []) == 40
    assert _penalty_finder_like([[1, 0, 1, 1, 1, 0, 1, 0, 0, 0, 1]], []) == 0


def test_balance_penalty_steps():
    """Exactly half dark costs nothing, 40% dark costs 10 per step."""
    half = [[(r + c) % 2 for c in range(10)] for r in range(10)]
    assert _penalty_balance(half) == 0
    forty = [[1] * 4 + [0] * 6 for _ in range(10)]
    assert _penalty_balance(forty) == 10


def test_chosen_mask_is_lowest_penalty_lowest_index():
    """Selection equals argmin over the eight trials."""
    qr = placed_matrix("HELLO WORLD", 1, 'Q')
    scores = [evaluate_mask(qr, 'Q', mask).penalty for mask in range(8)]
    best = choose_best_mask(qr, 'Q')
    assert best.penalty == min(scores)
    assert best.mask == scores.index(min(scores))


def test_executor_gives_same_choice():
    """Fanning trials out on threads does not change the result."""
    qr = placed_matrix("Fan out, fan in", 2, 'L')
    sequential = choose_best_mask(qr, 'L')
    with ThreadPoolExecutor(max_workers=4) as pool:
        parallel = choose_best_mask(qr, 'L', pool)
    assert parallel.mask == sequential.mask
    assert parallel.modules == sequential.modules


@pytest.mark.parametrize("executor", [None, ReversedExecutor()])
def test_equal_penalties_pick_mask_zero(monkeypatch, executor):
    """On a tie the lowest mask index wins whatever the result order."""
    monkeypatch.setattr("qrforge.masking.calculate_penalty", lambda modules: 100)
    qr = placed_matrix("TIE", 1, 'M')
    best = choose_best_mask(qr, 'M', executor)
    assert best.mask == 0
    assert best.penalty == 100


def test_evaluate_mask_does_not_modify_matrix():
    """Trials work on copies of the placed matrix."""
    qr = placed_matrix("0123456789", 1, 'H')
    before = [row[:] for row in qr.matrix]
    evaluate_mask(qr, 'H', 3)
    assert qr.matrix == before
