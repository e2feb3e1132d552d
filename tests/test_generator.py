# tests/test_generator.py
import random

import pytest

from sudoku_core import Grid, is_solved
from sudoku_generator import (
    EASY_PLUS_PROFILE,
    PROFILES,
    InvalidHintRangeError,
    book_hash_v1,
    canon_str,
    generate_complete_grid,
    generate_puzzle,
    generate_puzzles_for_profile,
    hash_grid_sha256,
    remove_cells,
)
from sudoku_hash_db import load_global_hashes, save_global_hashes
from sudoku_solver import solve


@pytest.mark.parametrize("seed", range(25))
def test_complete_grid_is_valid(seed):
    grid = generate_complete_grid(seed)
    assert is_solved(grid)
    for i in range(9):
        assert sorted(grid.get_row(i)) == list(range(1, 10))
        assert sorted(grid.get_column(i)) == list(range(1, 10))
        assert sorted(grid.get_tile(i // 3, i % 3)) == list(range(1, 10))


def test_complete_grid_is_deterministic():
    assert generate_complete_grid(1234) == generate_complete_grid(1234)
    assert generate_complete_grid(2 ** 64 - 1) == generate_complete_grid(2 ** 64 - 1)


def test_complete_grid_varies_with_seed():
    grids = {generate_complete_grid(seed).to_string() for seed in range(20)}
    assert len(grids) == 20


def test_complete_grid_accepts_rng():
    assert generate_complete_grid(random.Random(8)) == generate_complete_grid(8)


@pytest.mark.parametrize("seed", range(30))
def test_remove_cells_bounds(seed):
    full = generate_complete_grid(seed)
    puzzle = full.copy()
    hints = remove_cells(puzzle, seed, 20, 30)
    assert 81 - 30 < hints <= 81 - 20
    assert puzzle.count_hints() == hints
    # les cases restantes sont celles de la grille complète
    for p, f in zip(puzzle.cells, full.cells):
        assert p == 0 or p == f


def test_remove_cells_is_deterministic():
    a, b = generate_complete_grid(3), generate_complete_grid(3)
    assert remove_cells(a, 11, 40, 50) == remove_cells(b, 11, 40, 50)
    assert a == b


@pytest.mark.parametrize("bounds", [(30, 30), (30, 20), (-1, 10), (10, 82)])
def test_remove_cells_invalid_range(bounds):
    grid = generate_complete_grid(0)
    with pytest.raises(InvalidHintRangeError):
        remove_cells(grid, 0, *bounds)
    assert grid.count_hints() == 81


def test_invalid_range_is_value_error():
    with pytest.raises(ValueError):
        remove_cells(generate_complete_grid(0), 0, 5, 5)


def test_remove_cells_on_sparse_grid():
    with pytest.raises(InvalidHintRangeError):
        remove_cells(Grid(), 0, 5, 10)


@pytest.mark.parametrize("seed", range(10))
def test_generated_puzzles_solve(seed):
    puzzle, full = generate_puzzle(seed, seed + 1000, 20, 30)
    assert 51 < puzzle.count_hints() <= 61
    grid = puzzle.copy()
    report = solve(grid, rng=seed)
    assert report.solved
    assert is_solved(grid)
    assert all(p == 0 or p == g for p, g in zip(puzzle.cells, grid.cells))


def test_generate_puzzle_reproducible():
    assert generate_puzzle(1, 2, 30, 40) == generate_puzzle(1, 2, 30, 40)
    assert generate_puzzle(1, 2, 30, 40)[0] != generate_puzzle(1, 3, 30, 40)[0]


def test_profiles_ranges():
    for profile in PROFILES.values():
        assert 0 <= profile.min_hints < profile.max_hints <= 81
    assert PROFILES["easy_plus"] is EASY_PLUS_PROFILE


def test_hashes():
    grid = generate_complete_grid(0)
    assert canon_str(grid) == grid.to_string()
    h = hash_grid_sha256(grid)
    assert len(h) == 64
    assert h == h.lower()
    pairs = [generate_puzzle(i, i, 20, 30) for i in range(3)]
    assert book_hash_v1(pairs) == book_hash_v1(list(reversed(pairs)))
    assert book_hash_v1(pairs) != book_hash_v1(pairs[:2])


def test_batch_without_history(tmp_path):
    puzzles = generate_puzzles_for_profile(EASY_PLUS_PROFILE, 4, seed=1, history_path=None)
    assert len(puzzles) == 4
    assert len({canon_str(p) for p, _f in puzzles}) == 4
    for puzzle, full in puzzles:
        assert is_solved(full)
        assert 51 < puzzle.count_hints() <= 61
    assert list(tmp_path.iterdir()) == []


def test_batch_updates_and_respects_history(tmp_path):
    history = str(tmp_path / "hashes.txt")
    first = generate_puzzles_for_profile(EASY_PLUS_PROFILE, 3, seed=5, history_path=None)
    banned = hash_grid_sha256(first[0][0])
    save_global_hashes({banned}, history)

    puzzles = generate_puzzles_for_profile(EASY_PLUS_PROFILE, 3, seed=5, history_path=history)
    hashes = [hash_grid_sha256(p) for p, _f in puzzles]
    assert banned not in hashes
    assert load_global_hashes(history) == {banned, *hashes}
