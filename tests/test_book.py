# tests/test_book.py
import random

import matplotlib.pyplot as plt

from sudoku_book import (
    build_book_pdf,
    build_book_pdf_with_ranges,
    draw_grid_at,
    solve_for_book,
)
from sudoku_core import Grid, is_solved
from sudoku_generator import EASY_PLUS_PROFILE, EASY_PROFILE, generate_puzzle


def test_draw_grid_at_marks_added_digits(classic_puzzle, classic_solution):
    fig, ax = plt.subplots()
    draw_grid_at(ax, classic_solution, 0, 0, 9, puzzle_grid=classic_puzzle, miniature=True)
    texts = ax.texts
    assert len(texts) == 81
    added = [t for t in texts if t.get_color() == "red"]
    assert len(added) == 81 - classic_puzzle.count_hints()
    plt.close(fig)


def test_solve_for_book_uses_solver():
    puzzle, full = generate_puzzle(4, 5, 20, 30)
    solution = solve_for_book(puzzle, full, random.Random(0))
    assert is_solved(solution)
    assert puzzle.count_hints() < 81


def test_solve_for_book_falls_back(classic_solution):
    broken = Grid.from_string("55" + "0" * 79)
    assert solve_for_book(broken, classic_solution, random.Random(0)) is classic_solution


def test_build_book_pdf(tmp_path):
    out = tmp_path / "book.pdf"
    puzzles, hashes, book_hash = build_book_pdf(
        EASY_PLUS_PROFILE,
        str(out),
        n_puzzles=2,
        title="Test",
        seed=3,
        history_path=None,
        solutions_per_page=4,
        solution_rows=2,
        solution_cols=2,
    )
    assert out.read_bytes().startswith(b"%PDF")
    assert len(puzzles) == 2
    assert len(hashes) == 2
    assert len(book_hash) == 64
    for puzzle, solution in puzzles:
        assert is_solved(solution)
        assert all(p == 0 or p == s for p, s in zip(puzzle.cells, solution.cells))


def test_build_book_with_ranges(tmp_path):
    out = tmp_path / "mix.pdf"
    history = tmp_path / "hashes.txt"
    puzzles, hashes, _ = build_book_pdf_with_ranges(
        [(3, 3, EASY_PROFILE), (1, 2, EASY_PLUS_PROFILE)],
        str(out),
        title="Mix",
        seed=1,
        history_path=str(history),
        puzzles_per_page=2,
        puzzle_rows=1,
        puzzle_cols=2,
    )
    assert out.exists()
    assert len(puzzles) == 3
    assert len(history.read_text(encoding="utf-8").split()) == 3
    assert 51 < puzzles[0][0].count_hints() <= 61
