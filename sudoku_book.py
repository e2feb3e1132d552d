"""
Génération du PDF (puzzles + solutions) pour un ou plusieurs profils.

Deux modes :
- build_book_pdf(...) : un seul profil pour tout le livre.
- build_book_pdf_with_ranges(...) : plages de numéros de puzzles avec profils différents.

Les solutions imprimées sont celles du solveur par entropie ; les chiffres
qu'il a trouvés sont dessinés dans la couleur "added".
"""

from __future__ import annotations
import logging
import random
from typing import List, Optional, Tuple, Union

import matplotlib.pyplot as plt
from matplotlib.backends.backend_pdf import PdfPages

from sudoku_core import Grid, is_solved, make_rng
from sudoku_generator import (
    HintProfile,
    book_hash_v1,
    generate_puzzles_for_profile,
    hash_grid_sha256,
)
from sudoku_hash_db import HASH_DB_FILE
from sudoku_solver import solve

log = logging.getLogger(__name__)

TRIM_W_DEFAULT = 6.0
TRIM_H_DEFAULT = 9.0

DEFAULT_GIVEN_COLOR = "black"
DEFAULT_ADDED_COLOR = "red"

BLOCK_SHADE_COLOR = "#e9e9e9"
BLOCK_SHADE_ALPHA = 1.0

PROFILE_NAME_FR = {
    "easy_plus": "facile +",
    "easy": "facile",
    "medium": "moyen",
    "hard": "difficile",
}


def chunk(lst, n):
    for i in range(0, len(lst), n):
        yield lst[i : i + n]


def solve_for_book(puzzle: Grid, full: Grid, rng: random.Random) -> Grid:
    """Solution à imprimer : celle du solveur, ou la grille d'origine s'il échoue."""
    grid = puzzle.copy()
    report = solve(grid, rng=rng)
    if report.solved and is_solved(grid):
        return grid
    log.warning("Solveur en échec (%s), solution de génération utilisée", report.reason)
    return full


# ---------- Dessin d'une grille ----------

def draw_grid_at(
    ax,
    grid: Grid,
    left: float,
    bottom: float,
    size: float,
    puzzle_grid: Optional[Grid] = None,
    given_color: str = DEFAULT_GIVEN_COLOR,
    added_color: str = DEFAULT_ADDED_COLOR,
    miniature: bool = False,
):
    """
    Dessine `grid` dans le carré (left, bottom, size).
    Si `puzzle_grid` est fourni, les cases vides du puzzle sont écrites
    en `added_color` et en gras.
    """
    cell = size / 9.0
    block = size / 3.0

    # Fond alterné par bloc 3x3
    for br in range(3):
        for bc in range(3):
            if (br + bc) % 2 == 0:
                ax.add_patch(
                    plt.Rectangle(
                        (left + bc * block, bottom + br * block),
                        block,
                        block,
                        facecolor=BLOCK_SHADE_COLOR,
                        edgecolor="none",
                        alpha=BLOCK_SHADE_ALPHA,
                        zorder=0,
                    )
                )

    frame_lw, block_lw, cell_lw = (1.25, 0.6, 0.25) if miniature else (3, 2, 0.8)
    ax.add_patch(
        plt.Rectangle((left, bottom), size, size, fill=False, linewidth=frame_lw, color="k", zorder=3)
    )
    for i in range(1, 9):
        lw = block_lw if i % 3 == 0 else cell_lw
        ax.plot([left + i * cell, left + i * cell], [bottom, bottom + size], linewidth=lw, color="k", zorder=2)
        ax.plot([left, left + size], [bottom + i * cell, bottom + i * cell], linewidth=lw, color="k", zorder=2)

    font_pts = cell * 0.5 * 72
    for r in range(9):
        for c in range(9):
            v = grid.get(r, c)
            if not v:
                continue
            added = puzzle_grid is not None and puzzle_grid.get(r, c) == 0
            ax.text(
                left + c * cell + cell / 2,
                bottom + (8 - r) * cell + cell * 0.47,
                str(v),
                ha="center",
                va="center",
                fontsize=font_pts,
                fontweight="bold" if added else "normal",
                color=added_color if added else given_color,
                zorder=4,
            )


def _new_page(trim_w: float, trim_h: float):
    plt.rcParams["font.family"] = "DejaVu Sans"
    fig = plt.figure(figsize=(trim_w, trim_h))
    ax = plt.gca()
    ax.set_xlim(0, trim_w)
    ax.set_ylim(0, trim_h)
    ax.axis("off")
    return fig, ax


def _page_layout(trim_w, trim_h, rows, cols, margin_x, margin_y):
    """Positions (left, bottom) de chaque emplacement et taille d'une grille."""
    cell_w = (trim_w - 2 * margin_x) / cols
    cell_h = (trim_h - 2 * margin_y) / rows
    size = min(cell_w, cell_h) * 0.90
    offset_x = (cell_w - size) / 2
    offset_y = (cell_h - size) / 2
    slots = []
    for idx in range(rows * cols):
        r, c = divmod(idx, cols)
        slots.append(
            (margin_x + c * cell_w + offset_x, margin_y + (rows - 1 - r) * cell_h + offset_y)
        )
    return slots, size


def _page_decorations(ax, trim_w, trim_h, title, page_num):
    ax.text(trim_w / 2, trim_h - 0.3, title, ha="center", va="top", fontsize=12, fontweight="bold")
    ax.text(trim_w - 0.2, 0.2, str(page_num), ha="right", va="bottom", fontsize=10)


def draw_puzzles_page_figure(
    puzzles: List[Grid],
    trim_w: float,
    trim_h: float,
    rows: int,
    cols: int,
    page_num: int,
    title: str,
    puzzle_labels: Optional[List[str]] = None,
    start_idx: int = 1,
):
    fig, ax = _new_page(trim_w, trim_h)
    slots, size = _page_layout(trim_w, trim_h, rows, cols, margin_x=0.5, margin_y=0.8)

    for idx, (grid, (left, bottom)) in enumerate(zip(puzzles, slots)):
        draw_grid_at(ax, grid, left, bottom, size)

        # numérotation indépendante du numéro de page PDF
        label = ""
        if puzzle_labels is not None and idx < len(puzzle_labels):
            lab = (puzzle_labels[idx] or "").strip()
            if lab:
                label = f" — {lab}"
        ax.text(left + size / 2, bottom - 0.1, f"{start_idx + idx}{label}", ha="center", va="top", fontsize=8)

    _page_decorations(ax, trim_w, trim_h, title, page_num)
    return fig


def draw_solutions_page_figure(
    puzzles_and_solutions: List[Tuple[Grid, Grid]],
    trim_w: float,
    trim_h: float,
    rows: int,
    cols: int,
    page_num: int,
    start_idx: int,
    given_color: str,
    added_color: str,
):
    fig, ax = _new_page(trim_w, trim_h)
    slots, size = _page_layout(trim_w, trim_h, rows, cols, margin_x=0.6, margin_y=0.95)

    for idx, ((puz, sol), (left, bottom)) in enumerate(zip(puzzles_and_solutions, slots)):
        draw_grid_at(
            ax,
            sol,
            left,
            bottom,
            size,
            puzzle_grid=puz,
            given_color=given_color,
            added_color=added_color,
            miniature=True,
        )
        ax.text(left + size / 2, bottom - 0.1, f"{start_idx + idx}", ha="center", va="top", fontsize=8)

    first = start_idx
    last = first + min(len(puzzles_and_solutions), rows * cols) - 1
    title_str = f"Solutions {first}" if first == last else f"Solutions {first}–{last}"
    _page_decorations(ax, trim_w, trim_h, title_str, page_num)
    return fig


# ---------- Helper interne : dessiner un livre à partir d'une liste de puzzles ----------

def _render_book_from_puzzles(
    puzzles: List[Tuple[Grid, Grid]],
    output_path: str,
    title: str,
    trim_w: float,
    trim_h: float,
    puzzles_per_page: int,
    puzzle_rows: int,
    puzzle_cols: int,
    solutions_per_page: int,
    solution_rows: int,
    solution_cols: int,
    given_color: str,
    added_color: str,
    puzzle_labels: Optional[List[str]] = None,
) -> Tuple[List[str], str]:
    """
    Dessine les pages puzzles + solutions dans un PDF, à partir de la liste
    (puzzle, solution). Retourne (per_puzzle_hashes, book_hash).
    """
    if puzzles_per_page > puzzle_rows * puzzle_cols:
        raise ValueError("puzzles_per_page dépasse la grille de mise en page")
    if solutions_per_page > solution_rows * solution_cols:
        raise ValueError("solutions_per_page dépasse la grille de mise en page")

    page_no = 1
    with PdfPages(output_path) as pdf:
        # ---------- Pages puzzles ----------
        labels_pages = list(chunk(puzzle_labels, puzzles_per_page)) if puzzle_labels else []
        for page_i, page_puzzles in enumerate(chunk(puzzles, puzzles_per_page)):
            fig = draw_puzzles_page_figure(
                [p for (p, _s) in page_puzzles],
                trim_w=trim_w,
                trim_h=trim_h,
                rows=puzzle_rows,
                cols=puzzle_cols,
                page_num=page_no,
                title=title,
                puzzle_labels=labels_pages[page_i] if page_i < len(labels_pages) else None,
                start_idx=page_i * puzzles_per_page + 1,
            )
            pdf.savefig(fig, bbox_inches="tight", dpi=300)
            plt.close(fig)
            page_no += 1

        # ---------- Pages solutions ----------
        for sol_i, puz_sols in enumerate(chunk(puzzles, solutions_per_page)):
            fig = draw_solutions_page_figure(
                puz_sols,
                trim_w=trim_w,
                trim_h=trim_h,
                rows=solution_rows,
                cols=solution_cols,
                page_num=page_no,
                start_idx=sol_i * solutions_per_page + 1,
                given_color=given_color,
                added_color=added_color,
            )
            pdf.savefig(fig, bbox_inches="tight", dpi=300)
            plt.close(fig)
            page_no += 1

    log.info("%s : %d page(s), %d puzzle(s)", output_path, page_no - 1, len(puzzles))
    per_puzzle_hashes = [hash_grid_sha256(p) for (p, _s) in puzzles]
    return per_puzzle_hashes, book_hash_v1(puzzles)


def _solved_pairs(
    generated: List[Tuple[Grid, Grid]], rng: random.Random
) -> List[Tuple[Grid, Grid]]:
    return [(puzzle, solve_for_book(puzzle, full, rng)) for (puzzle, full) in generated]


# ---------- Mode 1 : un seul profil sur tout le livre ----------

def build_book_pdf(
    profile: HintProfile,
    output_path: str,
    n_puzzles: int,
    title: str,
    seed: Union[int, random.Random, None] = None,
    history_path: Optional[str] = HASH_DB_FILE,
    trim_w: float = TRIM_W_DEFAULT,
    trim_h: float = TRIM_H_DEFAULT,
    puzzles_per_page: int = 1,
    puzzle_rows: int = 1,
    puzzle_cols: int = 1,
    solutions_per_page: int = 9,
    solution_rows: int = 3,
    solution_cols: int = 3,
    given_color: str = DEFAULT_GIVEN_COLOR,
    added_color: str = DEFAULT_ADDED_COLOR,
) -> Tuple[List[Tuple[Grid, Grid]], List[str], str]:
    """
    Génère le PDF complet pour un profil unique, et renvoie :
    - la liste (puzzle, solution)
    - la liste des hashs par puzzle
    - le hash global du "livre"
    """
    rng = make_rng(seed)
    generated = generate_puzzles_for_profile(profile, n_puzzles, seed=rng, history_path=history_path)
    puzzles = _solved_pairs(generated, rng)

    label_fr = PROFILE_NAME_FR.get(profile.name, profile.name)
    per_puzzle_hashes, book_hash = _render_book_from_puzzles(
        puzzles=puzzles,
        output_path=output_path,
        title=f"{title} — Niveau {label_fr}",
        trim_w=trim_w,
        trim_h=trim_h,
        puzzles_per_page=puzzles_per_page,
        puzzle_rows=puzzle_rows,
        puzzle_cols=puzzle_cols,
        solutions_per_page=solutions_per_page,
        solution_rows=solution_rows,
        solution_cols=solution_cols,
        given_color=given_color,
        added_color=added_color,
        puzzle_labels=[label_fr] * n_puzzles,
    )
    return puzzles, per_puzzle_hashes, book_hash


# ---------- Mode 2 : plages de numéros avec profils différents ----------

def build_book_pdf_with_ranges(
    range_specs: List[Tuple[int, int, HintProfile]],
    output_path: str,
    title: str,
    seed: Union[int, random.Random, None] = None,
    history_path: Optional[str] = HASH_DB_FILE,
    trim_w: float = TRIM_W_DEFAULT,
    trim_h: float = TRIM_H_DEFAULT,
    puzzles_per_page: int = 1,
    puzzle_rows: int = 1,
    puzzle_cols: int = 1,
    solutions_per_page: int = 9,
    solution_rows: int = 3,
    solution_cols: int = 3,
    given_color: str = DEFAULT_GIVEN_COLOR,
    added_color: str = DEFAULT_ADDED_COLOR,
) -> Tuple[List[Tuple[Grid, Grid]], List[str], str]:
    """
    Génère un livre où certaines plages de numéros de puzzles
    ont des profils différents.

    range_specs = [
      (start_index, end_index, profile),
      ...
    ]
    """
    rng = make_rng(seed)
    range_specs = sorted(range_specs, key=lambda x: x[0])

    puzzles: List[Tuple[Grid, Grid]] = []
    puzzle_labels: List[str] = []
    for start_idx, end_idx, profile in range_specs:
        if end_idx < start_idx:
            raise ValueError(f"Plage invalide: {start_idx}–{end_idx}")
        count = end_idx - start_idx + 1
        print(f"Génération {count} puzzle(s) pour {profile.name} (puzzles {start_idx}–{end_idx})")

        part = generate_puzzles_for_profile(profile, count, seed=rng, history_path=history_path)
        puzzles.extend(_solved_pairs(part, rng))
        puzzle_labels.extend([PROFILE_NAME_FR.get(profile.name, profile.name)] * count)

    per_puzzle_hashes, book_hash = _render_book_from_puzzles(
        puzzles=puzzles,
        output_path=output_path,
        title=f"{title} — Mode mix",
        trim_w=trim_w,
        trim_h=trim_h,
        puzzles_per_page=puzzles_per_page,
        puzzle_rows=puzzle_rows,
        puzzle_cols=puzzle_cols,
        solutions_per_page=solutions_per_page,
        solution_rows=solution_rows,
        solution_cols=solution_cols,
        given_color=given_color,
        added_color=added_color,
        puzzle_labels=puzzle_labels,
    )
    return puzzles, per_puzzle_hashes, book_hash
