# sudoku_render.py
"""
Rendu texte d'une grille avec des caractères de dessin de boîte :

┌───────┬───────┬───────┐
│ 5 3   │   7   │       │
...
└───────┴───────┴───────┘
"""

from __future__ import annotations
import sys
from typing import List, Optional, TextIO

from sudoku_core import Grid

VERTICAL_LINE = "│"
HORIZONTAL_LINE = "─"
TOP_LEFT = "┌"
TOP_RIGHT = "┐"
BOTTOM_LEFT = "└"
BOTTOM_RIGHT = "┘"
DOWN_T = "┬"
UP_T = "┴"
RIGHT_T = "├"
LEFT_T = "┤"
PLUS = "┼"


def row_string(values: List[int]) -> str:
    """Une ligne de la grille ; case vide = espace, barre entre les piles."""
    parts = []
    for i, v in enumerate(values):
        cell = str(v) if v else " "
        if i % 3 == 0:
            parts.append(VERTICAL_LINE + " ")
        parts.append(cell + " ")
    parts.append(VERTICAL_LINE)
    return "".join(parts)


def _border(left: str, junction: str, right: str) -> str:
    segment = HORIZONTAL_LINE * 7
    return left + junction.join([segment] * 3) + right


def board_string(grid: Grid) -> str:
    lines = [_border(TOP_LEFT, DOWN_T, TOP_RIGHT)]
    for r in range(9):
        if r in (3, 6):
            lines.append(_border(RIGHT_T, PLUS, LEFT_T))
        lines.append(row_string(grid.get_row(r)))
    lines.append(_border(BOTTOM_LEFT, UP_T, BOTTOM_RIGHT))
    return "\n".join(lines)


def draw_board(grid: Grid, out: Optional[TextIO] = None) -> None:
    out = out or sys.stdout
    out.write(board_string(grid) + "\n")
    out.flush()
