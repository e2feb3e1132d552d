# sudoku_core.py
"""
Moteur Sudoku commun :
- grille 9x9 stockée à plat (81 cases, ligne par ligne)
- vues ligne / colonne / bloc 3x3
- calcul de candidats et sélection de la case de plus faible entropie
- UNITS et validation
"""

from __future__ import annotations
import random
from typing import Iterable, List, Optional, Sequence, Set, Tuple, Union

Pos = Tuple[int, int]
Rows = List[List[int]]
EntropyResult = Tuple[Pos, Set[int]]

DIGITS = frozenset(range(1, 10))
N_CELLS = 81


class MalformedBoardError(ValueError):
    """Représentation de grille invalide (pas exactement 81 chiffres 0-9)."""


# ---------- UNITS communs ----------

UNITS: List[List[Pos]] = []
UNIT_KINDS: List[Tuple[str, int]] = []

# Lignes
for r in range(9):
    UNITS.append([(r, c) for c in range(9)])
    UNIT_KINDS.append(("row", r))
# Colonnes
for c in range(9):
    UNITS.append([(r, c) for r in range(9)])
    UNIT_KINDS.append(("column", c))
# Blocs 3x3
for br in range(0, 9, 3):
    for bc in range(0, 9, 3):
        UNITS.append([(br + dr, bc + dc) for dr in range(3) for dc in range(3)])
        UNIT_KINDS.append(("tile", br + bc // 3))


def _check_value(v: int) -> int:
    if isinstance(v, bool) or not isinstance(v, int) or not 0 <= v <= 9:
        raise MalformedBoardError(f"Valeur de case invalide : {v!r} (attendu 0..9)")
    return v


# ---------- Grille ----------

class Grid:
    """
    Grille 9x9 de 81 cases (0 = vide). L'index linéaire de (row, col)
    vaut row * 9 + col.
    """

    __slots__ = ("_cells",)

    def __init__(self, cells: Optional[Sequence[int]] = None):
        if cells is None:
            cells = [0] * N_CELLS
        cells = list(cells)
        if len(cells) != N_CELLS:
            raise MalformedBoardError(f"Une grille contient 81 cases, reçu {len(cells)}")
        self._cells: List[int] = [_check_value(v) for v in cells]

    @classmethod
    def from_string(cls, representation: str) -> "Grid":
        """Construit une grille depuis la chaîne de 81 chiffres ('0' = vide)."""
        if not isinstance(representation, str) or len(representation) != N_CELLS:
            raise MalformedBoardError(
                f"La représentation doit faire 81 caractères, reçu {len(representation)!r}"
                if isinstance(representation, str)
                else f"Représentation non textuelle : {type(representation).__name__}"
            )
        bad = [ch for ch in representation if ch not in "0123456789"]
        if bad:
            raise MalformedBoardError(f"Caractère non numérique dans la grille : {bad[0]!r}")
        return cls(int(ch) for ch in representation)

    @classmethod
    def from_rows(cls, rows: Iterable[Iterable[int]]) -> "Grid":
        rows = [list(row) for row in rows]
        if len(rows) != 9 or any(len(row) != 9 for row in rows):
            raise MalformedBoardError("Une grille contient 9 lignes de 9 cases")
        return cls(v for row in rows for v in row)

    # ---------- accès ----------

    def get(self, row: int, col: int) -> int:
        return self._cells[row * 9 + col]

    def set(self, row: int, col: int, value: int) -> None:
        self._cells[row * 9 + col] = _check_value(value)

    def clear(self, row: int, col: int) -> None:
        self._cells[row * 9 + col] = 0

    @property
    def cells(self) -> Tuple[int, ...]:
        return tuple(self._cells)

    def copy(self) -> "Grid":
        return Grid(self._cells)

    def rows(self) -> Rows:
        return [self._cells[r * 9:(r + 1) * 9] for r in range(9)]

    def to_string(self) -> str:
        return "".join(str(v) for v in self._cells)

    def count_hints(self) -> int:
        return sum(1 for v in self._cells if v)

    def empty_positions(self) -> List[Pos]:
        return [divmod(i, 9) for i, v in enumerate(self._cells) if v == 0]

    def is_complete(self) -> bool:
        return 0 not in self._cells

    def __eq__(self, other):
        if not isinstance(other, Grid):
            return NotImplemented
        return self._cells == other._cells

    def __hash__(self):
        return hash(tuple(self._cells))

    def __repr__(self):
        return f"Grid({self.to_string()!r})"

    def __str__(self):
        return self.to_string()

    # ---------- vues ----------

    def get_row(self, row: int) -> List[int]:
        return self._cells[row * 9:(row + 1) * 9]

    def get_column(self, col: int) -> List[int]:
        return self._cells[col::9]

    def get_tile(self, tile_row: int, tile_col: int) -> List[int]:
        r0, c0 = 3 * tile_row, 3 * tile_col
        return [self._cells[(r0 + dr) * 9 + c0 + dc] for dr in range(3) for dc in range(3)]

    # ---------- entropie ----------

    def candidates_at(self, row: int, col: int) -> Optional[Set[int]]:
        """
        Candidats d'une case vide : chiffres absents de sa ligne, sa colonne
        et son bloc. None si la case est déjà remplie.
        """
        if self._cells[row * 9 + col] != 0:
            return None
        used = set(self.get_row(row)) | set(self.get_column(col))
        used |= set(self.get_tile(row // 3, col // 3))
        return set(DIGITS - used)

    def find_least_entropy(self) -> Optional[EntropyResult]:
        """
        Case vide ayant le moins de candidats (parcours ligne par ligne,
        la première trouvée gagne en cas d'égalité).
        Retourne None si la grille est pleine ; un ensemble vide signale
        une contradiction.
        """
        best: Optional[EntropyResult] = None
        for idx in range(N_CELLS):
            if self._cells[idx]:
                continue
            r, c = divmod(idx, 9)
            cands = self.candidates_at(r, c)
            if best is None or len(cands) < len(best[1]):
                best = ((r, c), cands)
                if not cands:
                    break  # impossible de faire plus petit
        return best


# ---------- Validation ----------

def find_conflicts(grid: Grid) -> List[Tuple[str, int, int]]:
    """
    Doublons de chiffres non nuls dans les 27 unités.
    Retourne une liste de (type d'unité, index, chiffre).
    """
    conflicts = []
    for unit, (kind, index) in zip(UNITS, UNIT_KINDS):
        seen: Set[int] = set()
        reported: Set[int] = set()
        for (r, c) in unit:
            v = grid.get(r, c)
            if not v:
                continue
            if v in seen and v not in reported:
                conflicts.append((kind, index, v))
                reported.add(v)
            seen.add(v)
    return conflicts


def is_valid(grid: Grid) -> bool:
    return not find_conflicts(grid)


def is_solved(grid: Grid) -> bool:
    return grid.is_complete() and is_valid(grid)



# ---------- Aléatoire ----------

def make_rng(seed: Union[int, random.Random, None] = None) -> random.Random:
    """Générateur explicite : réutilise une instance ou en crée une graine donnée."""
    if isinstance(seed, random.Random):
        return seed
    return random.Random(seed)
