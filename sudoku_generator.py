from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List, Optional, Set, Tuple, Union
import hashlib
import logging
import random

from sudoku_core import Grid, N_CELLS, make_rng
from sudoku_hash_db import HASH_DB_FILE, load_global_hashes, save_global_hashes

log = logging.getLogger(__name__)

Seed = Union[int, random.Random, None]


class InvalidHintRangeError(ValueError):
    """Bornes de suppression incohérentes (min_hints >= max_hints ou hors 0..81)."""


# ---------- Utils de hash / représentation ----------

def canon_str(grid: Grid) -> str:
    """Chaîne canonique pour une grille (ligne par ligne)."""
    return grid.to_string()


def hash_grid_sha256(grid: Grid) -> str:
    """Hash hex (64) d'une grille basée sur canon_str (exact match)."""
    return hashlib.sha256(canon_str(grid).encode("utf-8")).hexdigest().lower()


def book_hash_v1(puzzles: List[Tuple[Grid, Grid]]) -> str:
    """
    Hash d'ensemble indépendant de l'ordre :
    - hash de chaque puzzle,
    - tri,
    - payload versionné,
    - re-hash.
    """
    per = sorted(hash_grid_sha256(p) for (p, _s) in puzzles)
    payload = "sudoku-book:v1\ncount=" + str(len(per)) + "\n" + "\n".join(per) + "\n"
    return hashlib.sha256(payload.encode("utf-8")).hexdigest().lower()


# ====================================================
#   GÉNÉRATION D'UNE GRILLE COMPLÈTE
# ====================================================

def _rotate_left(row: List[int], k: int) -> List[int]:
    k %= len(row)
    return row[k:] + row[:k]


def generate_complete_grid(seed: Seed = None) -> Grid:
    """
    Grille complète valide, déterministe pour une graine donnée.

    1. permutation aléatoire de 1..9 en première ligne ;
    2. chaque ligne suivante = précédente décalée de 1 (début de bande)
       ou de 3 (dans la bande) ;
    3. mélange des lignes dans chaque bande, des colonnes dans chaque pile ;
    4. renommage aléatoire des chiffres.
    """
    rng = make_rng(seed)

    first = list(range(1, 10))
    rng.shuffle(first)
    rows = [first]
    for r in range(1, 9):
        shift = 1 if r % 3 == 0 else 3
        rows.append(_rotate_left(rows[-1], shift))

    # Permutations internes aux bandes (lignes) et aux piles (colonnes)
    row_order: List[int] = []
    col_order: List[int] = []
    for band in range(3):
        idx = [3 * band + i for i in range(3)]
        rng.shuffle(idx)
        row_order.extend(idx)
    for stack in range(3):
        idx = [3 * stack + i for i in range(3)]
        rng.shuffle(idx)
        col_order.extend(idx)
    rows = [[rows[r][c] for c in col_order] for r in row_order]

    # Substitution cohérente des chiffres
    relabel = list(range(1, 10))
    rng.shuffle(relabel)
    mapping = {d: relabel[d - 1] for d in range(1, 10)}
    return Grid.from_rows([[mapping[v] for v in row] for row in rows])


# ====================================================
#   SUPPRESSION D'INDICES
# ====================================================

def remove_cells(grid: Grid, seed: Seed, min_hints: int, max_hints: int) -> int:
    """
    Vide n cases distinctes, n tiré uniformément dans [min_hints, max_hints).
    Retourne le nombre d'indices restants (81 - n), soit
    81 - max_hints < indices <= 81 - min_hints.

    Aucune vérification d'unicité : le puzzle peut avoir plusieurs solutions.
    """
    if not (0 <= min_hints < max_hints <= N_CELLS):
        raise InvalidHintRangeError(
            f"Plage invalide : min_hints={min_hints}, max_hints={max_hints} "
            f"(attendu 0 <= min_hints < max_hints <= 81)"
        )
    rng = make_rng(seed)

    target = rng.randrange(min_hints, max_hints)
    filled = [i for i, v in enumerate(grid.cells) if v]
    if target > len(filled):
        raise InvalidHintRangeError(
            f"Impossible de vider {target} cases : seulement {len(filled)} remplies"
        )

    cleared: Set[int] = set()
    while len(cleared) < target:
        idx = rng.choice(filled)
        if idx in cleared:
            continue
        r, c = divmod(idx, 9)
        grid.clear(r, c)
        cleared.add(idx)

    return N_CELLS - len(cleared)


def generate_puzzle(
    grid_seed: Seed,
    removal_seed: Seed,
    min_hints: int,
    max_hints: int,
) -> Tuple[Grid, Grid]:
    """Retourne (puzzle, grille complète) à partir des deux graines."""
    full = generate_complete_grid(grid_seed)
    puzzle = full.copy()
    hints = remove_cells(puzzle, removal_seed, min_hints, max_hints)
    log.info("Puzzle généré : %d indices", hints)
    return puzzle, full


# ====================================================
#   PROFILS & GÉNÉRATION MULTI-PUZZLES
# ====================================================

@dataclass(frozen=True)
class HintProfile:
    """Profil de difficulté : plage [min_hints, max_hints) de cases vidées."""

    name: str
    min_hints: int
    max_hints: int

    def generate(self, rng: random.Random) -> Tuple[Grid, Grid]:
        return generate_puzzle(
            rng.getrandbits(64), rng.getrandbits(64), self.min_hints, self.max_hints
        )


# profils concrets
EASY_PLUS_PROFILE = HintProfile("easy_plus", 20, 30)
EASY_PROFILE = HintProfile("easy", 30, 38)
MEDIUM_PROFILE = HintProfile("medium", 38, 46)
HARD_PROFILE = HintProfile("hard", 46, 54)

PROFILES: Dict[str, HintProfile] = {
    EASY_PLUS_PROFILE.name: EASY_PLUS_PROFILE,
    EASY_PROFILE.name: EASY_PROFILE,
    MEDIUM_PROFILE.name: MEDIUM_PROFILE,
    HARD_PROFILE.name: HARD_PROFILE,
}


def generate_puzzles_for_profile(
    profile: HintProfile,
    count: int,
    seed: Seed = None,
    history_path: Optional[str] = HASH_DB_FILE,
) -> List[Tuple[Grid, Grid]]:
    """
    Génère `count` puzzles pour un profil donné, en garantissant :
      - pas de doublons dans la génération courante
      - pas de doublons vis-à-vis de l'historique global
        (fichier history_path, via sudoku_hash_db ; None = pas d'historique).
    """
    rng = make_rng(seed)
    global_hashes = load_global_hashes(history_path) if history_path else set()

    puzzles: List[Tuple[Grid, Grid]] = []
    seen_local: Set[str] = set()
    tries = 0
    max_tries = count * 10000

    while len(puzzles) < count and tries < max_tries:
        if tries and tries % 500 == 0:
            print(f"[{profile.name}] tries={tries}, ok={len(puzzles)}/{count}")
        tries += 1

        puzzle, full = profile.generate(rng)
        sig = canon_str(puzzle)
        h = hash_grid_sha256(puzzle)

        # 1. doublon local (dans cette série)
        if sig in seen_local:
            continue

        # 2. doublon global (dans tous les livres déjà générés)
        if h in global_hashes:
            continue

        seen_local.add(sig)
        global_hashes.add(h)
        puzzles.append((puzzle, full))

    if len(puzzles) < count:
        raise RuntimeError(f"Seulement {len(puzzles)} puzzles générés pour le profil {profile.name}")

    if history_path:
        save_global_hashes(global_hashes, history_path)
    log.info("[%s] %d puzzle(s) générés en %d essais", profile.name, count, tries)
    return puzzles
