# sudoku_solver.py
"""
Solveur par effondrement d'entropie avec retour arrière.

Principe :
- on remplit toujours la case vide qui a le moins de candidats ;
- une case à candidat unique est remplie directement (cascade) ;
- une case à plusieurs candidats donne lieu à un coup (Move) choisi par
  anticipation d'un demi-coup : on garde la valeur qui laisse la case
  suivante la plus contrainte ;
- une case sans candidat déclenche le retour arrière : on défait le dernier
  coup et toutes ses cascades, puis on tente une autre valeur.

Le choix par anticipation est une heuristique ; seul un résultat validé
est garanti correct.
"""

from __future__ import annotations
import logging
import random
from dataclasses import dataclass, field
from typing import List, Optional, Set, Tuple, Union

from sudoku_core import EntropyResult, Grid, Pos, find_conflicts, make_rng

log = logging.getLogger(__name__)

# États de la machine
PROPAGATING = "propagating"
BACKTRACKING = "backtracking"
DONE = "done"
FAILED = "failed"


@dataclass
class Move:
    """Décision ambiguë et ses conséquences forcées (cascades)."""

    position: Pos
    new_value: int
    cascades: List[Pos] = field(default_factory=list)
    excluded: Set[int] = field(default_factory=set)  # valeurs déjà réfutées ici


@dataclass
class SolveReport:
    solved: bool = False
    reason: Optional[str] = None
    steps: int = 0
    decisions: int = 0
    forced: int = 0
    backtracks: int = 0
    max_depth: int = 0

    def __bool__(self) -> bool:
        return self.solved


def _decide(
    grid: Grid,
    pos: Pos,
    options: Set[int],
    history: List[Move],
    report: SolveReport,
) -> Tuple[str, Optional[EntropyResult]]:
    """Choix entre plusieurs candidats, avec anticipation d'un demi-coup."""
    row, col = pos
    scored = []
    for value in sorted(options):
        grid.set(row, col, value)
        nxt = grid.find_least_entropy()
        if nxt is None:
            # dernière case : cette valeur termine la grille
            return DONE, None
        if nxt[1]:
            scored.append((value, nxt))

    if not scored:
        grid.clear(row, col)
        log.debug("Aucune valeur viable en %s, retour arrière", pos)
        return BACKTRACKING, None

    value, nxt = min(scored, key=lambda item: len(item[1][1]))
    grid.set(row, col, value)
    history.append(Move(pos, value))
    report.decisions += 1
    report.max_depth = max(report.max_depth, len(history))
    log.debug("Coup %s = %d parmi %s (profondeur %d)", pos, value, sorted(options), len(history))
    return PROPAGATING, nxt


def _backtrack(
    grid: Grid,
    history: List[Move],
    rng: random.Random,
    report: SolveReport,
) -> Tuple[str, Optional[EntropyResult]]:
    """
    Défait le dernier coup et cherche une valeur de remplacement.
    Remonte l'historique tant qu'aucune valeur ne convient.
    """
    while history:
        move = history.pop()
        report.backtracks += 1
        for (r, c) in move.cascades:
            grid.clear(r, c)
        row, col = move.position
        grid.clear(row, col)

        options = grid.candidates_at(row, col)
        assert options is not None, f"case {move.position} encore remplie après annulation"

        refuted = move.excluded | {move.new_value}
        survivors = []
        for value in sorted(options - refuted):
            grid.set(row, col, value)
            nxt = grid.find_least_entropy()
            if nxt is None:
                return DONE, None
            if nxt[1]:
                survivors.append((value, nxt))

        if survivors:
            value, nxt = rng.choice(survivors)
            grid.set(row, col, value)
            history.append(Move(move.position, value, excluded=refuted))
            log.debug(
                "Substitut pour %s (%d) : %d, prochaine case %s, candidats %s",
                move.position, move.new_value, value, nxt[0], sorted(nxt[1]),
            )
            return PROPAGATING, nxt

        grid.clear(row, col)
        log.debug("Plus d'alternative en %s, on remonte d'un cran", move.position)

    return FAILED, None


def solve(
    grid: Grid,
    rng: Union[int, random.Random, None] = None,
    max_steps: Optional[int] = None,
) -> SolveReport:
    """
    Résout la grille en place.

    Retourne un SolveReport ; solved=False (avec reason) si l'historique est
    épuisé, si les indices se contredisent ou si max_steps est dépassé.
    """
    rng = make_rng(rng)
    report = SolveReport()

    conflicts = find_conflicts(grid)
    if conflicts:
        kind, index, digit = conflicts[0]
        report.reason = f"indices contradictoires ({kind} {index + 1}, chiffre {digit})"
        log.warning("Résolution impossible : %s", report.reason)
        return report

    history: List[Move] = []
    state = PROPAGATING
    current = grid.find_least_entropy()

    while state not in (DONE, FAILED):
        if state == BACKTRACKING:
            state, current = _backtrack(grid, history, rng, report)
            if state == FAILED:
                report.reason = "historique épuisé : grille insoluble par cette stratégie"
            continue

        if current is None:
            state = DONE
            continue
        if max_steps is not None and report.steps >= max_steps:
            report.reason = f"limite de {max_steps} étapes atteinte"
            state = FAILED
            continue
        report.steps += 1

        (row, col), options = current
        if not options:
            state = BACKTRACKING
        elif len(options) == 1:
            (value,) = tuple(options)
            grid.set(row, col, value)
            report.forced += 1
            if history:
                history[-1].cascades.append((row, col))
            current = grid.find_least_entropy()
        else:
            state, current = _decide(grid, (row, col), options, history, report)

    if state == DONE:
        report.solved = True
        log.debug(
            "Grille résolue : %d étapes, %d coups, %d retours arrière",
            report.steps, report.decisions, report.backtracks,
        )
    else:
        log.warning("Résolution impossible : %s", report.reason)
    return report


def solve_string(
    representation: str,
    rng: Union[int, random.Random, None] = None,
    max_steps: Optional[int] = None,
) -> Tuple[Grid, SolveReport]:
    """Résout une grille donnée sous forme de chaîne de 81 chiffres."""
    grid = Grid.from_string(representation)
    report = solve(grid, rng=rng, max_steps=max_steps)
    return grid, report
