# sudoku_cli.py
"""
Interface en ligne de commande :

    sudoku-wfc solve [GRILLE]          résout une grille (81 chiffres, 0 = vide)
    sudoku-wfc generate [...]          génère un puzzle à partir de deux graines
    sudoku-wfc book --output livre.pdf génère un livre PDF puzzles + solutions
"""

from __future__ import annotations
import argparse
import logging
import random
import sys
import time
from typing import List, Optional

from sudoku_core import Grid, is_solved, is_valid
from sudoku_generator import PROFILES, generate_puzzle
from sudoku_hash_db import HASH_DB_FILE
from sudoku_render import board_string
from sudoku_solver import solve

# Config par défaut
DEFAULT_BOARD = "530070000600195000098000060800060003400803001700020006060000280000419005000080079"
DEFAULT_N_PUZZLES = 20
DEFAULT_BOOK_TITLE = "Sudoku"
DEFAULT_PROFILE = "easy"
DEFAULT_MIN_HINTS = 20
DEFAULT_MAX_HINTS = 30


def _random_seed() -> int:
    return random.SystemRandom().getrandbits(64)


def _seed(value: str) -> int:
    try:
        seed = int(value, 0)
    except ValueError:
        raise argparse.ArgumentTypeError(f"graine invalide : {value!r}")
    if not 0 <= seed < 2 ** 64:
        raise argparse.ArgumentTypeError(f"la graine doit tenir sur 64 bits : {value!r}")
    return seed


def _solve_and_report(grid: Grid, seed: int, max_steps: Optional[int]) -> int:
    start = time.perf_counter()
    report = solve(grid, rng=seed, max_steps=max_steps)
    duration_ms = (time.perf_counter() - start) * 1000

    print(board_string(grid))
    if not report.solved:
        print(f"Le solveur n'a pas pu terminer la grille : {report.reason}", file=sys.stderr)
        print(f"Durée: {duration_ms:.0f}ms")
        return 1
    if is_solved(grid):
        print("La grille est valide !")
    else:
        print("La solution est invalide !")
    print(
        f"Étapes: {report.steps}, coups: {report.decisions}, "
        f"retours arrière: {report.backtracks}"
    )
    print(f"Durée: {duration_ms:.0f}ms")
    return 0 if is_solved(grid) else 1


def cmd_solve(args: argparse.Namespace) -> int:
    grid = Grid.from_string(args.board)
    seed = args.seed if args.seed is not None else _random_seed()
    print(board_string(grid))
    if not is_valid(grid):
        print("La grille de départ contient des doublons.", file=sys.stderr)
    print(f"Graine solveur: {seed}")
    return _solve_and_report(grid, seed, args.max_steps)


def cmd_generate(args: argparse.Namespace) -> int:
    grid_seed = args.grid_seed if args.grid_seed is not None else _random_seed()
    removal_seed = args.removal_seed if args.removal_seed is not None else _random_seed()
    puzzle, _full = generate_puzzle(grid_seed, removal_seed, args.min_hints, args.max_hints)

    print(f"Graine grille: {grid_seed}")
    print(f"Graine suppression: {removal_seed}")
    print(f"Indices: {puzzle.count_hints()}")
    print(puzzle.to_string())
    print(board_string(puzzle))
    if args.solve:
        seed = args.seed if args.seed is not None else _random_seed()
        print(f"Graine solveur: {seed}")
        return _solve_and_report(puzzle, seed, args.max_steps)
    return 0


def cmd_book(args: argparse.Namespace) -> int:
    # import tardif : matplotlib n'est nécessaire que pour le livre
    from sudoku_book import build_book_pdf

    seed = args.seed if args.seed is not None else _random_seed()
    print(f"Graine livre: {seed}")
    _puzzles, _hashes, book_hash = build_book_pdf(
        PROFILES[args.profile],
        output_path=args.output,
        n_puzzles=args.count,
        title=args.title,
        seed=seed,
        history_path=None if args.no_history else args.history,
    )
    print(f"Livre écrit : {args.output}")
    print(f"Hash du livre : {book_hash}")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="sudoku-wfc",
        description="Génération et résolution de Sudoku par effondrement d'entropie.",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="journalisation détaillée")
    sub = parser.add_subparsers(dest="command", required=True)

    p_solve = sub.add_parser("solve", help="résoudre une grille")
    p_solve.add_argument("board", nargs="?", default=DEFAULT_BOARD, help="81 chiffres, 0 = case vide")
    p_solve.add_argument("--seed", type=_seed, help="graine du retour arrière")
    p_solve.add_argument("--max-steps", type=int, help="nombre maximal d'étapes du solveur")
    p_solve.set_defaults(func=cmd_solve)

    p_gen = sub.add_parser("generate", help="générer un puzzle")
    p_gen.add_argument("--grid-seed", type=_seed, help="graine de la grille complète")
    p_gen.add_argument("--removal-seed", type=_seed, help="graine de la suppression des cases")
    p_gen.add_argument("--min-hints", type=int, default=DEFAULT_MIN_HINTS)
    p_gen.add_argument("--max-hints", type=int, default=DEFAULT_MAX_HINTS)
    p_gen.add_argument("--solve", action="store_true", help="résoudre le puzzle généré")
    p_gen.add_argument("--seed", type=_seed, help="graine du retour arrière")
    p_gen.add_argument("--max-steps", type=int, help="nombre maximal d'étapes du solveur")
    p_gen.set_defaults(func=cmd_generate)

    p_book = sub.add_parser("book", help="générer un livre PDF")
    p_book.add_argument("--output", required=True, help="chemin du PDF")
    p_book.add_argument("--profile", choices=sorted(PROFILES), default=DEFAULT_PROFILE)
    p_book.add_argument("--count", type=int, default=DEFAULT_N_PUZZLES)
    p_book.add_argument("--title", default=DEFAULT_BOOK_TITLE)
    p_book.add_argument("--seed", type=_seed)
    p_book.add_argument("--history", default=HASH_DB_FILE, help="fichier des hashs déjà utilisés")
    p_book.add_argument("--no-history", action="store_true", help="ne pas lire ni écrire l'historique")
    p_book.set_defaults(func=cmd_book)
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )
    try:
        return args.func(args)
    except ValueError as exc:
        parser.error(str(exc))


if __name__ == "__main__":
    sys.exit(main())
