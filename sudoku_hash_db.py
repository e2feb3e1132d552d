# sudoku_hash_db.py
"""
Historique des puzzles déjà émis (tous profils confondus), pour ne jamais
redonner deux fois la même grille d'une génération à l'autre.

Format : un hash SHA256 (64 caractères hexa) par ligne.
"""

import logging
import os
import re
from typing import Set

log = logging.getLogger(__name__)

# Fichier global
HASH_DB_FILE = "puzzle_hashes_all.txt"

_HASH_RE = re.compile(r"^[0-9a-f]{64}$")


def load_global_hashes(path: str = HASH_DB_FILE) -> Set[str]:
    """Hashes déjà utilisés ; un fichier absent équivaut à un historique vide."""
    hashes = set()
    if not os.path.exists(path):
        return hashes
    with open(path, "r", encoding="utf-8") as f:
        for lineno, line in enumerate(f, start=1):
            h = line.strip().lower()
            if not h:
                continue
            if not _HASH_RE.match(h):
                log.warning("%s:%d : ligne ignorée (hash invalide)", path, lineno)
                continue
            hashes.add(h)
    log.debug("%d hash(es) chargés depuis %s", len(hashes), path)
    return hashes


def save_global_hashes(hashes: Set[str], path: str = HASH_DB_FILE) -> None:
    """Réécrit l'historique complet, trié pour des diffs stables."""
    folder = os.path.dirname(path)
    if folder:
        os.makedirs(folder, exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        for h in sorted(hashes):
            f.write(h + "\n")
    log.debug("%d hash(es) écrits dans %s", len(hashes), path)
