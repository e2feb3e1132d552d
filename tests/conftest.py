# tests/conftest.py
import sys
from pathlib import Path

import matplotlib

matplotlib.use("Agg")

import pytest  # noqa: E402

# Add project root to sys.path so the sudoku_* modules can be imported in tests
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

CLASSIC_PUZZLE = "530070000600195000098000060800060003400803001700020006060000280000419005000080079"
CLASSIC_SOLUTION = "534678912672195348198342567859761423426853791713924856961537284287419635345286179"


@pytest.fixture
def classic_puzzle():
    from sudoku_core import Grid

    return Grid.from_string(CLASSIC_PUZZLE)


@pytest.fixture
def classic_solution():
    from sudoku_core import Grid

    return Grid.from_string(CLASSIC_SOLUTION)
