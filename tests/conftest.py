# tests/conftest.py
import sys
from pathlib import Path

import numpy as np
import pytest

# Add project root to sys.path so "sunmoon" can be imported without installing
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from sunmoon.engine import Cell

S, M, E = Cell.SUN, Cell.MOON, Cell.EMPTY


@pytest.fixture
def rng():
    """Seeded randomness source."""
    return np.random.RandomState(1234)


@pytest.fixture
def solved_4x4():
    return [
        [S, M, S, M],
        [M, S, M, S],
        [S, M, M, S],
        [M, S, S, M],
    ]


@pytest.fixture(autouse=True)
def _no_env_seed(monkeypatch):
    monkeypatch.delenv("SUNMOON_SEED", raising=False)
