"""
Puzzle generation configuration.

The random seed is read from the SUNMOON_SEED environment variable when it
is not given explicitly; with neither, generation is non-deterministic.
"""

from dataclasses import dataclass
import os
from typing import Optional

import numpy as np

from .constants import DIFFICULTY
from .types import InvalidConfigurationError


@dataclass
class PuzzleConfig:
    """Configuration for generating one puzzle."""

    board_size: int = 6
    difficulty: str = "MEDIUM"
    seed: Optional[int] = None

    # Retry budgets
    max_solution_attempts: int = 100
    max_puzzle_attempts: int = 50

    # Constraint and fallback tuning
    constraint_ratio: float = 0.2
    fallback_keep_factor: float = 0.8

    verbose: bool = False

    def __post_init__(self):
        if self.seed is None:
            env_seed = os.getenv("SUNMOON_SEED", "")
            if env_seed:
                self.seed = int(env_seed)

        self.difficulty = str(self.difficulty).upper()
        if self.difficulty not in DIFFICULTY:
            raise InvalidConfigurationError(
                f"Unknown difficulty {self.difficulty!r}; "
                f"expected one of {sorted(DIFFICULTY)}"
            )
        if (
            isinstance(self.board_size, bool)
            or not isinstance(self.board_size, (int, np.integer))
            or self.board_size < 2
            or self.board_size % 2 != 0
        ):
            raise InvalidConfigurationError(
                f"Board size must be a positive even number, got {self.board_size!r}"
            )
        self.board_size = int(self.board_size)
        if self.max_solution_attempts < 1 or self.max_puzzle_attempts < 1:
            raise InvalidConfigurationError("Attempt budgets must be at least 1")
        if not 0.0 <= self.constraint_ratio <= 1.0:
            raise InvalidConfigurationError(
                f"constraint_ratio must be in [0, 1], got {self.constraint_ratio}"
            )

    @property
    def fill_fraction(self) -> float:
        return DIFFICULTY[self.difficulty]["filled_cell_percentage"]

    @property
    def label(self) -> str:
        return DIFFICULTY[self.difficulty]["label"]

    def make_rng(self) -> np.random.RandomState:
        """Seeded randomness source shared by every generation step."""
        return np.random.RandomState(self.seed)
