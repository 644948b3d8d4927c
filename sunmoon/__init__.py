"""Sun/Moon puzzle engine: generation, solvability checking and validation."""

from .engine import (
    Cell, Constraint, PuzzleConfig, PuzzleInstance, Relation,
    generate_puzzle, reset_board, validate,
)
from .config import EngineConfig, load_config, make_engine_config

__version__ = "0.1.0"
