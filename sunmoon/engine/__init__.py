from .config import PuzzleConfig
from .constants import (
    BOARD_SIZES, CANNED_SOLUTIONS, DIFFICULTY, GAME_RULES,
    Cell, ErrorType, Relation, format_grid, opposite,
)
from .types import (
    Board, Constraint, InvalidConfigurationError, InvalidMoveError, Position,
    PuzzleInstance, PuzzleState, SunMoonError, ValidationError, ValidationResult,
)
from .rules import (
    board_state, check_move, has_adjacent_violation, is_filled,
    reset_board, validate, verify_solution,
)
from .solution import SolutionGenerator, generate_solution
from .selector import cells_to_keep, select_prefilled
from .constraints import candidate_constraints, derive_constraints
from .solvability import propagate, verify_solvable
from .generator import PuzzleGenerator, generate_puzzle
from .pregeneration import (
    PuzzleRecord, generate_puzzle_dataset,
    load_puzzle_dataset, analyze_puzzle_dataset,
)
