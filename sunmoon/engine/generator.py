"""
Puzzle generation: solution -> clues -> constraints -> solvability check.

The pipeline is retried a bounded number of times; when every attempt is
rejected the puzzle is built from a fallback-tier solution with a reduced
clue count and a small set of solution-consistent constraints.
"""

from dataclasses import replace
from typing import List, Optional

from .config import PuzzleConfig
from .constants import Cell, Relation, format_grid
from .constraints import derive_constraints
from .rules import validate
from .selector import cells_to_keep, select_prefilled
from .solution import SolutionGenerator
from .solvability import verify_solvable
from .types import Board, Constraint, PuzzleInstance, freeze_board


class PuzzleGenerator:
    """
    Builds PuzzleInstance objects for one configuration.

    All randomness is drawn from ``rng`` (by default ``config.make_rng()``),
    so a fixed seed reproduces the same sequence of puzzles.
    """

    def __init__(self, config: PuzzleConfig, rng=None):
        self.config = config
        self.rng = rng if rng is not None else config.make_rng()
        self.solutions = SolutionGenerator(
            rng=self.rng,
            max_attempts=config.max_solution_attempts,
            verbose=config.verbose,
        )
        self.call_count = 0

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def generate(self) -> PuzzleInstance:
        cfg = self.config
        size = cfg.board_size
        self.call_count += 1

        if cfg.verbose:
            print(f"Generating new puzzle with size: {size} difficulty: {cfg.difficulty}")

        for attempt in range(1, cfg.max_puzzle_attempts + 1):
            solution, tier = self.solutions.generate(size)

            errors = validate(solution, size).errors
            if errors:
                if cfg.verbose:
                    print(f"Attempt {attempt}: drawn solution has {len(errors)} errors, trying again")
                continue

            keep = cells_to_keep(size, cfg.fill_fraction)
            board, prefilled = select_prefilled(solution, keep, size, self.rng)
            constraints = derive_constraints(
                solution, board, size, self.rng, ratio=cfg.constraint_ratio
            )

            if verify_solvable(board, constraints, solution, size):
                return self._instance(board, prefilled, constraints, attempt, tier)

            if cfg.verbose:
                print(f"Attempt {attempt}: puzzle not derivable from its clues, trying again")

        return self.fallback_puzzle(attempts=cfg.max_puzzle_attempts)

    def fallback_puzzle(self, attempts: int = 0) -> PuzzleInstance:
        """Puzzle from a fallback-tier solution with fewer clues and constraints."""
        cfg = self.config
        size = cfg.board_size
        solution, tier = self.solutions.fallback(size)

        if cfg.verbose:
            print(f"Using fallback puzzle generation ({tier})")
            print(format_grid(solution))

        keep = cells_to_keep(size, cfg.fill_fraction * cfg.fallback_keep_factor)
        board, prefilled = select_prefilled(solution, keep, size, self.rng)
        constraints = self._fallback_constraints(solution, board, size)
        return self._instance(board, prefilled, constraints, attempts, tier)

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _fallback_constraints(self, solution: Board, board: Board, size: int) -> List[Constraint]:
        """Up to ``size`` constraints, alternating horizontal and vertical."""
        constraints: List[Constraint] = []
        if size < 2:
            return constraints

        for i in range(size):
            horizontal = i % 2 == 0
            for _ in range(size * 2):
                if horizontal:
                    r1, c1 = int(self.rng.randint(size)), int(self.rng.randint(size - 1))
                    r2, c2 = r1, c1 + 1
                else:
                    r1, c1 = int(self.rng.randint(size - 1)), int(self.rng.randint(size))
                    r2, c2 = r1 + 1, c1
                if board[r1][c1] != Cell.EMPTY and board[r2][c2] != Cell.EMPTY:
                    continue
                relation = (
                    Relation.SAME if solution[r1][c1] == solution[r2][c2] else Relation.DIFFERENT
                )
                candidate = Constraint(r1, c1, r2, c2, relation)
                if candidate in constraints:
                    continue
                constraints.append(candidate)
                break
        return constraints

    def _instance(self, board, prefilled, constraints, attempts, tier) -> PuzzleInstance:
        return PuzzleInstance(
            board=freeze_board(board),
            prefilled=frozenset(prefilled),
            constraints=tuple(constraints),
            size=self.config.board_size,
            difficulty=self.config.difficulty,
            attempts=attempts,
            tier=tier,
        )


def generate_puzzle(
    board_size: int,
    difficulty: str,
    seed: Optional[int] = None,
    rng=None,
    config: Optional[PuzzleConfig] = None,
    verbose: bool = False,
) -> PuzzleInstance:
    """
    Generate one puzzle.

    Args:
        board_size: Even board size (4, 6 and 8 are the supported tiers).
        difficulty: "EASY", "MEDIUM" or "HARD".
        seed: Seed for the randomness source (ignored when ``rng`` is given).
        rng: Optional numpy RandomState to draw from.
        config: Optional base config; board_size/difficulty still apply.
        verbose: Print progress and fallback diagnostics.

    Raises:
        InvalidConfigurationError: odd size or unknown difficulty.
    """
    if config is None:
        config = PuzzleConfig(
            board_size=board_size, difficulty=difficulty, seed=seed, verbose=verbose
        )
    else:
        config = replace(
            config,
            board_size=board_size,
            difficulty=difficulty,
            seed=seed if seed is not None else config.seed,
            verbose=verbose or config.verbose,
        )
    return PuzzleGenerator(config, rng=rng).generate()
