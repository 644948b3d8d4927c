"""Choosing which cells of a solved board stay visible as clues."""

import math
from typing import FrozenSet, Sequence, Tuple

from .constants import Cell
from .types import Board, Position, copy_board


def cells_to_keep(size: int, fraction: float) -> int:
    """floor(size^2 * fraction)."""
    return int(math.floor(size * size * fraction))


def select_prefilled(
    board: Sequence[Sequence[int]], keep: int, size: int, rng
) -> Tuple[Board, FrozenSet[Position]]:
    """
    Empty all but ``keep`` cells of ``board``, chosen uniformly at random.

    Positions are Fisher-Yates shuffled with ``rng``; the first
    size^2 - keep are emptied. The input board is not modified.

    Returns:
        (puzzle_board, prefilled) where prefilled holds every position that
        is still non-empty.
    """
    puzzle = copy_board(board)
    positions = [(r, c) for r in range(size) for c in range(size)]

    for i in range(len(positions) - 1, 0, -1):
        j = int(rng.randint(i + 1))
        positions[i], positions[j] = positions[j], positions[i]

    to_empty = max(0, len(positions) - keep)
    for r, c in positions[:to_empty]:
        puzzle[r][c] = Cell.EMPTY

    prefilled = frozenset(
        (r, c) for r in range(size) for c in range(size) if puzzle[r][c] != Cell.EMPTY
    )
    return puzzle, prefilled
