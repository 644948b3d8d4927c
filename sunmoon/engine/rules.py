"""
Rule checker for Sun/Moon boards.

Deterministic and side-effect free: evaluates the balance, adjacency and
uniqueness rules plus the constraint set against any board snapshot.
"""

from typing import Iterable, List, Optional, Sequence

from .constants import Cell, ErrorType, Relation
from .types import (
    Board, Constraint, InvalidMoveError, Position, PuzzleState,
    ValidationError, ValidationResult, copy_board,
)


def is_filled(board: Sequence[Sequence[int]]) -> bool:
    """True when no EMPTY cell remains."""
    return all(cell != Cell.EMPTY for row in board for cell in row)


def has_adjacent_violation(
    board: Sequence[Sequence[int]], row: int, col: int, size: int
) -> bool:
    """True if (row, col) is part of three equal non-empty cells in a line."""
    value = board[row][col]
    if value == Cell.EMPTY:
        return False

    # Horizontal: left, right, centre
    if col >= 2 and board[row][col - 1] == value and board[row][col - 2] == value:
        return True
    if col <= size - 3 and board[row][col + 1] == value and board[row][col + 2] == value:
        return True
    if 1 <= col <= size - 2 and board[row][col - 1] == value and board[row][col + 1] == value:
        return True

    # Vertical: up, down, centre
    if row >= 2 and board[row - 1][col] == value and board[row - 2][col] == value:
        return True
    if row <= size - 3 and board[row + 1][col] == value and board[row + 2][col] == value:
        return True
    if 1 <= row <= size - 2 and board[row - 1][col] == value and board[row + 1][col] == value:
        return True

    return False


def _column(board: Sequence[Sequence[int]], col: int) -> List[int]:
    return [row[col] for row in board]


def _count(line: Iterable[int], value: int) -> int:
    return sum(1 for cell in line if cell == value)


def validate(
    board: Sequence[Sequence[int]],
    size: int,
    constraints: Iterable[Constraint] = (),
) -> ValidationResult:
    """
    Validate a (possibly partial) board against every rule.

    All violations are collected. Balance and uniqueness are only checked on
    a full board; constraints only once both of their cells are filled.

    Returns:
        ValidationResult(errors, is_complete) where is_complete means the
        board is full and error-free.
    """
    errors: List[ValidationError] = []
    filled = is_filled(board)

    if filled:
        for r in range(size):
            if _count(board[r], Cell.SUN) != _count(board[r], Cell.MOON):
                errors.append(ValidationError(ErrorType.ROW_BALANCE, row=r))

        columns = [_column(board, c) for c in range(size)]
        for c in range(size):
            if _count(columns[c], Cell.SUN) != _count(columns[c], Cell.MOON):
                errors.append(ValidationError(ErrorType.COL_BALANCE, col=c))

        for r1 in range(size):
            for r2 in range(r1 + 1, size):
                if list(board[r1]) == list(board[r2]):
                    errors.append(ValidationError(ErrorType.ROW_DUPLICATE, rows=(r1, r2)))

        for c1 in range(size):
            for c2 in range(c1 + 1, size):
                if columns[c1] == columns[c2]:
                    errors.append(ValidationError(ErrorType.COL_DUPLICATE, cols=(c1, c2)))

    # Adjacency is checked regardless of fill state
    for r in range(size):
        for c in range(size):
            if board[r][c] != Cell.EMPTY and has_adjacent_violation(board, r, c, size):
                errors.append(ValidationError(ErrorType.ADJACENT, row=r, col=c))

    for constraint in constraints:
        cell1 = board[constraint.row1][constraint.col1]
        cell2 = board[constraint.row2][constraint.col2]
        if cell1 == Cell.EMPTY or cell2 == Cell.EMPTY:
            continue
        if constraint.relation == Relation.SAME and cell1 != cell2:
            errors.append(ValidationError(ErrorType.CONSTRAINT_SAME, constraint=constraint))
        if constraint.relation == Relation.DIFFERENT and cell1 == cell2:
            errors.append(ValidationError(ErrorType.CONSTRAINT_DIFFERENT, constraint=constraint))

    return ValidationResult(errors=errors, is_complete=filled and not errors)


def verify_solution(board: Sequence[Sequence[int]], size: int) -> bool:
    """Full-board check: exact N/2 balance, no triples, unique rows/cols."""
    if len(board) != size or any(len(row) != size for row in board):
        return False
    half = size // 2
    for r in range(size):
        if _count(board[r], Cell.SUN) != half or _count(board[r], Cell.MOON) != half:
            return False
    for c in range(size):
        col = _column(board, c)
        if _count(col, Cell.SUN) != half or _count(col, Cell.MOON) != half:
            return False
    result = validate(board, size, ())
    return not result.errors


def reset_board(board: Sequence[Sequence[int]], prefilled: Iterable[Position]) -> Board:
    """Return a new board keeping only the prefilled cells."""
    keep = set(prefilled)
    new_board = copy_board(board)
    for r in range(len(new_board)):
        for c in range(len(new_board[r])):
            if (r, c) not in keep:
                new_board[r][c] = Cell.EMPTY
    return new_board


def check_move(
    board: Sequence[Sequence[int]], prefilled: Iterable[Position], row: int, col: int
) -> None:
    """Raise InvalidMoveError if (row, col) may not be edited by the player."""
    size = len(board)
    if not (0 <= row < size and 0 <= col < size):
        raise InvalidMoveError(f"cell ({row},{col}) is out of range for a {size}x{size} board")
    if (row, col) in set(prefilled):
        raise InvalidMoveError(f"cell ({row},{col}) is prefilled")


def board_state(
    board: Sequence[Sequence[int]],
    size: int,
    constraints: Iterable[Constraint] = (),
    prefilled: Optional[Iterable[Position]] = None,
) -> PuzzleState:
    """
    Recompute the caller-visible state of a puzzle from scratch.

    READY when nothing beyond the prefilled cells has been placed (only
    checked when ``prefilled`` is given), COMPLETE when validation reports
    a full error-free board, otherwise IN_PROGRESS.
    """
    if prefilled is not None:
        keep = set(prefilled)
        untouched = all(
            board[r][c] == Cell.EMPTY
            for r in range(size)
            for c in range(size)
            if (r, c) not in keep
        )
        if untouched and not is_filled(board):
            return PuzzleState.READY
    if validate(board, size, constraints).is_complete:
        return PuzzleState.COMPLETE
    return PuzzleState.IN_PROGRESS
