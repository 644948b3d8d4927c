"""
Deriving Same/Different constraints from a solution.

Only pairs with at least one empty cell in the puzzle board are candidates;
a constraint between two visible clues carries no information.
"""

import math
from typing import Iterable, List, Sequence

from .constants import Cell, Relation, opposite
from .rules import has_adjacent_violation
from .types import Constraint, copy_board


def _relation(solution, r1, c1, r2, c2) -> Relation:
    return Relation.SAME if solution[r1][c1] == solution[r2][c2] else Relation.DIFFERENT


def candidate_constraints(
    solution: Sequence[Sequence[int]], board: Sequence[Sequence[int]], size: int
) -> List[Constraint]:
    """All adjacent pairs touching an empty cell, labelled from the solution."""
    candidates = []
    # Horizontal
    for r in range(size):
        for c in range(size - 1):
            if board[r][c] == Cell.EMPTY or board[r][c + 1] == Cell.EMPTY:
                candidates.append(
                    Constraint(r, c, r, c + 1, _relation(solution, r, c, r, c + 1))
                )
    # Vertical
    for r in range(size - 1):
        for c in range(size):
            if board[r][c] == Cell.EMPTY or board[r + 1][c] == Cell.EMPTY:
                candidates.append(
                    Constraint(r, c, r + 1, c, _relation(solution, r, c, r + 1, c))
                )
    return candidates


def implied_value(value: int, relation: Relation) -> int:
    """Value forced on the other end of a constraint whose one end is ``value``."""
    return value if relation == Relation.SAME else opposite(value)


def is_valid_constraint_addition(
    board: Sequence[Sequence[int]],
    constraints: Iterable[Constraint],
    solution: Sequence[Sequence[int]],
    size: int,
) -> bool:
    """
    One-step deduction over the cumulative constraint set.

    False if a deduced cell contradicts the solution or the deductions
    produce three equal cells in a line.
    """
    work = copy_board(board)
    constraints = list(constraints)
    max_iterations = size * size

    progress = True
    iterations = 0
    while progress and iterations < max_iterations:
        progress = False
        iterations += 1

        for con in constraints:
            a = work[con.row1][con.col1]
            b = work[con.row2][con.col2]
            if a != Cell.EMPTY and b == Cell.EMPTY:
                target, (tr, tc) = implied_value(a, con.relation), con.second
            elif b != Cell.EMPTY and a == Cell.EMPTY:
                target, (tr, tc) = implied_value(b, con.relation), con.first
            else:
                continue
            work[tr][tc] = target
            progress = True
            if target != solution[tr][tc]:
                return False

        for r in range(size):
            for c in range(size):
                if work[r][c] != Cell.EMPTY and has_adjacent_violation(work, r, c, size):
                    return False

    return True


def derive_constraints(
    solution: Sequence[Sequence[int]],
    board: Sequence[Sequence[int]],
    size: int,
    rng,
    ratio: float = 0.2,
) -> List[Constraint]:
    """
    Pick up to floor(size^2 * ratio) constraints in random order.

    Each candidate is tentatively added and dropped again if the cumulative
    set fails ``is_valid_constraint_addition``.
    """
    max_constraints = int(math.floor(size * size * ratio))
    candidates = candidate_constraints(solution, board, size)
    rng.shuffle(candidates)

    accepted: List[Constraint] = []
    for candidate in candidates:
        if len(accepted) >= max_constraints:
            break
        accepted.append(candidate)
        if not is_valid_constraint_addition(board, accepted, solution, size):
            accepted.pop()

    return accepted
