"""
Propagation-based solvability check.

Fills cells using three deductions until a fixed point (or the iteration
bound) is reached:
    1. constraint propagation  (Same copies, Different flips)
    2. row/column balance      (a line with N/2 of one value gets the other)
    3. anti-triple             (a cell that would complete a triple is flipped)

The check confirms that the generated solution is reachable by these
deductions without contradiction. It does not prove that the solution is
the only one a player could reach.
"""

from typing import Iterable, List, Optional, Sequence, Tuple

from .constants import Cell, opposite
from .constraints import implied_value
from .rules import validate
from .types import Board, Constraint, copy_board


def _propagate_constraints(work: Board, constraints: List[Constraint]) -> bool:
    progress = False
    for con in constraints:
        a = work[con.row1][con.col1]
        b = work[con.row2][con.col2]
        if a != Cell.EMPTY and b == Cell.EMPTY:
            work[con.row2][con.col2] = implied_value(a, con.relation)
            progress = True
        elif b != Cell.EMPTY and a == Cell.EMPTY:
            work[con.row1][con.col1] = implied_value(b, con.relation)
            progress = True
    return progress


def _propagate_balance(work: Board, size: int) -> bool:
    half = size // 2
    progress = False
    lines = [[(r, c) for c in range(size)] for r in range(size)]
    lines += [[(r, c) for r in range(size)] for c in range(size)]

    for line in lines:
        empty = [(r, c) for r, c in line if work[r][c] == Cell.EMPTY]
        if not empty:
            continue
        suns = sum(1 for r, c in line if work[r][c] == Cell.SUN)
        moons = sum(1 for r, c in line if work[r][c] == Cell.MOON)
        if suns == half:
            target = Cell.MOON
        elif moons == half:
            target = Cell.SUN
        else:
            continue
        for r, c in empty:
            work[r][c] = target
        progress = True
    return progress


def _forced_by_triple(work: Board, r: int, c: int, size: int) -> Optional[int]:
    """Value (r, c) must take to avoid a triple, or None if nothing is forced."""
    E = Cell.EMPTY
    pairs = []
    if c >= 2:
        pairs.append((work[r][c - 1], work[r][c - 2]))
    if c <= size - 3:
        pairs.append((work[r][c + 1], work[r][c + 2]))
    if 1 <= c <= size - 2:
        pairs.append((work[r][c - 1], work[r][c + 1]))
    if r >= 2:
        pairs.append((work[r - 1][c], work[r - 2][c]))
    if r <= size - 3:
        pairs.append((work[r + 1][c], work[r + 2][c]))
    if 1 <= r <= size - 2:
        pairs.append((work[r - 1][c], work[r + 1][c]))

    for x, y in pairs:
        if x != E and x == y:
            return opposite(x)
    return None


def _propagate_adjacency(work: Board, size: int) -> bool:
    progress = False
    for r in range(size):
        for c in range(size):
            if work[r][c] != Cell.EMPTY:
                continue
            forced = _forced_by_triple(work, r, c, size)
            if forced is not None:
                work[r][c] = forced
                progress = True
    return progress


def propagate(
    board: Sequence[Sequence[int]],
    constraints: Iterable[Constraint],
    size: int,
    max_iterations: Optional[int] = None,
) -> Tuple[Board, int]:
    """
    Run the deduction loop on a copy of ``board``.

    Returns:
        (deduced_board, passes), where passes is the number of full passes made,
        bounded by ``max_iterations`` (default 2 * size^2).
    """
    work = copy_board(board)
    constraints = list(constraints)
    if max_iterations is None:
        max_iterations = 2 * size * size

    passes = 0
    progress = True
    while progress and passes < max_iterations:
        passes += 1
        progress = _propagate_constraints(work, constraints)
        progress = _propagate_balance(work, size) or progress
        progress = _propagate_adjacency(work, size) or progress

    return work, passes


def verify_solvable(
    board: Sequence[Sequence[int]],
    constraints: Iterable[Constraint],
    solution: Sequence[Sequence[int]],
    size: int,
) -> bool:
    """
    True if deduction never contradicts ``solution`` and the deduced
    (possibly partial) board validates without errors.
    """
    constraints = list(constraints)
    deduced, _passes = propagate(board, constraints, size)

    for r in range(size):
        for c in range(size):
            if deduced[r][c] != Cell.EMPTY and deduced[r][c] != solution[r][c]:
                return False

    return not validate(deduced, size, constraints).errors
