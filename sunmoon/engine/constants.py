"""
Sun/Moon constants, rules, canned solutions, and display utilities.
"""

from enum import Enum, IntEnum
from typing import Dict, List


class Cell(IntEnum):
    """Cell values. Integer values double as the serialised form."""

    EMPTY = 0
    SUN = 1
    MOON = 2


def opposite(value: int) -> int:
    """Flip SUN <-> MOON. EMPTY stays EMPTY."""
    if value == Cell.SUN:
        return Cell.MOON
    if value == Cell.MOON:
        return Cell.SUN
    return Cell.EMPTY


class Relation(str, Enum):
    """Relation carried by a constraint between two adjacent cells."""

    SAME = "same"
    DIFFERENT = "different"


class ErrorType(str, Enum):
    """Tags for the rule violations reported by validation."""

    ROW_BALANCE = "row-balance"
    COL_BALANCE = "col-balance"
    ROW_DUPLICATE = "row-duplicate"
    COL_DUPLICATE = "col-duplicate"
    ADJACENT = "adjacent"
    CONSTRAINT_SAME = "constraint-same"
    CONSTRAINT_DIFFERENT = "constraint-different"


# ============================================================================
# Difficulty tiers and board sizes
# ============================================================================

DIFFICULTY: Dict[str, Dict] = {
    "EASY": {"label": "Easy", "filled_cell_percentage": 0.3},
    "MEDIUM": {"label": "Medium", "filled_cell_percentage": 0.2},
    "HARD": {"label": "Hard", "filled_cell_percentage": 0.1},
}

BOARD_SIZES = (4, 6, 8)
BOARD_SIZE_LABELS = {size: f"{size}x{size}" for size in BOARD_SIZES}


# ============================================================================
# Rules
# ============================================================================

GAME_RULES = """Sun/Moon Rules:
- Each row and column must have an equal number of Suns and Moons
- No more than two Suns or Moons can be adjacent
- Each row and column must be unique
- (=) means the two cells must hold the same shape
- (X) means the two cells must hold opposite shapes
- Prefilled cells are given as clues and cannot be changed
"""


# ============================================================================
# Canned solutions (fallback tier)
# ============================================================================

_S, _M = Cell.SUN, Cell.MOON

CANNED_SOLUTIONS: Dict[int, List[List[int]]] = {
    4: [
        [_S, _M, _S, _M],
        [_M, _S, _M, _S],
        [_S, _M, _M, _S],
        [_M, _S, _S, _M],
    ],
    6: [
        [_S, _M, _S, _M, _S, _M],
        [_M, _S, _M, _S, _M, _S],
        [_M, _S, _S, _M, _M, _S],
        [_S, _M, _M, _S, _S, _M],
        [_M, _S, _M, _S, _S, _M],
        [_S, _M, _S, _M, _M, _S],
    ],
    8: [
        [_S, _M, _S, _M, _S, _M, _S, _M],
        [_M, _S, _M, _S, _M, _S, _M, _S],
        [_S, _S, _M, _M, _S, _S, _M, _M],
        [_M, _M, _S, _S, _M, _M, _S, _S],
        [_S, _M, _M, _S, _M, _S, _S, _M],
        [_M, _S, _S, _M, _S, _M, _M, _S],
        [_S, _S, _M, _S, _M, _M, _S, _M],
        [_M, _M, _S, _M, _S, _S, _M, _S],
    ],
}


# ============================================================================
# Display Utility
# ============================================================================

_SYMBOLS = {Cell.EMPTY: ".", Cell.SUN: "S", Cell.MOON: "M"}


def format_grid(grid: List[List[int]], show_empty: bool = True) -> str:
    """
    Format a board for display.

    Args:
        grid: NxN list of ints (0 = empty, 1 = sun, 2 = moon)
        show_empty: If True, show empties as '.'; if False, show raw numbers.

    Returns:
        Formatted multi-line string.
    """
    lines = []
    for row in grid:
        if show_empty:
            row_str = " ".join(_SYMBOLS.get(Cell(cell), "?") for cell in row)
        else:
            row_str = " ".join(str(int(cell)) for cell in row)
        lines.append(row_str)
    return "\n".join(lines)
