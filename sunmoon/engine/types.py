"""
Shared types for the Sun/Moon engine.
Separated to avoid circular imports between the engine modules.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, FrozenSet, List, Optional, Sequence, Tuple

from .constants import ErrorType, Relation

Board = List[List[int]]
"""An NxN board as rows of Cell values (0 = empty, 1 = sun, 2 = moon)."""

Position = Tuple[int, int]
"""(row, col), 0-indexed."""


# ============================================================================
# Errors
# ============================================================================

class SunMoonError(Exception):
    """Base class for engine errors."""


class InvalidConfigurationError(SunMoonError, ValueError):
    """Raised for odd or unsupported board sizes and unknown difficulties."""


class InvalidMoveError(SunMoonError, ValueError):
    """Raised when a move targets a prefilled or out-of-range cell."""


# ============================================================================
# Data classes
# ============================================================================

@dataclass(frozen=True)
class Constraint:
    """A Same/Different relation between two edge-adjacent cells."""

    row1: int
    col1: int
    row2: int
    col2: int
    relation: Relation

    def __post_init__(self):
        if abs(self.row1 - self.row2) + abs(self.col1 - self.col2) != 1:
            raise ValueError(
                f"Constraint cells must be edge-adjacent: "
                f"({self.row1},{self.col1}) and ({self.row2},{self.col2})"
            )
        object.__setattr__(self, "relation", Relation(self.relation))

    @property
    def first(self) -> Position:
        return (self.row1, self.col1)

    @property
    def second(self) -> Position:
        return (self.row2, self.col2)

    @property
    def is_horizontal(self) -> bool:
        return self.row1 == self.row2

    def in_bounds(self, size: int) -> bool:
        return all(0 <= v < size for v in (self.row1, self.col1, self.row2, self.col2))

    def to_dict(self) -> Dict:
        return {
            "row1": self.row1,
            "col1": self.col1,
            "row2": self.row2,
            "col2": self.col2,
            "type": self.relation.value,
        }

    @classmethod
    def from_dict(cls, data: Dict) -> "Constraint":
        return cls(
            row1=data["row1"], col1=data["col1"],
            row2=data["row2"], col2=data["col2"],
            relation=Relation(data["type"]),
        )


@dataclass(frozen=True)
class ValidationError:
    """
    One violated rule, with enough location data to highlight it.

    Which location fields are set depends on ``type``:
        ROW_BALANCE          -> row
        COL_BALANCE          -> col
        ROW_DUPLICATE        -> rows
        COL_DUPLICATE        -> cols
        ADJACENT             -> row, col
        CONSTRAINT_*         -> constraint
    """

    type: ErrorType
    row: Optional[int] = None
    col: Optional[int] = None
    rows: Optional[Tuple[int, int]] = None
    cols: Optional[Tuple[int, int]] = None
    constraint: Optional[Constraint] = None

    def cells(self, size: int) -> List[Position]:
        """Positions a caller should highlight for this error."""
        if self.type == ErrorType.ROW_BALANCE:
            return [(self.row, c) for c in range(size)]
        if self.type == ErrorType.COL_BALANCE:
            return [(r, self.col) for r in range(size)]
        if self.type == ErrorType.ROW_DUPLICATE:
            return [(r, c) for r in self.rows for c in range(size)]
        if self.type == ErrorType.COL_DUPLICATE:
            return [(r, c) for c in self.cols for r in range(size)]
        if self.type == ErrorType.ADJACENT:
            return [(self.row, self.col)]
        return [self.constraint.first, self.constraint.second]

    def to_dict(self) -> Dict:
        out: Dict = {"type": self.type.value}
        if self.row is not None:
            out["row"] = self.row
        if self.col is not None:
            out["col"] = self.col
        if self.rows is not None:
            out["rows"] = list(self.rows)
        if self.cols is not None:
            out["cols"] = list(self.cols)
        if self.constraint is not None:
            out["constraint"] = self.constraint.to_dict()
        return out


@dataclass(frozen=True)
class ValidationResult:
    errors: List[ValidationError] = field(default_factory=list)
    is_complete: bool = False


class PuzzleState(Enum):
    """Lifecycle of one puzzle instance as seen by a caller."""

    GENERATING = "generating"
    READY = "ready"
    IN_PROGRESS = "in_progress"
    COMPLETE = "complete"


@dataclass(frozen=True)
class PuzzleInstance:
    """
    A generated puzzle: starting board, prefilled cells, and constraints.

    The solution used to build it is intentionally not part of the result.
    ``tier`` names the generation path that produced the underlying solution
    and ``attempts`` the number of pipeline runs it took.
    """

    board: Tuple[Tuple[int, ...], ...]
    prefilled: FrozenSet[Position]
    constraints: Tuple[Constraint, ...]
    size: int
    difficulty: str
    attempts: int = 1
    tier: str = "constrained-shuffle"

    def to_board(self) -> Board:
        """Fresh mutable copy of the starting board."""
        return [list(row) for row in self.board]

    def to_dict(self) -> Dict:
        return {
            "size": self.size,
            "difficulty": self.difficulty,
            "board": [[int(v) for v in row] for row in self.board],
            "prefilled": [{"row": r, "col": c} for r, c in sorted(self.prefilled)],
            "constraints": [c.to_dict() for c in self.constraints],
            "attempts": self.attempts,
            "tier": self.tier,
        }

    @classmethod
    def from_dict(cls, data: Dict) -> "PuzzleInstance":
        return cls(
            board=freeze_board(data["board"]),
            prefilled=frozenset((p["row"], p["col"]) for p in data["prefilled"]),
            constraints=tuple(Constraint.from_dict(c) for c in data["constraints"]),
            size=data["size"],
            difficulty=data["difficulty"],
            attempts=data.get("attempts", 1),
            tier=data.get("tier", "constrained-shuffle"),
        )


def copy_board(board: Sequence[Sequence[int]]) -> Board:
    return [[int(v) for v in row] for row in board]


def freeze_board(board: Sequence[Sequence[int]]) -> Tuple[Tuple[int, ...], ...]:
    return tuple(tuple(int(v) for v in row) for row in board)
