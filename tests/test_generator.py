"""
End-to-end puzzle generation:
- shape of the result and clue/constraint invariants
- constraints and clues agree with the hidden solution
- determinism under a fixed seed
- fail-fast configuration errors and bounded fallback
"""

import numpy as np
import pytest

from conftest import E
from helpers import assert_valid_solution
from sunmoon.engine import (
    InvalidConfigurationError, PuzzleConfig, PuzzleGenerator, PuzzleInstance,
    PuzzleState, Relation, board_state, cells_to_keep, generate_puzzle, validate,
    verify_solution,
)


def _spy_on_solutions(generator):
    """Record every solution the generator draws."""
    captured = []
    original = generator.solutions.generate

    def spy(size):
        board, tier = original(size)
        captured.append([row[:] for row in board])
        return board, tier

    generator.solutions.generate = spy
    return captured


@pytest.mark.parametrize("size", [4, 6, 8])
@pytest.mark.parametrize("difficulty", ["EASY", "MEDIUM", "HARD"])
def test_puzzle_invariants(size, difficulty):
    puzzle = generate_puzzle(size, difficulty, seed=5)
    board = puzzle.to_board()

    assert puzzle.size == size
    assert len(board) == size and all(len(row) == size for row in board)

    filled = {(r, c) for r in range(size) for c in range(size) if board[r][c] != E}
    assert filled == set(puzzle.prefilled)
    assert len(puzzle.prefilled) == cells_to_keep(size, PuzzleConfig(size, difficulty).fill_fraction)

    assert len(puzzle.constraints) <= int(size * size * 0.2)
    for con in puzzle.constraints:
        assert con.in_bounds(size)
        assert abs(con.row1 - con.row2) + abs(con.col1 - con.col2) == 1
        assert board[con.row1][con.col1] == E or board[con.row2][con.col2] == E

    # The starting board never shows a rule violation
    assert validate(board, size, puzzle.constraints).errors == []


@pytest.mark.parametrize("seed", [1, 2, 3])
def test_clues_and_constraints_match_hidden_solution(seed):
    generator = PuzzleGenerator(PuzzleConfig(board_size=6, difficulty="MEDIUM", seed=seed))
    captured = _spy_on_solutions(generator)

    puzzle = generator.generate()
    solution = captured[-1]
    assert_valid_solution(solution, 6)

    for r, c in puzzle.prefilled:
        assert puzzle.board[r][c] != E
        assert puzzle.board[r][c] == solution[r][c]
    for con in puzzle.constraints:
        same = solution[con.row1][con.col1] == solution[con.row2][con.col2]
        assert con.relation == (Relation.SAME if same else Relation.DIFFERENT)

    # Filling in the solution completes the puzzle
    result = validate(solution, 6, puzzle.constraints)
    assert result.errors == [] and result.is_complete


def test_same_seed_same_puzzle():
    a = generate_puzzle(6, "MEDIUM", seed=42)
    b = generate_puzzle(6, "MEDIUM", seed=42)
    assert a == b
    assert a.to_dict() == b.to_dict()


def test_injected_rng_is_used():
    a = generate_puzzle(6, "HARD", rng=np.random.RandomState(8))
    b = generate_puzzle(6, "HARD", rng=np.random.RandomState(8))
    assert a == b


def test_seed_from_environment(monkeypatch):
    monkeypatch.setenv("SUNMOON_SEED", "17")
    a = generate_puzzle(4, "EASY")
    b = generate_puzzle(4, "EASY", seed=17)
    assert a == b


def test_fresh_puzzle_is_ready():
    puzzle = generate_puzzle(6, "EASY", seed=9)
    state = board_state(puzzle.to_board(), 6, puzzle.constraints, puzzle.prefilled)
    assert state == PuzzleState.READY


def test_puzzle_is_immutable_and_copies_board():
    puzzle = generate_puzzle(4, "EASY", seed=3)
    board = puzzle.to_board()
    board[0][0] = 99
    assert puzzle.board[0][0] != 99
    with pytest.raises(Exception):
        puzzle.size = 8


def test_dict_round_trip():
    puzzle = generate_puzzle(8, "HARD", seed=12)
    assert PuzzleInstance.from_dict(puzzle.to_dict()) == puzzle


@pytest.mark.parametrize("size", [3, 7, 0])
def test_odd_size_fails_fast(size):
    with pytest.raises(InvalidConfigurationError):
        generate_puzzle(size, "EASY")


def test_unknown_difficulty_fails_fast():
    with pytest.raises(InvalidConfigurationError):
        generate_puzzle(6, "IMPOSSIBLE")


def test_difficulty_key_is_case_insensitive():
    puzzle = generate_puzzle(4, "medium", seed=1)
    assert puzzle.difficulty == "MEDIUM"


def test_rejected_pipeline_falls_back_after_bounded_attempts(monkeypatch):
    monkeypatch.setattr(
        "sunmoon.engine.generator.verify_solvable", lambda *args, **kwargs: False
    )
    config = PuzzleConfig(board_size=6, difficulty="MEDIUM", seed=4, max_puzzle_attempts=3)
    generator = PuzzleGenerator(config)
    puzzle = generator.generate()

    assert puzzle.tier == "canned"
    assert puzzle.attempts == 3
    # Fallback keeps 80% of the usual clue fraction
    assert len(puzzle.prefilled) == cells_to_keep(6, 0.2 * 0.8)
    assert 0 < len(puzzle.constraints) <= 6
    board = puzzle.to_board()
    for con in puzzle.constraints:
        assert board[con.row1][con.col1] == E or board[con.row2][con.col2] == E
    assert validate(board, 6, puzzle.constraints).errors == []


def test_verbose_reports_progress(capsys):
    generate_puzzle(4, "EASY", seed=1, verbose=True)
    out = capsys.readouterr().out
    assert "Generating new puzzle" in out


def test_generate_with_base_config():
    base = PuzzleConfig(board_size=4, difficulty="EASY", seed=10, constraint_ratio=0.0)
    puzzle = generate_puzzle(6, "HARD", config=base)
    assert puzzle.size == 6
    assert puzzle.difficulty == "HARD"
    assert puzzle.constraints == ()


def test_invalid_drawn_solution_retries_instead_of_falling_back():
    generator = PuzzleGenerator(PuzzleConfig(board_size=8, difficulty="MEDIUM", seed=5))
    original = generator.solutions.generate
    calls = []

    def first_draw_invalid(size):
        calls.append(size)
        if len(calls) == 1:
            # Checkerboard: balanced and triple-free, but rows repeat
            board = [[1 if (r + c) % 2 == 0 else 2 for c in range(size)] for r in range(size)]
            return board, "simple"
        return original(size)

    generator.solutions.generate = first_draw_invalid
    puzzle = generator.generate()

    assert puzzle.attempts == 2
    assert puzzle.tier != "simple"
    assert len(puzzle.prefilled) == cells_to_keep(8, 0.2)


@pytest.mark.parametrize("size", [4, 6, 8])
@pytest.mark.parametrize("seed", [0, 5, 49])
def test_fallback_puzzle_hides_a_valid_solution(size, seed, monkeypatch):
    monkeypatch.setattr(
        "sunmoon.engine.generator.verify_solvable", lambda *args, **kwargs: False
    )
    generator = PuzzleGenerator(
        PuzzleConfig(board_size=size, difficulty="EASY", seed=seed, max_puzzle_attempts=2)
    )
    captured = []
    original = generator.solutions.fallback

    def spy(n):
        board, tier = original(n)
        captured.append([row[:] for row in board])
        return board, tier

    generator.solutions.fallback = spy
    puzzle = generator.generate()

    assert puzzle.tier == "canned"
    assert verify_solution(captured[-1], size)
    for r, c in puzzle.prefilled:
        assert puzzle.board[r][c] == captured[-1][r][c]


@pytest.mark.parametrize("seed", range(40, 60))
def test_generated_8x8_puzzles_never_use_simple_tier(seed):
    puzzle = generate_puzzle(8, "EASY", seed=seed)
    assert puzzle.tier != "simple"
