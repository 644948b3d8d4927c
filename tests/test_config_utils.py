"""Configuration loading and JSON conversion helpers."""

import json

import numpy as np
import pytest

from sunmoon.config import EngineConfig, load_config, make_engine_config
from sunmoon.engine import (
    Cell, Constraint, InvalidConfigurationError, PuzzleConfig, Relation,
    generate_puzzle,
)
from sunmoon.utils import convert_puzzle_for_json, load_puzzles_json, save_puzzles_json


def test_puzzle_config_defaults():
    cfg = PuzzleConfig()
    assert cfg.board_size == 6
    assert cfg.difficulty == "MEDIUM"
    assert cfg.fill_fraction == 0.2
    assert cfg.label == "Medium"
    assert cfg.seed is None


def test_puzzle_config_validation():
    with pytest.raises(InvalidConfigurationError):
        PuzzleConfig(board_size=5)
    with pytest.raises(InvalidConfigurationError):
        PuzzleConfig(difficulty="EXPERT")
    with pytest.raises(InvalidConfigurationError):
        PuzzleConfig(max_puzzle_attempts=0)
    with pytest.raises(InvalidConfigurationError):
        PuzzleConfig(constraint_ratio=1.5)
    # InvalidConfigurationError is also a ValueError
    with pytest.raises(ValueError):
        PuzzleConfig(board_size=True)


def test_puzzle_config_reads_env_seed(monkeypatch):
    monkeypatch.setenv("SUNMOON_SEED", "123")
    assert PuzzleConfig().seed == 123
    assert PuzzleConfig(seed=5).seed == 5


def test_make_rng_is_seeded():
    a = PuzzleConfig(seed=3).make_rng().randint(1000, size=5)
    b = PuzzleConfig(seed=3).make_rng().randint(1000, size=5)
    assert list(a) == list(b)


def test_make_engine_config_priority(tmp_path, monkeypatch):
    path = tmp_path / "engine.yaml"
    path.write_text(
        "sizes: [4]\n"
        "num_per_combo: 3\n"
        "seed: 1\n"
        "max_workers: 2\n"
        "unknown_key: ignored\n"
    )
    assert load_config(str(path))["num_per_combo"] == 3

    monkeypatch.setenv("SUNMOON_SEED", "77")
    cfg = make_engine_config(str(path), max_workers=8)

    assert cfg.sizes == [4]
    assert cfg.num_per_combo == 3
    assert cfg.seed == 77
    assert cfg.max_workers == 8
    assert not hasattr(cfg, "unknown_key")


def test_engine_config_builds_puzzle_config():
    cfg = EngineConfig(seed=9, constraint_ratio=0.1, max_puzzle_attempts=7)
    puzzle_cfg = cfg.puzzle_config(board_size=8, difficulty="HARD")
    assert puzzle_cfg.board_size == 8
    assert puzzle_cfg.seed == 9
    assert puzzle_cfg.constraint_ratio == 0.1
    assert puzzle_cfg.max_puzzle_attempts == 7

    kwargs = cfg.dataset_kwargs()
    assert kwargs["seed"] == 9
    assert kwargs["base_config"].constraint_ratio == 0.1


def test_convert_handles_numpy_enums_and_sets():
    data = {
        "n": np.int64(4),
        "ratio": np.float32(0.5),
        "flag": np.bool_(True),
        "grid": np.array([[1, 2], [2, 1]]),
        "cell": Cell.SUN,
        "cells": frozenset({(1, 0), (0, 1)}),
        (0, 1): "tuple key",
        "constraint": Constraint(0, 0, 0, 1, Relation.SAME),
    }
    out = convert_puzzle_for_json(data)
    assert out["n"] == 4 and isinstance(out["n"], int)
    assert out["flag"] is True
    assert out["grid"] == [[1, 2], [2, 1]]
    assert out["cell"] == 1
    assert out["cells"] == [[0, 1], [1, 0]]
    assert out["0,1"] == "tuple key"
    assert out["constraint"]["type"] == "same"
    json.dumps(out)


def test_save_and_load_puzzle_list(tmp_path, capsys):
    puzzles = [generate_puzzle(4, "EASY", seed=s) for s in (1, 2)]
    path = save_puzzles_json(puzzles, str(tmp_path / "p.json"))
    assert "Saved puzzles" in capsys.readouterr().out
    assert load_puzzles_json(path) == puzzles
