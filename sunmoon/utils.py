"""Utility functions for saving, loading, and converting puzzle data."""

import json
import os
from enum import Enum
from typing import Any, List

import numpy as np

from .engine.types import PuzzleInstance


def convert_puzzle_for_json(data: Any) -> Any:
    """
    Convert puzzles and batch results to a JSON-serializable format.
    Handles numpy types, enums, sets, tuple keys and objects with to_dict().
    """
    return _make_serializable(data)


def _make_serializable(obj: Any) -> Any:
    """Recursively convert an object to be JSON-serializable."""
    if hasattr(obj, "to_dict") and callable(obj.to_dict):
        return _make_serializable(obj.to_dict())
    if isinstance(obj, dict):
        new_dict = {}
        for k, v in obj.items():
            # Convert tuple keys to strings
            if isinstance(k, tuple):
                k = ",".join(str(part) for part in k)
            new_dict[str(k)] = _make_serializable(v)
        return new_dict
    elif isinstance(obj, Enum):
        return _make_serializable(obj.value)
    elif isinstance(obj, (list, tuple)):
        return [_make_serializable(item) for item in obj]
    elif isinstance(obj, (set, frozenset)):
        return [_make_serializable(item) for item in sorted(obj)]
    elif isinstance(obj, (np.integer,)):
        return int(obj)
    elif isinstance(obj, (np.floating,)):
        return float(obj)
    elif isinstance(obj, np.ndarray):
        return obj.tolist()
    elif isinstance(obj, (np.bool_,)):
        return bool(obj)
    else:
        return obj


def save_puzzles_json(data: Any, path: str, verbose: bool = True) -> str:
    """Save puzzles (or any batch result) to JSON."""
    directory = os.path.dirname(path)
    if directory:
        os.makedirs(directory, exist_ok=True)
    serializable = convert_puzzle_for_json(data)
    with open(path, "w") as f:
        json.dump(serializable, f, indent=2, default=str)
    if verbose:
        print(f"✓ Saved puzzles to {path}")
    return path


def load_puzzles_json(path: str) -> List[PuzzleInstance]:
    """Load a list of puzzles written by save_puzzles_json."""
    with open(path, "r") as f:
        data = json.load(f)
    if isinstance(data, dict):
        data = data.get("puzzles", [])
    return [PuzzleInstance.from_dict(item.get("puzzle", item)) for item in data]
