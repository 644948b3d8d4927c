"""Engine configuration for batch puzzle generation."""

import os
import yaml
from dataclasses import dataclass, field, fields
from typing import List, Optional

from .engine.config import PuzzleConfig
from .engine.constants import BOARD_SIZES, DIFFICULTY


@dataclass
class EngineConfig:
    """Configuration for a batch generation run."""

    # Which puzzles to produce
    sizes: List[int] = field(default_factory=lambda: list(BOARD_SIZES))
    difficulties: List[str] = field(default_factory=lambda: list(DIFFICULTY))
    num_per_combo: int = 5

    # Randomness
    seed: int = 42

    # Retry budgets
    max_solution_attempts: int = 100
    max_puzzle_attempts: int = 50

    # Constraint and fallback tuning
    constraint_ratio: float = 0.2
    fallback_keep_factor: float = 0.8

    # Execution
    max_workers: int = 4
    save_path: Optional[str] = None
    verbose: bool = False

    def puzzle_config(self, board_size: int = 6, difficulty: str = "MEDIUM") -> PuzzleConfig:
        """PuzzleConfig carrying this run's budgets and ratios."""
        return PuzzleConfig(
            board_size=board_size,
            difficulty=difficulty,
            seed=self.seed,
            max_solution_attempts=self.max_solution_attempts,
            max_puzzle_attempts=self.max_puzzle_attempts,
            constraint_ratio=self.constraint_ratio,
            fallback_keep_factor=self.fallback_keep_factor,
            verbose=self.verbose,
        )

    def dataset_kwargs(self) -> dict:
        """Keyword arguments for generate_puzzle_dataset()."""
        return {
            "sizes": list(self.sizes),
            "difficulties": list(self.difficulties),
            "num_per_combo": self.num_per_combo,
            "seed": self.seed,
            "max_workers": self.max_workers,
            "save_path": self.save_path,
            "base_config": self.puzzle_config(),
            "verbose": self.verbose,
        }


def load_config(yaml_path: str) -> dict:
    """Load engine config from YAML file."""
    with open(yaml_path, "r") as f:
        return yaml.safe_load(f) or {}


def make_engine_config(yaml_path: str = None, **overrides) -> EngineConfig:
    """
    Create EngineConfig from an optional YAML file, the SUNMOON_SEED
    environment variable, and keyword overrides (in increasing priority).
    Unknown keys are ignored.
    """
    cfg = EngineConfig()
    known = {f.name for f in fields(EngineConfig)}

    values = load_config(yaml_path) if yaml_path else {}
    env_seed = os.getenv("SUNMOON_SEED", "")
    if env_seed:
        values["seed"] = int(env_seed)
    values.update(overrides)

    for k, v in values.items():
        if k in known:
            setattr(cfg, k, v)

    return cfg
