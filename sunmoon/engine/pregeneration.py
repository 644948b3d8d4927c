"""
Batch pre-generation of puzzles.

Generates a set of puzzles per (size, difficulty) combination, each with
its own derived seed so results do not depend on thread scheduling.
Supports saving to / loading from JSON and summarising with pandas.
"""

import json
import threading
import time
from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass, replace
from typing import Dict, List, Optional, Sequence

import pandas as pd

from ..utils import save_puzzles_json
from .config import PuzzleConfig
from .constants import BOARD_SIZES, DIFFICULTY
from .generator import PuzzleGenerator
from .types import PuzzleInstance


# ============================================================================
# Thread-safe counter
# ============================================================================

class AtomicCounter:
    def __init__(self, start: int = 0):
        self._value = start
        self._lock = threading.Lock()

    def increment(self) -> int:
        with self._lock:
            self._value += 1
            return self._value

    @property
    def value(self) -> int:
        with self._lock:
            return self._value


# ============================================================================
# Data classes
# ============================================================================

@dataclass
class PuzzleRecord:
    puzzle_id: str
    seed: int
    puzzle: PuzzleInstance
    generation_time_seconds: float = 0.0

    def to_dict(self) -> Dict:
        return {
            "puzzle_id": self.puzzle_id,
            "seed": self.seed,
            "generation_time_seconds": self.generation_time_seconds,
            "puzzle": self.puzzle.to_dict(),
        }

    @classmethod
    def from_dict(cls, data: Dict) -> "PuzzleRecord":
        return cls(
            puzzle_id=data["puzzle_id"],
            seed=data["seed"],
            puzzle=PuzzleInstance.from_dict(data["puzzle"]),
            generation_time_seconds=data.get("generation_time_seconds", 0.0),
        )


# ============================================================================
# Single-puzzle generation (thread worker)
# ============================================================================

def generate_single_record(
    puzzle_id: str, config: PuzzleConfig, progress_counter: Optional[AtomicCounter] = None,
) -> PuzzleRecord:
    """Generate one puzzle (called inside thread pool)."""
    start_time = time.time()
    puzzle = PuzzleGenerator(config).generate()
    record = PuzzleRecord(
        puzzle_id=puzzle_id,
        seed=config.seed,
        puzzle=puzzle,
        generation_time_seconds=time.time() - start_time,
    )
    if progress_counter and config.verbose:
        count = progress_counter.increment()
        print(
            f"  ✓ Puzzle {puzzle_id} done ({count} total) - "
            f"{len(puzzle.constraints)} constraints, {len(puzzle.prefilled)} clues, "
            f"tier={puzzle.tier}"
        )
    return record


# ============================================================================
# Main generation function
# ============================================================================

def generate_puzzle_dataset(
    sizes: Sequence[int] = BOARD_SIZES,
    difficulties: Sequence[str] = tuple(DIFFICULTY),
    num_per_combo: int = 5,
    seed: int = 42,
    max_workers: int = 4,
    save_path: Optional[str] = None,
    base_config: Optional[PuzzleConfig] = None,
    verbose: bool = False,
) -> List[PuzzleRecord]:
    """
    Generate ``num_per_combo`` puzzles for every (size, difficulty).

    Args:
        sizes: Board sizes to generate.
        difficulties: Difficulty keys to generate.
        num_per_combo: Puzzles per (size, difficulty) combination.
        seed: Base seed; puzzle i of the batch uses seed * 1000 + i.
        max_workers: Threads used for generation.
        save_path: Optional path to save JSON results.
        base_config: Retry budgets and ratios to apply to every puzzle.
        verbose: Print progress.

    Returns:
        List of PuzzleRecord, ordered by puzzle_id.
    """
    if num_per_combo < 1:
        raise ValueError("num_per_combo must be at least 1")
    base = base_config or PuzzleConfig()

    tasks = []
    for size in sizes:
        for difficulty in difficulties:
            for i in range(num_per_combo):
                task_seed = seed * 1000 + len(tasks)
                config = replace(
                    base, board_size=size, difficulty=difficulty,
                    seed=task_seed, verbose=False,
                )
                puzzle_id = f"{size}x{size}-{config.difficulty.lower()}-{i:03d}"
                tasks.append((puzzle_id, config))

    if verbose:
        print(f"\n{'=' * 70}")
        print("PUZZLE GENERATION")
        print(f"{'=' * 70}")
        print(f"  Sizes: {list(sizes)}")
        print(f"  Difficulties: {list(difficulties)}")
        print(f"  To generate: {len(tasks)} puzzles ({max_workers} workers)")
        print(f"{'=' * 70}\n")

    start_time = time.time()
    progress = AtomicCounter()
    results: List[PuzzleRecord] = []

    with ThreadPoolExecutor(max_workers=max_workers) as executor:
        futures = {
            executor.submit(
                generate_single_record, puzzle_id,
                replace(config, verbose=verbose), progress,
            ): puzzle_id
            for puzzle_id, config in tasks
        }
        for future in as_completed(futures):
            results.append(future.result())

    results.sort(key=lambda rec: rec.puzzle_id)
    total_time = time.time() - start_time

    if verbose:
        print(f"\n✅ Generated {len(results)} puzzles in {total_time:.1f}s")

    if save_path:
        metadata = {
            "sizes": list(sizes),
            "difficulties": list(difficulties),
            "num_per_combo": num_per_combo,
            "seed": seed,
            "total_time_seconds": total_time,
        }
        save_puzzles_json(
            {"metadata": metadata, "puzzles": results}, save_path, verbose=verbose
        )

    return results


# ============================================================================
# Load and analyse
# ============================================================================

def load_puzzle_dataset(path: str):
    """Load a dataset from JSON. Returns (records, metadata)."""
    with open(path, "r") as f:
        data = json.load(f)
    records = [PuzzleRecord.from_dict(item) for item in data.get("puzzles", [])]
    return records, data.get("metadata", {})


def analyze_puzzle_dataset(records: List[PuzzleRecord], verbose: bool = False) -> pd.DataFrame:
    """Per (size, difficulty) summary of clue/constraint counts and fallbacks."""
    rows = [
        {
            "size": rec.puzzle.size,
            "difficulty": rec.puzzle.difficulty,
            "prefilled": len(rec.puzzle.prefilled),
            "constraints": len(rec.puzzle.constraints),
            "attempts": rec.puzzle.attempts,
            "fallback": rec.puzzle.tier != "constrained-shuffle",
            "seconds": rec.generation_time_seconds,
        }
        for rec in records
    ]
    df = pd.DataFrame(
        rows,
        columns=["size", "difficulty", "prefilled", "constraints",
                 "attempts", "fallback", "seconds"],
    )
    summary = (
        df.groupby(["size", "difficulty"])
        .agg(
            puzzles=("prefilled", "size"),
            mean_prefilled=("prefilled", "mean"),
            mean_constraints=("constraints", "mean"),
            mean_attempts=("attempts", "mean"),
            fallbacks=("fallback", "sum"),
            mean_seconds=("seconds", "mean"),
        )
        .reset_index()
    )

    if verbose:
        print(f"\n{'=' * 70}")
        print("ANALYSIS")
        print(f"{'=' * 70}")
        print(f"Puzzles: {len(df)}")
        print(summary.to_string(index=False))
    return summary
