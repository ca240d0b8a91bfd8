"""Engine configuration and difficulty presets."""

import math
from dataclasses import dataclass
from enum import Enum
from typing import List, Tuple


class Difficulty(Enum):
    """Standard Hi-Lo difficulty levels as (low, high, label)."""

    EASY = (1, 50, "Easy (1-50)")
    MEDIUM = (1, 100, "Medium (1-100)")
    HARD = (1, 1000, "Hard (1-1000)")
    EXPERT = (1, 10000, "Expert (1-10000)")

    @property
    def low(self) -> int:
        return self.value[0]

    @property
    def high(self) -> int:
        return self.value[1]

    @property
    def label(self) -> str:
        return self.value[2]

    @property
    def optimal_guesses(self) -> int:
        """Worst-case guess count of perfect bisection over this range."""
        return math.ceil(math.log2(self.high - self.low + 1))


# Dynamic difficulty: (max average attempts, range, name), checked in order.
DYNAMIC_DIFFICULTY_LEVELS: Tuple[Tuple[float, Tuple[int, int], str], ...] = (
    (4, (1, 1000), "Expert Mode"),
    (6, (1, 500), "Hard Mode"),
    (8, (1, 200), "Medium Mode"),
)
DEFAULT_RANGE: Tuple[int, int] = (1, 100)
DEFAULT_RANGE_NAME = "Normal Mode"


@dataclass
class EngineConfig:
    """Tunable parameters shared by the strategy engine, analyzer and aggregator."""

    simulation_trials: int = 10_000
    support_size: int = 101
    perturbation_span: float = 10.0
    trend_threshold: float = 5.0
    range_inset: float = 0.1
    reference_space_size: int = 100
    max_search_depth: int = 10

    def validate(self) -> List[str]:
        """Validate configuration and return a list of errors (empty if valid)."""
        errors = []

        if self.simulation_trials < 1:
            errors.append(
                f"simulation_trials must be >= 1, got {self.simulation_trials}"
            )
        if self.support_size < 2:
            errors.append(f"support_size must be >= 2, got {self.support_size}")
        if self.perturbation_span < 0:
            errors.append(
                f"perturbation_span must be >= 0, got {self.perturbation_span}"
            )
        if self.trend_threshold < 0:
            errors.append(f"trend_threshold must be >= 0, got {self.trend_threshold}")
        if not 0 <= self.range_inset < 0.5:
            errors.append(f"range_inset must be in [0, 0.5), got {self.range_inset}")
        if self.reference_space_size < 1:
            errors.append(
                f"reference_space_size must be >= 1, got {self.reference_space_size}"
            )
        if self.max_search_depth < 0:
            errors.append(
                f"max_search_depth must be >= 0, got {self.max_search_depth}"
            )

        return errors

    def check(self) -> "EngineConfig":
        """Raise ValueError listing every problem if the configuration is invalid."""
        errors = self.validate()
        if errors:
            raise ValueError("Invalid engine configuration: " + "; ".join(errors))
        return self
