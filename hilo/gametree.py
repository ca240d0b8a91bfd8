"""Depth-bounded minimax analysis of optimal Hi-Lo play."""

import logging
from dataclasses import asdict, dataclass
from typing import Any, Dict, Optional, Tuple

from .exceptions import check_range

logger = logging.getLogger(__name__)

MemoKey = Tuple[int, int, int, bool]


@dataclass(frozen=True)
class OptimalStrategy:
    """Result of a minimax analysis over a range."""

    optimal_first_guess: int
    expected_move_count: float
    strategy: str = "minimax"
    reasoning: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


class GameTreeAnalyzer:
    """
    Memoized minimax over Hi-Lo guess trees, independent of any live target.

    Each level tries three split points (midpoint, lower third, upper third),
    scores both resulting sub-ranges one level deeper with the objective
    flipped, and keeps the split whose averaged score is best for the side
    to move. Search stops at max_depth.
    """

    def __init__(self, max_depth: int = 10) -> None:
        if max_depth < 0:
            raise ValueError("max_depth must be non-negative.")
        self.max_depth: int = max_depth
        self._memo: Dict[MemoKey, Tuple[float, Optional[int]]] = {}

    @property
    def cache_size(self) -> int:
        return len(self._memo)

    def minimax(
        self, low: int, high: int, depth: int, maximizing: bool
    ) -> Tuple[float, Optional[int]]:
        """
        Score a (sub-)range.

        Returns:
            (score, guess) where score is the averaged depth reached and guess
            is the chosen split, or None for an empty range.
        """
        key = (low, high, depth, maximizing)
        cached = self._memo.get(key)
        if cached is not None:
            return cached

        if low > high:
            # Guessing an endpoint leaves one side empty: nothing more to find.
            result: Tuple[float, Optional[int]] = (float(depth), None)
        elif low == high:
            result = (float(depth), low)
        elif depth > self.max_depth:
            result = (float(depth), (low + high) // 2)
        else:
            third = (high - low) // 3
            candidates = []
            for guess in ((low + high) // 2, low + third, high - third):
                if guess not in candidates:
                    candidates.append(guess)

            best_score = float("-inf") if maximizing else float("inf")
            best_guess = candidates[0]
            for guess in candidates:
                low_score, _ = self.minimax(low, guess - 1, depth + 1, not maximizing)
                high_score, _ = self.minimax(guess + 1, high, depth + 1, not maximizing)
                score = (low_score + high_score) / 2

                if maximizing and score > best_score:
                    best_score, best_guess = score, guess
                elif not maximizing and score < best_score:
                    best_score, best_guess = score, guess

            result = (best_score, best_guess)

        self._memo[key] = result
        return result

    def get_optimal_strategy(self, low: int, high: int) -> OptimalStrategy:
        """
        Estimate the best opening guess and expected move count for [low, high].

        The memo is cleared first, so every call is a fresh search.

        Raises:
            InvalidRangeError: If low > high.
            RuntimeError: If the search returns no guess.
        """
        check_range(low, high)
        self._memo.clear()

        score, guess = self.minimax(low, high, 0, False)
        if guess is None:
            raise RuntimeError(f"Minimax found no guess for [{low}, {high}].")

        logger.debug(
            "Minimax over [%d, %d]: guess %d, expected %.3f moves (%d states).",
            low,
            high,
            guess,
            score,
            len(self._memo),
        )
        return OptimalStrategy(
            optimal_first_guess=guess,
            expected_move_count=score,
            reasoning=f"Minimax analysis suggests {guess} for optimal play",
        )
