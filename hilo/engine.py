"""Hi-Lo game session wired to the strategy engine and the analytics aggregator."""

import logging
import random
import time
from typing import Any, Callable, Dict, List, Optional, Tuple

from .analytics import AnalyticsAggregator, SessionRecord
from .config import (
    DEFAULT_RANGE,
    DEFAULT_RANGE_NAME,
    DYNAMIC_DIFFICULTY_LEVELS,
    EngineConfig,
)
from .exceptions import check_range
from .gametree import GameTreeAnalyzer, OptimalStrategy
from .strategy import (
    FEEDBACK_CORRECT,
    FEEDBACK_HIGH,
    FEEDBACK_LOW,
    GuessFeedback,
    StrategyEngine,
    StrategyRecommendation,
)

logger = logging.getLogger(__name__)


def proximity_hint(difference: int, span: int) -> str:
    """
    Describe how far a guess landed from the target.

    Args:
        difference: Absolute distance between guess and target.
        span: Width of the game's range (high - low).

    Returns:
        "very far", "far", "close" or "very close".
    """
    ratio = difference / span if span > 0 else 0.0
    if ratio > 0.5:
        return "very far"
    if ratio > 0.25:
        return "far"
    if ratio > 0.1:
        return "close"
    return "very close"


class HiLoGame:
    """
    One player's Hi-Lo session: plays games and feeds every event to analytics.

    The game owns its StrategyEngine, GameTreeAnalyzer and AnalyticsAggregator
    (or uses the ones passed in). It is not thread-safe.
    """

    def __init__(
        self,
        config: Optional[EngineConfig] = None,
        rng: Optional[random.Random] = None,
        clock: Optional[Callable[[], float]] = None,
        aggregator: Optional[AnalyticsAggregator] = None,
        engine: Optional[StrategyEngine] = None,
        analyzer: Optional[GameTreeAnalyzer] = None,
    ) -> None:
        """
        Initialize a Hi-Lo session.

        Args:
            config: Engine parameters shared by every collaborator.
            rng: Random source for target selection (and the default engine).
            clock: Time source in seconds; defaults to time.monotonic.
            aggregator: Analytics store; a fresh one is created if omitted.
            engine: Strategy engine; a fresh one is created if omitted.
            analyzer: Minimax analyzer; a fresh one is created if omitted.
        """
        self.config: EngineConfig = (config or EngineConfig()).check()
        self.rng: random.Random = rng if rng is not None else random.Random()
        self.clock: Callable[[], float] = clock or time.monotonic

        self.aggregator = aggregator or AnalyticsAggregator(
            reference_space_size=self.config.reference_space_size, clock=self.clock
        )
        self.engine = engine or StrategyEngine(self.config, rng=self.rng)
        self.analyzer = analyzer or GameTreeAnalyzer(self.config.max_search_depth)

        self.low: int = DEFAULT_RANGE[0]
        self.high: int = DEFAULT_RANGE[1]
        self.current_low: int = self.low
        self.current_high: int = self.high
        self.mode: str = DEFAULT_RANGE_NAME
        self.target: Optional[int] = None
        self.attempts: int = 0
        self.active: bool = False
        self.history: List[GuessFeedback] = []

        self._started_at: float = 0.0
        self._last_guess_at: float = 0.0

    def dynamic_difficulty(self) -> Tuple[int, int, str]:
        """
        Pick the next game's range from the player's average attempts.

        Returns:
            (low, high, mode_name); players without history get the default range.
        """
        if self.aggregator.sessions:
            average = self.aggregator.average_attempts()
            for limit, (low, high), name in DYNAMIC_DIFFICULTY_LEVELS:
                if average <= limit:
                    return low, high, name
        return DEFAULT_RANGE[0], DEFAULT_RANGE[1], DEFAULT_RANGE_NAME

    def start(
        self,
        low: Optional[int] = None,
        high: Optional[int] = None,
        target: Optional[int] = None,
    ) -> Dict[str, Any]:
        """
        Start a new game, on [low, high] or on the dynamic difficulty range.

        Args:
            low: Lowest possible target (requires high).
            high: Highest possible target (requires low).
            target: Fixed hidden value for replays; drawn from the rng if omitted.

        Returns:
            {"low", "high", "mode"} describing the new game.

        Raises:
            ValueError: If only one bound is given, low is negative, or target
                is outside the range.
            InvalidRangeError: If low > high.
        """
        if (low is None) != (high is None):
            raise ValueError("Pass both low and high, or neither.")

        if low is None or high is None:
            low, high, mode = self.dynamic_difficulty()
        else:
            check_range(low, high)
            if low < 0:
                raise ValueError("low must be non-negative.")
            mode = f"Custom ({low}-{high})"

        self.low, self.high, self.mode = low, high, mode
        self.current_low, self.current_high = low, high
        if target is None:
            target = self.rng.randint(low, high)
        elif not low <= target <= high:
            raise ValueError(f"target must be between {low} and {high}.")

        self.target = target
        self.attempts = 0
        self.history = []
        self.active = True
        self.engine.reset_distribution(low, high)

        self._started_at = self._last_guess_at = self.clock()
        logger.info("Started %s game on [%d, %d].", mode, low, high)
        return {"low": low, "high": high, "mode": mode}

    def _finish(self, completed: bool) -> SessionRecord:
        if self.target is None:
            raise RuntimeError("No game in progress; call start() first.")
        self.active = False
        record = self.aggregator.record_session(
            {
                "target": self.target,
                "attempts": self.attempts,
                "completed": completed,
                "elapsed_time": self.clock() - self._started_at,
                "guesses": [entry.guess for entry in self.history],
            },
            search_space_size=self.high - self.low + 1,
        )
        logger.info(
            "Game on [%d, %d] %s after %d attempts.",
            self.low,
            self.high,
            "won" if completed else "abandoned",
            self.attempts,
        )
        return record

    def guess(self, value: int) -> Tuple[int, Dict[str, Any]]:
        """
        Submit a guess and return a status code plus payload.

        Args:
            value: Guess within the current live range.

        Returns:
            Tuple of (status, payload) where status is:
                - 0: Wrong guess, game continues
                - 1: Correct guess (win)

            Payload contains "feedback" ("low", "high" or "correct"), "attempts",
            and "range" (current_low, current_high). Wrong guesses add "hint";
            a win adds "target" and "session".

        Raises:
            RuntimeError: If no game is in progress.
            ValueError: If value is outside the current range.
        """
        if not self.active or self.target is None:
            raise RuntimeError("No game in progress; call start() first.")
        if value < self.current_low or value > self.current_high:
            raise ValueError(
                f"Guess must be between {self.current_low} and {self.current_high}."
            )

        now = self.clock()
        elapsed = now - self._last_guess_at
        self._last_guess_at = now

        self.attempts += 1
        self.aggregator.record_guess(value, self.target, self.attempts, elapsed)

        if value == self.target:
            self.history.append(GuessFeedback(value, FEEDBACK_CORRECT))
            record = self._finish(completed=True)
            return 1, {
                "feedback": FEEDBACK_CORRECT,
                "attempts": self.attempts,
                "range": (self.current_low, self.current_high),
                "target": self.target,
                "session": record,
            }

        if value < self.target:
            feedback = FEEDBACK_LOW
            self.current_low = value + 1
        else:
            feedback = FEEDBACK_HIGH
            self.current_high = value - 1
        self.history.append(GuessFeedback(value, feedback))

        return 0, {
            "feedback": feedback,
            "attempts": self.attempts,
            "range": (self.current_low, self.current_high),
            "hint": proximity_hint(abs(value - self.target), self.high - self.low),
        }

    def quit(self) -> Tuple[int, Dict[str, Any]]:
        """
        Abandon the current game and record it as incomplete.

        Returns:
            (-1, {"target", "attempts", "session"}).

        Raises:
            RuntimeError: If no game is in progress.
        """
        if not self.active or self.target is None:
            raise RuntimeError("No game in progress; call start() first.")
        record = self._finish(completed=False)
        return -1, {"target": self.target, "attempts": self.attempts, "session": record}

    def recommendations(self) -> List[StrategyRecommendation]:
        """Ranked next-guess recommendations for the live range."""
        return self.engine.recommend(self.current_low, self.current_high, self.history)

    def best_recommendation(self) -> StrategyRecommendation:
        return self.engine.best(self.current_low, self.current_high, self.history)

    def optimal_strategy(self) -> OptimalStrategy:
        """Minimax analysis of the live range."""
        return self.analyzer.get_optimal_strategy(self.current_low, self.current_high)
