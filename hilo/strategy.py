"""Next-guess recommendation strategies for the Hi-Lo game."""

import logging
import math
import random
from dataclasses import asdict, dataclass, replace
from typing import Any, Callable, Dict, Iterable, List, NamedTuple, Optional, Sequence, Tuple

import numpy as np

from .config import EngineConfig
from .exceptions import DegenerateDistributionError, check_range
from .utils import get_bisection_profile

logger = logging.getLogger(__name__)

FEEDBACK_LOW = "low"
FEEDBACK_HIGH = "high"
FEEDBACK_CORRECT = "correct"
FEEDBACK_LABELS = (FEEDBACK_LOW, FEEDBACK_HIGH, FEEDBACK_CORRECT)

STRATEGY_NAMES = ("bisection", "simulation", "bayesian", "adaptive_pattern")


class GuessFeedback(NamedTuple):
    """A past guess and the answer it got ("low": target is higher)."""

    guess: int
    feedback: str


@dataclass
class StrategyRecommendation:
    """One strategy's suggested next guess."""

    strategy: str
    guess: int
    confidence: float
    reasoning: str
    expected_guesses: Optional[float] = None
    patterns: Optional[Dict[str, Any]] = None

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


def coerce_history(history: Optional[Iterable[Any]]) -> List[GuessFeedback]:
    """
    Normalize a guess history into GuessFeedback entries.

    Accepts GuessFeedback instances, (guess, feedback) pairs, or mappings with
    "guess" and "feedback" keys.

    Raises:
        ValueError: If an entry has an unknown feedback label.
    """
    entries: List[GuessFeedback] = []
    for item in history or ():
        if isinstance(item, dict):
            entry = GuessFeedback(int(item["guess"]), str(item["feedback"]))
        else:
            guess, feedback = item
            entry = GuessFeedback(int(guess), str(feedback))
        if entry.feedback not in FEEDBACK_LABELS:
            raise ValueError(
                f"feedback must be one of {FEEDBACK_LABELS}, got {entry.feedback!r}."
            )
        entries.append(entry)
    return entries


class ProbabilityDistribution:
    """
    Posterior belief over the hidden target, indexed 0..size-1.

    Starts uniform over [1, size - 1]; index 0 carries no mass.
    """

    def __init__(self, size: int = 101) -> None:
        if size < 2:
            raise ValueError("size must be >= 2.")
        self.size: int = size
        self.probabilities: np.ndarray = np.zeros(size, dtype=float)
        self.reset(1, size - 1)

    def check_support(self, low: int, high: int) -> None:
        check_range(low, high)
        if low < 0 or high >= self.size:
            raise ValueError(
                f"Range [{low}, {high}] is outside the distribution support "
                f"[0, {self.size - 1}]."
            )

    def reset(self, low: int, high: int) -> None:
        """Spread all mass uniformly over [low, high]."""
        self.check_support(low, high)
        self.probabilities[:] = 0.0
        self.probabilities[low : high + 1] = 1.0 / (high - low + 1)

    def eliminate(self, low: int, high: int) -> None:
        """Zero every index in [low, high], clipped to the support."""
        low, high = max(low, 0), min(high, self.size - 1)
        if low <= high:
            self.probabilities[low : high + 1] = 0.0

    def collapse(self, value: int) -> None:
        """Zero every index except value."""
        self.eliminate(0, value - 1)
        self.eliminate(value + 1, self.size - 1)

    def apply_feedback(self, guess: int, feedback: str) -> None:
        """Zero the side of the distribution that feedback rules out."""
        if feedback == FEEDBACK_LOW:
            self.eliminate(0, guess)
        elif feedback == FEEDBACK_HIGH:
            self.eliminate(guess, self.size - 1)
        elif feedback == FEEDBACK_CORRECT:
            self.collapse(guess)
        else:
            raise ValueError(f"Unknown feedback label: {feedback!r}.")

    def normalize(self) -> None:
        """
        Rescale so the probabilities sum to 1.

        Raises:
            DegenerateDistributionError: If no mass is left.
        """
        total = float(self.probabilities.sum())
        if total <= 0.0:
            raise DegenerateDistributionError("Probability distribution has no mass left.")
        self.probabilities /= total

    def most_likely(self, low: int, high: int) -> Tuple[int, float]:
        """Return (value, probability) of the most likely value in [low, high]; ties -> smallest."""
        self.check_support(low, high)
        window = self.probabilities[low : high + 1]
        offset = int(np.argmax(window))
        return low + offset, float(window[offset])

    def __getitem__(self, index: int) -> float:
        return float(self.probabilities[index])

    def total(self) -> float:
        return float(self.probabilities.sum())

    def as_list(self) -> List[float]:
        return self.probabilities.tolist()


class StrategyEngine:
    """
    Ranks four independent next-guess recommendations.

    Strategies:
    1. Bisection: halve the remaining range
    2. Simulation: Monte Carlo estimate of the best opening guess
    3. Bayesian: posterior argmax after eliminating ruled-out values
    4. Adaptive pattern: centre-biased guess shaped by the player's habits

    The Bayesian posterior persists across calls; call reset_distribution()
    when a new game starts.
    """

    def __init__(
        self,
        config: Optional[EngineConfig] = None,
        rng: Optional[random.Random] = None,
    ) -> None:
        """
        Args:
            config: Engine parameters; defaults to EngineConfig().
            rng: Random source for simulation sampling and adaptive perturbation.
                Pass a seeded random.Random for reproducible results.
        """
        self.config: EngineConfig = (config or EngineConfig()).check()
        self.rng: random.Random = rng if rng is not None else random.Random()
        self.distribution = ProbabilityDistribution(self.config.support_size)

        self._strategies: Dict[
            str, Callable[[int, int, List[GuessFeedback]], StrategyRecommendation]
        ] = {
            "bisection": self.bisection,
            "simulation": self.simulation,
            "bayesian": self.bayesian,
            "adaptive_pattern": self.adaptive_pattern,
        }

    def reset_distribution(self, low: Optional[int] = None, high: Optional[int] = None) -> None:
        """
        Restart the Bayesian posterior, uniform over [low, high].

        Defaults to the whole current support. The support grows to cover
        high when needed.
        """
        if low is None:
            low = 1
        if high is None:
            high = self.distribution.size - 1
        if high >= self.distribution.size:
            self.distribution = ProbabilityDistribution(high + 1)
        self.distribution.reset(low, high)

    @staticmethod
    def _experience_confidence(base: float, history: Sequence[GuessFeedback]) -> float:
        return min(base + 0.02 * len(history), 1.0)

    # -------------------------------------------------------------------------
    # Strategies
    # -------------------------------------------------------------------------

    def bisection(
        self, low: int, high: int, history: Sequence[GuessFeedback] = ()
    ) -> StrategyRecommendation:
        """Suggest the midpoint of [low, high]."""
        check_range(low, high)
        mid = (low + high) // 2
        return StrategyRecommendation(
            strategy="bisection",
            guess=mid,
            confidence=self._experience_confidence(0.90, history),
            reasoning=f"Bisection suggests {mid} (halves the remaining range)",
        )

    def simulation(
        self, low: int, high: int, history: Sequence[GuessFeedback] = ()
    ) -> StrategyRecommendation:
        """
        Monte Carlo estimate of the opening guess that minimizes game length.

        Samples targets uniformly from [low, high]; for every candidate guess,
        a simulated game opens with the candidate and then plays bisection on
        whichever side the target falls. The candidate with the smallest
        average game length wins (ties -> smallest candidate).
        """
        check_range(low, high)
        trials = self.config.simulation_trials
        size = high - low + 1

        offsets = [self.rng.randrange(size) for _ in range(trials)]
        counts = np.bincount(offsets, minlength=size)

        averages = np.empty(size, dtype=float)
        for c in range(size):
            lengths = np.concatenate(
                (
                    get_bisection_profile(c) + 1,
                    np.ones(1, dtype=np.int64),
                    get_bisection_profile(size - c - 1) + 1,
                )
            )
            averages[c] = float(np.dot(counts, lengths)) / trials

        best = int(np.argmin(averages))
        guess = low + best
        expected = float(averages[best])

        return StrategyRecommendation(
            strategy="simulation",
            guess=guess,
            confidence=self._experience_confidence(0.85, history),
            reasoning=(
                f"Monte Carlo simulation ({trials} trials) suggests {guess} "
                f"(about {expected:.2f} guesses on average)"
            ),
            expected_guesses=expected,
        )

    def bayesian(
        self, low: int, high: int, history: Sequence[GuessFeedback] = ()
    ) -> StrategyRecommendation:
        """
        Posterior argmax after ruling out values contradicted by feedback.

        Raises:
            ValueError: If [low, high] falls outside the distribution support.
        """
        check_range(low, high)
        history = coerce_history(history)
        dist = self.distribution
        dist.check_support(low, high)

        for entry in history:
            dist.apply_feedback(entry.guess, entry.feedback)

        try:
            dist.normalize()
        except DegenerateDistributionError:
            logger.warning(
                "Posterior lost all mass; resetting to uniform over [%d, %d].", low, high
            )
            dist.reset(low, high)

        guess, probability = dist.most_likely(low, high)
        return StrategyRecommendation(
            strategy="bayesian",
            guess=guess,
            confidence=probability,
            reasoning=(
                f"Bayesian inference suggests {guess} "
                f"(probability: {probability * 100:.1f}%)"
            ),
        )

    def analyze_patterns(self, history: Sequence[GuessFeedback]) -> Dict[str, Any]:
        """
        Summarize how a player moves through the range.

        Returns:
            Dict with average_jump, trend ("increasing", "decreasing" or "none")
            and volatility (population standard deviation of the guesses).
        """
        patterns: Dict[str, Any] = {
            "average_jump": 0.0,
            "trend": "none",
            "volatility": 0.0,
        }
        guesses = np.array(
            [entry.guess for entry in coerce_history(history)], dtype=float
        )
        if len(guesses) < 2:
            return patterns

        patterns["average_jump"] = float(np.abs(np.diff(guesses)).mean())

        half = len(guesses) // 2
        first_avg = float(guesses[:half].mean())
        second_avg = float(guesses[half:].mean())
        threshold = self.config.trend_threshold
        if second_avg > first_avg + threshold:
            patterns["trend"] = "increasing"
        elif second_avg < first_avg - threshold:
            patterns["trend"] = "decreasing"

        patterns["volatility"] = float(guesses.std())
        return patterns

    def adaptive_pattern(
        self, low: int, high: int, history: Sequence[GuessFeedback] = ()
    ) -> StrategyRecommendation:
        """Centre-biased guess with a small random nudge; bisection when there is no history."""
        check_range(low, high)
        history = coerce_history(history)
        if not history:
            fallback = self.bisection(low, high, history)
            return replace(
                fallback,
                strategy="adaptive_pattern",
                reasoning=f"No guesses yet; falling back to bisection at {fallback.guess}",
            )

        patterns = self.analyze_patterns(history)

        span = high - low
        inset = math.floor(span * self.config.range_inset)
        sub_low, sub_high = low + inset, high - inset

        centre = (sub_low + sub_high) // 2
        nudge = (self.rng.random() - 0.5) * self.config.perturbation_span
        guess = max(sub_low, min(sub_high, math.floor(centre + nudge)))

        volatility_penalty = min(patterns["volatility"] / 50, 0.3)
        confidence = max(0.5, 0.9 - volatility_penalty)

        return StrategyRecommendation(
            strategy="adaptive_pattern",
            guess=guess,
            confidence=confidence,
            reasoning=(
                f"Adaptive pattern analysis suggests {guess} "
                f"(trend: {patterns['trend']}, volatility: {patterns['volatility']:.1f})"
            ),
            patterns=patterns,
        )

    # -------------------------------------------------------------------------
    # Ranking
    # -------------------------------------------------------------------------

    def run_strategy(
        self, name: str, low: int, high: int, history: Optional[Iterable[Any]] = None
    ) -> StrategyRecommendation:
        """Run a single strategy by name."""
        if name not in self._strategies:
            raise ValueError(f"Unknown strategy {name!r}; expected one of {STRATEGY_NAMES}.")
        return self._strategies[name](low, high, coerce_history(history))

    def recommend(
        self, low: int, high: int, history: Optional[Iterable[Any]] = None
    ) -> List[StrategyRecommendation]:
        """
        Run every strategy and rank the results by descending confidence.

        A strategy that raises is logged and left out of the ranking.

        Raises:
            InvalidRangeError: If low > high.
            RuntimeError: If every strategy failed.
        """
        check_range(low, high)
        entries = coerce_history(history)

        recommendations: List[StrategyRecommendation] = []
        for name, strategy in self._strategies.items():
            try:
                recommendations.append(strategy(low, high, entries))
            except Exception:
                logger.exception("Strategy %s failed on [%d, %d].", name, low, high)

        if not recommendations:
            raise RuntimeError("No strategy produced a recommendation.")

        ranked = sorted(recommendations, key=lambda r: r.confidence, reverse=True)
        logger.debug(
            "Ranked recommendations for [%d, %d]: %s",
            low,
            high,
            [(r.strategy, r.guess, round(r.confidence, 3)) for r in ranked],
        )
        return ranked

    def best(
        self, low: int, high: int, history: Optional[Iterable[Any]] = None
    ) -> StrategyRecommendation:
        """Highest-confidence recommendation (first strategy wins ties)."""
        return max(self.recommend(low, high, history), key=lambda r: r.confidence)
