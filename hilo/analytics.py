"""Session analytics: guess frequencies, performance extremes and patterns."""

import logging
import math
import time
from dataclasses import asdict, dataclass, field
from typing import Any, Callable, Dict, List, Mapping, Optional, Tuple

from .exceptions import EmptyStructureError
from .structures import DualHeap, FrequencyTree, PatternTrie

logger = logging.getLogger(__name__)

TREND_WINDOW = 5
TREND_THRESHOLD = 5.0
TOP_PATTERNS = 5

# (max average attempts, label), checked in order; anything above is "novice".
SKILL_LEVELS: Tuple[Tuple[float, str], ...] = (
    (4, "expert"),
    (6, "advanced"),
    (8, "intermediate"),
    (12, "beginner"),
)


@dataclass(frozen=True)
class GuessEvent:
    """A single guess as observed by the aggregator."""

    guess: int
    target: int
    attempt_index: int
    elapsed_time: float
    timestamp: float

    def metadata(self) -> Dict[str, Any]:
        return {
            "target": self.target,
            "attempt_index": self.attempt_index,
            "elapsed_time": self.elapsed_time,
            "timestamp": self.timestamp,
        }


@dataclass(frozen=True)
class SessionRecord:
    """One finished (won or abandoned) game."""

    target: int
    attempts: int
    completed: bool
    elapsed_time: float
    guesses: Tuple[int, ...]
    efficiency: float
    timestamp: float

    def to_dict(self) -> Dict[str, Any]:
        out = asdict(self)
        out["guesses"] = list(self.guesses)
        return out


@dataclass
class AnalyticsSummary:
    """Read model handed to presentation layers. None marks "no data yet"."""

    total_games: int
    average_attempts: float
    best_performance: Optional[int]
    worst_performance: Optional[int]
    most_frequent_guess: Optional[Dict[str, Any]]
    top_patterns: List[Dict[str, Any]] = field(default_factory=list)
    efficiency_trend: str = "insufficient_data"
    skill_level: str = "expert"

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


def optimal_attempts(search_space_size: int) -> int:
    """Guesses perfect bisection needs in the worst case, ceil(log2(size))."""
    if search_space_size < 1:
        raise ValueError("search_space_size must be positive.")
    return math.ceil(math.log2(search_space_size))


def efficiency_score(attempts: int, search_space_size: int) -> float:
    """Optimal attempts as a percentage of actual attempts (0 for no attempts)."""
    if attempts <= 0:
        return 0.0
    return max(0.0, optimal_attempts(search_space_size) / attempts * 100)


def classify_skill(average_attempts: float) -> str:
    for limit, label in SKILL_LEVELS:
        if average_attempts <= limit:
            return label
    return "novice"


class AnalyticsAggregator:
    """
    Owns the frequency tree, dual heap, pattern trie and session log of one player.

    Not thread-safe: create one aggregator per logical session.
    """

    def __init__(
        self,
        reference_space_size: int = 100,
        clock: Optional[Callable[[], float]] = None,
    ) -> None:
        """
        Args:
            reference_space_size: Range size used to score session efficiency.
            clock: Timestamp source; defaults to time.time.
        """
        if reference_space_size < 1:
            raise ValueError("reference_space_size must be positive.")
        self.reference_space_size: int = reference_space_size
        self.clock: Callable[[], float] = clock or time.time

        self.frequency_tree = FrequencyTree()
        self.heap = DualHeap()
        self.pattern_trie = PatternTrie()
        self._sessions: List[SessionRecord] = []

    @property
    def sessions(self) -> Tuple[SessionRecord, ...]:
        return tuple(self._sessions)

    def record_guess(
        self, guess: int, target: int, attempt_index: int, elapsed_time: float
    ) -> GuessEvent:
        """
        Feed one guess into the tree, heap and trie.

        Args:
            guess: The guessed value.
            target: The hidden value of the game being played.
            attempt_index: 1-based number of this guess within its game.
            elapsed_time: Time spent on this guess.

        Returns:
            The recorded GuessEvent.
        """
        event = GuessEvent(
            guess=guess,
            target=target,
            attempt_index=attempt_index,
            elapsed_time=elapsed_time,
            timestamp=self.clock(),
        )
        self.frequency_tree.insert(guess, event.metadata())
        self.heap.push(attempt_index)
        self.pattern_trie.insert(str(abs(guess)))
        return event

    def record_session(
        self,
        session_data: Mapping[str, Any],
        search_space_size: Optional[int] = None,
    ) -> SessionRecord:
        """
        Append a finished game to the session log.

        Args:
            session_data: Mapping with "target", "attempts", and optionally
                "completed", "elapsed_time" and "guesses".
            search_space_size: Range size the game was played on; defaults to
                the aggregator's reference size.

        Returns:
            The immutable SessionRecord appended to the log.

        Raises:
            KeyError: If "target" or "attempts" is missing.
            ValueError: If attempts is negative.
        """
        attempts = int(session_data["attempts"])
        if attempts < 0:
            raise ValueError("attempts must be non-negative.")

        space = search_space_size or self.reference_space_size
        record = SessionRecord(
            target=int(session_data["target"]),
            attempts=attempts,
            completed=bool(session_data.get("completed", True)),
            elapsed_time=float(session_data.get("elapsed_time", 0.0)),
            guesses=tuple(int(g) for g in session_data.get("guesses", ())),
            efficiency=efficiency_score(attempts, space),
            timestamp=self.clock(),
        )
        self._sessions.append(record)
        logger.debug(
            "Session %d recorded: %d attempts, efficiency %.1f.",
            len(self._sessions),
            record.attempts,
            record.efficiency,
        )
        return record

    # -------------------------------------------------------------------------
    # Read model
    # -------------------------------------------------------------------------

    def average_attempts(self) -> float:
        if not self._sessions:
            return 0.0
        return sum(s.attempts for s in self._sessions) / len(self._sessions)

    def win_rate(self) -> float:
        if not self._sessions:
            return 0.0
        return sum(1 for s in self._sessions if s.completed) / len(self._sessions)

    def efficiency_trend(self) -> str:
        """Compare mean efficiency of the last window of sessions with the one before."""
        if len(self._sessions) < 2:
            return "insufficient_data"

        recent = self._sessions[-TREND_WINDOW:]
        older = self._sessions[-2 * TREND_WINDOW : -TREND_WINDOW]
        if not older:
            return "improving"

        recent_avg = sum(s.efficiency for s in recent) / len(recent)
        older_avg = sum(s.efficiency for s in older) / len(older)

        if recent_avg > older_avg + TREND_THRESHOLD:
            return "improving"
        if recent_avg < older_avg - TREND_THRESHOLD:
            return "declining"
        return "stable"

    def top_patterns(self, limit: int = TOP_PATTERNS) -> List[Dict[str, Any]]:
        patterns = self.pattern_trie.enumerate_all()
        patterns.sort(key=lambda p: p["frequency"], reverse=True)
        return patterns[:limit]

    def get_summary(self) -> AnalyticsSummary:
        """Snapshot of every aggregate statistic; never raises on empty state."""
        try:
            best: Optional[int] = self.heap.peek_min()
            worst: Optional[int] = self.heap.peek_max()
        except EmptyStructureError:
            best = worst = None

        try:
            most_frequent: Optional[Dict[str, Any]] = self.frequency_tree.most_frequent()
        except EmptyStructureError:
            most_frequent = None

        average = self.average_attempts()
        return AnalyticsSummary(
            total_games=len(self._sessions),
            average_attempts=average,
            best_performance=best,
            worst_performance=worst,
            most_frequent_guess=most_frequent,
            top_patterns=self.top_patterns(),
            efficiency_trend=self.efficiency_trend(),
            skill_level=classify_skill(average),
        )

    def frequency_snapshot(self) -> List[Dict[str, Any]]:
        return self.frequency_tree.inorder_traversal()

    def pattern_snapshot(self) -> List[Dict[str, Any]]:
        return self.pattern_trie.enumerate_all()

    def heap_snapshot(self) -> Dict[str, List[int]]:
        return self.heap.snapshot()
