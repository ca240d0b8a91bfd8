"""
Hi-Lo Strategy Engine

Analytics and strategy core for a number-guessing (Hi-Lo) game:
- Next-guess recommendations: bisection, Monte Carlo simulation,
  Bayesian inference and adaptive pattern analysis
- Minimax estimate of optimal play over a range
- Session analytics backed by a frequency tree, a dual heap and a pattern trie
- General dynamic-programming helpers
"""

from .analysis import (
    play_with_strategy,
    run_strategy_comparison,
    run_strategy_many_tests,
    summarize_sessions,
)
from .analytics import AnalyticsAggregator, AnalyticsSummary, GuessEvent, SessionRecord
from .config import Difficulty, EngineConfig
from .engine import HiLoGame
from .exceptions import DegenerateDistributionError, EmptyStructureError, InvalidRangeError
from .gametree import GameTreeAnalyzer, OptimalStrategy
from .strategy import (
    GuessFeedback,
    ProbabilityDistribution,
    StrategyEngine,
    StrategyRecommendation,
)
from .structures import DualHeap, FrequencyTree, PatternTrie
from .utils import knapsack_max_value, longest_common_subsequence_length, memoize

__version__ = "1.0.0"

__all__ = [
    # Core classes
    "StrategyEngine",
    "GameTreeAnalyzer",
    "AnalyticsAggregator",
    "HiLoGame",
    # Data structures
    "FrequencyTree",
    "DualHeap",
    "PatternTrie",
    # Records
    "GuessFeedback",
    "GuessEvent",
    "SessionRecord",
    "StrategyRecommendation",
    "ProbabilityDistribution",
    "OptimalStrategy",
    "AnalyticsSummary",
    # Configuration
    "EngineConfig",
    "Difficulty",
    # Errors
    "EmptyStructureError",
    "InvalidRangeError",
    "DegenerateDistributionError",
    # Dynamic programming helpers
    "memoize",
    "longest_common_subsequence_length",
    "knapsack_max_value",
    # Analysis functions
    "play_with_strategy",
    "run_strategy_many_tests",
    "run_strategy_comparison",
    "summarize_sessions",
]
