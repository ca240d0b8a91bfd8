"""Analysis and benchmarking tools for the Hi-Lo strategies."""

import random
from typing import Dict, List, Optional, Sequence

import matplotlib.pyplot as plt
import numpy as np

from .analytics import AnalyticsAggregator
from .config import EngineConfig
from .engine import HiLoGame
from .strategy import STRATEGY_NAMES


def play_with_strategy(
    game: HiLoGame,
    strategy: str,
    low: int,
    high: int,
    *,
    target: Optional[int] = None,
    max_guesses: Optional[int] = None,
) -> Dict[str, object]:
    """
    Auto-play one game on a HiLoGame by always following a single strategy.

    Args:
        game: Session to play on; its aggregator records the game.
        strategy: One of STRATEGY_NAMES.
        low: Lowest possible target.
        high: Highest possible target.
        target: Fixed hidden value; drawn from the game's rng if omitted.
        max_guesses: Give up (quit) after this many guesses. Defaults to the
            range size, which every strategy stays within.

    Returns:
        Dict with "status" (1 win, -1 gave up), "attempts", "guesses" and "target".
    """
    game.start(low, high, target=target)
    limit = max_guesses if max_guesses is not None else high - low + 1

    guesses: List[int] = []
    while game.attempts < limit:
        recommendation = game.engine.run_strategy(
            strategy, game.current_low, game.current_high, game.history
        )
        guess = max(game.current_low, min(game.current_high, recommendation.guess))
        guesses.append(guess)

        status, _ = game.guess(guess)
        if status == 1:
            return {
                "status": 1,
                "attempts": game.attempts,
                "guesses": guesses,
                "target": game.target,
            }

    _, payload = game.quit()
    return {
        "status": -1,
        "attempts": payload["attempts"],
        "guesses": guesses,
        "target": payload["target"],
    }


def run_strategy_many_tests(
    strategy: str,
    low: int,
    high: int,
    runs: int,
    *,
    config: Optional[EngineConfig] = None,
    seed: Optional[int] = None,
    max_guesses: Optional[int] = None,
) -> Dict[str, float]:
    """
    Play many independent games with one strategy and average the results.

    Args:
        strategy: One of STRATEGY_NAMES.
        low: Lowest possible target.
        high: Highest possible target.
        runs: Number of games, must be positive.
        config: Engine parameters (lower simulation_trials to speed this up).
        seed: Seed for targets and strategy randomness.
        max_guesses: Per-game guess cap passed to play_with_strategy.

    Returns:
        Dict with win_rate, avg_attempts, std_attempts, min_attempts,
        max_attempts and avg_efficiency.

    Raises:
        ValueError: If runs is not positive.
    """
    if runs <= 0:
        raise ValueError("runs must be positive.")

    game = HiLoGame(config=config, rng=random.Random(seed))
    for _ in range(runs):
        play_with_strategy(game, strategy, low, high, max_guesses=max_guesses)

    sessions = game.aggregator.sessions
    attempts = np.array([s.attempts for s in sessions], dtype=float)
    efficiency = np.array([s.efficiency for s in sessions], dtype=float)

    return {
        "win_rate": game.aggregator.win_rate(),
        "avg_attempts": float(attempts.mean()),
        "std_attempts": float(attempts.std()),
        "min_attempts": float(attempts.min()),
        "max_attempts": float(attempts.max()),
        "avg_efficiency": float(efficiency.mean()),
    }


def run_strategy_comparison(
    low: int,
    high: int,
    runs: int,
    *,
    strategies: Sequence[str] = STRATEGY_NAMES,
    config: Optional[EngineConfig] = None,
    seed: Optional[int] = None,
    show_plots: bool = False,
) -> Dict[str, Dict[str, float]]:
    """
    Benchmark several strategies on the same range and optionally plot summaries.

    Args:
        low: Lowest possible target.
        high: Highest possible target.
        runs: Games per strategy.
        strategies: Strategy names to compare.
        config: Engine parameters shared by every run.
        seed: Seed reused for every strategy so they face the same targets.
        show_plots: If True, draw average attempts and efficiency bar charts.

    Returns:
        Mapping from strategy name to the dict returned by run_strategy_many_tests().
    """
    results: Dict[str, Dict[str, float]] = {}
    for name in strategies:
        results[name] = run_strategy_many_tests(
            name, low, high, runs, config=config, seed=seed
        )

    if not show_plots:
        return results

    names = list(results.keys())
    x = np.arange(len(names))

    # 1) Average attempts (with spread)
    avg_attempts = [results[n]["avg_attempts"] for n in names]
    std_attempts = [results[n]["std_attempts"] for n in names]

    plt.figure()  # type: ignore[misc]
    plt.bar(x, avg_attempts, yerr=std_attempts, capsize=4)  # type: ignore[misc]
    plt.axhline(  # type: ignore[misc]
        np.ceil(np.log2(high - low + 1)), color="gray", linestyle="--", label="log2 bound"
    )
    plt.xticks(x, names)  # type: ignore[misc]
    plt.ylabel("Average attempts")  # type: ignore[misc]
    plt.title(f"Average attempts per game on [{low}, {high}]")  # type: ignore[misc]
    plt.legend()  # type: ignore[misc]
    plt.tight_layout()
    plt.show()  # type: ignore[misc]

    # 2) Efficiency
    avg_efficiency = [results[n]["avg_efficiency"] for n in names]

    plt.figure()  # type: ignore[misc]
    plt.bar(x, avg_efficiency)  # type: ignore[misc]
    plt.xticks(x, names)  # type: ignore[misc]
    plt.ylabel("Average efficiency (%)")  # type: ignore[misc]
    plt.title("Efficiency by strategy")  # type: ignore[misc]
    plt.tight_layout()
    plt.show()  # type: ignore[misc]

    return results


def summarize_sessions(aggregator: AnalyticsAggregator) -> Dict[str, float]:
    """
    Descriptive statistics over an aggregator's session log.

    Returns:
        Dict with games, win_rate, mean/median/std/p90 attempts and
        mean_efficiency. All zero when no session was recorded.
    """
    sessions = aggregator.sessions
    if not sessions:
        return {
            "games": 0.0,
            "win_rate": 0.0,
            "mean_attempts": 0.0,
            "median_attempts": 0.0,
            "std_attempts": 0.0,
            "p90_attempts": 0.0,
            "mean_efficiency": 0.0,
        }

    attempts = np.array([s.attempts for s in sessions], dtype=float)
    efficiency = np.array([s.efficiency for s in sessions], dtype=float)

    return {
        "games": float(len(sessions)),
        "win_rate": aggregator.win_rate(),
        "mean_attempts": float(attempts.mean()),
        "median_attempts": float(np.median(attempts)),
        "std_attempts": float(attempts.std()),
        "p90_attempts": float(np.percentile(attempts, 90)),
        "mean_efficiency": float(efficiency.mean()),
    }
