import random

import matplotlib.pyplot as plt
import pytest

from hilo import (
    AnalyticsAggregator,
    EngineConfig,
    HiLoGame,
    play_with_strategy,
    run_strategy_comparison,
    run_strategy_many_tests,
    summarize_sessions,
)

FAST = EngineConfig(simulation_trials=200)


def test_bisection_play_is_deterministic(game):
    result = play_with_strategy(game, "bisection", 1, 100, target=42)

    assert result["status"] == 1
    assert result["guesses"] == [50, 25, 37, 43, 40, 41, 42]
    assert result["attempts"] == 7
    assert game.aggregator.sessions[0].completed is True


def test_guess_cap_gives_up(game):
    result = play_with_strategy(game, "bisection", 1, 100, target=1, max_guesses=2)

    assert result["status"] == -1
    assert result["attempts"] == 2
    assert game.aggregator.sessions[0].completed is False


@pytest.mark.parametrize("strategy", ["bisection", "simulation", "bayesian", "adaptive_pattern"])
def test_every_strategy_finds_the_target(strategy):
    game = HiLoGame(config=FAST, rng=random.Random(11))
    for target in (1, 17, 30):
        result = play_with_strategy(game, strategy, 1, 30, target=target)
        assert result["status"] == 1
        assert result["guesses"][-1] == target
        assert len(set(result["guesses"])) == len(result["guesses"])


def test_many_tests_bisection():
    results = run_strategy_many_tests("bisection", 1, 100, runs=25, seed=3)

    assert results["win_rate"] == 1.0
    assert 1 <= results["min_attempts"] <= results["avg_attempts"] <= results["max_attempts"] <= 7
    assert results["avg_efficiency"] > 0


def test_many_tests_rejects_zero_runs():
    with pytest.raises(ValueError):
        run_strategy_many_tests("bisection", 1, 100, runs=0)


def test_comparison_without_plots():
    results = run_strategy_comparison(
        1, 20, runs=3, strategies=("bisection", "adaptive_pattern"), config=FAST, seed=2
    )
    assert set(results) == {"bisection", "adaptive_pattern"}
    assert all(r["win_rate"] == 1.0 for r in results.values())


def test_comparison_with_plots(monkeypatch):
    shown = []
    monkeypatch.setattr(plt, "show", lambda: shown.append(True))

    run_strategy_comparison(1, 20, runs=2, config=FAST, seed=4, show_plots=True)

    assert len(shown) == 2
    plt.close("all")


def test_summarize_sessions():
    empty = summarize_sessions(AnalyticsAggregator())
    assert empty["games"] == 0.0
    assert empty["mean_attempts"] == 0.0

    aggregator = AnalyticsAggregator()
    for attempts in (4, 6, 8):
        aggregator.record_session({"target": 1, "attempts": attempts})

    stats = summarize_sessions(aggregator)
    assert stats["games"] == 3.0
    assert stats["mean_attempts"] == pytest.approx(6.0)
    assert stats["median_attempts"] == pytest.approx(6.0)
    assert stats["win_rate"] == 1.0
