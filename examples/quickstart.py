"""
Quickstart example for the Hi-Lo strategy engine.

This script demonstrates basic usage of the engine.
"""

import random

from hilo import (
    EngineConfig,
    GameTreeAnalyzer,
    HiLoGame,
    run_strategy_many_tests,
)


def main():
    print("=" * 60)
    print("Hi-Lo Strategy Engine - Quickstart Example")
    print("=" * 60)

    # Example 1: Play a game following the top-ranked recommendation
    print("\n1. Playing one game on 1-100 with the best recommendation...")
    print("-" * 60)

    game = HiLoGame(config=EngineConfig(simulation_trials=2000), rng=random.Random(7))
    game.start(1, 100)

    status = 0
    while status != 1:
        best = game.best_recommendation()
        status, payload = game.guess(best.guess)
        print(
            f"Guess {payload['attempts']}: {best.guess:3d} via {best.strategy:16s}"
            f" -> {payload['feedback']}"
        )

    # Example 2: Session summary
    print("\n2. Session summary:")
    print("-" * 60)
    summary = game.aggregator.get_summary()
    print(f"Games played: {summary.total_games}")
    print(f"Average attempts: {summary.average_attempts:.1f}")
    print(f"Skill level: {summary.skill_level}")
    print(f"Top patterns: {summary.top_patterns}")

    # Example 3: Minimax analysis
    print("\n3. Minimax analysis of 1-100...")
    print("-" * 60)
    optimal = GameTreeAnalyzer().get_optimal_strategy(1, 100)
    print(f"Optimal first guess: {optimal.optimal_first_guess}")
    print(f"Expected move count: {optimal.expected_move_count:.2f}")

    # Example 4: Compare strategies
    print("\n4. Average attempts by strategy (20 games each)...")
    print("-" * 60)
    for name in ("bisection", "bayesian", "adaptive_pattern"):
        results = run_strategy_many_tests(name, 1, 100, runs=20, seed=1)
        print(
            f"{name:16s}: {results['avg_attempts']:5.2f} attempts,"
            f" {results['avg_efficiency']:5.1f}% efficiency"
        )

    print("\n" + "=" * 60)
    print("Done!")
    print("=" * 60)


if __name__ == "__main__":
    main()
