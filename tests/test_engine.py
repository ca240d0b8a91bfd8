import random

import pytest

from hilo import HiLoGame, InvalidRangeError
from hilo.engine import proximity_hint


def test_full_game_feeds_analytics(game, clock):
    assert game.start(1, 100, target=42) == {"low": 1, "high": 100, "mode": "Custom (1-100)"}

    clock.now = 2.5
    status, payload = game.guess(50)
    assert status == 0
    assert payload["feedback"] == "high"
    assert payload["range"] == (1, 49)
    assert payload["hint"] == "very close"

    clock.now = 4.0
    status, payload = game.guess(25)
    assert status == 0
    assert payload["feedback"] == "low"
    assert payload["range"] == (26, 49)
    assert payload["hint"] == "close"

    clock.now = 10.0
    status, payload = game.guess(42)
    assert status == 1
    assert payload["feedback"] == "correct"
    assert payload["attempts"] == 3
    assert payload["target"] == 42

    record = payload["session"]
    assert record.completed is True
    assert record.guesses == (50, 25, 42)
    assert record.elapsed_time == pytest.approx(10.0)
    assert record.efficiency == pytest.approx(7 / 3 * 100)

    tree = game.aggregator.frequency_snapshot()
    assert [e["value"] for e in tree] == [25, 42, 50]
    assert tree[0]["metadata"]["elapsed_time"] == pytest.approx(1.5)
    assert game.aggregator.get_summary().total_games == 1
    assert not game.active


def test_quit_records_incomplete_session(game):
    game.start(1, 100, target=10)
    game.guess(50)

    status, payload = game.quit()
    assert status == -1
    assert payload["target"] == 10
    assert payload["attempts"] == 1
    assert payload["session"].completed is False
    assert game.aggregator.win_rate() == 0.0


def test_guess_outside_live_range(game):
    game.start(1, 100, target=10)
    game.guess(50)
    with pytest.raises(ValueError):
        game.guess(60)
    with pytest.raises(ValueError):
        game.guess(0)


def test_guess_without_game(game):
    with pytest.raises(RuntimeError):
        game.guess(50)
    with pytest.raises(RuntimeError):
        game.quit()


def test_game_is_over_after_win(game):
    game.start(1, 1)
    assert game.guess(1)[0] == 1
    with pytest.raises(RuntimeError):
        game.guess(1)


def test_start_validation(game):
    with pytest.raises(ValueError):
        game.start(1, None)
    with pytest.raises(InvalidRangeError):
        game.start(10, 1)
    with pytest.raises(ValueError):
        game.start(1, 10, target=11)
    with pytest.raises(ValueError):
        game.start(-5, 10)


def test_random_target_comes_from_rng(config):
    a = HiLoGame(config=config, rng=random.Random(8))
    b = HiLoGame(config=config, rng=random.Random(8))
    a.start(1, 1000)
    b.start(1, 1000)
    assert a.target == b.target
    assert 1 <= a.target <= 1000


@pytest.mark.parametrize(
    "attempts, expected",
    [
        (3, (1, 1000, "Expert Mode")),
        (5, (1, 500, "Hard Mode")),
        (8, (1, 200, "Medium Mode")),
        (20, (1, 100, "Normal Mode")),
    ],
)
def test_dynamic_difficulty(game, attempts, expected):
    game.aggregator.record_session({"target": 1, "attempts": attempts})
    assert game.dynamic_difficulty() == expected

    info = game.start()
    assert (info["low"], info["high"], info["mode"]) == expected


def test_new_player_gets_default_range(game):
    assert game.dynamic_difficulty() == (1, 100, "Normal Mode")


def test_recommendations_follow_live_range(game):
    game.start(1, 100, target=80)
    game.guess(50)

    ranked = game.recommendations()
    assert len(ranked) == 4
    for rec in ranked:
        assert 51 <= rec.guess <= 100

    bayes = next(r for r in ranked if r.strategy == "bayesian")
    assert bayes.guess == 51
    assert bayes.confidence == pytest.approx(1 / 50)

    assert game.best_recommendation().guess == 75


def test_large_range_keeps_bayesian_available(game):
    game.start(1, 1000, target=999)
    game.guess(500)
    strategies = {r.strategy for r in game.recommendations()}
    assert "bayesian" in strategies


def test_optimal_strategy_on_live_range(game):
    game.start(1, 100, target=80)
    game.guess(50)
    result = game.optimal_strategy()
    assert 51 <= result.optimal_first_guess <= 100


@pytest.mark.parametrize(
    "difference, span, expected",
    [(60, 99, "very far"), (30, 99, "far"), (15, 99, "close"), (5, 99, "very close"), (0, 0, "very close")],
)
def test_proximity_hint(difference, span, expected):
    assert proximity_hint(difference, span) == expected


def test_finishing_without_a_game_raises(game):
    with pytest.raises(RuntimeError):
        game._finish(completed=True)
    assert game.aggregator.sessions == ()
