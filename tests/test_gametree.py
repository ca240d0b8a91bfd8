import math

import pytest

from hilo import GameTreeAnalyzer, InvalidRangeError


def test_hundred_range_is_bounded():
    result = GameTreeAnalyzer().get_optimal_strategy(1, 100)

    assert 1 <= result.optimal_first_guess <= 100
    assert math.isfinite(result.expected_move_count)
    assert 0 <= result.expected_move_count <= 10
    assert result.strategy == "minimax"


def test_single_value_range():
    result = GameTreeAnalyzer().get_optimal_strategy(7, 7)
    assert result.optimal_first_guess == 7
    assert result.expected_move_count == 0


def test_two_value_range_prefers_first_candidate_on_ties():
    result = GameTreeAnalyzer().get_optimal_strategy(1, 2)
    assert result.optimal_first_guess == 1
    assert result.expected_move_count == 1.0


def test_three_value_range():
    # Midpoint splits into two singletons at depth 1; the third points leave
    # an empty side plus a pair, which the maximizing reply pushes deeper.
    result = GameTreeAnalyzer().get_optimal_strategy(1, 3)
    assert result.optimal_first_guess == 2
    assert result.expected_move_count == 1.0


def test_depth_bound_caps_the_search():
    result = GameTreeAnalyzer(max_depth=0).get_optimal_strategy(1, 100)
    assert result.expected_move_count == 1.0
    assert result.optimal_first_guess == 50


def test_memo_is_cleared_per_call():
    analyzer = GameTreeAnalyzer()
    analyzer.get_optimal_strategy(1, 50)
    assert analyzer.cache_size > 1

    analyzer.get_optimal_strategy(5, 5)
    assert analyzer.cache_size == 1


def test_repeated_calls_agree():
    analyzer = GameTreeAnalyzer()
    assert analyzer.get_optimal_strategy(1, 64) == analyzer.get_optimal_strategy(1, 64)


def test_inverted_range():
    with pytest.raises(InvalidRangeError):
        GameTreeAnalyzer().get_optimal_strategy(10, 1)


def test_negative_depth_is_rejected():
    with pytest.raises(ValueError):
        GameTreeAnalyzer(max_depth=-1)


def test_result_serializes():
    data = GameTreeAnalyzer().get_optimal_strategy(1, 10).to_dict()
    assert set(data) == {"optimal_first_guess", "expected_move_count", "strategy", "reasoning"}


def test_search_without_a_guess_raises(monkeypatch):
    analyzer = GameTreeAnalyzer()
    monkeypatch.setattr(analyzer, "minimax", lambda low, high, depth, maximizing: (0, None))
    with pytest.raises(RuntimeError):
        analyzer.get_optimal_strategy(1, 10)
