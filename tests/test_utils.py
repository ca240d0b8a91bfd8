import pytest

from hilo.utils import (
    get_bisection_profile,
    knapsack_max_value,
    longest_common_subsequence_length,
    memoize,
)


class TestMemoize:
    def test_calls_wrapped_function_once_per_argument_tuple(self):
        calls = []

        @memoize
        def square(x):
            calls.append(x)
            return x * x

        assert square(4) == 16
        assert square(4) == 16
        assert square(4) == 16
        assert calls == [4]

        assert square(5) == 25
        assert calls == [4, 5]

    def test_keyword_and_structured_arguments(self):
        calls = []

        @memoize
        def total(values, scale=1):
            calls.append(1)
            return sum(values) * scale

        assert total([1, 2, 3], scale=2) == 12
        assert total([1, 2, 3], scale=2) == 12
        assert total([1, 2, 3], scale=3) == 18
        assert len(calls) == 2

    def test_cache_clear(self):
        calls = []

        @memoize
        def ident(x):
            calls.append(x)
            return x

        ident(1)
        ident.cache_clear()
        ident(1)
        assert calls == [1, 1]
        assert len(ident.cache) == 1

    def test_tuple_and_list_arguments_are_cached_separately(self):
        @memoize
        def kind(x=None):
            return type(x).__name__

        assert kind((1, 2)) == "tuple"
        assert kind([1, 2]) == "list"
        assert kind(x=(1, 2)) == "tuple"
        assert kind(x=[1, 2]) == "list"
        assert len(kind.cache) == 4

    def test_preserves_metadata(self):
        @memoize
        def documented(x):
            """Docstring."""
            return x

        assert documented.__name__ == "documented"
        assert documented.__doc__ == "Docstring."

    def test_non_serializable_arguments_raise(self):
        @memoize
        def ident(x):
            return x

        with pytest.raises(TypeError):
            ident(object())


class TestLongestCommonSubsequence:
    @pytest.mark.parametrize(
        "a, b, expected",
        [
            ("ABCBDAB", "BDCABA", 4),
            ("AGGTAB", "GXTXAYB", 4),
            ("", "ABC", 0),
            ("ABC", "ABC", 3),
            ("ABC", "DEF", 0),
            ([50, 25, 37, 43], [50, 75, 37, 43], 3),
        ],
    )
    def test_lengths(self, a, b, expected):
        assert longest_common_subsequence_length(a, b) == expected


class TestKnapsack:
    def test_small_instance(self):
        # Items of weight 4 and 6 fill the capacity exactly: 40 + 30.
        assert knapsack_max_value(10, [5, 4, 6], [10, 40, 30]) == 70

    def test_classic_instance(self):
        assert knapsack_max_value(50, [10, 20, 30], [60, 100, 120]) == 220

    def test_each_item_used_at_most_once(self):
        assert knapsack_max_value(10, [1], [5]) == 5

    def test_nothing_fits(self):
        assert knapsack_max_value(3, [5, 4], [10, 40]) == 0
        assert knapsack_max_value(0, [1], [10]) == 0
        assert knapsack_max_value(10, [], []) == 0

    def test_invalid_input(self):
        with pytest.raises(ValueError):
            knapsack_max_value(-1, [1], [1])
        with pytest.raises(ValueError):
            knapsack_max_value(5, [1, 2], [1])
        with pytest.raises(ValueError):
            knapsack_max_value(5, [-1], [1])


class TestBisectionProfile:
    def test_small_profile(self):
        assert get_bisection_profile(7).tolist() == [3, 2, 3, 1, 3, 2, 3]

    def test_hundred(self):
        profile = get_bisection_profile(100)
        assert len(profile) == 100
        assert profile[49] == 1
        assert profile.max() == 7

    def test_empty_and_invalid(self):
        assert len(get_bisection_profile(0)) == 0
        with pytest.raises(ValueError):
            get_bisection_profile(-1)

    def test_profile_is_read_only(self):
        with pytest.raises(ValueError):
            get_bisection_profile(33)[0] = 99

    def test_memo_only_holds_recursion_sizes(self):
        memo = {}
        profile = get_bisection_profile(10000, memo)
        assert memo[10000] is profile
        assert len(memo) < 40
        assert sum(len(p) for p in memo.values()) < 4 * 10000

    def test_fresh_memo_per_call(self):
        assert get_bisection_profile(33) is not get_bisection_profile(33)
        assert get_bisection_profile(33).tolist() == get_bisection_profile(33).tolist()
