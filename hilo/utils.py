"""Utility functions for the Hi-Lo strategy engine."""

import functools
import json
from typing import Any, Callable, Dict, List, Optional, Sequence, TypeVar

import numpy as np

R = TypeVar("R")


def get_bisection_profile(
    size: int, memo: Optional[Dict[int, np.ndarray]] = None
) -> np.ndarray:
    """
    Compute how many guesses bisection needs for every target.

    Bisection over [low, high] always guesses floor((low + high) / 2), so the
    guess count only depends on the range size and the target's offset from low.
    Each level of the recursion only sees two distinct sub-range sizes, so a
    memo scoped to one call keeps the work and memory linear in size.

    Args:
        size: Number of values in the range. Must be non-negative.
        memo: Sub-range size -> profile dict reused by the recursion. A fresh
            one is created (and dropped on return) when omitted.

    Returns:
        Read-only int array of length size; entry i is the number of guesses
        bisection makes before hitting target low + i.

    Raises:
        ValueError: If size is negative.
    """
    if size < 0:
        raise ValueError("size must be non-negative.")
    if memo is None:
        memo = {}

    cached = memo.get(size)
    if cached is not None:
        return cached

    if size == 0:
        profile = np.zeros(0, dtype=np.int64)
    else:
        mid = (size - 1) // 2
        profile = np.concatenate(
            (
                get_bisection_profile(mid, memo) + 1,
                np.ones(1, dtype=np.int64),
                get_bisection_profile(size - mid - 1, memo) + 1,
            )
        )

    profile.setflags(write=False)
    memo[size] = profile
    return profile


def memoize(fn: Callable[..., R]) -> Callable[..., R]:
    """
    Cache results of a pure function keyed by its JSON-serialized arguments.

    Only sound for pure functions of JSON-serializable arguments: identity,
    mutation and side effects are invisible to the cache key. Top-level
    argument types are part of the key, so f((1, 2)) and f([1, 2]) are cached
    separately; nested tuples and lists still serialize alike.

    Returns:
        Wrapper exposing `cache` (the dict) and `cache_clear()`.

    Raises:
        TypeError: At call time, if the arguments are not JSON-serializable.
    """
    cache: Dict[str, Any] = {}

    @functools.wraps(fn)
    def wrapper(*args: Any, **kwargs: Any) -> R:
        key = json.dumps(
            [
                [type(a).__name__ for a in args],
                args,
                {k: [type(v).__name__, v] for k, v in kwargs.items()},
            ],
            sort_keys=True,
        )
        if key in cache:
            return cache[key]
        result = fn(*args, **kwargs)
        cache[key] = result
        return result

    wrapper.cache = cache  # type: ignore[attr-defined]
    wrapper.cache_clear = cache.clear  # type: ignore[attr-defined]
    return wrapper


def longest_common_subsequence_length(seq_a: Sequence[Any], seq_b: Sequence[Any]) -> int:
    """Length of the longest common subsequence of two sequences, O(|a| * |b|)."""
    dp: List[List[int]] = [[0] * (len(seq_b) + 1) for _ in range(len(seq_a) + 1)]

    for i in range(1, len(seq_a) + 1):
        for j in range(1, len(seq_b) + 1):
            if seq_a[i - 1] == seq_b[j - 1]:
                dp[i][j] = dp[i - 1][j - 1] + 1
            else:
                dp[i][j] = max(dp[i - 1][j], dp[i][j - 1])

    return dp[len(seq_a)][len(seq_b)]


def knapsack_max_value(
    capacity: int, weights: Sequence[int], values: Sequence[float]
) -> float:
    """
    Best total value of a 0/1 knapsack, O(n * capacity) tabulation.

    Args:
        capacity: Maximum total weight, must be >= 0.
        weights: Non-negative integer weight per item.
        values: Value per item, aligned with weights.

    Returns:
        The maximum achievable value (0 when nothing fits).

    Raises:
        ValueError: If capacity or a weight is negative, or the lengths differ.
    """
    if capacity < 0:
        raise ValueError("capacity must be non-negative.")
    if len(weights) != len(values):
        raise ValueError("weights and values must have the same length.")
    if any(w < 0 for w in weights):
        raise ValueError("weights must be non-negative.")

    n = len(weights)
    dp: List[List[float]] = [[0] * (capacity + 1) for _ in range(n + 1)]

    for i in range(1, n + 1):
        w_i, v_i = weights[i - 1], values[i - 1]
        for w in range(capacity + 1):
            dp[i][w] = dp[i - 1][w]
            if w_i <= w:
                dp[i][w] = max(dp[i][w], v_i + dp[i - 1][w - w_i])

    return dp[n][capacity]
