import random

import matplotlib
import pytest

matplotlib.use("Agg")

from hilo import AnalyticsAggregator, EngineConfig, HiLoGame, StrategyEngine  # noqa: E402


class ManualClock:
    """Clock whose time only moves when a test sets it."""

    def __init__(self, now: float = 0.0) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now


@pytest.fixture
def clock():
    return ManualClock()


@pytest.fixture
def config():
    return EngineConfig(simulation_trials=500)


@pytest.fixture
def engine(config):
    return StrategyEngine(config, rng=random.Random(1234))


@pytest.fixture
def aggregator(clock):
    return AnalyticsAggregator(clock=clock)


@pytest.fixture
def game(config, clock):
    return HiLoGame(config=config, rng=random.Random(99), clock=clock)
