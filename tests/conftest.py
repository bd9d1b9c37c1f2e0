"""Shared fixtures for the Forest Dash test suite."""

import pytest

from forest_dash.config.settings import Settings
from forest_dash.core.events import EventBus
from forest_dash.game.runner import RunnerGame


class ScriptedRandom:
    """Random source that replays scripted values, then a default.

    The default of 0.99 fails every spawn trial in the game, so a test only
    sees the entities it scripts or places by hand.
    """

    def __init__(self, values=(), default: float = 0.99):
        self._values = list(values)
        self.default = default

    def push(self, *values: float) -> None:
        self._values.extend(values)

    @property
    def remaining(self) -> int:
        return len(self._values)

    def random(self) -> float:
        if self._values:
            return self._values.pop(0)
        return self.default


class FakeClock:
    def __init__(self, now: float = 0.0):
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class FakeScheduler:
    """Stands in for FrameScheduler; tests tick the game by hand."""

    def __init__(self, tick_fn, *, fps: int = 60, loop=None):
        self.tick_fn = tick_fn
        self.fps = fps
        self.is_running = False
        self.starts = 0
        self.stops = 0

    def start(self) -> None:
        self.is_running = True
        self.starts += 1

    def stop(self) -> None:
        self.is_running = False
        self.stops += 1


@pytest.fixture
def settings() -> Settings:
    # Never read a developer's local .env
    return Settings(_env_file=None)


@pytest.fixture
def rng() -> ScriptedRandom:
    return ScriptedRandom()


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def bus() -> EventBus:
    return EventBus()


@pytest.fixture
def game(settings, bus, rng, clock) -> RunnerGame:
    return RunnerGame(
        settings,
        bus=bus,
        rng=rng,
        clock=clock,
        scheduler_factory=FakeScheduler,
    )
