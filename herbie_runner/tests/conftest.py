"""
Pytest fixtures for Herbie Runner tests.
"""
import random
from typing import List

import pytest

from herbie_runner.config import Settings
from herbie_runner.gameplay.game import Game
from herbie_runner.gameplay.terrain import Terrain


class StubRandom(random.Random):
    """random.Random whose random() replays a fixed sequence."""

    def __init__(self, values: List[float]):
        super().__init__(0)
        self.values = list(values)
        self.calls = 0

    def random(self) -> float:
        value = self.values[self.calls % len(self.values)]
        self.calls += 1
        return value


class FakeClock:
    """Manually advanced wall clock, in seconds."""

    def __init__(self, start: float = 0.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class RecordingAudio:
    def __init__(self):
        self.activated = 0
        self.flow_updates: List[float] = []
        self.taps = 0
        self.failures = 0

    def activate(self) -> None:
        self.activated += 1

    def update_flow(self, flow_multiplier: float) -> None:
        self.flow_updates.append(flow_multiplier)

    def play_tap(self) -> None:
        self.taps += 1

    def play_failure(self) -> None:
        self.failures += 1


class RecordingHud:
    """HudOutput that remembers every call and keeps the best score in memory."""

    def __init__(self, best_score: float = 0.0):
        self.best_score = best_score
        self.calls: List[str] = []
        self.game_over = None
        self.onboarding_dismissed = False

    def _record(self, name: str) -> None:
        self.calls.append(name)

    def count(self, name: str) -> int:
        return self.calls.count(name)

    def show_title(self) -> None:
        self._record('show_title')

    def show_hud(self) -> None:
        self._record('show_hud')

    def show_pause(self) -> None:
        self._record('show_pause')

    def hide_pause(self) -> None:
        self._record('hide_pause')

    def update_score(self, score: float) -> None:
        self._record('update_score')

    def update_flow(self, flow_multiplier: float) -> None:
        self._record('update_flow')

    def update_obstacles_cleared(self, count: int) -> None:
        self._record('update_obstacles_cleared')

    def show_game_over(self, score: float, best_score: float) -> None:
        self._record('show_game_over')
        self.game_over = (score, best_score)

    def dismiss_onboarding(self) -> None:
        self._record('dismiss_onboarding')
        self.onboarding_dismissed = True

    def load_best_score(self) -> float:
        return self.best_score

    def save_best_score(self, score: float) -> bool:
        if score > self.best_score:
            self.best_score = score
            return True
        return False


class RecordingPalette:
    def __init__(self):
        self.shifts: List[float] = []

    def set_flow_shift(self, flow_multiplier: float) -> None:
        self.shifts.append(flow_multiplier)


@pytest.fixture
def settings(tmp_path) -> Settings:
    return Settings(
        view_width=800,
        view_height=600,
        preferences_path=tmp_path / "preferences.json",
    )


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def audio() -> RecordingAudio:
    return RecordingAudio()


@pytest.fixture
def hud() -> RecordingHud:
    return RecordingHud()


@pytest.fixture
def palette() -> RecordingPalette:
    return RecordingPalette()


@pytest.fixture
def game(settings, audio, hud, palette, clock) -> Game:
    return Game(
        settings=settings,
        audio=audio,
        hud=hud,
        palette=palette,
        rng=random.Random(1234),
        clock=clock,
    )


@pytest.fixture
def terrain() -> Terrain:
    terrain = Terrain(rng=random.Random(7))
    terrain.initialize(800, 600)
    return terrain
