"""
Interfaces the game talks to for presentation and persistence.
NO UI DEPENDENCIES.

The UI package provides pygame implementations; the null versions here
let the game run headless (tests, simulations).
"""
from typing import Protocol, runtime_checkable


@runtime_checkable
class AudioOutput(Protocol):
    """Sound feedback. Every method must be safe before activation."""

    def activate(self) -> None: ...

    def update_flow(self, flow_multiplier: float) -> None: ...

    def play_tap(self) -> None: ...

    def play_failure(self) -> None: ...


@runtime_checkable
class HudOutput(Protocol):
    """Screens, counters and the best-score store."""

    def show_title(self) -> None: ...

    def show_hud(self) -> None: ...

    def show_pause(self) -> None: ...

    def hide_pause(self) -> None: ...

    def update_score(self, score: float) -> None: ...

    def update_flow(self, flow_multiplier: float) -> None: ...

    def update_obstacles_cleared(self, count: int) -> None: ...

    def show_game_over(self, score: float, best_score: float) -> None: ...

    def dismiss_onboarding(self) -> None: ...

    def load_best_score(self) -> float: ...

    def save_best_score(self, score: float) -> bool: ...


@runtime_checkable
class PaletteOutput(Protocol):
    """Colour scheme that reacts to flow."""

    def set_flow_shift(self, flow_multiplier: float) -> None: ...


class NullAudio:
    def activate(self) -> None:
        pass

    def update_flow(self, flow_multiplier: float) -> None:
        pass

    def play_tap(self) -> None:
        pass

    def play_failure(self) -> None:
        pass


class NullHud:
    """Keeps the best score in memory only."""

    def __init__(self):
        self.best_score = 0.0

    def show_title(self) -> None:
        pass

    def show_hud(self) -> None:
        pass

    def show_pause(self) -> None:
        pass

    def hide_pause(self) -> None:
        pass

    def update_score(self, score: float) -> None:
        pass

    def update_flow(self, flow_multiplier: float) -> None:
        pass

    def update_obstacles_cleared(self, count: int) -> None:
        pass

    def show_game_over(self, score: float, best_score: float) -> None:
        pass

    def dismiss_onboarding(self) -> None:
        pass

    def load_best_score(self) -> float:
        return self.best_score

    def save_best_score(self, score: float) -> bool:
        if score > self.best_score:
            self.best_score = score
            return True
        return False


class NullPalette:
    def set_flow_shift(self, flow_multiplier: float) -> None:
        pass
