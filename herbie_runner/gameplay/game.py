"""
Main Game class - orchestrates all gameplay systems.
NO UI DEPENDENCIES.

This is the central gameplay module. It can be fully tested
without any UI framework.
"""
import logging
import random
import time
from dataclasses import dataclass
from enum import Enum, auto
from typing import Callable, List, Optional

from herbie_runner.config import Settings, get_settings

from .caravan import Caravan
from .terrain import Terrain, Layer
from .obstacles import ObstacleField, Obstacle
from .collaborators import (
    AudioOutput, HudOutput, PaletteOutput, NullAudio, NullHud, NullPalette
)
from .snapshot import (
    FrameSnapshot, HikerView, SegmentView, DecorationView, ObstacleView, TensionView
)
from .constants import START_X, GROUND_LEVEL, SCORE_DIVISOR, HERBIE_LABEL_TIME, MIN_FLOW

logger = logging.getLogger(__name__)


class GameState(Enum):
    """Top-level state machine."""
    TITLE = auto()      # Menu, nothing simulated
    PLAYING = auto()    # Caravan moving
    PAUSED = auto()     # Frozen mid-run
    GAMEOVER = auto()   # Run ended, waiting for retry or menu


class FailureReason(Enum):
    """Why a run ended, in the order they are checked."""
    COLLISION = auto()
    FELL = auto()
    OVERSTRETCHED = auto()


@dataclass
class GameEvent:
    """An event that occurred during gameplay (for UI to react to)."""
    pass


@dataclass
class StateChangedEvent(GameEvent):
    old_state: GameState
    new_state: GameState


@dataclass
class ObstacleClearedEvent(GameEvent):
    """The player tapped an obstacle away."""
    obstacle: Obstacle
    total_cleared: int


@dataclass
class HikerOffloadedEvent(GameEvent):
    """A follower handed load to Herbie."""
    hiker_index: int


@dataclass
class RunEndedEvent(GameEvent):
    reason: FailureReason
    score: float
    best_score: float
    obstacles_cleared: int


class Game:
    """
    The main game class that owns one caravan, its terrain and obstacles.

    This class is COMPLETELY DECOUPLED from UI.
    Presentation is reached through injected collaborators; state is
    exposed as a read-only snapshot.

    Usage:
        game = Game()
        game.start_game()
        while game.state == GameState.PLAYING:
            events = game.update(dt)
            renderer.render(game.snapshot())
    """

    def __init__(
        self,
        settings: Optional[Settings] = None,
        audio: Optional[AudioOutput] = None,
        hud: Optional[HudOutput] = None,
        palette: Optional[PaletteOutput] = None,
        rng: Optional[random.Random] = None,
        clock: Callable[[], float] = time.monotonic
    ):
        self.settings = settings if settings is not None else get_settings()
        self.audio = audio if audio is not None else NullAudio()
        self.hud = hud if hud is not None else NullHud()
        self.palette = palette if palette is not None else NullPalette()
        self.rng = rng if rng is not None else random.Random()
        self.clock = clock

        self.view_width = float(self.settings.view_width)
        self.view_height = float(self.settings.view_height)

        self.terrain = Terrain(rng=self.rng)
        self.caravan = Caravan(
            spacing=self.settings.target_spacing,
            max_stretch=self.settings.max_stretch,
            boost_decay=self.settings.boost_decay,
            smoothing=self.settings.y_smoothing,
            distance_scale=self.settings.distance_scale,
            rng=self.rng,
        )
        self.obstacles = ObstacleField(rng=self.rng, clock=clock)

        self.state = GameState.TITLE

        # Run state
        self.distance: float = 0.0
        self.score: float = 0.0
        self.flow_multiplier: float = MIN_FLOW
        self.obstacles_cleared: int = 0
        self.run_start_x: float = 0.0
        self.failure_reason: Optional[FailureReason] = None
        self._last_hud_push: Optional[float] = None

        # Event queue for UI notifications
        self._events: List[GameEvent] = []

    # =========================================================================
    # STATE MACHINE
    # =========================================================================

    def _set_state(self, new_state: GameState) -> None:
        old_state = self.state
        self.state = new_state
        self._events.append(StateChangedEvent(old_state, new_state))
        logger.info(f"State {old_state.name} -> {new_state.name}")

    def start_game(self) -> bool:
        """
        Begin a fresh run from the title screen or after a game over.

        A retry reinitializes exactly like a start from the title but
        raises a single GAMEOVER -> PLAYING state change.
        """
        if self.state not in (GameState.TITLE, GameState.GAMEOVER):
            return False

        self.audio.activate()

        self.terrain.initialize(self.view_width, self.view_height)
        self.caravan.initialize(START_X, self.view_height * GROUND_LEVEL)
        self.obstacles.reset()

        self.run_start_x = self.caravan.leader.x
        self.distance = 0.0
        self.score = 0.0
        self.flow_multiplier = MIN_FLOW
        self.obstacles_cleared = 0
        self.failure_reason = None
        self._last_hud_push = None
        self.caravan.set_leader_label(HERBIE_LABEL_TIME)

        self.hud.show_hud()
        self.hud.update_score(0.0)
        self.hud.update_flow(MIN_FLOW)

        self._set_state(GameState.PLAYING)
        return True

    def pause(self) -> bool:
        if self.state != GameState.PLAYING:
            return False
        self._set_state(GameState.PAUSED)
        self.hud.show_pause()
        return True

    def resume(self) -> bool:
        if self.state != GameState.PAUSED:
            return False
        self._set_state(GameState.PLAYING)
        self.hud.hide_pause()
        return True

    def show_title(self) -> bool:
        """Back to the menu after a game over."""
        if self.state != GameState.GAMEOVER:
            return False
        self._set_state(GameState.TITLE)
        self.hud.show_title()
        return True

    def end_game(self, reason: FailureReason) -> bool:
        if self.state != GameState.PLAYING:
            return False

        self.failure_reason = reason
        self._set_state(GameState.GAMEOVER)
        self.audio.play_failure()

        previous_best = self.hud.load_best_score()
        is_new_record = self.hud.save_best_score(self.score)
        best_score = self.score if is_new_record else previous_best

        logger.info(
            f"Run ended ({reason.name}): score {self.score:.0f}, "
            f"best {best_score:.0f}, cleared {self.obstacles_cleared}"
        )
        self.hud.show_game_over(self.score, best_score)
        self._events.append(RunEndedEvent(reason, self.score, best_score, self.obstacles_cleared))
        return True

    # =========================================================================
    # PLAYER COMMANDS
    # =========================================================================

    @property
    def camera_x(self) -> float:
        return self.terrain.camera_x

    def tap_obstacle(self, obstacle: Obstacle) -> bool:
        """Clear a tapped obstacle. False if it was already on its way out."""
        if self.state != GameState.PLAYING:
            return False
        if not self.obstacles.clear(obstacle):
            return False

        self.obstacles_cleared = self.obstacles.cleared_count
        self.audio.play_tap()
        self.hud.dismiss_onboarding()
        self.caravan.trigger_pulse()
        self._events.append(ObstacleClearedEvent(obstacle, self.obstacles_cleared))
        return True

    def offload_hiker(self, index: int) -> bool:
        """Tap on a follower: move its load onto Herbie."""
        if self.state != GameState.PLAYING:
            return False
        if not self.caravan.offload(index):
            return False

        self.audio.play_tap()
        self.hud.dismiss_onboarding()
        self._events.append(HikerOffloadedEvent(index))
        return True

    # =========================================================================
    # UPDATE LOOP
    # =========================================================================

    def update(self, dt: float) -> List[GameEvent]:
        """
        Advance the run by dt seconds (clamped) if playing.
        Returns events since the previous call, including those raised
        by commands in between.
        """
        if self.state == GameState.PLAYING:
            self._update_playing(min(dt, self.settings.max_delta_time))

        events, self._events = self._events, []
        return events

    def _update_playing(self, dt: float) -> None:
        self.caravan.advance(dt, self.terrain.ground_height_at)

        leader_x = self.caravan.leader.x
        self.distance = max(0.0, leader_x - self.run_start_x)
        self.score = self.distance / SCORE_DIVISOR

        self.terrain.update(dt, leader_x)
        self.obstacles.update(dt, self.terrain, self.distance)

        self.flow_multiplier = self.caravan.flow_multiplier()
        self.obstacles_cleared = self.obstacles.cleared_count

        self._push_presentation()

        reason = self.check_failure()
        if reason is not None:
            self.end_game(reason)

    def _push_presentation(self) -> None:
        """Feed palette, audio and HUD at most once per interval."""
        now_ms = self.clock() * 1000.0
        if (self._last_hud_push is not None and
                now_ms - self._last_hud_push < self.settings.hud_update_interval_ms):
            return
        self._last_hud_push = now_ms

        self.palette.set_flow_shift(self.flow_multiplier)
        self.audio.update_flow(self.flow_multiplier)
        self.hud.update_score(self.score)
        self.hud.update_flow(self.flow_multiplier)
        self.hud.update_obstacles_cleared(self.obstacles_cleared)

    def check_failure(self) -> Optional[FailureReason]:
        """First failure that applies, in priority order, or None."""
        leader = self.caravan.leader
        if self.obstacles.check_collision(leader.x, leader.y, leader.size) is not None:
            return FailureReason.COLLISION
        if not self.caravan.is_leader_on_ground(self.terrain):
            return FailureReason.FELL
        if self.caravan.is_overstretched():
            return FailureReason.OVERSTRETCHED
        return None

    # =========================================================================
    # STATE QUERIES (for UI to read)
    # =========================================================================

    def snapshot(self) -> FrameSnapshot:
        """Immutable copy of everything on screen this frame."""
        hikers = tuple(
            HikerView(
                index=h.index, x=h.x, y=h.y, size=h.size, glow_radius=h.glow_radius,
                is_waiting=h.is_waiting, bob_offset=h.bob_offset,
                sway_offset=h.sway_offset, pulse_time=h.pulse_time,
            )
            for h in self.caravan.hikers
        )
        segments = tuple(
            SegmentView(s.x, s.y, s.width, s.height, s.has_gap)
            for s in self.terrain.visible_segments()
        )
        far_layer = tuple(
            DecorationView(d.kind, d.x, d.y, d.width, d.height)
            for d in self.terrain.visible_decorations(Layer.FAR)
        )
        mid_layer = tuple(
            DecorationView(d.kind, d.x, d.y, d.width, d.height)
            for d in self.terrain.visible_decorations(Layer.MID)
        )
        obstacles = tuple(
            ObstacleView(
                kind=o.kind.name.lower(), x=o.x, y=o.y, width=o.width, height=o.height,
                clearing=o.clearing, clear_progress=o.clear_progress, glow_phase=o.glow_phase,
            )
            for o in self.obstacles.visible(self.terrain.camera_x, self.view_width)
            if not o.cleared
        )
        tension_lines = tuple(
            TensionView(p.behind.x, p.behind.y, p.ahead.x, p.ahead.y, p.tension)
            for p in self.caravan.tension_pairs()
        )
        return FrameSnapshot(
            state=self.state.name.lower(),
            camera_x=self.terrain.camera_x,
            view_width=self.view_width,
            view_height=self.view_height,
            hikers=hikers,
            segments=segments,
            far_layer=far_layer,
            mid_layer=mid_layer,
            obstacles=obstacles,
            tension_lines=tension_lines,
            flow_multiplier=self.flow_multiplier,
            score=self.score,
            obstacles_cleared=self.obstacles_cleared,
            herbie_label_time=self.caravan.herbie_label_time,
        )

    # =========================================================================
    # CONVENIENCE METHODS FOR TESTING
    # =========================================================================

    def simulate(self, seconds: float, dt: float = 1 / 60) -> List[GameEvent]:
        """
        Simulate the game for a number of seconds.
        Stops early if the run ends. Returns all events that occurred.
        """
        all_events = []
        elapsed = 0.0
        while elapsed < seconds and self.state == GameState.PLAYING:
            all_events.extend(self.update(dt))
            elapsed += dt
        return all_events
