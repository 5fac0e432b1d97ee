"""
Tests for the input adapter: pointer mapping and key bindings.
"""
import pygame
import pytest

from herbie_runner.gameplay.game import GameState, FailureReason
from herbie_runner.gameplay.obstacles import Obstacle, ObstacleKind
from herbie_runner.ui.input_handler import InputHandler
from herbie_runner.ui.palette import get_palette


class RecordingRenderer:
    def __init__(self):
        self.taps = []

    def add_tap_feedback(self, world_x, world_y):
        self.taps.append((world_x, world_y))


@pytest.fixture
def handler(game) -> InputHandler:
    return InputHandler(game, renderer=RecordingRenderer(), palette=get_palette("sunset"))


class TestPointer:
    """Tests for taps on the play field."""

    def test_ignored_on_title(self, handler, hud):
        assert handler.handle_pointer(200.0, 420.0) is None
        assert not hud.onboarding_dismissed

    def test_tap_hiker_offloads(self, handler, game):
        game.start_game()
        assert handler.handle_pointer(140.0, 420.0) == 'hiker'
        assert game.caravan.hikers[1].offload_boost < 0

    def test_tap_uses_camera_offset(self, handler, game):
        game.start_game()
        game.terrain.camera_x = 100.0
        assert handler.to_world(40.0, 420.0) == (140.0, 420.0)
        assert handler.handle_pointer(40.0, 420.0) == 'hiker'
        assert game.caravan.hikers[1].offload_boost < 0

    def test_obstacle_beats_hiker(self, handler, game):
        game.start_game()
        wall = Obstacle(kind=ObstacleKind.WALL, x=190.0, y=420.0, width=30.0, height=60.0)
        game.obstacles.obstacles.append(wall)

        assert handler.handle_pointer(200.0, 420.0) == 'obstacle'
        assert wall.clearing
        assert game.caravan.leader.offload_boost == 0.0
        assert handler.renderer.taps == [(200.0, 420.0)]

    def test_tap_empty_space_dismisses_onboarding(self, handler, game, hud):
        game.start_game()
        assert handler.handle_pointer(700.0, 50.0) is None
        assert hud.onboarding_dismissed


class TestKeys:
    """Tests for keyboard bindings."""

    def test_escape_quits(self, handler):
        assert handler.handle_key(pygame.K_ESCAPE)

    def test_space_starts_and_retries(self, handler, game):
        assert not handler.handle_key(pygame.K_SPACE)
        assert game.state == GameState.PLAYING
        game.end_game(FailureReason.COLLISION)
        handler.handle_key(pygame.K_RETURN)
        assert game.state == GameState.PLAYING

    def test_p_toggles_pause(self, handler, game):
        game.start_game()
        handler.handle_key(pygame.K_p)
        assert game.state == GameState.PAUSED
        handler.handle_key(pygame.K_p)
        assert game.state == GameState.PLAYING

    def test_m_returns_to_menu(self, handler, game):
        game.start_game()
        handler.handle_key(pygame.K_m)
        assert game.state == GameState.PLAYING
        game.end_game(FailureReason.FELL)
        handler.handle_key(pygame.K_m)
        assert game.state == GameState.TITLE

    def test_palette_keys_only_on_title(self, handler, game):
        handler.handle_key(pygame.K_1)
        assert handler.palette.name == "dawn"
        game.start_game()
        handler.handle_key(pygame.K_2)
        assert handler.palette.name == "dawn"

    def test_focus_loss_pauses(self, handler, game):
        game.start_game()
        handler.handle_event(pygame.event.Event(pygame.WINDOWFOCUSLOST))
        assert game.state == GameState.PAUSED
