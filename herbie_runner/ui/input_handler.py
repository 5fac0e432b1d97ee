"""
Input Handler - Translates pointer and key presses to gameplay commands.
This is a THIN ADAPTER - no game logic here.
"""
from typing import Optional, Tuple, TYPE_CHECKING

import pygame

from herbie_runner.gameplay.game import Game, GameState

if TYPE_CHECKING:
    from herbie_runner.ui.hud import Hud
    from herbie_runner.ui.palette import Palette
    from herbie_runner.ui.renderer import Renderer


PALETTE_KEYS = {
    pygame.K_1: "dawn",
    pygame.K_2: "sunset",
}


class InputHandler:
    """
    Maps screen input onto the game.

    Taps hit-test obstacles first, then hikers. A tap on nothing just
    dismisses the onboarding prompt.
    """

    def __init__(
        self,
        game: Game,
        renderer: Optional['Renderer'] = None,
        hud: Optional['Hud'] = None,
        palette: Optional['Palette'] = None
    ):
        self.game = game
        self.renderer = renderer
        self.hud = hud
        self.palette = palette

    def to_world(self, screen_x: float, screen_y: float) -> Tuple[float, float]:
        """Screen pixels to world pixels using the current camera."""
        return (screen_x + self.game.camera_x, screen_y)

    def handle_pointer(self, screen_x: float, screen_y: float) -> Optional[str]:
        """
        Handle a tap. Returns 'obstacle', 'hiker' or None for what was hit.
        Ignored unless a run is in progress.
        """
        if self.game.state != GameState.PLAYING:
            return None

        world_x, world_y = self.to_world(screen_x, screen_y)

        obstacle = self.game.obstacles.hit_test(world_x, world_y)
        if obstacle is not None:
            if self.game.tap_obstacle(obstacle) and self.renderer is not None:
                self.renderer.add_tap_feedback(world_x, world_y)
            return 'obstacle'

        hiker_index = self.game.caravan.hit_test(world_x, world_y)
        if hiker_index is not None:
            self.game.offload_hiker(hiker_index)
            return 'hiker'

        self.game.hud.dismiss_onboarding()
        return None

    def handle_key(self, key: int) -> bool:
        """
        Handle a single key press.
        Returns True if the game should quit.
        """
        if key == pygame.K_ESCAPE:
            return True

        state = self.game.state

        if key in (pygame.K_SPACE, pygame.K_RETURN):
            # Start from the title, retry after a game over
            self.game.start_game()

        elif key == pygame.K_p:
            if state == GameState.PLAYING:
                self.game.pause()
            elif state == GameState.PAUSED:
                self.game.resume()

        elif key == pygame.K_m:
            self.game.show_title()

        elif key in PALETTE_KEYS and state == GameState.TITLE:
            if self.palette is not None:
                self.palette.select(PALETTE_KEYS[key])

        elif key == pygame.K_c:
            if self.hud is not None:
                self.hud.toggle_high_contrast()

        return False

    def handle_event(self, event: pygame.event.Event) -> bool:
        """Dispatch one pygame event. Returns True to quit."""
        if event.type == pygame.QUIT:
            return True
        if event.type == pygame.KEYDOWN:
            return self.handle_key(event.key)
        if event.type == pygame.MOUSEBUTTONDOWN and event.button == 1:
            self.handle_pointer(*event.pos)
        elif event.type == pygame.FINGERDOWN:
            # Finger coordinates are normalised to the window
            width, height = pygame.display.get_surface().get_size()
            self.handle_pointer(event.x * width, event.y * height)
        elif event.type == pygame.WINDOWFOCUSLOST:
            self.game.pause()
        return False
