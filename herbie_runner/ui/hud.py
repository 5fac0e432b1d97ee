"""
HUD and screens - score, flow, cleared count, title/pause/game over.
This is a THIN ADAPTER - no game logic here.
"""
import logging
from enum import Enum, auto
from typing import Optional

import pygame

from herbie_runner.ui.palette import Palette
from herbie_runner.ui.storage import PreferenceStore

logger = logging.getLogger(__name__)

ONBOARDING_DISMISS_EVENT = pygame.USEREVENT + 1
ONBOARDING_TIMEOUT_MS = 10000
GAME_OVER_DELAY = 0.6         # seconds of fade before the summary shows
ONBOARDING_TEXT = "Tap obstacles to help Herbie"


class Screen(Enum):
    TITLE = auto()
    HUD = auto()
    GAME_OVER = auto()


class Hud:
    """
    Implements the game's HudOutput.

    Holds display values pushed by the game and draws them over the
    rendered world. Owns the preference store.
    """

    def __init__(self, store: PreferenceStore, palette: Palette):
        self.store = store
        self.palette = palette

        self.screen = Screen.TITLE
        self.paused = False
        self.onboarding_visible = False
        self.onboarding_dismissed = False
        self.game_over_delay: float = 0.0

        self.score: float = 0.0
        self.flow_multiplier: float = 1.0
        self.obstacles_cleared: int = 0
        self.final_score: float = 0.0
        self.best_score: float = 0.0

        self._font: Optional[pygame.font.Font] = None
        self._big_font: Optional[pygame.font.Font] = None

    # =========================================================================
    # HudOutput
    # =========================================================================

    def show_title(self) -> None:
        self.screen = Screen.TITLE
        self.paused = False
        self.onboarding_visible = False

    def show_hud(self) -> None:
        self.screen = Screen.HUD
        self.paused = False
        self._show_onboarding()

    def show_pause(self) -> None:
        self.paused = True

    def hide_pause(self) -> None:
        self.paused = False

    def update_score(self, score: float) -> None:
        self.score = score

    def update_flow(self, flow_multiplier: float) -> None:
        self.flow_multiplier = flow_multiplier

    def update_obstacles_cleared(self, count: int) -> None:
        self.obstacles_cleared = count

    def show_game_over(self, score: float, best_score: float) -> None:
        self.screen = Screen.GAME_OVER
        self.onboarding_visible = False
        self.final_score = score
        self.best_score = best_score
        self.game_over_delay = GAME_OVER_DELAY

    def dismiss_onboarding(self) -> None:
        self.onboarding_dismissed = True
        self.onboarding_visible = False

    def load_best_score(self) -> float:
        return self.store.load_best_score()

    def save_best_score(self, score: float) -> bool:
        return self.store.save_best_score(score)

    # =========================================================================
    # PREFERENCES
    # =========================================================================

    def load_high_contrast(self, default: bool = False) -> bool:
        enabled = self.store.load_high_contrast(default)
        self.palette.set_high_contrast(enabled)
        return enabled

    def toggle_high_contrast(self) -> bool:
        enabled = not self.palette.high_contrast
        self.palette.set_high_contrast(enabled)
        self.store.save_high_contrast(enabled)
        logger.info(f"High contrast {'on' if enabled else 'off'}")
        return enabled

    # =========================================================================
    # TIMERS
    # =========================================================================

    def _show_onboarding(self) -> None:
        if self.onboarding_dismissed:
            return
        self.onboarding_visible = True
        pygame.time.set_timer(ONBOARDING_DISMISS_EVENT, ONBOARDING_TIMEOUT_MS, loops=1)

    def handle_event(self, event: pygame.event.Event) -> None:
        if event.type == ONBOARDING_DISMISS_EVENT:
            self.dismiss_onboarding()

    def update(self, dt: float) -> None:
        """Presentation-only countdowns; runs in every state."""
        if self.game_over_delay > 0:
            self.game_over_delay = max(0.0, self.game_over_delay - dt)

    # =========================================================================
    # DRAWING
    # =========================================================================

    def _fonts(self):
        if self._font is None:
            self._font = pygame.font.Font(None, 28)
            self._big_font = pygame.font.Font(None, 64)
        return self._font, self._big_font

    def _blit_centered(self, surface, font, text: str, y: int, color) -> None:
        image = font.render(text, True, color)
        surface.blit(image, image.get_rect(center=(surface.get_width() // 2, y)))

    def draw(self, surface: pygame.Surface) -> None:
        font, big_font = self._fonts()
        width, height = surface.get_size()
        text_color = self.palette.text
        dim_color = self.palette.text_dim

        if self.screen == Screen.TITLE:
            self._blit_centered(surface, big_font, "HERBIE", height // 3, text_color)
            self._blit_centered(surface, font, "Space to start", height // 2, dim_color)
            self._blit_centered(surface, font, "1/2 palette  -  C contrast", height // 2 + 32, dim_color)
            return

        if self.screen == Screen.HUD:
            surface.blit(font.render(f"{int(self.score)}", True, text_color), (16, 12))
            surface.blit(font.render(f"{self.flow_multiplier:.1f}x", True, text_color), (16, 40))
            cleared = font.render(f"cleared {self.obstacles_cleared}", True, dim_color)
            surface.blit(cleared, (width - cleared.get_width() - 16, 12))

            if self.onboarding_visible:
                self._blit_centered(surface, font, ONBOARDING_TEXT, height - 40, text_color)

            if self.paused:
                overlay = pygame.Surface((width, height), pygame.SRCALPHA)
                overlay.fill((0, 0, 0, 80))
                surface.blit(overlay, (0, 0))
                self._blit_centered(surface, big_font, "PAUSED", height // 2, text_color)
            return

        # Game over: fade the world, then show the summary
        fade = 1.0 - self.game_over_delay / GAME_OVER_DELAY if GAME_OVER_DELAY > 0 else 1.0
        overlay = pygame.Surface((width, height), pygame.SRCALPHA)
        overlay.fill((0, 0, 0, int(120 * fade)))
        surface.blit(overlay, (0, 0))
        if self.game_over_delay > 0:
            return

        self._blit_centered(surface, big_font, f"{int(self.final_score)}", height // 3, text_color)
        self._blit_centered(surface, font, f"best {int(self.best_score)}", height // 3 + 48, dim_color)
        self._blit_centered(surface, font, f"cleared {self.obstacles_cleared}", height // 3 + 76, dim_color)
        self._blit_centered(surface, font, "Space retry  -  M menu", height // 2 + 60, dim_color)
