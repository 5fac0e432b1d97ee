#!/usr/bin/env python3
"""
Herbie Runner - Main Entry Point

Five hikers cross an endless landscape at the pace of the slowest one,
Herbie. Tap obstacles before Herbie reaches them, tap followers to hand
their load to Herbie, and keep the caravan from stretching apart.

Usage:
    python -m herbie_runner.main

Controls:
    Mouse / touch: Clear obstacles, offload hikers
    Space/Enter: Start, retry
    P: Pause / resume
    M: Back to menu after a game over
    1, 2: Dawn / sunset palette (title screen)
    C: Toggle high contrast
    Escape: Quit
"""
import logging

import pygame

from herbie_runner.config import get_settings
from herbie_runner.gameplay.game import Game
from herbie_runner.ui.audio import AudioEngine
from herbie_runner.ui.hud import Hud
from herbie_runner.ui.input_handler import InputHandler
from herbie_runner.ui.palette import get_palette
from herbie_runner.ui.renderer import Renderer
from herbie_runner.ui.storage import PreferenceStore

logger = logging.getLogger(__name__)


def main():
    """Main entry point."""
    settings = get_settings()

    # Configure logging
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    pygame.init()
    pygame.display.set_caption("Herbie Runner")
    screen = pygame.display.set_mode((settings.view_width, settings.view_height))
    clock = pygame.time.Clock()

    palette = get_palette(settings.palette)
    hud = Hud(PreferenceStore(settings.preferences_path), palette)
    hud.load_high_contrast(settings.high_contrast)

    audio = AudioEngine()
    game = Game(settings=settings, audio=audio, hud=hud, palette=palette)

    renderer = Renderer(screen, palette)
    input_handler = InputHandler(game, renderer=renderer, hud=hud, palette=palette)

    hud.show_title()
    logger.info("Starting game loop...")

    should_quit = False
    while not should_quit:
        dt = clock.tick(settings.fps) / 1000.0

        for event in pygame.event.get():
            hud.handle_event(event)
            if input_handler.handle_event(event):
                should_quit = True

        # Game clamps dt itself; presentation timers run in every state
        game.update(dt)
        renderer.update(dt)
        hud.update(dt)

        renderer.render(game.snapshot())
        hud.draw(screen)
        pygame.display.flip()

    audio.stop()
    pygame.quit()
    logger.info("Bye")


if __name__ == "__main__":
    main()
