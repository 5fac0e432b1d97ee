"""
Renderer - Draws a FrameSnapshot with pygame.
This is a THIN ADAPTER - no game logic here.
"""
import math
from dataclasses import dataclass
from typing import List

import pygame

from herbie_runner.gameplay.snapshot import FrameSnapshot, DecorationView, ObstacleView, HikerView
from herbie_runner.ui.palette import Palette, Color

# Parallax factors: how fast each layer moves relative to the camera
FAR_PARALLAX = 0.2
MID_PARALLAX = 0.5

TAP_RIPPLE_TIME = 0.4
TAP_RIPPLE_RADIUS = 36


@dataclass
class TapRipple:
    world_x: float
    world_y: float
    age: float = 0.0


def _blend(a: Color, b: Color, t: float) -> Color:
    t = min(1.0, max(0.0, t))
    return (
        int(a[0] + (b[0] - a[0]) * t),
        int(a[1] + (b[1] - a[1]) * t),
        int(a[2] + (b[2] - a[2]) * t),
    )


class Renderer:
    """
    Renders game snapshots to a pygame surface.

    This class reads snapshots but never touches the Game.
    """

    def __init__(self, surface: pygame.Surface, palette: Palette):
        self.surface = surface
        self.palette = palette
        self.ripples: List[TapRipple] = []
        self._label_font = None

    def add_tap_feedback(self, world_x: float, world_y: float) -> None:
        self.ripples.append(TapRipple(world_x, world_y))

    def update(self, dt: float) -> None:
        for ripple in self.ripples:
            ripple.age += dt
        self.ripples = [r for r in self.ripples if r.age < TAP_RIPPLE_TIME]

    def render(self, snapshot: FrameSnapshot) -> None:
        self.render_sky()
        if snapshot.state == "title":
            self.render_title_backdrop()
            return

        cam = snapshot.camera_x
        for element in snapshot.far_layer:
            self._render_decoration(element, cam * FAR_PARALLAX, self.palette.terrain["far"])
        for element in snapshot.mid_layer:
            self._render_decoration(element, cam * MID_PARALLAX, self.palette.terrain["mid"])

        for segment in snapshot.segments:
            if segment.has_gap:
                continue
            rect = pygame.Rect(int(segment.x - cam), int(segment.y), int(segment.width) + 1, int(segment.height))
            pygame.draw.rect(self.surface, self.palette.terrain["foreground"], rect)
            pygame.draw.line(self.surface, self.palette.terrain["highlight"],
                             rect.topleft, rect.topright, 2)

        for obstacle in snapshot.obstacles:
            self._render_obstacle(obstacle, cam)

        for line in snapshot.tension_lines:
            color = _blend(self.palette.text_dim, self.palette.tension, line.tension)
            pygame.draw.line(self.surface, color,
                             (int(line.from_x - cam), int(line.from_y - 8)),
                             (int(line.to_x - cam), int(line.to_y - 8)),
                             1 + int(line.tension * 3))

        # Draw back to front so Herbie is on top
        for hiker in reversed(snapshot.hikers):
            self._render_hiker(hiker, cam)

        leader = snapshot.leader
        if leader is not None and snapshot.herbie_label_time > 0:
            self._render_label("Herbie", leader.x - cam, leader.y - leader.size - 24,
                               min(1.0, snapshot.herbie_label_time))

        for ripple in self.ripples:
            progress = ripple.age / TAP_RIPPLE_TIME
            radius = int(8 + progress * TAP_RIPPLE_RADIUS)
            color = _blend(self.palette.obstacles["glow"], self.palette.sky_bottom, progress)
            pygame.draw.circle(self.surface, color,
                               (int(ripple.world_x - cam), int(ripple.world_y)), radius, 2)

    def render_sky(self) -> None:
        width, height = self.surface.get_size()
        for y in range(0, height, 4):
            color = _blend(self.palette.sky_top, self.palette.sky_bottom, y / height)
            pygame.draw.rect(self.surface, color, (0, y, width, 4))

    def render_title_backdrop(self) -> None:
        width, height = self.surface.get_size()
        horizon = height * 0.7
        far = self.palette.terrain["far"]
        pygame.draw.rect(self.surface, far, (int(width * 0.15), int(horizon - 180), 60, 200))
        pygame.draw.circle(self.surface, far, (int(width * 0.75), int(horizon - 200)), 50, 10)
        pygame.draw.rect(self.surface, self.palette.terrain["foreground"],
                         (0, int(horizon + 10), width, 20))

    def _render_decoration(self, element: DecorationView, offset: float, color: Color) -> None:
        x = int(element.x - offset)
        y = int(element.y)
        w = int(element.width)
        h = int(element.height)
        if element.kind in ("tower", "stairs"):
            pygame.draw.rect(self.surface, color, (x, y - h // 2, w // 2, h))
        elif element.kind == "arch":
            pygame.draw.arc(self.surface, color, (x, y - h // 2, w, h), 0, math.pi, 12)
        elif element.kind == "ring":
            pygame.draw.circle(self.surface, color, (x + w // 2, y), w // 3, 8)
        else:
            pygame.draw.rect(self.surface, color, (x, y, w, max(6, h // 6)))

    def _render_obstacle(self, obstacle: ObstacleView, cam: float) -> None:
        color = self.palette.obstacles.get(obstacle.kind, self.palette.obstacles["wall"])
        glow = 0.5 + math.sin(obstacle.glow_phase) * 0.3
        x = obstacle.x - cam

        if obstacle.kind == "gap":
            if obstacle.clearing:
                # Bridge grows across the hole
                bridge = obstacle.width * obstacle.clear_progress
                pygame.draw.rect(self.surface, self.palette.obstacles["glow"],
                                 (int(x), int(obstacle.y - 5), int(bridge), 10))
            else:
                pygame.draw.rect(self.surface, color,
                                 (int(x), int(obstacle.y), int(obstacle.width), int(obstacle.height)), 2)
            return

        scale = 1.0 - obstacle.clear_progress if obstacle.clearing else 1.0
        if obstacle.kind == "platform" and obstacle.clearing:
            # Platforms sink into the ground
            rect = pygame.Rect(int(x), int(obstacle.y - obstacle.height * scale),
                               int(obstacle.width), int(obstacle.height * scale))
        else:
            w = obstacle.width * scale
            h = obstacle.height * scale
            cx = x + obstacle.width / 2
            cy = obstacle.y - obstacle.height / 2
            rect = pygame.Rect(int(cx - w / 2), int(cy - h / 2), int(w), int(h))

        if rect.width > 0 and rect.height > 0:
            outline = _blend(color, self.palette.obstacles["glow"], glow)
            pygame.draw.rect(self.surface, color, rect)
            pygame.draw.rect(self.surface, outline, rect, 2)

    def _render_hiker(self, hiker: HikerView, cam: float) -> None:
        x = int(hiker.x - cam + hiker.sway_offset)
        y = int(hiker.y - hiker.size / 2 + hiker.bob_offset)
        color = self.palette.hiker_color(hiker.index)

        glow_radius = hiker.glow_radius + int(hiker.pulse_time * 10)
        glow = pygame.Surface((glow_radius * 4, glow_radius * 4), pygame.SRCALPHA)
        pygame.draw.circle(glow, (*self.palette.hiker_glow, 60), (glow_radius * 2, glow_radius * 2), glow_radius * 2)
        self.surface.blit(glow, (x - glow_radius * 2, y - glow_radius * 2))

        pygame.draw.circle(self.surface, color, (x, y), int(hiker.size / 2))
        if hiker.is_waiting:
            pygame.draw.circle(self.surface, self.palette.text_dim, (x, y), int(hiker.size / 2), 1)

    def _render_label(self, text: str, x: float, y: float, alpha: float) -> None:
        if self._label_font is None:
            self._label_font = pygame.font.Font(None, 22)
        image = self._label_font.render(text, True, self.palette.text)
        image.set_alpha(int(255 * alpha))
        self.surface.blit(image, image.get_rect(center=(int(x), int(y))))
