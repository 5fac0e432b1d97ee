"""
Procedural endless terrain: walkable segments plus two parallax layers.
NO UI DEPENDENCIES.
"""
import random
from dataclasses import dataclass
from enum import Enum
from typing import List, Optional

from .constants import (
    VIEW_WIDTH, VIEW_HEIGHT, GROUND_LEVEL, SEGMENT_WIDTH, SEGMENT_HEIGHT,
    INITIAL_SEGMENTS, SCROLL_SPEED, CAMERA_LEAD, CAMERA_EASE, LOOK_AHEAD,
    SEGMENT_PRUNE_MARGIN, DECORATION_PRUNE_MARGIN, ON_GROUND_TOLERANCE
)


class Layer(Enum):
    """Decorative parallax layers, back to front."""
    FAR = "far"
    MID = "mid"


FAR_KINDS = ("tower", "arch", "ring")
MID_KINDS = ("bridge", "stairs", "platform")


@dataclass
class Segment:
    """
    A strip of walkable ground.

    y is the surface height; height is only the drawn thickness.
    has_gap is owned by the obstacle field.
    """
    x: float
    y: float
    width: float
    height: float = SEGMENT_HEIGHT
    has_gap: bool = False

    @property
    def right(self) -> float:
        return self.x + self.width

    def covers(self, x: float) -> bool:
        return self.x <= x < self.right


@dataclass
class Decoration:
    """Background shape with no gameplay effect."""
    layer: Layer
    kind: str
    x: float
    y: float
    width: float
    height: float


class Terrain:
    """
    Generates ground ahead of the camera and recycles what falls behind.

    The camera either follows the leader (eased) or auto-scrolls.
    """

    def __init__(self, rng: Optional[random.Random] = None):
        self.rng = rng if rng is not None else random.Random()

        self.view_width: float = VIEW_WIDTH
        self.view_height: float = VIEW_HEIGHT
        self.base_y: float = VIEW_HEIGHT * GROUND_LEVEL
        self.camera_x: float = 0.0
        self.scroll_speed: float = SCROLL_SPEED

        self.segments: List[Segment] = []
        self.far_layer: List[Decoration] = []
        self.mid_layer: List[Decoration] = []

        self.next_segment_x: float = 0.0
        self.next_far_x: float = 0.0
        self.next_mid_x: float = 0.0

    def initialize(self, view_width: float, view_height: float) -> None:
        """Reset to a fresh strip of flat ground starting at x=0."""
        self.view_width = view_width
        self.view_height = view_height
        self.base_y = view_height * GROUND_LEVEL
        self.camera_x = 0.0
        self.segments = []
        self.far_layer = []
        self.mid_layer = []
        self.next_segment_x = 0.0
        self.next_far_x = 0.0
        self.next_mid_x = 0.0

        for _ in range(INITIAL_SEGMENTS):
            self._generate_segment()
        self._generate_far()
        self._generate_mid()

    # =========================================================================
    # UPDATE
    # =========================================================================

    def update(self, dt: float, leader_x: Optional[float] = None) -> None:
        """Move the camera, then extend and prune all layers."""
        if leader_x is not None:
            target_x = max(0.0, leader_x - self.view_width * CAMERA_LEAD)
            self.camera_x += (target_x - self.camera_x) * min(1.0, dt * CAMERA_EASE)
        else:
            self.camera_x += self.scroll_speed * dt

        right_edge = self.camera_x + self.view_width + LOOK_AHEAD
        while self.next_segment_x < right_edge:
            self._generate_segment()
        while self.next_far_x < right_edge:
            self._generate_far()
        while self.next_mid_x < right_edge:
            self._generate_mid()

        segment_cutoff = self.camera_x - SEGMENT_PRUNE_MARGIN
        decoration_cutoff = self.camera_x - DECORATION_PRUNE_MARGIN
        self.segments = [s for s in self.segments if s.right > segment_cutoff]
        self.far_layer = [d for d in self.far_layer if d.x + d.width > decoration_cutoff]
        self.mid_layer = [d for d in self.mid_layer if d.x + d.width > decoration_cutoff]

    def _generate_segment(self) -> None:
        self.segments.append(Segment(
            x=self.next_segment_x,
            y=self.base_y,
            width=SEGMENT_WIDTH,
        ))
        self.next_segment_x += SEGMENT_WIDTH

    def _generate_far(self) -> None:
        # Large shapes on the horizon, sparse
        self.far_layer.append(Decoration(
            layer=Layer.FAR,
            kind=self.rng.choice(FAR_KINDS),
            x=self.next_far_x,
            y=self.base_y - 200,
            width=100 + self.rng.random() * 100,
            height=150 + self.rng.random() * 150,
        ))
        self.next_far_x += 400 + self.rng.random() * 400

    def _generate_mid(self) -> None:
        self.mid_layer.append(Decoration(
            layer=Layer.MID,
            kind=self.rng.choice(MID_KINDS),
            x=self.next_mid_x,
            y=self.base_y - 100 - self.rng.random() * 100,
            width=80 + self.rng.random() * 80,
            height=60 + self.rng.random() * 60,
        ))
        self.next_mid_x += 250 + self.rng.random() * 250

    # =========================================================================
    # QUERIES
    # =========================================================================

    def segment_at(self, x: float) -> Optional[Segment]:
        for segment in self.segments:
            if segment.covers(x):
                return segment
        return None

    def ground_height_at(self, x: float) -> Optional[float]:
        """Surface y under x, or None over a gap or past the generated strip."""
        segment = self.segment_at(x)
        if segment is None or segment.has_gap:
            return None
        return segment.y

    def is_on_ground(self, x: float, y: float) -> bool:
        segment = self.segment_at(x)
        if segment is None or segment.has_gap:
            return False
        return abs(y - segment.y) < ON_GROUND_TOLERANCE

    def visible_segments(self) -> List[Segment]:
        left = self.camera_x - SEGMENT_PRUNE_MARGIN
        right = self.camera_x + self.view_width + SEGMENT_PRUNE_MARGIN
        return [s for s in self.segments if s.x < right and s.right > left]

    def visible_decorations(self, layer: Layer) -> List[Decoration]:
        left = self.camera_x - DECORATION_PRUNE_MARGIN
        right = self.camera_x + self.view_width + DECORATION_PRUNE_MARGIN
        elements = self.far_layer if layer == Layer.FAR else self.mid_layer
        return [d for d in elements if d.x < right and d.x + d.width > left]
