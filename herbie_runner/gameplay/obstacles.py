"""
Obstacle spawning, clearing and collision.
NO UI DEPENDENCIES.
"""
import logging
import random
import time
from dataclasses import dataclass
from enum import Enum, auto
from typing import Callable, Dict, List, Optional, Tuple

from .terrain import Terrain, Segment
from .constants import (
    FIRST_SPAWN_DISTANCE, BASE_SPAWN_RATE, MIN_SPAWN_RATE, SPAWN_JITTER,
    DIFFICULTY_RAMP, SPAWN_OFFSET, CLEAR_RATE, GLOW_RATE, COLLISION_PADDING,
    HIT_PADDING, OBSTACLE_PRUNE_MARGIN, SEGMENT_HEIGHT
)

logger = logging.getLogger(__name__)


class ObstacleKind(Enum):
    """Things that block the caravan."""
    GAP = auto()        # Hole in a segment, bridged by tapping
    WALL = auto()
    PLATFORM = auto()
    BARRIER = auto()


# (x offset as a fraction of the host segment, width, height).
# A width of None spans the whole segment.
OBSTACLE_GEOMETRY: Dict[ObstacleKind, Tuple[float, Optional[float], float]] = {
    ObstacleKind.GAP: (0.0, None, SEGMENT_HEIGHT),
    ObstacleKind.WALL: (0.3, 30.0, 60.0),
    ObstacleKind.PLATFORM: (0.3, 80.0, 50.0),
    ObstacleKind.BARRIER: (0.4, 20.0, 80.0),
}

# (difficulty upper bound, cumulative weights). A roll past the band total
# falls through to the last kind in the band.
KIND_WEIGHTS: List[Tuple[float, Dict[ObstacleKind, float]]] = [
    (0.2, {
        ObstacleKind.WALL: 0.4,
        ObstacleKind.BARRIER: 0.3,
    }),
    (0.5, {
        ObstacleKind.GAP: 0.25,
        ObstacleKind.WALL: 0.25,
        ObstacleKind.BARRIER: 0.25,
        ObstacleKind.PLATFORM: 0.25,
    }),
    (float("inf"), {
        ObstacleKind.GAP: 0.2,
        ObstacleKind.WALL: 0.25,
        ObstacleKind.BARRIER: 0.25,
        ObstacleKind.PLATFORM: 0.3,
    }),
]


@dataclass
class Obstacle:
    """
    A single obstacle in the world.

    y is the base line (the host segment's surface); the box spans
    [y - height, y]. Only GAP obstacles carry their host segment.
    """
    kind: ObstacleKind
    x: float
    y: float
    width: float
    height: float
    segment: Optional[Segment] = None
    cleared: bool = False
    clearing: bool = False
    clear_progress: float = 0.0
    glow_phase: float = 0.0

    @property
    def is_active(self) -> bool:
        """Still in the way: not yet tapped."""
        return not (self.cleared or self.clearing)

    @property
    def top(self) -> float:
        return self.y - self.height

    @property
    def right(self) -> float:
        return self.x + self.width


def difficulty_for(distance: float) -> float:
    """0.0 at the start of a run, reaching 1.0 after 5000 px."""
    return min(1.0, max(0.0, distance * DIFFICULTY_RAMP))


def spawn_interval(difficulty: float) -> float:
    """Base distance to the next spawn, before jitter."""
    return BASE_SPAWN_RATE - (BASE_SPAWN_RATE - MIN_SPAWN_RATE) * difficulty


def choose_kind(difficulty: float, rng: random.Random) -> ObstacleKind:
    """Weighted random obstacle kind for the given difficulty."""
    for upper_bound, weights in KIND_WEIGHTS:
        if difficulty < upper_bound:
            break

    roll = rng.random()
    cumulative = 0.0
    for kind, weight in weights.items():
        cumulative += weight
        if roll < cumulative:
            return kind
    return kind


def create_obstacle(kind: ObstacleKind, segment: Segment) -> Obstacle:
    """Place an obstacle of the given kind on its host segment."""
    x_fraction, width, height = OBSTACLE_GEOMETRY[kind]
    return Obstacle(
        kind=kind,
        x=segment.x + segment.width * x_fraction,
        y=segment.y,
        width=segment.width if width is None else width,
        height=height,
        segment=segment if kind == ObstacleKind.GAP else None,
    )


class ObstacleField:
    """
    All obstacles of the current run.

    Spawns ahead of the camera on a distance schedule that tightens with
    difficulty, animates clearing, and prunes what is done or left behind.
    """

    def __init__(
        self,
        rng: Optional[random.Random] = None,
        clock: Callable[[], float] = time.monotonic
    ):
        self.rng = rng if rng is not None else random.Random()
        self.clock = clock

        self.obstacles: List[Obstacle] = []
        self.next_spawn_distance: float = FIRST_SPAWN_DISTANCE
        self.cleared_count: int = 0
        self.last_clear_time: Optional[float] = None

    def reset(self) -> None:
        self._release_gaps(self.obstacles)
        self.obstacles = []
        self.next_spawn_distance = FIRST_SPAWN_DISTANCE
        self.cleared_count = 0
        self.last_clear_time = None

    # =========================================================================
    # UPDATE
    # =========================================================================

    def update(self, dt: float, terrain: Terrain, distance: float) -> None:
        if distance > self.next_spawn_distance:
            self.spawn(terrain, distance)
            difficulty = difficulty_for(distance)
            self.next_spawn_distance = (
                distance + spawn_interval(difficulty) + self.rng.random() * SPAWN_JITTER
            )

        for obstacle in self.obstacles:
            if obstacle.clearing and not obstacle.cleared:
                obstacle.clear_progress = min(1.0, obstacle.clear_progress + dt * CLEAR_RATE)
                if obstacle.clear_progress >= 1.0:
                    obstacle.cleared = True
            obstacle.glow_phase += dt * GLOW_RATE

        cutoff = terrain.camera_x - OBSTACLE_PRUNE_MARGIN
        kept = []
        dropped = []
        for obstacle in self.obstacles:
            if obstacle.cleared or obstacle.right < cutoff:
                dropped.append(obstacle)
            else:
                kept.append(obstacle)
        self._release_gaps(dropped)
        self.obstacles = kept

    def spawn(self, terrain: Terrain, distance: float) -> Optional[Obstacle]:
        """
        Spawn one obstacle just past the right edge of the view.
        Returns None when no segment covers the spawn point, or when a gap
        would land on a segment that already has one open.
        """
        kind = choose_kind(difficulty_for(distance), self.rng)
        spawn_x = terrain.camera_x + terrain.view_width + SPAWN_OFFSET

        segment = terrain.segment_at(spawn_x)
        if segment is None:
            return None
        if kind == ObstacleKind.GAP and segment.has_gap:
            # One open gap per segment
            logger.debug(f"Skipped GAP on already open segment at x={segment.x:.0f}")
            return None

        obstacle = create_obstacle(kind, segment)
        if kind == ObstacleKind.GAP:
            segment.has_gap = True

        self.obstacles.append(obstacle)
        logger.debug(f"Spawned {kind.name} at x={obstacle.x:.0f} (distance {distance:.0f})")
        return obstacle

    def _release_gaps(self, obstacles: List[Obstacle]) -> None:
        # Tapped gaps gave their flag back in clear()
        for obstacle in obstacles:
            if obstacle.segment is not None and obstacle.is_active:
                obstacle.segment.has_gap = False

    # =========================================================================
    # COMMANDS
    # =========================================================================

    def clear(self, obstacle: Obstacle) -> bool:
        """
        Start clearing an obstacle.
        Returns False if it is already clearing or cleared.
        """
        if not obstacle.is_active:
            return False

        obstacle.clearing = True
        # A tapped gap is bridged immediately
        if obstacle.segment is not None:
            obstacle.segment.has_gap = False

        self.cleared_count += 1
        self.last_clear_time = self.clock()
        logger.debug(f"Cleared {obstacle.kind.name} ({self.cleared_count} this run)")
        return True

    # =========================================================================
    # QUERIES
    # =========================================================================

    def check_collision(self, x: float, y: float, size: float) -> Optional[Obstacle]:
        """
        First solid obstacle overlapping a hiker box centred on (x, y).
        Gaps are ignored here; falling is a terrain query.
        """
        half = size / 2
        left = x - half + COLLISION_PADDING
        right = x + half - COLLISION_PADDING
        top = y - half + COLLISION_PADDING
        bottom = y + half - COLLISION_PADDING

        for obstacle in self.obstacles:
            if not obstacle.is_active or obstacle.kind == ObstacleKind.GAP:
                continue
            if (right > obstacle.x and left < obstacle.right and
                    bottom > obstacle.top and top < obstacle.y):
                return obstacle
        return None

    def hit_test(self, world_x: float, world_y: float) -> Optional[Obstacle]:
        """First active obstacle under a tap, with a forgiving margin."""
        for obstacle in self.obstacles:
            if not obstacle.is_active:
                continue
            if (obstacle.x - HIT_PADDING <= world_x <= obstacle.right + HIT_PADDING and
                    obstacle.top - HIT_PADDING <= world_y <= obstacle.y + HIT_PADDING):
                return obstacle
        return None

    def visible(self, camera_x: float, view_width: float) -> List[Obstacle]:
        left = camera_x - 100
        right = camera_x + view_width + 100
        return [o for o in self.obstacles if o.x < right and o.right > left]
