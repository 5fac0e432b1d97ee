"""
Caravan of hikers bound to Herbie's pace.
NO UI DEPENDENCIES.
"""
import math
import random
from dataclasses import dataclass
from typing import Callable, List, Optional, Tuple, TYPE_CHECKING

from .constants import (
    HIKER_COUNT, BASE_SPEEDS, BASE_SPEED_STEP, HERBIE_INDEX, HIKER_SIZE,
    HERBIE_GLOW_RADIUS, HIKER_GLOW_RADIUS, TARGET_SPACING, MAX_STRETCH,
    WAIT_RATIO, CATCH_UP_RATIO, CATCH_UP_FACTOR, TENSION_RATIO,
    DISTANCE_SCALE, Y_SMOOTHING, BOOST_DECAY, OFFLOAD_PENALTY, OFFLOAD_BOOST,
    PULSE_DURATION, MIN_FLOW, MAX_FLOW, HIKER_HIT_PADDING
)

if TYPE_CHECKING:
    from .terrain import Terrain


GroundHeightFn = Callable[[float], Optional[float]]


@dataclass
class Hiker:
    """
    One member of the caravan.

    Positions are world pixels: x grows in the direction of travel,
    y grows downward.
    """
    index: int
    base_speed: float
    x: float
    y: float
    target_y: float
    current_speed: float = 0.0
    offload_boost: float = 0.0
    is_waiting: bool = False
    size: float = HIKER_SIZE
    glow_radius: float = HIKER_GLOW_RADIUS

    # Animation scalars, read only by the renderer
    walk_phase: float = 0.0
    bob_offset: float = 0.0
    sway_phase: float = 0.0
    sway_offset: float = 0.0
    pulse_time: float = 0.0

    @property
    def effective_speed(self) -> float:
        """Base speed with the transient offload boost applied."""
        return self.base_speed + self.offload_boost

    @property
    def is_herbie(self) -> bool:
        return self.index == HERBIE_INDEX


@dataclass
class TensionPair:
    """Two neighbours stretched past the tension threshold."""
    behind: Hiker
    ahead: Hiker
    tension: float  # 0 at the threshold, 1 at max stretch


def base_speed_ramp(count: int) -> List[float]:
    """Ascending base speeds, Herbie first."""
    speeds = list(BASE_SPEEDS[:count])
    while len(speeds) < count:
        speeds.append(speeds[-1] + BASE_SPEED_STEP)
    return speeds


class Caravan:
    """
    The hikers and the leader-follower constraint between them.

    Herbie walks at his own (possibly boosted) speed. Each follower tracks
    the slower of its own speed and Herbie's, waits when it bunches up on
    the hiker ahead, and sprints when it falls too far behind. A follower
    is never allowed to pass the hiker ahead of it.
    """

    def __init__(
        self,
        spacing: float = TARGET_SPACING,
        max_stretch: float = MAX_STRETCH,
        boost_decay: float = BOOST_DECAY,
        smoothing: float = Y_SMOOTHING,
        distance_scale: float = DISTANCE_SCALE,
        rng: Optional[random.Random] = None
    ):
        self.spacing = spacing
        self.max_stretch = max_stretch
        self.boost_decay = boost_decay
        self.smoothing = smoothing
        self.distance_scale = distance_scale
        self.rng = rng if rng is not None else random.Random()

        self.hikers: List[Hiker] = []
        self.herbie_label_time: float = 0.0

    def initialize(self, start_x: float, start_y: float, count: int = HIKER_COUNT) -> None:
        """Create a fresh caravan standing in a line behind start_x."""
        self.herbie_label_time = 0.0
        self.hikers = []
        for index, base_speed in enumerate(base_speed_ramp(count)):
            self.hikers.append(Hiker(
                index=index,
                base_speed=base_speed,
                current_speed=base_speed,
                x=start_x - index * self.spacing,
                y=start_y,
                target_y=start_y,
                glow_radius=HERBIE_GLOW_RADIUS if index == HERBIE_INDEX else HIKER_GLOW_RADIUS,
                walk_phase=self.rng.random() * math.pi * 2,
                sway_phase=self.rng.random() * math.pi * 2,
            ))

    @property
    def leader(self) -> Hiker:
        return self.hikers[HERBIE_INDEX]

    # =========================================================================
    # UPDATE
    # =========================================================================

    def advance(self, dt: float, ground_height_at: GroundHeightFn) -> None:
        """
        Move every hiker forward by dt seconds.

        ground_height_at(x) returns the surface y under x, or None where
        there is no ground; hikers hold their height over a gap.
        """
        if not self.hikers:
            return

        self.herbie_label_time = max(0.0, self.herbie_label_time - dt)
        herbie_speed = self.leader.effective_speed

        for hiker in self.hikers:
            if hiker.is_herbie:
                hiker.current_speed = herbie_speed
                hiker.is_waiting = False
                hiker.x += hiker.current_speed * self.distance_scale * dt
            else:
                ahead = self.hikers[hiker.index - 1]
                self._pace_follower(hiker, ahead, herbie_speed)
                step = hiker.current_speed * self.distance_scale * dt
                # Never pass the hiker ahead
                hiker.x = min(hiker.x + step, ahead.x)

            ground_y = ground_height_at(hiker.x)
            if ground_y is not None:
                hiker.target_y = ground_y
                hiker.y += (hiker.target_y - hiker.y) * self.smoothing * dt

            self._animate(hiker, dt)
            self._decay_boost(hiker, dt)

    def _pace_follower(self, hiker: Hiker, ahead: Hiker, herbie_speed: float) -> None:
        """Pick a follower's speed from its gap to the hiker ahead."""
        target_speed = min(hiker.effective_speed, herbie_speed)
        gap = ahead.x - hiker.x

        if gap < self.spacing * WAIT_RATIO:
            hiker.is_waiting = True
            hiker.current_speed = max(0.0, target_speed * (gap / self.spacing))
        elif gap > self.spacing * CATCH_UP_RATIO:
            hiker.is_waiting = False
            hiker.current_speed = hiker.base_speed * CATCH_UP_FACTOR
        else:
            hiker.is_waiting = False
            hiker.current_speed = target_speed

    def _animate(self, hiker: Hiker, dt: float) -> None:
        if hiker.current_speed > 0.1:
            hiker.walk_phase += hiker.current_speed * 8 * dt
            hiker.bob_offset = math.sin(hiker.walk_phase) * 3
        else:
            hiker.bob_offset = 0.0

        if hiker.is_waiting:
            hiker.sway_phase += dt
            hiker.sway_offset = math.sin(hiker.sway_phase) * 2
        else:
            hiker.sway_offset = 0.0

        if hiker.pulse_time > 0:
            hiker.pulse_time = max(0.0, hiker.pulse_time - dt)

    def _decay_boost(self, hiker: Hiker, dt: float) -> None:
        """Walk the boost linearly back to zero without overshooting."""
        step = self.boost_decay * dt
        if abs(hiker.offload_boost) <= step:
            hiker.offload_boost = 0.0
        elif hiker.offload_boost > 0:
            hiker.offload_boost -= step
        else:
            hiker.offload_boost += step

    # =========================================================================
    # COMMANDS
    # =========================================================================

    def offload(self, index: int) -> bool:
        """
        Shift load from a follower onto Herbie.

        The follower slows down and Herbie gets a temporary boost. Repeated
        offloads do not stack past OFFLOAD_BOOST.
        Returns False (and changes nothing) for Herbie or an unknown index.
        """
        if index == HERBIE_INDEX or not 0 <= index < len(self.hikers):
            return False

        self.hikers[index].offload_boost = OFFLOAD_PENALTY
        self.leader.offload_boost = max(self.leader.offload_boost, OFFLOAD_BOOST)
        self.trigger_pulse()
        return True

    def trigger_pulse(self) -> None:
        for hiker in self.hikers:
            hiker.pulse_time = PULSE_DURATION

    def set_leader_label(self, seconds: float) -> None:
        self.herbie_label_time = seconds

    # =========================================================================
    # QUERIES
    # =========================================================================

    def spacings(self) -> List[float]:
        """Distance from each follower to the hiker ahead."""
        return [
            self.hikers[i - 1].x - self.hikers[i].x
            for i in range(1, len(self.hikers))
        ]

    def flow_multiplier(self) -> float:
        """
        1.0 to 3.0 depending on how close the average spacing is to ideal.
        """
        spacings = self.spacings()
        if not spacings:
            return MIN_FLOW

        avg_spacing = sum(spacings) / len(spacings)
        deviation = abs(avg_spacing - self.spacing)
        multiplier = MAX_FLOW - deviation / self.spacing
        return min(MAX_FLOW, max(MIN_FLOW, multiplier))

    def is_overstretched(self) -> bool:
        return any(gap > self.max_stretch for gap in self.spacings())

    def tension_pairs(self) -> List[TensionPair]:
        """Neighbours far enough apart to draw a tension line between."""
        threshold = self.spacing * TENSION_RATIO
        span = self.max_stretch - threshold
        pairs = []
        for i in range(1, len(self.hikers)):
            gap = self.hikers[i - 1].x - self.hikers[i].x
            if gap > threshold:
                tension = (gap - threshold) / span if span > 0 else 1.0
                pairs.append(TensionPair(
                    behind=self.hikers[i],
                    ahead=self.hikers[i - 1],
                    tension=min(1.0, max(0.0, tension)),
                ))
        return pairs

    def leader_position(self) -> Tuple[float, float]:
        return (self.leader.x, self.leader.y)

    def is_leader_on_ground(self, terrain: 'Terrain') -> bool:
        return terrain.is_on_ground(self.leader.x, self.leader.y)

    def hit_test(self, world_x: float, world_y: float) -> Optional[int]:
        """Index of the first hiker within tap range, or None."""
        for hiker in self.hikers:
            distance = math.hypot(world_x - hiker.x, world_y - hiker.y)
            if distance < hiker.size + HIKER_HIT_PADDING:
                return hiker.index
        return None
