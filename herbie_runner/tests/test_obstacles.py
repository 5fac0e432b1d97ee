"""
Tests for obstacle spawning, clearing and collision.
"""
import random

import pytest
from conftest import StubRandom, FakeClock
from herbie_runner.gameplay.obstacles import (
    ObstacleField, Obstacle, ObstacleKind, KIND_WEIGHTS,
    difficulty_for, spawn_interval, choose_kind, create_obstacle
)
from herbie_runner.gameplay.terrain import Segment


def make_field(values=None, clock=None) -> ObstacleField:
    rng = StubRandom(values) if values is not None else random.Random(4)
    return ObstacleField(rng=rng, clock=clock or FakeClock())


def wall_at(x: float, y: float = 420.0) -> Obstacle:
    return Obstacle(kind=ObstacleKind.WALL, x=x, y=y, width=30.0, height=60.0)


class TestDifficulty:
    """Tests for the difficulty ramp and spawn schedule."""

    def test_ramp(self):
        assert difficulty_for(0.0) == 0.0
        assert difficulty_for(2500.0) == pytest.approx(0.5)
        assert difficulty_for(5000.0) == 1.0
        assert difficulty_for(1e9) == 1.0

    def test_interval_tightens(self):
        assert spawn_interval(0.0) == pytest.approx(180.0)
        assert spawn_interval(0.5) == pytest.approx(150.0)
        assert spawn_interval(1.0) == pytest.approx(120.0)


class TestChooseKind:
    """Tests for weighted kind selection."""

    def test_early_runs_have_no_gaps(self):
        rng = random.Random(8)
        kinds = {choose_kind(0.1, rng) for _ in range(500)}
        assert kinds == {ObstacleKind.WALL, ObstacleKind.BARRIER}

    def test_early_breakpoints(self):
        """Walls below 0.4, barriers for the rest of the roll."""
        assert choose_kind(0.0, StubRandom([0.39])) == ObstacleKind.WALL
        assert choose_kind(0.0, StubRandom([0.4])) == ObstacleKind.BARRIER
        assert choose_kind(0.0, StubRandom([0.69])) == ObstacleKind.BARRIER
        assert choose_kind(0.0, StubRandom([0.75])) == ObstacleKind.BARRIER
        assert choose_kind(0.0, StubRandom([0.999])) == ObstacleKind.BARRIER

    def test_bands(self):
        assert choose_kind(0.3, StubRandom([0.21])) == ObstacleKind.GAP
        assert choose_kind(0.9, StubRandom([0.21])) == ObstacleKind.WALL
        assert choose_kind(0.9, StubRandom([0.95])) == ObstacleKind.PLATFORM

    def test_all_kinds_appear_later(self):
        rng = random.Random(8)
        kinds = {choose_kind(0.8, rng) for _ in range(500)}
        assert kinds == set(ObstacleKind)

    def test_band_weights_cover_known_kinds(self):
        for _, weights in KIND_WEIGHTS:
            assert all(w > 0 for w in weights.values())


class TestCreateObstacle:
    """Tests for geometry on the host segment."""

    def test_wall_sits_on_segment(self):
        segment = Segment(x=900.0, y=420.0, width=150.0)
        wall = create_obstacle(ObstacleKind.WALL, segment)
        assert wall.x == pytest.approx(945.0)
        assert wall.y == 420.0
        assert wall.top == pytest.approx(360.0)
        assert wall.segment is None

    def test_gap_spans_segment(self):
        segment = Segment(x=900.0, y=420.0, width=150.0)
        gap = create_obstacle(ObstacleKind.GAP, segment)
        assert gap.x == 900.0
        assert gap.width == 150.0
        assert gap.segment is segment

    @pytest.mark.parametrize("kind,offset,width,height", [
        (ObstacleKind.PLATFORM, 45.0, 80.0, 50.0),
        (ObstacleKind.BARRIER, 60.0, 20.0, 80.0),
    ])
    def test_other_kinds(self, kind, offset, width, height):
        segment = Segment(x=0.0, y=420.0, width=150.0)
        obstacle = create_obstacle(kind, segment)
        assert obstacle.x == pytest.approx(offset)
        assert obstacle.width == width
        assert obstacle.height == height


class TestSpawn:
    """Tests for placing obstacles ahead of the camera."""

    def test_spawn_past_right_edge(self, terrain):
        field = make_field([0.3])
        obstacle = field.spawn(terrain, 500.0)

        assert obstacle.kind == ObstacleKind.WALL
        assert obstacle.x == pytest.approx(945.0)
        assert obstacle in field.obstacles

    def test_spawn_gap_marks_segment(self, terrain):
        field = make_field([0.1])
        obstacle = field.spawn(terrain, 2000.0)

        assert obstacle.kind == ObstacleKind.GAP
        assert obstacle.segment.has_gap
        assert terrain.ground_height_at(950.0) is None

    def test_second_gap_on_open_segment_is_skipped(self, terrain):
        field = make_field([0.0])
        first = field.spawn(terrain, 3000.0)
        assert first.kind == ObstacleKind.GAP

        assert field.spawn(terrain, 3100.0) is None
        assert field.obstacles == [first]
        assert first.segment.has_gap

    def test_gap_after_cleared_gap_keeps_its_flag(self, terrain):
        field = make_field([0.0])
        first = field.spawn(terrain, 3000.0)
        field.clear(first)

        second = field.spawn(terrain, 3100.0)
        assert second.segment is first.segment
        assert second.segment.has_gap

        # First gap finishes its bridge and is pruned
        field.next_spawn_distance = 1e9
        field.update(0.5, terrain, 3100.0)
        assert first not in field.obstacles
        assert second.is_active
        assert terrain.ground_height_at(second.x + 10.0) is None

    def test_spawn_without_segment(self, terrain):
        terrain.segments = []
        field = make_field([0.5])
        assert field.spawn(terrain, 500.0) is None
        assert field.obstacles == []

    def test_first_spawn_after_400(self, terrain):
        field = make_field([0.5])
        field.update(0.016, terrain, 400.0)
        assert field.obstacles == []

        field.update(0.016, terrain, 401.0)
        assert len(field.obstacles) == 1
        # 401 + (180 - 60 * 0.0802) + 0.5 * 80
        assert field.next_spawn_distance == pytest.approx(616.188)

    def test_threshold_advances_when_spawn_fails(self, terrain):
        terrain.segments = []
        field = make_field([0.5])
        field.update(0.016, terrain, 401.0)
        assert field.obstacles == []
        assert field.next_spawn_distance > 401.0

    def test_reset(self, terrain):
        field = make_field([0.1])
        field.spawn(terrain, 2000.0)
        field.cleared_count = 3
        field.reset()
        assert field.obstacles == []
        assert field.cleared_count == 0
        assert field.next_spawn_distance == 400.0
        assert not any(s.has_gap for s in terrain.segments)


class TestClear:
    """Tests for tapping obstacles away."""

    def test_clear_once(self):
        clock = FakeClock(12.5)
        field = make_field(clock=clock)
        wall = wall_at(945.0)
        field.obstacles.append(wall)

        assert field.clear(wall)
        assert wall.clearing
        assert not wall.cleared
        assert field.cleared_count == 1
        assert field.last_clear_time == 12.5

    def test_second_clear_is_noop(self):
        field = make_field()
        wall = wall_at(945.0)
        field.obstacles.append(wall)
        field.clear(wall)

        assert not field.clear(wall)
        assert field.cleared_count == 1

    def test_clear_gap_bridges_immediately(self, terrain):
        field = make_field([0.1])
        gap = field.spawn(terrain, 2000.0)
        field.clear(gap)
        assert not gap.segment.has_gap
        assert terrain.ground_height_at(950.0) == pytest.approx(420.0)

    def test_clearing_animates_then_prunes(self, terrain):
        field = make_field()
        field.next_spawn_distance = 1e9
        wall = wall_at(945.0)
        field.obstacles.append(wall)
        field.clear(wall)

        field.update(0.25, terrain, 0.0)
        assert wall.clear_progress == pytest.approx(0.5)
        assert wall in field.obstacles

        field.update(0.25, terrain, 0.0)
        assert wall.cleared
        assert wall not in field.obstacles

    def test_passed_obstacles_are_pruned(self, terrain):
        field = make_field()
        field.next_spawn_distance = 1e9
        gap = create_obstacle(ObstacleKind.GAP, terrain.segments[2])
        terrain.segments[2].has_gap = True
        field.obstacles.append(gap)

        terrain.camera_x = 1000.0
        field.update(0.016, terrain, 0.0)
        assert field.obstacles == []
        assert not terrain.segments[2].has_gap


class TestCollision:
    """Tests for the hiker/obstacle overlap check."""

    def test_hiker_touching_wall(self):
        field = make_field()
        wall = wall_at(945.0)
        field.obstacles.append(wall)
        assert field.check_collision(950.0, 420.0, 16) is wall

    def test_padding_shrinks_hiker_box(self):
        field = make_field()
        field.obstacles.append(wall_at(945.0))
        # Right edge of the padded box is x + 3
        assert field.check_collision(942.0, 420.0, 16) is None
        assert field.check_collision(942.5, 420.0, 16) is not None

    def test_hiker_above_obstacle(self):
        field = make_field()
        field.obstacles.append(wall_at(945.0))
        assert field.check_collision(950.0, 350.0, 16) is None

    def test_clearing_obstacle_is_harmless(self):
        field = make_field()
        wall = wall_at(945.0)
        field.obstacles.append(wall)
        field.clear(wall)
        assert field.check_collision(950.0, 420.0, 16) is None

    def test_gaps_never_collide(self, terrain):
        field = make_field([0.1])
        field.spawn(terrain, 2000.0)
        assert field.check_collision(950.0, 420.0, 16) is None


class TestHitTest:
    """Tests for tapping obstacles."""

    def test_tap_inside_margin(self):
        field = make_field()
        wall = wall_at(945.0)
        field.obstacles.append(wall)
        assert field.hit_test(930.0, 345.0) is wall
        assert field.hit_test(995.0, 440.0) is wall

    def test_tap_outside_margin(self):
        field = make_field()
        field.obstacles.append(wall_at(945.0))
        assert field.hit_test(920.0, 400.0) is None
        assert field.hit_test(960.0, 339.0) is None

    def test_gap_is_tappable(self, terrain):
        field = make_field([0.1])
        gap = field.spawn(terrain, 2000.0)
        assert field.hit_test(1000.0, 410.0) is gap

    def test_cleared_obstacle_not_tappable(self):
        field = make_field()
        wall = wall_at(945.0)
        field.obstacles.append(wall)
        field.clear(wall)
        assert field.hit_test(950.0, 400.0) is None

    def test_visible_window(self):
        field = make_field()
        near = wall_at(500.0)
        far = wall_at(2000.0)
        field.obstacles.extend([near, far])
        assert field.visible(0.0, 800.0) == [near]
