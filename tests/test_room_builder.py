"""
Tests for room construction: walls, door gap, divider and treasure placement.
"""
import random

import pytest
from game.venture.config import DEFAULT_CONFIG, make_config
from game.venture.physics import PhysicsWorld
from game.venture.room_builder import RoomBuilder, RoomBuildError
from game.venture.utils import bodies_overlap


def make_builder(seed=0, config=DEFAULT_CONFIG):
    world = PhysicsWorld(config.width, config.height)
    builder = RoomBuilder(world, config, random.Random(seed))
    builder.init_door()
    builder.build_room()
    return builder


def boundary_walls(builder):
    return [w for w in builder.walls if w is not builder.divider]


class TestWalls:
    """The boundary is a closed rectangle with one door-sized gap."""

    def test_wall_count(self):
        """Top, two bottom segments, left, right and the divider."""
        builder = make_builder()
        assert len(builder.walls) == 6
        assert builder.divider in list(builder.walls)

    def test_top_wall_spans_room(self):
        cfg = DEFAULT_CONFIG
        builder = make_builder()
        top = [w for w in boundary_walls(builder) if w.y == cfg.top_wall_y]
        assert len(top) == 1
        left, _, right, _ = top[0].bounds()
        assert left == pytest.approx(0)
        assert right == pytest.approx(cfg.width)

    def test_bottom_gap_matches_door(self):
        """The bottom segments leave exactly the door width open, centered."""
        cfg = DEFAULT_CONFIG
        builder = make_builder()
        bottom = sorted(
            (w for w in boundary_walls(builder) if w.y == cfg.bottom_wall_y),
            key=lambda w: w.x,
        )
        assert len(bottom) == 2

        left_seg, right_seg = bottom
        gap_left = left_seg.bounds()[2]
        gap_right = right_seg.bounds()[0]
        assert gap_right - gap_left == pytest.approx(cfg.door_width)
        assert (gap_left + gap_right) / 2 == pytest.approx(cfg.width / 2)
        assert left_seg.bounds()[0] == pytest.approx(0)
        assert right_seg.bounds()[2] == pytest.approx(cfg.width)

        door = builder.door
        assert door.bounds()[0] == pytest.approx(gap_left)
        assert door.bounds()[2] == pytest.approx(gap_right)
        assert door.y == pytest.approx(cfg.bottom_wall_y)

    def test_side_walls_close_the_corners(self):
        """Side walls reach from the top wall's outer edge to the bottom wall's outer edge."""
        cfg = DEFAULT_CONFIG
        builder = make_builder()
        sides = [w for w in boundary_walls(builder) if w.height > cfg.wall_thickness]
        assert len(sides) == 2
        for wall in sides:
            _, top, _, bottom = wall.bounds()
            assert top == pytest.approx(cfg.top_wall_y - cfg.wall_thickness / 2)
            assert bottom == pytest.approx(cfg.bottom_wall_y + cfg.wall_thickness / 2)
        xs = sorted(w.bounds()[0] for w in sides)
        assert xs[0] == pytest.approx(0)
        assert xs[1] == pytest.approx(cfg.width - cfg.wall_thickness)

    @pytest.mark.parametrize("seed", range(25))
    def test_divider_height_capped(self, seed):
        cfg = DEFAULT_CONFIG
        builder = make_builder(seed)
        assert builder.divider.height <= cfg.room_height * cfg.wall_height_max_ratio + 1e-9

    def test_divider_cap_applies_over_ratio(self):
        """A taller requested ratio is still cut down to the cap."""
        cfg = make_config(wall_height_ratio=0.8, wall_height_max_ratio=0.4)
        builder = make_builder(config=cfg)
        assert builder.divider.height == pytest.approx(cfg.room_height * 0.4)

    def test_divider_sits_between_player_and_treasure(self):
        cfg = DEFAULT_CONFIG
        builder = make_builder(3)
        px, py = cfg.player_spawn
        assert builder.divider.x == pytest.approx((px + builder.treasure.x) / 2)
        assert builder.divider.y == pytest.approx((py + builder.treasure.y) / 2)


class TestTreasure:
    """Treasure placement stays inside the padded region."""

    def test_region_bounds(self):
        builder = make_builder()
        assert builder.treasure_region() == (105, 288, 285, 452)

    @pytest.mark.parametrize("seed", range(50))
    def test_treasure_inside_padding(self, seed):
        """Strictly more than `padding` from every inner wall face, and clear of the door."""
        cfg = DEFAULT_CONFIG
        builder = make_builder(seed)
        t = builder.treasure
        inner_left = cfg.wall_thickness
        inner_right = cfg.width - cfg.wall_thickness
        inner_top = cfg.top_wall_y + cfg.wall_thickness / 2
        inner_bottom = cfg.bottom_wall_y - cfg.wall_thickness / 2

        assert inner_left + cfg.padding < t.x < inner_right - cfg.padding
        assert inner_top + cfg.padding + cfg.padding_treasure_y_offset < t.y < inner_bottom - cfg.padding
        assert not bodies_overlap(t, builder.door)

    def test_padding_follows_config(self):
        cfg = make_config(padding=40, wall_thickness=10)
        builder = make_builder(config=cfg)
        x_min, x_max, _, _ = builder.treasure_region()

        assert (x_min, x_max) == (51, 342)

    def test_rebuild_replaces_treasure_and_walls(self):
        builder = make_builder()
        old_treasure = builder.treasure
        old_walls = list(builder.walls)
        door = builder.door

        builder.build_room()

        assert builder.treasure is not old_treasure
        assert not old_treasure.active
        assert all(not w.active for w in old_walls)
        assert builder.door is door
        assert len(builder.walls) == 6

    def test_door_repositioned_not_recreated(self):
        builder = make_builder()
        door = builder.door
        door.set_position(0, 0)

        assert builder.init_door() is door
        assert door.x == pytest.approx(DEFAULT_CONFIG.width / 2)

    def test_collect_twice_fires_callback_once(self):
        builder = make_builder()
        collected = []
        builder.set_treasure_collected_callback(lambda: collected.append(1))
        treasure = builder.treasure

        builder.collect_treasure()
        builder.collect_treasure()

        assert collected == [1]
        assert builder.treasure is None
        assert not treasure.active

    def test_missing_treasure_aborts_build(self, monkeypatch):
        """Without a treasure the divider cannot be placed; the build fails loudly."""
        builder = make_builder()
        monkeypatch.setattr(builder, "place_treasure", lambda: None)

        with pytest.raises(RoomBuildError):
            builder.build_room()
