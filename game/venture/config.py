"""
Configuration for the venture room core
Every tunable constant lives here, grouped the way the game reads them.
"""

from __future__ import annotations

from dataclasses import dataclass, replace


# ==============================================================================
# COLORS
# ==============================================================================

COLORS = {
    "PLAYER": (56, 189, 248),
    "DOOR": (139, 69, 19),
    "ENEMY": (34, 197, 94),
    "ENEMY_HIT": (239, 68, 68),
    "ENEMY_HUNTER": (168, 85, 247),  # hunts the player
    "TREASURE": (250, 204, 21),
    "ARROW": (250, 204, 21),
    "WALL": (31, 41, 55),
    "GAME_OVER": (249, 115, 22),
    "BACKGROUND": (11, 15, 26),
    "PLAYFIELD": (0, 0, 0),
    "TEXT_PRIMARY": (230, 237, 243),
    "TEXT_SECONDARY": (148, 163, 184),
    "TEXT_SCORE": (226, 232, 240),
    "TEXT_GAME_OVER": (252, 165, 165),
}

# 0 = up, then clockwise in 45 degree steps
DIRECTION_ANGLES = (0, 45, 90, 135, 180, 225, 270, 315)


class SoundKeys:
    """Names of the fire-and-forget sound triggers"""
    SHOOT = "shoot"
    HIT = "hit"
    BOOM = "boom"
    PICKUP = "pickup"
    POWER_UP = "powerUp"

    ALL = (SHOOT, HIT, BOOM, PICKUP, POWER_UP)


@dataclass(frozen=True)
class VentureConfig:
    """Process-wide constants for one play session"""

    # Viewport
    width: int = 393
    height: int = 759

    # Sizes
    enemy_radius: float = 14.0
    treasure_radius: float = 12.0
    arrow_width: float = 6.0
    arrow_height: float = 12.0
    player_width: float = 12.0
    player_height: float = 16.0
    wall_thickness: float = 24.0
    door_width: float = 90.0

    # Speeds (px/s)
    player_speed: float = 200.0
    arrow_speed: float = 400.0
    enemy_speed: int = 140
    diagonal_multiplier: float = 0.7071

    # Positions & offsets
    room_top_offset: float = 140.0
    player_offset_y: float = 80.0
    padding: int = 80  # treasure clearance from every inner wall face
    padding_treasure_y_offset: int = 40
    spawn_min_x: int = 100
    spawn_min_y: int = 120
    spawn_max_y_offset: int = 160
    arrow_spawn_buffer: float = 4.0

    # Room rules
    enemy_count: int = 3
    wall_height_ratio: float = 0.5
    wall_height_max_ratio: float = 0.5  # safety cap on the divider
    score_treasure: int = 50
    score_enemy: int = 25
    angle_offset: float = -90.0

    # Timing (ms)
    enemy_direction_change_delay: int = 2000
    enemy_spawn_check_delay: int = 1000
    game_over_transition_delay: int = 2000
    fire_rate_delay: int = 200

    # Hunter spawn ramp
    enemy_spawn_start_time: float = 5.0  # seconds before any roll
    enemy_spawn_base_chance: float = 5.0  # percent at the threshold
    enemy_spawn_chance_increment: float = 5.0  # percent per second past it
    enemy_spawn_max_chance: float = 100.0
    enemy_spawn_roll_min: int = 0
    enemy_spawn_roll_max: int = 100

    # Hunter
    hunter_speed_multiplier: float = 1.05
    hunter_spawn_offset: float = 10.0

    # Physics
    enemy_bounce: float = 1.0

    # Diagnostics
    debug_log: bool = False

    def __post_init__(self):
        assert self.width > 0 and self.height > 0, "Viewport must have a positive size"
        assert self.door_width < self.width, "Door must fit in the bottom wall"
        assert 0.0 < self.wall_height_max_ratio <= 0.5, "Divider cap must be at most half the room"
        assert self.enemy_spawn_max_chance <= 100.0, "Spawn chance is a percentage"
        assert self.enemy_spawn_chance_increment > 0, "Spawn chance must grow with time"
        assert 2 * (self.wall_thickness + self.padding) + 2 < self.width, "Treasure padding leaves no room"

    # ----------------------------
    # Derived room geometry
    # ----------------------------

    @property
    def room_height(self) -> float:
        # Square room
        return float(self.width)

    @property
    def top_wall_y(self) -> float:
        return self.room_top_offset + self.wall_thickness / 2

    @property
    def bottom_wall_y(self) -> float:
        return self.top_wall_y + self.room_height

    @property
    def room_center_y(self) -> float:
        return (self.top_wall_y + self.bottom_wall_y) / 2

    @property
    def player_spawn(self):
        return self.width / 2, self.bottom_wall_y - self.player_offset_y

    @property
    def player_radius(self) -> float:
        # Circle covering the player box at any rotation
        return (self.player_width ** 2 + self.player_height ** 2) ** 0.5 / 2

    @property
    def hunter_speed(self) -> float:
        return self.player_speed * self.hunter_speed_multiplier

    @property
    def spawn_chance_offset(self) -> float:
        """Elapsed seconds at which the linear ramp would reach zero"""
        return self.enemy_spawn_start_time - self.enemy_spawn_base_chance / self.enemy_spawn_chance_increment

    @property
    def spawn_cap_time(self) -> float:
        """Elapsed seconds at which the spawn chance saturates"""
        return self.spawn_chance_offset + self.enemy_spawn_max_chance / self.enemy_spawn_chance_increment


DEFAULT_CONFIG = VentureConfig()


def make_config(**overrides) -> VentureConfig:
    """Copy of the default config with selected fields replaced"""
    return replace(DEFAULT_CONFIG, **overrides)
