"""
Room builder: walls, door and treasure for one square room
"""

from __future__ import annotations

import math
import random
from typing import Callable, Optional

from .config import VentureConfig, DEFAULT_CONFIG
from .entities import Wall, Door, Treasure
from .physics import Group, PhysicsWorld


class RoomBuildError(RuntimeError):
    """Room construction hit a broken precondition and was aborted"""


class RoomBuilder:
    """
    Lays out a square room whose side is the viewport width:
    - a full-width top wall
    - a bottom wall split around a centered door gap
    - left and right walls spanning the room height
    - one divider wall between the player spawn and the treasure

    Walls and treasure are recreated on every build. The door is created once
    and only repositioned afterwards.
    """

    def __init__(self, world: PhysicsWorld, config: VentureConfig = DEFAULT_CONFIG,
                 rng: Optional[random.Random] = None):
        self.world = world
        self.config = config
        self.rng = rng if rng is not None else random.Random()

        self.walls = Group()
        self.door: Optional[Door] = None
        self.treasure: Optional[Treasure] = None
        self.divider: Optional[Wall] = None
        self._on_treasure_collected: Optional[Callable[[], None]] = None

    def set_treasure_collected_callback(self, callback: Callable[[], None]):
        self._on_treasure_collected = callback

    # ----------------------------
    # Door
    # ----------------------------

    def init_door(self) -> Door:
        cfg = self.config
        x = cfg.width / 2
        y = cfg.bottom_wall_y
        if self.door is None:
            self.door = Door(x=x, y=y, width=cfg.door_width, height=cfg.wall_thickness)
            self.world.add(self.door)
        else:
            self.door.set_position(x, y)
        return self.door

    # ----------------------------
    # Room
    # ----------------------------

    def build_room(self):
        cfg = self.config
        width = cfg.width
        thickness = cfg.wall_thickness

        # Clear existing room
        self.walls.clear(destroy=True)
        if self.treasure is not None:
            self.treasure.destroy()
        self.treasure = None
        self.divider = None

        top_wall_y = cfg.top_wall_y
        bottom_wall_y = cfg.bottom_wall_y
        room_height = cfg.room_height
        door_x = width / 2
        door_half = cfg.door_width / 2

        # Top wall
        self._create_wall(width / 2, top_wall_y, width, thickness)

        # Bottom wall with the door gap
        segment = width / 2 - door_half
        self._create_wall(door_x - door_half - segment / 2, bottom_wall_y, segment, thickness)
        self._create_wall(door_x + door_half + segment / 2, bottom_wall_y, segment, thickness)

        # Side walls
        center_y = cfg.room_center_y
        self._create_wall(thickness / 2, center_y, thickness, room_height + thickness)
        self._create_wall(width - thickness / 2, center_y, thickness, room_height + thickness)

        self.place_treasure()

        # Divider halfway between the player spawn and the treasure
        if self.treasure is None:
            raise RoomBuildError("Treasure was not placed before the divider wall")
        player_x, player_y = cfg.player_spawn
        wall_x = (player_x + self.treasure.x) / 2
        wall_y = (player_y + self.treasure.y) / 2
        wall_height = min(room_height * cfg.wall_height_ratio, room_height * cfg.wall_height_max_ratio)
        self.divider = self._create_wall(wall_x, wall_y, thickness, wall_height)

        if cfg.debug_log:
            print(f"[RoomBuilder] Treasure at ({self.treasure.x}, {self.treasure.y}), "
                  f"divider at ({wall_x:.1f}, {wall_y:.1f}) h={wall_height:.1f}")

    def treasure_region(self):
        """
        Inclusive integer (x_min, x_max, y_min, y_max) the treasure is drawn from.

        Every point lies strictly more than `padding` from each inner wall face,
        with the extra vertical offset below the top wall.
        """
        cfg = self.config
        inner_left = cfg.wall_thickness
        inner_right = cfg.width - cfg.wall_thickness
        inner_top = cfg.top_wall_y + cfg.wall_thickness / 2
        inner_bottom = cfg.bottom_wall_y - cfg.wall_thickness / 2
        x_min = int(math.floor(inner_left + cfg.padding)) + 1
        x_max = int(math.ceil(inner_right - cfg.padding)) - 1
        y_min = int(math.floor(inner_top + cfg.padding + cfg.padding_treasure_y_offset)) + 1
        y_max = int(math.ceil(inner_bottom - cfg.padding)) - 1
        return x_min, x_max, y_min, y_max

    def place_treasure(self) -> Treasure:
        if self.treasure is not None:
            self.treasure.destroy()

        x_min, x_max, y_min, y_max = self.treasure_region()
        x = self.rng.randint(x_min, x_max)
        y = self.rng.randint(y_min, y_max)

        self.treasure = Treasure(x=x, y=y, radius=self.config.treasure_radius)
        self.world.add(self.treasure)
        return self.treasure

    def collect_treasure(self):
        """Remove the treasure; a second call in the same room does nothing"""
        if self.treasure is None:
            return
        self.treasure.destroy()
        self.treasure = None
        if self._on_treasure_collected is not None:
            self._on_treasure_collected()

    def _create_wall(self, x: float, y: float, width: float, height: float) -> Wall:
        wall = Wall(x=x, y=y, width=width, height=height)
        self.world.add(wall)
        self.walls.add(wall)
        return wall
