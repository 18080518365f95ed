"""
Arrow manager: single-shot firing, cooldown, and arrow cleanup
"""

from __future__ import annotations

import math
from typing import Callable, Optional

from .config import VentureConfig, DEFAULT_CONFIG, DIRECTION_ANGLES, SoundKeys
from .entities import Arrow, Body, Enemy
from .physics import Collider, Group, PhysicsWorld
from .scheduler import Scheduler
from .sounds import SoundBoard


class ArrowManager:
    """
    At most one arrow is ever in flight: a new one can only be fired once the
    last one is gone AND the cooldown deadline has passed.
    """

    def __init__(self, world: PhysicsWorld, clock: Scheduler, config: VentureConfig = DEFAULT_CONFIG,
                 sounds: Optional[SoundBoard] = None):
        self.world = world
        self.clock = clock
        self.config = config
        self.sounds = sounds if sounds is not None else SoundBoard()

        self.arrows = Group()
        self.next_fire = -math.inf
        self.shots_fired = 0

        self._arrow_wall_collider: Optional[Collider] = None
        self._arrow_enemy_overlap: Optional[Collider] = None
        self._world_bounds_handler: Optional[Callable[[Body], None]] = self._on_world_bounds
        self.world.on_world_bounds(self._world_bounds_handler)

    def _on_world_bounds(self, body: Body):
        # Only arrows from this manager
        if isinstance(body, Arrow) and self.arrows.contains(body):
            body.destroy()

    # ----------------------------
    # Firing
    # ----------------------------

    def can_fire(self) -> bool:
        return self.arrows.count_active() == 0 and self.clock.now > self.next_fire

    def launch_angle(self, direction: int) -> float:
        """Radians for a facing index; 0 (up) points toward negative y"""
        angle = DIRECTION_ANGLES[direction % len(DIRECTION_ANGLES)]
        return math.radians(angle + self.config.angle_offset)

    def shoot_arrow(self, origin_x: float, origin_y: float, direction: int) -> Optional[Arrow]:
        if not self.can_fire():
            return None

        cfg = self.config
        angle = self.launch_angle(direction)

        # Spawn ahead of the player so a wall the player is touching is not hit at once
        spawn_offset = max(cfg.player_width, cfg.player_height) / 2 + cfg.arrow_height / 2 + cfg.arrow_spawn_buffer
        x = origin_x + math.cos(angle) * spawn_offset
        y = origin_y + math.sin(angle) * spawn_offset

        arrow = Arrow(
            x=x, y=y,
            width=cfg.arrow_width,
            height=cfg.arrow_height,
            angle=angle,
            collide_world_bounds=True,
            on_world_bounds=True,
        )
        arrow.set_velocity(math.cos(angle) * cfg.arrow_speed, math.sin(angle) * cfg.arrow_speed)
        self.arrows.prune()
        self.arrows.add(arrow)
        self.world.add(arrow)

        self.next_fire = self.clock.now + cfg.fire_rate_delay
        self.shots_fired += 1
        self.sounds.play(SoundKeys.SHOOT)
        return arrow

    # ----------------------------
    # Collision wiring
    # ----------------------------

    def setup_wall_collisions(self, walls: Group) -> Collider:
        def on_wall(arrow: Body, _wall: Body):
            arrow.destroy()

        self._arrow_wall_collider = self.world.add_collider(self.arrows, walls, on_wall)
        return self._arrow_wall_collider

    def setup_enemy_collisions(self, enemies: Group, is_hunter: Callable[[Enemy], bool],
                               on_enemy_hit: Callable[[Enemy], None]) -> Collider:
        def on_enemy(arrow: Body, enemy: Body):
            arrow.destroy()
            # Hunters absorb the arrow and nothing else happens
            if is_hunter(enemy):
                return
            on_enemy_hit(enemy)

        self._arrow_enemy_overlap = self.world.add_overlap(self.arrows, enemies, on_enemy)
        return self._arrow_enemy_overlap

    # ----------------------------
    # Cleanup
    # ----------------------------

    def clear(self):
        self.arrows.clear(destroy=True)

    def active_count(self) -> int:
        return self.arrows.count_active()

    def release_collisions(self):
        if self._arrow_wall_collider is not None:
            self._arrow_wall_collider.destroy()
            self._arrow_wall_collider = None

        if self._arrow_enemy_overlap is not None:
            self._arrow_enemy_overlap.destroy()
            self._arrow_enemy_overlap = None

    def destroy(self):
        """Drop the bounds listener, both registrations and every arrow; safe to repeat"""
        if self._world_bounds_handler is not None:
            self.world.off_world_bounds(self._world_bounds_handler)
            self._world_bounds_handler = None

        self.release_collisions()
        self.clear()
