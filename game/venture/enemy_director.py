"""
Enemy director: roster, wandering movement, and the late hunter spawn
"""

from __future__ import annotations

import math
import random
from typing import Optional, Set

from .config import VentureConfig, DEFAULT_CONFIG, COLORS
from .entities import Enemy, EnemyKind, Player
from .physics import Group, PhysicsWorld
from .scheduler import Scheduler
from .utils import normalize

MILLISECONDS_PER_SECOND = 1000.0


class EnemyDirector:
    """
    Owns the enemies of the current room.

    Wandering enemies bounce around with random velocities that change every
    few seconds. Once per room a hunter may appear at the top wall; the chance
    grows linearly with time spent in the room. Hunters steer toward the
    player every frame and shrug off arrows.
    """

    def __init__(self, world: PhysicsWorld, clock: Scheduler, config: VentureConfig = DEFAULT_CONFIG,
                 rng: Optional[random.Random] = None):
        self.world = world
        self.clock = clock
        self.config = config
        self.rng = rng if rng is not None else random.Random()

        self.enemies = Group()
        self.hunters: Set[Enemy] = set()
        self.player: Optional[Player] = None
        self.is_game_over = False

        # Per-room state
        self.room_start_time: Optional[float] = None
        self.has_spawned_extra_enemy = False
        self.spawn_rolls = 0

    def init(self, player: Player):
        self.player = player

    def set_game_over(self, is_game_over: bool):
        self.is_game_over = is_game_over

    # ----------------------------
    # Room lifecycle
    # ----------------------------

    def start_room(self, enemy_count: Optional[int] = None):
        if enemy_count is None:
            enemy_count = self.config.enemy_count
        self.room_start_time = self.clock.now
        self.has_spawned_extra_enemy = False
        self.spawn_rolls = 0
        self.clear_enemies()

        for _ in range(enemy_count):
            self.spawn_enemy()

    def clear_enemies(self):
        self.enemies.clear(destroy=True)
        self.hunters.clear()

    # ----------------------------
    # Spawning
    # ----------------------------

    def spawn_enemy(self) -> Enemy:
        """Wandering enemy at a random spot in the middle band of the room"""
        cfg = self.config
        room_top = cfg.top_wall_y + cfg.wall_thickness / 2
        room_bottom = cfg.bottom_wall_y - cfg.wall_thickness / 2
        x = self.rng.randint(cfg.spawn_min_x, cfg.width - cfg.spawn_min_x)
        y = self.rng.randint(
            int(math.ceil(max(room_top + cfg.spawn_min_y, cfg.spawn_min_y))),
            int(math.floor(room_bottom - cfg.spawn_max_y_offset)),
        )

        enemy = Enemy(
            x=x, y=y,
            radius=cfg.enemy_radius,
            kind=EnemyKind.WANDERING,
            color=COLORS["ENEMY"],
            bounce=cfg.enemy_bounce,
            collide_world_bounds=True,
        )
        self._set_random_velocity(enemy)
        self.enemies.add(enemy)
        self.world.add(enemy)
        return enemy

    def spawn_hunter(self) -> Enemy:
        """Hunter centered just below the top wall"""
        cfg = self.config
        x = cfg.width / 2
        y = cfg.top_wall_y + cfg.wall_thickness / 2 + cfg.enemy_radius + cfg.hunter_spawn_offset

        enemy = Enemy(
            x=x, y=y,
            radius=cfg.enemy_radius,
            kind=EnemyKind.HUNTER,
            color=COLORS["ENEMY_HUNTER"],
            bounce=cfg.enemy_bounce,
            collide_world_bounds=True,
        )
        # Velocity is set by update_hunters
        self.enemies.add(enemy)
        self.hunters.add(enemy)
        self.world.add(enemy)
        return enemy

    def spawn_probability(self, elapsed_seconds: float) -> float:
        """Percent chance of a hunter for a check at this room age; 0 before the threshold"""
        cfg = self.config
        if elapsed_seconds < cfg.enemy_spawn_start_time:
            return 0.0
        return min(
            (elapsed_seconds - cfg.spawn_chance_offset) * cfg.enemy_spawn_chance_increment,
            cfg.enemy_spawn_max_chance,
        )

    def check_enemy_spawn(self) -> bool:
        """Roll for the hunter; returns True when it spawned on this call"""
        if self.is_game_over or self.room_start_time is None or self.has_spawned_extra_enemy:
            return False

        cfg = self.config
        elapsed = (self.clock.now - self.room_start_time) / MILLISECONDS_PER_SECOND

        if elapsed < cfg.enemy_spawn_start_time:
            if cfg.debug_log:
                print(f"[EnemyDirector] Elapsed: {elapsed:.2f}s")
            return False

        probability = self.spawn_probability(elapsed)
        roll = self.rng.randint(cfg.enemy_spawn_roll_min, cfg.enemy_spawn_roll_max)
        self.spawn_rolls += 1

        if cfg.debug_log:
            print(f"[EnemyDirector] Elapsed: {elapsed:.2f}s, Probability: {probability:.1f}%, Roll: {roll}")

        # A saturated ramp always spawns, even on the top roll
        if roll < probability or probability >= cfg.enemy_spawn_max_chance:
            self.has_spawned_extra_enemy = True
            self.spawn_hunter()
            if cfg.debug_log:
                print(f"[EnemyDirector] Hunter spawned after {elapsed:.2f}s")
            return True
        return False

    # ----------------------------
    # Movement
    # ----------------------------

    def update_hunters(self):
        """Point every live hunter at the player"""
        if not self.hunters or self.is_game_over or self.player is None:
            return

        px, py = self.player.x, self.player.y
        speed = self.config.hunter_speed

        for enemy in list(self.hunters):
            if not enemy.active:
                self.hunters.discard(enemy)
                continue

            nx, ny = normalize(px - enemy.x, py - enemy.y)
            if nx == 0.0 and ny == 0.0:
                # On top of the player; keep the current heading
                continue
            enemy.set_velocity(nx * speed, ny * speed)

    def change_enemy_directions(self):
        """New random velocity for every enemy still moving on both axes"""
        for enemy in self.enemies:
            if not enemy.behavior.wanders or enemy.hit:
                continue
            if enemy.vx != 0 and enemy.vy != 0:
                self._set_random_velocity(enemy)

    def stun(self, enemy: Enemy) -> bool:
        """Stop a wandering enemy for the rest of the room; False if it was already hit"""
        if enemy.hit or enemy.behavior.projectile_immune or not enemy.active:
            return False
        enemy.hit = True
        enemy.color = COLORS["ENEMY_HIT"]
        enemy.set_velocity(0.0, 0.0)
        return True

    # ----------------------------
    # Queries
    # ----------------------------

    def is_hunter(self, enemy: Enemy) -> bool:
        return enemy in self.hunters

    def wandering_count(self) -> int:
        return sum(1 for e in self.enemies if not e.is_hunter)

    def hunter_count(self) -> int:
        return sum(1 for e in self.enemies if e.is_hunter)

    def _set_random_velocity(self, enemy: Enemy):
        speed = self.config.enemy_speed
        enemy.set_velocity(
            self.rng.randint(-speed, speed),
            self.rng.randint(-speed, speed),
        )
