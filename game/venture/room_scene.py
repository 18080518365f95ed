"""
RoomScene - the per-frame driver of one play session
----------------------------------------------------
- Resolves directional input into player velocity and facing
- Fires the arrow when asked and allowed
- Steps the physics world (collision callbacks fire inside the step)
- Advances the game clock, which runs the enemy timers
- Rebuilds the room on door entry, hands the final score over after game over

The scene knows nothing about windows, keyboards or speakers: input arrives as
a Controls value and sound goes through a SoundBoard.
"""

from __future__ import annotations

import random
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional

from .arrows import ArrowManager
from .collisions import CollisionManager
from .config import VentureConfig, DEFAULT_CONFIG, COLORS, SoundKeys
from .enemy_director import EnemyDirector
from .entities import Player
from .physics import PhysicsWorld
from .room_builder import RoomBuilder
from .scheduler import Scheduler, TimerEvent
from .sounds import SoundBoard
from .state import GamePhase, SessionState


@dataclass
class Controls:
    """Resolved input for one frame, whatever the device"""
    left: bool = False
    right: bool = False
    up: bool = False
    down: bool = False
    fire: bool = False


def direction_from_velocity(vx: float, vy: float, current: int = 0) -> int:
    """
    Facing index for a movement vector:
    0 up, 1 up-right, 2 right, 3 down-right, 4 down, 5 down-left, 6 left, 7 up-left.
    A zero vector keeps the current facing.
    """
    if vy < 0:
        if vx < 0:
            return 7
        if vx > 0:
            return 1
        return 0
    if vy > 0:
        if vx < 0:
            return 5
        if vx > 0:
            return 3
        return 4
    if vx < 0:
        return 6
    if vx > 0:
        return 2
    return current


class RoomScene:
    """One play session: rooms come and go until the player touches an enemy"""

    def __init__(
        self,
        config: VentureConfig = DEFAULT_CONFIG,
        sounds: Optional[SoundBoard] = None,
        seed: Optional[int] = None,
        on_exit: Optional[Callable[[int], None]] = None,
    ):
        self.config = config
        self.sounds = sounds if sounds is not None else SoundBoard()
        self.seed = seed
        self.on_exit = on_exit

        self.state = SessionState()
        self.events: Dict[str, float] = {}
        self.exited = False
        self.game_over_transitioned = False

        self.clock: Scheduler = None  # type: ignore
        self.world: PhysicsWorld = None  # type: ignore
        self.player: Player = None  # type: ignore
        self.arrow_manager: ArrowManager = None  # type: ignore
        self.enemy_director: EnemyDirector = None  # type: ignore
        self.room_builder: RoomBuilder = None  # type: ignore
        self.collision_manager: CollisionManager = None  # type: ignore

        self._timer_events: List[TimerEvent] = []
        self._delayed_calls: List[TimerEvent] = []
        self._created = False

    # ----------------------------
    # Scene lifecycle
    # ----------------------------

    def create(self):
        """Set up a fresh session; calling it again restarts the scene"""
        if self._created:
            self.shutdown()

        cfg = self.config
        self.state.reset()
        self.exited = False
        self.game_over_transitioned = False
        self._reset_events()

        rng = random.Random(self.seed)
        self.clock = Scheduler()
        self.world = PhysicsWorld(cfg.width, cfg.height)

        spawn_x, spawn_y = cfg.player_spawn
        self.player = Player(
            x=spawn_x, y=spawn_y,
            radius=cfg.player_radius,
            facing=0,  # start facing up
            color=COLORS["PLAYER"],
            collide_world_bounds=True,
        )
        self.world.add(self.player)

        # Managers
        self.arrow_manager = ArrowManager(self.world, self.clock, cfg, self.sounds)
        self.enemy_director = EnemyDirector(self.world, self.clock, cfg, rng)
        self.room_builder = RoomBuilder(self.world, cfg, rng)
        self.collision_manager = CollisionManager(self.world, self.sounds)

        self.enemy_director.init(self.player)
        self.collision_manager.init(
            self.player,
            self.arrow_manager,
            self.enemy_director,
            self.room_builder,
            self.state,
        )
        self.collision_manager.set_game_over_callback(self._on_game_over)
        self.collision_manager.set_score_change_callback(self._add_score)
        self.room_builder.set_treasure_collected_callback(self._on_treasure_collected)

        # Door is created once and stays put
        self.room_builder.init_door()
        self.build_room()

        self.collision_manager.setup_collisions()
        self.collision_manager.setup_door_overlap(self._on_door_enter)

        self._timer_events.append(self.clock.add_event(
            cfg.enemy_direction_change_delay, self.enemy_director.change_enemy_directions, loop=True))
        self._timer_events.append(self.clock.add_event(
            cfg.enemy_spawn_check_delay, self.enemy_director.check_enemy_spawn, loop=True))

        self.sounds.play_music()
        self._created = True
        return self

    def update(self, dt_ms: float, controls: Optional[Controls] = None):
        """Advance one frame of dt_ms milliseconds"""
        if not self._created:
            raise RuntimeError("RoomScene.create() must run before update()")
        self._reset_events()
        shots_before = self.arrow_manager.shots_fired

        if not self.state.is_game_over:
            self._apply_input(controls or Controls())
            self.enemy_director.update_hunters()

        self.world.step(dt_ms / 1000.0)
        self.clock.advance(dt_ms)

        self.events["shot"] = float(self.arrow_manager.shots_fired - shots_before)

    def shutdown(self):
        """Destroy timers, delayed calls, colliders and listeners; safe to repeat"""
        for timer in self._timer_events:
            timer.destroy()
        self._timer_events = []

        for call in self._delayed_calls:
            if not call.has_dispatched:
                call.destroy()
        self._delayed_calls = []

        if self.collision_manager is not None:
            self.collision_manager.cleanup()
        if self.arrow_manager is not None:
            self.arrow_manager.destroy()
        if self.clock is not None:
            self.clock.shutdown()
        self.sounds.stop()

    # ----------------------------
    # Player movement & actions
    # ----------------------------

    def _apply_input(self, controls: Controls):
        cfg = self.config
        speed = cfg.player_speed
        vx = 0.0
        vy = 0.0

        if controls.left:
            vx = -speed
        elif controls.right:
            vx = speed

        if controls.up:
            vy = -speed
        elif controls.down:
            vy = speed

        if vx != 0 and vy != 0:
            vx *= cfg.diagonal_multiplier
            vy *= cfg.diagonal_multiplier

        if vx != 0 or vy != 0:
            self.player.facing = direction_from_velocity(vx, vy, self.player.facing)

        if controls.fire and self.arrow_manager.can_fire():
            self.shoot_arrow()

        self.player.set_velocity(vx, vy)

    def shoot_arrow(self):
        return self.arrow_manager.shoot_arrow(self.player.x, self.player.y, self.player.facing)

    # ----------------------------
    # Rooms
    # ----------------------------

    def build_room(self):
        """Tear down the current room and lay out the next one"""
        self.arrow_manager.clear()
        self.enemy_director.clear_enemies()

        self.room_builder.build_room()
        self.enemy_director.start_room(self.config.enemy_count)

        spawn_x, spawn_y = self.config.player_spawn
        self.player.set_velocity(0.0, 0.0)
        self.player.set_position(spawn_x, spawn_y)

        # The treasure is a new object, so its handler must be registered again
        self.collision_manager.setup_treasure_collisions()

    def _on_door_enter(self):
        if self.state.is_game_over:
            return
        self.state.room_index += 1
        self.events["room"] += 1.0
        if self.config.debug_log:
            print(f"[RoomScene] Entering room {self.state.room_index} with score {self.state.score}")
        self.build_room()
        self.sounds.play(SoundKeys.POWER_UP)

    # ----------------------------
    # Score & game over
    # ----------------------------

    def _add_score(self, points: int):
        self.state.add_score(points)
        self.events["score"] += float(points)

    def _on_treasure_collected(self):
        self.events["treasure"] += 1.0

    def _on_game_over(self):
        if self.state.is_game_over:
            return
        self.state.phase = GamePhase.GAME_OVER
        self.state.game_over_time = self.clock.now
        self.enemy_director.set_game_over(True)
        self.events["game_over"] = 1.0
        if self.config.debug_log:
            print(f"[RoomScene] Game over in room {self.state.room_index}, score {self.state.score}")

        if not self.game_over_transitioned:
            self.game_over_transitioned = True
            self._delayed_calls.append(
                self.clock.delayed_call(self.config.game_over_transition_delay, self._exit_to_menu)
            )

    def _exit_to_menu(self):
        if self.exited:
            return
        self.exited = True
        if self.on_exit is not None:
            self.on_exit(self.state.score)

    def _reset_events(self):
        self.events = {"score": 0.0, "treasure": 0.0, "shot": 0.0, "room": 0.0, "game_over": 0.0}

    # ----------------------------
    # Convenience accessors
    # ----------------------------

    @property
    def score(self) -> int:
        return self.state.score

    @property
    def room_index(self) -> int:
        return self.state.room_index

    @property
    def is_game_over(self) -> bool:
        return self.state.is_game_over

    @property
    def now(self) -> float:
        return self.clock.now
