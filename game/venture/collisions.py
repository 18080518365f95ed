"""
Collision manager: turns overlaps into score, stunned enemies, game over
and room exits, and owns every registration it makes.
"""

from __future__ import annotations

from typing import Callable, List, Optional

from .arrows import ArrowManager
from .config import COLORS, SoundKeys
from .enemy_director import EnemyDirector
from .entities import Body, Enemy, Player
from .physics import Collider, PhysicsWorld
from .room_builder import RoomBuilder
from .sounds import SoundBoard
from .state import SessionState


class CollisionSetupError(RuntimeError):
    """Collision wiring was requested before its collaborators were supplied"""


class CollisionManager:
    def __init__(self, world: PhysicsWorld, sounds: Optional[SoundBoard] = None):
        self.world = world
        self.sounds = sounds if sounds is not None else SoundBoard()

        self.colliders: List[Collider] = []
        self.overlaps: List[Collider] = []

        self.player: Optional[Player] = None
        self.arrow_manager: Optional[ArrowManager] = None
        self.enemy_director: Optional[EnemyDirector] = None
        self.room_builder: Optional[RoomBuilder] = None
        self.state: Optional[SessionState] = None

        self._on_game_over: Optional[Callable[[], None]] = None
        self._on_score_change: Optional[Callable[[int], None]] = None
        self._treasure_overlap: Optional[Collider] = None
        self._game_over_fired = False

    def init(self, player: Player, arrow_manager: ArrowManager, enemy_director: EnemyDirector,
             room_builder: RoomBuilder, state: SessionState):
        self.player = player
        self.arrow_manager = arrow_manager
        self.enemy_director = enemy_director
        self.room_builder = room_builder
        self.state = state

    def set_game_over_callback(self, callback: Callable[[], None]):
        self._on_game_over = callback

    def set_score_change_callback(self, callback: Callable[[int], None]):
        self._on_score_change = callback

    # ----------------------------
    # Registration
    # ----------------------------

    def setup_collisions(self):
        """Register every persistent handler; call once per scene"""
        self._require()
        walls = self.room_builder.walls

        self.colliders.append(self.world.add_collider(self.player, walls))
        self.arrow_manager.setup_wall_collisions(walls)
        self._setup_enemy_collisions()
        self.setup_treasure_collisions()

    def _setup_enemy_collisions(self):
        enemies = self.enemy_director.enemies

        self.colliders.append(self.world.add_collider(enemies, self.room_builder.walls))
        self.arrow_manager.setup_enemy_collisions(enemies, self.enemy_director.is_hunter, self._on_enemy_hit)
        self.overlaps.append(self.world.add_overlap(self.player, enemies, self._on_player_enemy))

    def setup_treasure_collisions(self) -> Optional[Collider]:
        """Re-register the treasure pickup; the treasure is a new object every room"""
        self._require()
        if self._treasure_overlap is not None:
            self._treasure_overlap.destroy()
            if self._treasure_overlap in self.overlaps:
                self.overlaps.remove(self._treasure_overlap)
            self._treasure_overlap = None

        treasure = self.room_builder.treasure
        if treasure is None:
            return None

        def on_treasure(_player: Body, picked: Body):
            # The treasure may already be gone when this fires
            if self.room_builder.treasure is not picked or not picked.active:
                return
            self._award(self.room_builder.config.score_treasure)
            self.room_builder.collect_treasure()
            self.sounds.play(SoundKeys.PICKUP)

        self._treasure_overlap = self.world.add_overlap(self.player, treasure, on_treasure)
        self.overlaps.append(self._treasure_overlap)
        return self._treasure_overlap

    def setup_door_overlap(self, on_door_enter: Callable[[], None]) -> Collider:
        self._require()

        def on_door(_player: Body, _door: Body):
            if self.state.is_game_over:
                return
            on_door_enter()

        door = self.room_builder.door
        if door is None:
            raise CollisionSetupError("Door must be created before its overlap is registered")
        overlap = self.world.add_overlap(self.player, door, on_door)
        self.overlaps.append(overlap)
        return overlap

    # ----------------------------
    # Reactions
    # ----------------------------

    def _on_enemy_hit(self, enemy: Enemy):
        if not self.enemy_director.stun(enemy):
            return
        self._award(self.room_builder.config.score_enemy)
        self.sounds.play(SoundKeys.HIT)

    def _on_player_enemy(self, player: Body, _enemy: Body):
        if self._game_over_fired or self.state.is_game_over:
            return
        self._game_over_fired = True

        if self._on_game_over is not None:
            self._on_game_over()
        self.world.pause()
        self.player.color = COLORS["GAME_OVER"]
        self.sounds.play(SoundKeys.BOOM)

    def _award(self, points: int):
        if self._on_score_change is not None:
            self._on_score_change(points)

    # ----------------------------
    # Teardown
    # ----------------------------

    def cleanup(self):
        """Destroy every collider and overlap; safe to call more than once"""
        for collider in self.colliders:
            collider.destroy()
        self.colliders = []

        for overlap in self.overlaps:
            overlap.destroy()
        self.overlaps = []
        self._treasure_overlap = None

        if self.arrow_manager is not None:
            self.arrow_manager.release_collisions()

    def _require(self):
        missing = [name for name, value in (
            ("player", self.player),
            ("arrow_manager", self.arrow_manager),
            ("enemy_director", self.enemy_director),
            ("room_builder", self.room_builder),
            ("state", self.state),
        ) if value is None]
        if missing:
            raise CollisionSetupError(
                f"CollisionManager must be initialized before setting up collisions (missing: {', '.join(missing)})"
            )
