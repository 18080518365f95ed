"""
Game entity dataclasses
"""

from dataclasses import dataclass
from enum import Enum
from typing import Dict, Tuple

Color = Tuple[int, int, int]


@dataclass(eq=False)
class Body:
    """Anything the physics world moves or tests for overlap"""
    x: float = 0.0
    y: float = 0.0
    vx: float = 0.0
    vy: float = 0.0
    active: bool = True
    static: bool = False
    bounce: float = 0.0
    collide_world_bounds: bool = False
    on_world_bounds: bool = False  # emit a worldbounds event on contact

    def __post_init__(self):
        # Position at the start of the current physics step
        self.prev_x = self.x
        self.prev_y = self.y

    def set_velocity(self, vx: float, vy: float):
        self.vx = vx
        self.vy = vy

    def set_position(self, x: float, y: float):
        """Teleport; does not count as movement for collision separation"""
        self.x = x
        self.y = y
        self.prev_x = x
        self.prev_y = y

    def destroy(self):
        self.active = False
        self.vx = 0.0
        self.vy = 0.0

    def bounds(self) -> Tuple[float, float, float, float]:
        """Axis-aligned box as (left, top, right, bottom)"""
        raise NotImplementedError


@dataclass(eq=False)
class CircleBody(Body):
    radius: float = 1.0

    def bounds(self):
        r = self.radius
        return self.x - r, self.y - r, self.x + r, self.y + r


@dataclass(eq=False)
class RectBody(Body):
    width: float = 1.0
    height: float = 1.0

    def bounds(self):
        hw = self.width / 2
        hh = self.height / 2
        return self.x - hw, self.y - hh, self.x + hw, self.y + hh


@dataclass(eq=False)
class Player(CircleBody):
    """Player; facing is an index into DIRECTION_ANGLES"""
    facing: int = 0
    color: Color = (56, 189, 248)


@dataclass(eq=False)
class Wall(RectBody):
    static: bool = True


@dataclass(eq=False)
class Door(RectBody):
    static: bool = True


@dataclass(eq=False)
class Treasure(CircleBody):
    static: bool = True


class EnemyKind(Enum):
    WANDERING = "wandering"
    HUNTER = "hunter"


@dataclass(frozen=True)
class EnemyBehavior:
    """What sets one enemy variant apart from another"""
    steered: bool  # velocity recomputed every frame toward the player
    wanders: bool  # takes part in the periodic direction change
    projectile_immune: bool


ENEMY_BEHAVIORS: Dict[EnemyKind, EnemyBehavior] = {
    EnemyKind.WANDERING: EnemyBehavior(steered=False, wanders=True, projectile_immune=False),
    EnemyKind.HUNTER: EnemyBehavior(steered=True, wanders=False, projectile_immune=True),
}


@dataclass(eq=False)
class Enemy(CircleBody):
    """Enemy; wandering ones turn inert when hit, hunters chase the player"""
    kind: EnemyKind = EnemyKind.WANDERING
    hit: bool = False
    color: Color = (34, 197, 94)

    @property
    def behavior(self) -> EnemyBehavior:
        return ENEMY_BEHAVIORS[self.kind]

    @property
    def is_hunter(self) -> bool:
        return self.kind is EnemyKind.HUNTER


@dataclass(eq=False)
class Arrow(RectBody):
    """Player projectile; angle in radians"""
    angle: float = 0.0
