"""
Minimal arcade-style physics: velocity integration, world bounds, and
collider/overlap registrations whose callbacks fire synchronously inside step().

This is overlap detection plus scripted reactions. The only response it
computes is pushing a moving body out of a static one.
"""

from __future__ import annotations

from typing import Callable, Iterable, Iterator, List, Optional, Union

from .entities import Body
from .utils import bodies_overlap

PairCallback = Callable[[Body, Body], None]

# Extra penetration (px) a separation may undo beyond the step's own movement
OVERLAP_BIAS = 4.0


class Group:
    """Mutable collection of bodies; registrations follow it by identity"""

    def __init__(self, members: Optional[Iterable[Body]] = None):
        self._members: List[Body] = list(members) if members else []

    def add(self, body: Body) -> Body:
        if body not in self._members:
            self._members.append(body)
        return body

    def contains(self, body: Body) -> bool:
        return body in self._members and body.active

    def clear(self, destroy: bool = False):
        if destroy:
            for body in self._members:
                body.destroy()
        self._members = []

    def count_active(self) -> int:
        return sum(1 for b in self._members if b.active)

    def prune(self):
        self._members = [b for b in self._members if b.active]

    def __iter__(self) -> Iterator[Body]:
        # Snapshot so callbacks can mutate the group mid-iteration
        return iter([b for b in self._members if b.active])

    def __len__(self) -> int:
        return self.count_active()


Target = Union[Body, Group]


def _expand(target: Target) -> List[Body]:
    if isinstance(target, Group):
        return list(target)
    return [target] if target.active else []


def _penetration(delta: float, m_lo: float, m_hi: float, o_lo: float, o_hi: float) -> float:
    """Depth the mover reached into the other body from the side it moved toward"""
    if delta > 0:
        return m_hi - o_lo
    if delta < 0:
        return o_hi - m_lo
    return 0.0


class Collider:
    """Handle for one collider or overlap registration"""

    def __init__(self, world: "PhysicsWorld", a: Target, b: Target,
                 callback: Optional[PairCallback], separate: bool):
        self.world = world
        self.a = a
        self.b = b
        self.callback = callback
        self.separate = separate
        self.active = True

    def destroy(self):
        self.active = False

    def process(self):
        for a in _expand(self.a):
            for b in _expand(self.b):
                if not self.active or self.world.paused:
                    return
                if not a.active:
                    break
                if not b.active or a is b:
                    continue
                if not bodies_overlap(a, b):
                    continue
                if self.separate:
                    self.world.separate(a, b)
                if self.callback is not None:
                    self.callback(a, b)


class PhysicsWorld:
    """Owns every registered body and collider for one scene"""

    def __init__(self, width: float, height: float):
        self.width = width
        self.height = height
        self.bodies: List[Body] = []
        self.colliders: List[Collider] = []
        self.paused = False
        self._world_bounds_listeners: List[Callable[[Body], None]] = []

    # ----------------------------
    # Registration
    # ----------------------------

    def add(self, body: Body) -> Body:
        self.bodies.append(body)
        return body

    def add_collider(self, a: Target, b: Target, callback: Optional[PairCallback] = None) -> Collider:
        collider = Collider(self, a, b, callback, separate=True)
        self.colliders.append(collider)
        return collider

    def add_overlap(self, a: Target, b: Target, callback: PairCallback) -> Collider:
        overlap = Collider(self, a, b, callback, separate=False)
        self.colliders.append(overlap)
        return overlap

    def on_world_bounds(self, listener: Callable[[Body], None]):
        self._world_bounds_listeners.append(listener)

    def off_world_bounds(self, listener: Callable[[Body], None]):
        if listener in self._world_bounds_listeners:
            self._world_bounds_listeners.remove(listener)

    def pause(self):
        self.paused = True

    def resume(self):
        self.paused = False

    # ----------------------------
    # Simulation
    # ----------------------------

    def step(self, dt: float):
        """Advance dt seconds: move bodies, then run colliders in registration order"""
        if self.paused:
            return

        self.bodies = [b for b in self.bodies if b.active]
        for body in list(self.bodies):
            if body.static or not body.active:
                continue
            body.prev_x = body.x
            body.prev_y = body.y
            body.x += body.vx * dt
            body.y += body.vy * dt
            if body.collide_world_bounds:
                self._apply_world_bounds(body)

        self.colliders = [c for c in self.colliders if c.active]
        for collider in list(self.colliders):
            if self.paused:
                break
            if collider.active:
                collider.process()

    def separate(self, a: Body, b: Body) -> bool:
        """
        Push the dynamic body back out of the other along the side it entered.

        Only movement made during this step is undone: the penetration on an
        axis must fit within the mover's displacement on that axis (plus a
        small bias). A body that was already embedded, or that is moving out,
        is left alone.
        """
        if a.static and b.static:
            return False
        mover, other = (b, a) if a.static else (a, b)

        ml, mt, mr, mb = mover.bounds()
        ol, ot, or_, ob = other.bounds()
        if min(mr, or_) - max(ml, ol) <= 0 or min(mb, ob) - max(mt, ot) <= 0:
            return False

        dx = mover.x - mover.prev_x
        dy = mover.y - mover.prev_y
        pen_x = _penetration(dx, ml, mr, ol, or_)
        pen_y = _penetration(dy, mt, mb, ot, ob)
        fits_x = 0 < pen_x <= abs(dx) + OVERLAP_BIAS
        fits_y = 0 < pen_y <= abs(dy) + OVERLAP_BIAS
        if not fits_x and not fits_y:
            return False

        if fits_x and (not fits_y or pen_x < pen_y):
            direction = -1.0 if dx > 0 else 1.0
            mover.x += direction * pen_x
            if mover.vx * direction < 0:
                mover.vx = -mover.vx * mover.bounce
        else:
            direction = -1.0 if dy > 0 else 1.0
            mover.y += direction * pen_y
            if mover.vy * direction < 0:
                mover.vy = -mover.vy * mover.bounce
        return True

    def _apply_world_bounds(self, body: Body):
        left, top, right, bottom = body.bounds()
        touched = False

        if left < 0:
            body.x -= left
            if body.vx < 0:
                body.vx = -body.vx * body.bounce
            touched = True
        elif right > self.width:
            body.x -= right - self.width
            if body.vx > 0:
                body.vx = -body.vx * body.bounce
            touched = True

        if top < 0:
            body.y -= top
            if body.vy < 0:
                body.vy = -body.vy * body.bounce
            touched = True
        elif bottom > self.height:
            body.y -= bottom - self.height
            if body.vy > 0:
                body.vy = -body.vy * body.bounce
            touched = True

        if touched and body.on_world_bounds:
            for listener in list(self._world_bounds_listeners):
                listener(body)
