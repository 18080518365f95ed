"""
Utility functions for game mechanics
"""

from __future__ import annotations
import math
import random
from typing import Tuple, Optional
import numpy as np

from .entities import Body, CircleBody, RectBody


def clamp(x: float, lo: float, hi: float) -> float:
    """Clamp value between low and high bounds"""
    return lo if x < lo else hi if x > hi else x


def normalize(x: float, y: float, eps: float = 1e-8) -> Tuple[float, float]:
    """Normalize a vector to unit length"""
    l = math.hypot(x, y)
    if l < eps:
        return 0.0, 0.0
    return x / l, y / l


def circle_collide(x1, y1, r1, x2, y2, r2) -> bool:
    """Check if two circles collide"""
    dx = x1 - x2
    dy = y1 - y2
    rr = r1 + r2
    return (dx * dx + dy * dy) <= (rr * rr)


def rect_collide(a: Tuple[float, float, float, float], b: Tuple[float, float, float, float]) -> bool:
    """Check if two (left, top, right, bottom) boxes overlap"""
    return a[0] < b[2] and b[0] < a[2] and a[1] < b[3] and b[1] < a[3]


def circle_rect_collide(cx, cy, r, rect: Tuple[float, float, float, float]) -> bool:
    """Check if a circle touches a (left, top, right, bottom) box"""
    nx = clamp(cx, rect[0], rect[2])
    ny = clamp(cy, rect[1], rect[3])
    dx = cx - nx
    dy = cy - ny
    return (dx * dx + dy * dy) < (r * r)


def bodies_overlap(a: Body, b: Body) -> bool:
    """Shape-accurate overlap test for any two bodies"""
    if isinstance(a, CircleBody) and isinstance(b, CircleBody):
        return circle_collide(a.x, a.y, a.radius, b.x, b.y, b.radius)
    if isinstance(a, CircleBody) and isinstance(b, RectBody):
        return circle_rect_collide(a.x, a.y, a.radius, b.bounds())
    if isinstance(a, RectBody) and isinstance(b, CircleBody):
        return circle_rect_collide(b.x, b.y, b.radius, a.bounds())
    return rect_collide(a.bounds(), b.bounds())


def seed_everything(py_seed: Optional[int]):
    """Seed all random number generators"""
    if py_seed is None:
        return
    random.seed(py_seed)
    np.random.seed(py_seed)
