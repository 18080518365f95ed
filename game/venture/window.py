"""
Arcade window for the room scene

Renders whatever the scene holds and, in interactive mode, turns the arrow
keys and space bar into Controls. Game coordinates grow downward; arcade's
grow upward, so every y is flipped on the way out.
"""

from __future__ import annotations

import math
from typing import Set

import arcade

from .config import COLORS, DIRECTION_ANGLES
from .room_scene import Controls, RoomScene

# Player triangle around its center, pointing up
PLAYER_TRIANGLE = ((0.0, -8.0), (-6.0, 8.0), (6.0, 8.0))

TITLE = "Venture Arcade"
INSTRUCTIONS = "Move: arrows  |  Fire: Space  |  Grab treasure  |  Exit via door"


class VentureWindow(arcade.Window):
    """Arcade window that draws (and optionally drives) a RoomScene"""

    def __init__(self, scene: RoomScene, interactive: bool = True, title: str = TITLE):
        super().__init__(scene.config.width, scene.config.height, title)
        self.scene = scene
        self.interactive = interactive
        self.pressed: Set[int] = set()
        self.background_color = COLORS["BACKGROUND"]

    # ----------------------------
    # Input
    # ----------------------------

    def controls(self) -> Controls:
        return Controls(
            left=arcade.key.LEFT in self.pressed,
            right=arcade.key.RIGHT in self.pressed,
            up=arcade.key.UP in self.pressed,
            down=arcade.key.DOWN in self.pressed,
            fire=arcade.key.SPACE in self.pressed,
        )

    def on_key_press(self, symbol: int, modifiers: int):
        if symbol == arcade.key.ESCAPE:
            self.close()
            return
        self.pressed.add(symbol)

    def on_key_release(self, symbol: int, modifiers: int):
        self.pressed.discard(symbol)

    def on_update(self, delta_time: float):
        if self.interactive and not self.scene.exited:
            self.scene.update(delta_time * 1000.0, self.controls())

    # ----------------------------
    # Drawing
    # ----------------------------

    def _sy(self, y: float) -> float:
        return self.height - y

    def _draw_box(self, body, color):
        left, top, right, bottom = body.bounds()
        arcade.draw_lrbt_rectangle_filled(left, right, self._sy(bottom), self._sy(top), color)

    def on_draw(self):
        self.clear()
        scene = self.scene
        cfg = scene.config

        # Playfield inside the walls
        arcade.draw_lrbt_rectangle_filled(
            cfg.wall_thickness,
            cfg.width - cfg.wall_thickness,
            self._sy(cfg.bottom_wall_y - cfg.wall_thickness / 2),
            self._sy(cfg.top_wall_y + cfg.wall_thickness / 2),
            COLORS["PLAYFIELD"],
        )

        builder = scene.room_builder
        for wall in builder.walls:
            self._draw_box(wall, COLORS["WALL"])
        if builder.door is not None:
            self._draw_box(builder.door, COLORS["DOOR"])

        treasure = builder.treasure
        if treasure is not None and treasure.active:
            arcade.draw_circle_filled(treasure.x, self._sy(treasure.y), treasure.radius, COLORS["TREASURE"])

        for enemy in scene.enemy_director.enemies:
            arcade.draw_circle_filled(enemy.x, self._sy(enemy.y), enemy.radius, enemy.color)

        for arrow in scene.arrow_manager.arrows:
            half = arrow.height / 2
            dx = math.cos(arrow.angle) * half
            dy = math.sin(arrow.angle) * half
            arcade.draw_line(
                arrow.x - dx, self._sy(arrow.y - dy),
                arrow.x + dx, self._sy(arrow.y + dy),
                COLORS["ARROW"], arrow.width,
            )

        self._draw_player()
        self._draw_hud()

    def _draw_player(self):
        player = self.scene.player
        angle = math.radians(DIRECTION_ANGLES[player.facing])
        cos_a, sin_a = math.cos(angle), math.sin(angle)
        points = []
        for px, py in PLAYER_TRIANGLE:
            # Clockwise rotation in y-down space
            rx = px * cos_a - py * sin_a
            ry = px * sin_a + py * cos_a
            points.append((player.x + rx, self._sy(player.y + ry)))
        (x1, y1), (x2, y2), (x3, y3) = points
        arcade.draw_triangle_filled(x1, y1, x2, y2, x3, y3, player.color)

    def _draw_hud(self):
        scene = self.scene
        cfg = scene.config
        arcade.draw_text(TITLE, cfg.width / 2, self._sy(83), COLORS["TEXT_PRIMARY"], 20, anchor_x="center")
        arcade.draw_text(INSTRUCTIONS, cfg.width / 2, self._sy(107), COLORS["TEXT_SECONDARY"], 9,
                         anchor_x="center")
        arcade.draw_text(f"Score: {scene.score}", 16, self._sy(75), COLORS["TEXT_SCORE"], 14)
        arcade.draw_text(f"Room: {scene.room_index}", 16, self._sy(95), COLORS["TEXT_SECONDARY"], 12)

        if scene.is_game_over:
            arcade.draw_text("Game Over", cfg.width / 2, cfg.height / 2, COLORS["TEXT_GAME_OVER"], 36,
                             anchor_x="center", anchor_y="center")
