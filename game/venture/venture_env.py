"""
VentureEnv - the room core as a Gymnasium environment
-----------------------------------------------------
- Headless RoomScene stepped at a fixed frame time
- Discrete MultiDiscrete action space: [move(9), fire(2)]
- Vector observation: player state + treasure + door + top-K nearest enemies
- Reward built from the scene's per-frame events (score, room exits, game over)
- Arcade window only when render_mode == "human"

Quick test:
    python -m game.venture.venture_env
"""

from __future__ import annotations

import math
import time
from typing import Any, Dict, Optional

import numpy as np
import gymnasium as gym
from gymnasium import spaces

from .config import VentureConfig, DEFAULT_CONFIG, DIRECTION_ANGLES
from .room_scene import Controls, RoomScene
from .utils import clamp, seed_everything

# move: 0 stay, then facing 0..7 (up, up-right, right, ... up-left)
MOVE_CONTROLS = (
    Controls(),
    Controls(up=True),
    Controls(up=True, right=True),
    Controls(right=True),
    Controls(down=True, right=True),
    Controls(down=True),
    Controls(down=True, left=True),
    Controls(left=True),
    Controls(up=True, left=True),
)


class VentureEnv(gym.Env):
    """Room-by-room treasure hunt with one arrow in flight at a time"""

    metadata = {"render_modes": ["human"], "render_fps": 30}

    def __init__(
        self,
        render_mode: Optional[str] = None,
        config: VentureConfig = DEFAULT_CONFIG,
        dt: float = 1 / 30,
        max_steps: int = 1800,  # 60s at 30 FPS
        k_enemies: int = 4,
    ):
        super().__init__()

        assert render_mode is None or render_mode in self.metadata["render_modes"], \
            f"Unsupported render mode: {render_mode}"
        self.render_mode = render_mode
        self.config = config
        self.dt = dt
        self.max_steps = max_steps
        self.k_enemies = k_enemies

        self.action_space = spaces.MultiDiscrete([len(MOVE_CONTROLS), 2])

        # Player: pos(2) facing(2) can_fire(1)
        # Treasure: rel pos(2) present(1); door: rel pos(2)
        # Each enemy: rel pos(2) rel vel(2) hunter(1)
        obs_dim = 2 + 2 + 1 + 3 + 2 + self.k_enemies * 5
        self.observation_space = spaces.Box(low=-1.0, high=1.0, shape=(obs_dim,), dtype=np.float32)

        self.scene: RoomScene = None  # type: ignore
        self._window = None
        self._step_count = 0

    # ----------------------------
    # Gym API
    # ----------------------------

    def reset(self, seed: Optional[int] = None, options: Optional[dict] = None):
        super().reset(seed=seed)
        seed_everything(seed)

        if self.scene is not None:
            self.scene.shutdown()
        scene_seed = int(self.np_random.integers(0, 2 ** 31 - 1))
        self.scene = RoomScene(config=self.config, seed=scene_seed).create()
        if self._window is not None:
            self._window.scene = self.scene
        self._step_count = 0

        return self._get_obs(), self._get_info()

    def step(self, action):
        move, fire = int(action[0]), int(action[1])
        base = MOVE_CONTROLS[move]
        controls = Controls(left=base.left, right=base.right, up=base.up, down=base.down, fire=bool(fire))

        self.scene.update(self.dt * 1000.0, controls)

        reward = self._compute_reward()
        terminated = self.scene.is_game_over
        self._step_count += 1
        truncated = self._step_count >= self.max_steps

        obs = self._get_obs()
        info = self._get_info()

        if self.render_mode == "human":
            self.render()

        return obs, reward, terminated, truncated, info

    # ----------------------------
    # Observation / reward / info
    # ----------------------------

    def _get_obs(self) -> np.ndarray:
        cfg = self.config
        scene = self.scene
        player = scene.player
        w, h = float(cfg.width), float(cfg.height)

        angle = math.radians(DIRECTION_ANGLES[player.facing])
        obs_parts = [
            player.x / w * 2 - 1,
            player.y / h * 2 - 1,
            math.sin(angle),
            -math.cos(angle),
            1.0 if scene.arrow_manager.can_fire() else -1.0,
        ]

        treasure = scene.room_builder.treasure
        if treasure is not None and treasure.active:
            obs_parts += [
                clamp((treasure.x - player.x) / w, -1, 1),
                clamp((treasure.y - player.y) / cfg.room_height, -1, 1),
                1.0,
            ]
        else:
            obs_parts += [0.0, 0.0, -1.0]

        door = scene.room_builder.door
        obs_parts += [
            clamp((door.x - player.x) / w, -1, 1),
            clamp((door.y - player.y) / cfg.room_height, -1, 1),
        ]

        enemies_sorted = sorted(
            scene.enemy_director.enemies,
            key=lambda e: (e.x - player.x) ** 2 + (e.y - player.y) ** 2,
        )
        speed = max(1e-6, cfg.player_speed)
        for i in range(self.k_enemies):
            if i < len(enemies_sorted):
                e = enemies_sorted[i]
                obs_parts += [
                    clamp((e.x - player.x) / w, -1, 1),
                    clamp((e.y - player.y) / cfg.room_height, -1, 1),
                    clamp((e.vx - player.vx) / speed, -1, 1),
                    clamp((e.vy - player.vy) / speed, -1, 1),
                    1.0 if e.is_hunter else -1.0,
                ]
            else:
                obs_parts += [0.0, 0.0, 0.0, 0.0, 0.0]

        return np.array(obs_parts, dtype=np.float32)

    def _compute_reward(self) -> float:
        R_SCORE = 1.0 / 25.0  # one stunned enemy is worth 1
        R_ROOM = 2.0
        R_SHOT = 0.01
        R_TIME = 0.001
        R_DEATH = 5.0

        events = self.scene.events
        reward = 0.0
        reward += R_SCORE * events.get("score", 0.0)
        reward += R_ROOM * events.get("room", 0.0)
        reward -= R_SHOT * events.get("shot", 0.0)
        reward -= R_TIME
        if events.get("game_over", 0.0):
            reward -= R_DEATH
        return float(reward)

    def _get_info(self) -> Dict[str, Any]:
        scene = self.scene
        return {
            "score": scene.score,
            "room": scene.room_index,
            "num_enemies": len(scene.enemy_director.enemies),
            "num_hunters": scene.enemy_director.hunter_count(),
            "treasure_present": scene.room_builder.treasure is not None,
            "can_fire": scene.arrow_manager.can_fire(),
            "step": self._step_count,
        }

    # ----------------------------
    # Rendering with Arcade
    # ----------------------------

    def render(self):
        if self.render_mode is None:
            return None

        if self._window is None:
            from .window import VentureWindow
            self._window = VentureWindow(self.scene, interactive=False)

        self._window.dispatch_events()
        self._window.on_draw()
        self._window.flip()
        return None

    def close(self):
        if self._window is not None:
            self._window.close()
            self._window = None
        if self.scene is not None:
            self.scene.shutdown()


# ----------------------------
# Quick sanity test
# ----------------------------

def run_random_episode(render: bool = True, seed: Optional[int] = 42) -> float:
    """Run a random episode and return its total reward"""
    env = VentureEnv(render_mode="human" if render else None)
    obs, info = env.reset(seed=seed)

    terminated = False
    truncated = False
    total = 0.0

    while not (terminated or truncated):
        action = env.action_space.sample()
        obs, reward, terminated, truncated, info = env.step(action)
        total += reward
        if render:
            time.sleep(env.dt)

    print(f"Random episode return: {total:.3f}  score: {info['score']}  rooms: {info['room']}")
    env.close()
    return total


if __name__ == "__main__":
    run_random_episode(render=True)
