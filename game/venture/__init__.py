"""Venture module - room core of a top-down treasure-and-arrows arcade game"""

from .config import VentureConfig, DEFAULT_CONFIG, make_config
from .room_scene import RoomScene, Controls
from .state import GamePhase, SessionState
from .venture_env import VentureEnv, run_random_episode

__all__ = [
    'VentureConfig',
    'DEFAULT_CONFIG',
    'make_config',
    'RoomScene',
    'Controls',
    'GamePhase',
    'SessionState',
    'VentureEnv',
    'run_random_episode',
]
