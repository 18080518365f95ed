"""
Session state shared by the room scene and its managers
"""

from dataclasses import dataclass
from enum import Enum


class GamePhase(Enum):
    PLAYING = "playing"
    GAME_OVER = "gameOver"


@dataclass
class SessionState:
    """Score and phase for one play session; owned by the room scene"""
    score: int = 0
    room_index: int = 1
    phase: GamePhase = GamePhase.PLAYING
    game_over_time: float = -1.0  # clock time of the transition, ms

    @property
    def is_game_over(self) -> bool:
        return self.phase is GamePhase.GAME_OVER

    def add_score(self, points: int) -> int:
        if points < 0:
            raise ValueError("Score only ever increases")
        self.score += points
        return self.score

    def reset(self):
        self.score = 0
        self.room_index = 1
        self.phase = GamePhase.PLAYING
        self.game_over_time = -1.0
