"""Shared fixtures for the room core tests"""
import pytest

from game.venture.sounds import SoundBoard


class RecordingSoundBoard(SoundBoard):
    """Remembers every trigger instead of playing it"""

    def __init__(self):
        self.played = []
        self.music_started = 0
        self.stopped = 0

    def play(self, key):
        self.played.append(key)

    def play_music(self, key="backgroundMusic"):
        self.music_started += 1

    def stop(self):
        self.stopped += 1

    def count(self, key):
        return self.played.count(key)


class FixedRng:
    """Stand-in for random.Random that always answers with one end of the range"""

    def __init__(self, pick="high"):
        self.pick = pick

    def randint(self, a, b):
        return b if self.pick == "high" else a


@pytest.fixture
def sounds():
    return RecordingSoundBoard()
